from __future__ import annotations

import logging

from cryptography.exceptions import InvalidSignature

from ...crypto.balance_tree import (
    ACCOUNT_SIZE,
    b64_to_bytes,
    proof_from_b64,
    verify_proof,
)
from ...crypto.certificates import load_public_key_from_b64, verify_signature_bytes
from ...domain.entities import ClaimStatus
from ...domain.errors import (
    AlreadyClaimedError,
    ClaimantBalanceOverflowError,
    DistributorNotFoundError,
    ExceededClaimError,
    ExceededNodesError,
    InsufficientReserveError,
    InvalidProofError,
    UnauthorizedClaimantError,
)
from ...domain.repositories import DistributorRepository
from ...infrastructure import scripts
from ..dtos import ClaimRequestDTO, ClaimStatusResponseDTO
from ..payloads import ClaimPayload, payload_to_bytes
from .claim_validators import validate_num_nodes, validate_total_claim

logger = logging.getLogger(__name__)


class ClaimService:
    """Service redeeming Merkle airdrop entitlements."""

    def __init__(self, distributor_repo: DistributorRepository):
        self.distributor_repo = distributor_repo

    @staticmethod
    def _verify_inclusion(root_b64: str, dto: ClaimRequestDTO) -> None:
        try:
            root = b64_to_bytes(root_b64)
            account = b64_to_bytes(dto.claimant_b64)
            proof = proof_from_b64(dto.proof_b64)
        except ValueError:
            raise InvalidProofError("Claim contains malformed base64 values")
        if len(account) != ACCOUNT_SIZE or not verify_proof(
            root, dto.index, account, dto.amount, proof
        ):
            raise InvalidProofError(
                f"Proof for index {dto.index} does not match the distributor root"
            )

    @staticmethod
    def _verify_claimant(distributor_id: str, dto: ClaimRequestDTO) -> None:
        payload = ClaimPayload(
            distributor_id=distributor_id,
            index=dto.index,
            claimant_b64=dto.claimant_b64,
            amount=dto.amount,
            proof_b64=dto.proof_b64,
        )
        try:
            public_key = load_public_key_from_b64(dto.claimant_b64)
            verify_signature_bytes(
                public_key, payload_to_bytes(payload), dto.signature_b64
            )
        except (InvalidSignature, ValueError):
            raise UnauthorizedClaimantError(
                f"Claim for index {dto.index} is not signed by the leaf account"
            )

    async def claim(
        self, distributor_id: str, dto: ClaimRequestDTO
    ) -> ClaimStatusResponseDTO:
        # Receipt first: a receipt seen here is already counted in the distributor
        existing = await self.distributor_repo.get_claim_status(
            distributor_id, dto.index
        )
        distributor = await self.distributor_repo.get_by_id(distributor_id)
        if not distributor:
            raise DistributorNotFoundError(f"Distributor {distributor_id} not found")

        # Preconditions against the snapshot, in order; nothing is written here
        self._verify_inclusion(distributor.root_b64, dto)
        validate_num_nodes(distributor.num_nodes_claimed, distributor.max_num_nodes)
        validate_total_claim(
            distributor.total_amount_claimed, dto.amount, distributor.max_total_claim
        )
        if existing:
            logger.warning(
                "Rejected double claim for distributor %s index %d",
                distributor_id,
                dto.index,
            )
            raise AlreadyClaimedError(f"Index {dto.index} has already been claimed")
        self._verify_claimant(distributor_id, dto)

        # Atomic commit re-checks the caps and the receipt
        claim_status = ClaimStatus(
            distributor_id=distributor_id,
            index=dto.index,
            claimant_b64=dto.claimant_b64,
            amount=dto.amount,
        )
        code, stored = await self.distributor_repo.save_claim(distributor, claim_status)

        if code == scripts.SUCCESS and stored is not None:
            logger.info(
                "Claimed index %d of distributor %s: %d to %s",
                dto.index,
                distributor_id,
                dto.amount,
                dto.claimant_b64,
            )
            return ClaimStatusResponseDTO(**stored.model_dump())
        if code == scripts.CLAIM_ALREADY_EXISTS:
            logger.warning(
                "Rejected double claim for distributor %s index %d",
                distributor_id,
                dto.index,
            )
            raise AlreadyClaimedError(f"Index {dto.index} has already been claimed")
        if code == scripts.DISTRIBUTOR_MISSING:
            raise DistributorNotFoundError(f"Distributor {distributor_id} not found")
        if code == scripts.EXCEEDED_NODES:
            raise ExceededNodesError(
                f"Distributor already paid {distributor.max_num_nodes} claims"
            )
        if code == scripts.EXCEEDED_CLAIM:
            raise ExceededClaimError(
                f"Claim of {dto.amount} exceeds max_total_claim "
                f"{distributor.max_total_claim}"
            )
        if code == scripts.INSUFFICIENT_RESERVE:
            raise InsufficientReserveError(
                f"Reserve of distributor {distributor_id} cannot cover {dto.amount}"
            )
        if code == scripts.CLAIMANT_OVERFLOW:
            raise ClaimantBalanceOverflowError(
                f"Paying {dto.amount} would overflow the {distributor.mint} balance "
                f"of {dto.claimant_b64}"
            )
        raise RuntimeError(f"Unexpected claim result code {code}")
