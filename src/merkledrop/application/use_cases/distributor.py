from __future__ import annotations

import hashlib
import logging
import os
from typing import List, Optional

from ...crypto.balance_tree import HASH_SIZE, b64_to_bytes, bytes_to_b64
from ...domain.entities import ClaimStatus, Distributor
from ...domain.errors import (
    DistributorAlreadyExistsError,
    DistributorNotFoundError,
    InvalidRootError,
    ReserveOverflowError,
)
from ...domain.repositories import DistributorRepository, TokenAccountRepository
from ...infrastructure import scripts
from ..dtos import (
    ClaimStatusResponseDTO,
    CreateDistributorRequestDTO,
    DistributorResponseDTO,
    FundDistributorRequestDTO,
    FundDistributorResponseDTO,
    TokenAccountResponseDTO,
)
from .claim_validators import validate_caps

logger = logging.getLogger(__name__)

DISTRIBUTOR_SEED = b"MerkleDistributor"


def compute_distributor_id(base: bytes) -> str:
    """Deterministic distributor id derived from the random creation base."""
    hasher = hashlib.sha256()
    hasher.update(DISTRIBUTOR_SEED)
    hasher.update(base)
    return hasher.hexdigest()


class DistributorService:
    """Service to create, fund and inspect Merkle distributors."""

    def __init__(
        self,
        distributor_repo: DistributorRepository,
        token_account_repo: TokenAccountRepository,
    ):
        self.distributor_repo = distributor_repo
        self.token_account_repo = token_account_repo

    async def _to_response(self, distributor: Distributor) -> DistributorResponseDTO:
        reserve = await self.token_account_repo.get(
            distributor.mint, distributor.distributor_id
        )
        return DistributorResponseDTO(
            **distributor.model_dump(), reserve_balance=reserve.amount
        )

    async def _require(self, distributor_id: str) -> Distributor:
        distributor = await self.distributor_repo.get_by_id(distributor_id)
        if not distributor:
            raise DistributorNotFoundError(f"Distributor {distributor_id} not found")
        return distributor

    async def create_distributor(
        self, dto: CreateDistributorRequestDTO
    ) -> DistributorResponseDTO:
        validate_caps(dto.max_num_nodes, dto.max_total_claim)

        try:
            root = b64_to_bytes(dto.root_b64)
        except ValueError:
            raise InvalidRootError("Root is not valid base64")
        if len(root) != HASH_SIZE:
            raise InvalidRootError(
                f"Root must be {HASH_SIZE} bytes, got {len(root)} bytes"
            )

        base = os.urandom(32)
        distributor = Distributor(
            distributor_id=compute_distributor_id(base),
            base_b64=bytes_to_b64(base),
            root_b64=bytes_to_b64(root),
            mint=dto.mint,
            max_num_nodes=dto.max_num_nodes,
            max_total_claim=dto.max_total_claim,
        )

        created = await self.distributor_repo.create(distributor)
        if not created:
            raise DistributorAlreadyExistsError(
                f"Distributor {distributor.distributor_id} already exists"
            )

        logger.info(
            "Created distributor %s for mint %s (max_num_nodes=%d, max_total_claim=%d)",
            distributor.distributor_id,
            distributor.mint,
            distributor.max_num_nodes,
            distributor.max_total_claim,
        )
        return await self._to_response(distributor)

    async def fund_distributor(
        self, distributor_id: str, dto: FundDistributorRequestDTO
    ) -> FundDistributorResponseDTO:
        distributor = await self._require(distributor_id)

        code, balance = await self.distributor_repo.fund(distributor, dto.amount)
        if code == scripts.DISTRIBUTOR_MISSING:
            raise DistributorNotFoundError(f"Distributor {distributor_id} not found")
        if code == scripts.RESERVE_OVERFLOW:
            raise ReserveOverflowError(
                f"Funding {dto.amount} would overflow reserve balance {balance}"
            )
        if code != scripts.SUCCESS:
            raise RuntimeError(f"Unexpected fund result code {code}")

        logger.info(
            "Funded distributor %s with %d (reserve=%d)",
            distributor_id,
            dto.amount,
            balance,
        )
        return FundDistributorResponseDTO(
            distributor_id=distributor_id, reserve_balance=balance
        )

    async def get_distributor(self, distributor_id: str) -> DistributorResponseDTO:
        distributor = await self._require(distributor_id)
        return await self._to_response(distributor)

    async def list_distributors(
        self, skip: int = 0, limit: int = 100
    ) -> List[DistributorResponseDTO]:
        distributors = await self.distributor_repo.get_all(skip, limit)
        return [await self._to_response(d) for d in distributors]

    async def get_claim_status(
        self, distributor_id: str, index: int
    ) -> Optional[ClaimStatusResponseDTO]:
        await self._require(distributor_id)
        status: Optional[ClaimStatus] = await self.distributor_repo.get_claim_status(
            distributor_id, index
        )
        if status is None:
            return None
        return ClaimStatusResponseDTO(**status.model_dump())

    async def get_token_account(self, mint: str, owner: str) -> TokenAccountResponseDTO:
        account = await self.token_account_repo.get(mint, owner)
        return TokenAccountResponseDTO(**account.model_dump())
