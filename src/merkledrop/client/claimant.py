"""Claimant-side helpers: an Ed25519 wallet that signs claim requests."""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import ed25519

from ..application.dtos import ClaimRequestDTO
from ..application.payloads import ClaimPayload, payload_to_bytes
from ..crypto.balance_tree import BalanceTree, proof_to_b64
from ..crypto.certificates import (
    load_private_key_from_pem,
    public_key_to_b64,
    public_key_to_bytes,
    sign_bytes,
)


class Claimant:
    """Recipient of an airdrop, identified by its raw Ed25519 public key."""

    def __init__(self, private_key: ed25519.Ed25519PrivateKey):
        self.private_key = private_key
        self.public_key = private_key.public_key()

    @classmethod
    def generate(cls) -> "Claimant":
        return cls(ed25519.Ed25519PrivateKey.generate())

    @classmethod
    def from_pem(cls, pem_str: str) -> "Claimant":
        return cls(load_private_key_from_pem(pem_str))

    @property
    def account(self) -> bytes:
        return public_key_to_bytes(self.public_key)

    @property
    def account_b64(self) -> str:
        return public_key_to_b64(self.public_key)

    def build_claim(
        self,
        distributor_id: str,
        index: int,
        amount: int,
        proof_b64: list[str],
    ) -> ClaimRequestDTO:
        """Sign the claim payload for (index, amount) and wrap it in a request."""
        payload = ClaimPayload(
            distributor_id=distributor_id,
            index=index,
            claimant_b64=self.account_b64,
            amount=amount,
            proof_b64=proof_b64,
        )
        return ClaimRequestDTO(
            index=index,
            claimant_b64=self.account_b64,
            amount=amount,
            proof_b64=proof_b64,
            signature_b64=sign_bytes(self.private_key, payload_to_bytes(payload)),
        )

    def build_claim_from_tree(
        self, distributor_id: str, tree: BalanceTree, index: int, amount: int
    ) -> ClaimRequestDTO:
        proof = tree.get_proof(index, self.account, amount)
        return self.build_claim(distributor_id, index, amount, proof_to_b64(proof))
