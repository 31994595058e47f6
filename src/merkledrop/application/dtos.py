"""DTOs for the distributor application layer."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_serializer

from ..domain.entities import U64_MAX


class CreateDistributorRequestDTO(BaseModel):
    """Issuer request to commit a Merkle root with its aggregate caps."""

    root_b64: str = Field(..., description="Base64 32-byte Merkle root")
    mint: str = Field(..., min_length=1, description="Token identity")
    # Zero and out-of-range caps are rejected by the service with InvalidCapsError
    max_num_nodes: int = Field(..., ge=0)
    max_total_claim: int = Field(..., ge=0)


class DistributorResponseDTO(BaseModel):
    """Distributor state together with its reserve balance."""

    distributor_id: str
    base_b64: str
    root_b64: str
    mint: str
    max_num_nodes: int
    max_total_claim: int
    num_nodes_claimed: int
    total_amount_claimed: int
    reserve_balance: int
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return value.isoformat()


class FundDistributorRequestDTO(BaseModel):
    """Mint tokens into a distributor reserve."""

    amount: int = Field(..., gt=0, le=U64_MAX)


class FundDistributorResponseDTO(BaseModel):
    distributor_id: str
    reserve_balance: int


class ClaimRequestDTO(BaseModel):
    """Claim of one leaf, signed by the account named in the leaf."""

    index: int = Field(..., ge=0, le=U64_MAX)
    claimant_b64: str = Field(..., description="Base64 raw Ed25519 public key")
    amount: int = Field(..., ge=0, le=U64_MAX)
    proof_b64: list[str] = Field(default_factory=list)
    signature_b64: str = Field(..., description="Claimant signature over ClaimPayload")


class ClaimStatusResponseDTO(BaseModel):
    """Receipt of a successful claim."""

    distributor_id: str
    index: int
    claimant_b64: str
    amount: int
    is_claimed: bool
    claimed_at: datetime

    @field_serializer("claimed_at")
    def serialize_claimed_at(self, value: datetime) -> str:
        return value.isoformat()


class TokenAccountResponseDTO(BaseModel):
    mint: str
    owner: str
    amount: int
