"""Distributor domain entities: Distributor, ClaimStatus and TokenAccount."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_serializer

U64_MAX = (1 << 64) - 1


class Distributor(BaseModel):
    """Campaign record holding the Merkle root, the caps and the running totals."""

    distributor_id: str
    base_b64: str
    root_b64: str
    mint: str
    max_num_nodes: int = Field(..., gt=0, le=U64_MAX)
    max_total_claim: int = Field(..., gt=0, le=U64_MAX)
    num_nodes_claimed: int = Field(0, ge=0, le=U64_MAX)
    total_amount_claimed: int = Field(0, ge=0, le=U64_MAX)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return value.isoformat()


class ClaimStatus(BaseModel):
    """Permanent receipt for a claimed leaf; its existence means the index is spent."""

    distributor_id: str
    index: int = Field(..., ge=0, le=U64_MAX)
    claimant_b64: str
    amount: int = Field(..., ge=0, le=U64_MAX)
    is_claimed: bool = True
    claimed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_serializer("claimed_at")
    def serialize_claimed_at(self, value: datetime) -> str:
        return value.isoformat()


class TokenAccount(BaseModel):
    """Balance of one mint held by one owner (a claimant or a distributor reserve)."""

    mint: str
    owner: str
    amount: int = Field(0, ge=0, le=U64_MAX)
