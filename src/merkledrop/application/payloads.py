"""Signed payloads exchanged between claimants and the distributor."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..crypto.certificates import json_to_bytes
from ..domain.entities import U64_MAX


class ClaimPayload(BaseModel):
    """Payload signed by the claimant to authorize redeeming one leaf."""

    model_config = ConfigDict(extra="forbid")

    distributor_id: str
    index: int = Field(..., ge=0, le=U64_MAX)
    claimant_b64: str
    amount: int = Field(..., ge=0, le=U64_MAX)
    proof_b64: list[str]


def payload_to_bytes(payload: BaseModel) -> bytes:
    """Canonical bytes for signing/verifying Pydantic payloads.

    Centralizes the "model_dump() -> json bytes" convention so the claimant
    and the distributor never diverge in how they serialize the signed message.
    """

    return json_to_bytes(payload.model_dump())
