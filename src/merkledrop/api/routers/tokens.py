"""Token account API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from ...application.dtos import TokenAccountResponseDTO
from ...application.use_cases.distributor import DistributorService
from ..dependencies import get_distributor_service

router = APIRouter(prefix="/tokens", tags=["tokens"])


# owner is a base64 public key or a distributor id; base64 may contain "/"
@router.get("/{mint}/accounts/{owner:path}", response_model=TokenAccountResponseDTO)
async def get_token_account(
    mint: str = Path(..., description="Token identity"),
    owner: str = Path(..., description="Owner public key (base64) or distributor id"),
    distributor_service: DistributorService = Depends(get_distributor_service),
) -> TokenAccountResponseDTO:
    """Return the balance held by owner; unknown accounts have a zero balance."""
    return await distributor_service.get_token_account(mint, owner)
