"""Distributor API routes."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ...application.dtos import (
    CreateDistributorRequestDTO,
    DistributorResponseDTO,
    FundDistributorRequestDTO,
    FundDistributorResponseDTO,
)
from ...application.use_cases.distributor import DistributorService
from ...domain.errors import AirdropError
from ..dependencies import get_distributor_service
from ..errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/distributors", tags=["distributors"])


@router.post(
    "",
    response_model=DistributorResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_distributor(
    distributor_data: CreateDistributorRequestDTO,
    distributor_service: DistributorService = Depends(get_distributor_service),
) -> DistributorResponseDTO:
    """Commit a Merkle root with its caps and create its empty reserve."""
    try:
        return await distributor_service.create_distributor(distributor_data)
    except AirdropError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception("Internal server error while creating distributor: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while creating distributor",
        )


@router.get("", response_model=List[DistributorResponseDTO])
async def list_distributors(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    distributor_service: DistributorService = Depends(get_distributor_service),
) -> List[DistributorResponseDTO]:
    return await distributor_service.list_distributors(skip, limit)


@router.get("/{distributor_id}", response_model=DistributorResponseDTO)
async def get_distributor(
    distributor_id: str = Path(..., description="Distributor identifier"),
    distributor_service: DistributorService = Depends(get_distributor_service),
) -> DistributorResponseDTO:
    try:
        return await distributor_service.get_distributor(distributor_id)
    except AirdropError as e:
        raise to_http_exception(e)


@router.post(
    "/{distributor_id}/fundings",
    response_model=FundDistributorResponseDTO,
)
async def fund_distributor(
    funding_data: FundDistributorRequestDTO,
    distributor_id: str = Path(..., description="Distributor identifier"),
    distributor_service: DistributorService = Depends(get_distributor_service),
) -> FundDistributorResponseDTO:
    """Mint tokens into the distributor reserve."""
    try:
        return await distributor_service.fund_distributor(distributor_id, funding_data)
    except AirdropError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception("Internal server error while funding distributor: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while funding distributor",
        )
