"""Claim API routes."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Path, status
from prometheus_client import Counter, Gauge, Histogram

from ...application.dtos import ClaimRequestDTO, ClaimStatusResponseDTO
from ...application.use_cases.claim import ClaimService
from ...application.use_cases.distributor import DistributorService
from ...domain.errors import AirdropError
from ..dependencies import get_claim_service, get_distributor_service
from ..errors import status_for, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/distributors", tags=["claims"])

CLAIM_DURATION_BUCKETS = (
    [round(0.5 * i, 1) for i in range(1, 21)]
    + [float(x) for x in range(15, 55, 5)]
    + [float("inf")]
)

claim_requests_total = Counter(
    "claim_requests_total",
    "Total claim requests processed",
    ["status"],
)
claim_request_duration_milliseconds = Histogram(
    "claim_request_duration_milliseconds",
    "Wall time to process a claim request (ms)",
    ["status"],
    buckets=CLAIM_DURATION_BUCKETS,
)
claim_requests_inprogress = Gauge(
    "claim_requests_inprogress",
    "Number of claim requests currently being processed",
    multiprocess_mode="livesum",
)


def _observe(label: str, start_time: float) -> None:
    claim_requests_total.labels(status=label).inc()
    elapsed = (time.perf_counter() - start_time) * 1000
    claim_request_duration_milliseconds.labels(status=label).observe(elapsed)


@router.post(
    "/{distributor_id}/claims",
    response_model=ClaimStatusResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def claim(
    claim_data: ClaimRequestDTO,
    distributor_id: str = Path(..., description="Distributor identifier"),
    claim_service: ClaimService = Depends(get_claim_service),
) -> ClaimStatusResponseDTO:
    """Redeem one leaf of the distributor's Merkle tree."""
    start_time = time.perf_counter()
    claim_requests_inprogress.inc()
    try:
        result = await claim_service.claim(distributor_id, claim_data)
        _observe("success", start_time)
        return result
    except AirdropError as e:
        _observe("client_error" if status_for(e) < 500 else "server_error", start_time)
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("Internal server error while processing claim: %s", e)
        _observe("server_error", start_time)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while processing claim",
        )
    finally:
        claim_requests_inprogress.dec()


@router.get(
    "/{distributor_id}/claims/{index}",
    response_model=ClaimStatusResponseDTO,
)
async def get_claim_status(
    distributor_id: str = Path(..., description="Distributor identifier"),
    index: int = Path(..., ge=0, description="Leaf index"),
    distributor_service: DistributorService = Depends(get_distributor_service),
) -> ClaimStatusResponseDTO:
    """Return the receipt of a claimed index; 404 when it is still unclaimed."""
    try:
        claim_status = await distributor_service.get_claim_status(
            distributor_id, index
        )
    except AirdropError as e:
        raise to_http_exception(e)
    if claim_status is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "code": "not_claimed",
                "message": f"Index {index} has not been claimed",
            },
        )
    return claim_status
