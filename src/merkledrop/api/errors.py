"""Translation of domain errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from ..domain.errors import (
    AirdropError,
    AlreadyClaimedError,
    ClaimantBalanceOverflowError,
    DistributorAlreadyExistsError,
    DistributorNotFoundError,
    ExceededClaimError,
    ExceededNodesError,
    InsufficientReserveError,
    InvalidCapsError,
    InvalidProofError,
    InvalidRootError,
    ReserveOverflowError,
    UnauthorizedClaimantError,
)

ERROR_STATUS_CODES: dict[type[AirdropError], int] = {
    InvalidProofError: status.HTTP_400_BAD_REQUEST,
    InvalidRootError: status.HTTP_400_BAD_REQUEST,
    UnauthorizedClaimantError: status.HTTP_403_FORBIDDEN,
    DistributorNotFoundError: status.HTTP_404_NOT_FOUND,
    AlreadyClaimedError: status.HTTP_409_CONFLICT,
    DistributorAlreadyExistsError: status.HTTP_409_CONFLICT,
    InsufficientReserveError: status.HTTP_409_CONFLICT,
    ClaimantBalanceOverflowError: status.HTTP_409_CONFLICT,
    InvalidCapsError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ExceededNodesError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ExceededClaimError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ReserveOverflowError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def status_for(error: AirdropError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(error, error_type):
            return status_code
    if isinstance(error, ValueError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(error: AirdropError) -> HTTPException:
    """Build an HTTPException whose detail carries the error kind."""
    return HTTPException(
        status_code=status_for(error),
        detail={"code": error.code, "message": str(error)},
    )
