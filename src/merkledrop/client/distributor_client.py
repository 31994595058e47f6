"""Async client for the distributor HTTP API."""

from __future__ import annotations

from typing import Any, Optional, Type
from types import TracebackType
from urllib.parse import quote

import httpx

from ..application.dtos import (
    ClaimRequestDTO,
    ClaimStatusResponseDTO,
    CreateDistributorRequestDTO,
    DistributorResponseDTO,
    FundDistributorRequestDTO,
    FundDistributorResponseDTO,
    TokenAccountResponseDTO,
)


class DistributorApiError(Exception):
    """Raised when the API answers with a non-successful status.

    ``code`` is the error kind reported by the server (for example
    ``already_claimed``), or None when the body carries no kind.
    """

    def __init__(self, status_code: int, code: Optional[str], message: str):
        super().__init__(f"{status_code} {code or 'error'}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message


def _api_error(exc: httpx.HTTPStatusError) -> DistributorApiError:
    response = exc.response
    try:
        detail: Any = response.json().get("detail")
    except ValueError:
        detail = response.text
    if isinstance(detail, dict):
        return DistributorApiError(
            response.status_code, detail.get("code"), str(detail.get("message"))
        )
    return DistributorApiError(response.status_code, None, str(detail))


class DistributorClient:
    """Mirror of the /api/v1 distributor endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )

    async def _get(self, path: str) -> dict:
        try:
            resp = await self._client.get(path)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise _api_error(e) from e
        return resp.json()

    async def _post(self, path: str, body: dict) -> dict:
        try:
            resp = await self._client.post(path, json=body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise _api_error(e) from e
        return resp.json()

    async def create_distributor(
        self, request: CreateDistributorRequestDTO
    ) -> DistributorResponseDTO:
        data = await self._post("/api/v1/distributors", request.model_dump())
        return DistributorResponseDTO.model_validate(data)

    async def get_distributor(self, distributor_id: str) -> DistributorResponseDTO:
        data = await self._get(f"/api/v1/distributors/{distributor_id}")
        return DistributorResponseDTO.model_validate(data)

    async def fund_distributor(
        self, distributor_id: str, amount: int
    ) -> FundDistributorResponseDTO:
        request = FundDistributorRequestDTO(amount=amount)
        data = await self._post(
            f"/api/v1/distributors/{distributor_id}/fundings", request.model_dump()
        )
        return FundDistributorResponseDTO.model_validate(data)

    async def claim(
        self, distributor_id: str, request: ClaimRequestDTO
    ) -> ClaimStatusResponseDTO:
        data = await self._post(
            f"/api/v1/distributors/{distributor_id}/claims", request.model_dump()
        )
        return ClaimStatusResponseDTO.model_validate(data)

    async def get_claim_status(
        self, distributor_id: str, index: int
    ) -> Optional[ClaimStatusResponseDTO]:
        """Return the receipt, or None while the index is unclaimed."""
        try:
            data = await self._get(
                f"/api/v1/distributors/{distributor_id}/claims/{index}"
            )
        except DistributorApiError as e:
            if e.status_code == 404 and e.code == "not_claimed":
                return None
            raise
        return ClaimStatusResponseDTO.model_validate(data)

    async def get_token_account(self, mint: str, owner: str) -> TokenAccountResponseDTO:
        data = await self._get(
            f"/api/v1/tokens/{quote(mint, safe='')}/accounts/{quote(owner, safe='/')}"
        )
        return TokenAccountResponseDTO.model_validate(data)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DistributorClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()
