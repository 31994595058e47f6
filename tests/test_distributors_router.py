"""Unit tests for distributor and token API routes."""

import unittest
from datetime import datetime, timezone
from unittest.mock import AsyncMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from merkledrop.api.dependencies import get_distributor_service
from merkledrop.api.routers import distributors, tokens
from merkledrop.application.dtos import (
    DistributorResponseDTO,
    FundDistributorRequestDTO,
    FundDistributorResponseDTO,
    TokenAccountResponseDTO,
)
from merkledrop.domain.errors import (
    DistributorNotFoundError,
    InvalidCapsError,
    InvalidRootError,
    ReserveOverflowError,
)

ROOT_B64 = "vfuUPBQUGHlgaoXD2t1PmL3cbg/RbIlnaLklE4YQ05w="


class TestDistributorsRouter(unittest.TestCase):
    """Test cases for distributors router."""

    def setUp(self):
        """Set up test fixtures."""
        self.app = FastAPI()
        self.app.include_router(distributors.router, prefix="/api/v1")
        self.app.include_router(tokens.router, prefix="/api/v1")

        self.distributor_id = "a" * 64
        self.distributor_response = DistributorResponseDTO(
            distributor_id=self.distributor_id,
            base_b64="AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA=",
            root_b64=ROOT_B64,
            mint="mint-1",
            max_num_nodes=3,
            max_total_claim=303,
            num_nodes_claimed=0,
            total_amount_claimed=0,
            reserve_balance=0,
            created_at=datetime.now(timezone.utc),
        )

        self.mock_service = AsyncMock()
        self.app.dependency_overrides[get_distributor_service] = (
            lambda: self.mock_service
        )
        self.client = TestClient(self.app)

    def tearDown(self):
        """Clean up after tests."""
        self.app.dependency_overrides.clear()

    def test_create_distributor_success(self):
        self.mock_service.create_distributor.return_value = self.distributor_response

        response = self.client.post(
            "/api/v1/distributors",
            json={
                "root_b64": ROOT_B64,
                "mint": "mint-1",
                "max_num_nodes": 3,
                "max_total_claim": 303,
            },
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["distributor_id"], self.distributor_id)
        self.assertEqual(response.json()["num_nodes_claimed"], 0)
        self.mock_service.create_distributor.assert_called_once()

    def test_create_distributor_invalid_caps(self):
        self.mock_service.create_distributor.side_effect = InvalidCapsError(
            "max_num_nodes must be positive"
        )

        response = self.client.post(
            "/api/v1/distributors",
            json={
                "root_b64": ROOT_B64,
                "mint": "mint-1",
                "max_num_nodes": 0,
                "max_total_claim": 303,
            },
        )

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"]["code"], "invalid_caps")

    def test_create_distributor_invalid_root(self):
        self.mock_service.create_distributor.side_effect = InvalidRootError("short")

        response = self.client.post(
            "/api/v1/distributors",
            json={
                "root_b64": "AAAA",
                "mint": "mint-1",
                "max_num_nodes": 3,
                "max_total_claim": 303,
            },
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["code"], "invalid_root")

    def test_list_distributors(self):
        self.mock_service.list_distributors.return_value = [self.distributor_response]

        response = self.client.get("/api/v1/distributors?skip=0&limit=10")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 1)
        self.mock_service.list_distributors.assert_called_once_with(0, 10)

    def test_get_distributor_success(self):
        self.mock_service.get_distributor.return_value = self.distributor_response

        response = self.client.get(f"/api/v1/distributors/{self.distributor_id}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["root_b64"], ROOT_B64)

    def test_get_distributor_not_found(self):
        self.mock_service.get_distributor.side_effect = DistributorNotFoundError(
            "Distributor missing not found"
        )

        response = self.client.get("/api/v1/distributors/missing")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"]["code"], "distributor_not_found")

    def test_fund_distributor_success(self):
        self.mock_service.fund_distributor.return_value = FundDistributorResponseDTO(
            distributor_id=self.distributor_id, reserve_balance=303
        )

        response = self.client.post(
            f"/api/v1/distributors/{self.distributor_id}/fundings",
            json={"amount": 303},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["reserve_balance"], 303)
        self.mock_service.fund_distributor.assert_called_once_with(
            self.distributor_id, FundDistributorRequestDTO(amount=303)
        )

    def test_fund_distributor_zero_amount_rejected(self):
        response = self.client.post(
            f"/api/v1/distributors/{self.distributor_id}/fundings",
            json={"amount": 0},
        )

        self.assertEqual(response.status_code, 422)
        self.mock_service.fund_distributor.assert_not_called()

    def test_fund_distributor_overflow(self):
        self.mock_service.fund_distributor.side_effect = ReserveOverflowError(
            "Funding would overflow reserve balance"
        )

        response = self.client.post(
            f"/api/v1/distributors/{self.distributor_id}/fundings",
            json={"amount": 1},
        )

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"]["code"], "reserve_overflow")

    def test_get_token_account_with_slash_in_owner(self):
        owner = "ab/cd+ef="
        self.mock_service.get_token_account.return_value = TokenAccountResponseDTO(
            mint="mint-1", owner=owner, amount=101
        )

        response = self.client.get(f"/api/v1/tokens/mint-1/accounts/{owner}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["amount"], 101)
        self.mock_service.get_token_account.assert_called_once_with("mint-1", owner)
