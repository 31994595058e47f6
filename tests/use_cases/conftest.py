"""Pytest fixtures for use case tests."""

from __future__ import annotations

from typing import AsyncGenerator

import pytest

from merkledrop.application.use_cases.claim import ClaimService
from merkledrop.application.use_cases.distributor import DistributorService
from merkledrop.client.claimant import Claimant
from tests.fixtures import (
    InMemoryDistributorRepository,
    InMemoryKeyValueStore,
    InMemoryTokenAccountRepository,
)
from tests.use_cases.helpers.airdrop import Airdrop


# ============================================================================
# Repository Fixtures
# ============================================================================


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    """Single store shared by every repository of a test."""
    return InMemoryKeyValueStore()


@pytest.fixture
async def distributor_repository(
    store: InMemoryKeyValueStore,
) -> AsyncGenerator[InMemoryDistributorRepository, None]:
    """Create an in-memory distributor repository."""
    repo = InMemoryDistributorRepository(store)
    await repo.initialize()
    yield repo
    repo.clear()


@pytest.fixture
def token_account_repository(
    store: InMemoryKeyValueStore,
) -> InMemoryTokenAccountRepository:
    """Create an in-memory token account repository over the shared store."""
    return InMemoryTokenAccountRepository(store)


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def distributor_service(
    distributor_repository: InMemoryDistributorRepository,
    token_account_repository: InMemoryTokenAccountRepository,
) -> DistributorService:
    return DistributorService(distributor_repository, token_account_repository)


@pytest.fixture
def claim_service(
    distributor_repository: InMemoryDistributorRepository,
) -> ClaimService:
    return ClaimService(distributor_repository)


# ============================================================================
# Scenario Fixtures
# ============================================================================


@pytest.fixture
async def airdrop(
    distributor_service: DistributorService,
    claim_service: ClaimService,
    claimants: list[Claimant],
) -> Airdrop:
    """Funded distributor for [(A, 100), (B, 101), (C, 102)] with exact caps."""
    return await Airdrop.launch(
        distributor_service,
        claim_service,
        list(zip(claimants, [100, 101, 102])),
    )
