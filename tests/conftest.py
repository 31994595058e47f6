"""Shared pytest fixtures for distributor tests."""

from __future__ import annotations

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from merkledrop.client.claimant import Claimant
from merkledrop.infrastructure.database import DatabaseClient
from merkledrop.infrastructure.storage import RedisKeyValueStore


@pytest.fixture
def claimant_key_pair() -> tuple[ed25519.Ed25519PrivateKey, ed25519.Ed25519PublicKey]:
    """Generate a claimant key pair for testing."""
    private_key = ed25519.Ed25519PrivateKey.generate()
    return private_key, private_key.public_key()


@pytest.fixture
def claimant_private_key_pem(
    claimant_key_pair: tuple[ed25519.Ed25519PrivateKey, ed25519.Ed25519PublicKey],
) -> str:
    """Get claimant private key as PEM string."""
    private_key, _ = claimant_key_pair
    pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return pem.decode("utf-8")


@pytest.fixture
def claimants() -> list[Claimant]:
    """Three independent recipients: A, B and C."""
    return [Claimant.generate() for _ in range(3)]


class TestDatabaseSettings:
    """Test settings for Redis connection."""

    __test__ = False

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url


@pytest_asyncio.fixture
async def redis_db_client() -> AsyncGenerator[DatabaseClient, None]:
    """Create a Redis database client for testing.

    Uses database 15 by default, or TEST_REDIS_URL if set.
    """
    import warnings

    test_redis_url = os.getenv("TEST_REDIS_URL", "redis://localhost:6379/15")
    settings = TestDatabaseSettings(database_url=test_redis_url)
    client = DatabaseClient(settings)
    client.initialize_database()

    # Test connection
    try:
        async with client.get_connection() as conn:
            await conn.ping()
    except Exception as e:
        warnings.warn(
            f"Redis not available at {test_redis_url}: {e}. "
            "Tests requiring Redis will be skipped.",
            UserWarning,
        )
        await client.close()
        pytest.skip(f"Redis not available: {e}")

    async with client.get_connection() as conn:
        await conn.flushdb()

    yield client

    async with client.get_connection() as conn:
        await conn.flushdb()
    await client.close()


@pytest_asyncio.fixture
async def redis_store(redis_db_client: DatabaseClient) -> RedisKeyValueStore:
    """Create a Redis-backed key-value store for testing."""
    return RedisKeyValueStore(redis_db_client)
