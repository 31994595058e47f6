"""FastAPI dependencies for the distributor API."""

from __future__ import annotations

from functools import lru_cache

from ..application.use_cases.claim import ClaimService
from ..application.use_cases.distributor import DistributorService
from ..env import Settings, get_settings
from ..infrastructure.database import DatabaseClient, get_database_client
from ..infrastructure.distributor_repository_impl import DistributorRepositoryImpl
from ..infrastructure.storage import KeyValueStore, RedisKeyValueStore
from ..infrastructure.token_account_repository_impl import TokenAccountRepositoryImpl


@lru_cache()
def get_settings_dependency() -> Settings:
    return get_settings()


@lru_cache()
def get_database_client_dependency() -> DatabaseClient:
    settings = get_settings_dependency()
    return get_database_client(settings)


@lru_cache()
def get_store_dependency() -> KeyValueStore:
    db_client = get_database_client_dependency()
    return RedisKeyValueStore(db_client)


def get_distributor_repository() -> DistributorRepositoryImpl:
    store = get_store_dependency()
    return DistributorRepositoryImpl(store)


def get_token_account_repository() -> TokenAccountRepositoryImpl:
    store = get_store_dependency()
    return TokenAccountRepositoryImpl(store)


def get_distributor_service() -> DistributorService:
    return DistributorService(
        get_distributor_repository(), get_token_account_repository()
    )


def get_claim_service() -> ClaimService:
    return ClaimService(get_distributor_repository())
