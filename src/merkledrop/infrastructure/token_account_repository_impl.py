"""TokenAccount repository implementation over a storage abstraction."""

from __future__ import annotations

from ..domain.entities import TokenAccount
from ..domain.repositories import TokenAccountRepository
from .keys import token_account_key
from .storage import KeyValueStore


class TokenAccountRepositoryImpl(TokenAccountRepository):
    """TokenAccount repository using a KeyValueStore.

    Balances are written only by the distributor Lua scripts; this repository
    just reads them back.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def get(self, mint: str, owner: str) -> TokenAccount:
        raw = await self.store.get(token_account_key(mint, owner))
        return TokenAccount(mint=mint, owner=owner, amount=int(raw) if raw else 0)
