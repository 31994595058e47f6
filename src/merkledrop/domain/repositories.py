"""Distributor domain repository interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import ClaimStatus, Distributor, TokenAccount


class DistributorRepository(ABC):
    """Abstract repository for distributors and their claim receipts."""

    @abstractmethod
    async def create(self, distributor: Distributor) -> bool:
        """
        Atomically create the distributor and its empty reserve if absent.

        Returns False when a distributor with the same id already exists.
        """
        pass

    @abstractmethod
    async def get_by_id(self, distributor_id: str) -> Optional[Distributor]:
        pass

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> List[Distributor]:
        pass

    @abstractmethod
    async def fund(self, distributor: Distributor, amount: int) -> tuple[int, int]:
        """
        Credit the distributor reserve.

        Returns:
          (1, balance) -> credited, new reserve balance
          (2, 0) -> distributor missing
          (3, balance) -> would overflow u64, current reserve balance
        """
        pass

    @abstractmethod
    async def get_claim_status(
        self, distributor_id: str, index: int
    ) -> Optional[ClaimStatus]:
        pass

    @abstractmethod
    async def save_claim(
        self, distributor: Distributor, claim_status: ClaimStatus
    ) -> tuple[int, Optional[ClaimStatus]]:
        """
        Atomically commit a claim: create the receipt if absent, check the caps,
        increment the counters and move the amount out of the reserve.

        Returns:
          (1, claim) -> committed
          (0, claim) -> a receipt already exists for this index (returns it)
          (2, None) -> distributor missing
          (3, None) -> max_num_nodes reached
          (4, None) -> max_total_claim would be exceeded
          (5, None) -> reserve balance too low
          (6, None) -> claimant token balance would overflow
        """
        pass


class TokenAccountRepository(ABC):
    """Read access to token balances held per (mint, owner)."""

    @abstractmethod
    async def get(self, mint: str, owner: str) -> TokenAccount:
        """Return the token account; missing accounts have a zero balance."""
        pass
