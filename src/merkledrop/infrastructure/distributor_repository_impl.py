"""Distributor repository implementation over a storage abstraction."""

from __future__ import annotations

from typing import List, Optional

from ..domain.entities import ClaimStatus, Distributor
from ..domain.repositories import DistributorRepository
from . import scripts
from .keys import claim_status_key, distributor_key, reserve_key, token_account_key
from .storage import KeyValueStore

_INT_FIELDS = (
    "max_num_nodes",
    "max_total_claim",
    "num_nodes_claimed",
    "total_amount_claimed",
)


def _parse_result(result: list) -> tuple[int, Optional[str]]:
    # result is a list-like: [code, payload_or_empty]
    code = int(result[0]) if result and result[0] not in (None, "") else 0
    payload = result[1] if len(result) > 1 and result[1] not in (None, "") else None
    return code, payload


class DistributorRepositoryImpl(DistributorRepository):
    """Distributor repository using a KeyValueStore.

    Keys:
      - distributor:{id} -> hash of distributor fields (amounts as decimal strings)
      - claim_status:{id}:{index} -> ClaimStatus JSON (presence means claimed)
      - token_account:{mint}:{owner} -> decimal balance
      - distributors:all -> sorted set of ids by creation time
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def initialize(self) -> None:
        """Register the Lua scripts used by this repository."""
        for name, script in scripts.DISTRIBUTOR_SCRIPTS.items():
            await self.store.register_script(name, script)

    @staticmethod
    def _to_hash_fields(distributor: Distributor) -> list[str]:
        data = distributor.model_dump(mode="json")
        fields: list[str] = []
        for name, value in data.items():
            fields.extend([name, str(value)])
        return fields

    @staticmethod
    def _from_hash_fields(data: dict[str, str]) -> Distributor:
        values: dict[str, object] = dict(data)
        for name in _INT_FIELDS:
            values[name] = int(data[name])
        return Distributor.model_validate(values)

    async def create(self, distributor: Distributor) -> bool:
        result = await self.store.run_script(
            "create_distributor",
            keys=[
                distributor_key(distributor.distributor_id),
                reserve_key(distributor.mint, distributor.distributor_id),
            ],
            args=[
                str(distributor.created_at.timestamp()),
                distributor.distributor_id,
                *self._to_hash_fields(distributor),
            ],
        )
        code, _ = _parse_result(result)
        return code == scripts.SUCCESS

    async def get_by_id(self, distributor_id: str) -> Optional[Distributor]:
        data = await self.store.hgetall(distributor_key(distributor_id))
        if not data:
            return None
        return self._from_hash_fields(data)

    async def get_all(self, skip: int = 0, limit: int = 100) -> List[Distributor]:
        ids: list[str] = await self.store.zrevrange(
            "distributors:all", skip, skip + limit - 1
        )
        distributors: List[Distributor] = []
        for distributor_id in ids:
            distributor = await self.get_by_id(distributor_id)
            if distributor:
                distributors.append(distributor)
        return distributors

    async def fund(self, distributor: Distributor, amount: int) -> tuple[int, int]:
        result = await self.store.run_script(
            "fund_distributor",
            keys=[
                distributor_key(distributor.distributor_id),
                reserve_key(distributor.mint, distributor.distributor_id),
            ],
            args=[str(amount)],
        )
        code, payload = _parse_result(result)
        return code, int(payload) if payload else 0

    async def get_claim_status(
        self, distributor_id: str, index: int
    ) -> Optional[ClaimStatus]:
        data = await self.store.get(claim_status_key(distributor_id, index))
        if not data:
            return None
        return ClaimStatus.model_validate_json(data)

    async def save_claim(
        self, distributor: Distributor, claim_status: ClaimStatus
    ) -> tuple[int, Optional[ClaimStatus]]:
        result = await self.store.run_script(
            "claim",
            keys=[
                distributor_key(distributor.distributor_id),
                claim_status_key(distributor.distributor_id, claim_status.index),
                reserve_key(distributor.mint, distributor.distributor_id),
                token_account_key(distributor.mint, claim_status.claimant_b64),
            ],
            args=[claim_status.model_dump_json(), str(claim_status.amount)],
        )
        code, payload = _parse_result(result)
        if code in (scripts.SUCCESS, scripts.CLAIM_ALREADY_EXISTS):
            if payload is None:
                raise RuntimeError(
                    f"Unexpected: claim script returned code {code} without a receipt"
                )
            return code, ClaimStatus.model_validate_json(payload)
        return code, None
