"""In-memory implementation of KeyValueStore for testing."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from merkledrop.domain.entities import U64_MAX
from merkledrop.infrastructure import scripts
from merkledrop.infrastructure.storage import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """In-memory implementation of KeyValueStore for fast testing.

    The registered Lua scripts are reproduced in Python. None of them awaits
    between reading and writing, so each one is atomic on the event loop just
    like a script running on the Redis server.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._hashes: dict[str, dict[str, str]] = {}
        self._sorted_sets: dict[str, list[tuple[str, float]]] = {}
        self._script_cache: dict[str, str] = {}
        self._script_sources: dict[str, str] = {}

    def clear(self) -> None:
        """Clear all data (useful for test teardown)."""
        self._data.clear()
        self._hashes.clear()
        self._sorted_sets.clear()

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def hgetall(self, key: str) -> Dict[str, str]:
        return dict(self._hashes.get(key, {}))

    async def zrevrange(self, key: str, start: int, end: int) -> list[str]:
        """Get range from sorted set (already sorted descending)."""
        if key not in self._sorted_sets:
            return []
        members = [m for m, _ in self._sorted_sets[key]]
        # Redis zrevrange is inclusive on both ends
        slice_end = None if end == -1 else end + 1
        return members[start:slice_end]

    async def register_script(self, name: str, script: str) -> str:
        """Register a script (return mock SHA1)."""
        self._script_cache[name] = f"sha1_{name}"
        self._script_sources[name] = script
        return f"sha1_{name}"

    async def run_script(self, name: str, keys: List[str], args: List[str]) -> Any:
        """Execute script by name."""
        if name not in self._script_cache:
            raise ValueError(f"Script '{name}' not registered")
        if name == "create_distributor":
            return self._execute_create_distributor(keys, args)
        if name == "fund_distributor":
            return self._execute_fund_distributor(keys, args)
        if name == "claim":
            return self._execute_claim(keys, args)
        raise NotImplementedError(f"Script '{name}' not implemented in memory")

    def _zadd(self, key: str, score: float, member: str) -> None:
        current = self._sorted_sets.setdefault(key, [])
        current[:] = [(m, s) for m, s in current if m != member]
        current.append((member, score))
        current.sort(key=lambda x: x[1], reverse=True)

    def _exists(self, key: str) -> bool:
        return key in self._data or key in self._hashes

    def _int(self, key: str) -> int:
        return int(self._data.get(key) or 0)

    def _execute_create_distributor(
        self, keys: List[str], args: List[str]
    ) -> list[Any]:
        distributor_key, reserve_key = keys
        created_ts = float(args[0])
        distributor_id = args[1]

        if self._exists(distributor_key):
            return [scripts.CLAIM_ALREADY_EXISTS, ""]

        pairs = args[2:]
        self._hashes[distributor_key] = {
            pairs[i]: pairs[i + 1] for i in range(0, len(pairs), 2)
        }
        if not self._exists(reserve_key):
            self._data[reserve_key] = "0"
        self._zadd("distributors:all", created_ts, distributor_id)
        return [scripts.SUCCESS, ""]

    def _execute_fund_distributor(self, keys: List[str], args: List[str]) -> list[Any]:
        distributor_key, reserve_key = keys
        amount = int(args[0])

        if not self._exists(distributor_key):
            return [scripts.DISTRIBUTOR_MISSING, ""]

        current = self._int(reserve_key)
        new_balance = current + amount
        if new_balance > U64_MAX:
            return [scripts.RESERVE_OVERFLOW, str(current)]
        self._data[reserve_key] = str(new_balance)
        return [scripts.SUCCESS, str(new_balance)]

    def _execute_claim(self, keys: List[str], args: List[str]) -> list[Any]:
        distributor_key, claim_key, reserve_key, claimant_key = keys
        claim_json = args[0]
        amount = int(args[1])

        distributor = self._hashes.get(distributor_key)
        if not distributor:
            return [scripts.DISTRIBUTOR_MISSING, ""]

        max_num_nodes = int(distributor["max_num_nodes"])
        max_total_claim = int(distributor["max_total_claim"])
        num_nodes_claimed = int(distributor["num_nodes_claimed"])
        total_amount_claimed = int(distributor["total_amount_claimed"])

        # Caps before the receipt, so a spent node cap wins over a double claim
        if num_nodes_claimed >= max_num_nodes:
            return [scripts.EXCEEDED_NODES, ""]

        new_total = total_amount_claimed + amount
        if new_total > U64_MAX or new_total > max_total_claim:
            return [scripts.EXCEEDED_CLAIM, ""]

        existing = self._data.get(claim_key)
        if existing:
            return [scripts.CLAIM_ALREADY_EXISTS, existing]

        reserve = self._int(reserve_key)
        if reserve < amount:
            return [scripts.INSUFFICIENT_RESERVE, str(reserve)]

        claimant_balance = self._int(claimant_key) + amount
        if claimant_balance > U64_MAX:
            return [scripts.CLAIMANT_OVERFLOW, ""]

        self._data[claim_key] = claim_json
        distributor["num_nodes_claimed"] = str(num_nodes_claimed + 1)
        distributor["total_amount_claimed"] = str(new_total)
        self._data[reserve_key] = str(reserve - amount)
        self._data[claimant_key] = str(claimant_balance)
        return [scripts.SUCCESS, claim_json]
