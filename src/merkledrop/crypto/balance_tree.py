"""BalanceTree: Merkle tree over (index, account, amount) airdrop entitlements."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from itertools import zip_longest
from typing import Final, Optional, Sequence

from eth_utils import keccak

from ..domain.errors import EmptyInputError, LeafMismatchError

KECCAK256: Final[str] = "keccak256"
HASH_SIZE: Final[int] = 32
ACCOUNT_SIZE: Final[int] = 32
U64_MAX: Final[int] = (1 << 64) - 1


def b64_to_bytes(data_b64: str) -> bytes:
    """Decode a base64 string into raw bytes (strict validation)."""
    return base64.b64decode(data_b64, validate=True)


def bytes_to_b64(data: bytes) -> str:
    """Encode raw bytes into base64 string."""
    return base64.b64encode(data).decode("utf-8")


def hash_bytes(data: bytes) -> bytes:
    """Hash bytes (fixed algorithm: Keccak-256)."""
    return keccak(data)


def u64_le(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as 8 little-endian bytes."""
    if value < 0 or value > U64_MAX:
        raise ValueError(f"value {value} does not fit in u64")
    return value.to_bytes(8, "little")


def compute_leaf_hash(index: int, account: bytes, amount: int) -> bytes:
    """Leaf hash: keccak256(index_le_u64 ++ account ++ amount_le_u64)."""
    if len(account) != ACCOUNT_SIZE:
        raise ValueError(f"account must be {ACCOUNT_SIZE} bytes, got {len(account)}")
    return hash_bytes(u64_le(index) + account + u64_le(amount))


def combined_hash(a: Optional[bytes], b: Optional[bytes]) -> bytes:
    """Merge two nodes with sorted-pair hashing; a missing node carries the other up."""
    if a is None:
        assert b is not None
        return b
    if b is None:
        return a
    if b < a:
        a, b = b, a
    return hash_bytes(a + b)


def _next_level(level: list[bytes]) -> list[bytes]:
    return [combined_hash(a, b) for a, b in zip_longest(level[::2], level[1::2])]


def _build_levels(leaves: list[bytes]) -> list[list[bytes]]:
    """
    Build every level of the tree bottom-up.

    levels[0] holds the leaves in index order and levels[-1] holds only the root.
    An unpaired node at the end of a level is promoted unchanged.
    """
    if not leaves:
        raise EmptyInputError("Cannot build Merkle tree with empty leaves")

    levels: list[list[bytes]] = [leaves]
    while len(levels[-1]) > 1:
        levels.append(_next_level(levels[-1]))
    return levels


def fold_proof(leaf_hash: bytes, proof: Sequence[bytes]) -> bytes:
    """Recompute a root from a leaf hash and its sibling hashes."""
    current = leaf_hash
    for sibling in proof:
        current = combined_hash(current, sibling)
    return current


def verify_proof(
    root: bytes,
    index: int,
    account: bytes,
    amount: int,
    proof: Sequence[bytes],
) -> bool:
    """
    Verify that (index, account, amount) is a leaf of the tree committed by root.

    Returns False on any mismatch, including malformed inputs; a failed
    verification is an ordinary negative result.
    """
    if len(root) != HASH_SIZE:
        return False
    if any(len(sibling) != HASH_SIZE for sibling in proof):
        return False
    try:
        leaf_hash = compute_leaf_hash(index, account, amount)
    except ValueError:
        return False
    return fold_proof(leaf_hash, proof) == root


def proof_to_b64(proof: Sequence[bytes]) -> list[str]:
    return [bytes_to_b64(node) for node in proof]


def proof_from_b64(proof_b64: Sequence[str]) -> list[bytes]:
    return [b64_to_bytes(node) for node in proof_b64]


@dataclass(frozen=True)
class BalanceEntry:
    """One entitlement of the airdrop: a recipient public key and its amount."""

    account: bytes
    amount: int


@dataclass(frozen=True)
class DistributionClaim:
    index: int
    account_b64: str
    amount: int
    proof_b64: list[str]


@dataclass(frozen=True)
class Distribution:
    """Serializable export of a whole airdrop (root, total, per-index claims)."""

    root_b64: str
    token_total: int
    claims: list[DistributionClaim]
    hash_alg: str = KECCAK256


@dataclass(frozen=True)
class BalanceTree:
    """
    Issuer-side airdrop tree.

    This object is responsible for:
    - Computing the 32-byte root committed into a distributor
    - Producing the sibling proof for any leaf, addressed by its index

    Leaves keep the order of the input entries; the index of an entry is its
    position, so duplicate accounts become independent leaves.
    """

    entries: tuple[BalanceEntry, ...]
    _levels: list[list[bytes]] = field(repr=False, compare=False)

    def __init__(self, entries: Sequence[BalanceEntry]) -> None:
        entries_tuple = tuple(entries)
        if not entries_tuple:
            raise EmptyInputError("BalanceTree requires at least one entry")

        leaves = [
            compute_leaf_hash(index, entry.account, entry.amount)
            for index, entry in enumerate(entries_tuple)
        ]
        object.__setattr__(self, "entries", entries_tuple)
        object.__setattr__(self, "_levels", _build_levels(leaves))

    @property
    def leaf_count(self) -> int:
        return len(self.entries)

    def get_root(self) -> bytes:
        return self._levels[-1][0]

    @property
    def root_b64(self) -> str:
        return bytes_to_b64(self.get_root())

    def get_proof(self, index: int, account: bytes, amount: int) -> list[bytes]:
        """
        Return the sibling hashes from the leaf at `index` up to the root.

        Raises:
            LeafMismatchError: if `index` is out of range or the stored leaf
                is not the hash of (index, account, amount).
        """
        leaves = self._levels[0]
        if index < 0 or index >= len(leaves):
            raise LeafMismatchError(
                f"Leaf index {index} out of range [0, {len(leaves)})"
            )
        try:
            expected = compute_leaf_hash(index, account, amount)
        except ValueError as e:
            raise LeafMismatchError(str(e)) from e
        if leaves[index] != expected:
            raise LeafMismatchError(
                f"Leaf at index {index} does not match the supplied account/amount"
            )

        proof: list[bytes] = []
        position = index
        for level in self._levels[:-1]:
            sibling = position ^ 1
            if sibling < len(level):
                proof.append(level[sibling])
            position //= 2
        return proof

    def to_distribution(self) -> Distribution:
        """Export the root, token total and every claim with its proof."""
        claims = [
            DistributionClaim(
                index=index,
                account_b64=bytes_to_b64(entry.account),
                amount=entry.amount,
                proof_b64=proof_to_b64(
                    self.get_proof(index, entry.account, entry.amount)
                ),
            )
            for index, entry in enumerate(self.entries)
        ]
        return Distribution(
            root_b64=self.root_b64,
            token_total=sum(entry.amount for entry in self.entries),
            claims=claims,
        )
