"""Test fixtures for in-memory implementations."""

from .in_memory_storage import InMemoryKeyValueStore
from .in_memory_repositories import (
    InMemoryDistributorRepository,
    InMemoryTokenAccountRepository,
)

__all__ = [
    "InMemoryDistributorRepository",
    "InMemoryKeyValueStore",
    "InMemoryTokenAccountRepository",
]
