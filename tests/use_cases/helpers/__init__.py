"""Test helpers for use case-based testing."""

from .airdrop import MINT, Airdrop

__all__ = [
    "Airdrop",
    "MINT",
]
