"""Redis key layout shared by the repositories and the Lua scripts."""

from __future__ import annotations


def distributor_key(distributor_id: str) -> str:
    return f"distributor:{distributor_id}"


def claim_status_key(distributor_id: str, index: int) -> str:
    return f"claim_status:{distributor_id}:{index}"


def token_account_key(mint: str, owner: str) -> str:
    return f"token_account:{mint}:{owner}"


def reserve_key(mint: str, distributor_id: str) -> str:
    """The distributor owns its reserve: a token account of its mint."""
    return token_account_key(mint, distributor_id)
