"""Pure validation functions for distributor creation and claim processing.

These functions contain business logic validation rules that can be tested
in isolation without dependencies on repositories or infrastructure.
"""

from __future__ import annotations

from typing import Optional

from ...domain.entities import U64_MAX
from ...domain.errors import ExceededClaimError, ExceededNodesError, InvalidCapsError


def checked_add_u64(a: int, b: int) -> Optional[int]:
    """Add two u64 values, returning None instead of wrapping on overflow."""
    if a < 0 or b < 0:
        return None
    total = a + b
    if total > U64_MAX:
        return None
    return total


def validate_caps(max_num_nodes: int, max_total_claim: int) -> None:
    """Validate distributor caps. Pure function.

    Raises:
        InvalidCapsError: If either cap is zero or does not fit in u64.
    """
    if max_num_nodes <= 0 or max_num_nodes > U64_MAX:
        raise InvalidCapsError(
            f"max_num_nodes must be in [1, {U64_MAX}], got {max_num_nodes}"
        )
    if max_total_claim <= 0 or max_total_claim > U64_MAX:
        raise InvalidCapsError(
            f"max_total_claim must be in [1, {U64_MAX}], got {max_total_claim}"
        )


def validate_num_nodes(num_nodes_claimed: int, max_num_nodes: int) -> None:
    """Validate that another leaf may still be claimed.

    Raises:
        ExceededNodesError: If num_nodes_claimed already reached max_num_nodes.
    """
    if num_nodes_claimed >= max_num_nodes:
        raise ExceededNodesError(
            f"Distributor already paid {num_nodes_claimed} of {max_num_nodes} claims"
        )


def validate_total_claim(
    total_amount_claimed: int,
    amount: int,
    max_total_claim: int,
) -> int:
    """Validate the claimed amount against max_total_claim.

    Returns:
        The new total_amount_claimed.

    Raises:
        ExceededClaimError: If the new total overflows u64 or exceeds the cap.
    """
    new_total = checked_add_u64(total_amount_claimed, amount)
    if new_total is None or new_total > max_total_claim:
        raise ExceededClaimError(
            f"Claim of {amount} exceeds max_total_claim {max_total_claim} "
            f"(already claimed {total_amount_claimed})"
        )
    return new_total
