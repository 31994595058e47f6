"""Domain-specific exceptions.

Every failure a claim or tree operation can produce has its own kind so that
callers can tell exactly which precondition failed. Input errors the caller
can fix also subclass ValueError.
"""

from __future__ import annotations


class AirdropError(Exception):
    """Base class for all airdrop distributor errors."""

    code: str = "airdrop_error"


class EmptyInputError(AirdropError, ValueError):
    """Raised when a BalanceTree is built from zero entries."""

    code = "empty_input"


class LeafMismatchError(AirdropError, ValueError):
    """Raised when a proof is requested for values that are not the stored leaf."""

    code = "leaf_mismatch"


class InvalidCapsError(AirdropError, ValueError):
    """Raised when a distributor is created with a zero (or out of range) cap."""

    code = "invalid_caps"


class InvalidRootError(AirdropError, ValueError):
    """Raised when a distributor root is not a 32-byte hash."""

    code = "invalid_root"


class DistributorNotFoundError(AirdropError):
    """Raised when a distributor lookup fails."""

    code = "distributor_not_found"


class DistributorAlreadyExistsError(AirdropError):
    """Raised when a distributor with the same id has already been created."""

    code = "distributor_already_exists"


class InvalidProofError(AirdropError):
    """Raised when the recomputed root does not match the distributor root."""

    code = "invalid_proof"


class ExceededNodesError(AirdropError):
    """Raised when the distributor has already paid out max_num_nodes claims."""

    code = "exceeded_num_nodes"


class ExceededClaimError(AirdropError):
    """Raised when a claim would push total_amount_claimed past max_total_claim."""

    code = "exceeded_max_claim"


class AlreadyClaimedError(AirdropError):
    """Raised when a ClaimStatus already exists for the claimed index."""

    code = "already_claimed"


class UnauthorizedClaimantError(AirdropError):
    """Raised when the claim is not signed by the account named in the proof."""

    code = "unauthorized_claimant"


class InsufficientReserveError(AirdropError):
    """Raised when the distributor reserve cannot cover the claimed amount."""

    code = "insufficient_reserve"


class ClaimantBalanceOverflowError(AirdropError):
    """Raised when a payout would push the claimant token balance past u64."""

    code = "claimant_overflow"


class ReserveOverflowError(AirdropError, ValueError):
    """Raised when funding would push the reserve balance past u64."""

    code = "reserve_overflow"
