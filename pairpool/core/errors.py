"""Exception types for the pool ledger.

Every check that raises one of these runs before any transfer or share
mutation, so a raised ``PoolError`` always means nothing changed.
``PoolError`` derives from ``ValueError`` to keep the kernels' contract.
"""

from __future__ import annotations


class PoolError(ValueError):
    """Base class for pool precondition failures."""


class Expired(PoolError):
    """Raised when the current time is past the caller's deadline."""

    def __init__(self, deadline: int, now: int) -> None:
        self.deadline = deadline
        self.now = now
        super().__init__(f"deadline {deadline} has passed (now={now})")


class InvalidPath(PoolError):
    """Raised when a swap path is not exactly the pool's two assets."""


class InvalidAssetPair(PoolError):
    """Raised when asset identifiers do not match the pool's pair."""


class InsufficientA(PoolError):
    """Raised when the ratio-adjusted amount of asset A is below its minimum."""


class InsufficientB(PoolError):
    """Raised when the ratio-adjusted amount of asset B is below its minimum."""


class BelowMinimum(PoolError):
    """Raised when an accepted or redeemed amount is below the caller's minimum."""


class OutputBelowMinimum(PoolError):
    """Raised when a swap would pay out less than ``amount_out_min``."""


class NoLiquidity(PoolError):
    """Raised when a reserve needed for pricing is empty."""


class ZeroInput(PoolError):
    """Raised when an operation is asked to move a zero amount."""


class InsufficientShares(PoolError):
    """Raised when more shares are burned than exist or than a holder owns."""


class TransferFailed(PoolError):
    """Raised when the transfer collaborator reports a failed transfer."""


class InvariantViolation(PoolError):
    """Raised when a swap would decrease the constant product."""

    def __init__(self, k_before: int, k_after: int) -> None:
        self.k_before = k_before
        self.k_after = k_after
        super().__init__(f"invariant violation: k_after ({k_after}) < k_before ({k_before})")
