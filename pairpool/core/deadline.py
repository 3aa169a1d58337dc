"""
Deadline kernel.

This module is intentionally small and pure:
- The functional core decides expiry deterministically from two integers.
- The imperative shell is responsible for reading the clock.
"""

from __future__ import annotations

from .errors import Expired


def is_expired(deadline: int, current_timestamp: int) -> bool:
    """Return True if `current_timestamp` is strictly past `deadline`."""
    for name, v in (("deadline", deadline), ("current_timestamp", current_timestamp)):
        if not isinstance(v, int) or isinstance(v, bool):
            raise TypeError(f"{name} must be an int")
    return current_timestamp > deadline


def require_not_expired(deadline: int, current_timestamp: int) -> None:
    """Raise Expired unless current_timestamp <= deadline."""
    if is_expired(deadline, current_timestamp):
        raise Expired(deadline, current_timestamp)
