"""
Integer square root kernel.

Babylonian (Newton) iteration over integers; no floating point is involved, so
results are exact for arbitrarily large inputs.
"""

from __future__ import annotations


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def isqrt(y: int) -> int:
    """
    Return floor(sqrt(y)) for y >= 0.

    Small inputs are answered directly: isqrt(0) == 0 and isqrt(y) == 1 for 1 <= y <= 3.
    """
    _require_int("y", y)
    if y < 0:
        raise ValueError(f"y must be non-negative: {y}")

    if y > 3:
        z = y
        x = y // 2 + 1
        while x < z:
            z = x
            x = (y // x + x) // 2
        return z
    if y != 0:
        return 1
    return 0
