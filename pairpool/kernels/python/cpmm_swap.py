"""
Constant-product swap kernel (no fee).

Pricing:
    amount_out = floor(amount_in * reserve_out / (reserve_in + amount_in))

The whole input stays in the pool, and floor rounding only ever shortchanges the
taker, so `k_after >= k_before` holds for every accepted swap.
"""

from __future__ import annotations

from dataclasses import dataclass


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class SwapExactInResult:
    amount_in: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def amount_out_exact_in(*, reserve_in: int, reserve_out: int, amount_in: int) -> int:
    """
    Output for an exact input against (reserve_in, reserve_out), floor-rounded.
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
    ):
        _require_int(name, v)

    if reserve_in < 0 or reserve_out < 0:
        raise ValueError("reserves must be non-negative")
    if reserve_in == 0 or reserve_out == 0:
        raise ValueError("cannot swap against an empty reserve")
    if amount_in <= 0:
        raise ValueError("amount_in must be positive")

    return (amount_in * reserve_out) // (amount_in + reserve_in)


def swap_exact_in(*, reserve_in: int, reserve_out: int, amount_in: int) -> SwapExactInResult:
    """
    Exact-in swap quote + post-state.

    Raises ValueError on invalid inputs.
    """
    k_before = reserve_in * reserve_out
    amount_out = amount_out_exact_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
    if amount_out >= reserve_out:
        raise ValueError("amount_out would drain reserve_out")

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    k_after = new_reserve_in * new_reserve_out

    return SwapExactInResult(
        amount_in=amount_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )
