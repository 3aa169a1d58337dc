"""
Liquidity math kernel.

Pure functions for ratio-preserving deposits, share minting and proportional
redemption. All divisions floor, which always leaves residual dust in the pool.
"""

from __future__ import annotations

from dataclasses import dataclass

from .isqrt import isqrt


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class OptimalLiquidityResult:
    amount_a_used: int
    amount_b_used: int
    # True when the A side was kept as desired and B was derived from the reserve ratio.
    a_side_fixed: bool


@dataclass(frozen=True)
class BurnLiquidityResult:
    amount_a_out: int
    amount_b_out: int


def optimal_liquidity(
    *,
    reserve_a: int,
    reserve_b: int,
    amount_a_desired: int,
    amount_b_desired: int,
) -> OptimalLiquidityResult:
    """
    Fit the desired amounts onto the current reserve ratio.

    B is derived from the full A amount when that fits within the desired B;
    otherwise A is derived from the full B amount.
    """
    for name, v in (
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("amount_a_desired", amount_a_desired),
        ("amount_b_desired", amount_b_desired),
    ):
        _require_int(name, v)

    if reserve_a <= 0 or reserve_b <= 0:
        raise ValueError("reserves must be positive")
    if amount_a_desired < 0 or amount_b_desired < 0:
        raise ValueError("desired amounts must be non-negative")

    amount_b_optimal = (amount_a_desired * reserve_b) // reserve_a
    if amount_b_optimal <= amount_b_desired:
        return OptimalLiquidityResult(
            amount_a_used=amount_a_desired,
            amount_b_used=amount_b_optimal,
            a_side_fixed=True,
        )

    amount_a_optimal = (amount_b_desired * reserve_a) // reserve_b
    if amount_a_optimal > amount_a_desired:
        raise AssertionError("used amounts exceed desired amounts")
    return OptimalLiquidityResult(
        amount_a_used=amount_a_optimal,
        amount_b_used=amount_b_desired,
        a_side_fixed=False,
    )


def mint_initial(*, amount_a: int, amount_b: int) -> int:
    """
    Shares for the first deposit: floor(sqrt(amount_a * amount_b)).

    No minimum liquidity is locked away.
    """
    _require_int("amount_a", amount_a)
    _require_int("amount_b", amount_b)
    if amount_a < 0 or amount_b < 0:
        raise ValueError("amounts must be non-negative")
    return isqrt(amount_a * amount_b)


def mint_pro_rata(
    *,
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> int:
    """
    Shares proportional to the existing supply: min(a*T/ra, b*T/rb), floor-rounded.
    """
    for name, v in (
        ("amount_a", amount_a),
        ("amount_b", amount_b),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("total_shares", total_shares),
    ):
        _require_int(name, v)

    if reserve_a <= 0 or reserve_b <= 0:
        raise ValueError("reserves must be positive")
    if total_shares <= 0:
        raise ValueError("total_shares must be positive")
    if amount_a < 0 or amount_b < 0:
        raise ValueError("amounts must be non-negative")

    shares_a = (amount_a * total_shares) // reserve_a
    shares_b = (amount_b * total_shares) // reserve_b
    return min(shares_a, shares_b)


def burn_liquidity(*, shares: int, reserve_a: int, reserve_b: int, total_shares: int) -> BurnLiquidityResult:
    """
    Redeem shares for underlying assets (floor rounding).
    """
    for name, v in (
        ("shares", shares),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("total_shares", total_shares),
    ):
        _require_int(name, v)

    if shares <= 0:
        raise ValueError("shares must be positive")
    if reserve_a < 0 or reserve_b < 0:
        raise ValueError("reserves must be non-negative")
    if total_shares <= 0:
        raise ValueError("total_shares must be positive")
    if shares > total_shares:
        raise ValueError("cannot burn more than total_shares")

    return BurnLiquidityResult(
        amount_a_out=(shares * reserve_a) // total_shares,
        amount_b_out=(shares * reserve_b) // total_shares,
    )
