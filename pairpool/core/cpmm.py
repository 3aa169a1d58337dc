"""
Constant Product Market Maker (CPMM) pricing and share math.

This module implements the pool's arithmetic with deterministic floor rounding
and maps kernel-level failures onto the pool's error taxonomy.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per operation (O(log n) for the bootstrap square root)
- Space Complexity: O(1) auxiliary
- Invariant: After each swap, x' * y' >= x * y (no fee, floor rounding)
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from ..kernels.python.cpmm_swap import amount_out_exact_in as _kernel_amount_out
from ..kernels.python.cpmm_swap import swap_exact_in as _kernel_swap_exact_in
from ..kernels.python.lp_math import burn_liquidity as _kernel_burn_liquidity
from ..kernels.python.lp_math import mint_initial as _kernel_mint_initial
from ..kernels.python.lp_math import mint_pro_rata as _kernel_mint_pro_rata
from ..state.balances import Amount
from .errors import InsufficientShares, InvariantViolation, NoLiquidity, ZeroInput

# Fixed-point scale for quoted prices.
PRICE_SCALE = 10**18


class MintMode(Enum):
    """How shares are minted once the pool already holds liquidity."""

    # floor(sqrt(a * b)) of the accepted amounts, for every deposit.
    COMPAT = "COMPAT"
    # min(a * T / reserve_a, b * T / reserve_b), the conventional pro-rata rule.
    PRO_RATA = "PRO_RATA"


def require_amount(name: str, value: Amount) -> None:
    """Reject non-int (including bool) and negative amounts."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


def get_amount_out(amount_in: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
    """
    Output amount for an exact-in swap.

    Formula:
        amount_out = floor(amount_in * reserve_out / (amount_in + reserve_in))

    Raises:
        ZeroInput: If amount_in is zero
        NoLiquidity: If either reserve is zero
    """
    require_amount("amount_in", amount_in)
    require_amount("reserve_in", reserve_in)
    require_amount("reserve_out", reserve_out)
    if amount_in == 0:
        raise ZeroInput("amount_in must be positive")
    if reserve_in == 0 or reserve_out == 0:
        raise NoLiquidity(f"empty reserve: ({reserve_in}, {reserve_out})")
    return _kernel_amount_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)


def get_price(reserve_first: Amount, reserve_second: Amount) -> Amount:
    """
    Price of the first asset in units of the second, scaled by PRICE_SCALE.

    Formula:
        price = floor(reserve_second * PRICE_SCALE / reserve_first)
    """
    require_amount("reserve_first", reserve_first)
    require_amount("reserve_second", reserve_second)
    if reserve_first == 0 or reserve_second == 0:
        raise NoLiquidity(f"empty reserve: ({reserve_first}, {reserve_second})")
    return (reserve_second * PRICE_SCALE) // reserve_first


def quote_amount(amount_a: Amount, reserve_a: Amount, reserve_b: Amount) -> Amount:
    """
    Amount of B worth `amount_a` of A at the current reserve ratio (floor).
    """
    require_amount("amount_a", amount_a)
    require_amount("reserve_a", reserve_a)
    require_amount("reserve_b", reserve_b)
    if amount_a == 0:
        raise ZeroInput("amount_a must be positive")
    if reserve_a == 0 or reserve_b == 0:
        raise NoLiquidity(f"empty reserve: ({reserve_a}, {reserve_b})")
    return (amount_a * reserve_b) // reserve_a


def swap_exact_in(
    reserve_in: Amount,
    reserve_out: Amount,
    amount_in: Amount,
) -> Tuple[Amount, Tuple[Amount, Amount]]:
    """
    Compute the output of an exact-in swap and the post-swap reserves.

    Returns:
        Tuple of (amount_out, (new_reserve_in, new_reserve_out))

    Raises:
        ZeroInput, NoLiquidity: On invalid inputs
        InvariantViolation: If the constant product would decrease
    """
    # Validates and classifies the inputs before the kernel sees them.
    get_amount_out(amount_in, reserve_in, reserve_out)

    res = _kernel_swap_exact_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
    if res.k_after < res.k_before:
        raise InvariantViolation(res.k_before, res.k_after)
    return res.amount_out, (res.new_reserve_in, res.new_reserve_out)


def compute_lp_mint(
    reserve_a: Amount,
    reserve_b: Amount,
    amount_a: Amount,
    amount_b: Amount,
    total_shares: Amount,
    mode: MintMode = MintMode.PRO_RATA,
) -> Amount:
    """
    Compute shares to mint for an accepted deposit.

    For the first deposit (total_shares == 0):
        shares = floor(sqrt(amount_a * amount_b))

    For later deposits the rule depends on `mode`:
        COMPAT:   shares = floor(sqrt(amount_a * amount_b))
        PRO_RATA: shares = min(floor(amount_a * T / reserve_a), floor(amount_b * T / reserve_b))
    """
    for name, v in (
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("amount_a", amount_a),
        ("amount_b", amount_b),
        ("total_shares", total_shares),
    ):
        require_amount(name, v)

    if total_shares == 0 or mode is MintMode.COMPAT:
        return _kernel_mint_initial(amount_a=amount_a, amount_b=amount_b)

    if reserve_a == 0 or reserve_b == 0:
        raise NoLiquidity("cannot mint pro-rata shares against an empty reserve")
    return _kernel_mint_pro_rata(
        amount_a=amount_a,
        amount_b=amount_b,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_shares=total_shares,
    )


def compute_lp_burn(
    shares: Amount,
    reserve_a: Amount,
    reserve_b: Amount,
    total_shares: Amount,
) -> Tuple[Amount, Amount]:
    """
    Compute asset amounts returned for burning `shares`.

    Formula:
        amount_a = floor(shares * reserve_a / total_shares)
        amount_b = floor(shares * reserve_b / total_shares)
    """
    for name, v in (
        ("shares", shares),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("total_shares", total_shares),
    ):
        require_amount(name, v)

    if total_shares == 0:
        raise NoLiquidity("pool has no outstanding shares")
    if shares == 0:
        raise ZeroInput("shares must be positive")
    if shares > total_shares:
        raise InsufficientShares(f"cannot burn more shares than supply: {shares} > {total_shares}")

    res = _kernel_burn_liquidity(
        shares=shares,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_shares=total_shares,
    )
    return res.amount_a_out, res.amount_b_out
