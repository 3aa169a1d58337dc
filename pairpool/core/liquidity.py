"""
Liquidity planning: how much of a contribution is accepted, and how much a
withdrawal redeems.

Both functions are pure. They take a `PoolSnapshot` read by the caller and
return exact amounts; the caller executes the transfers and share mutations.
"""

from __future__ import annotations

import logging
from typing import Tuple

from ..kernels.python.lp_math import optimal_liquidity
from ..state.balances import Amount
from ..state.pools import PoolSnapshot
from .cpmm import MintMode, compute_lp_burn, compute_lp_mint, require_amount
from .errors import BelowMinimum, InsufficientA, InsufficientB, NoLiquidity, ZeroInput

logger = logging.getLogger(__name__)


def add_liquidity(
    pool: PoolSnapshot,
    amount_a_desired: Amount,
    amount_b_desired: Amount,
    amount_a_min: Amount,
    amount_b_min: Amount,
    mode: MintMode = MintMode.PRO_RATA,
) -> Tuple[Amount, Amount, Amount]:
    """
    Plan a contribution to the pool.

    Empty pool (total_shares == 0): the desired amounts are accepted as-is and
    floor(sqrt(a * b)) shares are minted.

    Otherwise the desired amounts are fitted onto the reserve ratio:
        b_opt = floor(a_desired * reserve_b / reserve_a)
        if b_opt <= b_desired: accept (a_desired, b_opt), require b_opt >= b_min
        else: a_opt = floor(b_desired * reserve_a / reserve_b),
              accept (a_opt, b_desired), require a_opt >= a_min

    Returns:
        Tuple of (amount_a_used, amount_b_used, shares_minted)

    Raises:
        ZeroInput: If either desired amount is zero
        NoLiquidity: If shares exist but a reserve is empty
        InsufficientA, InsufficientB, BelowMinimum: On slippage-guard violations
        BelowMinimum: If the accepted amounts would mint zero shares
    """
    for name, v in (
        ("amount_a_desired", amount_a_desired),
        ("amount_b_desired", amount_b_desired),
        ("amount_a_min", amount_a_min),
        ("amount_b_min", amount_b_min),
    ):
        require_amount(name, v)
    if amount_a_desired == 0 or amount_b_desired == 0:
        raise ZeroInput(f"Desired amounts must be positive: ({amount_a_desired}, {amount_b_desired})")

    if pool.total_shares == 0:
        amount_a_used = amount_a_desired
        amount_b_used = amount_b_desired
    else:
        if pool.reserve_a == 0 or pool.reserve_b == 0:
            raise NoLiquidity(
                f"pool has {pool.total_shares} shares but an empty reserve: ({pool.reserve_a}, {pool.reserve_b})"
            )
        opt = optimal_liquidity(
            reserve_a=pool.reserve_a,
            reserve_b=pool.reserve_b,
            amount_a_desired=amount_a_desired,
            amount_b_desired=amount_b_desired,
        )
        amount_a_used = opt.amount_a_used
        amount_b_used = opt.amount_b_used
        if opt.a_side_fixed and amount_b_used < amount_b_min:
            raise InsufficientB(f"amount_b_optimal ({amount_b_used}) < amount_b_min ({amount_b_min})")
        if not opt.a_side_fixed and amount_a_used < amount_a_min:
            raise InsufficientA(f"amount_a_optimal ({amount_a_used}) < amount_a_min ({amount_a_min})")

    if amount_a_used < amount_a_min or amount_b_used < amount_b_min:
        raise BelowMinimum(
            f"accepted ({amount_a_used}, {amount_b_used}) below minimum ({amount_a_min}, {amount_b_min})"
        )

    shares = compute_lp_mint(
        pool.reserve_a,
        pool.reserve_b,
        amount_a_used,
        amount_b_used,
        pool.total_shares,
        mode,
    )
    if shares == 0:
        raise BelowMinimum(f"contribution ({amount_a_used}, {amount_b_used}) mints zero shares")
    logger.debug(
        "planned contribution: used=(%d, %d) shares=%d mode=%s",
        amount_a_used,
        amount_b_used,
        shares,
        mode.value,
    )
    return amount_a_used, amount_b_used, shares


def remove_liquidity(
    pool: PoolSnapshot,
    shares: Amount,
    amount_a_min: Amount,
    amount_b_min: Amount,
) -> Tuple[Amount, Amount]:
    """
    Plan a withdrawal from the pool.

    Outputs:
        amount_a_out = floor(shares * reserve_a / total_shares)
        amount_b_out = floor(shares * reserve_b / total_shares)

    Raises:
        NoLiquidity: If no shares are outstanding
        ZeroInput: If shares is zero
        InsufficientShares: If shares exceeds total_shares
        BelowMinimum: If either output is below its minimum
    """
    require_amount("amount_a_min", amount_a_min)
    require_amount("amount_b_min", amount_b_min)

    amount_a_out, amount_b_out = compute_lp_burn(
        shares,
        pool.reserve_a,
        pool.reserve_b,
        pool.total_shares,
    )

    if amount_a_out < amount_a_min:
        raise BelowMinimum(f"amount_a_out ({amount_a_out}) < amount_a_min ({amount_a_min})")
    if amount_b_out < amount_b_min:
        raise BelowMinimum(f"amount_b_out ({amount_b_out}) < amount_b_min ({amount_b_min})")

    return amount_a_out, amount_b_out
