"""
Core pool algorithms
"""

from .cpmm import (
    PRICE_SCALE,
    MintMode,
    get_amount_out,
    get_price,
    quote_amount,
    swap_exact_in,
    compute_lp_mint,
    compute_lp_burn,
)
from .deadline import is_expired, require_not_expired
from .errors import (
    PoolError,
    Expired,
    InvalidPath,
    InvalidAssetPair,
    InsufficientA,
    InsufficientB,
    BelowMinimum,
    OutputBelowMinimum,
    NoLiquidity,
    ZeroInput,
    InsufficientShares,
    TransferFailed,
    InvariantViolation,
)
from .liquidity import add_liquidity, remove_liquidity

__all__ = [
    "PRICE_SCALE",
    "MintMode",
    "get_amount_out",
    "get_price",
    "quote_amount",
    "swap_exact_in",
    "compute_lp_mint",
    "compute_lp_burn",
    "is_expired",
    "require_not_expired",
    "PoolError",
    "Expired",
    "InvalidPath",
    "InvalidAssetPair",
    "InsufficientA",
    "InsufficientB",
    "BelowMinimum",
    "OutputBelowMinimum",
    "NoLiquidity",
    "ZeroInput",
    "InsufficientShares",
    "TransferFailed",
    "InvariantViolation",
    "add_liquidity",
    "remove_liquidity",
]
