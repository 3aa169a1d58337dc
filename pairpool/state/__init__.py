"""
State types for PairPool
"""

from .balances import BalanceTable
from .lp import ShareTable
from .pools import PoolSnapshot, compute_pool_id

__all__ = [
    "BalanceTable",
    "ShareTable",
    "PoolSnapshot",
    "compute_pool_id",
]
