"""
PairPool: a two-asset constant-product liquidity pool.
"""

from .core.cpmm import PRICE_SCALE, MintMode
from .integration.collaborators import InMemoryCustody, ManualClock, SystemClock
from .integration.config import PoolConfig, load_config
from .integration.ledger import ContributeResult, PoolLedger, SwapResult, WithdrawResult

__version__ = "0.1.0"

__all__ = [
    "PRICE_SCALE",
    "MintMode",
    "InMemoryCustody",
    "ManualClock",
    "SystemClock",
    "PoolConfig",
    "load_config",
    "PoolLedger",
    "ContributeResult",
    "WithdrawResult",
    "SwapResult",
]
