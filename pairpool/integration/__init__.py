"""
Imperative shell: collaborators, configuration, the stateful ledger and snapshot export.
"""

from .collaborators import Clock, Custody, InMemoryCustody, ManualClock, SystemClock
from .config import PoolConfig, config_from_mapping, load_config
from .ledger import ContributeResult, PoolLedger, SwapResult, WithdrawResult

__all__ = [
    "Clock",
    "Custody",
    "InMemoryCustody",
    "ManualClock",
    "SystemClock",
    "PoolConfig",
    "config_from_mapping",
    "load_config",
    "ContributeResult",
    "PoolLedger",
    "SwapResult",
    "WithdrawResult",
]
