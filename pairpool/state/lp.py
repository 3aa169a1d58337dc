"""
Pool share balance tracking.

Shares are the fungible claim on one pool's reserves. They are scoped per
pool_id, so several pools can share one custody without their shares mixing,
and they are tracked apart from asset balances.
"""

from __future__ import annotations

from typing import Dict, Tuple

from .balances import Account, Amount

# Custody account of the pool (see `compute_pool_id`).
PoolId = str


class ShareTable:
    """
    Share balance table mapping (holder, pool_id) -> share amount.

    Notes:
    - Share balances are always non-negative.
    - Zero balances are omitted to keep the table sparse.
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[Account, PoolId], Amount] = {}

    def get(self, holder: Account, pool_id: PoolId) -> Amount:
        """Get shares of `pool_id` held by `holder`. Returns 0 if not found."""
        return self._balances.get((holder, pool_id), 0)

    def set(self, holder: Account, pool_id: PoolId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Share balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((holder, pool_id), None)
        else:
            self._balances[(holder, pool_id)] = amount

    def add(self, holder: Account, pool_id: PoolId, delta: int) -> None:
        """Add delta to a share balance (delta may be negative)."""
        current = self.get(holder, pool_id)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient share balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(holder, pool_id, new_balance)

    def subtract(self, holder: Account, pool_id: PoolId, delta: Amount) -> None:
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(holder, pool_id, -delta)

    def total(self, pool_id: PoolId) -> Amount:
        """Outstanding shares of one pool."""
        return sum(amount for (_, pid), amount in self._balances.items() if pid == pool_id)

    def get_all_balances(self) -> Dict[Tuple[Account, PoolId], Amount]:
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"ShareTable({len(self._balances)} entries)"
