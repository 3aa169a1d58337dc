"""
Collaborator contracts consumed by `PoolLedger`, plus in-memory implementations.

The ledger never stores reserves or per-holder shares itself. It reads custody
balances, requests transfers, and asks for shares to be minted or burned through
these interfaces. `InMemoryCustody` is the reference implementation used by the
simulator and the tests.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import ContextManager, Iterator, List, Optional, Protocol, Tuple

from ..core.errors import InsufficientShares
from ..state.balances import Account, AssetId, Amount, BalanceTable
from ..state.lp import PoolId, ShareTable

# (table, owner, asset or pool_id, delta) recorded by InMemoryCustody.atomic()
_JournalEntry = Tuple[str, Account, str, int]


class BalanceSource(Protocol):
    def balance_of(self, asset: AssetId, account: Account) -> Amount:
        """Authoritative custody balance of `asset` held by `account`."""
        ...


class TransferAgent(Protocol):
    def transfer(self, asset: AssetId, sender: Account, receiver: Account, amount: Amount) -> bool:
        """Move `amount` of `asset`; return False if the transfer cannot be made."""
        ...


class ShareLedger(Protocol):
    def mint_shares(self, recipient: Account, pool_id: PoolId, amount: Amount) -> None:
        ...

    def burn_shares(self, holder: Account, pool_id: PoolId, amount: Amount) -> None:
        """Burn shares of `pool_id`; raises InsufficientShares if `holder` holds fewer than `amount`."""
        ...


class Custody(BalanceSource, TransferAgent, ShareLedger, Protocol):
    """Everything the ledger needs from its host, plus a transaction scope."""

    def atomic(self) -> ContextManager[None]:
        """Scope whose effects are discarded if the block raises."""
        ...


class Clock(Protocol):
    def now(self) -> int:
        """Current time in whole seconds."""
        ...


class SystemClock:
    """Wall-clock time source."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Deterministic time source for tests and simulation."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"start must be non-negative: {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"cannot move the clock backwards: {seconds}")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> None:
        if timestamp < self._now:
            raise ValueError(f"cannot move the clock backwards: {timestamp} < {self._now}")
        self._now = timestamp


class InMemoryCustody:
    """
    Asset balances and pool shares held in memory.

    One custody may back several pools. A re-entrant lock serialises every
    read and mutation, and is held for the whole of an `atomic()` block.

    `atomic()` keeps an undo journal of the deltas applied directly inside the
    block and reverses only those when the block raises. A nested `atomic()`
    block commits on exit, so a rollback never erases another operation's
    committed effects.
    """

    def __init__(self, balances: Optional[BalanceTable] = None, shares: Optional[ShareTable] = None) -> None:
        self.balances = balances if balances is not None else BalanceTable()
        self.shares = shares if shares is not None else ShareTable()
        self._lock = threading.RLock()
        self._journals: List[List[_JournalEntry]] = []

    def balance_of(self, asset: AssetId, account: Account) -> Amount:
        with self._lock:
            return self.balances.get(account, asset)

    def transfer(self, asset: AssetId, sender: Account, receiver: Account, amount: Amount) -> bool:
        if amount < 0:
            raise ValueError(f"transfer amount must be non-negative: {amount}")
        with self._lock:
            if self.balances.get(sender, asset) < amount:
                return False
            self._apply_balance(sender, asset, -amount)
            self._apply_balance(receiver, asset, amount)
            return True

    def mint(self, account: Account, asset: AssetId, amount: Amount) -> None:
        """Credit `account` out of thin air (test/simulation faucet)."""
        if amount < 0:
            raise ValueError(f"mint amount must be non-negative: {amount}")
        with self._lock:
            self._apply_balance(account, asset, amount)

    def mint_shares(self, recipient: Account, pool_id: PoolId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"share amount must be non-negative: {amount}")
        with self._lock:
            self._apply_shares(recipient, pool_id, amount)

    def burn_shares(self, holder: Account, pool_id: PoolId, amount: Amount) -> None:
        with self._lock:
            held = self.shares.get(holder, pool_id)
            if held < amount:
                raise InsufficientShares(f"holder {holder!r} has {held} shares of {pool_id}, cannot burn {amount}")
            self._apply_shares(holder, pool_id, -amount)

    def share_balance(self, holder: Account, pool_id: PoolId) -> Amount:
        with self._lock:
            return self.shares.get(holder, pool_id)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            journal: List[_JournalEntry] = []
            self._journals.append(journal)
            try:
                yield
            except BaseException:
                self._journals.pop()
                self._undo(journal)
                raise
            else:
                self._journals.pop()

    # Internals (caller holds the lock)

    def _apply_balance(self, account: Account, asset: AssetId, delta: int) -> None:
        self.balances.add(account, asset, delta)
        if self._journals:
            self._journals[-1].append(("balance", account, asset, delta))

    def _apply_shares(self, holder: Account, pool_id: PoolId, delta: int) -> None:
        self.shares.add(holder, pool_id, delta)
        if self._journals:
            self._journals[-1].append(("shares", holder, pool_id, delta))

    def _undo(self, journal: List[_JournalEntry]) -> None:
        for table, owner, key, delta in reversed(journal):
            if table == "balance":
                self.balances.add(owner, key, -delta)
            else:
                self.shares.add(owner, key, -delta)

    def __repr__(self) -> str:
        return f"InMemoryCustody({self.balances!r}, {self.shares!r})"
