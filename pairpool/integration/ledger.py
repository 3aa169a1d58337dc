"""
Pool ledger: the stateful shell around the pure liquidity and pricing core.

Each public operation runs as one critical section on the pool:
    read clock -> validate -> snapshot reserves -> compute -> transfers/share mutation -> commit

- Reserves are never cached; they are read from the custody collaborator on every call.
- Every validation failure is raised before any collaborator mutation.
- Collaborator mutations run inside `custody.atomic()`, and the ledger's own
  `total_shares` counter is committed only after that block succeeds.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..core import cpmm
from ..core.deadline import require_not_expired
from ..core.errors import InvalidAssetPair, InvalidPath, OutputBelowMinimum, PoolError, TransferFailed, ZeroInput
from ..core.liquidity import add_liquidity, remove_liquidity
from ..state.balances import Account, AssetId, Amount
from ..state.pools import PoolSnapshot, compute_pool_id
from .collaborators import Clock, Custody, SystemClock
from .config import PoolConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContributeResult:
    amount_a: Amount
    amount_b: Amount
    shares: Amount


@dataclass(frozen=True)
class WithdrawResult:
    amount_a: Amount
    amount_b: Amount


@dataclass(frozen=True)
class SwapResult:
    amount_in: Amount
    amount_out: Amount


class PoolLedger:
    """
    Two-asset constant-product pool.

    The asset pair is fixed at construction. Callers may restate it on
    contribute/withdraw (or must, when `config.require_asset_args` is set) and a
    mismatch fails with InvalidAssetPair.
    """

    def __init__(
        self,
        config: PoolConfig,
        custody: Custody,
        clock: Optional[Clock] = None,
        *,
        total_shares: Amount = 0,
    ) -> None:
        cpmm.require_amount("total_shares", total_shares)
        self.config = config
        self.pool_id: Account = compute_pool_id(config.asset_a, config.asset_b)
        self._custody = custody
        self._clock: Clock = clock if clock is not None else SystemClock()
        self._total_shares = total_shares
        self._lock = threading.RLock()

    @property
    def asset_a(self) -> AssetId:
        return self.config.asset_a

    @property
    def asset_b(self) -> AssetId:
        return self.config.asset_b

    @property
    def total_shares(self) -> Amount:
        with self._lock:
            return self._total_shares

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def snapshot(self) -> PoolSnapshot:
        with self._lock:
            return self._snapshot()

    def get_price(self, asset_first: AssetId, asset_second: AssetId) -> Amount:
        """Price of `asset_first` in units of `asset_second`, scaled by PRICE_SCALE."""
        with self._lock:
            if {asset_first, asset_second} != {self.asset_a, self.asset_b}:
                raise InvalidAssetPair(
                    f"({asset_first!r}, {asset_second!r}) is not this pool's pair"
                )
            pool = self._snapshot()
            return cpmm.get_price(pool.reserve_of(asset_first), pool.reserve_of(asset_second))

    def get_amount_out(self, amount_in: Amount, path: Sequence[AssetId]) -> Amount:
        """Quote an exact-in swap along `path` against the live reserves."""
        with self._lock:
            asset_in, asset_out = self._resolve_path(path)
            pool = self._snapshot()
            return cpmm.get_amount_out(amount_in, pool.reserve_of(asset_in), pool.reserve_of(asset_out))

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def contribute(
        self,
        amount_a_desired: Amount,
        amount_b_desired: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        deadline: int,
        depositor: Account,
        recipient: Account,
        *,
        asset_a: Optional[AssetId] = None,
        asset_b: Optional[AssetId] = None,
    ) -> ContributeResult:
        """
        Deposit both assets along the current reserve ratio and mint shares to `recipient`.
        """
        with self._lock:
            require_not_expired(deadline, self._clock.now())
            self._check_asset_args(asset_a, asset_b)

            pool = self._snapshot()
            amount_a, amount_b, shares = add_liquidity(
                pool,
                amount_a_desired,
                amount_b_desired,
                amount_a_min,
                amount_b_min,
                self.config.mint_mode,
            )

            try:
                with self._custody.atomic():
                    self._transfer(self.asset_a, depositor, self.pool_id, amount_a)
                    self._transfer(self.asset_b, depositor, self.pool_id, amount_b)
                    self._custody.mint_shares(recipient, self.pool_id, shares)
            except PoolError as exc:
                logger.warning("contribute rolled back for %s: %s", depositor, exc)
                raise

            self._total_shares += shares
            logger.info(
                "contribute: depositor=%s recipient=%s amounts=(%d, %d) shares=%d total_shares=%d",
                depositor,
                recipient,
                amount_a,
                amount_b,
                shares,
                self._total_shares,
            )
            return ContributeResult(amount_a=amount_a, amount_b=amount_b, shares=shares)

    def withdraw(
        self,
        shares: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        deadline: int,
        holder: Account,
        recipient: Account,
        *,
        asset_a: Optional[AssetId] = None,
        asset_b: Optional[AssetId] = None,
    ) -> WithdrawResult:
        """
        Burn `shares` from `holder` and pay the proportional reserves to `recipient`.
        """
        with self._lock:
            require_not_expired(deadline, self._clock.now())
            self._check_asset_args(asset_a, asset_b)

            pool = self._snapshot()
            amount_a, amount_b = remove_liquidity(pool, shares, amount_a_min, amount_b_min)

            try:
                with self._custody.atomic():
                    self._custody.burn_shares(holder, self.pool_id, shares)
                    self._transfer(self.asset_a, self.pool_id, recipient, amount_a)
                    self._transfer(self.asset_b, self.pool_id, recipient, amount_b)
            except PoolError as exc:
                logger.warning("withdraw rolled back for %s: %s", holder, exc)
                raise

            self._total_shares -= shares
            logger.info(
                "withdraw: holder=%s recipient=%s shares=%d amounts=(%d, %d) total_shares=%d",
                holder,
                recipient,
                shares,
                amount_a,
                amount_b,
                self._total_shares,
            )
            return WithdrawResult(amount_a=amount_a, amount_b=amount_b)

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: Amount,
        amount_out_min: Amount,
        path: Sequence[AssetId],
        deadline: int,
        sender: Account,
        recipient: Account,
    ) -> SwapResult:
        """
        Sell exactly `amount_in` of path[0] for path[1], paying at least `amount_out_min`.
        """
        with self._lock:
            require_not_expired(deadline, self._clock.now())
            asset_in, asset_out = self._resolve_path(path)
            cpmm.require_amount("amount_in", amount_in)
            cpmm.require_amount("amount_out_min", amount_out_min)
            if amount_in == 0:
                raise ZeroInput("amount_in must be positive")

            pool = self._snapshot()
            amount_out, _ = cpmm.swap_exact_in(
                pool.reserve_of(asset_in),
                pool.reserve_of(asset_out),
                amount_in,
            )
            if amount_out < amount_out_min:
                raise OutputBelowMinimum(f"amount_out ({amount_out}) < amount_out_min ({amount_out_min})")

            try:
                with self._custody.atomic():
                    self._transfer(asset_in, sender, self.pool_id, amount_in)
                    self._transfer(asset_out, self.pool_id, recipient, amount_out)
            except PoolError as exc:
                logger.warning("swap rolled back for %s: %s", sender, exc)
                raise

            logger.info(
                "swap: sender=%s recipient=%s %s->%s in=%d out=%d",
                sender,
                recipient,
                asset_in,
                asset_out,
                amount_in,
                amount_out,
            )
            return SwapResult(amount_in=amount_in, amount_out=amount_out)

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(
            pool_id=self.pool_id,
            asset_a=self.asset_a,
            asset_b=self.asset_b,
            reserve_a=self._custody.balance_of(self.asset_a, self.pool_id),
            reserve_b=self._custody.balance_of(self.asset_b, self.pool_id),
            total_shares=self._total_shares,
        )

    def _check_asset_args(self, asset_a: Optional[AssetId], asset_b: Optional[AssetId]) -> None:
        if asset_a is None and asset_b is None:
            if self.config.require_asset_args:
                raise InvalidAssetPair("asset_a and asset_b must be supplied for this pool")
            return
        if (asset_a, asset_b) != (self.asset_a, self.asset_b):
            raise InvalidAssetPair(
                f"expected ({self.asset_a!r}, {self.asset_b!r}), got ({asset_a!r}, {asset_b!r})"
            )

    def _resolve_path(self, path: Sequence[AssetId]) -> Tuple[AssetId, AssetId]:
        if isinstance(path, str) or len(path) != 2:
            raise InvalidPath("path must contain exactly two assets")
        asset_in, asset_out = path[0], path[1]
        if asset_in == asset_out or {asset_in, asset_out} != {self.asset_a, self.asset_b}:
            raise InvalidPath(f"path ({asset_in!r}, {asset_out!r}) does not match this pool")
        return asset_in, asset_out

    def _transfer(self, asset: AssetId, sender: Account, receiver: Account, amount: Amount) -> None:
        if not self._custody.transfer(asset, sender, receiver, amount):
            raise TransferFailed(f"transfer of {amount} {asset} from {sender} to {receiver} failed")

    def __repr__(self) -> str:
        return f"PoolLedger(pool_id={self.pool_id[:16]}..., assets=({self.asset_a}, {self.asset_b}))"
