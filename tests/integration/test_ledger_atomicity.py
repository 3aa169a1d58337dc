# [TESTER] v1

from __future__ import annotations

import threading
from typing import List

import pytest

from pairpool.core.errors import TransferFailed
from pairpool.integration.collaborators import InMemoryCustody, ManualClock
from pairpool.integration.config import PoolConfig
from pairpool.integration.ledger import PoolLedger
from pairpool.state.balances import Account, AssetId, Amount

A = "asset-a"
B = "asset-b"
DEADLINE = 10**12


class FlakyCustody(InMemoryCustody):
    """Fails the n-th transfer after being armed."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_at = 0
        self.calls = 0

    def arm(self, fail_at: int) -> None:
        self.fail_at = fail_at
        self.calls = 0

    def transfer(self, asset: AssetId, sender: Account, receiver: Account, amount: Amount) -> bool:
        self.calls += 1
        if self.calls == self.fail_at:
            return False
        return super().transfer(asset, sender, receiver, amount)


class ExplodingShares(InMemoryCustody):
    def mint_shares(self, recipient: Account, pool_id: str, amount: Amount) -> None:
        raise RuntimeError("share registry offline")


def _state(ledger: PoolLedger, custody: InMemoryCustody):
    return (
        custody.balances.get_all_balances(),
        custody.shares.get_all_balances(),
        ledger.total_shares,
    )


def _flaky_pool() -> tuple:
    custody = FlakyCustody()
    custody.mint("lp", A, 10_000)
    custody.mint("lp", B, 10_000)
    ledger = PoolLedger(PoolConfig(A, B), custody, ManualClock(0))
    ledger.contribute(1000, 2000, 0, 0, DEADLINE, "lp", "lp")
    return ledger, custody


@pytest.mark.parametrize("fail_at", [1, 2])
def test_contribute_rolls_back_on_transfer_failure(fail_at: int) -> None:
    ledger, custody = _flaky_pool()
    before = _state(ledger, custody)
    custody.arm(fail_at)
    with pytest.raises(TransferFailed):
        ledger.contribute(100, 200, 0, 0, DEADLINE, "lp", "lp")
    assert _state(ledger, custody) == before


@pytest.mark.parametrize("fail_at", [1, 2])
def test_withdraw_rolls_back_on_transfer_failure(fail_at: int) -> None:
    ledger, custody = _flaky_pool()
    before = _state(ledger, custody)
    custody.arm(fail_at)
    with pytest.raises(TransferFailed):
        ledger.withdraw(500, 0, 0, DEADLINE, "lp", "lp")
    assert _state(ledger, custody) == before
    assert custody.share_balance("lp", ledger.pool_id) == 1414


@pytest.mark.parametrize("fail_at", [1, 2])
def test_swap_rolls_back_on_transfer_failure(fail_at: int) -> None:
    ledger, custody = _flaky_pool()
    before = _state(ledger, custody)
    custody.arm(fail_at)
    with pytest.raises(TransferFailed):
        ledger.swap_exact_tokens_for_tokens(100, 0, [A, B], DEADLINE, "lp", "lp")
    assert _state(ledger, custody) == before


def test_unexpected_collaborator_error_propagates_and_rolls_back() -> None:
    custody = ExplodingShares()
    custody.mint("lp", A, 1000)
    custody.mint("lp", B, 1000)
    ledger = PoolLedger(PoolConfig(A, B), custody, ManualClock(0))
    with pytest.raises(RuntimeError, match="share registry offline"):
        ledger.contribute(1000, 1000, 0, 0, DEADLINE, "lp", "lp")
    assert custody.balance_of(A, "lp") == 1000
    assert custody.balance_of(B, "lp") == 1000
    assert ledger.total_shares == 0


def test_concurrent_swaps_preserve_conservation() -> None:
    custody = InMemoryCustody()
    custody.mint("lp", A, 1_000_000)
    custody.mint("lp", B, 2_000_000)
    traders = [f"trader-{i}" for i in range(8)]
    for t in traders:
        custody.mint(t, A, 100_000)
        custody.mint(t, B, 100_000)
    ledger = PoolLedger(PoolConfig(A, B), custody, ManualClock(0))
    ledger.contribute(1_000_000, 2_000_000, 0, 0, DEADLINE, "lp", "lp")

    supply_a = custody.balances.total_supply(A)
    supply_b = custody.balances.total_supply(B)
    k0 = ledger.snapshot().constant_product
    errors: List[BaseException] = []
    net_in = {A: 0, B: 0}
    net_lock = threading.Lock()

    def run(trader: str) -> None:
        try:
            for i in range(50):
                path = [A, B] if i % 2 == 0 else [B, A]
                res = ledger.swap_exact_tokens_for_tokens(1000, 0, path, DEADLINE, trader, trader)
                with net_lock:
                    net_in[path[0]] += res.amount_in
                    net_in[path[1]] -= res.amount_out
        except BaseException as exc:  # surfaced through `errors`
            errors.append(exc)

    threads = [threading.Thread(target=run, args=(t,)) for t in traders]
    for th in threads:
        th.start()
    for th in threads:
        th.join()

    assert errors == []
    pool = ledger.snapshot()
    assert custody.balances.total_supply(A) == supply_a
    assert custody.balances.total_supply(B) == supply_b
    assert pool.reserve_a == 1_000_000 + net_in[A]
    assert pool.reserve_b == 2_000_000 + net_in[B]
    assert pool.constant_product >= k0
    assert ledger.total_shares == 1414213
