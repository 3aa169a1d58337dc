# [TESTER] v1

from __future__ import annotations

import pytest

from pairpool.core.errors import InvalidAssetPair
from pairpool.state.balances import BalanceTable
from pairpool.state.canonical import canonical_json_bytes, domain_sep_bytes, encode_str, encode_uvarint
from pairpool.state.lp import ShareTable
from pairpool.state.pools import PoolSnapshot, compute_pool_id


def test_pool_id_is_deterministic_and_order_sensitive() -> None:
    pid = compute_pool_id("USDC", "ETH")
    assert pid == compute_pool_id("USDC", "ETH")
    assert pid.startswith("0x") and len(pid) == 66
    assert pid != compute_pool_id("ETH", "USDC")


def test_pool_id_length_prefix_disambiguates() -> None:
    assert compute_pool_id("ab", "c") != compute_pool_id("a", "bc")


def test_pool_id_rejects_bad_pairs() -> None:
    with pytest.raises(InvalidAssetPair):
        compute_pool_id("A", "A")
    with pytest.raises(TypeError):
        compute_pool_id("", "B")
    with pytest.raises(TypeError):
        compute_pool_id("A", 7)  # type: ignore[arg-type]


def test_snapshot_validation_and_reserve_lookup() -> None:
    pool = PoolSnapshot(compute_pool_id("A", "B"), "A", "B", 1000, 2000, 1414)
    assert pool.reserve_of("A") == 1000
    assert pool.reserve_of("B") == 2000
    assert pool.constant_product == 2_000_000
    assert not pool.is_empty
    with pytest.raises(InvalidAssetPair):
        pool.reserve_of("C")
    with pytest.raises(ValueError):
        PoolSnapshot("p", "A", "B", -1, 0, 0)
    with pytest.raises(ValueError):
        PoolSnapshot("p", "A", "B", 0, 0, -1)


def test_balance_table_is_sparse_and_non_negative() -> None:
    t = BalanceTable()
    t.add("alice", "A", 10)
    t.subtract("alice", "A", 4)
    assert t.get("alice", "A") == 6
    assert t.get("bob", "A") == 0
    with pytest.raises(ValueError, match="Insufficient balance"):
        t.subtract("alice", "A", 7)
    t.subtract("alice", "A", 6)
    assert t.get_all_balances() == {}


def test_balance_table_queries() -> None:
    t = BalanceTable()
    t.set("alice", "A", 5)
    t.set("bob", "A", 3)
    t.set("bob", "B", 7)
    assert t.total_supply("A") == 8
    assert t.get_balances_for_asset("A") == {"alice": 5, "bob": 3}
    with pytest.raises(ValueError):
        t.set("alice", "A", -1)


def test_share_table_is_scoped_per_pool() -> None:
    s = ShareTable()
    s.add("lp", "pool-1", 10)
    s.add("lp2", "pool-1", 5)
    s.add("lp", "pool-2", 7)
    assert s.total("pool-1") == 15
    assert s.total("pool-2") == 7
    assert s.get("lp2", "pool-2") == 0
    with pytest.raises(ValueError):
        s.subtract("lp2", "pool-1", 6)
    with pytest.raises(ValueError):
        s.subtract("lp", "pool-2", 8)
    s.subtract("lp2", "pool-1", 5)
    assert s.get_all_balances() == {("lp", "pool-1"): 10, ("lp", "pool-2"): 7}


def test_canonical_encoding_primitives() -> None:
    assert canonical_json_bytes({"b": 1, "a": [2, 3]}) == b'{"a":[2,3],"b":1}'
    with pytest.raises(TypeError):
        canonical_json_bytes({"x": 1.5})
    assert encode_uvarint(300) == b"\xac\x02"
    assert encode_str("ab") == b"\x02ab"
    assert domain_sep_bytes("pool_id") == b"pairpool:pool_id:v1\x00"
