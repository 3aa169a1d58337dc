"""
Pool snapshot encoding.

Goals:
- Deterministic JSON serialization for logging, diffing and hashing.
- Round-trippable into `PoolSnapshot`.
- Explicit versioning.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from ..state.canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex
from ..state.pools import PoolSnapshot
from .collaborators import InMemoryCustody


POOL_SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def snapshot_to_dict(pool: PoolSnapshot) -> Dict[str, Any]:
    return {
        "version": POOL_SNAPSHOT_VERSION,
        "pool_id": pool.pool_id,
        "asset_a": pool.asset_a,
        "asset_b": pool.asset_b,
        "reserve_a": int(pool.reserve_a),
        "reserve_b": int(pool.reserve_b),
        "total_shares": int(pool.total_shares),
    }


def snapshot_from_dict(obj: Mapping[str, Any]) -> PoolSnapshot:
    if not isinstance(obj, Mapping):
        raise TypeError("snapshot must be a mapping")
    version = _require_int(obj.get("version"), name="version")
    if version != POOL_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")
    return PoolSnapshot(
        pool_id=_require_str(obj.get("pool_id"), name="pool_id"),
        asset_a=_require_str(obj.get("asset_a"), name="asset_a"),
        asset_b=_require_str(obj.get("asset_b"), name="asset_b"),
        reserve_a=_require_int(obj.get("reserve_a"), name="reserve_a"),
        reserve_b=_require_int(obj.get("reserve_b"), name="reserve_b"),
        total_shares=_require_int(obj.get("total_shares"), name="total_shares"),
    )


def snapshot_json(pool: PoolSnapshot) -> str:
    return canonical_json_bytes(snapshot_to_dict(pool)).decode("utf-8")


def snapshot_commitment_hex(pool: PoolSnapshot) -> str:
    payload = domain_sep_bytes("pool_snapshot", version=POOL_SNAPSHOT_VERSION) + canonical_json_bytes(
        snapshot_to_dict(pool)
    )
    return sha256_hex(payload)


def custody_to_dict(custody: InMemoryCustody) -> Dict[str, Any]:
    """Sorted balance and share entries for an in-memory custody."""
    balances_entries = [
        {"account": acct, "asset": asset, "amount": int(amount)}
        for (acct, asset), amount in custody.balances.get_all_balances().items()
    ]
    balances_entries.sort(key=lambda e: (e["account"], e["asset"]))

    share_entries = [
        {"holder": holder, "pool_id": pool_id, "amount": int(amount)}
        for (holder, pool_id), amount in custody.shares.get_all_balances().items()
    ]
    share_entries.sort(key=lambda e: (e["holder"], e["pool_id"]))

    return {"balances": balances_entries, "shares": share_entries}
