"""
Pool identity and snapshot types.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.errors import InvalidAssetPair
from .balances import Account, AssetId, Amount
from .canonical import domain_sep_bytes, encode_str, sha256_hex


def require_asset_pair(asset_a: AssetId, asset_b: AssetId) -> None:
    """Validate a pool's asset pair: two distinct non-empty strings."""
    for name, asset in (("asset_a", asset_a), ("asset_b", asset_b)):
        if not isinstance(asset, str) or not asset:
            raise TypeError(f"{name} must be a non-empty string")
    if asset_a == asset_b:
        raise InvalidAssetPair(f"pool assets must differ: {asset_a!r}")


def compute_pool_id(asset_a: AssetId, asset_b: AssetId) -> Account:
    """
    Deterministically compute the custody account for the pool (asset_a, asset_b).

    The pair order is canonical as given, so (A, B) and (B, A) are different pools:
        pool_id = H(domain_sep("pool_id") || len(asset_a) || asset_a || len(asset_b) || asset_b)
    """
    require_asset_pair(asset_a, asset_b)
    return sha256_hex(domain_sep_bytes("pool_id") + encode_str(asset_a) + encode_str(asset_b))


@dataclass(frozen=True)
class PoolSnapshot:
    """
    Consistent view of a pool at a single instant.

    Attributes:
        pool_id: Custody account holding the reserves
        asset_a: First asset identifier (canonical position A)
        asset_b: Second asset identifier (canonical position B)
        reserve_a: Custody balance of asset_a
        reserve_b: Custody balance of asset_b
        total_shares: Outstanding pool shares
    """
    pool_id: Account
    asset_a: AssetId
    asset_b: AssetId
    reserve_a: Amount
    reserve_b: Amount
    total_shares: Amount

    def __post_init__(self):
        require_asset_pair(self.asset_a, self.asset_b)
        if self.reserve_a < 0 or self.reserve_b < 0:
            raise ValueError(
                f"Reserves must be non-negative: ({self.reserve_a}, {self.reserve_b})"
            )
        if self.total_shares < 0:
            raise ValueError(f"Total shares must be non-negative: {self.total_shares}")

    def reserve_of(self, asset: AssetId) -> Amount:
        """
        Get reserve for a specific asset.

        Raises:
            InvalidAssetPair: If asset is not in this pool
        """
        if asset == self.asset_a:
            return self.reserve_a
        if asset == self.asset_b:
            return self.reserve_b
        raise InvalidAssetPair(f"Asset {asset!r} not in pool {self.pool_id}")

    @property
    def constant_product(self) -> int:
        """k = reserve_a * reserve_b."""
        return self.reserve_a * self.reserve_b

    @property
    def is_empty(self) -> bool:
        return self.total_shares == 0

    def __repr__(self) -> str:
        return (
            f"PoolSnapshot(pool_id={self.pool_id[:16]}..., "
            f"assets=({self.asset_a}, {self.asset_b}), "
            f"reserves=({self.reserve_a}, {self.reserve_b}), "
            f"total_shares={self.total_shares})"
        )
