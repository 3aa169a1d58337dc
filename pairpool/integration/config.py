"""
Pool configuration.

A pool is described by a small YAML mapping:

    asset_a: "0x11..."
    asset_b: "0x22..."
    mint_mode: PRO_RATA        # or COMPAT
    require_asset_args: false

Environment variables override the file:
- PAIRPOOL_MINT_MODE
- PAIRPOOL_REQUIRE_ASSET_ARGS
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..core.cpmm import MintMode
from ..state.balances import AssetId
from ..state.pools import require_asset_pair


_KNOWN_KEYS = {"asset_a", "asset_b", "mint_mode", "require_asset_args"}


@dataclass(frozen=True)
class PoolConfig:
    asset_a: AssetId
    asset_b: AssetId
    # Share minting rule for deposits into a non-empty pool.
    mint_mode: MintMode = MintMode.PRO_RATA
    # If True, contribute/withdraw callers must restate the asset pair on every call.
    # If False, the pair fixed at construction is used and a restated pair is only checked.
    require_asset_args: bool = False

    def __post_init__(self) -> None:
        require_asset_pair(self.asset_a, self.asset_b)
        if not isinstance(self.mint_mode, MintMode):
            raise TypeError("mint_mode must be a MintMode")


def _bool_env(name: str, *, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return bool(default)
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def parse_mint_mode(value: object) -> MintMode:
    if isinstance(value, MintMode):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError("mint_mode must be a non-empty string")
    tag = value.strip().upper().replace("-", "_")
    try:
        return MintMode(tag)
    except ValueError as exc:
        raise ValueError(f"unsupported mint_mode: {value!r}") from exc


def config_from_mapping(obj: Mapping[str, Any]) -> PoolConfig:
    """Validate a decoded mapping (YAML/JSON) into a PoolConfig."""
    if not isinstance(obj, Mapping):
        raise ValueError("pool config must be a mapping")
    unknown = set(obj.keys()) - _KNOWN_KEYS
    if unknown:
        raise ValueError(f"unknown pool config keys: {sorted(unknown)}")
    for key in ("asset_a", "asset_b"):
        if key not in obj:
            raise ValueError(f"pool config missing {key!r}")

    require_args = obj.get("require_asset_args", False)
    if not isinstance(require_args, bool):
        raise ValueError("require_asset_args must be a bool")

    return PoolConfig(
        asset_a=str(obj["asset_a"]),
        asset_b=str(obj["asset_b"]),
        mint_mode=parse_mint_mode(obj.get("mint_mode", MintMode.PRO_RATA.value)),
        require_asset_args=require_args,
    )


def apply_env_overrides(config: PoolConfig) -> PoolConfig:
    raw_mode = os.environ.get("PAIRPOOL_MINT_MODE", "").strip()
    mint_mode = parse_mint_mode(raw_mode) if raw_mode else config.mint_mode
    require_args = _bool_env("PAIRPOOL_REQUIRE_ASSET_ARGS", default=config.require_asset_args)
    return replace(config, mint_mode=mint_mode, require_asset_args=require_args)


def load_config(path: Union[str, Path], *, env: bool = True, key: Optional[str] = None) -> PoolConfig:
    """
    Load a PoolConfig from a YAML file.

    If `key` is given, the pool mapping is read from that top-level key
    (e.g. the `pool:` block of a simulation scenario).
    """
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if key is not None:
        if not isinstance(obj, dict) or key not in obj:
            raise ValueError(f"config file has no {key!r} section")
        obj = obj[key]
    config = config_from_mapping(obj)
    return apply_env_overrides(config) if env else config
