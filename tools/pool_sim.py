#!/usr/bin/env python3
"""
Replay a YAML scenario against an in-memory pool.

Scenario format:

    pool:
      asset_a: USDC
      asset_b: WETH
      mint_mode: PRO_RATA
    start_time: 1000
    balances:
      - {account: alice, asset: USDC, amount: 10000}
    steps:
      - {op: contribute, account: alice, amount_a: 1000, amount_b: 2000}
      - {op: swap, account: bob, amount_in: 100, path: [USDC, WETH], min_out: 181}
      - {op: withdraw, account: alice, shares: 100}
      - {op: price, base: USDC, quote: WETH}
      - {op: advance, seconds: 120}

Every mutating step gets `deadline = now + ttl` (ttl defaults to 60) unless an
explicit `deadline` is given. A step may carry `expect_error: <ErrorName>`; the
run fails if that error is not raised.

Example:
  python3 tools/pool_sim.py scenario.yaml --verbose
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from pairpool.core.cpmm import MintMode
from pairpool.core.errors import PoolError
from pairpool.integration.collaborators import InMemoryCustody, ManualClock
from pairpool.integration.config import (
    PoolConfig,
    apply_env_overrides,
    config_from_mapping,
    load_config,
    parse_mint_mode,
)
from pairpool.integration.ledger import PoolLedger
from pairpool.integration.snapshot import custody_to_dict, snapshot_to_dict


DEFAULT_TTL = 60


class ScenarioError(Exception):
    pass


def _int_field(step: Dict[str, Any], name: str, default: Optional[int] = None) -> int:
    value = step.get(name, default)
    if value is None:
        raise ScenarioError(f"step {step.get('op')!r} missing {name!r}")
    if not isinstance(value, int) or isinstance(value, bool):
        raise ScenarioError(f"step {step.get('op')!r} field {name!r} must be an int")
    return value


def _deadline(step: Dict[str, Any], clock: ManualClock) -> int:
    if "deadline" in step:
        return _int_field(step, "deadline")
    return clock.now() + _int_field(step, "ttl", DEFAULT_TTL)


def _fund(custody: InMemoryCustody, entries: Any) -> None:
    if not isinstance(entries, list):
        raise ScenarioError("'balances' must be a list")
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ScenarioError(f"balances[{idx}] must be a mapping")
        for key in ("account", "asset"):
            if key not in entry:
                raise ScenarioError(f"balances[{idx}] missing {key!r}")
        amount = entry.get("amount")
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ScenarioError(f"balances[{idx}] amount must be a non-negative int")
        custody.mint(str(entry["account"]), str(entry["asset"]), amount)


def _run_step(ledger: PoolLedger, clock: ManualClock, step: Dict[str, Any]) -> Dict[str, Any]:
    op = step.get("op")
    if op == "contribute":
        account = str(step["account"])
        res = ledger.contribute(
            _int_field(step, "amount_a"),
            _int_field(step, "amount_b"),
            _int_field(step, "min_a", 0),
            _int_field(step, "min_b", 0),
            _deadline(step, clock),
            account,
            str(step.get("recipient", account)),
        )
        return {"amount_a": res.amount_a, "amount_b": res.amount_b, "shares": res.shares}
    if op == "withdraw":
        account = str(step["account"])
        res = ledger.withdraw(
            _int_field(step, "shares"),
            _int_field(step, "min_a", 0),
            _int_field(step, "min_b", 0),
            _deadline(step, clock),
            account,
            str(step.get("recipient", account)),
        )
        return {"amount_a": res.amount_a, "amount_b": res.amount_b}
    if op == "swap":
        account = str(step["account"])
        path = step.get("path")
        if not isinstance(path, list):
            raise ScenarioError("swap step requires a 'path' list")
        res = ledger.swap_exact_tokens_for_tokens(
            _int_field(step, "amount_in"),
            _int_field(step, "min_out", 0),
            [str(p) for p in path],
            _deadline(step, clock),
            account,
            str(step.get("recipient", account)),
        )
        return {"amount_in": res.amount_in, "amount_out": res.amount_out}
    if op == "price":
        return {"price": ledger.get_price(str(step["base"]), str(step["quote"]))}
    if op == "advance":
        return {"now": clock.advance(_int_field(step, "seconds"))}
    raise ScenarioError(f"unknown op: {op!r}")


def run_scenario(scenario: Dict[str, Any], *, mint_mode: Optional[MintMode] = None) -> List[Dict[str, Any]]:
    """Execute a decoded scenario and return one record per step."""
    if not isinstance(scenario, dict) or "pool" not in scenario:
        raise ScenarioError("scenario must be a mapping with a 'pool' section")
    config = apply_env_overrides(config_from_mapping(scenario["pool"]))
    return _run(config, scenario, mint_mode=mint_mode)


def _run(config: PoolConfig, scenario: Dict[str, Any], *, mint_mode: Optional[MintMode]) -> List[Dict[str, Any]]:
    if mint_mode is not None:
        config = replace(config, mint_mode=mint_mode)
    custody = InMemoryCustody()
    clock = ManualClock(int(scenario.get("start_time", 0)))
    ledger = PoolLedger(config, custody, clock)

    _fund(custody, scenario.get("balances") or [])

    records: List[Dict[str, Any]] = []
    for idx, step in enumerate(scenario.get("steps") or []):
        if not isinstance(step, dict):
            raise ScenarioError(f"step {idx} must be a mapping")
        expected = step.get("expect_error")
        record: Dict[str, Any] = {"step": idx, "op": step.get("op")}
        try:
            record["result"] = _run_step(ledger, clock, step)
        except PoolError as exc:
            if expected != type(exc).__name__:
                raise
            record["error"] = type(exc).__name__
        else:
            if expected is not None:
                raise ScenarioError(f"step {idx}: expected {expected}, but the step succeeded")
        record["pool"] = snapshot_to_dict(ledger.snapshot())
        records.append(record)

    records.append({"final": custody_to_dict(custody)})
    return records


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Replay a YAML scenario against an in-memory constant-product pool.")
    p.add_argument("scenario", type=Path, help="Path to scenario YAML")
    p.add_argument("--mint-mode", default=None, help="Override the pool's mint mode (COMPAT or PRO_RATA)")
    p.add_argument("--verbose", action="store_true", help="Log ledger operations to stderr")
    args = p.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args.scenario, key="pool")
        scenario = yaml.safe_load(args.scenario.read_text(encoding="utf-8"))
        mint_mode = parse_mint_mode(args.mint_mode) if args.mint_mode else None
        records = _run(config, scenario, mint_mode=mint_mode)
    except (OSError, yaml.YAMLError, ScenarioError, ValueError, KeyError, TypeError) as exc:
        print(f"pool_sim error: {exc}", file=sys.stderr)
        return 2

    for record in records:
        print(json.dumps(record, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
