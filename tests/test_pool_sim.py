# [TESTER] v1

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pairpool.core.cpmm import MintMode
from pairpool.core.errors import NoLiquidity
from pairpool.state.pools import compute_pool_id
from tools.pool_sim import ScenarioError, main, run_scenario

SCENARIO_YAML = """\
pool:
  asset_a: USDC
  asset_b: WETH
start_time: 1000
balances:
  - {account: alice, asset: USDC, amount: 10000}
  - {account: alice, asset: WETH, amount: 10000}
  - {account: bob, asset: USDC, amount: 500}
steps:
  - {op: contribute, account: alice, amount_a: 1000, amount_b: 2000}
  - {op: price, base: USDC, quote: WETH}
  - {op: swap, account: bob, amount_in: 100, path: [USDC, WETH], min_out: 182, expect_error: OutputBelowMinimum}
  - {op: swap, account: bob, amount_in: 100, path: [USDC, WETH], min_out: 181}
  - {op: advance, seconds: 120}
  - {op: swap, account: bob, amount_in: 100, path: [USDC, WETH], deadline: 1060, expect_error: Expired}
  - {op: withdraw, account: alice, shares: 707}
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PAIRPOOL_MINT_MODE", raising=False)
    monkeypatch.delenv("PAIRPOOL_REQUIRE_ASSET_ARGS", raising=False)


def _scenario_file(tmp_path: Path, text: str = SCENARIO_YAML) -> Path:
    p = tmp_path / "scenario.yaml"
    p.write_text(text, encoding="utf-8")
    return p


def test_main_prints_one_record_per_step(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(_scenario_file(tmp_path))]) == 0
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert len(lines) == 8

    assert lines[0]["result"] == {"amount_a": 1000, "amount_b": 2000, "shares": 1414}
    assert lines[1]["result"] == {"price": 2 * 10**18}
    assert lines[2]["error"] == "OutputBelowMinimum"
    assert lines[3]["result"] == {"amount_in": 100, "amount_out": 181}
    assert (lines[3]["pool"]["reserve_a"], lines[3]["pool"]["reserve_b"]) == (1100, 1819)
    assert lines[4]["result"] == {"now": 1120}
    assert lines[5]["error"] == "Expired"
    assert lines[6]["result"] == {"amount_a": 550, "amount_b": 909}
    assert {"holder": "alice", "pool_id": compute_pool_id("USDC", "WETH"), "amount": 707} in lines[7]["final"]["shares"]


MINT_MODE_YAML = """\
pool:
  asset_a: A
  asset_b: B
balances:
  - {account: lp, asset: A, amount: 100}
  - {account: lp, asset: B, amount: 100}
steps:
  - {op: contribute, account: lp, amount_a: 1, amount_b: 3}
  - {op: contribute, account: lp, amount_a: 3, amount_b: 9}
"""


def test_main_mint_mode_override(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _scenario_file(tmp_path, MINT_MODE_YAML)

    assert main([str(path), "--mint-mode", "compat"]) == 0
    compat = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert main([str(path)]) == 0
    pro_rata = [json.loads(line) for line in capsys.readouterr().out.splitlines()]

    assert compat[0]["result"]["shares"] == pro_rata[0]["result"]["shares"] == 1
    assert compat[1]["result"] == {"amount_a": 3, "amount_b": 9, "shares": 5}
    assert pro_rata[1]["result"] == {"amount_a": 3, "amount_b": 9, "shares": 3}


def test_main_reports_input_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path / "missing.yaml")]) == 2
    assert "pool_sim error" in capsys.readouterr().err

    bad = _scenario_file(tmp_path, "pool:\n  asset_a: A\n  asset_b: B\nsteps:\n  - {op: teleport}\n")
    assert main([str(bad)]) == 2
    assert "unknown op" in capsys.readouterr().err


def test_main_fails_on_unexpected_domain_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    text = SCENARIO_YAML.replace("min_out: 181}", "min_out: 5000}")
    assert main([str(_scenario_file(tmp_path, text))]) == 2
    assert "amount_out_min" in capsys.readouterr().err


def test_run_scenario_in_process() -> None:
    scenario = {
        "pool": {"asset_a": "A", "asset_b": "B"},
        "balances": [{"account": "lp", "asset": "A", "amount": 400}, {"account": "lp", "asset": "B", "amount": 400}],
        "steps": [{"op": "contribute", "account": "lp", "amount_a": 100, "amount_b": 400}],
    }
    records = run_scenario(scenario, mint_mode=MintMode.COMPAT)
    assert records[0]["result"]["shares"] == 200
    assert records[-1]["final"]["shares"] == [{"holder": "lp", "pool_id": compute_pool_id("A", "B"), "amount": 200}]


def test_run_scenario_expectation_must_hold() -> None:
    scenario = {
        "pool": {"asset_a": "A", "asset_b": "B"},
        "balances": [{"account": "lp", "asset": "A", "amount": 400}, {"account": "lp", "asset": "B", "amount": 400}],
        "steps": [
            {"op": "contribute", "account": "lp", "amount_a": 100, "amount_b": 400, "expect_error": "ZeroInput"},
        ],
    }
    with pytest.raises(ScenarioError, match="expected ZeroInput"):
        run_scenario(scenario)

    scenario["steps"] = [{"op": "swap", "account": "lp", "amount_in": 1, "path": ["A", "B"], "expect_error": "ZeroInput"}]
    # A different domain error than the expected one propagates unchanged.
    with pytest.raises(NoLiquidity):
        run_scenario(scenario)


@pytest.mark.parametrize(
    "balances",
    [
        "balances: oops\n",
        "balances:\n  - just-a-string\n",
        "balances:\n  - {account: lp, asset: A}\n",
        "balances:\n  - {account: lp, asset: A, amount: lots}\n",
        "balances:\n  - {account: lp, asset: A, amount: -5}\n",
        "balances:\n  - {asset: A, amount: 5}\n",
    ],
)
def test_main_rejects_malformed_balances(balances: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    text = "pool:\n  asset_a: A\n  asset_b: B\n" + balances + "steps: []\n"
    assert main([str(_scenario_file(tmp_path, text))]) == 2
    assert "balances" in capsys.readouterr().err


def test_run_scenario_honours_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    scenario = {
        "pool": {"asset_a": "A", "asset_b": "B"},
        "balances": [{"account": "lp", "asset": "A", "amount": 100}, {"account": "lp", "asset": "B", "amount": 100}],
        "steps": [
            {"op": "contribute", "account": "lp", "amount_a": 1, "amount_b": 3},
            {"op": "contribute", "account": "lp", "amount_a": 3, "amount_b": 9},
        ],
    }
    assert run_scenario(scenario)[1]["result"]["shares"] == 3
    monkeypatch.setenv("PAIRPOOL_MINT_MODE", "COMPAT")
    assert run_scenario(scenario)[1]["result"]["shares"] == 5
    # An explicit argument still wins over the environment.
    assert run_scenario(scenario, mint_mode=MintMode.PRO_RATA)[1]["result"]["shares"] == 3
