"""Tests for the command-line scripts."""

import importlib.util
from pathlib import Path

import pytest

SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"


def load_script(name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_schema_covers_unified_records() -> None:
    module = load_script("generate_json_schema")
    schema = module.generate_schema(module.collect_models())
    definitions = schema["definitions"]
    assert set(definitions) == {"Market", "Balances", "Ticker", "OrderBook", "Trade", "OrderRequest"}
    assert "cost" in definitions["Trade"]["properties"]


def test_cli_arguments() -> None:
    module = load_script("b2c2_cli")
    args = module.parse_args(["orderbook", "ETH/AUD", "--limit", "5"])
    assert (args.command, args.symbol, args.limit) == ("orderbook", "ETH/AUD", 5)
    with pytest.raises(SystemExit):
        module.parse_args([])


def test_cli_markets_needs_no_network(monkeypatch, capsys) -> None:
    monkeypatch.delenv("B2C2_SANDBOX", raising=False)
    module = load_script("b2c2_cli")
    assert module.main(["markets"]) == 0
    out = capsys.readouterr().out
    assert '"BTCUSD.SPOT"' in out
    assert '"GAS/AUD"' in out


def test_health_check_reports_presence_only(monkeypatch, capsys) -> None:
    for name in (
        "B2C2_API_SECRET",
        "B2C2_API_SECRET_FILE",
        "B2C2_API_KEY_FILE",
        "B2C2_SANDBOX",
        "B2C2_SANDBOX_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("B2C2_API_KEY", "do-not-print-this-key")
    monkeypatch.setenv("B2C2_TIMEOUT_FILE", "/run/secrets/timeout")

    load_script("health_check").main()
    out = capsys.readouterr().out

    assert out.startswith("Health Check:")
    assert "B2C2_API_KEY: set" in out
    assert "B2C2_API_SECRET: missing" in out
    assert "B2C2_SANDBOX: missing" in out
    assert "B2C2_TIMEOUT: set" in out
    assert "do-not-print-this-key" not in out
    assert "/run/secrets/timeout" not in out
