"""Tests for balance fetching and the two balance response shapes."""

import pytest

from b2c2 import B2C2, ExchangeConfig, NotSupported
from tests.helpers.fake_transport import FakeTransport


def make_exchange(*responses, **options):
    transport = FakeTransport(*responses)
    config = ExchangeConfig(api_key="key", secret="secret", options=options)
    return B2C2(config, client=transport), transport


@pytest.mark.asyncio
async def test_read_only_flat_map() -> None:
    exchange, transport = make_exchange({"USD": "1000.5", "BTC": "0.25"})
    balances = await exchange.fetch_balance()

    assert sorted(balances.balances) == ["BTC", "USD"]
    assert balances["USD"].total == 1000.5
    assert balances["BTC"].total == 0.25
    assert balances["BTC"].free is None
    assert balances["BTC"].used is None
    method, url, headers, _ = transport.requests[0]
    assert (method, url) == ("GET", "https://api.b2c2.net/balance")
    assert headers["key"] == "key"


@pytest.mark.asyncio
async def test_wrapped_flat_map_skips_status() -> None:
    exchange, _ = make_exchange({"status": "ok", "balances": {"ltc": 0.1, "XRP": "12"}})
    balances = await exchange.fetch_balance()

    assert sorted(balances.balances) == ["LTC", "XRP"]
    assert balances["LTC"].total == 0.1
    assert balances["XRP"].total == 12


@pytest.mark.asyncio
async def test_unwrapped_flat_map_ignores_status_key() -> None:
    exchange, _ = make_exchange({"status": "ok", "USD": "5"})
    balances = await exchange.fetch_balance()
    assert list(balances.balances) == ["USD"]


@pytest.mark.asyncio
async def test_read_write_nested_rows() -> None:
    response = {
        "status": "ok",
        "balances": [
            {"LTC": {"balance": 0.1, "audbalance": 16.59, "rate": 165.95}},
            {"BTC": {"balance": "1.5", "frozen": "0.5", "active": "1", "fix": "x"}},
        ],
    }
    exchange, _ = make_exchange(response)
    balances = await exchange.fetch_balance()

    assert sorted(balances.balances) == ["BTC", "LTC"]
    assert balances["LTC"].total == 0.1
    assert balances["LTC"].free is None
    assert balances["BTC"].total == 1.5
    assert balances["BTC"].used == 0.5
    assert balances["BTC"].free == 1.0
    assert balances.info is response


@pytest.mark.asyncio
async def test_missing_field_is_derived_exactly() -> None:
    exchange, _ = make_exchange({"balance": [{"eth": {"balance": "1", "frozen": "0.3"}}]})
    balances = await exchange.fetch_balance()
    assert balances["ETH"].free == 0.7
    assert balances.free == {"ETH": 0.7}
    assert balances.used == {"ETH": 0.3}
    assert balances.total == {"ETH": 1.0}


@pytest.mark.asyncio
async def test_one_entry_per_asset_across_rows() -> None:
    exchange, _ = make_exchange(
        {"balances": [{"BTC": {"balance": 1}}, {"BTC": {"balance": 2}}, {"ETH": {"balance": 3}}]}
    )
    balances = await exchange.fetch_balance()
    assert sorted(balances.balances) == ["BTC", "ETH"]
    assert "BTC" in balances


@pytest.mark.asyncio
async def test_balance_route_option() -> None:
    exchange, transport = make_exchange({"balances": {"AUD": 10}}, fetchBalance="my/balances")
    await exchange.fetch_balance()
    method, url, _, _ = transport.requests[0]
    assert (method, url) == ("POST", "https://api.b2c2.net/my/balances")


@pytest.mark.asyncio
async def test_unknown_balance_route() -> None:
    exchange, transport = make_exchange(fetchBalance="wallets")
    with pytest.raises(NotSupported):
        await exchange.fetch_balance()
    assert transport.requests == []


@pytest.mark.asyncio
async def test_flat_map_skips_non_numeric_values() -> None:
    exchange, _ = make_exchange({"USD": "1", "updated": "2020-11-09T02:57:26Z", "desk": None})
    balances = await exchange.fetch_balance()
    assert list(balances.balances) == ["USD"]
    assert balances["USD"].total == 1.0


@pytest.mark.asyncio
async def test_nested_entry_drops_non_numeric_fields() -> None:
    exchange, _ = make_exchange(
        {
            "balances": [
                {"BTC": {"balance": "2", "frozen": "n/a", "active": "1.5"}},
                {"XRP": {"balance": "pending", "fix": "x"}},
            ]
        }
    )
    balances = await exchange.fetch_balance()
    assert list(balances.balances) == ["BTC"]
    assert balances["BTC"].total == 2.0
    assert balances["BTC"].free == 1.5
    assert balances["BTC"].used == 0.5
