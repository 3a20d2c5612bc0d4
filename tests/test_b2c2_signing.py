"""Tests for request signing and the raw endpoint accessors."""

import hashlib
import hmac
import json

import pytest

from b2c2 import AuthenticationError, B2C2, ExchangeConfig
from b2c2.clients.auth_providers import HmacSha512Provider
from tests.helpers.fake_transport import FakeTransport


def test_private_sign_without_api_key() -> None:
    exchange = B2C2(ExchangeConfig(secret="secret"))
    with pytest.raises(AuthenticationError):
        exchange.sign("balance", "private", "GET", {})


def test_private_sign_without_secret() -> None:
    exchange = B2C2(ExchangeConfig(api_key="key"))
    with pytest.raises(AuthenticationError):
        exchange.sign("balance", "private", "GET", {})


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call",
    [
        lambda ex: ex.fetch_balance(),
        lambda ex: ex.fetch_order_book("ETH/AUD"),
        lambda ex: ex.fetch_trades("ETH/AUD"),
        lambda ex: ex.create_order("ETH/AUD", "limit", "buy", 1, 1),
        lambda ex: ex.cancel_order("1", params={"side": "sell"}),
        lambda ex: ex.private_get_instruments(),
    ],
)
async def test_private_calls_without_key_never_reach_transport(call) -> None:
    transport = FakeTransport({"status": "ok"})
    exchange = B2C2(ExchangeConfig(), client=transport)
    with pytest.raises(AuthenticationError):
        await call(exchange)
    assert transport.requests == []


def test_private_signature_and_headers() -> None:
    exchange = B2C2(ExchangeConfig(api_key="my-key", secret="my-secret"))
    signed = exchange.sign("order", "private", "POST", {"instrument": "BTCUSD.SPOT"})

    assert signed["url"] == "https://api.b2c2.net/order"
    assert signed["method"] == "POST"
    body = json.loads(signed["body"])
    assert body["instrument"] == "BTCUSD.SPOT"
    assert isinstance(body["nonce"], int)
    expected = hmac.new(b"my-secret", signed["body"].encode(), hashlib.sha512).hexdigest()
    assert signed["headers"] == {
        "Content-Type": "application/json",
        "key": "my-key",
        "sign": expected,
    }


def test_nonce_strictly_increases() -> None:
    exchange = B2C2(ExchangeConfig(api_key="k", secret="s"))
    nonces = [json.loads(exchange.sign("balance", "private", "GET")["body"])["nonce"] for _ in range(5)]
    assert nonces == sorted(set(nonces))


def test_public_requests_are_unsigned() -> None:
    exchange = B2C2()
    signed = exchange.sign("latest", "public", "GET", {"market": "aud"})
    assert signed["url"] == "https://api.b2c2.net/latest?market=aud"
    assert signed["headers"] is None
    assert signed["body"] is None


def test_sandbox_urls() -> None:
    exchange = B2C2(ExchangeConfig(api_key="k", secret="s", sandbox=True))
    assert exchange.sign("balance", "private")["url"] == "https://api.uat.b2c2.net/balance"
    assert exchange.sign("latest")["url"] == "https://api.uat.b2c2.net/latest"


def test_config_repr_hides_secret() -> None:
    config = ExchangeConfig(api_key="k", secret="super-secret")
    assert "super-secret" not in repr(config)


def test_hmac_provider_requires_credentials() -> None:
    with pytest.raises(AuthenticationError):
        HmacSha512Provider("", "secret")
    with pytest.raises(AuthenticationError):
        HmacSha512Provider("key", "")


@pytest.mark.asyncio
async def test_order_by_id_path_template() -> None:
    transport = FakeTransport({"order_id": "abc"})
    exchange = B2C2(ExchangeConfig(api_key="k", secret="s"), client=transport)
    assert await exchange.private_get_order_by_id("abc-123") == {"order_id": "abc"}

    method, url, _, _ = transport.requests[0]
    assert (method, url) == ("GET", "https://api.b2c2.net/order/abc-123")
    assert "client_order_id" not in transport.last_body


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "accessor, method, path",
    [
        ("private_get_balance", "GET", "balance"),
        ("private_get_margin_requirements", "GET", "margin_requirements"),
        ("private_get_instruments", "GET", "instruments"),
        ("private_get_order", "GET", "order"),
        ("private_get_trade", "GET", "trade"),
        ("private_get_ledger", "GET", "ledger"),
        ("private_get_withdrawal", "GET", "withdrawal"),
        ("private_get_currency", "GET", "currency"),
        ("private_get_funding_rates", "GET", "funding_rates"),
        ("private_get_account_info", "GET", "account_info"),
        ("private_post_request_for_quote", "POST", "request_for_quote"),
        ("private_post_order", "POST", "order"),
        ("private_post_withdrawal", "POST", "withdrawal"),
    ],
)
async def test_raw_endpoints(accessor, method, path) -> None:
    transport = FakeTransport([{"raw": True}])
    exchange = B2C2(ExchangeConfig(api_key="k", secret="s"), client=transport)
    result = await getattr(exchange, accessor)({"x": 1})

    assert result == [{"raw": True}]
    sent_method, url, headers, _ = transport.requests[0]
    assert (sent_method, url) == (method, f"https://api.b2c2.net/{path}")
    assert headers["key"] == "k"
    assert transport.last_body["x"] == 1


def test_descriptor_lists_every_endpoint() -> None:
    exchange = B2C2()
    private = exchange.api["private"]
    assert len(private["get"]) == 11
    assert private["post"] == ["request_for_quote", "order", "withdrawal"]
    assert "order/{client_order_id}" in private["get"]
