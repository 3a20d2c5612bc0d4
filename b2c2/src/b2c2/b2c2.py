"""
B2C2 REST adapter.

Binds the B2C2 venue to the unified data model: static descriptor
(capabilities, endpoints, markets, error table), one request builder and
one response parser per trading operation, and HMAC-SHA512 signing of
private calls.

Usage::

    from b2c2 import B2C2, ExchangeConfig

    exchange = B2C2(ExchangeConfig.from_env())
    ticker = await exchange.fetch_ticker("BTCUSD.SPOT")
    balances = await exchange.fetch_balance()
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

from pydantic import ValidationError

from . import precise
from .errors import (
    AccountSuspended,
    ArgumentError,
    AuthenticationError,
    BadSymbol,
    ExchangeError,
    InsufficientFunds,
    InvalidNonce,
    InvalidOrder,
    NotSupported,
)
from .exchange import Exchange, deep_extend
from .models import Balances, Market, OrderBook, OrderRequest, Ticker, Trade

logger = logging.getLogger(__name__)

Route = Tuple[str, str, str]  # (api, HTTP method, path)

# Operation routes keyed by (operation, side).  Operations without a side
# use ``None``.
ROUTES: Dict[Tuple[str, Optional[str]], Route] = {
    ("fetch_order_book", None): ("private", "POST", "orders"),
    ("fetch_ticker", None): ("public", "GET", "latest"),
    ("fetch_trades", None): ("private", "POST", "orders/history"),
    ("create_order", "buy"): ("private", "POST", "my/buy"),
    ("create_order", "sell"): ("private", "POST", "my/sell"),
    ("cancel_order", "buy"): ("private", "POST", "my/buy/cancel"),
    ("cancel_order", "sell"): ("private", "POST", "my/sell/cancel"),
}

# Selected by ``options["fetchBalance"]``.
BALANCE_ROUTES: Dict[str, Route] = {
    "balance": ("private", "GET", "balance"),
    "my/balances": ("private", "POST", "my/balances"),
}

# Keys that can appear next to assets in a flat balance map.
NON_ASSET_KEYS = frozenset({"status", "message", "info"})


def _market(symbol: str, base: str, quote: str, market_id: Optional[str] = None) -> Dict[str, str]:
    return {
        "id": market_id or base.lower(),
        "symbol": symbol,
        "base": base,
        "quote": quote,
        "base_id": base.lower(),
        "quote_id": quote.lower(),
    }


class B2C2(Exchange):
    def describe(self) -> Dict[str, Any]:
        markets = {"BTCUSD.SPOT": _market("BTCUSD.SPOT", "BTC", "USD")}
        for base in ("ETH", "XRP", "LTC", "DOGE", "RFOX", "POWR", "NEO", "TRX", "EOS", "XLM", "RHOC", "GAS"):
            markets[f"{base}/AUD"] = _market(f"{base}/AUD", base, "AUD")
        return deep_extend(super().describe(), {
            "id": "b2c2",
            "name": "B2C2",
            "countries": ["GB"],
            "rate_limit": 500,
            "has": {
                "cancel_order": True,
                "create_order": True,
                "fetch_balance": True,
                "fetch_markets": True,
                "fetch_order_book": True,
                "fetch_ticker": True,
                "fetch_trades": True,
            },
            "urls": {
                "test": {
                    "public": "https://api.uat.b2c2.net",
                    "private": "https://api.uat.b2c2.net",
                },
                "api": {
                    "public": "https://api.b2c2.net",
                    "private": "https://api.b2c2.net",
                },
                "www": "https://b2c2.com",
                "doc": "https://docs.b2c2.net",
            },
            "api": {
                "private": {
                    "get": [
                        "balance",
                        "margin_requirements",
                        "instruments",
                        "order",
                        "order/{client_order_id}",
                        "trade",
                        "ledger",
                        "withdrawal",
                        "currency",
                        "funding_rates",
                        "account_info",
                    ],
                    "post": [
                        "request_for_quote",
                        "order",
                        "withdrawal",
                    ],
                },
            },
            "markets": markets,
            # https://docs.b2c2.net/#errors
            "exceptions": {
                "400": ExchangeError,  # at least one parameter wasn't set
                "401": InvalidOrder,  # invalid order type
                "402": InvalidOrder,  # no orders with specified currencies
                "403": InvalidOrder,  # invalid payment currency name
                "404": InvalidOrder,  # wrong transaction type
                "405": InvalidOrder,  # order with this id doesn't exist
                "406": InsufficientFunds,
                # 407 is not documented
                "408": InvalidOrder,  # invalid currency name
                "501": AuthenticationError,  # invalid public key
                "502": AuthenticationError,  # invalid sign
                "503": InvalidNonce,  # request time doesn't match server time
                "504": ExchangeError,  # invalid method
                "505": AuthenticationError,  # key has no permission for this action
                "506": AccountSuspended,
                # 507 and 508 are not documented
                "509": ExchangeError,  # BIC/SWIFT is required for this currency
                "510": BadSymbol,  # invalid market name
            },
            "options": {
                "fetchBalance": "balance",
            },
        })

    # ------------------------------------------------------------------
    # Balance
    # ------------------------------------------------------------------

    def _balance_route(self) -> Route:
        name = self.options.get("fetchBalance", "balance")
        route = BALANCE_ROUTES.get(name)
        if route is None:
            raise NotSupported(f"{self.id} fetch_balance() does not support the {name!r} endpoint")
        return route

    async def fetch_balance(self, params: Optional[Dict[str, Any]] = None) -> Balances:
        await self.load_markets()
        api, method, path = self._balance_route()
        response = await self.request(path, api, method, params)
        return self.parse_balance_response(response)

    def parse_balance_response(self, response: Any) -> Balances:
        #
        # read-write api keys
        #
        #     {"status": "ok", "balances": [{"LTC": {"balance": 0.1, "frozen": 0.02, "active": 0.08}}]}
        #
        # read-only api keys
        #
        #     {"USD": "1000.5", "BTC": "0.25"}
        #
        balances = None
        if isinstance(response, dict):
            balances = self.safe_value_2(response, "balance", "balances")
        if balances is None:
            balances = response
        if isinstance(balances, list):
            accounts = self._parse_balance_rows(balances)
        elif isinstance(balances, dict):
            accounts = self._parse_balance_map(balances)
        else:
            raise ExchangeError(f"{self.id} unexpected balance response {response!r}")
        return self.parse_balance(accounts, info=response)

    def _parse_balance_rows(self, rows: List[Any]) -> Dict[str, Dict[str, Optional[str]]]:
        accounts: Dict[str, Dict[str, Optional[str]]] = {}
        for row in rows:
            if not isinstance(row, dict):
                continue
            for currency_id, balance in row.items():
                account = self._parse_balance_entry(balance)
                if account is not None:
                    accounts[self.safe_currency_code(currency_id)] = account
        return accounts

    def _parse_balance_map(self, balances: Dict[str, Any]) -> Dict[str, Dict[str, Optional[str]]]:
        accounts: Dict[str, Dict[str, Optional[str]]] = {}
        for currency_id, value in balances.items():
            if currency_id in NON_ASSET_KEYS:
                continue
            if isinstance(value, dict):
                account = self._parse_balance_entry(value)
            else:
                account = self._balance_amounts({"total": self.safe_string(balances, currency_id)})
            if account is not None:
                accounts[self.safe_currency_code(currency_id)] = account
        return accounts

    def _parse_balance_entry(self, balance: Any) -> Optional[Dict[str, Optional[str]]]:
        return self._balance_amounts(
            {
                "total": self.safe_string(balance, "balance"),
                "used": self.safe_string(balance, "frozen"),
                "free": self.safe_string(balance, "active"),
            }
        )

    def _balance_amounts(
        self, amounts: Dict[str, Optional[str]]
    ) -> Optional[Dict[str, Optional[str]]]:
        # venue bookkeeping fields (timestamps, labels) are not balances
        account = self.account()
        for key, value in amounts.items():
            if precise.is_number(value):
                account[key] = value
        if all(value is None for value in account.values()):
            return None
        return account

    # ------------------------------------------------------------------
    # Market data
    # ------------------------------------------------------------------

    async def fetch_order_book(
        self,
        symbol: str,
        limit: Optional[int] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> OrderBook:
        await self.load_markets()
        market = self.market(symbol)
        request = {"cointype": market.id}
        api, method, path = ROUTES[("fetch_order_book", None)]
        orderbook = await self.request(path, api, method, {**request, **(params or {})})
        book = self.parse_order_book(orderbook, symbol, None, "buyorders", "sellorders", "rate", "amount")
        if limit is not None:
            book.bids = book.bids[:limit]
            book.asks = book.asks[:limit]
        return book

    async def fetch_ticker(self, symbol: str, params: Optional[Dict[str, Any]] = None) -> Ticker:
        await self.load_markets()
        market = self.market(symbol)
        api, method, path = ROUTES[("fetch_ticker", None)]
        response = await self.request(path, api, method, params)
        prices = self.safe_value(response, "prices", {})
        ticker = self.safe_value(prices, market.id.lower())
        if ticker is None:
            raise BadSymbol(f"{self.id} fetch_ticker() has no prices for {symbol}")
        return self.parse_ticker(ticker, market)

    def parse_ticker(self, ticker: Dict[str, Any], market: Market) -> Ticker:
        #
        #     {"bid": 9, "ask": 11, "last": 10}
        #
        timestamp = self.milliseconds()
        last = self.safe_number(ticker, "last")
        return Ticker(
            symbol=market.symbol,
            timestamp=timestamp,
            datetime=self.iso8601(timestamp),
            bid=self.safe_number(ticker, "bid"),
            ask=self.safe_number(ticker, "ask"),
            close=last,
            last=last,
            info=ticker,
        )

    async def fetch_trades(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[Trade]:
        await self.load_markets()
        market = self.market(symbol)
        request = {"cointype": market.id}
        api, method, path = ROUTES[("fetch_trades", None)]
        response = await self.request(path, api, method, {**request, **(params or {})})
        #
        #     {
        #         "status": "ok",
        #         "orders": [
        #             {"amount": 0.00102091, "rate": 21549.09999991, "total": 21.99969168,
        #              "coin": "BTC", "solddate": 1604890646143, "market": "BTC/AUD"},
        #         ],
        #     }
        #
        trades = self.safe_value(response, "orders", [])
        return self.parse_trades(trades, market, since, limit)

    def parse_trade(self, trade: Dict[str, Any], market: Optional[Market] = None) -> Trade:
        price_string = self.safe_string(trade, "rate")
        amount_string = self.safe_string(trade, "amount")
        cost = self.safe_number(trade, "total")
        if cost is None:
            cost = self.parse_number(precise.string_mul(price_string, amount_string))
        timestamp = self.safe_integer(trade, "solddate")
        market_id = self.safe_string(trade, "market")
        return Trade(
            info=trade,
            symbol=self.safe_symbol(market_id, market, "/"),
            timestamp=timestamp,
            datetime=self.iso8601(timestamp),
            price=self.parse_number(price_string),
            amount=self.parse_number(amount_string),
            cost=cost,
        )

    # ------------------------------------------------------------------
    # Trading
    # ------------------------------------------------------------------

    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: float,
        price: Optional[float] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        if type != "limit":
            raise InvalidOrder(f"{self.id} allows limit orders only")
        route = ROUTES.get(("create_order", side))
        if route is None:
            raise ArgumentError(f'{self.id} create_order() requires side to be "buy" or "sell"')
        if price is None:
            raise ArgumentError(f"{self.id} create_order() requires a price for limit orders")
        await self.load_markets()
        try:
            order = OrderRequest(instrument_id=self.market_id(symbol), amount=amount, rate=price)
        except ValidationError as exc:
            raise InvalidOrder(f"{self.id} create_order() invalid amount or price: {exc}") from exc
        api, method, path = route
        logger.info("%s create %s order %s %s @ %s", self.id, side, symbol, amount, price)
        return await self.request(path, api, method, {**order.to_payload(), **(params or {})})

    async def cancel_order(
        self,
        id: str,
        symbol: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        params = params or {}
        side = self.safe_string(params, "side")
        route = ROUTES.get(("cancel_order", side)) if side is not None else None
        if route is None:
            raise ArgumentError(f'{self.id} cancel_order() requires a side parameter, "buy" or "sell"')
        api, method, path = route
        logger.info("%s cancel %s order %s", self.id, side, id)
        return await self.request(path, api, method, {"id": id, **self.omit(params, "side")})

    # ------------------------------------------------------------------
    # Raw endpoints
    # ------------------------------------------------------------------

    async def private_get_balance(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("balance", "private", "GET", params)

    async def private_get_margin_requirements(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("margin_requirements", "private", "GET", params)

    async def private_get_instruments(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("instruments", "private", "GET", params)

    async def private_get_order(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("order", "private", "GET", params)

    async def private_get_order_by_id(
        self, client_order_id: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        request = {"client_order_id": client_order_id, **(params or {})}
        return await self.request("order/{client_order_id}", "private", "GET", request)

    async def private_get_trade(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("trade", "private", "GET", params)

    async def private_get_ledger(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("ledger", "private", "GET", params)

    async def private_get_withdrawal(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("withdrawal", "private", "GET", params)

    async def private_get_currency(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("currency", "private", "GET", params)

    async def private_get_funding_rates(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("funding_rates", "private", "GET", params)

    async def private_get_account_info(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("account_info", "private", "GET", params)

    async def private_post_request_for_quote(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("request_for_quote", "private", "POST", params)

    async def private_post_order(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("order", "private", "POST", params)

    async def private_post_withdrawal(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("withdrawal", "private", "POST", params)

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------

    def sign(
        self,
        path: str,
        api: str = "public",
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = params or {}
        url = self.urls["api"][api] + "/" + self.implode_params(path, params)
        query = self.omit(params, *self.extract_params(path))
        if api == "private":
            if not self.api_key:
                raise AuthenticationError(f"{self.id} requires apiKey for private requests")
            if self.auth_provider is None:
                raise AuthenticationError(f"{self.id} requires secret for private requests")
            body = json.dumps({"nonce": self.nonce(), **query}, separators=(",", ":"))
            headers = self.auth_provider.get_headers(body)
        elif query:
            url += "?" + urlencode(query)
        return {"url": url, "method": method, "body": body, "headers": headers}
