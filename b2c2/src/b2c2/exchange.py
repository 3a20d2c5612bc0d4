"""
Common base shared by venue adapters.

An adapter subclasses :class:`Exchange`, returns its static descriptor
from ``describe()`` and implements ``sign()`` plus its request builders
and response parsers.  This base owns everything venue-independent:

- the market registry (``load_markets``, ``market``, ``safe_market``),
- tolerant field access on venue JSON (``safe_string``, ``safe_number``),
- nonce generation and timestamp formatting,
- generic parsers that assemble unified balance, order book and trade
  records,
- translation of venue error codes through the descriptor's error table.
"""

from __future__ import annotations

import copy
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Type

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from . import precise
from .clients.auth_providers import AuthProvider, HmacSha512Provider
from .clients.http_exchange import HttpExchangeClient
from .config import ExchangeConfig
from .errors import BadSymbol, BaseError, ExchangeError, InvalidNonce, NetworkError, NotSupported
from .models import BalanceEntry, Balances, Market, OrderBook, Trade

logger = logging.getLogger(__name__)


def deep_extend(*dicts: Dict[str, Any]) -> Dict[str, Any]:
    """Merge dictionaries recursively; later values win."""
    result: Dict[str, Any] = {}
    for d in dicts:
        for key, value in d.items():
            if isinstance(value, dict) and isinstance(result.get(key), dict):
                result[key] = deep_extend(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
    return result


class Exchange:
    """Venue-independent plumbing for REST adapters."""

    def describe(self) -> Dict[str, Any]:
        return {
            "id": None,
            "name": None,
            "countries": [],
            "rate_limit": 1000,
            "has": {
                "cancel_order": False,
                "create_order": False,
                "fetch_balance": False,
                "fetch_markets": True,
                "fetch_order_book": False,
                "fetch_ticker": False,
                "fetch_trades": False,
            },
            "urls": {},
            "api": {},
            "markets": {},
            "exceptions": {},
            "options": {},
        }

    def __init__(
        self,
        config: Optional[ExchangeConfig] = None,
        *,
        client: Any = None,
        auth_provider: Optional[AuthProvider] = None,
    ) -> None:
        self.config = config or ExchangeConfig()
        description = self.describe()
        self.id: str = description["id"]
        self.name: str = description["name"]
        self.countries: List[str] = description["countries"]
        self.rate_limit: int = description["rate_limit"]
        self.has: Dict[str, bool] = description["has"]
        self.urls: Dict[str, Any] = description["urls"]
        self.api: Dict[str, Any] = description["api"]
        self.exceptions: Dict[str, Type[BaseError]] = description["exceptions"]
        self.options: Dict[str, Any] = deep_extend(description["options"], self.config.options)
        self._descriptor_markets: Dict[str, Dict[str, str]] = description["markets"]
        if self.config.sandbox:
            if "test" not in self.urls:
                raise NotSupported(f"{self.id} does not have a sandbox URL")
            self.urls["api"] = copy.deepcopy(self.urls["test"])

        self.markets: Dict[str, Market] = {}
        self.markets_by_id: Dict[str, Market] = {}
        self.symbols: List[str] = []
        self.currencies: List[str] = []

        self.api_key = self.config.api_key
        self.secret = self.config.secret
        if auth_provider is None and self.api_key and self.secret:
            auth_provider = HmacSha512Provider(self.api_key, self.secret)
        self.auth_provider = auth_provider

        # rate_limit is the minimum spacing between requests in milliseconds
        max_requests_per_minute = self.config.max_requests_per_minute
        if max_requests_per_minute is None:
            max_requests_per_minute = 60000 // self.rate_limit if self.rate_limit > 0 else 0
        self.client = client or HttpExchangeClient(
            name=self.id,
            timeout=self.config.timeout,
            max_requests_per_minute=max_requests_per_minute,
            error_handler=self.handle_errors,
        )
        self.max_attempts = self.config.max_attempts
        self.retry_wait = wait_exponential(min=1, max=8)
        self._last_nonce = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, sandbox={self.config.sandbox})"

    # ------------------------------------------------------------------
    # Markets
    # ------------------------------------------------------------------

    async def load_markets(self, reload: bool = False) -> Dict[str, Market]:
        if self.markets and not reload:
            return self.markets
        self.set_markets(await self.fetch_markets())
        return self.markets

    async def fetch_markets(self, params: Optional[Dict[str, Any]] = None) -> List[Market]:
        """Markets declared in the descriptor."""
        return [Market(**market) for market in self._descriptor_markets.values()]

    def set_markets(self, markets: Iterable[Market]) -> None:
        self.markets = {market.symbol: market for market in markets}
        self.markets_by_id = {market.id: market for market in self.markets.values()}
        self.symbols = sorted(self.markets)
        codes = {market.base for market in self.markets.values()}
        codes.update(market.quote for market in self.markets.values())
        self.currencies = sorted(codes)

    def market(self, symbol: str) -> Market:
        if not self.markets:
            raise ExchangeError(f"{self.id} markets not loaded")
        market = self.markets.get(symbol)
        if market is None:
            raise BadSymbol(f"{self.id} does not have market symbol {symbol}")
        return market

    def market_id(self, symbol: str) -> str:
        return self.market(symbol).id

    def safe_market(
        self,
        market_id: Optional[str],
        market: Optional[Market] = None,
        delimiter: Optional[str] = None,
    ) -> Optional[Market]:
        """Resolve a venue market id, falling back to splitting it on ``delimiter``."""
        if market_id is not None:
            known = self.markets_by_id.get(market_id)
            if known is not None:
                return known
            if delimiter and delimiter in market_id:
                base_id, quote_id = market_id.split(delimiter, 1)
                base = self.safe_currency_code(base_id)
                quote = self.safe_currency_code(quote_id)
                return Market(
                    id=market_id,
                    symbol=f"{base}/{quote}",
                    base=base,
                    quote=quote,
                    base_id=base_id,
                    quote_id=quote_id,
                )
        return market

    def safe_symbol(
        self,
        market_id: Optional[str],
        market: Optional[Market] = None,
        delimiter: Optional[str] = None,
    ) -> Optional[str]:
        resolved = self.safe_market(market_id, market, delimiter)
        return resolved.symbol if resolved is not None else market_id

    @staticmethod
    def safe_currency_code(currency_id: Optional[str]) -> Optional[str]:
        if currency_id is None:
            return None
        return currency_id.upper()

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    @staticmethod
    def safe_value(container: Any, key: Any, default: Any = None) -> Any:
        if isinstance(container, dict):
            value = container.get(key)
        elif isinstance(container, (list, tuple)) and isinstance(key, int):
            value = container[key] if -len(container) <= key < len(container) else None
        else:
            value = None
        return default if value is None else value

    @classmethod
    def safe_value_2(cls, container: Any, key1: Any, key2: Any, default: Any = None) -> Any:
        value = cls.safe_value(container, key1)
        return cls.safe_value(container, key2, default) if value is None else value

    @classmethod
    def safe_string(cls, container: Any, key: Any, default: Optional[str] = None) -> Optional[str]:
        value = cls.safe_value(container, key)
        if value is None or isinstance(value, (dict, list, bool)):
            return default
        return str(value)

    @classmethod
    def safe_string_2(
        cls, container: Any, key1: Any, key2: Any, default: Optional[str] = None
    ) -> Optional[str]:
        value = cls.safe_string(container, key1)
        return cls.safe_string(container, key2, default) if value is None else value

    @staticmethod
    def parse_number(value: Optional[str], default: Optional[float] = None) -> Optional[float]:
        if value is None or value == "":
            return default
        return float(value)

    @classmethod
    def safe_number(cls, container: Any, key: Any, default: Optional[float] = None) -> Optional[float]:
        return cls.parse_number(cls.safe_string(container, key), default)

    @classmethod
    def safe_integer(cls, container: Any, key: Any, default: Optional[int] = None) -> Optional[int]:
        value = cls.safe_string(container, key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return int(float(value))

    @staticmethod
    def omit(params: Dict[str, Any], *keys: str) -> Dict[str, Any]:
        return {key: value for key, value in params.items() if key not in keys}

    @staticmethod
    def extract_params(path: str) -> List[str]:
        names = []
        for part in path.split("{")[1:]:
            names.append(part.split("}", 1)[0])
        return names

    @staticmethod
    def implode_params(path: str, params: Dict[str, Any]) -> str:
        for key, value in params.items():
            path = path.replace("{" + key + "}", str(value))
        return path

    # ------------------------------------------------------------------
    # Time and nonce
    # ------------------------------------------------------------------

    @staticmethod
    def milliseconds() -> int:
        return int(time.time() * 1000)

    @staticmethod
    def iso8601(timestamp: Optional[int]) -> Optional[str]:
        if timestamp is None:
            return None
        seconds, millis = divmod(int(timestamp), 1000)
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
        return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{millis:03d}Z"

    def nonce(self) -> int:
        """Millisecond nonce, strictly increasing within this instance."""
        self._last_nonce = max(self.milliseconds(), self._last_nonce + 1)
        return self._last_nonce

    # ------------------------------------------------------------------
    # Generic parsers
    # ------------------------------------------------------------------

    @staticmethod
    def account() -> Dict[str, Optional[str]]:
        return {"free": None, "used": None, "total": None}

    def parse_balance(self, accounts: Dict[str, Dict[str, Optional[str]]], info: Any = None) -> Balances:
        """Complete each account from whichever two of free/used/total are known."""
        balances: Dict[str, BalanceEntry] = {}
        for code, account in accounts.items():
            free = account.get("free")
            used = account.get("used")
            total = account.get("total")
            if total is None:
                if free is not None and used is not None:
                    total = precise.string_add(free, used)
            elif free is None:
                if used is not None:
                    free = precise.string_sub(total, used)
            elif used is None:
                used = precise.string_sub(total, free)
            balances[code] = BalanceEntry(
                free=self.parse_number(free),
                used=self.parse_number(used),
                total=self.parse_number(total),
            )
        return Balances(info=info, balances=balances)

    def parse_bid_ask(self, entry: Any, price_key: Any = 0, amount_key: Any = 1) -> List[float]:
        price = self.safe_number(entry, price_key)
        amount = self.safe_number(entry, amount_key)
        if price is None or amount is None:
            raise ExchangeError(f"{self.id} malformed order book entry {entry!r}")
        return [price, amount]

    def parse_order_book(
        self,
        orderbook: Any,
        symbol: str,
        timestamp: Optional[int] = None,
        bids_key: str = "bids",
        asks_key: str = "asks",
        price_key: Any = 0,
        amount_key: Any = 1,
    ) -> OrderBook:
        bids = [self.parse_bid_ask(e, price_key, amount_key) for e in self.safe_value(orderbook, bids_key, [])]
        asks = [self.parse_bid_ask(e, price_key, amount_key) for e in self.safe_value(orderbook, asks_key, [])]
        return OrderBook(
            symbol=symbol,
            bids=sorted(bids, key=lambda level: level[0], reverse=True),
            asks=sorted(asks, key=lambda level: level[0]),
            timestamp=timestamp,
            datetime=self.iso8601(timestamp),
        )

    def parse_trade(self, trade: Dict[str, Any], market: Optional[Market] = None) -> Trade:
        raise NotImplementedError

    def parse_trades(
        self,
        trades: Iterable[Dict[str, Any]],
        market: Optional[Market] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        parsed = [self.parse_trade(trade, market) for trade in trades]
        parsed.sort(key=lambda t: t.timestamp if t.timestamp is not None else 0)
        return self.filter_by_since_limit(parsed, since, limit)

    @staticmethod
    def filter_by_since_limit(items: List[Trade], since: Optional[int], limit: Optional[int]) -> List[Trade]:
        if since is not None:
            items = [item for item in items if item.timestamp is not None and item.timestamp >= since]
        if limit is not None:
            items = items[:limit]
        return items

    # ------------------------------------------------------------------
    # Requests
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
        raise NotImplementedError

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Any:
        return await self.client.request(method, url, headers, body)

    async def request(
        self,
        path: str,
        api: str = "public",
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Sign and send one API call.

        Network failures are retried up to ``max_attempts`` times with
        exponential backoff.  Each attempt is signed again so it carries a
        fresh nonce.  Errors reported by the venue are never retried.
        """
        params = params or {}
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception_type(NetworkError) & retry_if_not_exception_type(InvalidNonce),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                signed = self.sign(path, api, method, params)
                response = await self.fetch(
                    signed["url"], signed["method"], signed["headers"], signed["body"]
                )
        return response

    def handle_errors(
        self,
        status: int,
        reason: str,
        url: str,
        method: str,
        headers: Dict[str, str],
        body: str,
        response: Any,
    ) -> None:
        """Raise the exception mapped to the venue's error code, if any.

        The code carried in the body (``code`` or ``errors[0].code``) is
        tried first, then the HTTP status.  Codes missing from the table
        fall through to the transport's generic status check.
        """
        body_code: Optional[str] = None
        error_body = False
        if isinstance(response, dict):
            errors = response.get("errors")
            error_body = self.safe_string(response, "status") == "error" or bool(errors)
            if error_body or status >= 400:
                body_code = self.safe_string(response, "code")
                if body_code is None and isinstance(errors, list) and errors:
                    body_code = self.safe_string(errors[0], "code")
        feedback = f"{self.id} {body}"
        for code in (body_code, str(status)):
            if code is not None and code in self.exceptions:
                logger.debug("%s %s %s mapped error code %s", self.id, method, url, code)
                raise self.exceptions[code](feedback)
        if error_body:
            raise ExchangeError(feedback)
