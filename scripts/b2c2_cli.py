#!/usr/bin/env python
"""
Command-line access to the B2C2 adapter.

Credentials and settings are read from the environment (see
``b2c2.config``).  Each subcommand performs one call and prints the
unified record as JSON::

    python scripts/b2c2_cli.py markets
    python scripts/b2c2_cli.py ticker BTCUSD.SPOT
    python scripts/b2c2_cli.py orderbook ETH/AUD --limit 5
    python scripts/b2c2_cli.py trades ETH/AUD --since 1604890646143
    python scripts/b2c2_cli.py balance
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from b2c2 import B2C2, BaseError, ExchangeConfig

logger = logging.getLogger("b2c2_cli")


def parse_args(argv: Any = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Query the B2C2 REST API.")
    parser.add_argument("--sandbox", action="store_true", help="Use the UAT environment.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("markets", help="List the configured markets.")
    ticker = sub.add_parser("ticker", help="Fetch the latest prices for a symbol.")
    ticker.add_argument("symbol")
    book = sub.add_parser("orderbook", help="Fetch the order book for a symbol.")
    book.add_argument("symbol")
    book.add_argument("--limit", type=int, default=None)
    trades = sub.add_parser("trades", help="Fetch trade history for a symbol.")
    trades.add_argument("symbol")
    trades.add_argument("--since", type=int, default=None, help="Millisecond timestamp.")
    trades.add_argument("--limit", type=int, default=None)
    sub.add_parser("balance", help="Fetch account balances.")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> Any:
    config = ExchangeConfig.from_env()
    if args.sandbox:
        config = config.model_copy(update={"sandbox": True})
    exchange = B2C2(config)
    if args.command == "markets":
        markets = await exchange.load_markets()
        return [market.model_dump() for market in markets.values()]
    if args.command == "ticker":
        return (await exchange.fetch_ticker(args.symbol)).model_dump()
    if args.command == "orderbook":
        return (await exchange.fetch_order_book(args.symbol, limit=args.limit)).model_dump()
    if args.command == "trades":
        trades = await exchange.fetch_trades(args.symbol, since=args.since, limit=args.limit)
        return [trade.model_dump() for trade in trades]
    balances = await exchange.fetch_balance()
    return {code: entry.model_dump() for code, entry in balances.balances.items()}


def main(argv: Any = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        result = asyncio.run(run(args))
    except BaseError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
