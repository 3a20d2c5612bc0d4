"""
generate_json_schema
====================

This script exports JSON Schema definitions for the unified records
returned by the exchange adapter (``Market``, ``Balances``, ``Ticker``,
``OrderBook``, ``Trade`` and ``OrderRequest`` from ``b2c2.models``).
Consumers in other languages can generate matching types from it with
tools such as `json-schema-to-typescript`.

Usage
-----

.. code-block:: bash

    python scripts/generate_json_schema.py --out schemas.json

If no output file is provided, the schema will be printed to stdout.
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Dict, Type

from pydantic import BaseModel

from b2c2.models import Balances, Market, OrderBook, OrderRequest, Ticker, Trade


def collect_models() -> Dict[str, Type[BaseModel]]:
    return {
        "Market": Market,
        "Balances": Balances,
        "Ticker": Ticker,
        "OrderBook": OrderBook,
        "Trade": Trade,
        "OrderRequest": OrderRequest,
    }


def generate_schema(models: Dict[str, Type[BaseModel]]) -> Dict[str, Any]:
    schema: Dict[str, Any] = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "definitions": {},
    }
    for name, model in models.items():
        schema["definitions"][name] = model.model_json_schema()
    return schema


def parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Generate JSON schemas for the unified records.")
    ap.add_argument("--out", help="Output file path. Defaults to stdout if omitted.")
    return ap.parse_args()


def main() -> None:
    args = parse_args()
    schema = generate_schema(collect_models())
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(schema, f, indent=2)
        print(f"Schema written to {args.out}")
    else:
        print(json.dumps(schema, indent=2))


if __name__ == "__main__":
    main()
