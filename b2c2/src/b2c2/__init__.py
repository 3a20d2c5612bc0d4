"""
B2C2 exchange adapter.

This package binds the B2C2 REST API to the unified market, balance,
ticker, order book and trade records used across the trading library.
The adapter class is :class:`B2C2`; credentials and transport settings
are supplied through :class:`ExchangeConfig`.
"""

from .b2c2 import B2C2  # noqa: F401
from .config import ExchangeConfig  # noqa: F401
from .errors import (  # noqa: F401
    AccountSuspended,
    ArgumentError,
    AuthenticationError,
    BadSymbol,
    BaseError,
    ExchangeError,
    InsufficientFunds,
    InvalidNonce,
    InvalidOrder,
    NetworkError,
    NotSupported,
    RequestTimeout,
)
from .exchange import Exchange  # noqa: F401
from .models import (  # noqa: F401
    BalanceEntry,
    Balances,
    Market,
    OrderBook,
    OrderRequest,
    Ticker,
    Trade,
)

__version__ = "0.1.0"
