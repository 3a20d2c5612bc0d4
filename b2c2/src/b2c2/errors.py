"""
Exception hierarchy for exchange adapters.

Venue error codes are translated into these classes by
``Exchange.handle_errors`` using the adapter's error table.  Everything
raised by an adapter derives from ``BaseError`` so callers can catch the
whole family at once, or ``ExchangeError`` for venue-reported problems
and ``NetworkError`` for transport problems.
"""

from __future__ import annotations


class BaseError(Exception):
    """Root of all adapter errors."""


class ExchangeError(BaseError):
    """The venue rejected the request or returned an unmapped error."""


class ArgumentError(ExchangeError):
    """A required parameter is missing or has an unsupported value."""


class AuthenticationError(ExchangeError):
    """Credentials are missing, invalid or lack permission."""


class AccountSuspended(AuthenticationError):
    pass


class InvalidOrder(ExchangeError):
    """The order parameters were rejected."""


class InsufficientFunds(ExchangeError):
    pass


class BadSymbol(ExchangeError):
    """The symbol or market name is unknown to the venue."""


class NotSupported(ExchangeError):
    pass


class NetworkError(BaseError):
    """The request did not complete; the venue state is unknown."""


class InvalidNonce(NetworkError):
    pass


class RequestTimeout(NetworkError):
    pass
