"""
Client utilities for talking to venues.

This package provides the HTTP transport used by exchange adapters, with
rate limiting and optional retries, and the authentication providers that
sign private requests.
"""

from .auth_providers import AuthProvider, HmacSha512Provider  # noqa: F401
from .http_exchange import HttpExchangeClient  # noqa: F401
