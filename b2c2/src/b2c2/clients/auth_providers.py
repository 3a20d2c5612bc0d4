"""
Authentication provider abstractions.

These classes build the HTTP headers for signed requests.  Keeping the
signing scheme out of the adapter lets a venue swap key types without
touching its request builders.
"""
from __future__ import annotations

import hashlib
import hmac
from typing import Dict

from ..errors import AuthenticationError


class AuthProvider:
    """Abstract base class for authentication providers."""

    def get_headers(self, body: str) -> Dict[str, str]:
        """Return headers for a request carrying ``body``.

        Subclasses must implement this method.
        """
        raise NotImplementedError


class HmacSha512Provider(AuthProvider):
    """Key header plus a hex HMAC-SHA512 of the request body."""

    def __init__(self, api_key: str, secret: str) -> None:
        if not api_key:
            raise AuthenticationError("HmacSha512Provider requires an api key")
        if not secret:
            raise AuthenticationError("HmacSha512Provider requires a secret")
        self.api_key = api_key
        self.secret = secret

    def sign(self, body: str) -> str:
        return hmac.new(self.secret.encode(), body.encode(), hashlib.sha512).hexdigest()

    def get_headers(self, body: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "key": self.api_key,
            "sign": self.sign(body),
        }
