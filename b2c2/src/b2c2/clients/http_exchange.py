"""
HTTP transport for exchange adapters with rate limiting.

This module defines a lightweight asynchronous client that sends requests
already signed by an adapter and hands back the decoded JSON body.  A
token bucket smooths bursts to the venue's request limit.  Each response
is passed to the adapter's error handler so venue error codes can be
mapped to exceptions before the generic HTTP status check runs.

Each call makes exactly one attempt.  Connection errors surface as
:class:`NetworkError` and timeouts as :class:`RequestTimeout`; retrying
is left to the adapter, which has to sign every attempt afresh.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Callable, Dict, Optional

import aiohttp

from ..errors import ExchangeError, NetworkError, RequestTimeout
from ..telemetry import observe_request


logger = logging.getLogger(__name__)

# (status, reason, url, method, headers, body text, decoded body)
ErrorHandler = Callable[[int, str, str, str, Dict[str, str], str, Any], None]


class HttpExchangeClient:
    """Asynchronous REST transport with simple rate limiting."""

    def __init__(
        self,
        *,
        name: str = "exchange",
        timeout: float = 10.0,
        max_requests_per_minute: int = 120,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        """Construct the HTTP client.

        Args:
            name: Exchange id used in log lines, error messages and metrics.
            timeout: Total timeout for one request in seconds.
            max_requests_per_minute: Maximum number of REST requests per
                minute.  Zero disables the limiter.
            error_handler: Called with every response before the generic
                status check; expected to raise for venue error payloads.
        """
        self.name = name
        self.timeout = timeout
        self.error_handler = error_handler
        self.max_requests_per_minute = max_requests_per_minute
        self.tokens = max_requests_per_minute
        self._token_lock = asyncio.Lock()
        self._last_refill = time.monotonic()
        # Interval (in seconds) at which a token becomes available.
        self._token_interval = (
            60.0 / max_requests_per_minute if max_requests_per_minute > 0 else 0.0
        )

    async def _acquire_token(self) -> None:
        """Wait until a request token is available based on the token bucket."""
        if self.max_requests_per_minute <= 0:
            return
        while True:
            async with self._token_lock:
                now = time.monotonic()
                elapsed = now - self._last_refill
                if elapsed > 0:
                    new_tokens = int(elapsed / self._token_interval)
                    if new_tokens > 0:
                        self.tokens = min(self.max_requests_per_minute, self.tokens + new_tokens)
                        self._last_refill = now
                if self.tokens > 0:
                    self.tokens -= 1
                    return
            await asyncio.sleep(self._token_interval)

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Any:
        await self._acquire_token()
        logger.debug("%s %s %s", self.name, method, url)
        started = time.monotonic()
        status_label = "error"
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, headers=headers, data=body) as resp:
                    status_label = str(resp.status)
                    text = await resp.text()
                    return self._handle_response(
                        method, url, resp.status, resp.reason or "", dict(resp.headers), text
                    )
        except asyncio.TimeoutError as exc:
            raise RequestTimeout(f"{self.name} {method} {url} timed out") from exc
        except aiohttp.ClientError as exc:
            raise NetworkError(f"{self.name} {method} {url} failed: {exc}") from exc
        finally:
            observe_request(self.name, method, status_label, time.monotonic() - started)

    def _handle_response(
        self,
        method: str,
        url: str,
        status: int,
        reason: str,
        headers: Dict[str, str],
        text: str,
    ) -> Any:
        try:
            decoded = json.loads(text) if text else None
        except ValueError:
            decoded = None
        if status >= 400:
            # Avoid logging full response bodies; truncate to prevent leakage
            logger.error("%s REST API error %s: %s", self.name, status, text[:200])
        if self.error_handler is not None:
            self.error_handler(status, reason, url, method, headers, text, decoded)
        if status >= 400:
            raise ExchangeError(f"{self.name} {method} {url} {status} {reason}")
        if decoded is None and text:
            return text
        return decoded
