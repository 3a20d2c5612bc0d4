"""
Adapter configuration.

Credentials and transport settings are passed into an adapter explicitly
as an :class:`ExchangeConfig`.  ``ExchangeConfig.from_env`` builds one
from environment variables, which is what the command-line entry points
use:

* ``B2C2_API_KEY`` / ``B2C2_API_SECRET`` – credentials.  Either may be
  supplied as a file via ``B2C2_API_KEY_FILE`` / ``B2C2_API_SECRET_FILE``.
* ``B2C2_SANDBOX`` – ``true`` to use the UAT environment.
* ``B2C2_TIMEOUT`` – per-request timeout in seconds (default 10).
* ``B2C2_MAX_REQUESTS_PER_MINUTE`` – token bucket size.  When unset the
  bucket follows the adapter's ``rate_limit`` (120 for B2C2).
* ``B2C2_MAX_ATTEMPTS`` – attempts per request for network failures
  (default 1, meaning no retries).
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .secrets_manager import BaseSecretsManager, EnvFileSecretsManager

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ExchangeConfig(BaseModel):
    api_key: Optional[str] = None
    secret: Optional[str] = Field(default=None, repr=False)
    sandbox: bool = False
    timeout: float = Field(default=10.0, gt=0)
    max_requests_per_minute: Optional[int] = Field(default=None, ge=0)
    max_attempts: int = Field(default=1, ge=1)
    options: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_env(
        cls,
        prefix: str = "B2C2",
        secrets: Optional[BaseSecretsManager] = None,
    ) -> "ExchangeConfig":
        secrets = secrets or EnvFileSecretsManager()
        rpm = os.getenv(f"{prefix}_MAX_REQUESTS_PER_MINUTE")
        return cls(
            api_key=secrets.get_secret(f"{prefix}_API_KEY"),
            secret=secrets.get_secret(f"{prefix}_API_SECRET"),
            sandbox=os.getenv(f"{prefix}_SANDBOX", "false").strip().lower() in _TRUE_VALUES,
            timeout=float(os.getenv(f"{prefix}_TIMEOUT", "10")),
            max_requests_per_minute=int(rpm) if rpm else None,
            max_attempts=int(os.getenv(f"{prefix}_MAX_ATTEMPTS", "1")),
        )
