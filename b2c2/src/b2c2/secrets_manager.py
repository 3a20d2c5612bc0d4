"""
secrets_manager
================

Loading of API credentials.  Secrets are read from the environment, or
from a file when the corresponding ``*_FILE`` environment variable is
set, so operators can mount credentials as files (Docker or Kubernetes
secrets) without putting them in the process environment.

Example usage::

    from b2c2.secrets_manager import EnvFileSecretsManager

    secrets = EnvFileSecretsManager()
    api_key = secrets.get_secret("B2C2_API_KEY")
    api_secret = secrets.get_secret("B2C2_API_SECRET")
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class BaseSecretsManager:
    """Abstract base class for secrets managers."""

    def get_secret(self, name: str) -> Optional[str]:  # pragma: no cover - override
        """Return the secret value for ``name`` or ``None`` if unavailable."""
        raise NotImplementedError


class EnvFileSecretsManager(BaseSecretsManager):
    """
    Reads ``name`` from the environment, or from the file named by
    ``{name}_FILE``.  When both are set the file wins.  Relative file paths
    are resolved against ``base_path`` when one is given.
    """

    def __init__(self, base_path: Optional[Path] = None) -> None:
        self.base_path = base_path
        self._cache: Dict[str, Optional[str]] = {}

    def get_secret(self, name: str) -> Optional[str]:
        if name in self._cache:
            return self._cache[name]

        value: Optional[str]
        file_path = os.getenv(f"{name}_FILE")
        if file_path:
            path = Path(file_path)
            if not path.is_absolute() and self.base_path is not None:
                path = self.base_path / path
            try:
                value = path.read_text(encoding="utf-8").strip()
            except OSError as exc:
                # Never log the path contents, only where we looked.
                logger.warning("Failed to read secret %s from %s: %s", name, path, exc)
                value = None
        else:
            value = os.getenv(name)

        self._cache[name] = value or None
        return self._cache[name]
