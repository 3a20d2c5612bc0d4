"""Pytest configuration for path setup.

The package lives under ``b2c2/src``.  When the project is not installed,
that directory and the repository root (for ``tests.helpers``) are put
at the front of ``sys.path`` before test collection.
"""

from __future__ import annotations

import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]

for path in (ROOT, ROOT / "b2c2" / "src"):
    path_str = str(path)
    if path_str in sys.path:
        sys.path.remove(path_str)
    sys.path.insert(0, path_str)
