#!/usr/bin/env python
"""Simple health check utility.

This script reports whether the B2C2 adapter's settings and secrets are
present in the environment.  Operators can run it to verify the
environment before starting anything that trades.  Secret values are
never printed.
"""

from __future__ import annotations

import os


def main() -> None:
    keys = [
        "B2C2_API_KEY",
        "B2C2_API_SECRET",
        "B2C2_SANDBOX",
        "B2C2_TIMEOUT",
        "B2C2_MAX_REQUESTS_PER_MINUTE",
        "B2C2_MAX_ATTEMPTS",
    ]
    print("Health Check:")
    for key in keys:
        val = os.environ.get(key) or os.environ.get(f"{key}_FILE")
        status = "set" if val else "missing"
        print(f"{key}: {status}")


if __name__ == "__main__":
    main()
