"""
Decimal-exact arithmetic on numeric strings.

Venue payloads carry prices and amounts as JSON numbers; multiplying them
as floats drifts (``0.1 * 3 == 0.30000000000000004``).  These helpers go
through :class:`decimal.Decimal` with a wide context and hand back plain
decimal strings, so the result can be stored or parsed into a float only
once at the end.
"""

from __future__ import annotations

from decimal import Context, Decimal, InvalidOperation
from typing import Optional

_CONTEXT = Context(prec=100)


def _to_decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"not a decimal string: {value!r}") from exc


def _to_string(value: Decimal) -> str:
    text = format(value.normalize(_CONTEXT), "f")
    # normalize() keeps the sign of negative zero
    return "0" if text in ("-0", "0") else text


def string_mul(a: Optional[str], b: Optional[str]) -> Optional[str]:
    if a is None or b is None:
        return None
    return _to_string(_CONTEXT.multiply(_to_decimal(a), _to_decimal(b)))


def string_add(a: Optional[str], b: Optional[str]) -> Optional[str]:
    if a is None and b is None:
        return None
    if a is None:
        return b
    if b is None:
        return a
    return _to_string(_CONTEXT.add(_to_decimal(a), _to_decimal(b)))


def string_sub(a: Optional[str], b: Optional[str]) -> Optional[str]:
    if a is None or b is None:
        return None
    return _to_string(_CONTEXT.subtract(_to_decimal(a), _to_decimal(b)))


def is_number(value: Optional[str]) -> bool:
    """True when ``value`` is a finite decimal string."""
    if not isinstance(value, str):
        return False
    try:
        return Decimal(value).is_finite()
    except InvalidOperation:
        return False
