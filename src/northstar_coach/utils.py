"""Shared coercion helpers for the coaching engine."""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


def as_float(value: Any) -> float | None:
    """Parse a finite float; booleans, NaN, infinities and junk become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        numeric = float(value)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            numeric = float(raw)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(numeric):
        return None
    return numeric


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_score(value: Any, fallback: float) -> float:
    numeric = as_float(value)
    if numeric is None:
        return fallback
    return clamp(numeric, 0.0, 100.0)


def as_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    raw = value.strip()
    return raw or None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_to(value: float, digits: int) -> float:
    """Round to ``digits`` decimals with exact halves going up, from the exact binary value."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Render 12.0 as "12" and 12.5 as "12.5" for user-facing copy."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def pick(raw: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-None value among keys (nullish-coalescing lookup)."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None
