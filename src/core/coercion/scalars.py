"""Tolerant coercion of raw date-like and number-like values.

Every coercer degrades to ``None`` instead of raising so that normalizers can
substitute defaults rather than fail a whole record.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Any, Optional, Tuple

from common.records import RawValue, ValueKind

_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INFINITY_PREFIX = re.compile(r"[+-]?Infinity")


def parse_date(value: Any) -> Optional[float]:
    """Convert a raw date-like value to epoch milliseconds.

    Numbers are assumed to already be epoch milliseconds and pass through.
    Strings may use ``YYYY-MM-DD HH:mm`` in addition to ISO 8601. Values
    without an offset are read as UTC.
    """

    raw = RawValue.of(value)
    if raw.is_empty or raw.is_nan:
        return None
    if raw.kind is ValueKind.NUMBER:
        return raw.payload
    if raw.kind is ValueKind.DATETIME:
        return _epoch_millis(raw.payload)
    if raw.kind is ValueKind.STRING:
        return _parse_date_text(raw.payload)
    return None


def to_number(value: Any) -> Optional[float]:
    """Convert a raw number-like value, parsing strings by their leading numeric prefix."""

    raw = RawValue.of(value)
    if raw.is_empty or raw.is_nan:
        return None
    if raw.kind is ValueKind.NUMBER:
        return raw.payload
    if raw.kind is ValueKind.STRING:
        return _parse_float_prefix(raw.payload)
    return None


def to_text(value: Any) -> Optional[str]:
    """Render an identifier-like value as text; integral floats drop the ``.0``."""

    raw = RawValue.of(value)
    if raw.kind in (ValueKind.ABSENT, ValueKind.NULL):
        return None
    if raw.kind is ValueKind.STRING:
        return raw.payload
    if raw.kind is ValueKind.NUMBER and isinstance(raw.payload, float) and raw.payload.is_integer():
        return str(int(raw.payload))
    return str(raw.payload)


def to_text_list(value: Any) -> Tuple[str, ...]:
    raw = RawValue.of(value)
    if raw.is_empty:
        return ()
    if raw.kind is ValueKind.ARRAY:
        items = (to_text(item) for item in raw.payload)
        return tuple(item for item in items if item is not None)
    text = to_text(raw.payload)
    return (text,) if text is not None else ()


def to_flag(value: Any) -> Optional[bool]:
    """Truthiness coercion that keeps ``None`` as unknown."""

    if value is None:
        return None
    return bool(value)


def _epoch_millis(value: date) -> int:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(round(value.timestamp() * 1000))


def _parse_date_text(text: str) -> Optional[int]:
    candidate = text.strip()
    if not candidate:
        return None
    if "T" not in candidate:
        candidate = candidate.replace(" ", "T", 1)
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    return _epoch_millis(parsed)


def _parse_float_prefix(text: str) -> Optional[float]:
    stripped = text.strip()
    match = _NUMBER_PREFIX.match(stripped)
    if match:
        return float(match.group(0))
    match = _INFINITY_PREFIX.match(stripped)
    if match:
        return float(match.group(0).replace("Infinity", "inf"))
    return None
