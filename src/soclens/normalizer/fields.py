"""Field coercion helpers for heterogeneous raw log documents."""

import json
import math
from datetime import UTC, datetime, timedelta
from typing import Any

from dateutil import parser as dateutil_parser

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

# Two fill-in dates that differ in every date field. A string only counts as
# a complete date when both parses agree.
_FILL_DATES = (datetime(2000, 1, 1), datetime(2001, 2, 2))

# Textual levels written by some collectors, as mapped by the log store's
# level migration.
TEXT_LEVELS = {
    "alert": 14,
    "critical": 13,
    "error": 12,
    "warning": 8,
    "notice": 5,
    "info": 3,
    "debug": 1,
}


def lookup(obj: Any, *path: str) -> Any:
    """Walk nested mappings, returning None if any step is missing."""
    for key in path:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def first_present(*values: Any) -> Any:
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def as_text(value: Any) -> str | None:
    """Stringify a scalar, keeping None as None."""
    if value is None:
        return None
    return str(value)


def as_list(value: Any) -> list[str]:
    """Coalesce a bare value or a sequence into a list of strings.

    Falsy entries are dropped; None gives an empty list.
    """
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple)) else [value]
    return [str(item) for item in items if item]


def decode_message(value: Any) -> dict[str, Any]:
    """Decode an embedded message into a mapping.

    JSON strings are parsed; mappings pass through. Plain text and JSON
    that is not an object give an empty mapping.
    """
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            return {}
        if isinstance(decoded, dict):
            return decoded
    return {}


def resolve_timestamp(value: Any) -> datetime | None:
    """Resolve a raw timestamp to a UTC instant.

    Numbers are epoch seconds, scaled to milliseconds before conversion.
    Strings are ISO-8601 or any format dateutil understands; naive
    results are taken as UTC.

    Returns:
        Timezone-aware datetime, or None if the value is unusable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _as_utc(value)

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        try:
            return EPOCH + timedelta(milliseconds=value * 1000)
        except OverflowError:
            return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return _as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            pass
        return _parse_general(text)

    return None


def _parse_general(text: str) -> datetime | None:
    """Parse a free-form date string that names a full calendar date.

    Partial strings ("10:00", "Monday", "Mar 2024") would otherwise be
    completed from a default date, so they are rejected.
    """
    try:
        first, second = (
            dateutil_parser.parse(text, default=default) for default in _FILL_DATES
        )
    except (ValueError, OverflowError):
        return None
    if first != second:
        return None
    return _as_utc(first)


def coerce_level(value: Any, map_text_levels: bool = False) -> int:
    """Coerce a rule level to a non-negative integer.

    Anything non-numeric (or negative) becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, str):
        value = value.strip()
        if map_text_levels and value.lower() in TEXT_LEVELS:
            return TEXT_LEVELS[value.lower()]

    try:
        level = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0

    return max(level, 0)


def _as_utc(ts: datetime) -> datetime | None:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    try:
        return ts.astimezone(UTC)
    except OverflowError:
        return None
