"""Trailing time-range filter over normalized logs."""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from soclens.core.errors import InvalidTimeRangeError
from soclens.models.log import NormalizedLog

# None means no cutoff.
TIME_RANGES: dict[str, timedelta | None] = {
    "1h": timedelta(hours=1),
    "3h": timedelta(hours=3),
    "12h": timedelta(hours=12),
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "all": None,
}


def time_range_cutoff(selector: str, now: datetime | None = None) -> datetime | None:
    """Earliest instant retained by a selector, or None for "all".

    Raises:
        InvalidTimeRangeError: If the selector is not recognized
    """
    if selector not in TIME_RANGES:
        raise InvalidTimeRangeError(selector, list(TIME_RANGES))

    window = TIME_RANGES[selector]
    if window is None:
        return None
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now - window


def filter_by_time_range(
    logs: Iterable[NormalizedLog],
    selector: str,
    now: datetime | None = None,
) -> list[NormalizedLog]:
    """Keep logs within the trailing window ending at now.

    Args:
        logs: Normalized logs
        selector: One of 1h, 3h, 12h, 24h, 7d, all
        now: Reference instant (defaults to the current UTC time; naive
            values are taken as UTC)

    Returns:
        Logs whose timestamp is at or after the cutoff
    """
    cutoff = time_range_cutoff(selector, now)
    if cutoff is None:
        return list(logs)
    return [entry for entry in logs if entry.timestamp >= cutoff]
