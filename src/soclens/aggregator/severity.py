"""Severity bucketing for rule levels.

The same thresholds drive every dashboard's color coding and the
"High Severity" metric cards.
"""

from collections import Counter
from collections.abc import Iterable
from typing import Literal

from soclens.models.log import NormalizedLog

SeverityBucket = Literal["Low", "Medium", "High", "Critical"]

SEVERITY_BUCKETS: tuple[SeverityBucket, ...] = ("Low", "Medium", "High", "Critical")

CRITICAL_LEVEL = 12
HIGH_LEVEL = 8
MEDIUM_LEVEL = 4


def severity_bucket(level: int) -> SeverityBucket:
    """Classify a rule level; lower bounds are inclusive."""
    if level >= CRITICAL_LEVEL:
        return "Critical"
    if level >= HIGH_LEVEL:
        return "High"
    if level >= MEDIUM_LEVEL:
        return "Medium"
    return "Low"


def is_high_severity(level: int) -> bool:
    """Whether a level counts toward the high-severity card."""
    return level >= CRITICAL_LEVEL


def severity_breakdown(logs: Iterable[NormalizedLog]) -> dict[str, int]:
    """Count logs per severity bucket, with every bucket present."""
    counts = dict.fromkeys(SEVERITY_BUCKETS, 0)
    for entry in logs:
        counts[severity_bucket(entry.rule.level)] += 1
    return counts


def level_distribution(logs: Iterable[NormalizedLog]) -> dict[int, int]:
    """Count logs per rule level, ascending by level."""
    counts = Counter(entry.rule.level for entry in logs)
    return dict(sorted(counts.items()))
