"""Compliance and statistics aggregation.

Provides:
- aggregate: per-framework distribution statistics (FrameworkStats)
- aggregate_mitre: MITRE ATT&CK tactic/technique roll-up
- severity helpers shared by every dashboard
"""

from soclens.aggregator.engine import aggregate, timeline_date
from soclens.aggregator.frameworks import (
    FRAMEWORK_IDS,
    FRAMEWORKS,
    FrameworkDescriptor,
    card_data_categories,
    control_family,
    get_framework,
    tsc_category,
)
from soclens.aggregator.mitre import aggregate_mitre
from soclens.aggregator.severity import (
    SEVERITY_BUCKETS,
    is_high_severity,
    level_distribution,
    severity_breakdown,
    severity_bucket,
)

__all__ = [
    "aggregate",
    "aggregate_mitre",
    "timeline_date",
    "FRAMEWORK_IDS",
    "FRAMEWORKS",
    "FrameworkDescriptor",
    "get_framework",
    "control_family",
    "card_data_categories",
    "tsc_category",
    "SEVERITY_BUCKETS",
    "severity_bucket",
    "is_high_severity",
    "severity_breakdown",
    "level_distribution",
]
