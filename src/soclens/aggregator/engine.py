"""Generic compliance statistics engine.

One pass over already-normalized, already-filtered logs produces the
FrameworkStats for a single framework. Framework-specific counters come
from the FrameworkDescriptor hooks.
"""

from collections import Counter
from collections.abc import Iterable
from datetime import UTC

from soclens.aggregator.frameworks import get_framework
from soclens.aggregator.severity import SEVERITY_BUCKETS, severity_bucket
from soclens.models.log import NormalizedLog
from soclens.models.stats import ControlSeverity, FrameworkStats, TimelinePoint


def timeline_date(entry: NormalizedLog) -> str:
    """UTC calendar day of a log, as YYYY-MM-DD."""
    return entry.timestamp.astimezone(UTC).date().isoformat()


def aggregate(logs: Iterable[NormalizedLog], framework: str) -> FrameworkStats:
    """Compute distribution statistics for one framework.

    Logs without any control ID for the framework are skipped.

    Args:
        logs: Normalized logs, already time-range and search filtered
        framework: Framework identifier (hipaa, pci_dss, gdpr, nist_800_53, tsc)

    Returns:
        FrameworkStats for the framework

    Raises:
        UnknownFrameworkError: If the framework is not registered
    """
    descriptor = get_framework(framework)

    total = 0
    unique_controls: dict[str, None] = {}
    control_levels: dict[str, list[int]] = {}
    agents: Counter[str] = Counter()
    timeline: Counter[str] = Counter()
    countries: Counter[str] = Counter()
    levels: Counter[int] = Counter()
    buckets = dict.fromkeys(SEVERITY_BUCKETS, 0)
    extensions = descriptor.new_extensions()

    for entry in logs:
        controls = descriptor.controls(entry)
        if not controls:
            continue

        total += 1
        level = entry.rule.level

        for control in controls:
            unique_controls.setdefault(control, None)
            control_levels.setdefault(control, []).append(level)
            if descriptor.on_control:
                descriptor.on_control(control, extensions)

        agents[entry.agent.name] += 1
        timeline[timeline_date(entry)] += 1
        levels[level] += 1
        buckets[severity_bucket(level)] += 1

        if descriptor.tracks_geo:
            countries[entry.country] += 1

        if descriptor.on_log:
            descriptor.on_log(entry, extensions)

    control_severity = {
        control: ControlSeverity(
            count=len(values),
            avg_level=sum(values) / len(values),
            levels=values,
        )
        for control, values in control_levels.items()
    }

    return FrameworkStats(
        framework=descriptor.framework_id,
        total_count=total,
        unique_control_ids=list(unique_controls),
        agent_distribution=dict(agents),
        timeline_data=[
            TimelinePoint(date=date, count=count)
            for date, count in sorted(timeline.items())
        ],
        control_severity=control_severity,
        level_distribution=dict(sorted(levels.items())),
        severity_buckets=buckets,
        country_distribution=dict(countries) if descriptor.tracks_geo else None,
        **extensions,
    )
