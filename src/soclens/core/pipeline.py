"""One-shot fetch result -> statistics pipeline.

normalize -> time-range filter -> framework filter -> search -> aggregate,
run synchronously over an in-memory snapshot. Nothing is kept between
calls; a caller polling the log store simply runs it again.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from soclens.aggregator.engine import aggregate
from soclens.core.logging import debug
from soclens.core.metrics import collect_metrics
from soclens.filters.search import filter_by_framework, search_logs
from soclens.filters.time_range import filter_by_time_range
from soclens.models.log import NormalizedLog
from soclens.models.metrics import StepMetrics
from soclens.models.stats import FrameworkStats
from soclens.normalizer.log import LogNormalizer


@dataclass
class PipelineResult:
    """Filtered logs, their statistics and run metrics."""

    logs: list[NormalizedLog]
    stats: FrameworkStats
    metrics: StepMetrics


def run_pipeline(
    documents: Iterable[Any],
    framework: str,
    time_range: str = "all",
    search: str = "",
    now: datetime | None = None,
    normalizer: LogNormalizer | None = None,
    run_id: UUID | None = None,
) -> PipelineResult:
    """Normalize, filter and aggregate raw documents for one framework.

    Args:
        documents: Raw log-store documents
        framework: Framework identifier
        time_range: Time-range selector
        search: Free-text search term
        now: Reference instant for the time-range filter
        normalizer: Normalizer to use (defaults to LogNormalizer())
        run_id: Correlation ID for metrics

    Returns:
        PipelineResult with the logs that fed the statistics
    """
    normalizer = normalizer or LogNormalizer()

    with collect_metrics("pipeline", run_id=run_id) as metrics:
        logs = normalizer.normalize_all(documents, metrics=metrics)
        logs = filter_by_time_range(logs, time_range, now=now)
        logs = filter_by_framework(logs, framework)
        logs = search_logs(logs, search, framework=framework)
        stats = aggregate(logs, framework)

    if metrics.skipped:
        debug(
            "Dropped unparseable documents",
            skipped=metrics.skipped,
            processed=metrics.records_processed,
            drop_rate=f"{metrics.drop_rate:.1%}",
        )
    debug(
        "Pipeline complete",
        framework=framework,
        time_range=time_range,
        matched=len(logs),
        duration_ms=metrics.duration_ms,
    )

    return PipelineResult(logs=logs, stats=stats, metrics=metrics.to_step_metrics())
