"""Run IDs and record counters for pipeline runs."""

import time
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID, uuid4

from soclens.models.metrics import StepMetrics


def generate_run_id() -> UUID:
    """Generate a run ID (UUID v4) for correlating log lines."""
    return uuid4()


@dataclass
class MetricsCollector:
    """Counts raw documents seen, kept and dropped during one step."""

    step_name: str = "unknown"
    run_id: UUID = field(default_factory=generate_run_id)
    records_processed: int = 0
    records_output: int = 0
    skipped: int = 0
    started_at: float | None = None
    stopped_at: float | None = None

    def tally(self, kept: bool) -> None:
        """Count one raw document and whether it survived normalization."""
        self.records_processed += 1
        if kept:
            self.records_output += 1
        else:
            self.skipped += 1

    @property
    def duration_ms(self) -> int:
        if self.started_at is None:
            return 0
        end = self.stopped_at if self.stopped_at is not None else time.perf_counter()
        return int((end - self.started_at) * 1000)

    @property
    def drop_rate(self) -> float:
        """Fraction of processed documents that were dropped."""
        if not self.records_processed:
            return 0.0
        return self.skipped / self.records_processed

    def to_step_metrics(self) -> StepMetrics:
        return StepMetrics(
            run_id=self.run_id,
            step_name=self.step_name,
            duration_ms=self.duration_ms,
            records_processed=self.records_processed,
            records_output=self.records_output,
            skipped=self.skipped,
        )

    def to_dict(self) -> dict[str, Any]:
        """Snapshot as a JSON-ready dict, for log context."""
        return self.to_step_metrics().model_dump(mode="json")


@contextmanager
def collect_metrics(
    step_name: str, run_id: UUID | None = None
) -> Generator[MetricsCollector, None, None]:
    """Time a step and hand out its collector.

    Usage:
        with collect_metrics("pipeline") as metrics:
            logs = normalizer.normalize_all(documents, metrics=metrics)
    """
    collector = MetricsCollector(step_name=step_name, run_id=run_id or generate_run_id())
    collector.started_at = time.perf_counter()
    try:
        yield collector
    finally:
        collector.stopped_at = time.perf_counter()
