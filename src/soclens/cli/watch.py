"""Periodic re-fetch and re-aggregation.

The ticker lives outside the core: every tick re-reads the snapshot and
runs the stateless pipeline again. A tick whose input cannot be read is
reported and retried on the next tick.
"""

import time
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import click

from soclens.aggregator.frameworks import FRAMEWORK_IDS
from soclens.cli.context import AppContext
from soclens.cli.logs import compute_stats, search_option, time_range_option
from soclens.core.errors import SocLensError
from soclens.core.logging import info, warning
from soclens.core.source import load_documents


class Ticker:
    """Invokes a callback at a fixed interval."""

    def __init__(
        self,
        interval: float,
        iterations: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the ticker.

        Args:
            interval: Seconds between tick starts
            iterations: Stop after this many ticks (None runs forever)
            sleep: Sleep function
            clock: Monotonic clock
        """
        self.interval = interval
        self.iterations = iterations
        self.sleep = sleep
        self.clock = clock

    def run(self, tick: Callable[[int], None]) -> int:
        """Run ticks until the iteration limit.

        A tick that overruns the interval starts the next one immediately.

        Returns:
            Number of ticks executed
        """
        count = 0
        next_at = self.clock()
        while self.iterations is None or count < self.iterations:
            tick(count)
            count += 1
            if self.iterations is not None and count >= self.iterations:
                break

            next_at += self.interval
            delay = next_at - self.clock()
            if delay > 0:
                self.sleep(delay)
            else:
                next_at = self.clock()
        return count


@click.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(path_type=Path, allow_dash=False))
@click.option(
    "--framework",
    "-F",
    "framework_ids",
    type=click.Choice(FRAMEWORK_IDS),
    multiple=True,
    help="Framework to report (repeatable; default: from settings)",
)
@click.option(
    "--interval",
    "-i",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between refreshes (default: from settings, else 10)",
)
@click.option(
    "--iterations",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many refreshes (default: run until interrupted)",
)
@time_range_option
@search_option
@click.pass_context
def watch(
    ctx: click.Context,
    input_path: Path,
    framework_ids: tuple[str, ...],
    interval: float | None,
    iterations: int | None,
    time_range: str | None,
    search: str | None,
) -> None:
    """Re-read INPUT periodically and emit fresh statistics each time."""
    app: AppContext = ctx.obj
    formatter, settings = app.formatter, app.settings
    frameworks = list(framework_ids) or settings.frameworks

    def tick(number: int) -> None:
        try:
            documents = load_documents(input_path)
        except SocLensError as e:
            warning(f"Refresh {number} skipped: {e}", **(e.error.context or {}))
            return
        report = compute_stats(
            documents,
            settings,
            framework_ids=frameworks,
            time_range=time_range,
            search=search,
        )
        formatter.output(
            {
                "tick": number,
                "generatedAt": datetime.now(UTC).isoformat(),
                "stats": report,
            },
            title=f"Refresh {number}",
        )

    ticker = Ticker(
        interval=interval or settings.poll_interval_seconds,
        iterations=iterations,
    )
    try:
        ticker.run(tick)
    except KeyboardInterrupt:
        info("Stopped")
