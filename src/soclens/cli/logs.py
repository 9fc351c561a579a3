"""Log normalization and statistics CLI commands."""

from pathlib import Path
from typing import Any

import click

from soclens.aggregator.frameworks import FRAMEWORK_IDS, FRAMEWORKS
from soclens.aggregator.mitre import aggregate_mitre
from soclens.cli.context import AppContext
from soclens.core.config import Settings
from soclens.core.errors import SocLensError
from soclens.core.logging import debug
from soclens.core.metrics import collect_metrics, generate_run_id
from soclens.core.pipeline import run_pipeline
from soclens.core.source import load_documents
from soclens.filters.search import filter_by_framework, search_logs
from soclens.filters.time_range import TIME_RANGES, filter_by_time_range
from soclens.normalizer.log import LogNormalizer

time_range_option = click.option(
    "--time-range",
    "-t",
    type=click.Choice(list(TIME_RANGES)),
    default=None,
    help="Trailing time window (default: from settings, else all)",
)

search_option = click.option(
    "--search",
    "-s",
    default=None,
    help="Case-insensitive search on agent, description, controls, country",
)


def _normalizer(settings: Settings) -> LogNormalizer:
    return LogNormalizer(map_text_levels=settings.map_text_levels)


@click.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(path_type=Path, allow_dash=True))
@click.option(
    "--framework",
    "-F",
    type=click.Choice(FRAMEWORK_IDS),
    default=None,
    help="Only logs tagged for this framework",
)
@time_range_option
@search_option
@click.pass_context
def normalize(
    ctx: click.Context,
    input_path: Path,
    framework: str | None,
    time_range: str | None,
    search: str | None,
) -> None:
    """Normalize raw log documents to the canonical record shape."""
    app: AppContext = ctx.obj
    formatter, settings = app.formatter, app.settings

    try:
        documents = load_documents(input_path)
        with collect_metrics("normalize") as metrics:
            logs = _normalizer(settings).normalize_all(documents, metrics=metrics)
            logs = filter_by_time_range(logs, time_range or settings.time_range)
            if framework:
                logs = filter_by_framework(logs, framework)
            logs = search_logs(logs, search if search is not None else settings.search, framework)
        formatter.stream(iter(logs))
        debug("Normalization complete", **metrics.to_dict())
    except SocLensError as e:
        formatter.error(e.to_structured_error())
        ctx.exit(1)


@click.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(path_type=Path, allow_dash=True))
@click.option(
    "--framework",
    "-F",
    "framework_ids",
    type=click.Choice(FRAMEWORK_IDS),
    multiple=True,
    help="Framework to report (repeatable; default: from settings)",
)
@time_range_option
@search_option
@click.pass_context
def stats(
    ctx: click.Context,
    input_path: Path,
    framework_ids: tuple[str, ...],
    time_range: str | None,
    search: str | None,
) -> None:
    """Compute compliance statistics per framework.

    Output is a mapping of framework identifier to its statistics.
    """
    app: AppContext = ctx.obj
    formatter, settings = app.formatter, app.settings

    try:
        documents = load_documents(input_path)
        report = compute_stats(
            documents,
            settings,
            framework_ids=list(framework_ids) or settings.frameworks,
            time_range=time_range,
            search=search,
        )
        formatter.output(report, title="Compliance statistics")
    except SocLensError as e:
        formatter.error(e.to_structured_error())
        ctx.exit(1)


def compute_stats(
    documents: list[Any],
    settings: Settings,
    framework_ids: list[str],
    time_range: str | None = None,
    search: str | None = None,
) -> dict[str, Any]:
    """Run the pipeline once per framework over the same snapshot."""
    normalizer = _normalizer(settings)
    run_id = generate_run_id()
    report = {}
    for framework in framework_ids:
        result = run_pipeline(
            documents,
            framework,
            time_range=time_range or settings.time_range,
            search=search if search is not None else settings.search,
            normalizer=normalizer,
            run_id=run_id,
        )
        report[framework] = result.stats
    return report


@click.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(path_type=Path, allow_dash=True))
@time_range_option
@search_option
@click.pass_context
def mitre(
    ctx: click.Context,
    input_path: Path,
    time_range: str | None,
    search: str | None,
) -> None:
    """Summarize MITRE ATT&CK tactics and techniques."""
    app: AppContext = ctx.obj
    formatter, settings = app.formatter, app.settings

    try:
        documents = load_documents(input_path)
        logs = _normalizer(settings).normalize_all(documents)
        logs = filter_by_time_range(logs, time_range or settings.time_range)
        logs = search_logs(logs, search if search is not None else settings.search)
        formatter.output(aggregate_mitre(logs), title="MITRE ATT&CK")
    except SocLensError as e:
        formatter.error(e.to_structured_error())
        ctx.exit(1)


@click.command()
@click.pass_context
def frameworks(ctx: click.Context) -> None:
    """List supported compliance frameworks."""
    formatter = ctx.obj.formatter

    formatter.output(
        [
            {
                "id": descriptor.framework_id,
                "name": descriptor.name,
                "control_field": descriptor.control_field,
                "tracks_geo": descriptor.tracks_geo,
                "extensions": list(descriptor.counters),
            }
            for descriptor in FRAMEWORKS.values()
        ],
        title="Frameworks",
    )
