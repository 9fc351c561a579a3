"""Output formatting for the SOC Lens CLI.

Results go to stdout as JSON, JSONL or a human-readable rendering.
Logs and diagnostics go to stderr (see soclens.core.logging).
"""

import json
import sys
from collections.abc import Iterable, Iterator
from typing import Any, Literal, TextIO

from pydantic import BaseModel

from soclens.aggregator.severity import severity_bucket
from soclens.models.log import NormalizedLog
from soclens.models.stats import FrameworkStats

OutputFormat = Literal["json", "jsonl", "human"]

_output_format: OutputFormat = "json"

# (header, width) for the human log table
LOG_COLUMNS = (
    ("Time", 20),
    ("Agent", 18),
    ("Level", 5),
    ("Severity", 8),
    ("Rule", 8),
    ("Description", 48),
)

TOP_CONTROLS = 5


def set_output_format(format: OutputFormat) -> None:
    """Set the global output format."""
    global _output_format
    _output_format = format


def to_jsonable(data: Any) -> Any:
    """Dump pydantic models (also inside dicts and lists) with their aliases."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    if isinstance(data, list):
        return [to_jsonable(item) for item in data]
    return data


def output_json(data: Any, file: TextIO | None = None) -> None:
    """Write one JSON document to stdout.

    Args:
        data: dict, list or pydantic model
        file: Output file (defaults to stdout)
    """
    file = file or sys.stdout
    json.dump(to_jsonable(data), file, ensure_ascii=False, default=str)
    file.write("\n")
    file.flush()


def output_jsonl(records: Iterable[Any], file: TextIO | None = None) -> None:
    """Write one JSON document per record.

    Args:
        records: Records (dicts or pydantic models)
        file: Output file (defaults to stdout)
    """
    file = file or sys.stdout
    for record in records:
        json.dump(to_jsonable(record), file, ensure_ascii=False, default=str)
        file.write("\n")
    file.flush()


def output_human(data: Any, title: str | None = None, file: TextIO | None = None) -> None:
    """Render results for a terminal.

    Framework statistics get a dashboard-style summary; anything else is
    written as an indented tree.
    """
    file = file or sys.stdout
    if title:
        _write_heading(title, file)

    if isinstance(data, FrameworkStats):
        _write_stats(data, file)
    elif isinstance(data, dict) and data and all(
        isinstance(value, FrameworkStats) for value in data.values()
    ):
        for stats in data.values():
            _write_stats(stats, file)
    else:
        _write_tree(to_jsonable(data), file)
    file.flush()


def output_log_table(logs: Iterable[NormalizedLog], file: TextIO | None = None) -> None:
    """Render normalized logs as a fixed-width table."""
    file = file or sys.stdout
    logs = list(logs)
    if not logs:
        file.write("No logs.\n")
        return

    header = " | ".join(name.ljust(width) for name, width in LOG_COLUMNS)
    file.write(header + "\n")
    file.write("-" * len(header) + "\n")

    for entry in logs:
        cells = (
            entry.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            entry.agent.name,
            str(entry.rule.level),
            severity_bucket(entry.rule.level),
            entry.rule.id,
            entry.rule.description,
        )
        file.write(
            " | ".join(
                _fit(cell, width) for cell, (_, width) in zip(cells, LOG_COLUMNS)
            )
            + "\n"
        )

    file.write(f"\n{len(logs)} logs\n")
    file.flush()


def output(data: Any, format: OutputFormat | None = None, **kwargs: Any) -> None:
    """Write data in the given format (the global one if not specified)."""
    format = format or _output_format

    if format == "jsonl" and isinstance(data, list):
        output_jsonl(data, **kwargs)
    elif format == "human":
        output_human(data, **kwargs)
    else:
        output_json(data, **kwargs)


def output_error(error: Any, file: TextIO | None = None) -> None:
    """Write a structured error to stdout for programmatic handling."""
    output(error, file=file)


class OutputFormatter:
    """Encapsulates output formatting for commands."""

    def __init__(self, format: OutputFormat = "json"):
        self.format = format

    def output(self, data: Any, title: str | None = None) -> None:
        """Write a command result.

        Args:
            data: Result to write to stdout
            title: Heading for human-readable output
        """
        if self.format == "human":
            output_human(data, title=title)
        else:
            output(data, format=self.format)

    def error(self, error: Any) -> None:
        """Write a structured error."""
        output_error(error)

    def stream(self, logs: Iterator[NormalizedLog]) -> None:
        """Write normalized logs as JSONL, or a table in human mode."""
        if self.format == "human":
            output_log_table(logs)
        else:
            output_jsonl(logs)


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        return text[: width - 3] + "..."
    return text.ljust(width)


def _write_heading(title: str, file: TextIO) -> None:
    file.write(f"\n{title}\n")
    file.write("=" * len(title) + "\n\n")


def _write_stats(stats: FrameworkStats, file: TextIO) -> None:
    """Metric cards, top controls and framework-specific counters."""
    file.write(f"[{stats.framework}]\n")
    file.write(f"  Total events:     {stats.total_count}\n")
    file.write(f"  Unique controls:  {len(stats.unique_control_ids)}\n")
    file.write(f"  Agents:           {len(stats.agent_distribution)}\n")
    file.write(f"  Critical (>=12):  {stats.severity_buckets.get('Critical', 0)}\n")
    file.write(f"  High (8-11):      {stats.severity_buckets.get('High', 0)}\n")

    ranked = sorted(
        stats.control_severity.items(), key=lambda item: (-item[1].count, item[0])
    )
    if ranked:
        file.write("  Top controls:\n")
        for control, severity in ranked[:TOP_CONTROLS]:
            file.write(
                f"    {control}: {severity.count} events, avg level {severity.avg_level:.1f}\n"
            )

    extensions = {
        "Countries": stats.country_distribution,
        "Control families": stats.control_families,
        "Card data": stats.card_data_statistics,
        "Data subject requests": stats.data_subject_request_types,
        "Criteria": stats.category_distribution,
    }
    for label, counts in extensions.items():
        if counts:
            file.write(f"  {label}:\n")
            for name, count in counts.items():
                file.write(f"    {name}: {count}\n")
    file.write("\n")


def _write_tree(value: Any, file: TextIO, depth: int = 0) -> None:
    pad = "  " * depth
    if isinstance(value, dict):
        for key, item in value.items():
            if isinstance(item, (dict, list)) and item:
                file.write(f"{pad}{key}:\n")
                _write_tree(item, file, depth + 1)
            else:
                file.write(f"{pad}{key}: {item}\n")
    elif isinstance(value, list):
        for item in value:
            if isinstance(item, (dict, list)):
                file.write(f"{pad}-\n")
                _write_tree(item, file, depth + 1)
            else:
                file.write(f"{pad}- {item}\n")
    else:
        file.write(f"{pad}{value}\n")
