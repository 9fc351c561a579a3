"""Framework-membership and free-text search filters."""

from collections.abc import Iterable

from soclens.aggregator.frameworks import FRAMEWORKS, get_framework
from soclens.models.log import NormalizedLog


def filter_by_framework(
    logs: Iterable[NormalizedLog], framework: str
) -> list[NormalizedLog]:
    """Keep logs carrying at least one control ID for the framework."""
    descriptor = get_framework(framework)
    return [entry for entry in logs if descriptor.controls(entry)]


def matches_search(
    entry: NormalizedLog, term: str, framework: str | None = None
) -> bool:
    """Case-insensitive substring match of a log against a search term.

    Checks agent name, rule description, control IDs (of the given
    framework, or of every framework) and the country when geo data is
    present. A blank term matches everything.
    """
    if not term.strip():
        return True
    needle = term.lower()

    if needle in entry.agent.name.lower():
        return True
    if needle in entry.rule.description.lower():
        return True

    descriptors = [get_framework(framework)] if framework else FRAMEWORKS.values()
    for descriptor in descriptors:
        if any(needle in control.lower() for control in descriptor.controls(entry)):
            return True

    if entry.geoip and needle in entry.geoip.country_name.lower():
        return True

    return False


def search_logs(
    logs: Iterable[NormalizedLog], term: str, framework: str | None = None
) -> list[NormalizedLog]:
    """Filter logs by free-text search term."""
    if not term.strip():
        return list(logs)
    return [entry for entry in logs if matches_search(entry, term, framework)]
