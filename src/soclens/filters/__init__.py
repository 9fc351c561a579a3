"""Pre-aggregation filters: time range, framework membership, search."""

from soclens.filters.search import filter_by_framework, matches_search, search_logs
from soclens.filters.time_range import (
    TIME_RANGES,
    filter_by_time_range,
    time_range_cutoff,
)

__all__ = [
    "TIME_RANGES",
    "filter_by_time_range",
    "time_range_cutoff",
    "filter_by_framework",
    "matches_search",
    "search_logs",
]
