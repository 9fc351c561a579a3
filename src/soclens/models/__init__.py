"""Pydantic models for SOC Lens."""

from soclens.models.error import StructuredError
from soclens.models.log import (
    AgentInfo,
    EventInfo,
    FlowInfo,
    GeoInfo,
    MitreInfo,
    NetworkInfo,
    NormalizedLog,
    RuleInfo,
)
from soclens.models.metrics import StepMetrics
from soclens.models.stats import (
    AgentMitreStats,
    ControlSeverity,
    FrameworkStats,
    MitreStats,
    NamedCount,
    TimelinePoint,
)

__all__ = [
    "StructuredError",
    "StepMetrics",
    "NormalizedLog",
    "AgentInfo",
    "RuleInfo",
    "MitreInfo",
    "NetworkInfo",
    "FlowInfo",
    "GeoInfo",
    "EventInfo",
    "FrameworkStats",
    "ControlSeverity",
    "TimelinePoint",
    "MitreStats",
    "AgentMitreStats",
    "NamedCount",
]
