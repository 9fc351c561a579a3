"""Aggregate statistics models for SOC Lens.

Attributes are snake_case; serialization with ``by_alias=True`` yields
the camelCase keys the dashboard front end binds to.
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

STATS_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "forbid",
}


class ControlSeverity(BaseModel):
    """Severity roll-up for one control, article or criterion."""

    count: int = Field(default=0, ge=0, description="Occurrences of the control")
    avg_level: float = Field(default=0.0, description="Mean rule level")
    levels: list[int] = Field(default_factory=list, description="Rule level per occurrence")

    model_config = STATS_CONFIG


class TimelinePoint(BaseModel):
    """Event count for one UTC calendar day."""

    date: str = Field(..., description="UTC date, YYYY-MM-DD")
    count: int = Field(..., ge=0)

    model_config = STATS_CONFIG


class FrameworkStats(BaseModel):
    """Distribution statistics for one compliance framework.

    Framework-specific fields stay None for frameworks that do not
    carry them.
    """

    framework: str = Field(..., description="Framework identifier")
    total_count: int = Field(default=0, ge=0, description="Logs tagged for the framework")
    unique_control_ids: list[str] = Field(
        default_factory=list,
        description="Distinct control IDs in first-seen order",
    )
    agent_distribution: dict[str, int] = Field(default_factory=dict)
    timeline_data: list[TimelinePoint] = Field(default_factory=list)
    control_severity: dict[str, ControlSeverity] = Field(default_factory=dict)
    level_distribution: dict[int, int] = Field(
        default_factory=dict,
        description="Log count per rule level, ascending",
    )
    severity_buckets: dict[str, int] = Field(
        default_factory=dict,
        description="Log count per Low/Medium/High/Critical bucket",
    )

    # GDPR, PCI-DSS
    country_distribution: dict[str, int] | None = None
    # NIST 800-53
    control_families: dict[str, int] | None = None
    # PCI-DSS
    card_data_statistics: dict[str, int] | None = None
    # GDPR
    data_subject_request_types: dict[str, int] | None = None
    # TSC
    control_distribution: dict[str, int] | None = None
    category_distribution: dict[str, int] | None = None

    model_config = STATS_CONFIG


class NamedCount(BaseModel):
    """A name with its occurrence count."""

    name: str
    count: int = Field(..., ge=0)

    model_config = STATS_CONFIG


class AgentMitreStats(BaseModel):
    """MITRE ATT&CK activity seen from one agent."""

    count: int = Field(default=0, ge=0)
    tactics: dict[str, int] = Field(default_factory=dict)
    techniques: dict[str, int] = Field(default_factory=dict)

    model_config = STATS_CONFIG


class MitreStats(BaseModel):
    """MITRE ATT&CK roll-up across a log set."""

    total_mitre_alerts: int = Field(default=0, ge=0)
    tactics: dict[str, int] = Field(default_factory=dict)
    techniques: dict[str, int] = Field(default_factory=dict)
    tactics_list: list[NamedCount] = Field(default_factory=list)
    techniques_list: list[NamedCount] = Field(default_factory=list)
    by_agent: dict[str, AgentMitreStats] = Field(default_factory=dict)

    model_config = STATS_CONFIG
