"""Canonical log record models for SOC Lens.

A NormalizedLog is produced once per raw log-store document by the
normalizer and is read-only afterwards. List fields are never None so
aggregation code can iterate them without guards.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

FRAMEWORK_FIELDS = ("hipaa", "pci_dss", "gdpr", "nist_800_53", "tsc", "gpg13")

RECORD_CONFIG = {"frozen": True, "extra": "forbid"}

# Network, geo and envelope fields serialize as camelCase (srcIp, countryName,
# rawData). Rule fields keep their log-store names (pci_dss, nist_800_53).
CAMEL_RECORD_CONFIG = {
    **RECORD_CONFIG,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class AgentInfo(BaseModel):
    """Reporting agent (or manager) of a log."""

    name: str = Field(default="Unknown", description="Agent name")
    id: str = Field(default="N/A", description="Agent identifier")

    model_config = RECORD_CONFIG


class RuleInfo(BaseModel):
    """Detection rule metadata, including compliance control tags."""

    level: int = Field(default=0, ge=0, description="Rule severity level")
    id: str = Field(default="N/A", description="Rule identifier")
    description: str = Field(default="No description", description="Rule description")
    groups: list[str] = Field(default_factory=list, description="Rule group tags")
    hipaa: list[str] = Field(default_factory=list, description="HIPAA controls")
    pci_dss: list[str] = Field(default_factory=list, description="PCI-DSS requirements")
    gdpr: list[str] = Field(default_factory=list, description="GDPR articles")
    nist_800_53: list[str] = Field(default_factory=list, description="NIST 800-53 controls")
    tsc: list[str] = Field(default_factory=list, description="AICPA TSC criteria")
    gpg13: list[str] = Field(default_factory=list, description="GPG13 controls")
    dsr_type: str | None = Field(
        default=None,
        description="GDPR data subject request type, when tagged upstream",
    )

    model_config = RECORD_CONFIG

    def controls(self, framework: str) -> list[str]:
        """Return the control list for a framework field name."""
        return getattr(self, framework)


class MitreInfo(BaseModel):
    """MITRE ATT&CK tags, always as lists."""

    id: list[str] = Field(default_factory=list, description="Technique IDs")
    tactic: list[str] = Field(default_factory=list, description="Tactic names")
    technique: list[str] = Field(default_factory=list, description="Technique names")

    model_config = RECORD_CONFIG


class FlowInfo(BaseModel):
    """IDS flow counters (Suricata `flow` block)."""

    pkts_to_server: str | None = Field(default=None, description="Packets to server")
    pkts_to_client: str | None = Field(default=None, description="Packets to client")
    bytes_to_server: str | None = Field(default=None, description="Bytes to server")
    bytes_to_client: str | None = Field(default=None, description="Bytes to client")
    state: str | None = Field(default=None, description="Flow state")

    model_config = CAMEL_RECORD_CONFIG


class NetworkInfo(BaseModel):
    """Network 5-tuple from IDS/firewall sources."""

    src_ip: str | None = Field(default=None, description="Source IP")
    src_port: str | None = Field(default=None, description="Source port")
    dest_ip: str | None = Field(default=None, description="Destination IP")
    dest_port: str | None = Field(default=None, description="Destination port")
    protocol: str | None = Field(default=None, description="Transport protocol")
    flow: FlowInfo | None = Field(default=None, description="Flow counters, when reported")

    model_config = CAMEL_RECORD_CONFIG


class GeoInfo(BaseModel):
    """GeoIP enrichment."""

    country_name: str = Field(default="Unknown", description="Country name")

    model_config = CAMEL_RECORD_CONFIG


class EventInfo(BaseModel):
    """IDS event classification (Suricata-style)."""

    type: str | None = Field(default=None, description="Event type")
    interface: str | None = Field(default=None, description="Capture interface")

    model_config = RECORD_CONFIG


class NormalizedLog(BaseModel):
    """A raw log document converted to the canonical shape."""

    timestamp: datetime = Field(
        ...,
        description="Event instant, timezone-aware UTC",
    )

    agent: AgentInfo = Field(default_factory=AgentInfo)

    rule: RuleInfo = Field(default_factory=RuleInfo)

    mitre: MitreInfo = Field(default_factory=MitreInfo)

    network: NetworkInfo | None = Field(default=None)

    geoip: GeoInfo | None = Field(default=None)

    event: EventInfo | None = Field(default=None)

    raw_data: Any = Field(
        default=None,
        description="Decoded source document for audit display",
    )

    model_config = CAMEL_RECORD_CONFIG

    @property
    def country(self) -> str:
        """Country name for geo distribution ("Unknown" when absent)."""
        return self.geoip.country_name if self.geoip else "Unknown"
