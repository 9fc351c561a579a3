"""Log normalizer for heterogeneous SOC log documents.

Converts raw documents from the log store (Wazuh-style alerts, Suricata
and Fortigate events, Sysmon records) into the canonical NormalizedLog
shape. Documents without a usable timestamp are dropped.
"""

import copy
from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import ValidationError

from soclens.core.logging import debug
from soclens.core.metrics import MetricsCollector
from soclens.models.log import (
    FRAMEWORK_FIELDS,
    AgentInfo,
    EventInfo,
    FlowInfo,
    GeoInfo,
    MitreInfo,
    NetworkInfo,
    NormalizedLog,
    RuleInfo,
)
from soclens.normalizer.fields import (
    as_list,
    as_text,
    coerce_level,
    decode_message,
    first_present,
    lookup,
    resolve_timestamp,
)

# (canonical field, IDS data key, nested network key, flat document key)
NETWORK_FIELDS = (
    ("src_ip", "src_ip", "srcIp", "srcIp"),
    ("src_port", "src_port", "srcPort", "srcPort"),
    ("dest_ip", "dest_ip", "destIp", "destIp"),
    ("dest_port", "dest_port", "destPort", "destPort"),
    ("protocol", "proto", "protocol", "protocol"),
)

# (canonical field, IDS flow key)
FLOW_FIELDS = (
    ("pkts_to_server", "pkts_toserver"),
    ("pkts_to_client", "pkts_toclient"),
    ("bytes_to_server", "bytes_toserver"),
    ("bytes_to_client", "bytes_toclient"),
    ("state", "state"),
)


class LogNormalizer:
    """Normalizes raw log documents into NormalizedLog records."""

    def __init__(self, map_text_levels: bool = False) -> None:
        """Initialize the normalizer.

        Args:
            map_text_levels: Map textual rule levels (alert, error, ...)
                to their numeric equivalents instead of 0
        """
        self.map_text_levels = map_text_levels

    def normalize(self, raw: Any) -> NormalizedLog | None:
        """Convert one raw document to a NormalizedLog.

        Args:
            raw: Raw document of any shape

        Returns:
            NormalizedLog, or None if the document cannot be normalized
        """
        if not isinstance(raw, dict):
            return None

        message = self._unwrap(raw)

        timestamp = resolve_timestamp(
            first_present(
                raw.get("timestamp"),
                message.get("timestamp"),
                lookup(raw, "rawLog", "timestamp"),
            )
        )
        if timestamp is None:
            return None

        rule_data = message.get("rule")
        if not isinstance(rule_data, dict) or not rule_data:
            rule_data = raw.get("rule")
        if not isinstance(rule_data, dict):
            rule_data = {}

        try:
            return NormalizedLog(
                timestamp=timestamp,
                agent=self._agent(raw, message),
                rule=self._rule(rule_data),
                mitre=self._mitre(rule_data),
                network=self._network(raw, message),
                geoip=self._geoip(raw, message),
                event=self._event(message),
                raw_data=copy.deepcopy(message or raw),
            )
        except ValidationError as e:
            debug("Dropping log that failed validation", errors=e.error_count())
            return None

    def normalize_stream(
        self,
        documents: Iterable[Any],
        metrics: MetricsCollector | None = None,
    ) -> Iterator[NormalizedLog]:
        """Normalize a stream of documents.

        Args:
            documents: Raw documents
            metrics: Optional collector for processed/output/skipped counts

        Yields:
            NormalizedLog objects (skipping documents that can't be normalized)
        """
        for raw in documents:
            normalized = self.normalize(raw)
            if metrics is not None:
                metrics.tally(kept=normalized is not None)
            if normalized is not None:
                yield normalized

    def normalize_all(
        self,
        documents: Iterable[Any],
        metrics: MetricsCollector | None = None,
    ) -> list[NormalizedLog]:
        """Normalize a batch, dropping unparseable documents."""
        return list(self.normalize_stream(documents, metrics=metrics))

    def _unwrap(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Find the decoded message carrying the alert fields.

        Tries rawLog.message, then message; falls back to the document.
        """
        raw_message = lookup(raw, "rawLog", "message")
        if raw_message:
            return decode_message(raw_message)

        message = raw.get("message")
        if isinstance(message, str):
            return decode_message(message)
        if isinstance(message, dict) and message:
            return message

        return raw

    def _agent(self, raw: dict[str, Any], message: dict[str, Any]) -> AgentInfo:
        name = first_present(
            lookup(message, "agent", "name"),
            lookup(message, "manager", "name"),
            lookup(raw, "agent", "name"),
        )
        agent_id = first_present(
            lookup(message, "agent", "id"),
            lookup(raw, "agent", "id"),
        )
        return AgentInfo(
            name=str(name) if name is not None else "Unknown",
            id=str(agent_id) if agent_id is not None else "N/A",
        )

    def _rule(self, rule: dict[str, Any]) -> RuleInfo:
        controls = {name: as_list(rule.get(name)) for name in FRAMEWORK_FIELDS}
        rule_id = first_present(rule.get("id"))
        description = first_present(rule.get("description"))

        return RuleInfo(
            level=coerce_level(rule.get("level"), self.map_text_levels),
            id=str(rule_id) if rule_id is not None else "N/A",
            description=str(description) if description is not None else "No description",
            groups=as_list(rule.get("groups")),
            dsr_type=as_text(first_present(rule.get("dsr_type"))),
            **controls,
        )

    def _mitre(self, rule: dict[str, Any]) -> MitreInfo:
        mitre = rule.get("mitre")
        if not isinstance(mitre, dict):
            return MitreInfo()
        return MitreInfo(
            id=as_list(mitre.get("id")),
            tactic=as_list(mitre.get("tactic")),
            technique=as_list(mitre.get("technique")),
        )

    def _network(
        self, raw: dict[str, Any], message: dict[str, Any]
    ) -> NetworkInfo | None:
        data = message.get("data")
        values = {}
        for field, data_key, nested_key, flat_key in NETWORK_FIELDS:
            values[field] = as_text(
                first_present(
                    lookup(data, data_key),
                    lookup(raw, "network", nested_key),
                    raw.get(flat_key),
                )
            )

        # Syslog-style documents name the sending host in "source".
        if values["src_ip"] is None and isinstance(raw.get("source"), str):
            values["src_ip"] = as_text(first_present(raw["source"]))

        flow = self._flow(lookup(data, "flow"))
        if flow is None and all(v is None for v in values.values()):
            return None
        return NetworkInfo(**values, flow=flow)

    def _flow(self, flow: Any) -> FlowInfo | None:
        if not isinstance(flow, dict):
            return None
        values = {
            field: as_text(first_present(flow.get(key))) for field, key in FLOW_FIELDS
        }
        if all(v is None for v in values.values()):
            return None
        return FlowInfo(**values)

    def _geoip(
        self, raw: dict[str, Any], message: dict[str, Any]
    ) -> GeoInfo | None:
        geoip = message.get("geoip")
        if not isinstance(geoip, dict):
            geoip = raw.get("geoip")
        if not isinstance(geoip, dict):
            return None

        country = first_present(geoip.get("country_name"), geoip.get("countryName"))
        return GeoInfo(country_name=str(country) if country is not None else "Unknown")

    def _event(self, message: dict[str, Any]) -> EventInfo | None:
        data = message.get("data")
        event_type = as_text(first_present(lookup(data, "event_type")))
        interface = as_text(first_present(lookup(data, "in_iface")))
        if event_type is None and interface is None:
            return None
        return EventInfo(type=event_type, interface=interface)


_default_normalizer = LogNormalizer()


def normalize(raw: Any) -> NormalizedLog | None:
    """Normalize one raw document with default settings."""
    return _default_normalizer.normalize(raw)


def normalize_all(documents: Iterable[Any]) -> list[NormalizedLog]:
    """Normalize a batch with default settings, dropping unparseable documents."""
    return _default_normalizer.normalize_all(documents)
