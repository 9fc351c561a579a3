"""Tests for the log normalizer."""

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest

from soclens.core.metrics import MetricsCollector
from soclens.models.log import FRAMEWORK_FIELDS
from soclens.normalizer import LogNormalizer, normalize, normalize_all
from soclens.normalizer.fields import as_list, coerce_level, resolve_timestamp


class TestTimestamps:
    def test_numeric_timestamp_is_epoch_seconds(self):
        entry = normalize({"timestamp": 1700000000})

        assert entry is not None
        expected = datetime(1970, 1, 1, tzinfo=UTC) + timedelta(milliseconds=1700000000 * 1000)
        assert entry.timestamp == expected
        assert entry.timestamp == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)

    def test_float_timestamp_keeps_fraction(self):
        ts = resolve_timestamp(1700000000.5)
        assert ts == datetime(2023, 11, 14, 22, 13, 20, 500000, tzinfo=UTC)

    def test_iso_string_with_z(self):
        entry = normalize({"timestamp": "2024-03-01T10:00:00Z"})
        assert entry.timestamp == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)

    def test_offset_string_converted_to_utc(self):
        ts = resolve_timestamp("2024-03-01T12:00:00+02:00")
        assert ts == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)
        assert ts.tzinfo == UTC

    def test_general_date_string(self):
        ts = resolve_timestamp("Mar 1 2024 10:00:00")
        assert ts == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)

    def test_naive_string_taken_as_utc(self):
        ts = resolve_timestamp("2024-03-01 10:00:00")
        assert ts == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)

    def test_datetime_object_accepted(self):
        est = timezone(timedelta(hours=-5))
        ts = resolve_timestamp(datetime(2024, 3, 1, 5, 0, tzinfo=est))
        assert ts == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)

    @pytest.mark.parametrize(
        "value",
        [
            None, "", "   ", "not a date", True, float("nan"), float("inf"), 1e20, [], {},
            "10:00", "Monday", "1", "Mar 2024",
        ],
    )
    def test_unusable_timestamps(self, value):
        assert resolve_timestamp(value) is None

    def test_date_without_time_is_midnight(self):
        assert resolve_timestamp("March 1, 2024") == datetime(2024, 3, 1, tzinfo=UTC)

    def test_partial_date_is_stable_across_days(self):
        assert normalize({"timestamp": "10:00", "rule": {"hipaa": ["x"]}}) is None

    def test_missing_timestamp_drops_document(self):
        assert normalize({"rule": {"level": "x"}}) is None

    def test_malformed_timestamp_drops_document(self):
        assert normalize({"timestamp": "yesterday-ish", "agent": {"name": "a"}}) is None

    def test_timestamp_falls_back_to_raw_log(self):
        entry = normalize({"rawLog": {"timestamp": "2024-03-01T10:00:00Z"}})
        assert entry.timestamp == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)


class TestLevels:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (5, 5),
            ("14", 14),
            (" 7 ", 7),
            (3.9, 3),
            ("12.0", 12),
            ("x", 0),
            (None, 0),
            (True, 0),
            (float("nan"), 0),
            (-3, 0),
            ([1], 0),
        ],
    )
    def test_coerce_level(self, value, expected):
        assert coerce_level(value) == expected

    def test_text_levels_are_zero_by_default(self):
        assert coerce_level("error") == 0

    def test_text_levels_mapped_when_enabled(self):
        assert coerce_level("alert", map_text_levels=True) == 14
        assert coerce_level("Warning", map_text_levels=True) == 8
        assert coerce_level("debug", map_text_levels=True) == 1
        assert coerce_level("bogus", map_text_levels=True) == 0

    def test_normalizer_option_applies_text_levels(self):
        normalizer = LogNormalizer(map_text_levels=True)
        entry = normalizer.normalize({"timestamp": 1, "rule": {"level": "critical"}})
        assert entry.rule.level == 13


class TestDefaults:
    def test_list_fields_never_none(self):
        entry = normalize({"timestamp": 1700000000})

        for name in FRAMEWORK_FIELDS:
            assert getattr(entry.rule, name) == []
        assert entry.mitre.tactic == []
        assert entry.mitre.technique == []
        assert entry.rule.groups == []

    def test_null_control_lists_become_empty(self):
        entry = normalize({"timestamp": 1, "rule": {"hipaa": None, "gdpr": None}})
        assert entry.rule.hipaa == []
        assert entry.rule.gdpr == []

    def test_agent_defaults(self):
        entry = normalize({"timestamp": 1})
        assert entry.agent.name == "Unknown"
        assert entry.agent.id == "N/A"

    def test_rule_defaults(self):
        entry = normalize({"timestamp": 1})
        assert entry.rule.level == 0
        assert entry.rule.id == "N/A"
        assert entry.rule.description == "No description"
        assert entry.rule.dsr_type is None

    def test_optional_sections_absent(self):
        entry = normalize({"timestamp": 1})
        assert entry.network is None
        assert entry.geoip is None
        assert entry.event is None
        assert entry.country == "Unknown"


class TestMitre:
    def test_bare_strings_become_lists(self):
        entry = normalize({
            "timestamp": 1,
            "rule": {"mitre": {"tactic": "Execution", "technique": "PowerShell", "id": "T1059.001"}},
        })
        assert entry.mitre.tactic == ["Execution"]
        assert entry.mitre.technique == ["PowerShell"]
        assert entry.mitre.id == ["T1059.001"]

    def test_falsy_entries_dropped(self):
        entry = normalize({
            "timestamp": 1,
            "rule": {"mitre": {"tactic": ["Persistence", None, ""], "technique": ""}},
        })
        assert entry.mitre.tactic == ["Persistence"]
        assert entry.mitre.technique == []

    def test_as_list(self):
        assert as_list(None) == []
        assert as_list("AC-2") == ["AC-2"]
        assert as_list(["AC-2", "", None, "AU-6"]) == ["AC-2", "AU-6"]
        assert as_list(("3.4",)) == ["3.4"]


class TestEnvelopes:
    def test_raw_log_message_json_string(self):
        message = {
            "timestamp": "2024-03-01T10:00:00Z",
            "agent": {"name": "wazuh-agent", "id": "007"},
            "rule": {"level": 10, "id": "5710", "nist_800_53": ["AC-7"]},
        }
        entry = normalize({"rawLog": {"message": json.dumps(message)}})

        assert entry.timestamp == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)
        assert entry.agent.name == "wazuh-agent"
        assert entry.agent.id == "007"
        assert entry.rule.level == 10
        assert entry.rule.id == "5710"
        assert entry.rule.nist_800_53 == ["AC-7"]
        assert entry.raw_data == message

    def test_message_dict(self):
        entry = normalize({
            "timestamp": 1,
            "message": {"rule": {"gdpr": "IV_35.7.d"}, "manager": {"name": "manager-1"}},
        })
        assert entry.rule.gdpr == ["IV_35.7.d"]
        assert entry.agent.name == "manager-1"

    def test_plain_text_message_uses_outer_fields(self):
        entry = normalize({
            "timestamp": 1,
            "message": "sshd: Failed password for root",
            "rule": {"level": 5, "description": "sshd: authentication failed"},
            "agent": {"name": "outer"},
        })
        assert entry.rule.level == 5
        assert entry.agent.name == "outer"

    def test_suricata_network_fields(self):
        entry = normalize({
            "timestamp": 1,
            "message": json.dumps({
                "data": {
                    "src_ip": "10.0.0.5",
                    "src_port": 51515,
                    "dest_ip": "8.8.8.8",
                    "dest_port": 53,
                    "proto": "UDP",
                    "event_type": "alert",
                    "in_iface": "eth0",
                },
            }),
        })
        assert entry.network.src_ip == "10.0.0.5"
        assert entry.network.src_port == "51515"
        assert entry.network.dest_ip == "8.8.8.8"
        assert entry.network.dest_port == "53"
        assert entry.network.protocol == "UDP"
        assert entry.event.type == "alert"
        assert entry.event.interface == "eth0"
        assert entry.network.flow is None

    def test_suricata_flow_counters(self):
        entry = normalize({
            "timestamp": 1,
            "message": json.dumps({
                "data": {
                    "src_ip": "10.0.0.5",
                    "flow": {
                        "pkts_toserver": 12,
                        "pkts_toclient": 9,
                        "bytes_toserver": 1480,
                        "bytes_toclient": 5210,
                        "state": "established",
                    },
                },
            }),
        })
        flow = entry.network.flow
        assert flow.pkts_to_server == "12"
        assert flow.pkts_to_client == "9"
        assert flow.bytes_to_server == "1480"
        assert flow.bytes_to_client == "5210"
        assert flow.state == "established"

    def test_source_host_as_src_ip(self):
        entry = normalize({"timestamp": 1, "source": "fw-edge-01"})
        assert entry.network.src_ip == "fw-edge-01"
        assert entry.network.dest_ip is None

    def test_source_does_not_override_src_ip(self):
        entry = normalize({"timestamp": 1, "srcIp": "10.1.1.1", "source": "fw-edge-01"})
        assert entry.network.src_ip == "10.1.1.1"

    def test_flat_network_fields(self):
        entry = normalize({"timestamp": 1, "srcIp": "192.168.1.10", "destPort": 443})
        assert entry.network.src_ip == "192.168.1.10"
        assert entry.network.dest_port == "443"
        assert entry.network.protocol is None

    def test_geoip_country(self):
        entry = normalize({"timestamp": 1, "geoip": {"country_name": "Germany"}})
        assert entry.geoip.country_name == "Germany"
        assert entry.country == "Germany"

    def test_geoip_without_country(self):
        entry = normalize({"timestamp": 1, "geoip": {"city_name": "Berlin"}})
        assert entry.country == "Unknown"

    def test_dsr_type_carried(self):
        entry = normalize({"timestamp": 1, "rule": {"gdpr": ["Art. 15"], "dsr_type": "Access"}})
        assert entry.rule.dsr_type == "Access"

    @pytest.mark.parametrize("raw", [None, [], "text", 42])
    def test_non_mapping_is_unparseable(self, raw):
        assert normalize(raw) is None


class TestBatch:
    def test_scenario_drops_malformed(self, scenario_documents):
        logs = normalize_all(scenario_documents)

        assert len(logs) == 2
        assert logs[0].rule.level == 14
        assert logs[0].rule.hipaa == ["164.312(a)"]
        assert logs[1].rule.pci_dss == ["3.4"]

    def test_idempotent(self, scenario_documents):
        assert normalize(scenario_documents[0]) == normalize(scenario_documents[0])

    def test_does_not_share_raw_document(self):
        raw = {"timestamp": 1, "rule": {"hipaa": ["164.308"]}}
        entry = normalize(raw)
        raw["rule"]["hipaa"].append("164.312")

        assert entry.rule.hipaa == ["164.308"]
        assert entry.raw_data["rule"]["hipaa"] == ["164.308"]

    def test_normalized_log_is_frozen(self):
        entry = normalize({"timestamp": 1})
        with pytest.raises(Exception):
            entry.timestamp = datetime.now(UTC)

    def test_metrics_counts(self, scenario_documents):
        metrics = MetricsCollector(step_name="normalize")
        LogNormalizer().normalize_all(scenario_documents, metrics=metrics)

        assert metrics.records_processed == 3
        assert metrics.records_output == 2
        assert metrics.skipped == 1


def test_camel_case_serialization():
    entry = normalize({
        "timestamp": 1700000000,
        "srcIp": "1.2.3.4",
        "destPort": 22,
        "geoip": {"country_name": "Brazil"},
        "rule": {"pci_dss": ["10.2.4"]},
        "data": {"flow": {"bytes_toserver": 64}},
    })

    data = entry.model_dump(mode="json", by_alias=True)

    assert data["network"]["srcIp"] == "1.2.3.4"
    assert data["network"]["destPort"] == "22"
    assert data["network"]["flow"]["bytesToServer"] == "64"
    assert data["geoip"] == {"countryName": "Brazil"}
    assert data["rawData"]["srcIp"] == "1.2.3.4"
    assert data["rule"]["pci_dss"] == ["10.2.4"]
    assert "raw_data" not in data
