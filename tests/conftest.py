"""Shared fixtures for the SOC Lens test suite."""

import json
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from soclens.models.log import AgentInfo, GeoInfo, MitreInfo, NormalizedLog, RuleInfo


@pytest.fixture
def make_log() -> Callable[..., NormalizedLog]:
    """Factory for NormalizedLog records with sensible defaults."""

    def _make(
        level: int = 5,
        agent: str = "agent-1",
        timestamp: datetime | None = None,
        description: str = "Test rule",
        country: str | None = None,
        dsr_type: str | None = None,
        tactic: list[str] | None = None,
        technique: list[str] | None = None,
        **controls: list[str],
    ) -> NormalizedLog:
        return NormalizedLog(
            timestamp=timestamp or datetime(2024, 1, 15, 12, 0, tzinfo=UTC),
            agent=AgentInfo(name=agent),
            rule=RuleInfo(
                level=level,
                description=description,
                dsr_type=dsr_type,
                **controls,
            ),
            mitre=MitreInfo(tactic=tactic or [], technique=technique or []),
            geoip=GeoInfo(country_name=country) if country else None,
        )

    return _make


@pytest.fixture
def scenario_documents() -> list[dict[str, Any]]:
    """Two usable documents and one without a timestamp."""
    return [
        {
            "timestamp": 1700000000,
            "rule": {
                "level": "14",
                "hipaa": ["164.312(a)"],
                "description": "Unauthorized PHI access",
            },
            "agent": {"name": "sensor1"},
        },
        {
            "timestamp": "2024-03-01T10:00:00Z",
            "rule": {"level": 5, "pci_dss": ["3.4"]},
            "agent": {"name": "sensor2"},
        },
        {"rule": {"level": "x"}},
    ]


@pytest.fixture
def documents_file(tmp_path: Path, scenario_documents: list[dict[str, Any]]) -> Path:
    """Scenario documents written as a JSON array."""
    path = tmp_path / "logs.json"
    path.write_text(json.dumps(scenario_documents), encoding="utf-8")
    return path
