"""Tests for the soclens command line."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from soclens.cli.main import cli
from soclens.cli.watch import Ticker


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _json_lines(text: str) -> list:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def test_stats(runner, documents_file: Path):
    result = runner.invoke(cli, ["stats", str(documents_file), "-F", "hipaa", "-F", "pci_dss"])

    assert result.exit_code == 0, result.output
    report = json.loads(result.stdout)
    assert set(report) == {"hipaa", "pci_dss"}
    assert report["hipaa"]["totalCount"] == 1
    assert report["hipaa"]["controlSeverity"]["164.312(a)"]["avgLevel"] == 14
    assert report["pci_dss"]["countryDistribution"] == {"Unknown": 1}


def test_stats_defaults_to_all_frameworks(runner, documents_file: Path):
    result = runner.invoke(cli, ["stats", str(documents_file)])

    assert result.exit_code == 0, result.output
    assert list(json.loads(result.stdout)) == ["hipaa", "pci_dss", "gdpr", "nist_800_53", "tsc"]


def test_stats_from_stdin(runner, scenario_documents):
    result = runner.invoke(cli, ["stats", "-", "-F", "hipaa"], input=json.dumps(scenario_documents))

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["hipaa"]["totalCount"] == 1


def test_stats_search(runner, documents_file: Path):
    result = runner.invoke(cli, ["stats", str(documents_file), "-F", "hipaa", "-s", "nobody"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["hipaa"]["totalCount"] == 0


def test_normalize_streams_jsonl(runner, documents_file: Path):
    result = runner.invoke(cli, ["normalize", str(documents_file)])

    assert result.exit_code == 0, result.output
    records = _json_lines(result.stdout)
    assert [r["agent"]["name"] for r in records] == ["sensor1", "sensor2"]
    assert records[0]["rule"]["level"] == 14
    assert records[0]["timestamp"].startswith("2023-11-14T22:13:20")
    assert records[0]["rawData"]["agent"] == {"name": "sensor1"}
    assert "raw_data" not in records[0]


def test_normalize_framework_filter(runner, documents_file: Path):
    result = runner.invoke(cli, ["normalize", str(documents_file), "-F", "pci_dss"])

    assert result.exit_code == 0, result.output
    assert [r["rule"]["pci_dss"] for r in _json_lines(result.stdout)] == [["3.4"]]


def test_normalize_human(runner, documents_file: Path):
    result = runner.invoke(cli, ["-f", "human", "normalize", str(documents_file)])

    assert result.exit_code == 0, result.output
    assert "Severity" in result.stdout
    assert "sensor1" in result.stdout
    assert "Critical" in result.stdout
    assert "2 logs" in result.stdout


def test_stats_human(runner, documents_file: Path):
    result = runner.invoke(cli, ["-f", "human", "stats", str(documents_file), "-F", "hipaa"])

    assert result.exit_code == 0, result.output
    assert "[hipaa]" in result.stdout
    assert "Total events:     1" in result.stdout
    assert "164.312(a): 1 events, avg level 14.0" in result.stdout


def test_mitre(runner, tmp_path: Path):
    path = tmp_path / "mitre.json"
    path.write_text(
        json.dumps([
            {
                "timestamp": 1700000000,
                "agent": {"name": "ws-1"},
                "rule": {"mitre": {"tactic": ["Execution"], "technique": ["PowerShell"]}},
            },
            {"timestamp": 1700000000, "agent": {"name": "ws-2"}},
        ]),
        encoding="utf-8",
    )

    result = runner.invoke(cli, ["mitre", str(path)])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["totalMitreAlerts"] == 1
    assert data["tacticsList"] == [{"name": "Execution", "count": 1}]
    assert data["byAgent"]["ws-1"]["count"] == 1


def test_frameworks(runner):
    result = runner.invoke(cli, ["frameworks"])

    assert result.exit_code == 0, result.output
    listing = {item["id"]: item for item in json.loads(result.stdout)}
    assert listing["pci_dss"]["tracks_geo"] is True
    assert "control_families" in listing["nist_800_53"]["extensions"]
    assert listing["hipaa"]["extensions"] == []


def test_missing_input(runner, tmp_path: Path):
    result = runner.invoke(cli, ["stats", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    error = json.loads(result.stdout)
    assert error["code"] == "INPUT_ERROR"
    assert error["retryable"] is True


def test_invalid_config(runner, tmp_path: Path, documents_file: Path):
    config = tmp_path / "soclens.yaml"
    config.write_text("time_range: 30d\n", encoding="utf-8")

    result = runner.invoke(cli, ["-c", str(config), "stats", str(documents_file)])

    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "CONFIG_ERROR"


def test_config_supplies_defaults(runner, tmp_path: Path, documents_file: Path):
    config = tmp_path / "settings.yaml"
    config.write_text("frameworks: [gdpr]\n", encoding="utf-8")

    result = runner.invoke(cli, ["-c", str(config), "stats", str(documents_file)])

    assert result.exit_code == 0, result.output
    assert list(json.loads(result.stdout)) == ["gdpr"]


def test_watch_iterations(runner, documents_file: Path):
    result = runner.invoke(
        cli, ["watch", str(documents_file), "-F", "hipaa", "-n", "2", "-i", "0.01"]
    )

    assert result.exit_code == 0, result.output
    ticks = _json_lines(result.stdout)
    assert [t["tick"] for t in ticks] == [0, 1]
    assert all(t["stats"]["hipaa"]["totalCount"] == 1 for t in ticks)


def test_ticker_paces_ticks():
    now = [0.0]
    sleeps: list[float] = []

    def clock() -> float:
        return now[0]

    def sleep(seconds: float) -> None:
        sleeps.append(seconds)
        now[0] += seconds

    def tick(number: int) -> None:
        now[0] += 1.0

    count = Ticker(interval=5, iterations=3, sleep=sleep, clock=clock).run(tick)

    assert count == 3
    assert sleeps == [4.0, 4.0]


def test_ticker_overrun_skips_sleep():
    now = [0.0]
    sleeps: list[float] = []

    def tick(number: int) -> None:
        now[0] += 10.0

    Ticker(interval=5, iterations=2, sleep=sleeps.append, clock=lambda: now[0]).run(tick)

    assert sleeps == []
