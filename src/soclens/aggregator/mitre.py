"""MITRE ATT&CK roll-up across normalized logs."""

from collections import Counter
from collections.abc import Iterable

from soclens.models.log import NormalizedLog
from soclens.models.stats import AgentMitreStats, MitreStats, NamedCount


def aggregate_mitre(logs: Iterable[NormalizedLog]) -> MitreStats:
    """Count tactics and techniques overall and per agent.

    Only logs with at least one tactic or technique are counted.
    """
    total = 0
    tactics: Counter[str] = Counter()
    techniques: Counter[str] = Counter()
    by_agent: dict[str, dict[str, Counter[str]]] = {}
    agent_counts: Counter[str] = Counter()

    for entry in logs:
        mitre = entry.mitre
        if not mitre.tactic and not mitre.technique:
            continue

        total += 1
        agent = entry.agent.name
        agent_counts[agent] += 1
        per_agent = by_agent.setdefault(
            agent, {"tactics": Counter(), "techniques": Counter()}
        )

        tactics.update(mitre.tactic)
        techniques.update(mitre.technique)
        per_agent["tactics"].update(mitre.tactic)
        per_agent["techniques"].update(mitre.technique)

    return MitreStats(
        total_mitre_alerts=total,
        tactics=dict(tactics),
        techniques=dict(techniques),
        tactics_list=_ranked(tactics),
        techniques_list=_ranked(techniques),
        by_agent={
            agent: AgentMitreStats(
                count=agent_counts[agent],
                tactics=dict(counters["tactics"]),
                techniques=dict(counters["techniques"]),
            )
            for agent, counters in by_agent.items()
        },
    )


def _ranked(counts: Counter[str]) -> list[NamedCount]:
    """Sort by count descending, then name."""
    return [
        NamedCount(name=name, count=count)
        for name, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]
