"""Cross-run analytics over a run store, plus the published research figures."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from swarm_sim.scenarios.comparison import improvement
from swarm_sim.storage.base import RunStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from swarm_sim.storage.base import MetricRecord, RunRecord, RunStore


def latest_metrics(records: Iterable[MetricRecord]) -> dict[str, float]:
    """Most recent value per metric type; later records win ties."""
    latest: dict[str, MetricRecord] = {}
    for record in records:
        current = latest.get(record.metric_type)
        if current is None or record.timestamp >= current.timestamp:
            latest[record.metric_type] = record
    return {metric_type: record.value for metric_type, record in latest.items()}


def average_metrics(per_run: Iterable[dict[str, float]]) -> dict[str, float]:
    values: dict[str, list[float]] = defaultdict(list)
    for metrics in per_run:
        for metric_type, value in metrics.items():
            values[metric_type].append(value)
    return {metric_type: sum(v) / len(v) for metric_type, v in values.items()}


def _final_metrics(store: RunStore, run: RunRecord) -> dict[str, float]:
    final = run.results.get("metrics")
    if final:
        return dict(final)
    return latest_metrics(store.get_metrics(run.run_id))


def performance_comparison(store: RunStore, limit: int = 20) -> dict[str, object]:
    """Average final metrics of recent completed runs, ANATE vs traditional."""
    runs = store.list_runs(limit=limit, status=RunStatus.COMPLETED)
    anate_runs = [run for run in runs if run.use_anate]
    traditional_runs = [run for run in runs if not run.use_anate]

    anate_averages = average_metrics(_final_metrics(store, run) for run in anate_runs)
    traditional_averages = average_metrics(_final_metrics(store, run) for run in traditional_runs)

    comparison: dict[str, dict[str, float]] = {}
    for metric_type, anate_value in anate_averages.items():
        if metric_type not in traditional_averages:
            continue
        change = improvement(anate_value, traditional_averages[metric_type])
        if change is None:
            continue
        comparison[metric_type] = {
            "anate": anate_value,
            "traditional": traditional_averages[metric_type],
            "improvement": change,
        }

    return {
        "anate": {"runs": len(anate_runs), "averages": anate_averages},
        "traditional": {"runs": len(traditional_runs), "averages": traditional_averages},
        "comparison": comparison,
    }


def simulation_history(store: RunStore, limit: int = 10) -> list[dict[str, object]]:
    return [
        {**run.to_dict(), "metrics": latest_metrics(store.get_metrics(run.run_id))}
        for run in store.list_runs(limit=limit)
    ]


@dataclass(frozen=True)
class ResearchMetric:
    """A published ANATE-versus-traditional measurement."""

    category: str
    metric_name: str
    traditional_value: float
    anate_value: float
    improvement_percentage: float
    description: str = ""
    methodology: str = ""
    sample_size: int = 0
    confidence_level: float = 0.0

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


RESEARCH_DATA: tuple[ResearchMetric, ...] = (
    ResearchMetric(
        category="Performance",
        metric_name="Redundant Packet Transfers",
        traditional_value=100.0,
        anate_value=31.0,
        improvement_percentage=69.0,
        description=(
            "Reduction in redundant packet transfers through intelligent peer selection "
            "and broadcast-aware caching"
        ),
        methodology="Simulation-based analysis with 1000+ peer networks",
        sample_size=50,
        confidence_level=95.0,
    ),
    ResearchMetric(
        category="Performance",
        metric_name="Download Time",
        traditional_value=100.0,
        anate_value=43.0,
        improvement_percentage=57.0,
        description=(
            "Decrease in overall download time through optimized swarm formation "
            "and adaptive network awareness"
        ),
        methodology="Comparative analysis across multiple network conditions",
        sample_size=75,
        confidence_level=95.0,
    ),
    ResearchMetric(
        category="Stability",
        metric_name="Swarm Stability Score",
        traditional_value=60.0,
        anate_value=85.0,
        improvement_percentage=41.67,
        description="Improvement in swarm stability through hybrid peer selection strategy",
        methodology="Long-term stability monitoring over 24-hour periods",
        sample_size=30,
        confidence_level=90.0,
    ),
    ResearchMetric(
        category="Efficiency",
        metric_name="Packet Transfer Efficiency",
        traditional_value=65.0,
        anate_value=92.0,
        improvement_percentage=41.54,
        description=(
            "Enhanced packet transfer efficiency through central coordination and analytics"
        ),
        methodology="Network traffic analysis and optimization metrics",
        sample_size=40,
        confidence_level=92.0,
    ),
)


def research_by_category(
    data: Sequence[ResearchMetric], category: str
) -> list[ResearchMetric]:
    return [item for item in data if item.category == category]


def research_categories(data: Sequence[ResearchMetric]) -> list[str]:
    """Distinct categories in first-seen order."""
    return list(dict.fromkeys(item.category for item in data))


def overall_improvement(data: Sequence[ResearchMetric]) -> float:
    if not data:
        return 0.0
    return sum(item.improvement_percentage for item in data) / len(data)


def research_summary(data: Sequence[ResearchMetric] = RESEARCH_DATA) -> dict[str, object]:
    """Research metrics grouped by category, categories in alphabetical order.

    Keys follow the dashboard's camelCase payload.
    """
    ordered = sorted(data, key=lambda item: item.category)
    categories = research_categories(ordered)
    return {
        "summary": {
            category: [item.to_dict() for item in research_by_category(ordered, category)]
            for category in categories
        },
        "overallImprovement": overall_improvement(ordered),
        "totalMetrics": len(ordered),
        "categories": categories,
    }
