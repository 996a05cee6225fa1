"""Side-by-side comparison of baseline and ANATE swarms."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from random import Random
from typing import TYPE_CHECKING

from swarm_sim.config import SimulationConfig
from swarm_sim.core.simulator import SwarmSimulator
from swarm_sim.core.ticker import Ticker

if TYPE_CHECKING:
    from swarm_sim.metrics.results import NetworkStats, SwarmMetrics


@dataclass(frozen=True)
class ModeResult:
    use_anate: bool
    ticks: int
    metrics: SwarmMetrics
    network_stats: NetworkStats
    average_progress: float


@dataclass(frozen=True)
class ComparisonResult:
    adaptive: ModeResult
    baseline: ModeResult
    # metric -> percent improvement of adaptive over baseline
    improvements: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "anate": {
                "ticks": self.adaptive.ticks,
                "average_progress": self.adaptive.average_progress,
                "metrics": self.adaptive.metrics.to_dict(),
                "network_stats": self.adaptive.network_stats.to_dict(),
            },
            "traditional": {
                "ticks": self.baseline.ticks,
                "average_progress": self.baseline.average_progress,
                "metrics": self.baseline.metrics.to_dict(),
                "network_stats": self.baseline.network_stats.to_dict(),
            },
            "improvements": self.improvements,
        }


def improvement(adaptive: float, baseline: float) -> float | None:
    """Percent change of adaptive over baseline, None when baseline is 0."""
    if baseline == 0:
        return None
    return (adaptive - baseline) / baseline * 100


def compare_values(adaptive: dict[str, float], baseline: dict[str, float]) -> dict[str, float]:
    improvements: dict[str, float] = {}
    for key, value in adaptive.items():
        if key not in baseline:
            continue
        change = improvement(value, baseline[key])
        if change is not None:
            improvements[key] = change
    return improvements


def _run_mode(config: SimulationConfig, ticks: int, seed: int) -> ModeResult:
    sim = SwarmSimulator(config, rng=Random(seed))
    sim.start()
    Ticker.for_config(sim, config).run(ticks)

    peers = sim.get_peers()
    average_progress = (
        sum(peer.download_progress for peer in peers) / len(peers) if peers else 0.0
    )
    return ModeResult(
        use_anate=config.use_anate,
        ticks=sim.ticks,
        metrics=sim.get_metrics(),
        network_stats=sim.get_network_stats(),
        average_progress=average_progress,
    )


def run_comparison(config: SimulationConfig | None = None, ticks: int = 30) -> ComparisonResult:
    """Run the same swarm in both modes from identically seeded sources."""
    if config is None:
        config = SimulationConfig()

    seed = config.seed if config.seed is not None else Random().randint(0, 2**31 - 1)

    adaptive = _run_mode(replace(config, use_anate=True), ticks, seed)
    baseline = _run_mode(replace(config, use_anate=False), ticks, seed)

    improvements = compare_values(
        {**adaptive.metrics.to_dict(), "average_progress": adaptive.average_progress},
        {**baseline.metrics.to_dict(), "average_progress": baseline.average_progress},
    )

    return ComparisonResult(adaptive=adaptive, baseline=baseline, improvements=improvements)


def comparison_table(result: ComparisonResult) -> list[str]:
    adaptive = {
        **result.adaptive.metrics.to_dict(),
        "average_progress": result.adaptive.average_progress,
    }
    baseline = {
        **result.baseline.metrics.to_dict(),
        "average_progress": result.baseline.average_progress,
    }

    lines = [f"{'metric':<28}{'ANATE':>12}{'Traditional':>14}{'change':>10}"]
    for name, value in adaptive.items():
        change = result.improvements.get(name)
        change_text = f"{change:+.1f}%" if change is not None else "n/a"
        lines.append(f"{name:<28}{value:>12.2f}{baseline[name]:>14.2f}{change_text:>10}")
    return lines


def main() -> None:
    """Compare both modes on a moderate network and print the deltas."""
    config = SimulationConfig(peer_count=100, network_condition="moderate", seed=42)
    for line in comparison_table(run_comparison(config, ticks=30)):
        print(line)


if __name__ == "__main__":
    main()
