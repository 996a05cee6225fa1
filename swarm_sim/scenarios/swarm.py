"""Single-mode swarm scenario."""

from __future__ import annotations

from swarm_sim.config import SimulationConfig
from swarm_sim.core.simulator import SwarmSimulator
from swarm_sim.core.ticker import Ticker
from swarm_sim.metrics.collector import MetricsRecorder


def run_scenario(
    config: SimulationConfig | None = None,
    ticks: int = 60,
    recorder: MetricsRecorder | None = None,
) -> SwarmSimulator:
    """Build a simulator, start it and advance it ``ticks`` times."""
    if config is None:
        config = SimulationConfig()

    sim = SwarmSimulator(config)

    def on_tick(simulator: SwarmSimulator) -> None:
        if recorder is not None:
            recorder.record(simulator.ticks, ticker.elapsed, simulator.get_metrics())

    ticker = Ticker.for_config(sim, config, on_tick=on_tick)
    sim.start()
    ticker.run(ticks)

    return sim


def main() -> None:
    """Run an adaptive-mode scenario and print summary statistics."""
    import json
    import time

    from swarm_sim.reporting.format import format_kilobytes, format_speed

    config = SimulationConfig(peer_count=100, seed=42)
    print(f"Simulating {config.peer_count} peers ({config.mode}, {config.network_condition})...")

    recorder = MetricsRecorder()
    start = time.time()
    sim = run_scenario(config, ticks=60, recorder=recorder)
    print(f"Completed {sim.ticks} ticks in {time.time() - start:.3f}s (wall clock)")

    metrics = sim.get_metrics()
    stats = sim.get_network_stats()

    print("\n=== Swarm ===")
    print(f"Seeders/leechers: {metrics.seeders}/{metrics.leechers}")
    print(f"Completion rate: {metrics.completion_rate:.1f}%")
    print(f"Avg download: {format_speed(metrics.average_download_speed)}")
    print(f"Avg upload: {format_speed(metrics.average_upload_speed)}")
    print(f"Stability: {metrics.swarm_stability:.1f}")
    print(f"Bandwidth used: {format_kilobytes(stats.total_bandwidth_used)}")
    print(f"Completion trend: {recorder.trend('completion_rate')}")

    print("\n=== Exporting to JSON ===")
    print(json.dumps({"metrics": metrics.to_dict(), "network_stats": stats.to_dict()}, indent=2))


if __name__ == "__main__":
    main()
