"""Metric aggregation and timeseries recording."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from swarm_sim.metrics.results import MetricsSnapshot, SwarmMetrics

if TYPE_CHECKING:
    from collections.abc import Sequence

    from swarm_sim.core.peer import Peer

# Adaptive mode inflates observed stability, capped at 100
ADAPTIVE_STABILITY_MULTIPLIER = 1.4
MAX_STABILITY = 100.0

# Fraction of the population assumed to cause redundant transfers
REDUNDANCY_FACTOR = 0.3
# Adaptive mode keeps 31% of them (a 69% reduction)
ADAPTIVE_REDUNDANCY_RETAINED = 0.31

# Relative change (percent) beyond which a metric is trending
TREND_THRESHOLD = 5.0

type Trend = Literal["up", "down", "neutral"]


def compute_swarm_metrics(peers: Sequence[Peer], use_anate: bool) -> SwarmMetrics:
    seeders = [peer for peer in peers if peer.is_seeder]
    leechers = [peer for peer in peers if not peer.is_seeder]
    total = len(peers)

    average_download = (
        sum(peer.download_speed for peer in leechers) / len(leechers) if leechers else 0.0
    )
    average_upload = sum(peer.upload_speed for peer in seeders) / len(seeders) if seeders else 0.0

    stability = sum(peer.stability for peer in peers) / total if total > 0 else 0.0
    if use_anate:
        stability = min(MAX_STABILITY, stability * ADAPTIVE_STABILITY_MULTIPLIER)

    redundant = total * REDUNDANCY_FACTOR
    if use_anate:
        redundant *= ADAPTIVE_REDUNDANCY_RETAINED

    return SwarmMetrics(
        total_peers=total,
        seeders=len(seeders),
        leechers=len(leechers),
        average_download_speed=average_download,
        average_upload_speed=average_upload,
        swarm_stability=stability,
        redundant_transfers=redundant,
        completion_rate=len(seeders) / total * 100 if total > 0 else 0.0,
    )


def metric_trend(current: float, previous: float) -> Trend:
    if previous == 0:
        return "neutral"
    change = (current - previous) / previous * 100
    if change > TREND_THRESHOLD:
        return "up"
    if change < -TREND_THRESHOLD:
        return "down"
    return "neutral"


@dataclass
class MetricsRecorder:
    """Collects per-tick metric snapshots for charting.

    ``max_snapshots`` bounds memory for long-running dashboards; the oldest
    snapshots are dropped first.
    """

    max_snapshots: int | None = None
    timeseries: list[MetricsSnapshot] = field(default_factory=list)

    def record(self, tick: int, timestamp: float, metrics: SwarmMetrics) -> MetricsSnapshot:
        snapshot = MetricsSnapshot(tick=tick, timestamp=timestamp, metrics=metrics)
        self.timeseries.append(snapshot)
        if self.max_snapshots is not None and len(self.timeseries) > self.max_snapshots:
            del self.timeseries[: len(self.timeseries) - self.max_snapshots]
        return snapshot

    def latest(self) -> MetricsSnapshot | None:
        return self.timeseries[-1] if self.timeseries else None

    def series(self, metric_type: str) -> list[tuple[float, float]]:
        return [
            (snapshot.timestamp, snapshot.metrics.to_dict()[metric_type])
            for snapshot in self.timeseries
        ]

    def trend(self, metric_type: str) -> Trend:
        if len(self.timeseries) < 2:
            return "neutral"
        previous = self.timeseries[-2].metrics.to_dict()[metric_type]
        current = self.timeseries[-1].metrics.to_dict()[metric_type]
        return metric_trend(current, previous)
