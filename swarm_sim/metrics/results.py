"""Swarm metrics and network statistics data structures."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class SwarmMetrics:
    """Aggregate snapshot recomputed from the peer set every tick."""

    total_peers: int = 0
    seeders: int = 0
    leechers: int = 0
    average_download_speed: float = 0.0  # KB/s, leechers only
    average_upload_speed: float = 0.0  # KB/s, seeders only
    swarm_stability: float = 0.0  # 0-100
    redundant_transfers: float = 0.0
    completion_rate: float = 0.0  # percent of peers seeding

    def to_dict(self) -> dict[str, float]:
        return {key: float(value) for key, value in asdict(self).items()}


@dataclass
class NetworkStats:
    """Mode comparison summary.

    Everything but ``total_bandwidth_used`` is fixed by the protocol mode;
    bandwidth accumulates every tick.
    """

    redundancy_reduction: float
    download_time_improvement: float
    swarm_stability_score: float
    packet_transfer_efficiency: float
    total_bandwidth_used: float = 0.0  # KB

    @classmethod
    def for_mode(cls, use_anate: bool) -> NetworkStats:
        constants = ADAPTIVE_NETWORK_STATS if use_anate else BASELINE_NETWORK_STATS
        return cls(**constants)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


BASELINE_NETWORK_STATS: dict[str, float] = {
    "redundancy_reduction": 0.0,
    "download_time_improvement": 0.0,
    "swarm_stability_score": 60.0,
    "packet_transfer_efficiency": 65.0,
}

ADAPTIVE_NETWORK_STATS: dict[str, float] = {
    "redundancy_reduction": 69.0,
    "download_time_improvement": 57.0,
    "swarm_stability_score": 85.0,
    "packet_transfer_efficiency": 92.0,
}


@dataclass(frozen=True)
class MetricsSnapshot:
    """Metrics observed after a tick, stamped with simulated seconds."""

    tick: int
    timestamp: float
    metrics: SwarmMetrics
