"""Swarm metrics aggregation and recording."""

from .collector import MetricsRecorder, compute_swarm_metrics, metric_trend
from .results import (
    ADAPTIVE_NETWORK_STATS,
    BASELINE_NETWORK_STATS,
    MetricsSnapshot,
    NetworkStats,
    SwarmMetrics,
)

__all__ = [
    "ADAPTIVE_NETWORK_STATS",
    "BASELINE_NETWORK_STATS",
    "MetricsRecorder",
    "MetricsSnapshot",
    "NetworkStats",
    "SwarmMetrics",
    "compute_swarm_metrics",
    "metric_trend",
]
