"""Flat CSV dumps of peers and metrics."""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from swarm_sim.core.peer import Peer
    from swarm_sim.metrics.results import NetworkStats, SwarmMetrics

PEER_CSV_FIELDS = (
    "peer_id",
    "ip_address",
    "port",
    "region",
    "is_seeder",
    "upload_speed",
    "download_speed",
    "bandwidth",
    "stability_score",
    "churn_rate",
    "download_progress",
    "connection_time",
)


def export_peer_rows_csv(rows: Iterable[dict[str, object]]) -> str:
    """CSV of peer rows; columns beyond the peer fields are dropped."""
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer, fieldnames=PEER_CSV_FIELDS, lineterminator="\n", extrasaction="ignore"
    )
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def export_peers_csv(peers: Iterable[Peer]) -> str:
    return export_peer_rows_csv(peer.to_record() for peer in peers)


def export_metrics_csv(metrics: SwarmMetrics, network_stats: NetworkStats) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(("metric", "value"))
    for name, value in metrics.to_dict().items():
        writer.writerow((name, value))
    for name, value in network_stats.to_dict().items():
        writer.writerow((name, value))
    return buffer.getvalue()


def write_csv(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8", newline="")
