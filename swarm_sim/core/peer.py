"""Synthetic swarm peers and the random draws that create them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from random import Random

    from swarm_sim.core.types import PeerId, Region

REGIONS: tuple[Region, ...] = (
    "North America",
    "Europe",
    "Asia",
    "South America",
    "Africa",
)

BASE_PORT = 6881
PORT_SPAN = 100  # ports 6881-6980

COMPLETE = 100.0


@dataclass
class Peer:
    """A swarm participant.

    Rates are in KB/s and drawn once at creation. Progress is a percentage;
    a leecher becomes a seeder in the tick its progress reaches 100.
    """

    id: PeerId
    ip: str
    port: int
    upload_speed: float
    download_speed: float
    bandwidth: float
    stability: float
    churn_rate: float  # not consumed by the update rule
    is_seeder: bool
    download_progress: float
    connection_time: float  # epoch milliseconds
    region: Region

    @property
    def is_complete(self) -> bool:
        return self.download_progress >= COMPLETE

    def to_record(self) -> dict[str, object]:
        """Row shape shared with stored and remotely produced peers."""
        return {
            "peer_id": self.id,
            "ip_address": self.ip,
            "port": self.port,
            "region": self.region,
            "is_seeder": self.is_seeder,
            "upload_speed": self.upload_speed,
            "download_speed": self.download_speed,
            "bandwidth": self.bandwidth,
            "stability_score": self.stability,
            "churn_rate": self.churn_rate,
            "download_progress": self.download_progress,
            "connection_time": datetime.fromtimestamp(
                self.connection_time / 1000, tz=UTC
            ).isoformat(),
        }


def generate_ip(rng: Random) -> str:
    return ".".join(str(rng.randint(0, 255)) for _ in range(4))


def generate_peer(
    peer_id: PeerId,
    rng: Random,
    base_speed: float,
    now_ms: float,
    *,
    is_seeder: bool,
    progress_ceiling: float,
    regions: tuple[Region, ...] = REGIONS,
    backdate_ms: float = 0.0,
) -> Peer:
    """Draw one peer around a condition-dependent base rate.

    Seeders start complete; leechers start at U(0, progress_ceiling).
    Connection time is back-dated by up to ``backdate_ms``.
    """
    ip = generate_ip(rng)
    port = BASE_PORT + rng.randrange(PORT_SPAN)
    upload_speed = base_speed * rng.uniform(0.5, 1.0)
    download_speed = base_speed * rng.uniform(0.8, 1.2)
    bandwidth = base_speed * rng.uniform(1.0, 2.0)
    stability = rng.random() * 100.0
    churn_rate = rng.random() * 0.1
    progress = COMPLETE if is_seeder else rng.uniform(0.0, progress_ceiling)
    connection_time = now_ms - rng.uniform(0.0, backdate_ms) if backdate_ms else now_ms
    region = rng.choice(regions)

    return Peer(
        id=peer_id,
        ip=ip,
        port=port,
        upload_speed=upload_speed,
        download_speed=download_speed,
        bandwidth=bandwidth,
        stability=stability,
        churn_rate=churn_rate,
        is_seeder=is_seeder,
        download_progress=progress,
        connection_time=connection_time,
        region=region,
    )
