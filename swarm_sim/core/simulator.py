"""Synthetic swarm simulation engine."""

from __future__ import annotations

import time
from random import Random
from typing import TYPE_CHECKING

from swarm_sim.config import base_speed_for
from swarm_sim.core.peer import COMPLETE, REGIONS, generate_peer
from swarm_sim.core.types import PeerId
from swarm_sim.metrics.collector import compute_swarm_metrics
from swarm_sim.metrics.results import NetworkStats, SwarmMetrics

if TYPE_CHECKING:
    from collections.abc import Callable

    from swarm_sim.config import SimulationConfig
    from swarm_sim.core.peer import Peer

SEEDER_PROBABILITY = 0.3
INITIAL_PROGRESS_CEILING = 80.0
JOINING_PROGRESS_CEILING = 30.0
JOINING_REGION_COUNT = 3
MAX_BACKDATE_MS = 3_600_000.0  # 1 hour

# Progress gained per tick is download_speed / PROGRESS_SCALE percentage points
PROGRESS_SCALE = 1000.0
ADAPTIVE_PROGRESS_MULTIPLIER = 2.0


def _wall_clock_ms() -> float:
    return time.time() * 1000


class SwarmSimulator:
    """Single-threaded swarm simulator advanced one tick at a time.

    The simulator has no timer of its own: a caller (see ``Ticker``) invokes
    ``advance()`` on whatever cadence it likes. Randomness comes from an
    injectable ``Random`` so runs can be reproduced from a seed.
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: Random | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._config = config
        self._rng = rng if rng is not None else Random(config.seed)
        self._clock = clock if clock is not None else _wall_clock_ms
        self._base_speed = base_speed_for(config.network_condition)

        self._peers: list[Peer] = []
        self._next_peer_index = 0
        self._metrics = SwarmMetrics()
        self._network_stats = NetworkStats.for_mode(config.use_anate)
        self._running = False
        self._ticks = 0

        self._generate_peers()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def rng(self) -> Random:
        return self._rng

    @property
    def base_speed(self) -> float:
        return self._base_speed

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def ticks(self) -> int:
        return self._ticks

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def advance(self) -> None:
        """Advance every unfinished leecher by one tick and recompute metrics."""
        if not self._running:
            return

        multiplier = ADAPTIVE_PROGRESS_MULTIPLIER if self._config.use_anate else 1.0

        for peer in self._peers:
            if peer.is_seeder or peer.is_complete:
                continue
            increment = peer.download_speed / PROGRESS_SCALE * multiplier
            peer.download_progress = min(COMPLETE, peer.download_progress + increment)
            if peer.is_complete:
                peer.is_seeder = True

        self._ticks += 1
        self._metrics = compute_swarm_metrics(self._peers, self._config.use_anate)
        # Coarse proxy, not a byte counter
        self._network_stats.total_bandwidth_used += self._metrics.average_download_speed * len(
            self._peers
        )

    def get_metrics(self) -> SwarmMetrics:
        return self._metrics

    def get_network_stats(self) -> NetworkStats:
        return self._network_stats

    def get_peers(self) -> list[Peer]:
        """The live population; copy it to keep a snapshot across ticks."""
        return self._peers

    def add_peer(self) -> Peer:
        """Append a freshly joined leecher. Metrics stay stale until the next tick."""
        peer = generate_peer(
            self._allocate_peer_id(),
            self._rng,
            self._base_speed,
            self._clock(),
            is_seeder=False,
            progress_ceiling=JOINING_PROGRESS_CEILING,
            regions=REGIONS[:JOINING_REGION_COUNT],
        )
        self._peers.append(peer)
        return peer

    def remove_peer(self) -> Peer | None:
        """Drop one random peer, never emptying the swarm."""
        if len(self._peers) <= 1:
            return None
        return self._peers.pop(self._rng.randrange(len(self._peers)))

    def _allocate_peer_id(self) -> PeerId:
        peer_id = PeerId(f"peer-{self._next_peer_index}")
        self._next_peer_index += 1
        return peer_id

    def _generate_peers(self) -> None:
        now = self._clock()
        for _ in range(self._config.peer_count):
            is_seeder = self._rng.random() < SEEDER_PROBABILITY
            self._peers.append(
                generate_peer(
                    self._allocate_peer_id(),
                    self._rng,
                    self._base_speed,
                    now,
                    is_seeder=is_seeder,
                    progress_ceiling=INITIAL_PROGRESS_CEILING,
                    backdate_ms=MAX_BACKDATE_MS,
                )
            )
