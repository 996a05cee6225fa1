"""Core swarm simulation engine."""

from swarm_sim.core.peer import REGIONS, Peer, generate_peer
from swarm_sim.core.simulator import SwarmSimulator
from swarm_sim.core.ticker import Ticker
from swarm_sim.core.types import PeerId, Region, RunId

__all__ = [
    "REGIONS",
    "Peer",
    "PeerId",
    "Region",
    "RunId",
    "SwarmSimulator",
    "Ticker",
    "generate_peer",
]
