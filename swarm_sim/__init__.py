"""Synthetic peer-to-peer swarm simulator comparing baseline and ANATE modes."""

from swarm_sim.config import NetworkCondition, SimulationConfig
from swarm_sim.core.simulator import SwarmSimulator
from swarm_sim.core.ticker import Ticker

__all__ = [
    "NetworkCondition",
    "SimulationConfig",
    "SwarmSimulator",
    "Ticker",
]
