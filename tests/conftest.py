"""Shared pytest fixtures for swarm simulator tests."""

import pytest

from swarm_sim.config import SimulationConfig
from swarm_sim.core.simulator import SwarmSimulator
from swarm_sim.service.config import ServiceConfig
from swarm_sim.service.engine import SimulationService
from swarm_sim.storage.memory import MemoryRunStore

NOW_MS = 1_700_000_000_000.0


@pytest.fixture
def clock() -> object:
    """A frozen clock returning a fixed epoch-milliseconds value."""
    return lambda: NOW_MS


@pytest.fixture
def config() -> SimulationConfig:
    return SimulationConfig(peer_count=100, network_condition="moderate", seed=42)


@pytest.fixture
def simulator(config: SimulationConfig, clock) -> SwarmSimulator:
    """A seeded, stopped simulator with 100 peers."""
    return SwarmSimulator(config, clock=clock)


@pytest.fixture
def service() -> SimulationService:
    return SimulationService(MemoryRunStore(), ServiceConfig(seed=7))
