from swarm_sim.service.config import ServiceConfig
from swarm_sim.service.engine import RunNotFoundError, SimulationService

__all__ = [
    "RunNotFoundError",
    "ServiceConfig",
    "SimulationService",
]
