"""Simulation configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class NetworkCondition(StrEnum):
    OPTIMAL = "optimal"
    MODERATE = "moderate"
    POOR = "poor"


# Base transfer rate per network condition (KB/s)
BASE_SPEED_BY_CONDITION: dict[str, float] = {
    NetworkCondition.OPTIMAL: 1000.0,
    NetworkCondition.MODERATE: 500.0,
    NetworkCondition.POOR: 100.0,
}
DEFAULT_BASE_SPEED = 500.0


def base_speed_for(condition: str) -> float:
    """Base transfer rate for a network condition, 500 KB/s when unrecognized."""
    return BASE_SPEED_BY_CONDITION.get(condition, DEFAULT_BASE_SPEED)


@dataclass(frozen=True)
class SimulationConfig:
    """Configuration for one swarm simulation."""

    peer_count: int = 50
    file_size: int = 1000  # MB, descriptive only
    network_condition: str = NetworkCondition.MODERATE
    use_anate: bool = True

    # Tick-rate multiplier, consumed by the ticker only
    simulation_speed: float = 1.0

    # None leaves the random source unseeded
    seed: int | None = None

    @property
    def mode(self) -> str:
        return "ANATE" if self.use_anate else "Traditional"


# camelCase keys used by the dashboard and its stored run configs
_CAMEL_KEYS = {
    "peerCount": "peer_count",
    "fileSize": "file_size",
    "networkCondition": "network_condition",
    "useANATE": "use_anate",
    "simulationSpeed": "simulation_speed",
}


def config_to_dict(config: SimulationConfig) -> dict[str, object]:
    return {
        "peer_count": config.peer_count,
        "file_size": config.file_size,
        "network_condition": str(config.network_condition),
        "use_anate": config.use_anate,
        "simulation_speed": config.simulation_speed,
        "seed": config.seed,
    }


def config_from_dict(data: dict[str, Any]) -> SimulationConfig:
    """Build a config from snake_case or camelCase keys. Unknown keys raise."""
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _CAMEL_KEYS.get(key, key)
        if name not in SimulationConfig.__dataclass_fields__:
            raise ValueError(f"Unknown simulation config key: {key}")
        kwargs[name] = value
    return SimulationConfig(**kwargs)


def validate_config(
    config: SimulationConfig,
    min_peer_count: int = 1,
    max_peer_count: int | None = None,
) -> tuple[bool, list[str]]:
    errors: list[str] = []

    if config.peer_count < min_peer_count:
        errors.append(f"peer_count ({config.peer_count}) < {min_peer_count}")

    if max_peer_count is not None and config.peer_count > max_peer_count:
        errors.append(f"peer_count ({config.peer_count}) > {max_peer_count}")

    if config.network_condition not in BASE_SPEED_BY_CONDITION:
        allowed = ", ".join(str(c) for c in NetworkCondition)
        errors.append(f"network_condition ({config.network_condition}) not one of {allowed}")

    if config.file_size <= 0:
        errors.append(f"file_size ({config.file_size}) <= 0")

    if config.simulation_speed <= 0:
        errors.append(f"simulation_speed ({config.simulation_speed}) <= 0")

    return (len(errors) == 0, errors)
