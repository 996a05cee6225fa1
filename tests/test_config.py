"""Tests for simulation configuration."""

import pytest

from swarm_sim.config import (
    NetworkCondition,
    SimulationConfig,
    base_speed_for,
    config_from_dict,
    config_to_dict,
    validate_config,
)


class TestSimulationConfig:
    def test_defaults(self) -> None:
        config = SimulationConfig()

        assert config.peer_count == 50
        assert config.file_size == 1000
        assert config.network_condition == "moderate"
        assert config.use_anate is True
        assert config.simulation_speed == 1.0
        assert config.seed is None

    def test_mode_label(self) -> None:
        assert SimulationConfig(use_anate=True).mode == "ANATE"
        assert SimulationConfig(use_anate=False).mode == "Traditional"


class TestBaseSpeed:
    @pytest.mark.parametrize(
        ("condition", "expected"),
        [
            (NetworkCondition.OPTIMAL, 1000.0),
            ("moderate", 500.0),
            ("poor", 100.0),
            ("", 500.0),
            ("excellent", 500.0),
        ],
    )
    def test_base_speed(self, condition: str, expected: float) -> None:
        assert base_speed_for(condition) == expected


class TestConfigDict:
    def test_to_dict(self) -> None:
        data = config_to_dict(SimulationConfig(peer_count=10, seed=3))

        assert data == {
            "peer_count": 10,
            "file_size": 1000,
            "network_condition": "moderate",
            "use_anate": True,
            "simulation_speed": 1.0,
            "seed": 3,
        }

    def test_from_camel_case(self) -> None:
        config = config_from_dict(
            {"peerCount": 75, "networkCondition": "poor", "useANATE": False, "fileSize": 200}
        )

        assert config == SimulationConfig(
            peer_count=75, network_condition="poor", use_anate=False, file_size=200
        )

    def test_from_snake_case(self) -> None:
        original = SimulationConfig(peer_count=12, simulation_speed=2.0, seed=9)
        assert config_from_dict(config_to_dict(original)) == original

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(ValueError, match="bogus"):
            config_from_dict({"bogus": 1})


class TestValidateConfig:
    def test_valid(self) -> None:
        ok, errors = validate_config(SimulationConfig())
        assert ok
        assert errors == []

    def test_peer_count_bounds(self) -> None:
        ok, errors = validate_config(
            SimulationConfig(peer_count=5), min_peer_count=10, max_peer_count=200
        )
        assert not ok
        assert errors == ["peer_count (5) < 10"]

        ok, errors = validate_config(
            SimulationConfig(peer_count=201), min_peer_count=10, max_peer_count=200
        )
        assert not ok
        assert errors == ["peer_count (201) > 200"]

    def test_unbounded_max(self) -> None:
        ok, _ = validate_config(SimulationConfig(peer_count=5000))
        assert ok

    def test_collects_all_errors(self) -> None:
        ok, errors = validate_config(
            SimulationConfig(
                peer_count=0, network_condition="lunar", file_size=0, simulation_speed=0
            )
        )

        assert not ok
        assert len(errors) == 4
        assert any("network_condition" in e for e in errors)
