"""Tests for the caller-owned ticker."""

import asyncio

import pytest

from swarm_sim.config import SimulationConfig
from swarm_sim.core.simulator import SwarmSimulator
from swarm_sim.core.ticker import Ticker


class FakeSleep:
    """Records requested sleeps without waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class TestTicker:
    def test_rejects_non_positive_interval(self, simulator: SwarmSimulator) -> None:
        with pytest.raises(ValueError, match="interval"):
            Ticker(simulator, interval=0)

    def test_for_config_uses_speed(self, simulator: SwarmSimulator) -> None:
        ticker = Ticker.for_config(simulator, SimulationConfig(simulation_speed=4.0))
        assert ticker.interval == 0.25

    def test_step_on_stopped_simulator(self, simulator: SwarmSimulator) -> None:
        ticker = Ticker(simulator)

        assert ticker.step() is False
        assert ticker.ticks == 0
        assert simulator.ticks == 0

    def test_run_counts_ticks(self, simulator: SwarmSimulator) -> None:
        simulator.start()
        ticker = Ticker(simulator, interval=0.5)

        assert ticker.run(10) == 10
        assert ticker.ticks == 10
        assert simulator.ticks == 10
        assert ticker.elapsed == 5.0

    def test_budget_stops_simulator(self, simulator: SwarmSimulator) -> None:
        simulator.start()
        ticker = Ticker(simulator, interval=1.0, max_duration=3.0)

        assert ticker.run(10) == 3
        assert not simulator.is_running
        assert ticker.budget_exhausted()

    def test_on_tick_called_after_advance(self, simulator: SwarmSimulator) -> None:
        seen: list[int] = []
        simulator.start()
        ticker = Ticker(simulator, on_tick=lambda sim: seen.append(sim.ticks))

        ticker.run(3)

        assert seen == [1, 2, 3]

    def test_stop_from_callback_ends_run(self, simulator: SwarmSimulator) -> None:
        simulator.start()

        def stop_at_two(sim: SwarmSimulator) -> None:
            if sim.ticks == 2:
                sim.stop()

        ticker = Ticker(simulator, on_tick=stop_at_two)

        assert ticker.run(10) == 2


class TestRunAsync:
    def test_sleeps_interval_between_ticks(self, simulator: SwarmSimulator) -> None:
        sleep = FakeSleep()
        simulator.start()
        ticker = Ticker(simulator, interval=0.5, max_duration=2.0, sleep=sleep)

        ticks = asyncio.run(ticker.run_async())

        assert ticks == 4
        assert sleep.calls == [0.5, 0.5, 0.5, 0.5]
        assert not simulator.is_running

    def test_returns_immediately_when_stopped(self, simulator: SwarmSimulator) -> None:
        sleep = FakeSleep()
        ticker = Ticker(simulator, sleep=sleep)

        assert asyncio.run(ticker.run_async()) == 0
        assert sleep.calls == []

    def test_external_stop_ends_loop(self) -> None:
        sim = SwarmSimulator(SimulationConfig(peer_count=5, seed=1))
        sim.start()
        calls = 0

        async def stopping_sleep(seconds: float) -> None:
            nonlocal calls
            calls += 1
            if calls == 3:
                sim.stop()

        ticks = asyncio.run(Ticker(sim, sleep=stopping_sleep).run_async())

        assert ticks == 2
        assert sim.ticks == 2
