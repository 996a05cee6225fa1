"""Caller-owned scheduler that drives a SwarmSimulator."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from swarm_sim.config import SimulationConfig
    from swarm_sim.core.simulator import SwarmSimulator

    type TickCallback = Callable[[SwarmSimulator], None]


class Ticker:
    """Advances a simulator on a fixed interval of simulated seconds.

    The ticker owns all notion of time; the simulator only sees ``advance()``
    calls. ``max_duration`` is a budget in simulated seconds after which the
    ticker stops the simulator.
    """

    def __init__(
        self,
        simulator: SwarmSimulator,
        interval: float = 1.0,
        max_duration: float | None = None,
        on_tick: TickCallback | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._simulator = simulator
        self._interval = interval
        self._max_duration = max_duration
        self._on_tick = on_tick
        self._sleep = sleep
        self._ticks = 0

    @classmethod
    def for_config(
        cls,
        simulator: SwarmSimulator,
        config: SimulationConfig,
        max_duration: float | None = None,
        on_tick: TickCallback | None = None,
    ) -> Ticker:
        return cls(
            simulator,
            interval=1.0 / config.simulation_speed,
            max_duration=max_duration,
            on_tick=on_tick,
        )

    @property
    def simulator(self) -> SwarmSimulator:
        return self._simulator

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def elapsed(self) -> float:
        return self._ticks * self._interval

    def budget_exhausted(self) -> bool:
        return self._max_duration is not None and self.elapsed >= self._max_duration

    def step(self) -> bool:
        """Run one tick. Returns whether the simulator is still running."""
        if not self._simulator.is_running:
            return False

        self._simulator.advance()
        self._ticks += 1

        if self._on_tick is not None:
            self._on_tick(self._simulator)

        if self.budget_exhausted():
            self._simulator.stop()

        return self._simulator.is_running

    def run(self, ticks: int) -> int:
        """Step synchronously without sleeping. Returns ticks performed."""
        start = self._ticks
        for _ in range(ticks):
            if not self.step():
                break
        return self._ticks - start

    async def run_async(self) -> int:
        """Step every ``interval`` seconds until the simulator stops."""
        start = self._ticks
        while self._simulator.is_running:
            await self._sleep(self._interval)
            self.step()
        return self._ticks - start
