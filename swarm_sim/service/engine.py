"""Simulation service: one shared core behind a pluggable run store.

The service owns a simulator, ticker and metrics recorder per run and mirrors
every tick into the store, so locally driven and API driven runs produce the
same records.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from random import Random
from typing import TYPE_CHECKING

import coolname.impl

from swarm_sim.config import config_to_dict, validate_config
from swarm_sim.core.simulator import SwarmSimulator
from swarm_sim.core.ticker import Ticker
from swarm_sim.core.types import RunId
from swarm_sim.metrics.collector import MetricsRecorder
from swarm_sim.reporting.export import export_peer_rows_csv, export_peers_csv
from swarm_sim.service.analytics import latest_metrics
from swarm_sim.service.config import ServiceConfig
from swarm_sim.storage.base import MetricRecord, RunRecord, RunStatus
from swarm_sim.storage.memory import MemoryRunStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from swarm_sim.config import SimulationConfig
    from swarm_sim.core.peer import Peer
    from swarm_sim.metrics.results import MetricsSnapshot, SwarmMetrics
    from swarm_sim.storage.base import RunStore

    type SnapshotListener = Callable[[RunId, MetricsSnapshot], None]


class RunNotFoundError(LookupError):
    def __init__(self, run_id: str) -> None:
        super().__init__(f"Run {run_id} not found")
        self.run_id = run_id


def generate_run_id(rng: Random) -> RunId:
    coolname.impl.replace_random(rng)
    return RunId("-".join(coolname.impl.generate(3)))


def metric_records(run_id: RunId, metrics: SwarmMetrics, timestamp: datetime) -> list[MetricRecord]:
    return [
        MetricRecord(run_id=run_id, metric_type=name, value=value, timestamp=timestamp)
        for name, value in metrics.to_dict().items()
    ]


@dataclass
class Session:
    """Live state of a run owned by this service."""

    run_id: RunId
    simulator: SwarmSimulator
    ticker: Ticker
    recorder: MetricsRecorder
    autoplay_task: asyncio.Task[int] | None = None

    @property
    def elapsed(self) -> float:
        return self.simulator.ticks * self.ticker.interval


class SimulationService:
    def __init__(self, store: RunStore | None = None, config: ServiceConfig | None = None) -> None:
        self._store = store if store is not None else MemoryRunStore()
        self._config = config if config is not None else ServiceConfig()
        self._rng = Random(self._config.seed)
        self._sessions: dict[RunId, Session] = {}
        self._listeners: list[SnapshotListener] = []

    @property
    def store(self) -> RunStore:
        return self._store

    @property
    def config(self) -> ServiceConfig:
        return self._config

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def session(self, run_id: str) -> Session:
        session = self._sessions.get(RunId(run_id))
        if session is None:
            raise RunNotFoundError(run_id)
        return session

    def start(self, config: SimulationConfig, name: str | None = None) -> RunRecord:
        is_valid, errors = validate_config(
            config,
            min_peer_count=self._config.min_peer_count,
            max_peer_count=self._config.max_peer_count,
        )
        if not is_valid:
            raise ValueError("; ".join(errors))

        run_id = self._new_run_id()
        seed = config.seed if config.seed is not None else self._rng.randint(0, 2**31 - 1)
        simulator = SwarmSimulator(config, rng=Random(seed))
        ticker = Ticker.for_config(
            simulator, config, on_tick=lambda sim: self._on_tick(run_id, sim)
        )
        session = Session(
            run_id=run_id,
            simulator=simulator,
            ticker=ticker,
            recorder=MetricsRecorder(max_snapshots=self._config.max_snapshots),
        )
        self._sessions[run_id] = session

        now = datetime.now(UTC)
        record = RunRecord(
            run_id=run_id,
            name=name or f"ANATE Simulation {now.isoformat()}",
            description=f"{config.mode} simulation with {config.peer_count} peers",
            config={**config_to_dict(config), "seed": seed},
            status=RunStatus.RUNNING,
            start_time=now,
        )
        self._store.create_run(record)
        self._save_peers(session)

        simulator.start()
        return record

    def update(self, run_id: str, ticks: int = 1) -> SwarmMetrics:
        if ticks < 1:
            raise ValueError(f"ticks ({ticks}) < 1")
        session = self._live_session(run_id)
        session.ticker.run(ticks)
        return session.simulator.get_metrics()

    def stop(self, run_id: str) -> RunRecord:
        """Stop a run, persist its results and release its live state.

        Stopping a run that already ended returns its stored record.
        """
        record = self._get_record(run_id)
        session = self._sessions.pop(record.run_id, None)
        if session is None:
            return record

        if session.autoplay_task is not None:
            session.autoplay_task.cancel()
            session.autoplay_task = None

        session.simulator.stop()
        self._save_peers(session)
        if record.status != RunStatus.RUNNING:
            return record

        record.status = RunStatus.COMPLETED
        record.end_time = datetime.now(UTC)
        record.results = {
            "ticks": session.simulator.ticks,
            "metrics": session.simulator.get_metrics().to_dict(),
            "network_stats": session.simulator.get_network_stats().to_dict(),
        }
        self._store.update_run(record)
        return record

    def status(self, run_id: str) -> dict[str, object]:
        record = self._get_record(run_id)
        session = self._sessions.get(record.run_id)

        if session is None:
            # Ended run, or one from a previous process: serve what the store kept
            return {
                "run": record.to_dict(),
                "is_running": False,
                "ticks": record.results.get("ticks", 0),
                "metrics": latest_metrics(self._store.get_metrics(record.run_id)),
                "network_stats": record.results.get("network_stats", {}),
                "peers": self._store.get_peers(record.run_id),
                "history": [],
            }

        simulator = session.simulator
        return {
            "run": record.to_dict(),
            "is_running": simulator.is_running,
            "ticks": simulator.ticks,
            "metrics": simulator.get_metrics().to_dict(),
            "network_stats": simulator.get_network_stats().to_dict(),
            "peers": [peer.to_record() for peer in simulator.get_peers()],
            "history": [
                {"tick": s.tick, "timestamp": s.timestamp, **s.metrics.to_dict()}
                for s in session.recorder.timeseries
            ],
        }

    def add_peer(self, run_id: str) -> Peer:
        session = self._live_session(run_id)
        peer = session.simulator.add_peer()
        self._save_peers(session)
        return peer

    def remove_peer(self, run_id: str) -> Peer | None:
        session = self._live_session(run_id)
        peer = session.simulator.remove_peer()
        if peer is not None:
            self._save_peers(session)
        return peer

    def export_csv(self, run_id: str) -> str:
        session = self._sessions.get(RunId(run_id))
        if session is not None:
            return export_peers_csv(session.simulator.get_peers())
        record = self._get_record(run_id)
        return export_peer_rows_csv(self._store.get_peers(record.run_id))

    def start_autoplay(self, run_id: str, max_duration: float | None = None) -> asyncio.Task[int]:
        """Tick the run in the background on its configured cadence.

        Must be called from a running event loop. Any previous autoplay task of
        the run is cancelled first. The run is stopped when the budget runs out
        and marked failed if a tick raises.
        """
        loop = asyncio.get_running_loop()
        session = self._live_session(run_id)
        if session.autoplay_task is not None:
            session.autoplay_task.cancel()

        if max_duration is None:
            max_duration = self._config.autoplay_duration

        ticker = Ticker(
            session.simulator,
            interval=session.ticker.interval,
            max_duration=max_duration,
            on_tick=lambda sim: self._on_tick(session.run_id, sim),
        )
        task = loop.create_task(ticker.run_async())
        session.autoplay_task = task
        task.add_done_callback(lambda _: self._finish_autoplay(session, task))
        return task

    def _finish_autoplay(self, session: Session, task: asyncio.Task[int]) -> None:
        if session.autoplay_task is not task:
            return
        session.autoplay_task = None
        if task.cancelled():
            return

        exc = task.exception()
        if exc is not None:
            self._fail(session, exc)
        elif not session.simulator.is_running:
            self.stop(session.run_id)

    def _fail(self, session: Session, exc: BaseException) -> None:
        self._sessions.pop(session.run_id, None)
        session.simulator.stop()

        record = self._get_record(session.run_id)
        record.status = RunStatus.FAILED
        record.end_time = datetime.now(UTC)
        record.results = {"ticks": session.simulator.ticks, "error": str(exc)}
        self._store.update_run(record)

    def _on_tick(self, run_id: RunId, simulator: SwarmSimulator) -> None:
        session = self._sessions[run_id]
        metrics = simulator.get_metrics()
        snapshot = session.recorder.record(simulator.ticks, session.elapsed, metrics)

        self._store.append_metrics(metric_records(run_id, metrics, datetime.now(UTC)))
        self._save_peers(session)

        for listener in self._listeners:
            listener(run_id, snapshot)

    def _live_session(self, run_id: str) -> Session:
        session = self._sessions.get(RunId(run_id))
        if session is not None:
            return session
        if self._store.get_run(RunId(run_id)) is not None:
            raise ValueError(f"Run {run_id} is not running")
        raise RunNotFoundError(run_id)

    def _save_peers(self, session: Session) -> None:
        peers = session.simulator.get_peers()
        self._store.save_peers(session.run_id, [peer.to_record() for peer in peers])

    def _get_record(self, run_id: str) -> RunRecord:
        record = self._store.get_run(RunId(run_id))
        if record is None:
            raise RunNotFoundError(run_id)
        return record

    def _new_run_id(self) -> RunId:
        while True:
            run_id = generate_run_id(self._rng)
            if run_id not in self._sessions and self._store.get_run(run_id) is None:
                return run_id
