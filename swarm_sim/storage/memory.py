"""In-process run store."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from typing import TYPE_CHECKING

from swarm_sim.storage.base import MetricRecord, RunRecord, RunStatus, RunStore, newest_first

if TYPE_CHECKING:
    from swarm_sim.core.types import RunId


class MemoryRunStore(RunStore):
    def __init__(self) -> None:
        self._runs: dict[RunId, RunRecord] = {}
        self._peers: dict[RunId, list[dict[str, object]]] = {}
        self._metrics: dict[RunId, list[MetricRecord]] = defaultdict(list)

    def create_run(self, record: RunRecord) -> None:
        if record.run_id in self._runs:
            raise ValueError(f"Run {record.run_id} already exists")
        self._runs[record.run_id] = replace(record)

    def get_run(self, run_id: RunId) -> RunRecord | None:
        record = self._runs.get(run_id)
        return replace(record) if record is not None else None

    def update_run(self, record: RunRecord) -> None:
        if record.run_id not in self._runs:
            raise KeyError(record.run_id)
        self._runs[record.run_id] = replace(record)

    def list_runs(
        self, limit: int | None = None, status: RunStatus | None = None
    ) -> list[RunRecord]:
        return newest_first([replace(r) for r in self._runs.values()], limit, status)

    def save_peers(self, run_id: RunId, rows: list[dict[str, object]]) -> None:
        self._peers[run_id] = [dict(row) for row in rows]

    def get_peers(self, run_id: RunId) -> list[dict[str, object]]:
        return [dict(row) for row in self._peers.get(run_id, [])]

    def append_metrics(self, records: list[MetricRecord]) -> None:
        for record in records:
            self._metrics[record.run_id].append(record)

    def get_metrics(self, run_id: RunId) -> list[MetricRecord]:
        return list(self._metrics.get(run_id, []))
