"""Run store backed by NDJSON and JSON files.

Layout under ``output_dir``::

    runs.ndjson              one line per run state change, latest wins
    <run_id>/peers.json      current peer rows
    <run_id>/metrics.ndjson  one line per metric value
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from swarm_sim.storage.base import MetricRecord, RunRecord, RunStatus, RunStore, newest_first

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from swarm_sim.core.types import RunId


def append_line(path: Path, data: dict[str, object]) -> None:
    append_lines(path, [data])


def append_lines(path: Path, rows: Iterable[dict[str, object]]) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.writelines(json.dumps(data) + "\n" for data in rows)


def read_lines(path: Path) -> list[dict[str, object]]:
    if not path.exists():
        return []
    with path.open(encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


class NdjsonRunStore(RunStore):
    def __init__(self, output_dir: Path, overview_file: str = "runs.ndjson") -> None:
        self._output_dir = output_dir
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._runs_file = output_dir / overview_file

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def _load_runs(self) -> dict[RunId, RunRecord]:
        runs: dict[RunId, RunRecord] = {}
        for data in read_lines(self._runs_file):
            record = RunRecord.from_dict(data)
            runs[record.run_id] = record
        return runs

    def _run_dir(self, run_id: RunId) -> Path:
        run_dir = self._output_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)
        return run_dir

    def create_run(self, record: RunRecord) -> None:
        if record.run_id in self._load_runs():
            raise ValueError(f"Run {record.run_id} already exists")
        append_line(self._runs_file, record.to_dict())

    def get_run(self, run_id: RunId) -> RunRecord | None:
        return self._load_runs().get(run_id)

    def update_run(self, record: RunRecord) -> None:
        if record.run_id not in self._load_runs():
            raise KeyError(record.run_id)
        append_line(self._runs_file, record.to_dict())

    def list_runs(
        self, limit: int | None = None, status: RunStatus | None = None
    ) -> list[RunRecord]:
        return newest_first(list(self._load_runs().values()), limit, status)

    def save_peers(self, run_id: RunId, rows: list[dict[str, object]]) -> None:
        peers_file = self._run_dir(run_id) / "peers.json"
        peers_file.write_text(json.dumps(rows), encoding="utf-8")

    def get_peers(self, run_id: RunId) -> list[dict[str, object]]:
        peers_file = self._output_dir / run_id / "peers.json"
        if not peers_file.exists():
            return []
        return json.loads(peers_file.read_text(encoding="utf-8"))

    def append_metrics(self, records: list[MetricRecord]) -> None:
        by_run: dict[RunId, list[dict[str, object]]] = {}
        for record in records:
            by_run.setdefault(record.run_id, []).append(record.to_dict())
        for run_id, rows in by_run.items():
            append_lines(self._run_dir(run_id) / "metrics.ndjson", rows)

    def get_metrics(self, run_id: RunId) -> list[MetricRecord]:
        return [
            MetricRecord.from_dict(data)
            for data in read_lines(self._output_dir / run_id / "metrics.ndjson")
        ]
