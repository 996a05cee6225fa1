"""Tests shared by every run store backend."""

from datetime import UTC, datetime, timedelta

import pytest

from swarm_sim.core.types import RunId
from swarm_sim.storage.base import MetricRecord, RunRecord, RunStatus, RunStore
from swarm_sim.storage.memory import MemoryRunStore
from swarm_sim.storage.ndjson import NdjsonRunStore, append_lines, read_lines

T0 = datetime(2024, 1, 1, tzinfo=UTC)


def make_run(name: str, minutes: int = 0, use_anate: bool = True) -> RunRecord:
    return RunRecord(
        run_id=RunId(name),
        name=f"Run {name}",
        description="test run",
        config={"peer_count": 10, "use_anate": use_anate},
        status=RunStatus.RUNNING,
        start_time=T0 + timedelta(minutes=minutes),
    )


@pytest.fixture(params=["memory", "ndjson"])
def store(request, tmp_path) -> RunStore:
    if request.param == "memory":
        return MemoryRunStore()
    return NdjsonRunStore(tmp_path / "runs")


class TestRuns:
    def test_create_and_get(self, store: RunStore) -> None:
        store.create_run(make_run("a"))

        record = store.get_run(RunId("a"))
        assert record is not None
        assert record.name == "Run a"
        assert record.status == RunStatus.RUNNING
        assert record.start_time == T0
        assert record.use_anate

    def test_missing_run(self, store: RunStore) -> None:
        assert store.get_run(RunId("missing")) is None

    def test_duplicate_id_rejected(self, store: RunStore) -> None:
        store.create_run(make_run("a"))
        with pytest.raises(ValueError, match="already exists"):
            store.create_run(make_run("a"))

    def test_update_replaces_state(self, store: RunStore) -> None:
        record = make_run("a")
        store.create_run(record)

        record.status = RunStatus.COMPLETED
        record.end_time = T0 + timedelta(minutes=5)
        record.results = {"ticks": 3}
        store.update_run(record)

        stored = store.get_run(RunId("a"))
        assert stored.status == RunStatus.COMPLETED
        assert stored.end_time == T0 + timedelta(minutes=5)
        assert stored.results == {"ticks": 3}
        assert len(store.list_runs()) == 1

    def test_update_unknown_run(self, store: RunStore) -> None:
        with pytest.raises(KeyError):
            store.update_run(make_run("ghost"))

    def test_list_newest_first_with_limit(self, store: RunStore) -> None:
        for i, name in enumerate(["a", "b", "c"]):
            store.create_run(make_run(name, minutes=i))

        assert [r.run_id for r in store.list_runs()] == ["c", "b", "a"]
        assert [r.run_id for r in store.list_runs(limit=2)] == ["c", "b"]

    def test_list_filters_by_status(self, store: RunStore) -> None:
        store.create_run(make_run("a"))
        done = make_run("b", minutes=1)
        store.create_run(done)
        done.status = RunStatus.COMPLETED
        store.update_run(done)

        completed = store.list_runs(status=RunStatus.COMPLETED)
        assert [r.run_id for r in completed] == ["b"]


class TestPeersAndMetrics:
    def test_save_peers_replaces(self, store: RunStore) -> None:
        store.save_peers(RunId("a"), [{"peer_id": "p0"}, {"peer_id": "p1"}])
        store.save_peers(RunId("a"), [{"peer_id": "p2"}])

        assert store.get_peers(RunId("a")) == [{"peer_id": "p2"}]
        assert store.get_peers(RunId("b")) == []

    def test_metrics_append_in_order(self, store: RunStore) -> None:
        rows = [
            MetricRecord(RunId("a"), "completion_rate", float(i), T0 + timedelta(seconds=i))
            for i in range(3)
        ]
        store.append_metrics(rows[:2])
        store.append_metrics(rows[2:])
        store.append_metrics([MetricRecord(RunId("b"), "seeders", 1.0, T0)])

        assert store.get_metrics(RunId("a")) == rows
        assert len(store.get_metrics(RunId("b"))) == 1
        assert store.get_metrics(RunId("c")) == []


class TestRecords:
    def test_run_record_dict_round_trip(self) -> None:
        record = make_run("a")
        record.end_time = T0 + timedelta(hours=1)
        assert RunRecord.from_dict(record.to_dict()) == record

    def test_use_anate_defaults_false(self) -> None:
        record = make_run("a")
        record.config = {}
        assert not record.use_anate


class TestNdjsonLayout:
    def test_files_on_disk(self, tmp_path) -> None:
        store = NdjsonRunStore(tmp_path)
        record = make_run("a")
        store.create_run(record)
        record.status = RunStatus.COMPLETED
        store.update_run(record)
        store.save_peers(RunId("a"), [{"peer_id": "p0"}])
        store.append_metrics([MetricRecord(RunId("a"), "seeders", 2.0, T0)])

        lines = read_lines(tmp_path / "runs.ndjson")
        assert [line["status"] for line in lines] == ["running", "completed"]
        assert (tmp_path / "a" / "peers.json").exists()
        assert len(read_lines(tmp_path / "a" / "metrics.ndjson")) == 1

    def test_reopen_reads_existing(self, tmp_path) -> None:
        NdjsonRunStore(tmp_path).create_run(make_run("a"))

        reopened = NdjsonRunStore(tmp_path)
        assert reopened.get_run(RunId("a")) is not None
        assert reopened.output_dir == tmp_path

    def test_append_lines_batches_rows(self, tmp_path) -> None:
        path = tmp_path / "rows.ndjson"
        append_lines(path, [{"n": 1}, {"n": 2}])
        append_lines(path, iter([{"n": 3}]))
        append_lines(path, [])

        assert read_lines(path) == [{"n": 1}, {"n": 2}, {"n": 3}]

    def test_metrics_for_several_runs_in_one_call(self, tmp_path) -> None:
        store = NdjsonRunStore(tmp_path)
        store.create_run(make_run("a"))
        store.create_run(make_run("b"))

        store.append_metrics(
            [
                MetricRecord(RunId("a"), "seeders", 1.0, T0),
                MetricRecord(RunId("b"), "seeders", 5.0, T0),
                MetricRecord(RunId("a"), "leechers", 2.0, T0),
            ]
        )

        assert [m.metric_type for m in store.get_metrics(RunId("a"))] == ["seeders", "leechers"]
        assert [m.value for m in store.get_metrics(RunId("b"))] == [5.0]
