"""Tests for CSV export and display formatting."""

import csv
import io

import pytest

from swarm_sim.config import SimulationConfig
from swarm_sim.core.simulator import SwarmSimulator
from swarm_sim.metrics.results import NetworkStats, SwarmMetrics
from swarm_sim.reporting.export import (
    PEER_CSV_FIELDS,
    export_metrics_csv,
    export_peer_rows_csv,
    export_peers_csv,
    write_csv,
)
from swarm_sim.reporting.format import format_kilobytes, format_speed, peer_status


class TestFormat:
    @pytest.mark.parametrize(
        ("kbps", "expected"),
        [(1500.0, "1.5 MB/s"), (1000.0, "1000 KB/s"), (250.4, "250 KB/s"), (0.0, "0 KB/s")],
    )
    def test_format_speed(self, kbps: float, expected: str) -> None:
        assert format_speed(kbps) == expected

    @pytest.mark.parametrize(
        ("kb", "expected"),
        [(512.0, "512 KB"), (2500.0, "2.5 MB"), (3_200_000.0, "3.2 GB")],
    )
    def test_format_kilobytes(self, kb: float, expected: str) -> None:
        assert format_kilobytes(kb) == expected

    def test_peer_status(self, simulator: SwarmSimulator) -> None:
        statuses = {peer_status(peer) for peer in simulator.get_peers()}
        assert statuses == {"Seeder", "Leecher"}


class TestPeerCsv:
    def test_header_and_rows(self, simulator: SwarmSimulator) -> None:
        text = export_peers_csv(simulator.get_peers())
        rows = list(csv.DictReader(io.StringIO(text)))

        assert text.splitlines()[0] == ",".join(PEER_CSV_FIELDS)
        assert len(rows) == 100
        assert rows[0]["peer_id"] == "peer-0"
        assert rows[0]["is_seeder"] in ("True", "False")

    def test_extra_columns_ignored(self) -> None:
        text = export_peer_rows_csv([{"peer_id": "p1", "run_id": "r1", "port": 6881}])
        rows = list(csv.DictReader(io.StringIO(text)))

        assert "run_id" not in rows[0]
        assert rows[0]["port"] == "6881"
        assert rows[0]["region"] == ""

    def test_empty_population(self) -> None:
        sim = SwarmSimulator(SimulationConfig(peer_count=0, seed=1))
        assert export_peers_csv(sim.get_peers()) == ",".join(PEER_CSV_FIELDS) + "\n"


class TestMetricsCsv:
    def test_metric_rows(self) -> None:
        text = export_metrics_csv(SwarmMetrics(total_peers=5), NetworkStats.for_mode(True))
        rows = list(csv.reader(io.StringIO(text)))

        assert rows[0] == ["metric", "value"]
        assert ["total_peers", "5.0"] in rows
        assert ["redundancy_reduction", "69.0"] in rows
        assert len(rows) == 1 + 8 + 5


class TestWriteCsv:
    def test_creates_parent_dirs(self, tmp_path) -> None:
        path = tmp_path / "nested" / "out.csv"
        write_csv(path, "a,b\n1,2\n")
        assert path.read_text() == "a,b\n1,2\n"
