"""Command line entry point: run, compare or serve swarm simulations."""

from __future__ import annotations

import argparse
import json
import time
from collections import Counter
from pathlib import Path

from swarm_sim.config import NetworkCondition, SimulationConfig
from swarm_sim.reporting.export import export_metrics_csv, write_csv
from swarm_sim.reporting.format import format_kilobytes, format_speed, peer_status
from swarm_sim.scenarios.comparison import comparison_table, run_comparison
from swarm_sim.service.config import ServiceConfig
from swarm_sim.service.engine import SimulationService
from swarm_sim.storage.memory import MemoryRunStore
from swarm_sim.storage.ndjson import NdjsonRunStore


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _add_swarm_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--peers",
        type=int,
        default=50,
        help="Number of peers in the swarm (default: 50)",
    )
    parser.add_argument(
        "--file-size",
        type=int,
        default=1000,
        help="Shared file size in MB, descriptive only (default: 1000)",
    )
    parser.add_argument(
        "--condition",
        choices=[str(c) for c in NetworkCondition],
        default=str(NetworkCondition.MODERATE),
        help="Network condition (default: moderate)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=60,
        help="Number of ticks to simulate (default: 60)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for reproducible peer generation",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swarm-sim",
        description="Synthetic P2P swarm simulator comparing baseline and ANATE modes",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a single simulation")
    _add_swarm_arguments(run_parser)
    run_parser.add_argument(
        "--traditional",
        action="store_true",
        help="Use the baseline protocol instead of ANATE",
    )
    run_parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Tick-rate multiplier (default: 1.0)",
    )
    run_parser.add_argument(
        "--output-dir",
        type=Path,
        help="Store the run as NDJSON in this directory",
    )
    run_parser.add_argument(
        "--csv",
        type=Path,
        help="Write the final peer table to this CSV file",
    )
    run_parser.add_argument(
        "--report-every",
        type=_positive_int,
        default=10,
        help="Print a progress line every N ticks (default: 10)",
    )

    compare_parser = subparsers.add_parser("compare", help="Compare ANATE with the baseline")
    _add_swarm_arguments(compare_parser)
    compare_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the comparison as JSON",
    )

    serve_parser = subparsers.add_parser("serve", help="Start the dashboard API server")
    serve_parser.add_argument(
        "--config",
        type=Path,
        help="Path to TOML configuration file",
    )
    serve_parser.add_argument(
        "--host",
        help="Bind address (default: 0.0.0.0)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        help="Port for the API server (default: 8000)",
    )
    serve_parser.add_argument(
        "--output-dir",
        type=Path,
        help="Store runs as NDJSON in this directory (default: in memory)",
    )

    return parser


def run_command(args: argparse.Namespace) -> None:
    config = SimulationConfig(
        peer_count=args.peers,
        file_size=args.file_size,
        network_condition=args.condition,
        use_anate=not args.traditional,
        simulation_speed=args.speed,
        seed=args.seed,
    )

    store = NdjsonRunStore(args.output_dir) if args.output_dir else MemoryRunStore()
    # The command line accepts any population size the simulator does
    service = SimulationService(store, ServiceConfig(min_peer_count=1, max_peer_count=None))
    record = service.start(config)
    run_id = record.run_id
    print(f"[{run_id}] {record.description} ({config.network_condition})")

    wall_start = time.monotonic()
    session = service.session(run_id)
    for tick in range(1, args.ticks + 1):
        metrics = service.update(run_id)
        if tick % args.report_every == 0 or tick == args.ticks:
            print(
                f"[{run_id}] tick={tick} seeders={metrics.seeders}/{metrics.total_peers} "
                f"completion={metrics.completion_rate:.1f}% "
                f"download={format_speed(metrics.average_download_speed)}"
            )
    wall_clock = time.monotonic() - wall_start

    csv_text = service.export_csv(run_id) if args.csv else None
    final = service.stop(run_id)
    stats = session.simulator.get_network_stats()

    print(f"\n=== {final.name} ===")
    print(
        f"Ticks: {session.simulator.ticks} "
        f"({session.elapsed:.1f}s simulated, {wall_clock:.2f}s wall)"
    )
    statuses = Counter(peer_status(peer) for peer in session.simulator.get_peers())
    print(f"Peers: {statuses['Seeder']} seeding, {statuses['Leecher']} leeching")
    print(f"Swarm stability: {session.simulator.get_metrics().swarm_stability:.1f}")
    print(f"Redundancy reduction: {stats.redundancy_reduction:.0f}%")
    print(f"Download time improvement: {stats.download_time_improvement:.0f}%")
    print(f"Packet transfer efficiency: {stats.packet_transfer_efficiency:.0f}%")
    print(f"Bandwidth used: {format_kilobytes(stats.total_bandwidth_used)}")

    if args.csv is not None and csv_text is not None:
        write_csv(args.csv, csv_text)
        metrics_path = args.csv.with_name(f"{args.csv.stem}-metrics.csv")
        write_csv(metrics_path, export_metrics_csv(session.simulator.get_metrics(), stats))
        print(f"Wrote {args.csv} and {metrics_path}")


def compare_command(args: argparse.Namespace) -> None:
    config = SimulationConfig(
        peer_count=args.peers,
        file_size=args.file_size,
        network_condition=args.condition,
        seed=args.seed,
    )
    result = run_comparison(config, ticks=args.ticks)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    for line in comparison_table(result):
        print(line)


def serve_command(args: argparse.Namespace) -> None:
    from swarm_sim.service.server import run_server

    config = ServiceConfig.from_toml(args.config) if args.config else ServiceConfig()
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.output_dir is not None:
        config.output_dir = args.output_dir

    run_server(config)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "run":
            run_command(args)
        elif args.command == "compare":
            compare_command(args)
        else:
            serve_command(args)
    except ValueError as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
