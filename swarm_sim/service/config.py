from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://localhost:3000")


@dataclass
class ServiceConfig:
    """Settings for the simulation service and its HTTP API.

    Peer count limits mirror the dashboard's slider; the simulator itself
    accepts any population size.
    """

    output_dir: Path | None = None  # None keeps runs in memory
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    min_peer_count: int = 10
    max_peer_count: int | None = 200
    autoplay_duration: float = 60.0  # simulated seconds
    history_limit: int = 10
    comparison_limit: int = 20
    max_snapshots: int | None = 600
    seed: int | None = None

    @classmethod
    def from_toml(cls, path: Path) -> ServiceConfig:
        import tomllib

        with path.open("rb") as f:
            data = tomllib.load(f)

        server = data.get("server", {})
        storage = data.get("storage", {})
        limits = data.get("limits", {})
        analytics = data.get("analytics", {})

        output_dir = storage.get("dir")

        return cls(
            output_dir=Path(output_dir) if output_dir else None,
            host=server.get("host", "0.0.0.0"),
            port=server.get("port", 8000),
            cors_origins=tuple(server.get("cors_origins", DEFAULT_CORS_ORIGINS)),
            min_peer_count=limits.get("min_peer_count", 10),
            max_peer_count=limits.get("max_peer_count", 200),
            autoplay_duration=limits.get("autoplay_duration", 60.0),
            history_limit=analytics.get("history_limit", 10),
            comparison_limit=analytics.get("comparison_limit", 20),
            max_snapshots=limits.get("max_snapshots", 600),
            seed=server.get("seed"),
        )
