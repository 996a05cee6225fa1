"""FastAPI backend for the swarm dashboard."""

from __future__ import annotations

import asyncio
import contextlib
import json
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from swarm_sim.config import SimulationConfig, config_from_dict
from swarm_sim.service.analytics import (
    performance_comparison,
    research_summary,
    simulation_history,
)
from swarm_sim.service.engine import RunNotFoundError, SimulationService

if TYPE_CHECKING:
    from swarm_sim.core.types import RunId
    from swarm_sim.metrics.results import MetricsSnapshot
    from swarm_sim.service.config import ServiceConfig

_background_tasks: set[asyncio.Task[None]] = set()


class SimulationConfigModel(BaseModel):
    """Simulation config body; accepts the dashboard's camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    peer_count: int = 50
    file_size: int = 1000
    network_condition: str = "moderate"
    use_anate: bool = Field(default=True, alias="useANATE")
    simulation_speed: float = 1.0
    seed: int | None = None

    def to_config(self) -> SimulationConfig:
        return config_from_dict(self.model_dump())


class StartRequest(BaseModel):
    config: SimulationConfigModel = Field(default_factory=SimulationConfigModel)
    name: str | None = None
    autoplay: bool = False
    duration: float | None = None  # autoplay budget, simulated seconds


class StartResponse(BaseModel):
    success: bool = True
    run_id: str
    status: str


class UpdateRequest(BaseModel):
    ticks: int = Field(default=1, ge=1, le=10_000)


class UpdateResponse(BaseModel):
    run_id: str
    ticks: int
    is_running: bool
    metrics: dict[str, float]
    network_stats: dict[str, float]


class ConnectionManager:
    def __init__(self) -> None:
        self.active_connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        # Registered before the handshake completes so no tick is missed
        self.active_connections.append(websocket)
        await websocket.accept()

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, message: str) -> None:
        for connection in list(self.active_connections):
            with contextlib.suppress(Exception):
                await connection.send_text(message)


def create_app(service: SimulationService) -> FastAPI:
    app = FastAPI(title="Swarm Simulation API")
    manager = ConnectionManager()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(service.config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def on_snapshot(run_id: RunId, snapshot: MetricsSnapshot) -> None:
        if not manager.active_connections:
            return
        message = json.dumps({
            "type": "tick",
            "run_id": run_id,
            "tick": snapshot.tick,
            "timestamp": snapshot.timestamp,
            "metrics": snapshot.metrics.to_dict(),
        })
        task = asyncio.get_running_loop().create_task(manager.broadcast(message))
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

    service.add_listener(on_snapshot)

    @app.exception_handler(RunNotFoundError)
    async def run_not_found(request: Request, exc: RunNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(ValueError)
    async def invalid_request(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.post("/api/simulation/start")
    async def start_simulation(body: StartRequest) -> StartResponse:
        record = service.start(body.config.to_config(), name=body.name)
        if body.autoplay:
            service.start_autoplay(record.run_id, body.duration)
        return StartResponse(run_id=record.run_id, status="started")

    @app.post("/api/simulation/{run_id}/update")
    async def update_simulation(run_id: str, body: UpdateRequest | None = None) -> UpdateResponse:
        ticks = body.ticks if body is not None else 1
        metrics = service.update(run_id, ticks)
        session = service.session(run_id)
        return UpdateResponse(
            run_id=run_id,
            ticks=session.simulator.ticks,
            is_running=session.simulator.is_running,
            metrics=metrics.to_dict(),
            network_stats=session.simulator.get_network_stats().to_dict(),
        )

    @app.get("/api/simulation/{run_id}/status")
    async def get_simulation_status(run_id: str) -> dict[str, Any]:
        return service.status(run_id)

    @app.delete("/api/simulation/{run_id}/stop")
    async def stop_simulation(run_id: str) -> dict[str, Any]:
        record = service.stop(run_id)
        return {"success": True, "run": record.to_dict()}

    @app.post("/api/simulation/{run_id}/peers")
    async def add_peer(run_id: str) -> dict[str, Any]:
        return service.add_peer(run_id).to_record()

    @app.delete("/api/simulation/{run_id}/peers")
    async def remove_peer(run_id: str) -> dict[str, Any]:
        peer = service.remove_peer(run_id)
        return {"removed": peer.id if peer is not None else None}

    @app.get("/api/simulation/{run_id}/export.csv")
    async def export_peers(run_id: str) -> PlainTextResponse:
        return PlainTextResponse(
            service.export_csv(run_id),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{run_id}-peers.csv"'},
        )

    @app.get("/api/runs")
    async def get_runs(limit: int = 100) -> list[dict[str, Any]]:
        return [run.to_dict() for run in service.store.list_runs(limit=limit)]

    @app.get("/api/analytics/performance-comparison")
    async def get_performance_comparison(limit: int | None = None) -> dict[str, Any]:
        return performance_comparison(service.store, limit or service.config.comparison_limit)

    @app.get("/api/analytics/simulation-history")
    async def get_simulation_history(limit: int | None = None) -> list[dict[str, Any]]:
        return simulation_history(service.store, limit or service.config.history_limit)

    @app.get("/api/analytics/research-summary")
    async def get_research_summary() -> dict[str, Any]:
        return research_summary()

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await manager.connect(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            manager.disconnect(websocket)

    return app


def build_service(config: ServiceConfig) -> SimulationService:
    from swarm_sim.storage.memory import MemoryRunStore
    from swarm_sim.storage.ndjson import NdjsonRunStore

    store = NdjsonRunStore(config.output_dir) if config.output_dir else MemoryRunStore()
    return SimulationService(store, config)


def run_server(config: ServiceConfig) -> None:
    import uvicorn

    app = create_app(build_service(config))
    print(f"Starting swarm simulation server at http://{config.host}:{config.port}")
    if config.output_dir:
        print(f"Storing runs in: {config.output_dir}")
    uvicorn.run(app, host=config.host, port=config.port)
