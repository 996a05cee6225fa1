"""Run persistence interface and records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from swarm_sim.core.types import RunId


class RunStatus(StrEnum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RunRecord:
    """One started simulation and its outcome."""

    run_id: RunId
    name: str
    description: str
    config: dict[str, Any]
    status: RunStatus
    start_time: datetime
    end_time: datetime | None = None
    results: dict[str, Any] = field(default_factory=dict)

    @property
    def use_anate(self) -> bool:
        return bool(self.config.get("use_anate"))

    def to_dict(self) -> dict[str, object]:
        return {
            "run_id": self.run_id,
            "name": self.name,
            "description": self.description,
            "config": self.config,
            "status": str(self.status),
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "results": self.results,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunRecord:
        from swarm_sim.core.types import RunId

        end_time = data.get("end_time")
        return cls(
            run_id=RunId(data["run_id"]),
            name=data["name"],
            description=data.get("description", ""),
            config=data.get("config", {}),
            status=RunStatus(data["status"]),
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=datetime.fromisoformat(end_time) if end_time else None,
            results=data.get("results", {}),
        )


@dataclass(frozen=True)
class MetricRecord:
    """One metric value observed for a run."""

    run_id: RunId
    metric_type: str
    value: float
    timestamp: datetime

    def to_dict(self) -> dict[str, object]:
        return {
            "run_id": self.run_id,
            "metric_type": self.metric_type,
            "value": self.value,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetricRecord:
        from swarm_sim.core.types import RunId

        return cls(
            run_id=RunId(data["run_id"]),
            metric_type=data["metric_type"],
            value=float(data["value"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


class RunStore(ABC):
    """Backing store for runs, their peer rows and their metric rows."""

    @abstractmethod
    def create_run(self, record: RunRecord) -> None:
        """Persist a new run. Raises ValueError if the id is taken."""
        ...

    @abstractmethod
    def get_run(self, run_id: RunId) -> RunRecord | None: ...

    @abstractmethod
    def update_run(self, record: RunRecord) -> None: ...

    @abstractmethod
    def list_runs(
        self, limit: int | None = None, status: RunStatus | None = None
    ) -> list[RunRecord]:
        """Runs newest first, optionally filtered by status."""
        ...

    @abstractmethod
    def save_peers(self, run_id: RunId, rows: list[dict[str, object]]) -> None:
        """Replace the stored peer rows of a run."""
        ...

    @abstractmethod
    def get_peers(self, run_id: RunId) -> list[dict[str, object]]: ...

    @abstractmethod
    def append_metrics(self, records: list[MetricRecord]) -> None: ...

    @abstractmethod
    def get_metrics(self, run_id: RunId) -> list[MetricRecord]: ...


def newest_first(
    records: list[RunRecord], limit: int | None, status: RunStatus | None
) -> list[RunRecord]:
    selected = [r for r in records if status is None or r.status == status]
    selected.sort(key=lambda r: r.start_time, reverse=True)
    return selected if limit is None else selected[:limit]
