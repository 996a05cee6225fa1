"""Pluggable persistence for simulation runs."""

from .base import MetricRecord, RunRecord, RunStatus, RunStore
from .memory import MemoryRunStore
from .ndjson import NdjsonRunStore

__all__ = [
    "MemoryRunStore",
    "MetricRecord",
    "NdjsonRunStore",
    "RunRecord",
    "RunStatus",
    "RunStore",
]
