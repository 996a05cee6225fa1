"""Simulation scenario runners."""

from .comparison import (
    ComparisonResult,
    ModeResult,
    comparison_table,
    improvement,
    run_comparison,
)
from .swarm import run_scenario

__all__ = [
    "ComparisonResult",
    "ModeResult",
    "comparison_table",
    "improvement",
    "run_comparison",
    "run_scenario",
]
