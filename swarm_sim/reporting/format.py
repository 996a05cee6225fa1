"""Display formatting for dashboard and CLI output."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from swarm_sim.core.peer import Peer


def format_speed(kbps: float) -> str:
    if kbps > 1000:
        return f"{kbps / 1000:.1f} MB/s"
    return f"{kbps:.0f} KB/s"


def format_kilobytes(kb: float) -> str:
    if kb > 1_000_000:
        return f"{kb / 1_000_000:.1f} GB"
    if kb > 1000:
        return f"{kb / 1000:.1f} MB"
    return f"{kb:.0f} KB"


def peer_status(peer: Peer) -> str:
    return "Seeder" if peer.is_seeder else "Leecher"
