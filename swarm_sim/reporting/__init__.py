"""CSV export and display formatting."""

from .export import (
    PEER_CSV_FIELDS,
    export_metrics_csv,
    export_peer_rows_csv,
    export_peers_csv,
    write_csv,
)
from .format import format_kilobytes, format_speed, peer_status

__all__ = [
    "PEER_CSV_FIELDS",
    "export_metrics_csv",
    "export_peer_rows_csv",
    "export_peers_csv",
    "format_kilobytes",
    "format_speed",
    "peer_status",
    "write_csv",
]
