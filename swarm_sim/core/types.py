"""Core type aliases for the simulation."""

from typing import NewType

# Peer identification - stable "peer-<n>" identifier within one simulator
PeerId = NewType("PeerId", str)

# Run identification - readable slug assigned by the simulation service
RunId = NewType("RunId", str)

type Region = str
