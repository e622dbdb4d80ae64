"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    """Kinds of durable records; each owns its own identity namespace."""

    DEVICE = "Device"
    DISCOVERY_SNAPSHOT = "DiscoverySnapshot"


class SnapshotPhase(StrEnum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    ERROR = "Error"

    @property
    def is_terminal(self) -> bool:
        return self in {SnapshotPhase.COMPLETED, SnapshotPhase.ERROR}


class ComponentKind(StrEnum):
    """Physical component kinds produced by discovery."""

    NODE = "Node"
    CPU = "CPU"
    DIMM = "DIMM"
