"""Domain model for hardware inventory reconciliation."""

from __future__ import annotations

from .device import Device, DeviceCandidate
from .enums import ComponentKind, ResourceKind, SnapshotPhase
from .snapshot import PROCESSING_MESSAGE, DiscoverySnapshot, InvalidPhaseTransitionError

__all__ = [
    "PROCESSING_MESSAGE",
    "ComponentKind",
    "Device",
    "DeviceCandidate",
    "DiscoverySnapshot",
    "InvalidPhaseTransitionError",
    "ResourceKind",
    "SnapshotPhase",
]
