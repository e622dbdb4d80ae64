"""Ports for persisting device records and snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hwinventory.domain.model import Device, DiscoverySnapshot, SnapshotPhase


class DeviceStoreError(RuntimeError):
    """Raised by store adapters when a single list/create/update call fails."""


@runtime_checkable
class DeviceStore(Protocol):
    """Durable device record store.

    Every call is independently atomic; there are no multi-call transactions and the
    store alone serialises concurrent writes to the same record.
    """

    def list_devices(self) -> Sequence[Device]: ...

    def create(self, device: Device) -> None: ...

    def update(self, device: Device) -> None: ...


@runtime_checkable
class SnapshotRepository(Protocol):
    """Persistence contract for discovery snapshots."""

    def get(self, snapshot_id: str) -> DiscoverySnapshot | None: ...

    def add(self, snapshot: DiscoverySnapshot) -> None: ...

    def list_by_phase(self, *phases: SnapshotPhase) -> Sequence[DiscoverySnapshot]: ...
