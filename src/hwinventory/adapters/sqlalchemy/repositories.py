"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, cast

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError

from hwinventory.adapters.sqlalchemy.mappings import device_table, discovery_snapshot_table
from hwinventory.domain.model import Device, DiscoverySnapshot
from hwinventory.domain.ports import DeviceStoreError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import Session

    from hwinventory.domain.model import SnapshotPhase

log = getLogger(__name__)


class SqlAlchemyDeviceStore:
    """Device store committing every create/update on its own.

    A failed write is rolled back on its own and surfaces as ``DeviceStoreError``;
    earlier writes of the same attempt stay committed.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_devices(self) -> Sequence[Device]:
        stmt = select(Device).order_by(device_table.c.created_at, device_table.c.id)
        try:
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            raise DeviceStoreError(f"Failed to list devices: {exc}") from exc

    def get(self, device_id: str) -> Device | None:
        return self.session.get(Device, device_id)

    def create(self, device: Device) -> None:
        self.session.add(device)
        self._commit(f"create device {device.id}")

    def update(self, device: Device) -> None:
        if device not in self.session:
            device = self.session.merge(device)
        self._commit(f"update device {device.id}", reload=device)

    def _commit(self, action: str, *, reload: Device | None = None) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            if reload is not None:
                self._reload(reload)
            raise DeviceStoreError(f"Failed to {action}: {exc}") from exc

    def _reload(self, device: Device) -> None:
        # After this the device mirrors its committed row again.
        if not inspect(device).persistent:
            return
        try:
            self.session.refresh(device)
        except SQLAlchemyError as exc:
            raise DeviceStoreError(f"Failed to reload device {device.id}: {exc}") from exc


class SqlAlchemySnapshotRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, snapshot_id: str) -> DiscoverySnapshot | None:
        return self.session.get(DiscoverySnapshot, snapshot_id)

    def add(self, snapshot: DiscoverySnapshot) -> None:
        self.session.add(snapshot)

    def list_by_phase(self, *phases: SnapshotPhase) -> Sequence[DiscoverySnapshot]:
        stmt = select(DiscoverySnapshot).order_by(
            discovery_snapshot_table.c.created_at, discovery_snapshot_table.c.id
        )
        if phases:
            stmt = stmt.where(discovery_snapshot_table.c.phase.in_(phases))
        return list(self.session.execute(stmt).scalars().all())


if TYPE_CHECKING:
    from hwinventory.domain.ports import DeviceStore, SnapshotRepository

    _session_stub = cast("Session", object())
    _device_store_check: DeviceStore = SqlAlchemyDeviceStore(_session_stub)
    _snapshot_repo_check: SnapshotRepository = SqlAlchemySnapshotRepository(_session_stub)
