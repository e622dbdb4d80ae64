from __future__ import annotations

from typing import TYPE_CHECKING

from hwinventory import app
from hwinventory.adapters.sqlalchemy import SqlAlchemyReconciliationUnitOfWork
from hwinventory.domain.model import SnapshotPhase
from tests.helpers.inventory import make_payload, make_record

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

PAYLOAD = make_payload(
    make_record("/Systems/1", "SYS-1", device_type="Node"),
    make_record("/Systems/1/Memory/DIMM0", "", "SYS-1", device_type="DIMM"),
)


def test_submit_file_then_reconcile(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReconciliationUnitOfWork], tmp_path: Path
) -> None:
    snapshot_file = tmp_path / "bmc-1.json"
    snapshot_file.write_bytes(PAYLOAD)

    snapshot = app.submit_snapshot_file(snapshot_file)
    outcome = app.reconcile(snapshot.id)

    assert snapshot.name == "bmc-1"
    assert snapshot.id.startswith("dis-")
    assert outcome.phase is SnapshotPhase.COMPLETED
    assert outcome.processed == 2
    assert outcome.links_updated == 1
    with sqlite_unit_of_work() as uow:
        devices = {device.uri: device for device in uow.repositories.devices.list_devices()}
    assert devices["/Systems/1/Memory/DIMM0"].parent_id == devices["/Systems/1"].id
    assert devices["/Systems/1"].id.startswith("dev-")


def test_collect_uses_given_source_and_names_snapshot(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReconciliationUnitOfWork],
) -> None:
    snapshot = app.collect_snapshot("bmc-7.lab", source=lambda: PAYLOAD)

    assert snapshot.name.startswith("snapshot-bmc-7.lab-")
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.snapshots.get(snapshot.id)
        assert stored is not None
        assert stored.phase is SnapshotPhase.PENDING


def test_reconcile_pending_drains_open_snapshots(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReconciliationUnitOfWork],
) -> None:
    first = app.submit_snapshot(PAYLOAD, name="first")
    second = app.submit_snapshot(b"[{", name="broken")

    result = app.reconcile_pending()

    phases = {outcome.snapshot_id: outcome.phase for outcome in result.outcomes}
    assert phases == {first.id: SnapshotPhase.COMPLETED, second.id: SnapshotPhase.ERROR}
    assert result.retry == []
    assert app.reconcile_pending().outcomes == []
