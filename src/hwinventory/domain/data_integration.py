"""Application services for submitting and reconciling discovery snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from hwinventory.domain.model import DiscoverySnapshot, ResourceKind, SnapshotPhase
from hwinventory.domain.reconciliation import (
    IndexBuildError,
    ReconcileOutcome,
    reconcile_snapshot,
    utc_now,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from hwinventory.domain.ports import (
        DiscoverySource,
        IdentityAllocator,
        ReconciliationUnitOfWork,
    )
    from hwinventory.domain.reconciliation import ReconciliationEngine

log = getLogger(__name__)


def submit_snapshot(
    raw_data: bytes,
    *,
    name: str,
    unit_of_work_factory: Callable[[], ReconciliationUnitOfWork],
    allocator: IdentityAllocator,
    clock: Callable[[], datetime] = utc_now,
) -> DiscoverySnapshot:
    """Store ``raw_data`` as a new pending snapshot without decoding it."""

    now = clock()
    snapshot = DiscoverySnapshot(
        id=allocator.allocate(ResourceKind.DISCOVERY_SNAPSHOT),
        name=name,
        raw_data=bytes(raw_data),
        created_at=now,
        updated_at=now,
    )
    with unit_of_work_factory() as uow:
        uow.repositories.snapshots.add(snapshot)
        uow.commit()
    log.info("Created snapshot %s (UID: %s, %d bytes)", snapshot.name, snapshot.id, len(raw_data))
    return snapshot


def collect_snapshot(
    source: DiscoverySource,
    *,
    name: str,
    unit_of_work_factory: Callable[[], ReconciliationUnitOfWork],
    allocator: IdentityAllocator,
    clock: Callable[[], datetime] = utc_now,
) -> DiscoverySnapshot:
    """Run one discovery and submit its payload."""

    raw_data = source()
    return submit_snapshot(
        raw_data,
        name=name,
        unit_of_work_factory=unit_of_work_factory,
        allocator=allocator,
        clock=clock,
    )


@dataclass(slots=True)
class ReconcilePendingResult:
    outcomes: list[ReconcileOutcome] = field(default_factory=list[ReconcileOutcome])
    retry: list[str] = field(default_factory=list[str])
    failed: list[str] = field(default_factory=list[str])


def reconcile_pending(
    *,
    unit_of_work_factory: Callable[[], ReconciliationUnitOfWork],
    allocator: IdentityAllocator,
    clock: Callable[[], datetime] = utc_now,
    engine: ReconciliationEngine | None = None,
) -> ReconcilePendingResult:
    """Reconcile every snapshot still in ``Pending`` or ``Processing``, oldest first.

    Snapshots whose attempt failed transiently are reported in ``retry``; they stay in
    ``Processing`` and will be picked up by the next call. Any other failure is logged,
    reported in ``failed`` and does not stop the remaining snapshots.
    """

    with unit_of_work_factory() as uow:
        pending = uow.repositories.snapshots.list_by_phase(
            SnapshotPhase.PENDING, SnapshotPhase.PROCESSING
        )
        snapshot_ids = [snapshot.id for snapshot in pending]

    result = ReconcilePendingResult()
    for snapshot_id in snapshot_ids:
        try:
            outcome = reconcile_snapshot(
                snapshot_id,
                unit_of_work_factory=unit_of_work_factory,
                allocator=allocator,
                clock=clock,
                engine=engine,
            )
        except IndexBuildError:
            log.warning("Snapshot %s will be retried on the next run", snapshot_id)
            result.retry.append(snapshot_id)
            continue
        except Exception:
            log.exception("Failed to reconcile snapshot %s", snapshot_id)
            result.failed.append(snapshot_id)
            continue
        result.outcomes.append(outcome)
    return result
