"""Drive one reconciliation attempt through the snapshot phase machine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from hwinventory.domain.model import SnapshotPhase

from .engine import ReconciliationEngine
from .errors import IndexBuildError, MalformedPayloadError, SnapshotNotFoundError
from .link import LinkResult
from .merge import MergeResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from hwinventory.domain.model import DiscoverySnapshot
    from hwinventory.domain.ports import IdentityAllocator, ReconciliationUnitOfWork

log = getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ReconcileOutcome:
    """Phase and summary reported back to whoever scheduled the attempt."""

    snapshot_id: str
    phase: SnapshotPhase
    message: str
    merge: MergeResult
    link: LinkResult

    @property
    def processed(self) -> int:
        return self.merge.processed

    @property
    def links_updated(self) -> int:
        return self.link.links_updated

    @property
    def ready(self) -> bool:
        return self.phase is SnapshotPhase.COMPLETED


def summary_message(merge: MergeResult, link: LinkResult) -> str:
    return (
        f"Snapshot processed. {merge.processed} devices created/updated. "
        f"{link.links_updated} parent links updated."
    )


def reconcile_snapshot(
    snapshot_id: str,
    *,
    unit_of_work_factory: Callable[[], ReconciliationUnitOfWork],
    allocator: IdentityAllocator,
    clock: Callable[[], datetime] = utc_now,
    engine: ReconciliationEngine | None = None,
) -> ReconcileOutcome:
    """Fold one snapshot into the device store.

    Safe to call repeatedly for the same snapshot: terminal snapshots are left alone
    and both passes are idempotent. ``IndexBuildError`` propagates with the snapshot
    left in ``Processing`` so the caller can retry the whole attempt.
    """

    active_engine = engine or ReconciliationEngine()

    with unit_of_work_factory() as uow:
        snapshot = uow.repositories.snapshots.get(snapshot_id)
        if snapshot is None:
            raise SnapshotNotFoundError(f"Unknown discovery snapshot: {snapshot_id}")

        if SnapshotPhase(snapshot.phase).is_terminal:
            log.info("Reconciling %s: Already %s, skipping.", snapshot.name, snapshot.phase)
            return _outcome(snapshot)

        log.info("Reconciling %s: Starting reconciliation", snapshot.name)
        snapshot.start_processing(now=clock())
        uow.commit()

        try:
            candidates = active_engine.decode(snapshot.raw_data)
        except MalformedPayloadError as exc:
            log.error("Reconciling %s: Failed to parse raw data: %s", snapshot.name, exc)  # noqa: TRY400
            snapshot.fail(f"Failed to parse raw data: {exc}", now=clock())
            uow.commit()
            return _outcome(snapshot)

        try:
            merge_result, link_result = active_engine.apply(
                candidates,
                store=uow.repositories.devices,
                allocator=allocator,
                clock=clock,
                label=snapshot.name,
            )
        except IndexBuildError:
            log.exception(
                "Reconciling %s: Could not index existing devices, will retry", snapshot.name
            )
            raise

        snapshot.complete(summary_message(merge_result, link_result), now=clock())
        uow.commit()
        log.info("Reconciling %s: Successfully reconciled", snapshot.name)
        return _outcome(snapshot, merge=merge_result, link=link_result)


def _outcome(
    snapshot: DiscoverySnapshot,
    *,
    merge: MergeResult | None = None,
    link: LinkResult | None = None,
) -> ReconcileOutcome:
    return ReconcileOutcome(
        snapshot_id=snapshot.id,
        phase=SnapshotPhase(snapshot.phase),
        message=snapshot.message,
        merge=merge or MergeResult(),
        link=link or LinkResult(),
    )
