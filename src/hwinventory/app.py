"""Application orchestration entry points."""

from __future__ import annotations

import time
from collections.abc import Callable
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from hwinventory.adapters.identity import PrefixedIdentityAllocator
from hwinventory.adapters.redfish import RedfishDiscoverySource
from hwinventory.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    is_started,
    startup,
)
from hwinventory.config import get_redfish_config
from hwinventory.domain import data_integration
from hwinventory.domain.ports.unit_of_work import ReconciliationUnitOfWork
from hwinventory.domain.reconciliation import ReconcileOutcome, reconcile_snapshot

if TYPE_CHECKING:
    from hwinventory.domain.model import DiscoverySnapshot
    from hwinventory.domain.ports import DiscoverySource, IdentityAllocator

UnitOfWorkFactory = Callable[[], ReconciliationUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def submit_snapshot(
    raw_data: bytes,
    *,
    name: str,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    allocator: IdentityAllocator | None = None,
) -> DiscoverySnapshot:
    """Store a discovery payload as a pending snapshot."""

    _ensure_started()
    return data_integration.submit_snapshot(
        raw_data,
        name=name,
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyReconciliationUnitOfWork,
        allocator=allocator or PrefixedIdentityAllocator(),
    )


def submit_snapshot_file(
    path: Path,
    *,
    name: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    allocator: IdentityAllocator | None = None,
) -> DiscoverySnapshot:
    """Store the contents of ``path`` as a pending snapshot named after the file."""

    raw_data = Path(path).read_bytes()
    return submit_snapshot(
        raw_data,
        name=name or Path(path).stem,
        unit_of_work_factory=unit_of_work_factory,
        allocator=allocator,
    )


def collect_snapshot(
    host: str | None = None,
    *,
    source: DiscoverySource | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    allocator: IdentityAllocator | None = None,
) -> DiscoverySnapshot:
    """Discover one BMC over Redfish and store the result as a pending snapshot."""

    _ensure_started()
    if source is None:
        config = get_redfish_config(host=host)
        source = RedfishDiscoverySource(config=config)
        host = config.host
    name = f"snapshot-{host or 'unknown'}-{int(time.time())}"
    log.info("Collecting snapshot %s", name)
    return data_integration.collect_snapshot(
        source,
        name=name,
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyReconciliationUnitOfWork,
        allocator=allocator or PrefixedIdentityAllocator(),
    )


def reconcile(
    snapshot_id: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    allocator: IdentityAllocator | None = None,
) -> ReconcileOutcome:
    """Fold one stored snapshot into the device store."""

    _ensure_started()
    outcome = reconcile_snapshot(
        snapshot_id,
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyReconciliationUnitOfWork,
        allocator=allocator or PrefixedIdentityAllocator(),
    )
    log.info("Finished reconciling %s: phase=%s, %s", snapshot_id, outcome.phase, outcome.message)
    return outcome


def reconcile_pending(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    allocator: IdentityAllocator | None = None,
) -> data_integration.ReconcilePendingResult:
    """Reconcile every snapshot that has not reached a terminal phase."""

    _ensure_started()
    result = data_integration.reconcile_pending(
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyReconciliationUnitOfWork,
        allocator=allocator or PrefixedIdentityAllocator(),
    )
    log.info(
        f"Finished reconciling pending snapshots: reconciled={len(result.outcomes)}, "
        f"retry={len(result.retry)}"
    )
    return result
