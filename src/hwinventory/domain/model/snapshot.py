"""Discovery snapshots and their forward-only processing phase."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from hwinventory.domain.model.enums import ResourceKind, SnapshotPhase

if TYPE_CHECKING:
    from datetime import datetime


class InvalidPhaseTransitionError(ValueError):
    """Raised when a snapshot phase would move backwards or skip Processing."""


_ALLOWED_TRANSITIONS: dict[SnapshotPhase, frozenset[SnapshotPhase]] = {
    SnapshotPhase.PENDING: frozenset({SnapshotPhase.PROCESSING}),
    SnapshotPhase.PROCESSING: frozenset(
        {SnapshotPhase.PROCESSING, SnapshotPhase.COMPLETED, SnapshotPhase.ERROR}
    ),
    SnapshotPhase.COMPLETED: frozenset(),
    SnapshotPhase.ERROR: frozenset(),
}

PROCESSING_MESSAGE = "Reconciler has started processing the snapshot."


@dataclass(eq=False, kw_only=True)
class DiscoverySnapshot:
    """One discovery batch submitted for reconciliation.

    The raw payload is immutable once submitted; only ``phase`` and ``message`` move.
    """

    KIND: ClassVar[ResourceKind] = ResourceKind.DISCOVERY_SNAPSHOT

    id: str
    name: str
    raw_data: bytes
    phase: SnapshotPhase = SnapshotPhase.PENDING
    message: str = ""
    created_at: datetime
    updated_at: datetime

    @property
    def ready(self) -> bool:
        return self.phase is SnapshotPhase.COMPLETED

    def start_processing(self, *, now: datetime) -> None:
        self._advance(SnapshotPhase.PROCESSING, PROCESSING_MESSAGE, now=now)

    def complete(self, message: str, *, now: datetime) -> None:
        self._advance(SnapshotPhase.COMPLETED, message, now=now)

    def fail(self, message: str, *, now: datetime) -> None:
        self._advance(SnapshotPhase.ERROR, message, now=now)

    def _advance(self, target: SnapshotPhase, message: str, *, now: datetime) -> None:
        current = SnapshotPhase(self.phase)
        if target not in _ALLOWED_TRANSITIONS[current]:
            raise InvalidPhaseTransitionError(
                f"Snapshot {self.name} cannot move from {current} to {target}"
            )
        self.phase = target
        self.message = message
        self.updated_at = now
