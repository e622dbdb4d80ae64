from __future__ import annotations

from datetime import timedelta

import pytest

from hwinventory.domain.model import (
    PROCESSING_MESSAGE,
    InvalidPhaseTransitionError,
    SnapshotPhase,
)
from tests.helpers.inventory import BASE_TIME, make_snapshot

LATER = BASE_TIME + timedelta(minutes=5)


def test_snapshot_moves_through_processing_to_completed() -> None:
    snapshot = make_snapshot(b"[]")

    snapshot.start_processing(now=BASE_TIME)
    assert snapshot.phase is SnapshotPhase.PROCESSING
    assert snapshot.message == PROCESSING_MESSAGE
    assert not snapshot.ready

    snapshot.complete("all good", now=LATER)
    assert snapshot.phase is SnapshotPhase.COMPLETED
    assert snapshot.message == "all good"
    assert snapshot.updated_at == LATER
    assert snapshot.ready


def test_processing_can_restart_after_interrupted_attempt() -> None:
    snapshot = make_snapshot(b"[]", phase=SnapshotPhase.PROCESSING)

    snapshot.start_processing(now=LATER)

    assert snapshot.phase is SnapshotPhase.PROCESSING


def test_pending_snapshot_cannot_skip_processing() -> None:
    snapshot = make_snapshot(b"[]")

    with pytest.raises(InvalidPhaseTransitionError):
        snapshot.complete("too early", now=LATER)

    assert snapshot.phase is SnapshotPhase.PENDING


@pytest.mark.parametrize("phase", [SnapshotPhase.COMPLETED, SnapshotPhase.ERROR])
def test_terminal_phases_never_move(phase: SnapshotPhase) -> None:
    snapshot = make_snapshot(b"[]", phase=phase)

    assert phase.is_terminal
    with pytest.raises(InvalidPhaseTransitionError):
        snapshot.start_processing(now=LATER)
    with pytest.raises(InvalidPhaseTransitionError):
        snapshot.fail("again", now=LATER)


@pytest.mark.parametrize("phase", [SnapshotPhase.PENDING, SnapshotPhase.PROCESSING])
def test_non_terminal_phases(phase: SnapshotPhase) -> None:
    assert not phase.is_terminal
