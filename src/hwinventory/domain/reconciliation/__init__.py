"""Snapshot reconciliation engine.

Flow of one attempt:
1) decode the snapshot payload into device candidates
2) index the stored devices by Redfish URI and by serial number
3) Pass 1: create or update one device per candidate (matched by URI)
4) Pass 2: link parents of the devices touched in Pass 1 (matched by serial number)
5) record the outcome on the snapshot phase
"""

from __future__ import annotations

from .driver import ReconcileOutcome, reconcile_snapshot, summary_message, utc_now
from .engine import ReconciliationEngine
from .errors import (
    IdentityAllocationError,
    IndexBuildError,
    MalformedPayloadError,
    ReconciliationError,
    SnapshotNotFoundError,
)
from .index import IdentityIndex, build_identity_index
from .link import LinkResult, link_parents
from .merge import MergeResult, merge_candidates
from .parser import DevicePayload, parse_snapshot_payload

__all__ = [
    "DevicePayload",
    "IdentityAllocationError",
    "IdentityIndex",
    "IndexBuildError",
    "LinkResult",
    "MalformedPayloadError",
    "MergeResult",
    "ReconcileOutcome",
    "ReconciliationEngine",
    "ReconciliationError",
    "SnapshotNotFoundError",
    "build_identity_index",
    "link_parents",
    "merge_candidates",
    "parse_snapshot_payload",
    "reconcile_snapshot",
    "summary_message",
    "utc_now",
]
