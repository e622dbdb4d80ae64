"""Failure taxonomy of a reconciliation attempt."""

from __future__ import annotations

from typing import ClassVar


class ReconciliationError(RuntimeError):
    """Base class for reconciliation failures."""

    retryable: ClassVar[bool] = False


class MalformedPayloadError(ReconciliationError):
    """The snapshot payload cannot be decoded; retrying will never help."""


class IndexBuildError(ReconciliationError):
    """Listing existing devices failed; the whole attempt should be retried."""

    retryable: ClassVar[bool] = True


class IdentityAllocationError(ReconciliationError):
    """No durable identity could be allocated for one new device."""


class SnapshotNotFoundError(LookupError):
    """Raised when reconciling a snapshot id the repository does not know."""
