"""Domain port definitions for adapters."""

from __future__ import annotations

from .discovery import DiscoverySource
from .identity import IdentityAllocator
from .persistence import DeviceStore, DeviceStoreError, SnapshotRepository
from .unit_of_work import (
    ReconciliationRepositories,
    ReconciliationUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "DeviceStore",
    "DeviceStoreError",
    "DiscoverySource",
    "IdentityAllocator",
    "ReconciliationRepositories",
    "ReconciliationUnitOfWork",
    "RepositoryCollection",
    "SnapshotRepository",
    "UnitOfWork",
]
