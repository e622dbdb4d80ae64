"""SQLAlchemy adapter package."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    device_table,
    discovery_snapshot_table,
    mapper_registry,
    start_mappers,
)
from .repositories import SqlAlchemyDeviceStore, SqlAlchemySnapshotRepository
from .unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyDeviceStore",
    "SqlAlchemyReconciliationUnitOfWork",
    "SqlAlchemySnapshotRepository",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "device_table",
    "discovery_snapshot_table",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
