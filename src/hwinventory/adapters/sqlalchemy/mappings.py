"""SQLAlchemy mapping metadata for the inventory domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    LargeBinary,
    String,
    Table,
    Text,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from hwinventory.domain.model import Device, DiscoverySnapshot, SnapshotPhase

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

device_table = Table(
    "device",
    mapper_registry.metadata,
    Column("id", String(64), primary_key=True),
    Column("uri", String, nullable=True, unique=True),
    Column("serial_number", String, nullable=True),
    Column("parent_serial_number", String, nullable=True),
    Column(
        "parent_id",
        String(64),
        ForeignKey("device.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("attributes", JSON, nullable=False, default=dict),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Index("ix_device_serial_number", "serial_number"),
)

discovery_snapshot_table = Table(
    "discovery_snapshot",
    mapper_registry.metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String, nullable=False),
    Column("raw_data", LargeBinary, nullable=False),
    Column("phase", Enum(SnapshotPhase, native_enum=False), nullable=False),
    Column("message", Text, nullable=False, default=""),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Index("ix_discovery_snapshot_phase", "phase"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Device, device_table)
    mapper_registry.map_imperatively(DiscoverySnapshot, discovery_snapshot_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
