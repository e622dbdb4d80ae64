from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import inspect, select

from hwinventory.adapters.sqlalchemy.mappings import UTCDateTime
from hwinventory.domain.model import Device
from tests.helpers.inventory import BASE_TIME, make_device

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def test_schema_contains_inventory_tables(sqlite_engine: Engine) -> None:
    tables = set(inspect(sqlite_engine).get_table_names())

    assert {"device", "discovery_snapshot"} <= tables


def test_device_round_trips_attributes_and_utc_timestamps(sqlite_session: Session) -> None:
    device = make_device(
        "dev-1",
        "/Systems/1",
        "S1",
        attributes={"device_type": "Node", "properties": {"redfish_parent_uri": ""}},
    )
    sqlite_session.add(device)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    loaded = sqlite_session.execute(select(Device)).scalar_one()

    assert loaded.attributes == {"device_type": "Node", "properties": {"redfish_parent_uri": ""}}
    assert loaded.created_at == BASE_TIME
    assert loaded.created_at.tzinfo is not None


def test_utc_datetime_assumes_naive_values_are_utc() -> None:
    column_type = UTCDateTime()
    naive = datetime(2025, 1, 1, 12, 0)  # noqa: DTZ001

    bound = column_type.process_bind_param(naive, dialect=None)  # type: ignore[arg-type]

    assert bound == BASE_TIME

