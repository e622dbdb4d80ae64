from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from hwinventory.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from tests.helpers.inventory import make_snapshot

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyReconciliationUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)
    assert is_started()

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_shutdown_resets_state() -> None:
    startup(engine=create_engine("sqlite+pysqlite:///:memory:", future=True), force=True)

    shutdown()

    assert not is_started()
    assert configured_engine() is None


def test_unit_of_work_commits_snapshots(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyReconciliationUnitOfWork() as uow:
        uow.repositories.snapshots.add(make_snapshot(b"[]"))
        uow.commit()

    with SqlAlchemyReconciliationUnitOfWork() as uow:
        assert uow.repositories.snapshots.get("dis-1") is not None


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyReconciliationUnitOfWork() as uow:
        uow.repositories.snapshots.add(make_snapshot(b"[]"))
        raise RuntimeError("boom")

    with SqlAlchemyReconciliationUnitOfWork() as uow:
        assert uow.repositories.snapshots.get("dis-1") is None


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyReconciliationUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
