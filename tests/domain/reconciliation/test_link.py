from __future__ import annotations

from hwinventory.domain.reconciliation import build_identity_index, link_parents
from tests.helpers.inventory import BASE_TIME, FakeDeviceStore, FixedClock, make_device


def test_child_is_linked_to_parent_by_serial() -> None:
    store = FakeDeviceStore()
    parent = make_device("dev-1", "/Systems/1", "S1")
    child = make_device("dev-2", "/Systems/1/Memory/DIMM0", None, parent_serial="S1")
    store.seed(parent, child)
    index = build_identity_index(store)

    result = link_parents(
        [index.by_uri["/Systems/1/Memory/DIMM0"]], index=index, store=store, clock=FixedClock()
    )

    assert result.links_updated == 1
    assert store.devices["dev-2"].parent_id == "dev-1"
    assert store.devices["dev-2"].updated_at > BASE_TIME


def test_correct_link_is_not_rewritten() -> None:
    store = FakeDeviceStore()
    store.seed(
        make_device("dev-1", "/Systems/1", "S1"),
        make_device(
            "dev-2", "/Systems/1/Memory/DIMM0", None, parent_serial="S1", parent_id="dev-1"
        ),
    )
    index = build_identity_index(store)

    result = link_parents(
        [index.by_uri["/Systems/1/Memory/DIMM0"]], index=index, store=store, clock=FixedClock()
    )

    assert result.links_updated == 0
    assert result.unchanged == 1
    assert store.writes == []


def test_dangling_parent_serial_leaves_link_alone() -> None:
    store = FakeDeviceStore()
    store.seed(make_device("dev-2", "/Systems/1/Memory/DIMM0", None, parent_serial="MISSING"))
    index = build_identity_index(store)

    result = link_parents(
        [index.by_uri["/Systems/1/Memory/DIMM0"]], index=index, store=store, clock=FixedClock()
    )

    assert result.unresolved == 1
    assert result.links_updated == 0
    assert store.devices["dev-2"].parent_id is None


def test_device_never_becomes_its_own_parent() -> None:
    store = FakeDeviceStore()
    store.seed(make_device("dev-1", "/Systems/1", "S1", parent_serial="S1"))
    index = build_identity_index(store)

    result = link_parents(
        [index.by_uri["/Systems/1"]], index=index, store=store, clock=FixedClock()
    )

    assert result.unresolved == 1
    assert store.devices["dev-1"].parent_id is None


def test_devices_without_parent_serial_are_ignored() -> None:
    store = FakeDeviceStore()
    store.seed(make_device("dev-1", "/Systems/1", "S1", parent_id="dev-0"))
    index = build_identity_index(store)

    result = link_parents(
        [index.by_uri["/Systems/1"]], index=index, store=store, clock=FixedClock()
    )

    assert result == type(result)()
    assert store.devices["dev-1"].parent_id == "dev-0"


def test_failed_link_write_is_reverted_and_counted() -> None:
    store = FakeDeviceStore(fail_update_for={"/Systems/1/Memory/DIMM0"})
    store.seed(
        make_device("dev-1", "/Systems/1", "S1"),
        make_device("dev-2", "/Systems/1/Memory/DIMM0", None, parent_serial="S1"),
        make_device("dev-3", "/Systems/1/Memory/DIMM1", None, parent_serial="S1"),
    )
    index = build_identity_index(store)
    touched = [index.by_uri["/Systems/1/Memory/DIMM0"], index.by_uri["/Systems/1/Memory/DIMM1"]]

    result = link_parents(touched, index=index, store=store, clock=FixedClock())

    assert result.failed == 1
    assert result.links_updated == 1
    assert touched[0].parent_id is None
    assert touched[0].updated_at == BASE_TIME
    assert store.devices["dev-3"].parent_id == "dev-1"
