from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from hwinventory.adapters.redfish import RedfishDiscoveryError, RedfishDiscoverySource
from hwinventory.domain.reconciliation import parse_snapshot_payload
from tests.helpers.redfish import make_client_factory, sample_tree

if TYPE_CHECKING:
    from hwinventory.config import RedfishConfig


def test_discovery_walks_systems_processors_and_memory(redfish_config: RedfishConfig) -> None:
    source = RedfishDiscoverySource(
        config=redfish_config, client_factory=make_client_factory(sample_tree())
    )

    records = json.loads(source())

    assert [record["redfish_uri"] for record in records] == [
        "/Systems/1",
        "/Systems/1/Processors/CPU0",
        "/Systems/1/Processors/CPU1",
        "/Systems/1/Memory/DIMM0",
    ]
    node, cpu0, _, dimm = records
    assert node["device_type"] == "Node"
    assert node["parent_serial_number"] == ""
    assert node["properties"]["bios_version"] == "2.1.0"
    assert cpu0["parent_serial_number"] == "SYS-1"
    assert cpu0["properties"]["redfish_parent_uri"] == "/Systems/1"
    assert dimm["serial_number"] == ""
    assert dimm["part_number"] == "MC-32G"


def test_discovered_payload_decodes_into_candidates(redfish_config: RedfishConfig) -> None:
    source = RedfishDiscoverySource(
        config=redfish_config, client_factory=make_client_factory(sample_tree())
    )

    candidates = parse_snapshot_payload(source())

    assert len(candidates) == 4
    assert {candidate.parent_serial_number for candidate in candidates[1:]} == {"SYS-1"}


def test_failing_member_is_skipped(redfish_config: RedfishConfig) -> None:
    factory = make_client_factory(
        sample_tree(), failing=frozenset({"/Systems/1/Processors/CPU1"})
    )
    source = RedfishDiscoverySource(config=redfish_config, client_factory=factory)

    records = json.loads(source())

    uris = [record["redfish_uri"] for record in records]
    assert "/Systems/1/Processors/CPU1" not in uris
    assert "/Systems/1/Processors/CPU0" in uris


def test_failing_collection_only_drops_its_components(redfish_config: RedfishConfig) -> None:
    factory = make_client_factory(sample_tree(), failing=frozenset({"/Systems/1/Memory"}))
    source = RedfishDiscoverySource(config=redfish_config, client_factory=factory)

    records = json.loads(source())

    assert [record["device_type"] for record in records] == ["Node", "CPU", "CPU"]


def test_unreadable_systems_collection_raises(redfish_config: RedfishConfig) -> None:
    factory = make_client_factory(sample_tree(), failing=frozenset({"/Systems"}))
    source = RedfishDiscoverySource(config=redfish_config, client_factory=factory)

    with pytest.raises(RedfishDiscoveryError):
        source()


def test_empty_discovery_raises(redfish_config: RedfishConfig) -> None:
    source = RedfishDiscoverySource(
        config=redfish_config,
        client_factory=make_client_factory({"/Systems": {"Members": []}}),
    )

    with pytest.raises(RedfishDiscoveryError, match="no devices"):
        source()


def test_system_without_collections_is_still_reported(redfish_config: RedfishConfig) -> None:
    requests: list[str] = []
    tree: dict[str, object] = {
        "/Systems": {"Members": [{"@odata.id": "/redfish/v1/Systems/2"}]},
        "/Systems/2": {"SerialNumber": "SYS-2"},
    }
    source = RedfishDiscoverySource(
        config=redfish_config, client_factory=make_client_factory(tree, requests=requests)
    )

    records = json.loads(source())

    assert [record["redfish_uri"] for record in records] == ["/Systems/2"]
    assert requests == ["/Systems", "/Systems/2"]
