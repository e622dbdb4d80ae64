"""Translate Redfish component payloads into snapshot records.

Each component kind has exactly one decoder, picked by its ``ComponentKind`` tag.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Final

from hwinventory.domain.model import ComponentKind

from .schema import ComponentPayload, MemoryPayload, ProcessorPayload, SystemPayload

type ComponentDecoder = Callable[[object], ComponentPayload]
type SnapshotRecord = dict[str, Any]


def decode_system(payload: object) -> SystemPayload:
    return SystemPayload.model_validate(payload)


def decode_processor(payload: object) -> ProcessorPayload:
    return ProcessorPayload.model_validate(payload)


def decode_memory(payload: object) -> MemoryPayload:
    return MemoryPayload.model_validate(payload)


COMPONENT_DECODERS: Final[Mapping[ComponentKind, ComponentDecoder]] = {
    ComponentKind.NODE: decode_system,
    ComponentKind.CPU: decode_processor,
    ComponentKind.DIMM: decode_memory,
}


def decode_component(kind: ComponentKind, payload: object) -> ComponentPayload:
    return COMPONENT_DECODERS[kind](payload)


def to_snapshot_record(
    component: ComponentPayload,
    *,
    kind: ComponentKind,
    uri: str,
    parent_uri: str | None = None,
    parent_serial_number: str | None = None,
) -> SnapshotRecord:
    """Map one component onto the payload shape the reconciler decodes."""

    properties: dict[str, Any] = {"redfish_parent_uri": parent_uri or ""}
    properties.update(component.extra_properties())
    return {
        "redfish_uri": uri,
        "serial_number": component.serial_number or "",
        "parent_serial_number": parent_serial_number or "",
        "device_type": kind.value,
        "manufacturer": component.manufacturer or "",
        "part_number": component.part_number or component.model or "",
        "properties": properties,
    }


def encode_snapshot_payload(records: Sequence[SnapshotRecord]) -> bytes:
    return json.dumps(list(records), separators=(",", ":"), sort_keys=True).encode("utf-8")
