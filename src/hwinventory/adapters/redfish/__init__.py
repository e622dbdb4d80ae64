"""Public interface for the Redfish discovery adapter."""

from __future__ import annotations

from .client import RedfishDiscoveryError, RedfishDiscoverySource
from .schema import (
    CollectionPayload,
    ComponentPayload,
    MemoryPayload,
    ProcessorPayload,
    SystemPayload,
)
from .translator import (
    COMPONENT_DECODERS,
    decode_component,
    encode_snapshot_payload,
    to_snapshot_record,
)

__all__ = [
    "COMPONENT_DECODERS",
    "CollectionPayload",
    "ComponentPayload",
    "MemoryPayload",
    "ProcessorPayload",
    "RedfishDiscoveryError",
    "RedfishDiscoverySource",
    "SystemPayload",
    "decode_component",
    "encode_snapshot_payload",
    "to_snapshot_record",
]
