"""Decode raw snapshot payloads into device candidates."""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import Any, cast

from pydantic import (
    BaseModel,
    ConfigDict,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from hwinventory.domain.model import DeviceCandidate

from .errors import MalformedPayloadError

log = getLogger(__name__)

URI_FIELD = "redfish_uri"


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class DevicePayload(BaseModel):
    """One record of a snapshot payload.

    The three identity fields are typed; every other key is kept verbatim as the
    device's attribute bag.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    redfish_uri: str | None = None
    serial_number: str | None = None
    parent_serial_number: str | None = None

    _normalize_keys = field_validator(
        "redfish_uri", "serial_number", "parent_serial_number", mode="before"
    )(_blank_to_none)

    @model_validator(mode="before")
    @classmethod
    def _lift_uri_from_properties(cls, value: object) -> object:
        # Older collectors only carried the URI inside ``properties``.
        if not isinstance(value, Mapping):
            return value
        mapping_value = cast(Mapping[str, object], value)
        existing = mapping_value.get(URI_FIELD)
        if existing is not None and _blank_to_none(existing) is not None:
            return mapping_value
        properties = mapping_value.get("properties")
        if not isinstance(properties, Mapping):
            return mapping_value
        nested = cast(Mapping[str, object], properties).get(URI_FIELD)
        if not isinstance(nested, str):
            return mapping_value
        data: dict[str, object] = dict(mapping_value)
        data[URI_FIELD] = nested
        return data

    def to_candidate(self) -> DeviceCandidate:
        attributes: dict[str, Any] = dict(self.model_extra or {})
        return DeviceCandidate(
            uri=self.redfish_uri,
            serial_number=self.serial_number,
            parent_serial_number=self.parent_serial_number,
            attributes=attributes,
        )


_PAYLOAD_ADAPTER = TypeAdapter(list[DevicePayload])


def parse_snapshot_payload(raw: bytes | str) -> list[DeviceCandidate]:
    """Return the candidates of ``raw`` in payload order.

    Raises ``MalformedPayloadError`` when ``raw`` is not a JSON array of objects with
    string-typed identity fields.
    """

    try:
        records = _PAYLOAD_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise MalformedPayloadError(_summarize(exc)) from exc

    candidates = [record.to_candidate() for record in records]
    log.debug("Decoded %d device candidates", len(candidates))
    return candidates


def _summarize(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid payload")
    more = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{location}: {message}{more}" if location else f"{message}{more}"
