"""Pydantic models describing the Redfish resources walked during discovery."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

REDFISH_ROOT = "/redfish/v1"


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def strip_root(path: str) -> str:
    """Turn an ``@odata.id`` into a path relative to the service root."""

    return path.removeprefix(REDFISH_ROOT)


class RedfishBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ODataLink(RedfishBaseModel):
    odata_id: str = Field(alias="@odata.id")

    @property
    def path(self) -> str:
        return strip_root(self.odata_id)


class CollectionPayload(RedfishBaseModel):
    members: list[ODataLink] = Field(default_factory=list[ODataLink], alias="Members")


class ComponentPayload(RedfishBaseModel):
    """Fields every inventoried component shares."""

    manufacturer: str | None = Field(default=None, alias="Manufacturer")
    model: str | None = Field(default=None, alias="Model")
    part_number: str | None = Field(default=None, alias="PartNumber")
    serial_number: str | None = Field(default=None, alias="SerialNumber")

    _normalize_strings = field_validator(
        "manufacturer", "model", "part_number", "serial_number", mode="before"
    )(_blank_to_none)

    def extra_properties(self) -> dict[str, Any]:
        return {}


class SystemPayload(ComponentPayload):
    processors: ODataLink | None = Field(default=None, alias="Processors")
    memory: ODataLink | None = Field(default=None, alias="Memory")
    bios_version: str | None = Field(default=None, alias="BiosVersion")

    def extra_properties(self) -> dict[str, Any]:
        return {"bios_version": self.bios_version} if self.bios_version else {}


class ProcessorPayload(ComponentPayload):
    socket: str | None = Field(default=None, alias="Socket")
    total_cores: int | None = Field(default=None, alias="TotalCores")

    def extra_properties(self) -> dict[str, Any]:
        values: dict[str, Any] = {"socket": self.socket, "total_cores": self.total_cores}
        return {key: value for key, value in values.items() if value is not None}


class MemoryPayload(ComponentPayload):
    capacity_mib: int | None = Field(default=None, alias="CapacityMiB")
    device_locator: str | None = Field(default=None, alias="DeviceLocator")

    def extra_properties(self) -> dict[str, Any]:
        values: dict[str, Any] = {
            "capacity_mib": self.capacity_mib,
            "device_locator": self.device_locator,
        }
        return {key: value for key, value in values.items() if value is not None}
