"""Lookup structures over the devices already in the store."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import IndexBuildError

if TYPE_CHECKING:
    from hwinventory.domain.model import Device
    from hwinventory.domain.ports import DeviceStore

log = getLogger(__name__)


@dataclass(slots=True)
class IdentityIndex:
    """Two independent maps built once per attempt.

    ``by_uri`` decides create vs. update. ``by_serial`` only serves best-effort parent
    resolution, so duplicate serial numbers simply overwrite each other.
    """

    by_uri: dict[str, Device] = field(default_factory=dict[str, "Device"])
    by_serial: dict[str, Device] = field(default_factory=dict[str, "Device"])

    def register(self, device: Device, *, previous_serial: str | None = None) -> None:
        """Index `device`; a serial number it no longer carries stops resolving to it."""

        if (
            previous_serial
            and previous_serial != device.serial_number
            and self.by_serial.get(previous_serial) is device
        ):
            del self.by_serial[previous_serial]
        if device.uri:
            self.by_uri[device.uri] = device
        if device.serial_number:
            self.by_serial[device.serial_number] = device


def build_identity_index(store: DeviceStore) -> IdentityIndex:
    """List every stored device and index it by URI and serial number."""

    try:
        devices = store.list_devices()
    except Exception as exc:
        raise IndexBuildError(f"Failed to list existing devices: {exc}") from exc

    index = IdentityIndex()
    for device in devices:
        if not device.uri:
            log.warning("Device %s has no redfish_uri, skipping from URI index", device.id)
        else:
            index.by_uri[device.uri] = device
        if device.serial_number:
            index.by_serial[device.serial_number] = device

    log.info(
        "Loaded %d devices by URI and %d by serial number",
        len(index.by_uri),
        len(index.by_serial),
    )
    return index
