"""Pass 2: wire parent links through serial numbers."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from hwinventory.domain.model import Device
    from hwinventory.domain.ports import DeviceStore

    from .index import IdentityIndex

log = getLogger(__name__)


@dataclass(slots=True)
class LinkResult:
    links_updated: int = 0
    unchanged: int = 0
    unresolved: int = 0
    failed: int = 0


def link_parents(
    touched: Iterable[Device],
    *,
    index: IdentityIndex,
    store: DeviceStore,
    clock: Callable[[], datetime],
    label: str = "snapshot",
) -> LinkResult:
    """Point each touched device at the device owning its parent serial number.

    Must only run once every candidate of the snapshot went through Pass 1, otherwise
    a parent listed after its child would not be resolvable.
    """

    log.info("Reconciling %s (Pass 2): Linking parent relationships...", label)
    result = LinkResult()
    for device in touched:
        parent_serial = device.parent_serial_number
        if not parent_serial:
            continue

        parent = index.by_serial.get(parent_serial)
        if parent is None:
            log.error(
                "Reconciling %s (Pass 2): Parent device with serial %s not found for child %s",
                label,
                parent_serial,
                device.uri,
            )
            result.unresolved += 1
            continue
        if parent.id == device.id:
            log.warning(
                "Reconciling %s (Pass 2): Device %s lists its own serial %s as parent",
                label,
                device.uri,
                parent_serial,
            )
            result.unresolved += 1
            continue
        if device.parent_id == parent.id:
            result.unchanged += 1
            continue

        log.info(
            "Reconciling %s (Pass 2): Linking %s (UID: %s) to parent %s (UID: %s)",
            label,
            device.uri,
            device.id,
            parent.uri,
            parent.id,
        )
        previous = (device.parent_id, device.updated_at)
        device.link_to(parent, now=clock())
        try:
            store.update(device)
        except Exception:
            log.exception(
                "Reconciling %s (Pass 2): Failed to update parent link for %s", label, device.uri
            )
            device.parent_id, device.updated_at = previous
            result.failed += 1
            continue
        result.links_updated += 1

    log.info(
        "Reconciling %s (Pass 2): links_updated=%d unchanged=%d unresolved=%d failed=%d",
        label,
        result.links_updated,
        result.unchanged,
        result.unresolved,
        result.failed,
    )
    return result
