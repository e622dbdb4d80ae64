"""Pass 1: upsert every candidate by its Redfish URI."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from hwinventory.domain.model import Device, ResourceKind

from .errors import IdentityAllocationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from hwinventory.domain.model import DeviceCandidate
    from hwinventory.domain.ports import DeviceStore, IdentityAllocator

    from .index import IdentityIndex

log = getLogger(__name__)


@dataclass(slots=True)
class MergeResult:
    """Outcome of Pass 1.

    ``touched`` maps URI to every device created or updated by this run, in the order
    first seen; it is the only input of parent linking.
    """

    touched: dict[str, Device] = field(default_factory=dict[str, Device])
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def processed(self) -> int:
        return self.created + self.updated


def merge_candidates(
    candidates: Iterable[DeviceCandidate],
    *,
    index: IdentityIndex,
    store: DeviceStore,
    allocator: IdentityAllocator,
    clock: Callable[[], datetime],
    label: str = "snapshot",
) -> MergeResult:
    """Create or update one device per candidate, in input order.

    Store and allocation failures only cost the affected candidate.
    """

    result = MergeResult()
    for candidate in candidates:
        uri = candidate.uri
        if not uri:
            log.error("Reconciling %s (Pass 1): Skipping device, missing redfish_uri", label)
            result.skipped += 1
            continue

        existing = index.by_uri.get(uri)
        if existing is None:
            device = _create(
                candidate, uri=uri, store=store, allocator=allocator, clock=clock, label=label
            )
            if device is None:
                result.failed += 1
                continue
            index.register(device)
            result.created += 1
        else:
            previous_serial = existing.serial_number
            if not _update(existing, candidate, store=store, clock=clock, label=label):
                result.failed += 1
                continue
            index.register(existing, previous_serial=previous_serial)
            device = existing
            result.updated += 1

        result.touched[uri] = device

    log.info(
        "Reconciling %s (Pass 1): created=%d updated=%d skipped=%d failed=%d",
        label,
        result.created,
        result.updated,
        result.skipped,
        result.failed,
    )
    return result


def _create(
    candidate: DeviceCandidate,
    *,
    uri: str,
    store: DeviceStore,
    allocator: IdentityAllocator,
    clock: Callable[[], datetime],
    label: str,
) -> Device | None:
    log.info("Reconciling %s (Pass 1): Creating new device: %s", label, uri)
    try:
        device_id = _allocate(allocator)
    except IdentityAllocationError:
        log.exception("Reconciling %s (Pass 1): Failed to allocate id for %s", label, uri)
        return None

    device = Device.from_candidate(candidate, id=device_id, now=clock())
    try:
        store.create(device)
    except Exception:
        log.exception("Reconciling %s (Pass 1): Failed to create device %s", label, uri)
        return None
    return device


def _allocate(allocator: IdentityAllocator) -> str:
    try:
        device_id = allocator.allocate(ResourceKind.DEVICE)
    except Exception as exc:
        raise IdentityAllocationError(f"Identity allocation failed: {exc}") from exc
    if not device_id:
        raise IdentityAllocationError("Identity allocator returned an empty id")
    return device_id


def _update(
    existing: Device,
    candidate: DeviceCandidate,
    *,
    store: DeviceStore,
    clock: Callable[[], datetime],
    label: str,
) -> bool:
    log.info(
        "Reconciling %s (Pass 1): Updating existing device: %s (UID: %s)",
        label,
        existing.uri,
        existing.id,
    )
    previous = (
        existing.serial_number,
        existing.parent_serial_number,
        existing.attributes,
        existing.updated_at,
    )
    existing.refresh_from(candidate, now=clock())
    try:
        store.update(existing)
    except Exception:
        log.exception("Reconciling %s (Pass 1): Failed to update device %s", label, existing.uri)
        (
            existing.serial_number,
            existing.parent_serial_number,
            existing.attributes,
            existing.updated_at,
        ) = previous
        return False
    return True
