"""Device records and the candidates they are reconciled from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from hwinventory.domain.model.enums import ResourceKind

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class DeviceCandidate:
    """One component record as decoded from a snapshot payload.

    ``uri`` is the strong key used to match stored devices; it may be ``None`` when the
    payload omitted it, in which case the candidate cannot be merged.
    """

    uri: str | None
    serial_number: str | None = None
    parent_serial_number: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])


@dataclass(eq=False, kw_only=True)
class Device:
    """Durable device record.

    ``id`` is assigned once by the identity allocator and never changes. ``parent_id`` is
    only ever written by parent linking.
    """

    KIND: ClassVar[ResourceKind] = ResourceKind.DEVICE

    id: str
    uri: str | None
    serial_number: str | None = None
    parent_serial_number: str | None = None
    parent_id: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_candidate(cls, candidate: DeviceCandidate, *, id: str, now: datetime) -> Device:  # noqa: A002
        return cls(
            id=id,
            uri=candidate.uri,
            serial_number=candidate.serial_number,
            parent_serial_number=candidate.parent_serial_number,
            attributes=dict(candidate.attributes),
            created_at=now,
            updated_at=now,
        )

    def refresh_from(self, candidate: DeviceCandidate, *, now: datetime) -> None:
        """Replace everything the candidate describes; parent linkage is kept as is."""

        self.serial_number = candidate.serial_number
        self.parent_serial_number = candidate.parent_serial_number
        self.attributes = dict(candidate.attributes)
        self.updated_at = now

    def link_to(self, parent: Device, *, now: datetime) -> None:
        if parent.id == self.id:
            raise ValueError(f"Device {self.id} cannot be its own parent")
        self.parent_id = parent.id
        self.updated_at = now

    def __repr__(self) -> str:
        return f"Device(id={self.id!r}, uri={self.uri!r}, serial_number={self.serial_number!r})"
