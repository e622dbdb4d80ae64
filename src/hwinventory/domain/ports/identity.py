"""Port for allocating durable record identities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from hwinventory.domain.model import ResourceKind


@runtime_checkable
class IdentityAllocator(Protocol):
    """Hands out identities that are unique within a resource kind."""

    def allocate(self, kind: ResourceKind) -> str: ...
