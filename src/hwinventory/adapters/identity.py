"""Identity allocation for durable records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final
from uuid import uuid4

from hwinventory.domain.model import ResourceKind

DEFAULT_PREFIXES: Final[Mapping[ResourceKind, str]] = MappingProxyType(
    {
        ResourceKind.DEVICE: "dev",
        ResourceKind.DISCOVERY_SNAPSHOT: "dis",
    }
)


@dataclass(slots=True)
class PrefixedIdentityAllocator:
    """Allocate ``<prefix>-<uuid4 hex>`` identities, e.g. ``dev-8c1f...``."""

    prefixes: Mapping[ResourceKind, str] = field(default_factory=lambda: dict(DEFAULT_PREFIXES))

    def allocate(self, kind: ResourceKind) -> str:
        prefix = self.prefixes.get(kind)
        if prefix is None:
            raise KeyError(f"No identity prefix registered for {kind}")
        return f"{prefix}-{uuid4().hex}"


if TYPE_CHECKING:
    from hwinventory.domain.ports import IdentityAllocator

    _allocator_check: IdentityAllocator = PrefixedIdentityAllocator()
