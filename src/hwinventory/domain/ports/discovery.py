"""Port for producing raw snapshot payloads."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class DiscoverySource(Protocol):
    """Callable returning one opaque snapshot payload."""

    def __call__(self) -> bytes: ...
