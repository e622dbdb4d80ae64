"""Stage composition for snapshot reconciliation.

The engine only fixes the order of the stages (parse, index, upsert, link); each stage
is a plain callable so tests and alternative adapters can swap any of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from .index import build_identity_index
from .link import link_parents
from .merge import merge_candidates
from .parser import parse_snapshot_payload

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from hwinventory.domain.model import Device, DeviceCandidate
    from hwinventory.domain.ports import DeviceStore, IdentityAllocator

    from .index import IdentityIndex
    from .link import LinkResult
    from .merge import MergeResult


class ParsePayload(Protocol):
    def __call__(self, raw: bytes) -> list[DeviceCandidate]: ...


class BuildIdentityIndex(Protocol):
    def __call__(self, store: DeviceStore) -> IdentityIndex: ...


class MergeCandidates(Protocol):
    def __call__(
        self,
        candidates: Iterable[DeviceCandidate],
        *,
        index: IdentityIndex,
        store: DeviceStore,
        allocator: IdentityAllocator,
        clock: Callable[[], datetime],
        label: str = ...,
    ) -> MergeResult: ...


class LinkParents(Protocol):
    def __call__(
        self,
        touched: Iterable[Device],
        *,
        index: IdentityIndex,
        store: DeviceStore,
        clock: Callable[[], datetime],
        label: str = ...,
    ) -> LinkResult: ...


@dataclass(slots=True)
class ReconciliationEngine:
    """Run parse, index, Pass 1 and Pass 2 against one device store."""

    parse: ParsePayload = field(default=parse_snapshot_payload)
    build_index: BuildIdentityIndex = field(default=build_identity_index)
    merge: MergeCandidates = field(default=merge_candidates)
    link: LinkParents = field(default=link_parents)

    def decode(self, raw: bytes) -> list[DeviceCandidate]:
        return self.parse(raw)

    def apply(
        self,
        candidates: list[DeviceCandidate],
        *,
        store: DeviceStore,
        allocator: IdentityAllocator,
        clock: Callable[[], datetime],
        label: str,
    ) -> tuple[MergeResult, LinkResult]:
        """Index the store, then run both passes strictly one after the other."""

        index = self.build_index(store)
        merge_result = self.merge(
            candidates,
            index=index,
            store=store,
            allocator=allocator,
            clock=clock,
            label=label,
        )
        link_result = self.link(
            list(merge_result.touched.values()),
            index=index,
            store=store,
            clock=clock,
            label=label,
        )
        return merge_result, link_result
