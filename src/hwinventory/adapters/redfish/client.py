"""Walk a BMC's Redfish tree and produce a snapshot payload."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from hwinventory.adapters.http_resilience import ResilientClient
from hwinventory.config import get_redfish_config
from hwinventory.domain.model import ComponentKind

from .schema import CollectionPayload, SystemPayload
from .translator import (
    SnapshotRecord,
    decode_component,
    decode_system,
    encode_snapshot_payload,
    to_snapshot_record,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from hwinventory.config import RedfishConfig, ResilienceConfig

log = getLogger(__name__)

SYSTEMS_PATH = "/Systems"


class RedfishDiscoveryError(RuntimeError):
    """Raised when discovery cannot produce any usable inventory."""


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class RedfishDiscoverySource:
    """Discovery source for one BMC: Systems, then their Processors and Memory."""

    config: RedfishConfig = field(default_factory=get_redfish_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self) -> bytes:
        records = asyncio.run(self.discover())
        return encode_snapshot_payload(records)

    async def discover(self) -> list[SnapshotRecord]:
        log.info("Starting Redfish discovery on %s", self.config.host)
        records: list[SnapshotRecord] = []
        async with self.client_factory(self.config.resilience) as client:
            try:
                systems = CollectionPayload.model_validate(
                    await self._get_json(client, SYSTEMS_PATH)
                )
            except (httpx.HTTPError, ValidationError, ValueError) as exc:
                raise RedfishDiscoveryError(f"Failed to read Systems collection: {exc}") from exc

            for member in systems.members:
                records.extend(await self._discover_system(client, member.path))

        if not records:
            raise RedfishDiscoveryError("Redfish discovery found no devices")
        log.info("Redfish discovery complete: found %d devices", len(records))
        return records

    async def _discover_system(self, client: ResilientClient, path: str) -> list[SnapshotRecord]:
        try:
            system = decode_system(await self._get_json(client, path))
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            log.warning("Failed to read system %s: %s", path, exc)
            return []

        records = [to_snapshot_record(system, kind=ComponentKind.NODE, uri=path)]
        children: list[tuple[ComponentKind, str]] = []
        if system.processors is not None:
            children.append((ComponentKind.CPU, system.processors.path))
        if system.memory is not None:
            children.append((ComponentKind.DIMM, system.memory.path))

        for kind, collection_path in children:
            records.extend(
                await self._discover_collection(
                    client, collection_path, kind=kind, parent=system, parent_uri=path
                )
            )
        return records

    async def _discover_collection(
        self,
        client: ResilientClient,
        path: str,
        *,
        kind: ComponentKind,
        parent: SystemPayload,
        parent_uri: str,
    ) -> list[SnapshotRecord]:
        try:
            collection = CollectionPayload.model_validate(await self._get_json(client, path))
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            log.warning("Failed to retrieve %s inventory from %s: %s", kind, path, exc)
            return []

        member_paths = [member.path for member in collection.members]
        payloads = await asyncio.gather(
            *(self._get_json(client, member_path) for member_path in member_paths),
            return_exceptions=True,
        )

        records: list[SnapshotRecord] = []
        for member_path, payload in zip(member_paths, payloads, strict=True):
            if isinstance(payload, BaseException):
                if not isinstance(payload, (httpx.HTTPError, ValueError)):
                    raise payload
                log.warning("Failed to get member %s: %s", member_path, payload)
                continue
            try:
                component = decode_component(kind, payload)
            except ValidationError as exc:
                log.warning("Failed to decode component %s: %s", member_path, exc)
                continue
            records.append(
                to_snapshot_record(
                    component,
                    kind=kind,
                    uri=member_path,
                    parent_uri=parent_uri,
                    parent_serial_number=parent.serial_number,
                )
            )
        return records

    async def _get_json(self, client: ResilientClient, path: str) -> object:
        response = await client.get(path)
        response.raise_for_status()
        return response.json()


if TYPE_CHECKING:
    from hwinventory.domain.ports import DiscoverySource

    _source_check: DiscoverySource = RedfishDiscoverySource()
