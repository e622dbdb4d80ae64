"""Shared fixtures for Redfish adapter tests."""

from __future__ import annotations

import pytest

from hwinventory.config import RedfishConfig, ResilienceConfig
from tests.helpers.redfish import BASE_URL, BMC_HOST


@pytest.fixture
def redfish_config() -> RedfishConfig:
    return RedfishConfig(
        host=BMC_HOST,
        username="admin",
        password="secret",
        verify_tls=False,
        resilience=ResilienceConfig(name="redfish-test", base_url=BASE_URL, verify_tls=False),
    )
