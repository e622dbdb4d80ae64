"""Redfish BMC connection settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_flag, require_env_vars
from .errors import MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

REDFISH_ROOT_PATH = "/redfish/v1"
REDFISH_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True)
class RedfishConfig:
    """Holds the address and credentials of one BMC."""

    host: str
    username: str
    password: str
    verify_tls: bool
    resilience: ResilienceConfig

    @property
    def base_url(self) -> str:
        return f"https://{self.host}{REDFISH_ROOT_PATH}"


def get_redfish_config(
    *,
    host: str | None = None,
    resilience: ResilienceConfig | None = None,
) -> RedfishConfig:
    resolved_host = (host or os.getenv("REDFISH_HOST") or "").strip()
    if not resolved_host:
        raise MissingConfigurationError(["REDFISH_HOST"])
    values = require_env_vars(("REDFISH_USERNAME", "REDFISH_PASSWORD"))
    # BMCs almost always present self-signed certificates.
    verify_tls = env_flag("REDFISH_VERIFY_TLS", default=False)
    cache = CacheConfig() if env_flag("REDFISH_HTTP_CACHE", default=False) else None
    base_url = f"https://{resolved_host}{REDFISH_ROOT_PATH}"
    return RedfishConfig(
        host=resolved_host,
        username=values["REDFISH_USERNAME"],
        password=values["REDFISH_PASSWORD"],
        verify_tls=verify_tls,
        resilience=resilience
        or ResilienceConfig(
            name="redfish",
            base_url=base_url,
            timeout_seconds=REDFISH_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=8, per_seconds=1.0),
            default_headers={"Accept": "application/json"},
            cache=cache,
            verify_tls=verify_tls,
            basic_auth=(values["REDFISH_USERNAME"], values["REDFISH_PASSWORD"]),
        ),
    )
