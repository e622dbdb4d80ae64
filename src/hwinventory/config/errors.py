"""Errors raised while reading hwinventory settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """A setting is present but unusable."""

    def __init__(self, message: str, *, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting


class MissingConfigurationError(ConfigurationError):
    """One or more required settings are unset or blank."""

    def __init__(self, settings: Iterable[str]) -> None:
        self.settings = tuple(sorted(settings))
        super().__init__(f"Missing configuration for: {', '.join(self.settings)}")
