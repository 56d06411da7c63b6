"""Configuration error definitions."""

from __future__ import annotations

from projvar.domain.errors import ProjvarError


class ConfigurationError(ProjvarError):
    """Raised when configuration values are invalid or contradictory."""


class UnknownPropertyError(ConfigurationError):
    """Raised when a property named on the command line is not in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown property '{name}' (see --list for all keys)")
        self.name = name
