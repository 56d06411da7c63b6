"""Error types raised by the resolution engine and its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .catalog import DEFAULT_KEY_PREFIX, output_key

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .catalog import PropertyKey
    from .sources import SourceKind


class ProjvarError(Exception):
    """Base class for all errors projvar raises on purpose."""


class SourceAccessError(ProjvarError):
    """Raised when an explicitly requested source resource cannot be read."""

    def __init__(self, source: SourceKind, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class SinkWriteError(ProjvarError):
    """Raised when an output sink cannot be created or written."""

    def __init__(self, sink: str, message: str) -> None:
        super().__init__(f"{sink}: {message}")
        self.sink = sink


class MissingRequiredPropertiesError(ProjvarError):
    """Raised in fail-fast mode when required properties ended up without a value."""

    def __init__(self, missing: Iterable[PropertyKey], *, prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self.missing = tuple(missing)
        names = ", ".join(f"{key} ({output_key(key, prefix)})" for key in self.missing)
        super().__init__(f"No value found for required properties: {names}")
