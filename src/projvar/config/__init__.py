"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError, UnknownPropertyError
from .settings import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_FILE_OUT,
    DEFAULT_PROJECT_ROOT,
    STDIN_MARKER,
    HostingType,
    ReportTarget,
    Settings,
    build_requirement_selection,
    parse_key_value,
    parse_property_keys,
)

__all__ = [
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_FILE_OUT",
    "DEFAULT_PROJECT_ROOT",
    "STDIN_MARKER",
    "ConfigurationError",
    "HostingType",
    "ReportTarget",
    "Settings",
    "UnknownPropertyError",
    "build_requirement_selection",
    "parse_key_value",
    "parse_property_keys",
]
