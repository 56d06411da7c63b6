"""Domain port definitions for adapters."""

from __future__ import annotations

from .providers import PropertyValue, SourceProvider
from .sinks import ReportSink, ValueSink

__all__ = [
    "PropertyValue",
    "ReportSink",
    "SourceProvider",
    "ValueSink",
]
