"""Output sinks."""

from __future__ import annotations

from .env_file import EnvFileSink
from .process_env import ProcessEnvironmentSink
from .reports import AllRetrievedReport, PrimaryRetrievedReport

__all__ = [
    "AllRetrievedReport",
    "EnvFileSink",
    "PrimaryRetrievedReport",
    "ProcessEnvironmentSink",
]
