"""Ports for output sinks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from projvar.domain.candidates import CandidateStore
    from projvar.domain.catalog import PropertyKey
    from projvar.domain.resolve import ResolvedProperty


@runtime_checkable
class ValueSink(Protocol):
    """Destination for resolved ``KEY=VALUE`` pairs that may already hold values."""

    @property
    def name(self) -> str: ...

    def read_existing(self) -> Mapping[str, str]: ...

    def write(self, values: Mapping[str, str]) -> None: ...


@runtime_checkable
class ReportSink(Protocol):
    """Destination for human readable summaries of a run."""

    @property
    def name(self) -> str: ...

    def report(
        self,
        store: CandidateStore,
        resolved: Mapping[PropertyKey, ResolvedProperty],
    ) -> None: ...
