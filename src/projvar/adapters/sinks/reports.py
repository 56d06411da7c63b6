"""Markdown reports about what the sources produced."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from projvar.domain.catalog import DEFAULT_KEY_PREFIX, iter_definitions
from projvar.domain.errors import SinkWriteError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from projvar.domain.candidates import CandidateStore
    from projvar.domain.catalog import PropertyKey
    from projvar.domain.resolve import ResolvedProperty


log = getLogger(__name__)


def _escape_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def render_all_retrieved(store: CandidateStore) -> str:
    """Table of every candidate, grouped by property in catalog order."""

    lines = ["| Property | Source | Value |", "| --- | --- | --- |"]
    for definition in iter_definitions():
        for candidate in store.candidates_for(definition.key):
            lines.append(
                f"| {definition.key} | {candidate.source} | {_escape_cell(candidate.value)} |"
            )
    return "\n".join(lines) + "\n"


def render_primary_retrieved(
    resolved: Mapping[PropertyKey, ResolvedProperty],
    prefix: str = DEFAULT_KEY_PREFIX,
) -> str:
    """List of every resolved value with its output key and winning source."""

    lines: list[str] = []
    for definition in iter_definitions():
        prop = resolved.get(definition.key)
        if prop is None or not prop.is_resolved:
            continue
        lines.append(
            f"- {definition.key} (`{definition.output_key(prefix)}`): "
            f"`{prop.value}` from {prop.source}"
        )
    return "\n".join(lines) + "\n"


def _emit(title: str, content: str, path: Path | None) -> None:
    if path is None:
        log.info("%s:\n\n%s", title, content)
        return
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"# {title}\n\n{content}", encoding="utf-8")
    except OSError as exc:
        raise SinkWriteError(f"report '{path}'", str(exc)) from exc


@dataclass(frozen=True, slots=True)
class AllRetrievedReport:
    path: Path | None = None

    @property
    def name(self) -> str:
        return "all-retrieved report"

    def report(
        self,
        store: CandidateStore,
        resolved: Mapping[PropertyKey, ResolvedProperty],
    ) -> None:
        del resolved
        _emit("All retrieved values", render_all_retrieved(store), self.path)


@dataclass(frozen=True, slots=True)
class PrimaryRetrievedReport:
    path: Path | None = None
    prefix: str = DEFAULT_KEY_PREFIX

    @property
    def name(self) -> str:
        return "primary-retrieved report"

    def report(
        self,
        store: CandidateStore,
        resolved: Mapping[PropertyKey, ResolvedProperty],
    ) -> None:
        del store
        _emit("Primary values", render_primary_retrieved(resolved, self.prefix), self.path)
