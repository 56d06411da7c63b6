"""Candidate values and the per-run store collecting them.

The store is write-once for a run: candidates are appended in source query
order and never removed. A (property, source) pair is recorded at most once;
later duplicates are ignored so the first observation from a source sticks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .catalog import PropertyKey

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from .sources import SourceKind


log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class Candidate:
    """One value observed for one property by one source."""

    property: PropertyKey
    source: SourceKind
    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError(f"Candidate for {self.property} from {self.source} has no value")


def _new_candidate_index() -> dict[PropertyKey, list[Candidate]]:
    return {key: [] for key in PropertyKey}


@dataclass(slots=True)
class CandidateStore:
    """Collects every candidate of one run, indexed by property."""

    _candidates_by_property: dict[PropertyKey, list[Candidate]] = field(
        default_factory=_new_candidate_index,
        repr=False,
    )

    def record(self, candidate: Candidate) -> bool:
        """Append ``candidate``; return ``False`` if its (property, source) pair is known."""

        recorded = self._candidates_by_property[candidate.property]
        if any(existing.source is candidate.source for existing in recorded):
            log.debug(
                "Ignoring duplicate candidate for %s from %s",
                candidate.property,
                candidate.source,
            )
            return False
        recorded.append(candidate)
        return True

    def record_all(self, candidates: Iterable[Candidate]) -> int:
        return sum(1 for candidate in candidates if self.record(candidate))

    def candidates_for(self, key: PropertyKey) -> tuple[Candidate, ...]:
        return tuple(self._candidates_by_property[key])

    def properties(self) -> tuple[PropertyKey, ...]:
        """Properties with at least one candidate, in catalog order."""

        return tuple(key for key, recorded in self._candidates_by_property.items() if recorded)

    def __iter__(self) -> Iterator[Candidate]:
        for recorded in self._candidates_by_property.values():
            yield from recorded

    def __len__(self) -> int:
        return sum(len(recorded) for recorded in self._candidates_by_property.values())
