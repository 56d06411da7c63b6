"""Collapse recorded candidates into one resolved value per property.

Responsibilities of this stage:
- order each property's candidates by source priority tier
- pick the first non-empty value as the resolved value
- produce a ``ResolvedProperty`` for every catalog key, with or without value

Out of scope for this stage:
- overwrite decisions against sinks (see ``policy``)
- requirement checks (see ``requirements``)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from .catalog import PropertyKey, output_key

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .candidates import Candidate, CandidateStore
    from .sources import SourceKind


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedProperty:
    """Final outcome for one property after the merge."""

    property: PropertyKey
    value: str | None = None
    source: SourceKind | None = None

    def __post_init__(self) -> None:
        if (self.value is None) != (self.source is None):
            raise ValueError(f"Resolved {self.property} must carry both value and source, or none")

    @property
    def is_resolved(self) -> bool:
        return self.value is not None


ResolvedByProperty: TypeAlias = dict[PropertyKey, ResolvedProperty]


def resolve_candidates(key: PropertyKey, candidates: Iterable[Candidate]) -> ResolvedProperty:
    """Resolve one property from its candidates (first non-empty value by tier wins)."""

    # sorted() is stable, so equal tiers keep insertion order
    for candidate in sorted(candidates, key=lambda candidate: candidate.source.tier):
        if candidate.value:
            return ResolvedProperty(property=key, value=candidate.value, source=candidate.source)
    return ResolvedProperty(property=key)


def resolve_store(store: CandidateStore) -> ResolvedByProperty:
    """Resolve every catalog property from ``store``."""

    return {key: resolve_candidates(key, store.candidates_for(key)) for key in PropertyKey}


def restrict(
    resolved: Mapping[PropertyKey, ResolvedProperty],
    keys: Iterable[PropertyKey],
) -> ResolvedByProperty:
    wanted = frozenset(keys)
    return {key: value for key, value in resolved.items() if key in wanted}


def to_output_values(
    resolved: Mapping[PropertyKey, ResolvedProperty],
    *,
    prefix: str,
) -> dict[str, str]:
    """Map output keys to values, skipping properties without a value."""

    return {
        output_key(key, prefix): prop.value
        for key, prop in resolved.items()
        if prop.value is not None
    }
