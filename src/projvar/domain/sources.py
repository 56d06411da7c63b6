"""Source kinds and their priority tiers."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class SourceKind(StrEnum):
    """Closed set of sources, declared from strongest to weakest."""

    EXPLICIT = "explicit"
    VARIABLES_FILE = "variables-file"
    ENVIRONMENT = "environment"
    VERSION_CONTROL = "version-control"
    CI_PLATFORM = "ci-platform"
    COMPUTED = "computed"

    @property
    def tier(self) -> int:
        """Priority tier; lower wins."""

        return _TIERS[self]


class SourceClass(StrEnum):
    """Coarse grouping of source kinds, used only by the overwrite policy."""

    MAIN = "main"
    ALTERNATIVE = "alternative"


_TIERS: Final[dict[SourceKind, int]] = {kind: index for index, kind in enumerate(SourceKind)}

DEFAULT_MAIN_SOURCES: Final[frozenset[SourceKind]] = frozenset(
    {SourceKind.EXPLICIT, SourceKind.VARIABLES_FILE}
)


def source_class(
    kind: SourceKind,
    *,
    main_sources: frozenset[SourceKind] = DEFAULT_MAIN_SOURCES,
) -> SourceClass:
    return SourceClass.MAIN if kind in main_sources else SourceClass.ALTERNATIVE


def by_priority(kinds: frozenset[SourceKind] | set[SourceKind]) -> tuple[SourceKind, ...]:
    return tuple(sorted(kinds, key=lambda kind: kind.tier))
