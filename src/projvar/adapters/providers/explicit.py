"""Values given on the command line with ``-D KEY=VALUE``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from projvar.domain.catalog import DEFAULT_KEY_PREFIX
from projvar.domain.sources import SourceKind

from .common import retrieve_prefixed

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from projvar.domain.catalog import PropertyKey
    from projvar.domain.ports import PropertyValue


@dataclass(frozen=True, slots=True)
class ExplicitProvider:
    variables: Mapping[str, str] = field(default_factory=dict["str", "str"])
    prefix: str = DEFAULT_KEY_PREFIX

    @property
    def kind(self) -> SourceKind:
        return SourceKind.EXPLICIT

    def retrieve(self, wanted: frozenset[PropertyKey]) -> Iterable[PropertyValue]:
        return list(retrieve_prefixed(self.variables, wanted, self.prefix))
