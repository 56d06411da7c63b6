"""Values already present in the process environment."""

from __future__ import annotations

import os
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
class EnvironmentProvider:
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)
    prefix: str = DEFAULT_KEY_PREFIX

    @property
    def kind(self) -> SourceKind:
        return SourceKind.ENVIRONMENT

    def retrieve(self, wanted: frozenset[PropertyKey]) -> Iterable[PropertyValue]:
        return list(retrieve_prefixed(self.environ, wanted, self.prefix))
