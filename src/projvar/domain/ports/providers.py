"""Port for read-only property sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from projvar.domain.catalog import PropertyKey
    from projvar.domain.sources import SourceKind

PropertyValue: TypeAlias = "tuple[PropertyKey, str]"


@runtime_checkable
class SourceProvider(Protocol):
    """Uniform retrieval contract implemented by every source.

    ``retrieve`` returns the ``(property, value)`` pairs the source could
    determine. Unknown values are left out, never raised. Implementations may
    ignore ``wanted`` and return more than asked for.
    """

    @property
    def kind(self) -> SourceKind: ...

    def retrieve(self, wanted: frozenset[PropertyKey]) -> Iterable[PropertyValue]: ...
