"""Helpers shared by the source providers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from projvar.domain.catalog import iter_definitions

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from projvar.domain.catalog import PropertyKey
    from projvar.domain.ports import PropertyValue


def retrieve_prefixed(
    values: Mapping[str, str],
    wanted: frozenset[PropertyKey],
    prefix: str,
) -> Iterator[PropertyValue]:
    """Yield ``(key, value)`` for every wanted property whose output key is in ``values``."""

    for definition in iter_definitions():
        if definition.key not in wanted:
            continue
        value = values.get(definition.output_key(prefix))
        if value:
            yield definition.key, value


def first_per_property(
    values: Iterable[PropertyValue],
    wanted: frozenset[PropertyKey],
) -> list[PropertyValue]:
    """Keep the first value of every wanted property, in production order."""

    collected: dict[PropertyKey, str] = {}
    for key, value in values:
        if key in wanted and value:
            collected.setdefault(key, value)
    return list(collected.items())
