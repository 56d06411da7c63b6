"""Overwrite policy for values a sink already held before this run.

The decision is made per sink as an explicit step: the sink's existing values
are read first, ``plan_sink_update`` decides per output key, and only then is
the sink written. A key the sink did not hold always receives the resolved
value, whatever the policy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .catalog import output_key
from .sources import DEFAULT_MAIN_SOURCES, SourceClass, SourceKind, source_class

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .catalog import PropertyKey
    from .resolve import ResolvedProperty


class OverwritePolicy(StrEnum):
    ALL = "All"
    NONE = "None"
    MAIN = "Main"
    ALTERNATIVE = "Alternative"


class UpdateAction(StrEnum):
    WRITE = "write"
    OVERWRITE = "overwrite"
    KEEP = "keep"


@dataclass(frozen=True, slots=True, kw_only=True)
class KeyUpdate:
    """Decision for one output key of one sink."""

    output_key: str
    value: str
    source: SourceKind
    action: UpdateAction
    previous: str | None = None

    @property
    def applies(self) -> bool:
        return self.action is not UpdateAction.KEEP


@dataclass(frozen=True, slots=True)
class SinkUpdatePlan:
    """Ordered decisions for one sink."""

    updates: tuple[KeyUpdate, ...] = field(default_factory=tuple)

    def to_apply(self) -> dict[str, str]:
        return {update.output_key: update.value for update in self.updates if update.applies}

    def kept(self) -> tuple[KeyUpdate, ...]:
        return tuple(update for update in self.updates if not update.applies)


def may_overwrite(
    policy: OverwritePolicy,
    source: SourceKind,
    *,
    main_sources: frozenset[SourceKind] = DEFAULT_MAIN_SOURCES,
) -> bool:
    """Return whether a value from ``source`` may replace a pre-existing sink value."""

    match policy:
        case OverwritePolicy.ALL:
            return True
        case OverwritePolicy.NONE:
            return False
        case OverwritePolicy.MAIN:
            return source_class(source, main_sources=main_sources) is SourceClass.MAIN
        case OverwritePolicy.ALTERNATIVE:
            return source_class(source, main_sources=main_sources) is SourceClass.ALTERNATIVE


def plan_sink_update(
    resolved: Mapping[PropertyKey, ResolvedProperty],
    existing: Mapping[str, str],
    *,
    policy: OverwritePolicy,
    prefix: str,
    main_sources: frozenset[SourceKind] = DEFAULT_MAIN_SOURCES,
) -> SinkUpdatePlan:
    """Decide, for every resolved property, whether the sink receives its value."""

    updates: list[KeyUpdate] = []
    for key, prop in resolved.items():
        if prop.value is None or prop.source is None:
            continue
        target_key = output_key(key, prefix)
        previous = existing.get(target_key)
        if previous is None:
            action = UpdateAction.WRITE
        elif may_overwrite(policy, prop.source, main_sources=main_sources):
            action = UpdateAction.OVERWRITE
        else:
            action = UpdateAction.KEEP
        updates.append(
            KeyUpdate(
                output_key=target_key,
                value=prop.value,
                source=prop.source,
                action=action,
                previous=previous,
            )
        )
    return SinkUpdatePlan(tuple(updates))
