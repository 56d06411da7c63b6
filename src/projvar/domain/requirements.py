"""Required-property selection and coverage checks.

The requirement set is computed once per run from configuration and passed
explicitly to the validator; the catalog itself is never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, TypeAlias

from .catalog import all_keys, default_required_keys, output_key
from .errors import MissingRequiredPropertiesError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .catalog import PropertyKey
    from .resolve import ResolvedProperty


log = getLogger(__name__)

RequirementSet: TypeAlias = "frozenset[PropertyKey]"


@dataclass(frozen=True, slots=True, kw_only=True)
class RequirementSelection:
    """The requirement flags as given on the command line."""

    require_all: bool = False
    require_none: bool = False
    require: frozenset[PropertyKey] = field(default_factory=frozenset["PropertyKey"])
    require_not: frozenset[PropertyKey] = field(default_factory=frozenset["PropertyKey"])

    def __post_init__(self) -> None:
        if self.require_all and self.require_none:
            raise ValueError("Requiring all and no properties at the same time is contradictory")


def compute_requirement_set(selection: RequirementSelection) -> RequirementSet:
    """Build the effective set of required properties.

    ``--all`` starts from every key, ``--none`` from no key, anything else from
    the catalog defaults. Any ``--require`` clears that default base first. Added
    keys are applied before removed ones, so a key named in both ends up optional.
    """

    if selection.require_all:
        required = set(all_keys())
    elif selection.require_none or selection.require:
        required = set()
    else:
        required = set(default_required_keys())
    required |= selection.require
    required -= selection.require_not
    for key in sorted(required):
        log.debug("Registered required property %s", key)
    return frozenset(required)


def explicitly_required_keys(selection: RequirementSelection) -> RequirementSet:
    """Keys the user asked for by name or through ``--all``; catalog defaults are left out."""

    base = all_keys() if selection.require_all else selection.require
    return frozenset(base - selection.require_not)


@dataclass(frozen=True, slots=True)
class RequirementReport:
    """Findings of one validator pass."""

    required: RequirementSet
    missing: tuple[PropertyKey, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.missing


def check_requirements(
    resolved: Mapping[PropertyKey, ResolvedProperty],
    required: RequirementSet,
) -> RequirementReport:
    """Collect every required property that resolved to no value."""

    missing = tuple(
        key
        for key in resolved
        if key in required and not resolved[key].is_resolved
    )
    # keys that were never resolved at all count as missing, too
    missing += tuple(sorted(key for key in required if key not in resolved))
    return RequirementReport(required=required, missing=missing)


def enforce_requirements(
    report: RequirementReport,
    *,
    fail_fast: bool,
    prefix: str,
) -> None:
    """Raise for missing required properties in fail-fast mode, warn otherwise."""

    if report.ok:
        return
    if fail_fast:
        raise MissingRequiredPropertiesError(report.missing, prefix=prefix)
    for key in report.missing:
        log.warning(
            "No value found for required property %s (%s)",
            key,
            output_key(key, prefix),
        )
