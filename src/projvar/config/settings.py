"""Run settings, as resolved from the command line."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Final

from projvar.common.logging import Verbosity
from projvar.domain.catalog import DEFAULT_KEY_PREFIX, PropertyKey, key_from_name_or_output_key
from projvar.domain.engine import RunOptions
from projvar.domain.policy import OverwritePolicy
from projvar.domain.requirements import (
    RequirementSelection,
    compute_requirement_set,
    explicitly_required_keys,
)
from projvar.domain.sources import DEFAULT_MAIN_SOURCES, SourceKind

from .errors import ConfigurationError, UnknownPropertyError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from projvar.domain.requirements import RequirementSet

DEFAULT_PROJECT_ROOT: Final[Path] = Path()
DEFAULT_FILE_OUT: Final[Path] = Path(".projvars.env.txt")
DEFAULT_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
STDIN_MARKER: Final[str] = "-"


class HostingType(StrEnum):
    """Repository hosting software, which decides how derived URLs look."""

    GITHUB = "GitHub"
    GITLAB = "GitLab"
    BITBUCKET = "BitBucket"
    UNKNOWN = "Unknown"


@dataclass(frozen=True, slots=True)
class ReportTarget:
    """Where a markdown report goes; ``path=None`` means the log."""

    path: Path | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Settings:
    project_root: Path = DEFAULT_PROJECT_ROOT
    project_root_explicit: bool = False
    variables: tuple[tuple[str, str], ...] = ()
    variables_files: tuple[str, ...] = ()
    env_in: bool = True
    env_out: bool = False
    file_out: tuple[Path, ...] = (DEFAULT_FILE_OUT,)
    hosting_type: HostingType = HostingType.UNKNOWN
    requirements: RequirementSelection = field(default_factory=RequirementSelection)
    fail_fast: bool = False
    only_required: bool = False
    key_prefix: str = DEFAULT_KEY_PREFIX
    dry: bool = False
    overwrite: OverwritePolicy = OverwritePolicy.ALL
    main_sources: frozenset[SourceKind] = DEFAULT_MAIN_SOURCES
    date_format: str = DEFAULT_DATE_FORMAT
    show_all_retrieved: ReportTarget | None = None
    show_primary_retrieved: ReportTarget | None = None
    verbosity: Verbosity = Verbosity.INFO

    def required_keys(self) -> RequirementSet:
        return compute_requirement_set(self.requirements)

    def explicitly_required_keys(self) -> RequirementSet:
        return explicitly_required_keys(self.requirements)

    def run_options(self) -> RunOptions:
        return RunOptions(
            required=self.required_keys(),
            fail_fast=self.fail_fast,
            only_required=self.only_required,
            overwrite=self.overwrite,
            key_prefix=self.key_prefix,
            main_sources=self.main_sources,
        )


def parse_key_value(pair: str) -> tuple[str, str]:
    """Split ``KEY=VALUE`` at the first ``=``; the key must not be blank."""

    key, separator, value = pair.partition("=")
    key = key.strip()
    if not separator or not key:
        raise ConfigurationError(f"Not a valid KEY=VALUE pair: '{pair}'")
    return key, value


def parse_property_keys(names: Iterable[str], *, prefix: str) -> frozenset[PropertyKey]:
    keys: set[PropertyKey] = set()
    for name in names:
        try:
            keys.add(key_from_name_or_output_key(name, prefix))
        except KeyError as exc:
            raise UnknownPropertyError(name) from exc
    return frozenset(keys)


def build_requirement_selection(
    *,
    require_all: bool,
    require_none: bool,
    require: Iterable[str],
    require_not: Iterable[str],
    prefix: str,
) -> RequirementSelection:
    try:
        return RequirementSelection(
            require_all=require_all,
            require_none=require_none,
            require=parse_property_keys(require, prefix=prefix),
            require_not=parse_property_keys(require_not, prefix=prefix),
        )
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
