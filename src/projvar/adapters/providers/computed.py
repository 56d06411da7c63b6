"""Fallback values computed from the host and the project directory.

These are the weakest candidates: the directory name as the project name, a
``VERSION`` file, a REUSE ``LICENSES/`` directory, the current time as build
date and facts about the build machine.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Final

from projvar.adapters.hosting import machine_readable_name
from projvar.config.settings import DEFAULT_DATE_FORMAT, DEFAULT_PROJECT_ROOT
from projvar.domain.catalog import PropertyKey
from projvar.domain.sources import SourceKind

from .common import first_per_property

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from projvar.domain.ports import PropertyValue


GENERIC_DIR_NAMES: Final[frozenset[str]] = frozenset(
    {"src", "target", "build", "master", "main", "develop", "git", "repo", "repos", "scm", "trunk"}
)
_OS_NAMES: Final[dict[str, str]] = {"darwin": "macos"}
_ARCH_NAMES: Final[dict[str, str]] = {"amd64": "x86_64", "arm64": "aarch64"}


def _local_now() -> datetime:
    return datetime.now().astimezone()


def build_os() -> str:
    system = platform.system().lower()
    return _OS_NAMES.get(system, system)


def build_os_family() -> str:
    return "windows" if os.name == "nt" else "unix"


def build_arch() -> str:
    machine = platform.machine().lower()
    return _ARCH_NAMES.get(machine, machine)


def project_name_from_dir(project_root: Path) -> str | None:
    """The project directory's name, unless it is a generic one like ``src``."""

    name = project_root.name
    if not name or name.lower() in GENERIC_DIR_NAMES:
        return None
    return name


def version_from_file(project_root: Path) -> str | None:
    version_file = project_root / "VERSION"
    if not version_file.is_file():
        return None
    content = version_file.read_text(encoding="utf-8").strip()
    return content.splitlines()[0].strip() if content else None


def licenses_from_dir(project_root: Path) -> list[str]:
    """SPDX identifiers of the ``LICENSES/*.txt`` files, sorted."""

    licenses_dir = project_root / "LICENSES"
    if not licenses_dir.is_dir():
        return []
    return sorted(path.stem for path in licenses_dir.glob("*.txt") if path.is_file())


@dataclass(frozen=True, slots=True)
class ComputedProvider:
    project_root: Path = DEFAULT_PROJECT_ROOT
    date_format: str = DEFAULT_DATE_FORMAT
    clock: Callable[[], datetime] = field(default=_local_now)

    @property
    def kind(self) -> SourceKind:
        return SourceKind.COMPUTED

    def retrieve(self, wanted: frozenset[PropertyKey]) -> list[PropertyValue]:
        return first_per_property(self._values(), wanted)

    def _values(self) -> Iterator[PropertyValue]:
        root = self.project_root.resolve()

        name = project_name_from_dir(root)
        if name is not None:
            yield PropertyKey.NAME, name
            yield PropertyKey.NAME_MACHINE_READABLE, machine_readable_name(name)

        version = version_from_file(root)
        if version is not None:
            yield PropertyKey.VERSION, version

        licenses = licenses_from_dir(root)
        if licenses:
            yield PropertyKey.LICENSES, ", ".join(licenses)
        if len(licenses) == 1:
            yield PropertyKey.LICENSE, licenses[0]

        yield PropertyKey.BUILD_DATE, self.clock().strftime(self.date_format)
        yield PropertyKey.BUILD_OS, build_os()
        yield PropertyKey.BUILD_OS_FAMILY, build_os_family()
        yield PropertyKey.BUILD_ARCH, build_arch()
