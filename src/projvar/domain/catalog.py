"""Static registry of every property projvar knows how to resolve.

The catalog is fixed at import time. Each ``PropertyKey`` maps to one
``PropertyDefinition`` carrying the output-key suffix, a human description and
whether the property is required unless configuration says otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator

DEFAULT_KEY_PREFIX: Final[str] = "PROJECT_"


class PropertyKey(StrEnum):
    NAME = "Name"
    NAME_MACHINE_READABLE = "NameMachineReadable"
    VERSION = "Version"
    VERSION_DATE = "VersionDate"
    LICENSE = "License"
    LICENSES = "Licenses"
    REPO_WEB_URL = "RepoWebUrl"
    REPO_FROZEN_WEB_URL = "RepoFrozenWebUrl"
    REPO_CLONE_URL = "RepoCloneUrl"
    REPO_CLONE_URL_SSH = "RepoCloneUrlSsh"
    REPO_RAW_VERSIONED_PREFIX_URL = "RepoRawVersionedPrefixUrl"
    REPO_VERSIONED_FILE_PREFIX_URL = "RepoVersionedFilePrefixUrl"
    REPO_VERSIONED_DIR_PREFIX_URL = "RepoVersionedDirPrefixUrl"
    REPO_COMMIT_PREFIX_URL = "RepoCommitPrefixUrl"
    REPO_ISSUES_URL = "RepoIssuesUrl"
    BUILD_BRANCH = "BuildBranch"
    BUILD_TAG = "BuildTag"
    BUILD_IDENT = "BuildIdent"
    BUILD_DATE = "BuildDate"
    BUILD_OS = "BuildOs"
    BUILD_OS_FAMILY = "BuildOsFamily"
    BUILD_ARCH = "BuildArch"
    BUILD_HOSTING_URL = "BuildHostingUrl"
    BUILD_NUMBER = "BuildNumber"
    CI = "Ci"


@dataclass(frozen=True, slots=True)
class PropertyDefinition:
    """Catalog entry for one property."""

    key: PropertyKey
    suffix: str
    description: str
    required_by_default: bool = False

    def output_key(self, prefix: str = DEFAULT_KEY_PREFIX) -> str:
        return f"{prefix}{self.suffix}"


def _define(
    key: PropertyKey,
    description: str,
    *,
    required: bool = False,
) -> PropertyDefinition:
    # the suffix is the enum member name, e.g. REPO_WEB_URL
    return PropertyDefinition(
        key=key,
        suffix=key.name,
        description=description,
        required_by_default=required,
    )


CATALOG: Final[dict[PropertyKey, PropertyDefinition]] = {
    definition.key: definition
    for definition in (
        _define(PropertyKey.NAME, "The human oriented name of the project", required=True),
        _define(
            PropertyKey.NAME_MACHINE_READABLE,
            "The machine readable name of the project (lower-case, no spaces)",
        ),
        _define(
            PropertyKey.VERSION,
            "The project version, e.g. a release tag or a git describe string",
            required=True,
        ),
        _define(
            PropertyKey.VERSION_DATE,
            "Date at which this version of the project was committed/released",
            required=True,
        ),
        _define(
            PropertyKey.LICENSE,
            "The main license of the project, as an SPDX identifier",
            required=True,
        ),
        _define(PropertyKey.LICENSES, "All licenses used in the project, comma separated"),
        _define(
            PropertyKey.REPO_WEB_URL,
            "The web URL of the repository, e.g. https://github.com/user/project",
            required=True,
        ),
        _define(
            PropertyKey.REPO_FROZEN_WEB_URL,
            "The web URL of the repository at the built tag or commit",
        ),
        _define(
            PropertyKey.REPO_CLONE_URL,
            "The anonymous clone URL of the repository, e.g. https://github.com/user/project.git",
            required=True,
        ),
        _define(
            PropertyKey.REPO_CLONE_URL_SSH,
            "The authenticated clone URL, e.g. git@github.com:user/project.git",
        ),
        _define(
            PropertyKey.REPO_RAW_VERSIONED_PREFIX_URL,
            "Prefix for raw file URLs; append '/{version}/{path}'",
        ),
        _define(
            PropertyKey.REPO_VERSIONED_FILE_PREFIX_URL,
            "Prefix for versioned file web URLs; append '/{version}/{path}'",
        ),
        _define(
            PropertyKey.REPO_VERSIONED_DIR_PREFIX_URL,
            "Prefix for versioned directory web URLs; append '/{version}/{path}'",
        ),
        _define(
            PropertyKey.REPO_COMMIT_PREFIX_URL,
            "Prefix for commit web URLs; append '/{commit-sha}'",
        ),
        _define(PropertyKey.REPO_ISSUES_URL, "The web URL of the issue tracker"),
        _define(PropertyKey.BUILD_BRANCH, "The development branch that was built"),
        _define(PropertyKey.BUILD_TAG, "The tag of the commit that was built, if any"),
        _define(PropertyKey.BUILD_IDENT, "Unique identifier of the built state, e.g. the commit SHA"),
        _define(
            PropertyKey.BUILD_DATE,
            "Date at which this build was made (formatted with --date-format)",
            required=True,
        ),
        _define(PropertyKey.BUILD_OS, "The operating system the build runs on"),
        _define(PropertyKey.BUILD_OS_FAMILY, "The operating system family the build runs on"),
        _define(PropertyKey.BUILD_ARCH, "The machine architecture the build runs on"),
        _define(
            PropertyKey.BUILD_HOSTING_URL,
            "Web URL under which build artifacts are published, e.g. GitHub/GitLab pages",
        ),
        _define(PropertyKey.BUILD_NUMBER, "The build number assigned by the CI system"),
        _define(PropertyKey.CI, "'true' if running on a CI/build-bot"),
    )
}


def definition_for(key: PropertyKey) -> PropertyDefinition:
    return CATALOG[key]


def all_keys() -> frozenset[PropertyKey]:
    return frozenset(CATALOG)


def default_required_keys() -> frozenset[PropertyKey]:
    return frozenset(
        definition.key for definition in CATALOG.values() if definition.required_by_default
    )


def iter_definitions() -> Iterator[PropertyDefinition]:
    """Yield catalog entries in declaration order."""

    yield from CATALOG.values()


def output_key(key: PropertyKey, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    return CATALOG[key].output_key(prefix)


def key_from_name_or_output_key(value: str, prefix: str = DEFAULT_KEY_PREFIX) -> PropertyKey:
    """Look up a property by its name (``Name``) or its output key (``PROJECT_NAME``).

    Matching ignores case. Raises ``KeyError`` for anything not in the catalog.
    """

    candidate = value.strip()
    folded = candidate.casefold()
    for definition in CATALOG.values():
        if folded == definition.key.value.casefold():
            return definition.key
        if folded == definition.output_key(prefix).casefold():
            return definition.key
        if folded == definition.suffix.casefold():
            return definition.key
    raise KeyError(candidate)


def render_catalog(prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Return a markdown table listing every property (used by ``--list``)."""

    lines = [
        "| Property | Key | Required | Description |",
        "| --- | --- | --- | --- |",
    ]
    for definition in iter_definitions():
        required = "yes" if definition.required_by_default else "no"
        lines.append(
            f"| {definition.key} | {definition.output_key(prefix)} | {required} "
            f"| {definition.description} |"
        )
    return "\n".join(lines)
