"""Values read from the git repository the project lives in.

Responsibilities of this provider:
- locate the repository enclosing the project root
- read the ``origin`` remote (or the first remote) and derive the repository URLs
- read the checked out branch, a tag pointing at HEAD and the HEAD commit
- describe HEAD the way ``git describe --tags --dirty`` does, for the version
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

import pygit2
from pygit2.enums import DescribeStrategy

from projvar.adapters.hosting import (
    machine_readable_name,
    project_name_from_slug,
    repo_properties_from_web_url,
    split_web_url,
    web_url_from_clone_url,
)
from projvar.config.settings import DEFAULT_DATE_FORMAT, DEFAULT_PROJECT_ROOT, HostingType
from projvar.domain.catalog import PropertyKey
from projvar.domain.errors import SourceAccessError
from projvar.domain.sources import SourceKind

from .common import first_per_property

if TYPE_CHECKING:
    from collections.abc import Iterator

    from projvar.domain.ports import PropertyValue


log = getLogger(__name__)

DIRTY_SUFFIX: Final[str] = "-dirty"
TAG_REF_PREFIX: Final[str] = "refs/tags/"

# Properties only a repository can provide; requiring one of them while
# pointing at a non-repository project root is fatal.
REPOSITORY_KEYS: Final[frozenset[PropertyKey]] = frozenset(
    {
        PropertyKey.VERSION_DATE,
        PropertyKey.REPO_WEB_URL,
        PropertyKey.REPO_CLONE_URL,
        PropertyKey.REPO_CLONE_URL_SSH,
        PropertyKey.BUILD_BRANCH,
        PropertyKey.BUILD_TAG,
        PropertyKey.BUILD_IDENT,
    }
)


def open_repository(path: Path) -> pygit2.Repository | None:
    """Return the repository enclosing ``path``, or ``None``."""

    try:
        repo_path = pygit2.discover_repository(str(path))
    except (KeyError, ValueError, pygit2.GitError):
        return None
    if repo_path is None:
        return None
    return pygit2.Repository(repo_path)


def remote_url(repo: pygit2.Repository) -> str | None:
    try:
        return repo.remotes["origin"].url
    except KeyError:
        pass
    for remote in repo.remotes:
        if remote.url:
            log.debug("No 'origin' remote, using remote '%s'", remote.name)
            return remote.url
    return None


def head_commit(repo: pygit2.Repository) -> pygit2.Commit | None:
    if repo.head_is_unborn:
        return None
    try:
        return repo.head.peel(pygit2.Commit)
    except (KeyError, ValueError, pygit2.GitError):
        return None


def branch_name(repo: pygit2.Repository) -> str | None:
    if repo.head_is_unborn or repo.head_is_detached:
        return None
    return repo.head.shorthand


def tag_at(repo: pygit2.Repository, commit: pygit2.Commit) -> str | None:
    """Name of a tag pointing at ``commit``; the alphabetically first if several do."""

    tags: list[str] = []
    for name in repo.references:
        if not name.startswith(TAG_REF_PREFIX):
            continue
        try:
            target = repo.lookup_reference(name).peel(pygit2.Commit)
        except (KeyError, ValueError, pygit2.GitError):
            continue
        if target.id == commit.id:
            tags.append(name.removeprefix(TAG_REF_PREFIX))
    return min(tags) if tags else None


def describe(repo: pygit2.Repository, commit: pygit2.Commit) -> str:
    """``git describe --tags --dirty``, falling back to the abbreviated commit id."""

    try:
        return repo.describe(
            describe_strategy=DescribeStrategy.TAGS,
            show_commit_oid_as_fallback=True,
            dirty_suffix=DIRTY_SUFFIX if not repo.is_bare else None,
        )
    except (KeyError, ValueError, pygit2.GitError) as exc:
        log.debug("git describe failed (%s), using the commit id as version", exc)
        return commit.short_id


def commit_date(commit: pygit2.Commit, date_format: str) -> str:
    offset = timezone(timedelta(minutes=commit.commit_time_offset))
    return datetime.fromtimestamp(commit.commit_time, offset).strftime(date_format)


@dataclass(frozen=True, slots=True)
class VersionControlProvider:
    """Read-only view on the git repository enclosing ``project_root``.

    ``project_root_explicit`` and ``required`` decide whether a missing
    repository is fatal: only when the user named the project root and asked
    by name for properties no other place can tell. ``required`` therefore
    holds the explicitly requested keys, not the catalog defaults.
    """

    project_root: Path = DEFAULT_PROJECT_ROOT
    project_root_explicit: bool = False
    required: frozenset[PropertyKey] = field(default_factory=frozenset["PropertyKey"])
    hosting_type: HostingType = HostingType.UNKNOWN
    date_format: str = DEFAULT_DATE_FORMAT

    @property
    def kind(self) -> SourceKind:
        return SourceKind.VERSION_CONTROL

    def retrieve(self, wanted: frozenset[PropertyKey]) -> list[PropertyValue]:
        repo = open_repository(self.project_root)
        if repo is None:
            required_here = sorted(self.required & REPOSITORY_KEYS)
            if self.project_root_explicit and required_here:
                raise SourceAccessError(
                    self.kind,
                    f"'{self.project_root}' is not inside a git repository, "
                    f"but {', '.join(required_here)} are required",
                )
            log.warning("'%s' is not inside a git repository", self.project_root)
            return []
        return first_per_property(self._values(repo), wanted)

    def _values(self, repo: pygit2.Repository) -> Iterator[PropertyValue]:
        commit = head_commit(repo)
        tag = tag_at(repo, commit) if commit is not None else None
        ref = tag or (str(commit.id) if commit is not None else None)

        url = remote_url(repo)
        web_url = web_url_from_clone_url(url) if url else None
        if web_url is not None:
            split = split_web_url(web_url)
            name = project_name_from_slug(split[1]) if split else None
            if name:
                yield PropertyKey.NAME, name
                yield PropertyKey.NAME_MACHINE_READABLE, machine_readable_name(name)
            yield from repo_properties_from_web_url(web_url, self.hosting_type, ref)
        elif url:
            log.warning("Could not derive a web URL from remote URL '%s'", url)

        branch = branch_name(repo)
        if branch is not None:
            yield PropertyKey.BUILD_BRANCH, branch

        if commit is None:
            log.debug("Repository has no commits yet")
            return
        if tag is not None:
            yield PropertyKey.BUILD_TAG, tag
        yield PropertyKey.BUILD_IDENT, str(commit.id)
        yield PropertyKey.VERSION, describe(repo, commit)
        yield PropertyKey.VERSION_DATE, commit_date(commit, self.date_format)
