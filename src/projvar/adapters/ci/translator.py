"""Translate CI platform variables into catalog properties.

Each translator yields the properties in order of trust: values the platform
states directly come before values derived from them, so that a directly
stated value is the one recorded when both exist.
"""

from __future__ import annotations

from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from projvar.adapters.hosting import (
    clone_url_https,
    clone_url_ssh,
    machine_readable_name,
    project_name_from_slug,
    repo_properties_from_web_url,
    web_url_from_clone_url,
    web_url_from_slug,
)
from projvar.config.settings import HostingType
from projvar.domain.catalog import PropertyKey

if TYPE_CHECKING:
    from collections.abc import Iterator

    from projvar.domain.ports import PropertyValue

    from .schema import (
        BitbucketPipelinesEnv,
        GitHubActionsEnv,
        GitLabCiEnv,
        JenkinsEnv,
        TravisCiEnv,
    )


log = getLogger(__name__)

BRANCH_REF_PREFIX: Final[str] = "refs/heads/"
TAG_REF_PREFIX: Final[str] = "refs/tags/"
BITBUCKET_SERVER_URL: Final[str] = "https://bitbucket.org"


def _name(name: str | None) -> Iterator[PropertyValue]:
    if name:
        yield PropertyKey.NAME, name
        yield PropertyKey.NAME_MACHINE_READABLE, machine_readable_name(name)


def _ci(value: str | None) -> Iterator[PropertyValue]:
    # the platform was detected, so we are on CI even when CI itself is unset
    yield PropertyKey.CI, value or "true"


def _web_url(
    web_url: str | None,
    hosting_type: HostingType,
    ref: str | None = None,
) -> Iterator[PropertyValue]:
    if web_url:
        yield from repo_properties_from_web_url(web_url, hosting_type, ref)


def _preferred(forced: HostingType, platform: HostingType) -> HostingType:
    return forced if forced is not HostingType.UNKNOWN else platform


def iso_date_to_format(value: str, date_format: str) -> str | None:
    try:
        return datetime.fromisoformat(value).strftime(date_format)
    except ValueError:
        log.warning("Ignoring unparsable commit timestamp '%s'", value)
        return None


def translate_github(
    env: GitHubActionsEnv,
    *,
    hosting_type: HostingType,
    date_format: str,
) -> Iterator[PropertyValue]:
    del date_format
    if env.repository:
        yield from _name(project_name_from_slug(env.repository))
    if env.ref and env.ref.startswith(BRANCH_REF_PREFIX):
        yield PropertyKey.BUILD_BRANCH, env.ref.removeprefix(BRANCH_REF_PREFIX)
    tag = None
    if env.ref and env.ref.startswith(TAG_REF_PREFIX):
        tag = env.ref.removeprefix(TAG_REF_PREFIX)
        yield PropertyKey.BUILD_TAG, tag
    if env.sha:
        yield PropertyKey.BUILD_IDENT, env.sha
    if env.run_number:
        yield PropertyKey.BUILD_NUMBER, env.run_number
    if env.runner_os:
        yield PropertyKey.BUILD_OS, env.runner_os
    yield from _ci(env.ci)
    if env.repository:
        web_url = web_url_from_slug(env.server_url, env.repository)
        yield from _web_url(web_url, _preferred(hosting_type, HostingType.GITHUB), tag or env.sha)


def translate_gitlab(
    env: GitLabCiEnv,
    *,
    hosting_type: HostingType,
    date_format: str,
) -> Iterator[PropertyValue]:
    yield from _name(env.project_name)
    if env.commit_branch:
        yield PropertyKey.BUILD_BRANCH, env.commit_branch
    if env.commit_tag:
        yield PropertyKey.BUILD_TAG, env.commit_tag
    version = env.commit_tag or env.commit_short_sha
    if version:
        yield PropertyKey.VERSION, version
    if env.commit_timestamp:
        version_date = iso_date_to_format(env.commit_timestamp, date_format)
        if version_date is not None:
            yield PropertyKey.VERSION_DATE, version_date
    if env.commit_sha:
        yield PropertyKey.BUILD_IDENT, env.commit_sha
    if env.pipeline_iid:
        yield PropertyKey.BUILD_NUMBER, env.pipeline_iid
    if env.pages_url:
        yield PropertyKey.BUILD_HOSTING_URL, env.pages_url
    yield from _ci(env.ci)
    # CI_REPOSITORY_URL carries a job token; only its anonymous form is used
    clone_web_url = web_url_from_clone_url(env.repository_url) if env.repository_url else None
    if clone_web_url:
        yield PropertyKey.REPO_CLONE_URL, clone_url_https(clone_web_url)
        ssh_url = clone_url_ssh(clone_web_url)
        if ssh_url:
            yield PropertyKey.REPO_CLONE_URL_SSH, ssh_url
    yield from _web_url(
        env.project_url or clone_web_url,
        _preferred(hosting_type, HostingType.GITLAB),
        env.commit_tag or env.commit_sha,
    )


def translate_bitbucket(
    env: BitbucketPipelinesEnv,
    *,
    hosting_type: HostingType,
    date_format: str,
) -> Iterator[PropertyValue]:
    del date_format
    slug_name = project_name_from_slug(env.repo_full_name) if env.repo_full_name else None
    yield from _name(slug_name or env.project_key)
    if env.branch:
        yield PropertyKey.BUILD_BRANCH, env.branch
    if env.tag:
        yield PropertyKey.BUILD_TAG, env.tag
    if env.build_number:
        yield PropertyKey.BUILD_NUMBER, env.build_number
    if env.commit:
        yield PropertyKey.VERSION, env.commit
        yield PropertyKey.BUILD_IDENT, env.commit
    yield from _ci(env.ci)
    if env.git_http_origin:
        yield PropertyKey.REPO_CLONE_URL, clone_url_https(env.git_http_origin.removesuffix(".git"))
    if env.git_ssh_origin:
        yield PropertyKey.REPO_CLONE_URL_SSH, env.git_ssh_origin
    if env.repo_full_name:
        web_url = web_url_from_slug(BITBUCKET_SERVER_URL, env.repo_full_name)
        yield from _web_url(
            web_url, _preferred(hosting_type, HostingType.BITBUCKET), env.tag or env.commit
        )


def translate_travis(
    env: TravisCiEnv,
    *,
    hosting_type: HostingType,
    date_format: str,
) -> Iterator[PropertyValue]:
    del hosting_type, date_format
    if env.repo_slug:
        yield from _name(project_name_from_slug(env.repo_slug))
    # Travis sets TRAVIS_BRANCH to the tag name on tag builds
    if env.branch and env.branch != env.tag:
        yield PropertyKey.BUILD_BRANCH, env.branch
    if env.tag:
        yield PropertyKey.BUILD_TAG, env.tag
    if env.build_number:
        yield PropertyKey.BUILD_NUMBER, env.build_number
    if env.os_name:
        yield PropertyKey.BUILD_OS, env.os_name
    if env.commit:
        yield PropertyKey.VERSION, env.commit
        yield PropertyKey.BUILD_IDENT, env.commit
    yield from _ci(env.ci)


def translate_jenkins(
    env: JenkinsEnv,
    *,
    hosting_type: HostingType,
    date_format: str,
) -> Iterator[PropertyValue]:
    del date_format
    if env.job_name:
        # folder jobs are named "folder/job"
        yield from _name(env.job_name.rsplit("/", 1)[-1])
    if env.git_branch:
        yield PropertyKey.BUILD_BRANCH, env.git_branch.removeprefix("origin/")
    if env.build_number:
        yield PropertyKey.BUILD_NUMBER, env.build_number
    if env.git_commit:
        yield PropertyKey.BUILD_IDENT, env.git_commit
    yield from _ci(env.ci)
    web_url = web_url_from_clone_url(env.git_url) if env.git_url else None
    yield from _web_url(web_url, hosting_type, env.git_commit)
