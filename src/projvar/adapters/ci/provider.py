"""CI platform detection and the provider built on it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final

from projvar.adapters.providers.common import first_per_property
from projvar.config.settings import DEFAULT_DATE_FORMAT, HostingType
from projvar.domain.sources import SourceKind

from .schema import BitbucketPipelinesEnv, GitHubActionsEnv, GitLabCiEnv, JenkinsEnv, TravisCiEnv
from .translator import (
    translate_bitbucket,
    translate_github,
    translate_gitlab,
    translate_jenkins,
    translate_travis,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from projvar.domain.catalog import PropertyKey
    from projvar.domain.ports import PropertyValue


log = getLogger(__name__)


class CiPlatform(StrEnum):
    GITHUB_ACTIONS = "GitHub Actions"
    GITLAB_CI = "GitLab CI"
    BITBUCKET_PIPELINES = "Bitbucket Pipelines"
    TRAVIS_CI = "Travis CI"
    JENKINS = "Jenkins"


# checked in this order; the first platform whose marker is set wins
PLATFORM_MARKERS: Final[tuple[tuple[CiPlatform, str], ...]] = (
    (CiPlatform.GITHUB_ACTIONS, "GITHUB_ACTIONS"),
    (CiPlatform.GITLAB_CI, "GITLAB_CI"),
    (CiPlatform.BITBUCKET_PIPELINES, "BITBUCKET_BUILD_NUMBER"),
    (CiPlatform.TRAVIS_CI, "TRAVIS"),
    (CiPlatform.JENKINS, "JENKINS_URL"),
)


def detect_platform(variables: Mapping[str, str]) -> CiPlatform | None:
    for platform, marker in PLATFORM_MARKERS:
        if variables.get(marker, "").strip():
            return platform
    return None


def translate(
    platform: CiPlatform,
    variables: Mapping[str, str],
    *,
    hosting_type: HostingType,
    date_format: str,
) -> Iterator[PropertyValue]:
    """Validate the platform's variables and map them onto catalog properties."""

    data = dict(variables)
    match platform:
        case CiPlatform.GITHUB_ACTIONS:
            return translate_github(
                GitHubActionsEnv.model_validate(data),
                hosting_type=hosting_type,
                date_format=date_format,
            )
        case CiPlatform.GITLAB_CI:
            return translate_gitlab(
                GitLabCiEnv.model_validate(data),
                hosting_type=hosting_type,
                date_format=date_format,
            )
        case CiPlatform.BITBUCKET_PIPELINES:
            return translate_bitbucket(
                BitbucketPipelinesEnv.model_validate(data),
                hosting_type=hosting_type,
                date_format=date_format,
            )
        case CiPlatform.TRAVIS_CI:
            return translate_travis(
                TravisCiEnv.model_validate(data),
                hosting_type=hosting_type,
                date_format=date_format,
            )
        case CiPlatform.JENKINS:
            return translate_jenkins(
                JenkinsEnv.model_validate(data),
                hosting_type=hosting_type,
                date_format=date_format,
            )


@dataclass(frozen=True, slots=True)
class CiPlatformProvider:
    """Values a CI platform exposes through its build environment.

    ``variables`` is the combined raw mapping of the run: the process
    environment (unless disabled), then variables files, then explicit pairs.
    """

    variables: Mapping[str, str] = field(default_factory=dict["str", "str"])
    hosting_type: HostingType = HostingType.UNKNOWN
    date_format: str = DEFAULT_DATE_FORMAT

    @property
    def kind(self) -> SourceKind:
        return SourceKind.CI_PLATFORM

    def retrieve(self, wanted: frozenset[PropertyKey]) -> list[PropertyValue]:
        platform = detect_platform(self.variables)
        if platform is None:
            log.debug("No CI platform detected")
            return []
        log.info("Detected CI platform: %s", platform)
        values = translate(
            platform,
            self.variables,
            hosting_type=self.hosting_type,
            date_format=self.date_format,
        )
        return first_per_property(values, wanted)
