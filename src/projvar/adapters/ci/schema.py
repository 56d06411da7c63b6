"""Pydantic models describing the environment variables CI platforms set."""

from __future__ import annotations

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class CiBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    ci: str | None = Field(default=None, alias="CI")

    @field_validator("*", mode="before")
    @classmethod
    def _normalize_blank(cls, value: object) -> object:
        return _blank_to_none(value)


class GitHubActionsEnv(CiBaseModel):
    """https://docs.github.com/en/actions/learn-github-actions/variables"""

    actions: str | None = Field(default=None, alias="GITHUB_ACTIONS")
    repository: str | None = Field(default=None, alias="GITHUB_REPOSITORY")
    server_url: str = Field(default="https://github.com", alias="GITHUB_SERVER_URL")
    ref: str | None = Field(default=None, alias="GITHUB_REF")
    sha: str | None = Field(default=None, alias="GITHUB_SHA")
    run_number: str | None = Field(default=None, alias="GITHUB_RUN_NUMBER")
    runner_os: str | None = Field(default=None, alias="RUNNER_OS")
    runner_arch: str | None = Field(default=None, alias="RUNNER_ARCH")

    @field_validator("server_url", mode="before")
    @classmethod
    def _default_server(cls, value: object) -> object:
        return value if value else "https://github.com"


class GitLabCiEnv(CiBaseModel):
    """https://docs.gitlab.com/ee/ci/variables/predefined_variables.html"""

    gitlab_ci: str | None = Field(default=None, alias="GITLAB_CI")
    commit_branch: str | None = Field(default=None, alias="CI_COMMIT_BRANCH")
    commit_tag: str | None = Field(default=None, alias="CI_COMMIT_TAG")
    commit_sha: str | None = Field(default=None, alias="CI_COMMIT_SHA")
    commit_short_sha: str | None = Field(default=None, alias="CI_COMMIT_SHORT_SHA")
    commit_timestamp: str | None = Field(default=None, alias="CI_COMMIT_TIMESTAMP")
    pages_url: str | None = Field(default=None, alias="CI_PAGES_URL")
    project_name: str | None = Field(default=None, alias="CI_PROJECT_NAME")
    project_url: str | None = Field(default=None, alias="CI_PROJECT_URL")
    repository_url: str | None = Field(default=None, alias="CI_REPOSITORY_URL")
    pipeline_iid: str | None = Field(default=None, alias="CI_PIPELINE_IID")


class BitbucketPipelinesEnv(CiBaseModel):
    """https://support.atlassian.com/bitbucket-cloud/docs/variables-and-secrets/"""

    build_number: str | None = Field(default=None, alias="BITBUCKET_BUILD_NUMBER")
    branch: str | None = Field(default=None, alias="BITBUCKET_BRANCH")
    tag: str | None = Field(default=None, alias="BITBUCKET_TAG")
    commit: str | None = Field(default=None, alias="BITBUCKET_COMMIT")
    project_key: str | None = Field(default=None, alias="BITBUCKET_PROJECT_KEY")
    repo_full_name: str | None = Field(default=None, alias="BITBUCKET_REPO_FULL_NAME")
    git_http_origin: str | None = Field(default=None, alias="BITBUCKET_GIT_HTTP_ORIGIN")
    git_ssh_origin: str | None = Field(default=None, alias="BITBUCKET_GIT_SSH_ORIGIN")


class TravisCiEnv(CiBaseModel):
    """https://docs.travis-ci.com/user/environment-variables/"""

    travis: str | None = Field(default=None, alias="TRAVIS")
    branch: str | None = Field(default=None, alias="TRAVIS_BRANCH")
    build_number: str | None = Field(default=None, alias="TRAVIS_BUILD_NUMBER")
    os_name: str | None = Field(default=None, alias="TRAVIS_OS_NAME")
    tag: str | None = Field(default=None, alias="TRAVIS_TAG")
    repo_slug: str | None = Field(default=None, alias="TRAVIS_REPO_SLUG")
    commit: str | None = Field(default=None, alias="TRAVIS_COMMIT")


class JenkinsEnv(CiBaseModel):
    """https://www.jenkins.io/doc/book/pipeline/jenkinsfile/#using-environment-variables"""

    jenkins_url: str | None = Field(default=None, alias="JENKINS_URL")
    build_number: str | None = Field(default=None, alias="BUILD_NUMBER")
    job_name: str | None = Field(default=None, alias="JOB_NAME")
    git_branch: str | None = Field(default=None, alias="GIT_BRANCH")
    git_url: str | None = Field(default=None, alias="GIT_URL")
    git_commit: str | None = Field(default=None, alias="GIT_COMMIT")


CiEnv: TypeAlias = GitHubActionsEnv | GitLabCiEnv | BitbucketPipelinesEnv | TravisCiEnv | JenkinsEnv
