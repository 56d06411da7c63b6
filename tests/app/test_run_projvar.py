from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from projvar.app import build_providers, build_value_sinks, list_properties, run_projvar
from projvar.config import ReportTarget, Settings
from projvar.domain.catalog import PropertyKey
from projvar.domain.errors import MissingRequiredPropertiesError, SourceAccessError
from projvar.domain.policy import OverwritePolicy
from projvar.domain.requirements import RequirementSelection
from projvar.domain.sources import SourceKind

if TYPE_CHECKING:
    from pathlib import Path


def _settings(tmp_path: Path, **overrides: object) -> Settings:
    project = tmp_path / "widget"
    project.mkdir(exist_ok=True)
    defaults: dict[str, object] = {
        "project_root": project,
        "file_out": (tmp_path / "out.env",),
        "requirements": RequirementSelection(require_none=True),
    }
    defaults.update(overrides)
    return Settings(**defaults)  # type: ignore[arg-type]


def test_variables_file_beats_environment(tmp_path: Path) -> None:
    variables = tmp_path / "vars.env"
    variables.write_text("PROJECT_NAME=Widget\n", encoding="utf-8")
    environ = {"PROJECT_NAME": "Gadget"}

    result = run_projvar(
        _settings(tmp_path, variables_files=(str(variables),)),
        environ=environ,
    )

    name = result.resolved[PropertyKey.NAME]
    assert name.value == "Widget"
    assert name.source is SourceKind.VARIABLES_FILE
    assert "PROJECT_NAME=Widget" in (tmp_path / "out.env").read_text(encoding="utf-8")


def test_explicit_beats_everything(tmp_path: Path) -> None:
    result = run_projvar(
        _settings(tmp_path, variables=(("PROJECT_NAME", "Explicit"),)),
        environ={"PROJECT_NAME": "Gadget"},
    )

    assert result.resolved[PropertyKey.NAME].value == "Explicit"


def test_computed_fallbacks_fill_the_gaps(tmp_path: Path) -> None:
    result = run_projvar(_settings(tmp_path), environ={})

    assert result.resolved[PropertyKey.NAME].value == "widget"
    assert result.resolved[PropertyKey.NAME].source is SourceKind.COMPUTED
    assert result.resolved[PropertyKey.BUILD_DATE].is_resolved


def test_environment_can_be_ignored(tmp_path: Path) -> None:
    result = run_projvar(
        _settings(tmp_path, env_in=False),
        environ={"PROJECT_LICENSE": "MIT"},
    )

    assert not result.resolved[PropertyKey.LICENSE].is_resolved


def test_ci_platform_sees_variables_files_and_explicit_pairs(tmp_path: Path) -> None:
    result = run_projvar(
        _settings(
            tmp_path,
            env_in=False,
            variables=(("GITHUB_ACTIONS", "true"), ("GITHUB_REPOSITORY", "user/widget")),
        ),
        environ={},
    )

    web_url = result.resolved[PropertyKey.REPO_WEB_URL]
    assert web_url.value == "https://github.com/user/widget"
    assert web_url.source is SourceKind.CI_PLATFORM


def test_variables_from_stdin(tmp_path: Path) -> None:
    result = run_projvar(
        _settings(tmp_path, variables_files=("-",)),
        environ={},
        stdin=io.StringIO("PROJECT_VERSION=4.5.6\n"),
    )

    assert result.resolved[PropertyKey.VERSION].value == "4.5.6"


def test_fail_fast_with_missing_required(tmp_path: Path) -> None:
    settings = _settings(
        tmp_path,
        project_root=tmp_path / "src",
        requirements=RequirementSelection(require=frozenset({PropertyKey.NAME})),
        fail_fast=True,
    )
    (tmp_path / "src").mkdir()

    with pytest.raises(MissingRequiredPropertiesError):
        run_projvar(settings, environ={})

    assert not (tmp_path / "out.env").exists()


def test_missing_variables_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(SourceAccessError):
        run_projvar(_settings(tmp_path, variables_files=(str(tmp_path / "nope.env"),)), environ={})


@pytest.mark.parametrize(
    ("policy", "expected"),
    [(OverwritePolicy.NONE, "PROJECT_NAME=Old"), (OverwritePolicy.ALL, "PROJECT_NAME=Widget")],
)
def test_overwrite_policy_on_existing_file(
    tmp_path: Path, policy: OverwritePolicy, expected: str
) -> None:
    out = tmp_path / "out.env"
    out.write_text("PROJECT_NAME=Old\n", encoding="utf-8")

    run_projvar(
        _settings(tmp_path, variables=(("PROJECT_NAME", "Widget"),), overwrite=policy),
        environ={},
    )

    assert expected in out.read_text(encoding="utf-8").splitlines()


def test_dry_run_skips_environment_but_writes_files(tmp_path: Path) -> None:
    environ: dict[str, str] = {}

    run_projvar(
        _settings(tmp_path, variables=(("PROJECT_NAME", "Widget"),), env_out=True, dry=True),
        environ=environ,
    )

    assert "PROJECT_NAME" not in environ
    assert "PROJECT_NAME=Widget" in (tmp_path / "out.env").read_text(encoding="utf-8")


def test_env_out_sets_environment(tmp_path: Path) -> None:
    environ: dict[str, str] = {}

    run_projvar(
        _settings(tmp_path, variables=(("PROJECT_NAME", "Widget"),), env_out=True),
        environ=environ,
    )

    assert environ["PROJECT_NAME"] == "Widget"


def test_only_required_restricts_output(tmp_path: Path) -> None:
    settings = _settings(
        tmp_path,
        variables=(("PROJECT_NAME", "Widget"), ("PROJECT_VERSION", "1.0")),
        requirements=RequirementSelection(require=frozenset({PropertyKey.VERSION})),
        only_required=True,
    )

    run_projvar(settings, environ={})

    assert (tmp_path / "out.env").read_text(encoding="utf-8") == "PROJECT_VERSION=1.0\n"


def test_reports_are_written(tmp_path: Path) -> None:
    all_report = tmp_path / "all.md"
    primary_report = tmp_path / "primary.md"

    run_projvar(
        _settings(
            tmp_path,
            variables=(("PROJECT_NAME", "Widget"),),
            show_all_retrieved=ReportTarget(all_report),
            show_primary_retrieved=ReportTarget(primary_report),
        ),
        environ={},
    )

    assert "| Name | explicit | Widget |" in all_report.read_text(encoding="utf-8")
    assert "`PROJECT_NAME`" in primary_report.read_text(encoding="utf-8")


def test_builders_respect_settings(tmp_path: Path) -> None:
    settings = _settings(tmp_path, env_in=False, env_out=True)

    kinds = [provider.kind for provider in build_providers(settings, environ={})]
    sinks = build_value_sinks(settings, environ={})

    assert SourceKind.ENVIRONMENT not in kinds
    assert kinds[0] is SourceKind.EXPLICIT
    assert len(sinks) == 2


def test_list_properties_renders_catalog() -> None:
    assert "PROJECT_REPO_WEB_URL" in list_properties("PROJECT_")
    assert "APP_NAME" in list_properties("APP_")
