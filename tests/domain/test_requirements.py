from __future__ import annotations

import logging

import pytest

from projvar.domain.catalog import PropertyKey, all_keys, default_required_keys
from projvar.domain.errors import MissingRequiredPropertiesError
from projvar.domain.requirements import (
    RequirementReport,
    RequirementSelection,
    check_requirements,
    compute_requirement_set,
    enforce_requirements,
    explicitly_required_keys,
)
from projvar.domain.resolve import ResolvedProperty
from projvar.domain.sources import SourceKind


def test_defaults_without_flags() -> None:
    assert compute_requirement_set(RequirementSelection()) == default_required_keys()


def test_all_minus_require_not() -> None:
    required = compute_requirement_set(
        RequirementSelection(require_all=True, require_not=frozenset({PropertyKey.NAME}))
    )

    assert required == all_keys() - {PropertyKey.NAME}


def test_none_plus_require() -> None:
    required = compute_requirement_set(
        RequirementSelection(require_none=True, require=frozenset({PropertyKey.BUILD_NUMBER}))
    )

    assert required == {PropertyKey.BUILD_NUMBER}


def test_require_clears_the_default_base() -> None:
    required = compute_requirement_set(
        RequirementSelection(require=frozenset({PropertyKey.CI}))
    )

    assert required == {PropertyKey.CI}


def test_require_not_wins_over_require() -> None:
    required = compute_requirement_set(
        RequirementSelection(
            require=frozenset({PropertyKey.CI, PropertyKey.NAME}),
            require_not=frozenset({PropertyKey.NAME}),
        )
    )

    assert required == {PropertyKey.CI}


def test_all_and_none_are_contradictory() -> None:
    with pytest.raises(ValueError, match="contradictory"):
        RequirementSelection(require_all=True, require_none=True)


def test_check_reports_only_required_missing_properties() -> None:
    resolved = {
        PropertyKey.NAME: ResolvedProperty(property=PropertyKey.NAME),
        PropertyKey.VERSION: ResolvedProperty(
            property=PropertyKey.VERSION, value="1.0", source=SourceKind.EXPLICIT
        ),
        PropertyKey.CI: ResolvedProperty(property=PropertyKey.CI),
    }

    report = check_requirements(resolved, frozenset({PropertyKey.NAME, PropertyKey.VERSION}))

    assert report.missing == (PropertyKey.NAME,)
    assert not report.ok


def test_fail_fast_raises_with_all_missing_keys() -> None:
    report = RequirementReport(
        required=frozenset({PropertyKey.NAME, PropertyKey.LICENSE}),
        missing=(PropertyKey.NAME, PropertyKey.LICENSE),
    )

    with pytest.raises(MissingRequiredPropertiesError) as excinfo:
        enforce_requirements(report, fail_fast=True, prefix="PROJECT_")

    assert excinfo.value.missing == (PropertyKey.NAME, PropertyKey.LICENSE)
    assert "Name (PROJECT_NAME), License (PROJECT_LICENSE)" in str(excinfo.value)


def test_lenient_mode_warns_per_missing_key(caplog: pytest.LogCaptureFixture) -> None:
    report = RequirementReport(
        required=frozenset({PropertyKey.NAME}),
        missing=(PropertyKey.NAME,),
    )

    with caplog.at_level(logging.WARNING):
        enforce_requirements(report, fail_fast=False, prefix="PROJECT_")

    assert "No value found for required property Name (PROJECT_NAME)" in caplog.text


def test_explicitly_required_keys_leave_out_catalog_defaults() -> None:
    assert explicitly_required_keys(RequirementSelection()) == frozenset()
    assert explicitly_required_keys(
        RequirementSelection(
            require=frozenset({PropertyKey.BUILD_TAG, PropertyKey.NAME}),
            require_not=frozenset({PropertyKey.NAME}),
        )
    ) == {PropertyKey.BUILD_TAG}
    assert explicitly_required_keys(
        RequirementSelection(require_all=True, require_not=frozenset({PropertyKey.CI}))
    ) == all_keys() - {PropertyKey.CI}
