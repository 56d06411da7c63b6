from __future__ import annotations

import os

import pytest

from projvar.adapters.ci.provider import PLATFORM_MARKERS
from projvar.domain.catalog import DEFAULT_KEY_PREFIX


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide project variables and CI markers of the machine running the tests."""

    for key in list(os.environ):
        if key.startswith(DEFAULT_KEY_PREFIX):
            monkeypatch.delenv(key)
    for _, marker in PLATFORM_MARKERS:
        monkeypatch.delenv(marker, raising=False)
