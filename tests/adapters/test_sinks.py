from __future__ import annotations

import logging
import shlex
from typing import TYPE_CHECKING

import pytest

from projvar.adapters.sinks import (
    AllRetrievedReport,
    EnvFileSink,
    PrimaryRetrievedReport,
    ProcessEnvironmentSink,
)
from projvar.domain.candidates import Candidate, CandidateStore
from projvar.domain.catalog import PropertyKey
from projvar.domain.errors import SinkWriteError
from projvar.domain.resolve import resolve_store
from projvar.domain.sources import SourceKind

if TYPE_CHECKING:
    from pathlib import Path


def _store() -> CandidateStore:
    store = CandidateStore()
    store.record(Candidate(property=PropertyKey.NAME, source=SourceKind.EXPLICIT, value="Widget"))
    store.record(Candidate(property=PropertyKey.NAME, source=SourceKind.COMPUTED, value="widget"))
    store.record(Candidate(property=PropertyKey.VERSION, source=SourceKind.COMPUTED, value="1|2"))
    return store


def test_env_file_sink_writes_fresh_file(tmp_path: Path) -> None:
    path = tmp_path / "out" / "vars.env"
    sink = EnvFileSink(path)

    assert sink.read_existing() == {}
    sink.write({"PROJECT_NAME": "My Widget", "PROJECT_VERSION": "1.0"})

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["PROJECT_NAME='My Widget'", "PROJECT_VERSION=1.0"]
    assert shlex.split(lines[0].split("=", 1)[1]) == ["My Widget"]


def test_env_file_sink_merges_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "vars.env"
    path.write_text("# keep me\nOTHER=1\nPROJECT_NAME=Old\n", encoding="utf-8")
    sink = EnvFileSink(path)

    assert sink.read_existing() == {"OTHER": "1", "PROJECT_NAME": "Old"}
    sink.write({"PROJECT_NAME": "New", "PROJECT_LICENSE": "MIT"})

    assert path.read_text(encoding="utf-8") == (
        "# keep me\nOTHER=1\nPROJECT_NAME=New\nPROJECT_LICENSE=MIT\n"
    )


def test_env_file_sink_reads_back_quoted_values(tmp_path: Path) -> None:
    path = tmp_path / "vars.env"
    sink = EnvFileSink(path)
    sink.write({"PROJECT_NAME": "It's mine"})

    assert "PROJECT_NAME" in sink.read_existing()


def test_env_file_sink_rewrites_multi_line_values_cleanly(tmp_path: Path) -> None:
    path = tmp_path / "vars.env"
    sink = EnvFileSink(path)
    sink.write({"PROJECT_NAME": "line one\nline two"})
    first = path.read_text(encoding="utf-8")

    assert sink.read_existing() == {"PROJECT_NAME": "line one\nline two"}
    sink.write({"PROJECT_NAME": "line one\nline two"})

    assert path.read_text(encoding="utf-8") == first
    assert shlex.split(first) == ["PROJECT_NAME=line one\nline two"]


def test_env_file_sink_wraps_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    sink = EnvFileSink(blocker / "vars.env")

    with pytest.raises(SinkWriteError) as excinfo:
        sink.write({"PROJECT_NAME": "x"})

    assert excinfo.value.sink == sink.name


def test_process_environment_sink() -> None:
    environ = {"PROJECT_NAME": "Old", "PATH": "/bin"}
    sink = ProcessEnvironmentSink(environ)

    assert sink.read_existing()["PROJECT_NAME"] == "Old"
    sink.write({"PROJECT_NAME": "New"})

    assert environ == {"PROJECT_NAME": "New", "PATH": "/bin"}


def test_all_retrieved_report_to_file(tmp_path: Path) -> None:
    store = _store()
    path = tmp_path / "all.md"

    AllRetrievedReport(path).report(store, resolve_store(store))

    content = path.read_text(encoding="utf-8")
    assert "| Property | Source | Value |" in content
    assert "| Name | explicit | Widget |" in content
    assert "| Name | computed | widget |" in content
    assert "| Version | computed | 1\\|2 |" in content


def test_primary_retrieved_report_to_log(caplog: pytest.LogCaptureFixture) -> None:
    store = _store()

    with caplog.at_level(logging.INFO, logger="projvar.adapters.sinks.reports"):
        PrimaryRetrievedReport().report(store, resolve_store(store))

    assert "- Name (`PROJECT_NAME`): `Widget` from explicit" in caplog.text
    assert "- Version (`PROJECT_VERSION`): `1|2` from computed" in caplog.text
    assert "License" not in caplog.text
