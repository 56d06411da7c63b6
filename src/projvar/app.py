"""Application orchestration entry points."""

from __future__ import annotations

import os
from logging import getLogger
from typing import TYPE_CHECKING

from projvar.adapters.ci import CiPlatformProvider
from projvar.adapters.providers import (
    ComputedProvider,
    EnvironmentProvider,
    ExplicitProvider,
    VariablesFileProvider,
    VersionControlProvider,
)
from projvar.adapters.sinks import (
    AllRetrievedReport,
    EnvFileSink,
    PrimaryRetrievedReport,
    ProcessEnvironmentSink,
)
from projvar.domain.catalog import render_catalog
from projvar.domain.engine import PropertyResolutionEngine

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import TextIO

    from projvar.config.settings import Settings
    from projvar.domain.engine import RunResult
    from projvar.domain.ports import ReportSink, SourceProvider, ValueSink


log = getLogger(__name__)


def build_providers(
    settings: Settings,
    *,
    environ: MutableMapping[str, str],
    stdin: TextIO | None = None,
) -> list[SourceProvider]:
    """Create one provider per source kind, strongest first."""

    explicit = dict(settings.variables)
    variables_files = VariablesFileProvider(
        files=settings.variables_files,
        prefix=settings.key_prefix,
        stdin=stdin,
    )

    # CI platforms are recognised from every raw variable the run can see
    raw_variables: dict[str, str] = dict(environ) if settings.env_in else {}
    raw_variables.update(variables_files.load())
    raw_variables.update(explicit)

    providers: list[SourceProvider] = [
        ExplicitProvider(explicit, prefix=settings.key_prefix),
        variables_files,
    ]
    if settings.env_in:
        providers.append(EnvironmentProvider(environ, prefix=settings.key_prefix))
    else:
        log.debug("Reading values from the environment is disabled")
    providers.extend(
        [
            VersionControlProvider(
                project_root=settings.project_root,
                project_root_explicit=settings.project_root_explicit,
                required=settings.explicitly_required_keys(),
                hosting_type=settings.hosting_type,
                date_format=settings.date_format,
            ),
            CiPlatformProvider(
                raw_variables,
                hosting_type=settings.hosting_type,
                date_format=settings.date_format,
            ),
            ComputedProvider(
                project_root=settings.project_root,
                date_format=settings.date_format,
            ),
        ]
    )
    return providers


def build_value_sinks(
    settings: Settings,
    *,
    environ: MutableMapping[str, str],
) -> list[ValueSink]:
    sinks: list[ValueSink] = [EnvFileSink(path) for path in settings.file_out]
    if settings.env_out:
        if settings.dry:
            log.info("Dry run: not writing to the process environment")
        else:
            sinks.append(ProcessEnvironmentSink(environ))
    return sinks


def build_report_sinks(settings: Settings) -> list[ReportSink]:
    sinks: list[ReportSink] = []
    if settings.show_all_retrieved is not None:
        sinks.append(AllRetrievedReport(settings.show_all_retrieved.path))
    if settings.show_primary_retrieved is not None:
        sinks.append(
            PrimaryRetrievedReport(settings.show_primary_retrieved.path, prefix=settings.key_prefix)
        )
    return sinks


def run_projvar(
    settings: Settings,
    *,
    environ: MutableMapping[str, str] | None = None,
    stdin: TextIO | None = None,
) -> RunResult:
    """Resolve all properties for ``settings`` and write them to the configured sinks."""

    effective_environ = os.environ if environ is None else environ
    options = settings.run_options()
    log.info(
        "Resolving project properties: root=%s, required=%d, overwrite=%s, dry=%s",
        settings.project_root,
        len(options.required),
        options.overwrite,
        settings.dry,
    )

    engine = PropertyResolutionEngine(
        providers=build_providers(settings, environ=effective_environ, stdin=stdin),
        value_sinks=build_value_sinks(settings, environ=effective_environ),
        report_sinks=build_report_sinks(settings),
    )
    result = engine.run(options)

    resolved_count = sum(1 for prop in result.resolved.values() if prop.is_resolved)
    log.info(
        "Finished: candidates=%s, resolved=%s, missing_required=%s",
        len(result.store),
        resolved_count,
        len(result.report.missing),
    )
    return result


def list_properties(prefix: str) -> str:
    """Markdown table of the catalog, as shown by ``--list``."""

    return render_catalog(prefix)
