"""Orchestrator for one property-resolution run.

The engine composes providers and sinks but does not build them. Stages run
strictly in sequence and none re-invokes an earlier one:

1) query providers in priority order and record candidates
2) resolve one value per property
3) check required-property coverage
4) emit reports, enforce requirements, then write value sinks
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .candidates import Candidate, CandidateStore
from .catalog import DEFAULT_KEY_PREFIX, PropertyKey, all_keys
from .policy import OverwritePolicy, plan_sink_update
from .requirements import check_requirements, enforce_requirements
from .resolve import resolve_store, restrict
from .sources import DEFAULT_MAIN_SOURCES, SourceKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .policy import SinkUpdatePlan
    from .ports import ReportSink, SourceProvider, ValueSink
    from .requirements import RequirementReport, RequirementSet
    from .resolve import ResolvedByProperty


log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class RunOptions:
    required: RequirementSet = field(default_factory=frozenset["PropertyKey"])
    fail_fast: bool = False
    only_required: bool = False
    overwrite: OverwritePolicy = OverwritePolicy.ALL
    key_prefix: str = DEFAULT_KEY_PREFIX
    main_sources: frozenset[SourceKind] = DEFAULT_MAIN_SOURCES


@dataclass(slots=True)
class RunResult:
    """Outcome of a run, mostly useful to callers and tests."""

    store: CandidateStore
    resolved: ResolvedByProperty
    report: RequirementReport
    sink_plans: dict[str, SinkUpdatePlan] = field(default_factory=dict["str", "SinkUpdatePlan"])


@dataclass(slots=True)
class PropertyResolutionEngine:
    """Run all resolution stages over a fixed set of providers and sinks."""

    providers: Sequence[SourceProvider]
    value_sinks: Sequence[ValueSink] = ()
    report_sinks: Sequence[ReportSink] = ()

    def collect(self, wanted: frozenset[PropertyKey]) -> CandidateStore:
        """Query every provider once, strongest source first."""

        store = CandidateStore()
        for provider in sorted(self.providers, key=lambda provider: provider.kind.tier):
            log.debug("Retrieving values from source %s ...", provider.kind)
            recorded = 0
            for key, value in provider.retrieve(wanted):
                if not value:
                    log.debug("Source %s produced an empty value for %s", provider.kind, key)
                    continue
                if store.record(Candidate(property=key, source=provider.kind, value=value)):
                    recorded += 1
            log.debug("Source %s produced %d values", provider.kind, recorded)
        return store

    def run(self, options: RunOptions) -> RunResult:
        """Run collect, resolve, validate and write for ``options``."""

        wanted = options.required if options.only_required else all_keys()
        store = self.collect(wanted)
        resolved = resolve_store(store)
        report = check_requirements(resolved, options.required)
        result = RunResult(store=store, resolved=resolved, report=report)

        for report_sink in self.report_sinks:
            report_sink.report(store, resolved)

        enforce_requirements(report, fail_fast=options.fail_fast, prefix=options.key_prefix)

        output = restrict(resolved, options.required) if options.only_required else resolved
        for sink in self.value_sinks:
            result.sink_plans[sink.name] = self._write_sink(sink, output, options)
        return result

    def _write_sink(
        self,
        sink: ValueSink,
        output: ResolvedByProperty,
        options: RunOptions,
    ) -> SinkUpdatePlan:
        existing = sink.read_existing()
        plan = plan_sink_update(
            output,
            existing,
            policy=options.overwrite,
            prefix=options.key_prefix,
            main_sources=options.main_sources,
        )
        for kept in plan.kept():
            log.info(
                "Keeping existing value of %s in %s (overwrite policy %s)",
                kept.output_key,
                sink.name,
                options.overwrite,
            )
        sink.write(plan.to_apply())
        return plan
