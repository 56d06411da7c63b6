"""Property resolution core.

Flow of one run:
1) providers produce candidates (``candidates``)
2) the resolver picks one value per property (``resolve``)
3) the validator checks required coverage (``requirements``)
4) sinks receive values subject to the overwrite policy (``policy``)
"""

from __future__ import annotations

from .candidates import Candidate, CandidateStore
from .catalog import CATALOG, DEFAULT_KEY_PREFIX, PropertyDefinition, PropertyKey
from .engine import PropertyResolutionEngine, RunOptions, RunResult
from .errors import (
    MissingRequiredPropertiesError,
    ProjvarError,
    SinkWriteError,
    SourceAccessError,
)
from .policy import OverwritePolicy
from .requirements import RequirementReport, RequirementSelection, compute_requirement_set
from .resolve import ResolvedProperty
from .sources import SourceClass, SourceKind

__all__ = [
    "CATALOG",
    "DEFAULT_KEY_PREFIX",
    "Candidate",
    "CandidateStore",
    "MissingRequiredPropertiesError",
    "OverwritePolicy",
    "ProjvarError",
    "PropertyDefinition",
    "PropertyKey",
    "PropertyResolutionEngine",
    "RequirementReport",
    "RequirementSelection",
    "ResolvedProperty",
    "RunOptions",
    "RunResult",
    "SinkWriteError",
    "SourceAccessError",
    "SourceClass",
    "SourceKind",
    "compute_requirement_set",
]
