"""Source providers, one per source kind."""

from __future__ import annotations

from .computed import ComputedProvider
from .environment import EnvironmentProvider
from .explicit import ExplicitProvider
from .variables_file import VariablesFileProvider
from .vcs import VersionControlProvider

__all__ = [
    "ComputedProvider",
    "EnvironmentProvider",
    "ExplicitProvider",
    "VariablesFileProvider",
    "VersionControlProvider",
]
