"""The environment of the running process."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessEnvironmentSink:
    environ: MutableMapping[str, str] = field(default_factory=lambda: os.environ)

    @property
    def name(self) -> str:
        return "process environment"

    def read_existing(self) -> Mapping[str, str]:
        return dict(self.environ)

    def write(self, values: Mapping[str, str]) -> None:
        for key, value in values.items():
            log.debug("Setting environment variable %s", key)
            self.environ[key] = value
