"""Shared logging helpers for projvar."""

from __future__ import annotations

import logging
import sys
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from pathlib import Path

TRACE: Final[int] = 5
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.addLevelName(TRACE, "TRACE")


class Verbosity(StrEnum):
    NONE = "none"
    ERRORS = "errors"
    WARNINGS = "warnings"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"

    @property
    def level(self) -> int:
        return _LEVELS[self]

    def up(self, steps: int) -> Verbosity:
        """Return the verbosity ``steps`` levels more verbose, capped at ``TRACE``."""

        members = list(Verbosity)
        index = min(members.index(self) + max(steps, 0), len(members) - 1)
        return members[index]


_LEVELS: Final[dict[Verbosity, int]] = {
    Verbosity.NONE: logging.CRITICAL + 10,
    Verbosity.ERRORS: logging.ERROR,
    Verbosity.WARNINGS: logging.WARNING,
    Verbosity.INFO: logging.INFO,
    Verbosity.DEBUG: logging.DEBUG,
    Verbosity.TRACE: TRACE,
}


def configure_logging(
    *,
    level: int = logging.INFO,
    log_file: Path | None = None,
    quiet: bool = False,
    force: bool = False,
) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format suitable for CLI output. Console output goes to
    stderr so stdout stays free for tooling; ``quiet`` restricts it to errors. A
    ``log_file`` always receives records at ``level``. Pass ``force=True`` to
    reconfigure during tests or specialised entry points.
    """

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(max(level, logging.ERROR) if quiet else level)
    handlers: list[logging.Handler] = [console]
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=force,
    )
