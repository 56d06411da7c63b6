"""``KEY=VALUE`` output file, sourceable by a POSIX shell."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from projvar.common.keyvalue import keys_in, merge_lines, parse_key_values
from projvar.domain.errors import SinkWriteError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EnvFileSink:
    """Merge resolved values into ``path``.

    Lines of an existing file that assign other keys, comments and blank lines
    stay where they are.
    """

    path: Path

    @property
    def name(self) -> str:
        return f"file '{self.path}'"

    def _lines(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            return self.path.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise SinkWriteError(self.name, f"Failed to read existing content: {exc}") from exc

    def read_existing(self) -> dict[str, str]:
        lines = self._lines()
        parsed = parse_key_values("\n".join(lines))
        # keys the parser rejected still count as present
        return {key: parsed.get(key, raw) for key, raw in keys_in(lines).items()}

    def write(self, values: Mapping[str, str]) -> None:
        lines = merge_lines(self._lines(), values)
        log.debug("Writing %d values to %s", len(values), self.name)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("\n".join(lines) + "\n" if lines else "", encoding="utf-8")
        except OSError as exc:
            raise SinkWriteError(self.name, str(exc)) from exc
