"""Values read from one or more ``KEY=VALUE`` variables files."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from projvar.common.keyvalue import read_key_value_file, read_key_values
from projvar.config.settings import STDIN_MARKER
from projvar.domain.catalog import DEFAULT_KEY_PREFIX
from projvar.domain.errors import SourceAccessError
from projvar.domain.sources import SourceKind

from .common import retrieve_prefixed

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import TextIO

    from projvar.domain.catalog import PropertyKey
    from projvar.domain.ports import PropertyValue


log = getLogger(__name__)


@dataclass(slots=True)
class VariablesFileProvider:
    """Merge the given files in order; a later file wins for the same key.

    ``"-"`` reads standard input. Files are read once, on first use.
    """

    files: tuple[str, ...] = ()
    prefix: str = DEFAULT_KEY_PREFIX
    stdin: TextIO | None = None
    _values: dict[str, str] | None = field(default=None, init=False, repr=False)

    @property
    def kind(self) -> SourceKind:
        return SourceKind.VARIABLES_FILE

    def load(self) -> dict[str, str]:
        """Return every pair of every file, not only catalog keys."""

        if self._values is None:
            values: dict[str, str] = {}
            for name in self.files:
                values.update(self._read(name))
            self._values = values
        return self._values

    def retrieve(self, wanted: frozenset[PropertyKey]) -> Iterable[PropertyValue]:
        return list(retrieve_prefixed(self.load(), wanted, self.prefix))

    def _read(self, name: str) -> dict[str, str]:
        if name == STDIN_MARKER:
            log.debug("Reading variables from stdin")
            return read_key_values(self.stdin or sys.stdin)
        path = Path(name)
        if not path.is_file():
            raise SourceAccessError(self.kind, f"Variables file '{path}' does not exist")
        log.debug("Reading variables file '%s'", path)
        try:
            return read_key_value_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceAccessError(self.kind, f"Failed to read variables file '{path}': {exc}") from exc
