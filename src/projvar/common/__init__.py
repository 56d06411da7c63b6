from __future__ import annotations

from .keyvalue import format_line, merge_lines, parse_key_values, read_key_value_file
from .logging import TRACE, Verbosity, configure_logging

__all__ = [
    "TRACE",
    "Verbosity",
    "configure_logging",
    "format_line",
    "merge_lines",
    "parse_key_values",
    "read_key_value_file",
]
