"""Reading and writing ``KEY=VALUE`` files.

Input files follow the dotenv/BASH convention, one pair per line. Blank lines
and lines starting with ``#`` or ``//`` are ignored. Output lines are quoted
with ``shlex.quote`` so the file can be sourced by a POSIX shell; a quoted
value containing newlines spans several lines and is merged as one entry.
"""

from __future__ import annotations

import io
import re
import shlex
from typing import TYPE_CHECKING, Final

from dotenv import dotenv_values

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path
    from typing import TextIO

_LINE_KEY: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?:export\s+)?(?P<key>[A-Za-z_][A-Za-z0-9_.]*)\s*="
)
_COMMENT_PREFIXES: Final[tuple[str, ...]] = ("#", "//")


def _strip_comments(text: str) -> str:
    return "\n".join(
        "" if line.lstrip().startswith(_COMMENT_PREFIXES) else line
        for line in text.splitlines()
    )


def parse_key_values(text: str) -> dict[str, str]:
    """Parse key-value text; keys without a value are dropped."""

    parsed = dotenv_values(stream=io.StringIO(_strip_comments(text)), interpolate=False)
    return {key: value for key, value in parsed.items() if value is not None}


def read_key_values(stream: TextIO) -> dict[str, str]:
    return parse_key_values(stream.read())


def read_key_value_file(path: Path) -> dict[str, str]:
    with path.open(encoding="utf-8") as handle:
        return read_key_values(handle)


def line_key(line: str) -> str | None:
    """Return the key assigned on ``line``, or ``None`` for anything else."""

    if line.lstrip().startswith(_COMMENT_PREFIXES):
        return None
    match = _LINE_KEY.match(line)
    return match.group("key") if match else None


def _is_closed(value_text: str) -> bool:
    try:
        shlex.split(value_text)
    except ValueError:
        return False
    return True


def group_entries(lines: Sequence[str]) -> list[list[str]]:
    """Group lines into entries; a quoted value may span several lines.

    An assignment whose quotes never close is kept as a single line.
    """

    entries: list[list[str]] = []
    index = 0
    while index < len(lines):
        end = index + 1
        if line_key(lines[index]) is not None:
            value_text = lines[index].split("=", 1)[1]
            while not _is_closed(value_text) and end < len(lines):
                value_text += "\n" + lines[end]
                end += 1
            if not _is_closed(value_text):
                end = index + 1
        entries.append(list(lines[index:end]))
        index = end
    return entries


def keys_in(lines: Sequence[str]) -> dict[str, str]:
    """Map every assigned key to the raw text after its ``=``."""

    keys: dict[str, str] = {}
    for entry in group_entries(lines):
        key = line_key(entry[0])
        if key is not None:
            keys[key] = "\n".join(entry).split("=", 1)[1].strip()
    return keys


def format_line(key: str, value: str) -> str:
    return f"{key}={shlex.quote(value)}"


def merge_lines(lines: Sequence[str], values: Mapping[str, str]) -> list[str]:
    """Replace assignments of ``values`` keys in place and append the remaining ones.

    Lines for other keys, comments and blank lines are kept unchanged. A value
    written across several lines replaces all of them.
    """

    merged: list[str] = []
    written: set[str] = set()
    for entry in group_entries(lines):
        key = line_key(entry[0])
        if key is not None and key in values:
            if key not in written:
                merged.append(format_line(key, values[key]))
                written.add(key)
            continue
        merged.extend(entry)
    merged.extend(format_line(key, value) for key, value in values.items() if key not in written)
    return merged
