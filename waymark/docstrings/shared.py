"""Text helpers shared by the docstring detectors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence, Tuple


@dataclass(frozen=True)
class LineBlock:
    """Inclusive range of zero-based line indexes."""

    start_index: int
    end_index: int


def strip_line_prefix(raw: str, prefix: Pattern[str]) -> str:
    return "\n".join(prefix.sub("", line, count=1) for line in raw.split("\n")).strip()


def strip_block_docstring(raw: str, opener: str, closer: str, leader: str) -> str:
    """Remove block delimiters and the per-line leader character."""
    inner = raw[len(opener):] if raw.startswith(opener) else raw
    if inner.endswith(closer):
        inner = inner[: -len(closer)]
    return strip_line_prefix(inner, re.compile(rf"^\s*{re.escape(leader)}\s?"))


def strip_delimited_docstring(raw: str, delimiter: str) -> str:
    if len(raw) >= 2 * len(delimiter) and raw.startswith(delimiter) and raw.endswith(delimiter):
        return raw[len(delimiter): len(raw) - len(delimiter)].strip()
    return raw.strip()


def line_range(content: str, raw: str, index: int) -> Tuple[int, int]:
    """Return the 1-indexed inclusive line span of ``raw`` found at ``index``."""
    start_line = content.count("\n", 0, index) + 1
    return start_line, start_line + raw.count("\n")


def line_prefix(content: str, index: int) -> str:
    """Return the text between the start of the line and ``index``."""
    line_start = content.rfind("\n", 0, index) + 1
    return content[line_start:index]


def line_after(lines: Sequence[str], index: int) -> Optional[str]:
    """Return the stripped line directly after ``index`` when it is not blank."""
    if index + 1 >= len(lines):
        return None
    stripped = lines[index + 1].strip()
    return stripped or None


def text_line_after(content: str, end: int) -> Optional[str]:
    """Return the stripped line that directly follows offset ``end``.

    Trailing text on the same line as ``end`` is ignored. ``None`` means the
    next line is blank or missing.
    """
    newline = content.find("\n", end)
    if newline == -1:
        return None
    following = content.find("\n", newline + 1)
    line = content[newline + 1:] if following == -1 else content[newline + 1:following]
    return line.strip() or None


def matches_any(line: Optional[str], patterns: Sequence[Pattern[str]]) -> bool:
    return line is not None and any(pattern.match(line) for pattern in patterns)
