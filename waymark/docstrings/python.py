"""Python docstring detection."""

from __future__ import annotations

import re
from typing import Optional, Tuple

from .base import KIND_FILE, KIND_FUNCTION, DocstringDetector
from .shared import (
    line_prefix,
    line_range,
    matches_any,
    strip_delimited_docstring,
    text_line_after,
)
from ..classifier import is_python_encoding_comment
from ..models import DocstringInfo

_DELIMITERS = ('"""', "'''")
_STRING_PREFIX = re.compile(r"^[rubf]+$", re.IGNORECASE)
_IMPORT_PREFIXES = ("import ", "from ")
_OWNER_PATTERNS = (re.compile(r"^(?:async\s+)?(?:def|class)\b"), re.compile(r"^@"))


class PythonDocstringDetector(DocstringDetector):
    """Finds triple-quoted strings that start a statement."""

    format = "python"
    languages = frozenset({"python", "py"})

    def detect(self, content: str, language: str) -> Optional[DocstringInfo]:
        found = _find_docstring(content)
        if found is None:
            return None
        start, stop, delimiter = found

        raw = content[start:stop]
        start_line, end_line = line_range(content, raw, start)
        return DocstringInfo(
            language=language,
            kind=_classify(content, start, stop),
            format=self.format,
            raw=raw,
            content=strip_delimited_docstring(raw, delimiter),
            start_line=start_line,
            end_line=end_line,
        )

    def wrap(self, docstring: DocstringInfo) -> str:
        delimiter = "'''" if docstring.raw.startswith("'''") else '"""'
        if "\n" in docstring.content:
            return f"{delimiter}{docstring.content}\n{delimiter}"
        return f"{delimiter}{docstring.content}{delimiter}"


def _find_docstring(content: str) -> Optional[Tuple[int, int, str]]:
    """Return ``(start, stop, delimiter)`` of the first statement-level string."""
    search = 0
    while search < len(content):
        start, delimiter = _earliest_delimiter(content, search)
        if start == -1:
            return None
        close = content.find(delimiter, start + len(delimiter))
        if close == -1:
            # Unmatched quotes, e.g. inside a comment; look past the opener only.
            search = start + len(delimiter)
            continue
        stop = close + len(delimiter)
        if _starts_statement(content, start):
            return start, stop, delimiter
        # Skip the whole literal so its closing quotes are not mistaken for an opener.
        search = stop
    return None


def _earliest_delimiter(content: str, search: int) -> Tuple[int, str]:
    earliest = -1
    chosen = ""
    for candidate in _DELIMITERS:
        found = content.find(candidate, search)
        if found != -1 and (earliest == -1 or found < earliest):
            earliest = found
            chosen = candidate
    return earliest, chosen


def _starts_statement(content: str, index: int) -> bool:
    prefix = line_prefix(content, index).strip()
    return not prefix or bool(_STRING_PREFIX.match(prefix))


def _classify(content: str, start: int, stop: int) -> str:
    if matches_any(text_line_after(content, stop), _OWNER_PATTERNS):
        return KIND_FUNCTION
    prefix = line_prefix(content, start)
    at_column_zero = prefix == prefix.lstrip()
    if at_column_zero and _is_preamble_only(content[: start - len(prefix)]):
        return KIND_FILE
    return KIND_FUNCTION


def _is_preamble_only(text: str) -> bool:
    in_import = False
    for line in text.split("\n"):
        stripped = line.strip()
        if in_import:
            in_import = ")" not in stripped
            continue
        if not stripped or stripped.startswith("#!") or is_python_encoding_comment(line):
            continue
        if stripped.startswith(_IMPORT_PREFIXES):
            in_import = "(" in stripped and ")" not in stripped
            continue
        return False
    return not in_import
