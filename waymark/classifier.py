"""Line classification for language preambles.

Each supported language is described by a :class:`PreambleRules` entry: the
patterns that recognise directive lines, whether those lines are matched
against the raw or the stripped text, how many may repeat, and whether a
single blank separator line following them belongs to the preamble. Adding a
language means adding a table entry, not a new branch.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

SHEBANG_PREFIX = "#!"
FRONT_MATTER_DELIMITERS = ("---", "+++")

_LINE_SPLIT = re.compile(r"\r?\n")

JS_STRING_DIRECTIVE = re.compile(r"""^['"](use strict|use client|use server)['"]\s*;?$""")
TS_REFERENCE_DIRECTIVE = re.compile(r"^///\s*<(reference|amd-(module|dependency))\b", re.IGNORECASE)
TS_CHECK_DIRECTIVE = re.compile(
    r"^(//\s*@ts-(check|nocheck)\b.*|/\*\s*@ts-(check|nocheck)\s*\*/)$", re.IGNORECASE
)
# PEP 263 declaration form; also covers the emacs "-*- coding: x -*-" style.
PYTHON_ENCODING_COMMENT = re.compile(r"^[ \t\f]*#.*?coding[:=][ \t]*[-_.a-zA-Z0-9]+")
RUBY_MAGIC_COMMENTS: Tuple[Pattern[str], ...] = (
    re.compile(r"^#\s*frozen_string_literal:\s*\w+\s*$", re.IGNORECASE),
    re.compile(r"^#\s*(-\*-\s*)?(en)?coding\s*[:=]\s*[-\w.]+\s*(-\*-)?\s*$", re.IGNORECASE),
    re.compile(
        r"^#\s*(typed|warn_indent|shareable_constant_value|rubocop):(\s|$)", re.IGNORECASE
    ),
    re.compile(r"^#\s*noinspection\b", re.IGNORECASE),
)
RUST_INNER_ATTRIBUTE = re.compile(r"^#!\s*\[")
GO_BUILD_TAG = re.compile(r"^(//\s*go:build\b|//\s*\+build\b)")


@dataclass(frozen=True)
class PreambleRules:
    """Directive vocabulary for one language family."""

    directives: Tuple[Pattern[str], ...] = ()
    strip: bool = True
    max_lines: Optional[int] = None
    blank_line_after: bool = False

    def matches(self, line: str) -> bool:
        candidate = line.strip() if self.strip else line
        return any(pattern.match(candidate) for pattern in self.directives)


_JS_RULES = PreambleRules(
    directives=(TS_REFERENCE_DIRECTIVE, TS_CHECK_DIRECTIVE, JS_STRING_DIRECTIVE)
)

PREAMBLE_RULES: Dict[str, PreambleRules] = {
    "javascript": _JS_RULES,
    "typescript": _JS_RULES,
    "jsx": _JS_RULES,
    "tsx": _JS_RULES,
    # Python and Ruby allow a single encoding or magic comment after the shebang.
    "python": PreambleRules(directives=(PYTHON_ENCODING_COMMENT,), strip=False, max_lines=1),
    "ruby": PreambleRules(directives=RUBY_MAGIC_COMMENTS, strip=False, max_lines=1),
    "rust": PreambleRules(directives=(RUST_INNER_ATTRIBUTE,)),
    "go": PreambleRules(directives=(GO_BUILD_TAG,), blank_line_after=True),
    "markdown": PreambleRules(),
    "mdx": PreambleRules(),
}

SUPPORTED_LANGUAGES = frozenset(PREAMBLE_RULES)


def normalise_language(language: str) -> str:
    return language.strip().lower()


def rules_for(language: str) -> Optional[PreambleRules]:
    """Return the preamble rules for ``language`` or ``None`` when unsupported."""
    return PREAMBLE_RULES.get(normalise_language(language))


def split_lines(content: str) -> List[str]:
    """Split text into lines, dropping the empty tail left by a final newline."""
    if not content:
        return []
    lines = _LINE_SPLIT.split(content)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def is_shebang(line: Optional[str]) -> bool:
    return line is not None and line.startswith(SHEBANG_PREFIX)


def is_python_encoding_comment(line: str) -> bool:
    return bool(PYTHON_ENCODING_COMMENT.match(line))


def is_ruby_magic_comment(line: str) -> bool:
    stripped = line.strip()
    return any(pattern.match(stripped) for pattern in RUBY_MAGIC_COMMENTS)


def is_rust_inner_attribute(line: str) -> bool:
    return bool(RUST_INNER_ATTRIBUTE.match(line.strip()))


def skip_front_matter(lines: Sequence[str], start: int) -> Optional[int]:
    """Return the index after a front matter block starting at ``start``.

    ``start`` is returned unchanged when no block opens there. ``None`` means
    the block was opened but never closed, which makes the file unsuitable.
    """
    if start >= len(lines):
        return start
    delimiter = lines[start].strip()
    if delimiter not in FRONT_MATTER_DELIMITERS:
        return start
    for index in range(start + 1, len(lines)):
        if lines[index].strip() == delimiter:
            return index + 1
    return None


def skip_directives(lines: Sequence[str], start: int, rules: PreambleRules) -> int:
    """Advance past consecutive directive lines recognised by ``rules``."""
    index = start
    matched = 0
    while index < len(lines):
        if rules.max_lines is not None and matched >= rules.max_lines:
            break
        if not rules.matches(lines[index]):
            break
        index += 1
        matched += 1
    if rules.blank_line_after and matched and index < len(lines) and not lines[index].strip():
        index += 1
    return index


__all__ = [
    "PREAMBLE_RULES",
    "PreambleRules",
    "SUPPORTED_LANGUAGES",
    "is_python_encoding_comment",
    "is_ruby_magic_comment",
    "is_rust_inner_attribute",
    "is_shebang",
    "normalise_language",
    "rules_for",
    "skip_directives",
    "skip_front_matter",
    "split_lines",
]
