"""Rust line doc comment detection."""

from __future__ import annotations

import re
from typing import List, Optional

from .base import KIND_FILE, KIND_FUNCTION, DocstringDetector
from .shared import LineBlock, matches_any, strip_line_prefix
from ..classifier import is_rust_inner_attribute
from ..models import DocstringInfo

OUTER_DOC = "///"
INNER_DOC = "//!"

_OWNER_PATTERNS = (
    re.compile(
        r"^(pub(\([^)]*\))?\s+)?((async|const|unsafe)\s+)*"
        r"(fn|struct|enum|impl|trait|mod)\b"
    ),
)


class RustDocstringDetector(DocstringDetector):
    """Finds contiguous ``///`` or ``//!`` comment runs."""

    format = "rust"
    languages = frozenset({"rust", "rs"})

    def detect(self, content: str, language: str) -> Optional[DocstringInfo]:
        lines = content.split("\n")
        for index, line in enumerate(lines):
            prefix = _doc_prefix(line)
            if prefix is None:
                continue
            end = index
            while end + 1 < len(lines) and _doc_prefix(lines[end + 1]) == prefix:
                end += 1
            block = LineBlock(start_index=index, end_index=end)
            raw = "\n".join(lines[index: end + 1])
            return DocstringInfo(
                language=language,
                kind=_classify(lines, block, prefix),
                format=self.format,
                raw=raw,
                content=strip_line_prefix(raw, re.compile(rf"^\s*{re.escape(prefix)}\s?")),
                start_line=index + 1,
                end_line=end + 1,
            )
        return None

    def wrap(self, docstring: DocstringInfo) -> str:
        prefix = INNER_DOC if docstring.raw.lstrip().startswith(INNER_DOC) else OUTER_DOC
        return "\n".join(
            f"{prefix} {line}" if line.strip() else prefix for line in docstring.content.split("\n")
        )


def _doc_prefix(line: str) -> Optional[str]:
    stripped = line.lstrip()
    if stripped.startswith(INNER_DOC):
        return INNER_DOC
    # Four or more slashes form an ordinary comment, not documentation.
    if stripped.startswith(OUTER_DOC) and not stripped.startswith("////"):
        return OUTER_DOC
    return None


def _documented_item(lines: List[str], end_index: int) -> Optional[str]:
    """Return the line the block documents, stepping over outer attributes."""
    for line in lines[end_index + 1:]:
        stripped = line.strip()
        if not stripped:
            return None
        if stripped.startswith("#[") or stripped.startswith("//"):
            continue
        return stripped
    return None


def _is_preamble_line(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("//") or is_rust_inner_attribute(stripped)


def _classify(lines: List[str], block: LineBlock, prefix: str) -> str:
    if prefix == INNER_DOC:
        return KIND_FILE
    if matches_any(_documented_item(lines, block.end_index), _OWNER_PATTERNS):
        return KIND_FUNCTION
    if all(_is_preamble_line(line) for line in lines[: block.start_index]):
        return KIND_FILE
    return KIND_FUNCTION
