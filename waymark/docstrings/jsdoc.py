"""JSDoc block detection."""

from __future__ import annotations

import re
from typing import Optional

from .base import KIND_FILE, KIND_FUNCTION, DocstringDetector
from .shared import line_prefix, line_range, matches_any, strip_block_docstring, text_line_after
from ..models import DocstringInfo

_DOC_START = "/**"
_DOC_END = "*/"
_EMPTY_BLOCK = "/**/"

_OWNER_PATTERNS = (
    re.compile(
        r"^(export\s+)?(default\s+)?(declare\s+)?(abstract\s+)?(async\s+)?"
        r"(function|class|interface|type|enum|const|let|var)\b"
    ),
)
_FILE_TAG = re.compile(r"@file(?:overview)?\b|@module\b")


class JsDocDetector(DocstringDetector):
    """Finds ``/** ... */`` blocks in JavaScript and TypeScript sources."""

    format = "jsdoc"
    languages = frozenset({"javascript", "typescript", "js", "ts", "jsx", "tsx"})

    def detect(self, content: str, language: str) -> Optional[DocstringInfo]:
        start = _find_block_start(content)
        if start is None:
            return None

        end = content.find(_DOC_END, start + len(_DOC_START))
        if end == -1:
            return None
        stop = end + len(_DOC_END)

        raw = content[start:stop]
        start_line, end_line = line_range(content, raw, start)
        text = strip_block_docstring(raw, _DOC_START, _DOC_END, "*")
        return DocstringInfo(
            language=language,
            kind=_classify(content, start, stop, text),
            format=self.format,
            raw=raw,
            content=text,
            start_line=start_line,
            end_line=end_line,
        )

    def wrap(self, docstring: DocstringInfo) -> str:
        body = [f" * {line}" if line.strip() else " *" for line in docstring.content.split("\n")]
        return "\n".join([_DOC_START, *body, " */"])


def _find_block_start(content: str) -> Optional[int]:
    # Only openers that begin their line count; "src/**/*.ts" inside a string does not.
    search = 0
    while True:
        index = content.find(_DOC_START, search)
        if index == -1:
            return None
        if not content.startswith(_EMPTY_BLOCK, index) and not line_prefix(content, index).strip():
            return index
        search = index + 1


def _classify(content: str, start: int, stop: int, text: str) -> str:
    if _FILE_TAG.search(text):
        return KIND_FILE
    if matches_any(text_line_after(content, stop), _OWNER_PATTERNS):
        return KIND_FUNCTION
    if _is_preamble_only(content[:start]):
        return KIND_FILE
    return KIND_FUNCTION


def _is_preamble_only(text: str) -> bool:
    in_block_comment = False
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        if in_block_comment:
            in_block_comment = _DOC_END not in stripped
            continue
        if stripped.startswith("#!") or stripped.startswith("//"):
            continue
        if stripped.startswith("/*"):
            in_block_comment = _DOC_END not in stripped[2:]
            continue
        return False
    return True
