"""Ruby comment-block documentation detection."""

from __future__ import annotations

import re
from typing import List, Optional

from .base import KIND_FILE, KIND_FUNCTION, DocstringDetector
from .shared import LineBlock, line_after, matches_any, strip_line_prefix
from ..classifier import is_ruby_magic_comment, is_shebang
from ..models import DocstringInfo

_OWNER_PATTERNS = (re.compile(r"^\s*(def|class|module)\b"),)
_DOC_PREFIX = re.compile(r"^\s*#\s?")


class RubyDocstringDetector(DocstringDetector):
    """Finds contiguous ``#`` comment blocks, ignoring shebangs and magic comments."""

    format = "ruby"
    languages = frozenset({"ruby", "rb"})

    def detect(self, content: str, language: str) -> Optional[DocstringInfo]:
        lines = content.split("\n")
        block = _find_block(lines)
        if block is None:
            return None

        raw = "\n".join(lines[block.start_index: block.end_index + 1])
        return DocstringInfo(
            language=language,
            kind=_classify(lines, block),
            format=self.format,
            raw=raw,
            content=strip_line_prefix(raw, _DOC_PREFIX),
            start_line=block.start_index + 1,
            end_line=block.end_index + 1,
        )

    def wrap(self, docstring: DocstringInfo) -> str:
        return "\n".join(f"# {line}" if line.strip() else "#" for line in docstring.content.split("\n"))


def _is_doc_line(stripped: str) -> bool:
    return stripped.startswith("#") and not is_shebang(stripped) and not is_ruby_magic_comment(stripped)


def _find_block(lines: List[str]) -> Optional[LineBlock]:
    for index, line in enumerate(lines):
        if not _is_doc_line(line.strip()):
            continue
        end = index
        while end + 1 < len(lines) and _is_doc_line(lines[end + 1].strip()):
            end += 1
        return LineBlock(start_index=index, end_index=end)
    return None


def _classify(lines: List[str], block: LineBlock) -> str:
    if matches_any(line_after(lines, block.end_index), _OWNER_PATTERNS):
        return KIND_FUNCTION
    for line in lines[: block.start_index]:
        stripped = line.strip()
        if stripped and not is_shebang(stripped) and not is_ruby_magic_comment(stripped):
            return KIND_FUNCTION
    return KIND_FILE
