"""Safe insertion point detection for TLDR placement."""

from __future__ import annotations

from typing import Optional

from .classifier import rules_for, is_shebang, skip_directives, skip_front_matter, split_lines
from .parsers import ParseFn

SUMMARY_MARKER = "tldr"


def find_tldr_insertion_point(
    content: str, language: str, *, parse: ParseFn, file: str = "<memory>"
) -> Optional[int]:
    """Return the 1-indexed line where a TLDR waymark can be inserted.

    ``None`` is returned when the language is unsupported, when the content
    already carries a TLDR, or when its front matter is never closed. The
    returned line may sit one past the end of the file when the file holds
    nothing but preamble.
    """
    rules = rules_for(language)
    if rules is None:
        return None

    if has_summary(content, parse=parse, file=file):
        return None

    lines = split_lines(content)
    if not lines:
        return 1

    index = 0
    if is_shebang(lines[index]):
        index += 1

    after_front_matter = skip_front_matter(lines, index)
    if after_front_matter is None:
        return None

    index = skip_directives(lines, after_front_matter, rules)
    return index + 1


def has_summary(content: str, *, parse: ParseFn, file: str = "<memory>") -> bool:
    """Return True when ``content`` already declares a TLDR waymark."""
    return any(record.type == SUMMARY_MARKER for record in parse(content, file=file))


__all__ = ["SUMMARY_MARKER", "find_tldr_insertion_point", "has_summary"]
