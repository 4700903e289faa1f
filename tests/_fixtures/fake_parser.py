"""Minimal line-oriented waymark parser used by the test suite."""

from __future__ import annotations

import re
from typing import List

from waymark.models import AnnotationRecord, Relation, Signals
from waymark.parsers import WaymarkParseError

SIGIL = ":::"
PARSE_ERROR_MARKER = "@@parse-error@@"

_LEADERS = ("<!--", "//", "#", "--", "/*", "*")
_MARKER = re.compile(r"([~*]*)([A-Za-z][\w-]*)\s*$")
_RELATION = re.compile(r"\b(see|docs|from|replaces):(\S+)")
_CANONICAL = re.compile(r"\bref:(\S+)")
_MENTION = re.compile(r"(?<![\w:])@([\w-]+)")
_TAG = re.compile(r"(?<![\w:])#([\w/-]+)")


def parse(source: str, *, file: str) -> List[AnnotationRecord]:
    """Return one record per line that carries the ``:::`` sigil.

    A line shaped like ``// ~todo ::: fix see:#auth/core ref:#auth/api`` becomes
    a flagged ``todo`` record with one relation and one canonical. Any line
    containing ``@@parse-error@@`` makes the whole source fail to parse.
    """
    records: List[AnnotationRecord] = []
    for index, line in enumerate(source.split("\n")):
        if PARSE_ERROR_MARKER in line:
            raise WaymarkParseError(f"unexpected token on line {index + 1}")
        if SIGIL not in line:
            continue
        head, _, body = line.partition(SIGIL)
        head = head.strip()
        for leader in _LEADERS:
            if head.startswith(leader):
                head = head[len(leader):].strip()
                break
        match = _MARKER.search(head)
        if match is None:
            continue
        signals, marker = match.groups()
        body = body.strip().removesuffix("-->").strip()
        records.append(
            AnnotationRecord(
                file=file,
                start_line=index + 1,
                end_line=index + 1,
                type=marker.lower(),
                content_text=body,
                signals=Signals(flagged="~" in signals, starred="*" in signals),
                relations=[Relation(kind, token) for kind, token in _RELATION.findall(body)],
                canonicals=_CANONICAL.findall(body),
                mentions=_MENTION.findall(body),
                tags=_TAG.findall(body),
            )
        )
    return records


def record(
    file: str,
    line: int,
    type: str = "note",
    *,
    content: str = "",
    flagged: bool = False,
    canonicals: tuple = (),
    relations: tuple = (),
) -> AnnotationRecord:
    """Build a record directly for validator tests."""
    return AnnotationRecord(
        file=file,
        start_line=line,
        end_line=line,
        type=type,
        content_text=content,
        signals=Signals(flagged=flagged),
        canonicals=canonicals,
        relations=tuple(Relation(kind, token) for kind, token in relations),
    )


__all__ = ["PARSE_ERROR_MARKER", "parse", "record"]
