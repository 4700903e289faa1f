"""Tests for parser collaborator resolution."""

from __future__ import annotations

from typing import List

import pytest

from tests._fixtures import fake_parser
from waymark import parsers
from waymark.parsers import ParserResolutionError, available_parsers, load_parser_reference, resolve_parser


class _EntryPoint:
    def __init__(self, name: str, target: object) -> None:
        self.name = name
        self._target = target

    def load(self) -> object:
        if isinstance(self._target, Exception):
            raise self._target
        return self._target


def test_explicit_parser_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(parsers, "_iter_entry_points", lambda: [_EntryPoint("other", print)])

    assert resolve_parser(fake_parser.parse, reference="json:loads") is fake_parser.parse


def test_reference_is_imported() -> None:
    assert resolve_parser(reference="tests._fixtures.fake_parser:parse") is fake_parser.parse


def test_entry_point_is_used_as_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        parsers, "_iter_entry_points", lambda: [_EntryPoint("grammar", fake_parser.parse)]
    )

    assert resolve_parser() is fake_parser.parse
    assert available_parsers() == ["grammar"]


def test_broken_entry_point_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        parsers, "_iter_entry_points", lambda: [_EntryPoint("grammar", ImportError("boom"))]
    )

    with pytest.raises(ParserResolutionError, match="grammar"):
        resolve_parser()


def test_missing_parser_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(parsers, "_iter_entry_points", lambda: [])

    with pytest.raises(ParserResolutionError, match="No waymark parser available"):
        resolve_parser()


@pytest.mark.parametrize(
    "reference",
    [
        "no_colon_here",
        "waymark_missing_module_xyz:parse",
        "tests._fixtures.fake_parser:missing",
        "tests._fixtures.fake_parser:PARSE_ERROR_MARKER",
    ],
)
def test_bad_references_raise(reference: str) -> None:
    with pytest.raises(ParserResolutionError):
        load_parser_reference(reference)


def test_resolved_parser_is_called_with_file_keyword() -> None:
    parse = resolve_parser(reference="tests._fixtures.fake_parser:parse")
    records = parse("// tldr ::: hello\n", file="a.ts")

    assert [(r.file, r.type, r.content_text) for r in records] == [("a.ts", "tldr", "hello")]


def test_fake_parser_extracts_relations_and_signals() -> None:
    records: List = list(
        fake_parser.parse(
            "# *~todo ::: fix see:#auth/core ref:#billing @alice #perf\n", file="x.py"
        )
    )

    record = records[0]
    assert record.signals.flagged and record.signals.starred
    assert [(r.kind, r.token) for r in record.relations] == [("see", "#auth/core")]
    assert record.canonicals == ("#billing",)
    assert record.mentions == ("alice",)
    assert record.tags == ("perf",)
