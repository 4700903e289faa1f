"""Tests for docstring detection across languages."""

from __future__ import annotations

import pytest

from waymark.docstrings import KIND_FILE, KIND_FUNCTION, detect_docstring, extract_summary
from waymark.models import DocstringInfo


def _require(info: DocstringInfo | None) -> DocstringInfo:
    assert info is not None, "expected a docstring"
    return info


def test_jsdoc_file_overview() -> None:
    content = "/**\n * Module summary.\n * More detail.\n * @fileoverview\n */\nconst value = 1;\n"
    info = _require(detect_docstring(content, "typescript"))

    assert info.format == "jsdoc"
    assert info.kind == KIND_FILE
    assert info.start_line == 1
    assert info.end_line == 5
    assert extract_summary(info) == "Module summary. More detail."


def test_jsdoc_function_after_code() -> None:
    content = (
        "const value = 1;\n\n/**\n * Adds numbers.\n * @param a value\n */\n"
        "function add(a) {\n  return a + 1;\n}\n"
    )
    info = _require(detect_docstring(content, "js"))

    assert info.kind == KIND_FUNCTION
    assert info.start_line == 3
    assert extract_summary(info) == "Adds numbers."


def test_top_of_file_jsdoc_attached_to_item_is_function_doc() -> None:
    content = "/**\n * Adds numbers.\n */\nfunction add(a) {\n  return a + 1;\n}\n"
    info = _require(detect_docstring(content, "javascript"))

    assert info.kind == KIND_FUNCTION


def test_top_of_file_jsdoc_attached_to_exported_item_is_function_doc() -> None:
    content = "/**\n * Runs things.\n */\nexport async function run() {}\n"
    info = _require(detect_docstring(content, "ts"))

    assert info.kind == KIND_FUNCTION


def test_jsdoc_file_tag_after_shebang() -> None:
    content = "#!/usr/bin/env node\n/**\n * CLI entry.\n * @fileoverview\n */\nexport function run() {}\n"
    info = _require(detect_docstring(content, "typescript"))

    assert info.kind == KIND_FILE
    assert extract_summary(info) == "CLI entry."


def test_jsdoc_followed_by_blank_line_at_top_is_file_doc() -> None:
    content = "// Copyright notice\n/**\n * Shared helpers.\n */\n\nimport x from 'y';\n"
    info = _require(detect_docstring(content, "tsx"))

    assert info.kind == KIND_FILE


def test_jsdoc_ignores_glob_inside_string() -> None:
    content = "const pattern = 'src/**/*.ts';\n"
    assert detect_docstring(content, "typescript") is None


def test_python_module_docstring_after_encoding() -> None:
    content = '#!/usr/bin/env python\n# -*- coding: utf-8 -*-\n"""Module summary.\n\nMore detail.\n"""\n\nimport os\n'
    info = _require(detect_docstring(content, "python"))

    assert info.format == "python"
    assert info.kind == KIND_FILE
    assert info.start_line == 3
    assert info.end_line == 6
    assert extract_summary(info) == "Module summary."


def test_python_function_docstring() -> None:
    info = _require(detect_docstring('def add(a):\n    """Add numbers."""\n    return a + 1\n', "py"))

    assert info.kind == KIND_FUNCTION
    assert info.content == "Add numbers."


def test_python_single_quoted_docstring() -> None:
    content = "#!/usr/bin/env python\n'''Module summary.\n\nMore detail.\n'''\n\nimport os\n"
    info = _require(detect_docstring(content, "python"))

    assert info.kind == KIND_FILE
    assert info.raw.startswith("'''")
    assert extract_summary(info) == "Module summary."


def test_python_docstring_after_imports_is_file_doc() -> None:
    content = '#!/usr/bin/env python\nimport os\nimport sys\n"""Module summary.\n\nMore detail.\n"""\n\ndef foo():\n    pass\n'
    info = _require(detect_docstring(content, "python"))

    assert info.kind == KIND_FILE


def test_python_prefixed_string_counts_as_docstring() -> None:
    info = _require(detect_docstring('r"""Raw summary \\d+."""\n', "python"))

    assert info.kind == KIND_FILE
    assert info.content == "Raw summary \\d+."


def test_python_skips_string_assignments() -> None:
    content = 'note = """Not a docstring"""\n\ndef add(a):\n    """Add numbers."""\n    return a + 1\n'
    info = _require(detect_docstring(content, "python"))

    assert info.kind == KIND_FUNCTION
    assert extract_summary(info) == "Add numbers."


def test_python_unterminated_docstring_is_ignored() -> None:
    assert detect_docstring('"""never closed\n', "python") is None


def test_python_unmatched_quotes_in_comment_do_not_hide_later_docstrings() -> None:
    content = "# prefer ''' over nothing\ndef f():\n    \"\"\"Doc.\"\"\"\n"
    info = _require(detect_docstring(content, "python"))

    assert info.kind == KIND_FUNCTION
    assert info.start_line == 3
    assert info.content == "Doc."


@pytest.mark.parametrize(
    "owner",
    [
        "def run():\n    pass",
        "async def run():\n    pass",
        "class Runner:\n    pass",
        "@cache\ndef run():\n    pass",
    ],
)
def test_python_docstring_followed_by_owner_line_is_function_doc(owner: str) -> None:
    info = _require(detect_docstring(f'"""Helper."""\n{owner}\n', "python"))

    assert info.kind == KIND_FUNCTION


def test_python_module_docstring_separated_from_def_stays_file_doc() -> None:
    info = _require(detect_docstring('"""Helper."""\n\ndef run():\n    pass\n', "python"))

    assert info.kind == KIND_FILE


def test_ruby_header_after_magic_comment() -> None:
    content = "# frozen_string_literal: true\n# Module summary.\n# More detail.\n\nclass Greeter\nend\n"
    info = _require(detect_docstring(content, "ruby"))

    assert info.format == "ruby"
    assert info.kind == KIND_FILE
    assert info.start_line == 2
    assert info.end_line == 3
    assert extract_summary(info) == "Module summary. More detail."


def test_ruby_comment_attached_to_method_is_function_doc() -> None:
    content = "# Greets people.\ndef greet(name)\n  puts name\nend\n"
    info = _require(detect_docstring(content, "rb"))

    assert info.kind == KIND_FUNCTION


def test_ruby_comment_after_code_is_function_doc() -> None:
    content = "require 'json'\n\n# Parses input.\n\nclass Parser\nend\n"
    info = _require(detect_docstring(content, "ruby"))

    assert info.kind == KIND_FUNCTION


def test_rust_outer_doc_comment() -> None:
    content = "use std::fmt;\n\n/// Adds numbers.\n/// More detail.\nfn add(a: i32) -> i32 {\n  a + 1\n}\n"
    info = _require(detect_docstring(content, "rust"))

    assert info.format == "rust"
    assert info.kind == KIND_FUNCTION
    assert extract_summary(info) == "Adds numbers. More detail."


def test_rust_outer_doc_before_attribute_and_pub_item() -> None:
    content = "/// A point.\n#[derive(Debug)]\npub struct Point {\n    x: i32,\n}\n"
    info = _require(detect_docstring(content, "rust"))

    assert info.kind == KIND_FUNCTION


def test_rust_inner_doc_comment_is_file_doc() -> None:
    content = "#![allow(dead_code)]\n\n//! Crate summary.\n//! More detail.\nfn add(a: i32) -> i32 {\n  a + 1\n}\n"
    info = _require(detect_docstring(content, "rs"))

    assert info.kind == KIND_FILE
    assert info.start_line == 3
    assert extract_summary(info) == "Crate summary. More detail."


def test_rust_four_slashes_are_not_docs() -> None:
    assert detect_docstring("//// banner\nfn main() {}\n", "rust") is None


def test_unsupported_language_returns_none() -> None:
    assert detect_docstring("/** doc */\n", "go") is None
    assert detect_docstring("# Title\n", "markdown") is None


def test_language_lookup_is_case_insensitive() -> None:
    info = _require(detect_docstring('"""Summary."""\n', "Python"))

    assert info.language == "python"
