"""Tests for waymark.languages."""

from __future__ import annotations

import pytest

from waymark.languages import is_markdown, language_for_path


@pytest.mark.parametrize(
    ("path", "language"),
    [
        ("src/app.ts", "typescript"),
        ("src/App.tsx", "tsx"),
        ("lib/index.mjs", "javascript"),
        ("component.jsx", "jsx"),
        ("tool.py", "python"),
        ("types.pyi", "python"),
        ("Rakefile", "ruby"),
        ("lib/greeter.rb", "ruby"),
        ("src/main.rs", "rust"),
        ("cmd/main.go", "go"),
        ("docs/README.md", "markdown"),
        ("docs/page.mdx", "mdx"),
        ("types/globals.d.ts", "typescript"),
        ("C:\\repo\\src\\app.ts", "typescript"),
    ],
)
def test_language_for_known_paths(path: str, language: str) -> None:
    assert language_for_path(path) == language


def test_unknown_extension_returns_none() -> None:
    assert language_for_path("image.png") is None
    assert language_for_path("LICENSE") is None


def test_overrides_take_precedence() -> None:
    assert language_for_path("view.tpl", {".tpl": "ruby"}) == "ruby"
    assert language_for_path("script.js", {".js": "typescript"}) == "typescript"


def test_is_markdown() -> None:
    assert is_markdown("markdown")
    assert is_markdown("mdx")
    assert not is_markdown("python")
    assert not is_markdown(None)
