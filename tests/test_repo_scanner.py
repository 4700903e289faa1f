"""Tests for waymark.repo_scanner."""

from __future__ import annotations

from pathlib import Path

from tests._fixtures.repo_builder import RepoBuilder
from waymark.repo_scanner import build_ignore_rule, expand_paths, should_ignore


def test_expand_paths_walks_directories_and_skips_vendor_dirs(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "src/app.ts": "export {}\n",
            "src/lib/util.py": "x = 1\n",
            "node_modules/pkg/index.js": "module.exports = {}\n",
            "dist/app.js": "bundle\n",
            ".git/config": "[core]\n",
            "README.md": "# Readme\n",
        }
    )

    files = expand_paths(["."], repo_builder.config())

    assert files == ["README.md", "src/app.ts", "src/lib/util.py"]


def test_expand_paths_defaults_to_root(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"a.py": "x = 1\n"})

    assert expand_paths([], repo_builder.config()) == ["a.py"]


def test_expand_paths_honours_gitignore_and_skip_paths(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".gitignore": "generated/\n*.log\n!keep.log\n",
            ".waymark.yml": "skip_paths:\n  - 'vendor/'\n  - '*.min.js'\n",
            "generated/out.ts": "x\n",
            "debug.log": "x\n",
            "keep.log": "x\n",
            "vendor/lib.js": "x\n",
            "src/app.min.js": "x\n",
            "src/app.js": "x\n",
        }
    )

    files = expand_paths(["."], repo_builder.config())

    assert files == [".gitignore", ".waymark.yml", "keep.log", "src/app.js"]


def test_gitignore_can_be_disabled(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".gitignore": "*.log\n",
            ".waymark.yml": "respect_gitignore: false\n",
            "debug.log": "x\n",
        }
    )

    assert "debug.log" in expand_paths(["."], repo_builder.config())


def test_explicit_files_are_kept_and_missing_inputs_skipped(repo_builder: RepoBuilder) -> None:
    repo_builder.write({".gitignore": "*.log\n", "debug.log": "x\n", "src/a.ts": "x\n"})

    files = expand_paths(["debug.log", "src/a.ts", "src/a.ts", "nope.ts"], repo_builder.config())

    assert files == ["debug.log", "src/a.ts"]


def test_skip_unknown_drops_unrecognised_languages(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".waymark.yml": "languages:\n  skip_unknown: true\n  extensions:\n    tpl: ruby\n",
            "a.ts": "x\n",
            "b.bin": "x\n",
            "c.tpl": "x\n",
        }
    )

    assert expand_paths(["."], repo_builder.config()) == [".waymark.yml", "a.ts", "c.tpl"]


def test_paths_outside_root_are_absolute(repo_builder: RepoBuilder, tmp_path: Path) -> None:
    outside = tmp_path / "elsewhere"
    outside.mkdir()
    (outside / "x.py").write_text("x = 1\n", encoding="utf-8")

    files = expand_paths([str(outside)], repo_builder.config())

    assert files == [(outside / "x.py").resolve().as_posix()]


def test_ignore_rules_match_like_gitignore() -> None:
    rules = [rule for rule in (build_ignore_rule("build/"), build_ignore_rule("/docs/*.md")) if rule]

    assert should_ignore("pkg/build", True, rules)
    assert not should_ignore("pkg/build", False, rules)
    assert should_ignore("docs/intro.md", False, rules)
    assert not should_ignore("pkg/docs/intro.md", False, rules)
    assert build_ignore_rule("   ") is None
