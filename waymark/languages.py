"""File extension to language identifier mapping."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Mapping, Optional

_LANGUAGE_BY_SUFFIX = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "jsx",
    ".py": "python",
    ".pyi": "python",
    ".pyw": "python",
    ".rb": "ruby",
    ".rake": "ruby",
    ".gemspec": "ruby",
    ".rs": "rust",
    ".go": "go",
    ".md": "markdown",
    ".markdown": "markdown",
    ".mdx": "mdx",
    ".java": "java",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".scala": "scala",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".swift": "swift",
    ".php": "php",
    ".sh": "shell",
    ".bash": "shell",
    ".zsh": "shell",
    ".sql": "sql",
    ".lua": "lua",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".css": "css",
    ".scss": "scss",
    ".html": "html",
}

_LANGUAGE_BY_BASENAME = {
    "Dockerfile": "dockerfile",
    "Makefile": "makefile",
    "Rakefile": "ruby",
    "Gemfile": "ruby",
}

_DECLARATION_SUFFIXES = {
    ".d.ts": "typescript",
    ".d.mts": "typescript",
    ".d.cts": "typescript",
    ".d.tsx": "tsx",
}


def language_for_path(
    path: str, overrides: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    """Return the language identifier for ``path`` or ``None`` when unknown.

    ``overrides`` maps lower-case extensions (with leading dot) to language ids
    and takes precedence over the built-in table.
    """
    name = PurePosixPath(path.replace("\\", "/")).name
    suffix = PurePosixPath(name).suffix.lower()

    if overrides and suffix in overrides:
        return overrides[suffix]

    if name in _LANGUAGE_BY_BASENAME:
        return _LANGUAGE_BY_BASENAME[name]

    lower = name.lower()
    for declaration_suffix, language in _DECLARATION_SUFFIXES.items():
        if lower.endswith(declaration_suffix):
            return language

    return _LANGUAGE_BY_SUFFIX.get(suffix)


def is_markdown(language: Optional[str]) -> bool:
    return language in {"markdown", "mdx"}


__all__ = ["is_markdown", "language_for_path"]
