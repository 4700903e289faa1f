"""Expansion of command-line inputs into the files a command should read."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Set

from .config import WaymarkConfig
from .languages import language_for_path
from .logging import get_logger

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    ".turbo",
    "node_modules",
    "dist",
    "build",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

_LOGGER = get_logger("repo_scanner")


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .waymark.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def load_ignore_rules(config: WaymarkConfig) -> List[IgnoreRule]:
    """Collect ignore rules from ``.gitignore`` and ``skip_paths``."""
    rules: List[IgnoreRule] = []
    if config.respect_gitignore:
        rules.extend(_parse_gitignore(config.root / ".gitignore"))
    for pattern in config.skip_paths:
        rule = build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def expand_paths(inputs: Sequence[str], config: WaymarkConfig) -> List[str]:
    """Return the sorted, de-duplicated files named by ``inputs``.

    Directories are walked recursively, skipping build and VCS folders plus
    anything matched by ignore rules. Files named explicitly are always kept.
    Relative inputs resolve against ``config.root`` and results are POSIX
    paths relative to it (absolute when they fall outside the root). Inputs
    that do not exist are skipped.
    """
    root = config.root
    rules = load_ignore_rules(config)
    overrides = config.languages.extensions
    found: Set[str] = set()

    for raw in inputs or ["."]:
        target = Path(raw).expanduser()
        if not target.is_absolute():
            target = root / target
        if not target.exists():
            _LOGGER.warning("Skipping missing input: %s", raw)
            continue
        candidates = [target] if target.is_file() else _iter_files(target, root, rules)
        for path in candidates:
            output = _output_path(path, root)
            if config.languages.skip_unknown and language_for_path(output, overrides) is None:
                _LOGGER.debug("Skipping file with unknown language: %s", output)
                continue
            found.add(output)

    return sorted(found)


def _iter_files(directory: Path, root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(directory):
        current_dir = Path(dirpath)
        rel_dir = _relative_to_root(current_dir, root)
        # Ignore rules are rooted at the repository; walks outside it are unfiltered.
        active_rules = rules if rel_dir is not None else ()
        prefix = f"{rel_dir}/" if rel_dir else ""

        filtered_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            if should_ignore(f"{prefix}{name}", True, active_rules):
                continue
            filtered_dirs.append(name)
        dirnames[:] = filtered_dirs

        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES:
                continue
            if should_ignore(f"{prefix}{filename}", False, active_rules):
                continue
            yield current_dir / filename


def _relative_to_root(path: Path, root: Path) -> Optional[str]:
    try:
        rel = path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return None
    return "" if rel == "." else rel


def _output_path(path: Path, root: Path) -> str:
    rel = _relative_to_root(path, root)
    return rel if rel else path.resolve().as_posix()


__all__ = ["IgnoreRule", "build_ignore_rule", "expand_paths", "load_ignore_rules", "should_ignore"]
