"""Configuration loading for waymark (.waymark.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import RELATION_KINDS

CONFIG_FILENAME = ".waymark.yml"

DEFAULT_TLDR_TOP_LINES_MAX = 20
DEFAULT_TLDR_TOP_LINES_MAX_MARKDOWN = 20
DEFAULT_CONTENT_PREVIEW_LENGTH = 50
DEFAULT_CODETAG_SEARCH_LIMIT = 50
DEFAULT_WORKERS = 8


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CheckConfig:
    """Integrity check thresholds and strictness."""

    strict: bool = False
    tldr_top_lines_max: int = DEFAULT_TLDR_TOP_LINES_MAX
    tldr_top_lines_max_markdown: int = DEFAULT_TLDR_TOP_LINES_MAX_MARKDOWN
    content_preview_length: int = DEFAULT_CONTENT_PREVIEW_LENGTH
    canonical_relations: List[str] = field(default_factory=lambda: list(RELATION_KINDS))
    workers: int = DEFAULT_WORKERS


@dataclass
class SeedConfig:
    """Defaults for TLDR candidate discovery."""

    docstrings: bool = True
    codetags: bool = False
    codetag_search_limit: int = DEFAULT_CODETAG_SEARCH_LIMIT


@dataclass
class LanguageConfig:
    """Language identification overrides."""

    extensions: Dict[str, str] = field(default_factory=dict)
    skip_unknown: bool = False


@dataclass
class WaymarkConfig:
    """Represents the settings defined in .waymark.yml."""

    root: Path
    parser: Optional[str] = None
    skip_paths: List[str] = field(default_factory=list)
    respect_gitignore: bool = True
    languages: LanguageConfig = field(default_factory=LanguageConfig)
    check: CheckConfig = field(default_factory=CheckConfig)
    seed: SeedConfig = field(default_factory=SeedConfig)


def load_config(config_path: Path) -> WaymarkConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return WaymarkConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    languages = LanguageConfig()
    language_data = _as_dict(data.get("languages"))
    if language_data:
        extensions = _as_dict(language_data.get("extensions"))
        languages.extensions = {
            _normalise_extension(str(key)): str(value).strip().lower()
            for key, value in extensions.items()
            if isinstance(value, str) and value.strip()
        }
        languages.skip_unknown = _as_bool(language_data.get("skip_unknown")) or False

    check = CheckConfig()
    check_data = _as_dict(data.get("check"))
    if check_data:
        check.strict = _as_bool(check_data.get("strict")) or False
        check.tldr_top_lines_max = _as_positive_int(
            check_data.get("tldr_top_lines_max"), DEFAULT_TLDR_TOP_LINES_MAX
        )
        check.tldr_top_lines_max_markdown = _as_positive_int(
            check_data.get("tldr_top_lines_max_markdown"),
            DEFAULT_TLDR_TOP_LINES_MAX_MARKDOWN,
        )
        check.content_preview_length = _as_positive_int(
            check_data.get("content_preview_length"), DEFAULT_CONTENT_PREVIEW_LENGTH
        )
        check.workers = _as_positive_int(check_data.get("workers"), DEFAULT_WORKERS)
        if "canonical_relations" in check_data:
            relations = [kind.lower() for kind in _as_str_list(check_data["canonical_relations"])]
            unknown = sorted(set(relations) - set(RELATION_KINDS))
            if unknown:
                raise ConfigError(
                    f"Unknown relation kinds in check.canonical_relations: {', '.join(unknown)}"
                )
            check.canonical_relations = relations

    seed = SeedConfig()
    seed_data = _as_dict(data.get("seed"))
    if seed_data:
        docstrings = _as_bool(seed_data.get("docstrings"))
        codetags = _as_bool(seed_data.get("codetags"))
        seed.docstrings = True if docstrings is None else docstrings
        seed.codetags = bool(codetags)
        seed.codetag_search_limit = _as_positive_int(
            seed_data.get("codetag_search_limit"), DEFAULT_CODETAG_SEARCH_LIMIT
        )

    respect_gitignore = _as_bool(data.get("respect_gitignore"))

    return WaymarkConfig(
        root=root,
        parser=_as_str(data.get("parser")),
        skip_paths=_as_str_list(data.get("skip_paths")),
        respect_gitignore=True if respect_gitignore is None else respect_gitignore,
        languages=languages,
        check=check,
        seed=seed,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _normalise_extension(value: str) -> str:
    value = value.strip().lower()
    return value if value.startswith(".") else f".{value}"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_positive_int(value: Any, default: int) -> int:
    parsed = _as_int(value)
    if parsed is None:
        return default
    if parsed < 1:
        raise ConfigError(f"Expected a positive integer, got {parsed}")
    return parsed


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CheckConfig",
    "ConfigError",
    "LanguageConfig",
    "SeedConfig",
    "WaymarkConfig",
    "load_config",
]
