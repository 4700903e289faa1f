"""Discovery of TLDR candidates from docstrings and codetags."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import DEFAULT_CODETAG_SEARCH_LIMIT, SeedConfig, WaymarkConfig
from .docstrings import KIND_FILE, detect_docstring, extract_summary
from .insertion import find_tldr_insertion_point
from .languages import language_for_path
from .logging import get_logger, log_run_summary
from .parsers import ParseFn

SOURCE_DOCSTRING = "docstring"
SOURCE_CODETAG = "codetag"

STATUS_CANDIDATE = "candidate"
STATUS_SKIPPED = "skipped"
STATUS_ERROR = "error"

OUTPUT_TEXT = "text"
OUTPUT_JSON = "json"
OUTPUT_JSONL = "jsonl"

_CODETAGS = ("TODO", "FIXME", "NOTE", "HACK")
_CODETAG_PATTERNS = tuple(
    (tag, re.compile(rf"^\s*(?://|#|--|%)\s*{tag}\s*[:-]?\s*(.+)", re.IGNORECASE))
    for tag in _CODETAGS
)

_LOGGER = get_logger("seed")


@dataclass
class SeedOptions:
    """Which candidate sources to consult."""

    docstrings: bool = True
    codetags: bool = False
    codetag_search_limit: int = DEFAULT_CODETAG_SEARCH_LIMIT


@dataclass
class SeedCandidate:
    """Text proposed as a file's TLDR together with where it would go."""

    file: str
    source: str
    line: int
    content: str
    insertion_point: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "file": self.file,
            "source": self.source,
            "line": self.line,
            "content": self.content,
            "insertion_point": self.insertion_point,
        }


@dataclass
class SeedFileResult:
    file: str
    status: str
    candidate: Optional[SeedCandidate] = None
    reason: Optional[str] = None
    error: Optional[str] = None


@dataclass
class SeedSummary:
    total: int = 0
    candidates: int = 0
    skipped: int = 0
    errors: int = 0
    by_source: Dict[str, int] = field(default_factory=lambda: {"docstrings": 0, "codetags": 0})

    def to_dict(self) -> Dict[str, object]:
        return {
            "total": self.total,
            "candidates": self.candidates,
            "skipped": self.skipped,
            "errors": self.errors,
            "by_source": dict(self.by_source),
        }


@dataclass
class SeedRun:
    """Outcome of scanning a set of files for TLDR candidates."""

    results: List[SeedFileResult]
    summary: SeedSummary

    @property
    def exit_code(self) -> int:
        return 1 if self.summary.errors else 0

    @property
    def candidates(self) -> List[SeedCandidate]:
        return [result.candidate for result in self.results if result.candidate is not None]


def build_seed_options(
    *,
    docstrings: bool = False,
    codetags: bool = False,
    all_sources: bool = False,
    config: Optional[SeedConfig] = None,
) -> SeedOptions:
    """Combine command-line flags with configured defaults.

    Without any flag the configured sources are used. Asking only for
    codetags turns docstrings off; ``all_sources`` enables both.
    """
    config = config or SeedConfig()
    limit = config.codetag_search_limit
    if not (docstrings or codetags or all_sources):
        return SeedOptions(
            docstrings=config.docstrings or not config.codetags,
            codetags=config.codetags,
            codetag_search_limit=limit,
        )
    return SeedOptions(
        docstrings=all_sources or docstrings or not codetags,
        codetags=all_sources or codetags,
        codetag_search_limit=limit,
    )


def seed_content(
    file: str,
    content: str,
    language: str,
    options: SeedOptions,
    *,
    parse: ParseFn,
) -> SeedFileResult:
    """Find a TLDR candidate in already-loaded ``content``."""
    insertion_point = find_tldr_insertion_point(content, language, parse=parse, file=file)
    if insertion_point is None:
        return SeedFileResult(
            file=file, status=STATUS_SKIPPED, reason="already has TLDR or unsuitable preamble"
        )

    if options.docstrings:
        candidate = find_docstring_candidate(file, content, language, insertion_point)
        if candidate is not None:
            return SeedFileResult(file=file, status=STATUS_CANDIDATE, candidate=candidate)

    if options.codetags:
        candidate = find_codetag_candidate(
            file, content, insertion_point, limit=options.codetag_search_limit
        )
        if candidate is not None:
            return SeedFileResult(file=file, status=STATUS_CANDIDATE, candidate=candidate)

    reasons = []
    if options.docstrings:
        reasons.append("no file-level docstring")
    if options.codetags:
        reasons.append("no codetags")
    return SeedFileResult(file=file, status=STATUS_SKIPPED, reason=", ".join(reasons))


def seed_file(
    file: str,
    options: SeedOptions,
    *,
    parse: ParseFn,
    root: Optional[Path] = None,
    overrides: Optional[Dict[str, str]] = None,
) -> SeedFileResult:
    language = language_for_path(file, overrides)
    if language is None:
        return SeedFileResult(file=file, status=STATUS_SKIPPED, reason="unsupported language")

    path = Path(file)
    if root is not None and not path.is_absolute():
        path = root / path
    try:
        content = path.read_text(encoding="utf-8")
        return seed_content(file, content, language, options, parse=parse)
    except Exception as exc:
        _LOGGER.warning("Seeding %s failed: %s", file, exc)
        return SeedFileResult(file=file, status=STATUS_ERROR, error=str(exc) or exc.__class__.__name__)


def find_docstring_candidate(
    file: str, content: str, language: str, insertion_point: int
) -> Optional[SeedCandidate]:
    """Return the summary of a file-level docstring as a candidate."""
    docstring = detect_docstring(content, language)
    if docstring is None or docstring.kind != KIND_FILE:
        return None
    summary = extract_summary(docstring)
    if not summary:
        return None
    return SeedCandidate(
        file=file,
        source=SOURCE_DOCSTRING,
        line=docstring.start_line,
        content=summary,
        insertion_point=insertion_point,
    )


def find_codetag_candidate(
    file: str,
    content: str,
    insertion_point: int,
    *,
    limit: int = DEFAULT_CODETAG_SEARCH_LIMIT,
) -> Optional[SeedCandidate]:
    """Return the first codetag comment near the top of ``content``."""
    for index, line in enumerate(content.split("\n")[:limit]):
        if not line:
            continue
        for tag, pattern in _CODETAG_PATTERNS:
            match = pattern.match(line)
            if match and match.group(1).strip():
                return SeedCandidate(
                    file=file,
                    source=SOURCE_CODETAG,
                    line=index + 1,
                    content=f"{tag}: {match.group(1).strip()}",
                    insertion_point=insertion_point,
                )
    return None


def summarise(results: Sequence[SeedFileResult]) -> SeedSummary:
    summary = SeedSummary(total=len(results))
    for result in results:
        if result.status == STATUS_CANDIDATE and result.candidate is not None:
            summary.candidates += 1
            key = "docstrings" if result.candidate.source == SOURCE_DOCSTRING else "codetags"
            summary.by_source[key] += 1
        elif result.status == STATUS_SKIPPED:
            summary.skipped += 1
        elif result.status == STATUS_ERROR:
            summary.errors += 1
    return summary


def run_seed(
    files: Sequence[str],
    options: SeedOptions,
    *,
    parse: ParseFn,
    config: Optional[WaymarkConfig] = None,
) -> SeedRun:
    """Look for TLDR candidates in each of ``files``."""
    root = config.root if config is not None else None
    overrides = config.languages.extensions if config is not None else None
    results = [
        seed_file(file, options, parse=parse, root=root, overrides=overrides) for file in files
    ]
    summary = summarise(results)
    log_run_summary(
        _LOGGER,
        "seed",
        summary.total,
        candidates=summary.candidates,
        skipped=summary.skipped,
        errors=summary.errors,
    )
    return SeedRun(results=results, summary=summary)


def format_seed_output(run: SeedRun, output: str = OUTPUT_TEXT) -> str:
    if output == OUTPUT_JSON:
        payload = {
            "candidates": [candidate.to_dict() for candidate in run.candidates],
            "summary": run.summary.to_dict(),
        }
        return json.dumps(payload, indent=2)
    if output == OUTPUT_JSONL:
        lines = [json.dumps(candidate.to_dict()) for candidate in run.candidates]
        lines.append(json.dumps({"summary": run.summary.to_dict()}))
        return "\n".join(lines)
    return _format_text(run)


def _format_text(run: SeedRun) -> str:
    summary = run.summary
    candidates = run.candidates
    if not candidates:
        return "\n".join(
            [
                "No TLDR candidates found.",
                "",
                f"Scanned {summary.total} file(s), {summary.skipped} skipped.",
            ]
        )

    lines = [f"Found {len(candidates)} TLDR candidate(s):", ""]
    for candidate in candidates:
        lines.append(f"{candidate.file} ({candidate.source})")
        lines.append(f'  line {candidate.line}: "{candidate.content}"')
        lines.append(f"  insertion point: line {candidate.insertion_point}")
        lines.append("")

    lines.append("---")
    lines.append(f"Summary: {summary.candidates} candidates, {summary.skipped} skipped")
    parts = []
    if summary.by_source["docstrings"]:
        parts.append(f"{summary.by_source['docstrings']} from docstrings")
    if summary.by_source["codetags"]:
        parts.append(f"{summary.by_source['codetags']} from codetags")
    if parts:
        lines.append(f"  ({', '.join(parts)})")
    return "\n".join(lines)


__all__ = [
    "SeedCandidate",
    "SeedFileResult",
    "SeedOptions",
    "SeedRun",
    "SeedSummary",
    "build_seed_options",
    "find_codetag_candidate",
    "find_docstring_candidate",
    "format_seed_output",
    "run_seed",
    "seed_content",
    "seed_file",
]
