"""Cross-file integrity check orchestration."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .config import WaymarkConfig
from .logging import get_logger, log_run_summary
from .models import (
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    AnnotationRecord,
    CheckIssue,
    CheckReport,
    CheckSummary,
)
from .parsers import ParseFn, resolve_parser
from .repo_scanner import expand_paths
from .validators import Validator, build_check_context, default_validators

RULE_FILE_READ_ERROR = "file-read-error"
RULE_PARSE_ERROR = "parse-error"

_LOGGER = get_logger("checker")


@dataclass
class FileParseResult:
    """Records parsed from one file, or the issue explaining why there are none."""

    file: str
    records: List[AnnotationRecord] = field(default_factory=list)
    error: Optional[CheckIssue] = None


@dataclass
class CheckFailure:
    """Internal failure that prevented a check run from producing a report."""

    message: str
    cause: Optional[BaseException] = None


def parse_file(file: str, *, parse: ParseFn, root: Optional[Path] = None) -> FileParseResult:
    """Read and parse ``file``, converting failures into issues."""
    path = Path(file)
    if root is not None and not path.is_absolute():
        path = root / path

    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _LOGGER.warning("Could not read %s: %s", file, exc)
        return FileParseResult(file=file, error=_file_issue(file, RULE_FILE_READ_ERROR, "File read error", exc))

    try:
        records = list(parse(source, file=file))
    except Exception as exc:
        _LOGGER.warning("Could not parse %s: %s", file, exc)
        return FileParseResult(file=file, error=_file_issue(file, RULE_PARSE_ERROR, "Parse error", exc))

    _LOGGER.debug("Parsed %d waymarks from %s", len(records), file)
    return FileParseResult(file=file, records=records)


def parse_files(
    files: Sequence[str],
    *,
    parse: ParseFn,
    root: Optional[Path] = None,
    workers: int = 1,
    stop: Optional[threading.Event] = None,
) -> Tuple[List[AnnotationRecord], List[CheckIssue]]:
    """Parse ``files`` concurrently and return records and per-file issues.

    Results are gathered in the order of ``files`` regardless of which worker
    finishes first. Once ``stop`` is set no further files are read; files
    already in progress complete normally.
    """

    def _task(file: str) -> Optional[FileParseResult]:
        if stop is not None and stop.is_set():
            return None
        return parse_file(file, parse=parse, root=root)

    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        results = list(executor.map(_task, files))

    records: List[AnnotationRecord] = []
    issues: List[CheckIssue] = []
    for result in results:
        if result is None:
            continue
        if result.error is not None:
            issues.append(result.error)
        else:
            records.extend(result.records)

    skipped = sum(1 for result in results if result is None)
    if skipped:
        _LOGGER.debug("Stopped before reading %d file(s)", skipped)
    return records, issues


def validate_records(
    records: Sequence[AnnotationRecord],
    config: Optional[WaymarkConfig] = None,
    validators: Optional[Iterable[Validator]] = None,
) -> List[CheckIssue]:
    """Run each validator over ``records`` and concatenate their issues."""
    if config is None:
        context = build_check_context(records)
    else:
        context = build_check_context(records, config.check, config.languages.extensions)
    issues: List[CheckIssue] = []
    for validator in validators if validators is not None else default_validators():
        found = validator.validate(context)
        _LOGGER.debug("Validator %s reported %d issue(s)", validator.name, len(found))
        issues.extend(found)
    return issues


def build_report(issues: Sequence[CheckIssue], *, strict: bool) -> CheckReport:
    errors = sum(1 for issue in issues if issue.severity == SEVERITY_ERROR)
    warnings = sum(1 for issue in issues if issue.severity == SEVERITY_WARNING)
    passed = errors == 0 and (warnings == 0 or not strict)
    return CheckReport(
        issues=list(issues),
        summary=CheckSummary(total=len(issues), errors=errors, warnings=warnings),
        passed=passed,
    )


def run_check(
    files: Sequence[str],
    *,
    parse: ParseFn,
    config: Optional[WaymarkConfig] = None,
    strict: Optional[bool] = None,
    validators: Optional[Iterable[Validator]] = None,
    stop: Optional[threading.Event] = None,
) -> CheckReport:
    """Check ``files`` and return the integrity report.

    Read and parse failures come first in the report, followed by validator
    issues in validator order. ``strict`` overrides ``config.check.strict``.
    """
    root = config.root if config is not None else None
    workers = config.check.workers if config is not None else 1
    records, issues = parse_files(files, parse=parse, root=root, workers=workers, stop=stop)
    issues.extend(validate_records(records, config, validators))

    if strict is None:
        strict = config.check.strict if config is not None else False
    report = build_report(issues, strict=strict)
    log_run_summary(
        _LOGGER,
        "check",
        len(files),
        errors=report.summary.errors,
        warnings=report.summary.warnings,
    )
    return report


def run_check_command(
    paths: Sequence[str],
    config: WaymarkConfig,
    *,
    parse: Optional[ParseFn] = None,
    strict: Optional[bool] = None,
) -> Union[CheckReport, CheckFailure]:
    """Expand ``paths`` and check them, reporting internal errors as a failure."""
    try:
        parser = resolve_parser(parse, reference=config.parser)
        files = expand_paths(paths, config)
        return run_check(files, parse=parser, config=config, strict=strict)
    except Exception as exc:
        _LOGGER.debug("Check aborted", exc_info=True)
        return CheckFailure(message=f"Check failed: {exc}", cause=exc)


def _file_issue(file: str, rule: str, label: str, exc: BaseException) -> CheckIssue:
    return CheckIssue(
        file=file,
        rule=rule,
        severity=SEVERITY_ERROR,
        message=f"{label}: {_error_message(exc)}",
    )


def _error_message(exc: BaseException) -> str:
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc) or exc.__class__.__name__


__all__ = [
    "CheckFailure",
    "FileParseResult",
    "RULE_FILE_READ_ERROR",
    "RULE_PARSE_ERROR",
    "build_report",
    "parse_file",
    "parse_files",
    "run_check",
    "run_check_command",
    "validate_records",
]
