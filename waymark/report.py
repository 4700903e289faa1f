"""Rendering of check reports for terminals and machines."""

from __future__ import annotations

import json
from typing import List

from .models import SEVERITY_ERROR, CheckIssue, CheckReport

PASSED_MESSAGE = "check: all integrity checks passed"

_SEVERITY_LABELS = {SEVERITY_ERROR: "error"}


def format_issue(issue: CheckIssue) -> str:
    label = _SEVERITY_LABELS.get(issue.severity, "warn")
    output = f"{issue.location} {label} {issue.rule}: {issue.message}"
    if issue.suggestion:
        output += f"\n  -> {issue.suggestion}"
    return output


def format_check_report(report: CheckReport) -> str:
    """Render ``report`` as plain text, one issue per entry plus a tally."""
    if not report.issues:
        return PASSED_MESSAGE

    lines: List[str] = [format_issue(issue) for issue in report.issues]
    lines.append("")

    counts = []
    if report.summary.errors:
        counts.append(_plural(report.summary.errors, "error"))
    if report.summary.warnings:
        counts.append(_plural(report.summary.warnings, "warning"))
    lines.append(f"check: {', '.join(counts)}")
    return "\n".join(lines)


def format_check_report_json(report: CheckReport) -> str:
    return json.dumps(report.to_dict(), indent=2)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


__all__ = ["PASSED_MESSAGE", "format_check_report", "format_check_report_json", "format_issue"]
