"""Validator for signal hygiene."""

from __future__ import annotations

from typing import List

from .base import CheckContext, Validator, truncate
from ..models import SEVERITY_WARNING, CheckIssue

RULE_FLAGGED_SIGNAL = "flagged-signal"


class FlaggedSignalValidator(Validator):
    """Warns about ``~`` flagged waymarks that should be cleared before merging."""

    name = RULE_FLAGGED_SIGNAL

    def validate(self, context: CheckContext) -> List[CheckIssue]:
        limit = context.config.content_preview_length
        issues: List[CheckIssue] = []
        for record in context.records:
            if not record.signals.flagged:
                continue
            preview = truncate(record.content_text, limit)
            issues.append(
                CheckIssue(
                    file=record.file,
                    line=record.start_line,
                    rule=self.name,
                    severity=SEVERITY_WARNING,
                    message=f"Flagged waymark (~{record.type}) should be cleared before merging",
                    suggestion=f"Remove the ~ signal or complete the work: {preview}",
                )
            )
        return issues


__all__ = ["FlaggedSignalValidator", "RULE_FLAGGED_SIGNAL"]
