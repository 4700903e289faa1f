"""Validators for TLDR summary placement."""

from __future__ import annotations

from collections import OrderedDict
from typing import Dict, List, Sequence

from .base import CheckContext, Validator
from ..insertion import SUMMARY_MARKER
from ..languages import is_markdown, language_for_path
from ..models import SEVERITY_ERROR, SEVERITY_WARNING, AnnotationRecord, CheckIssue

RULE_MULTIPLE_TLDR = "multiple-tldr"
RULE_TLDR_POSITION = "tldr-position"


class TldrPlacementValidator(Validator):
    """Flags files with several TLDRs and TLDRs placed far from the top."""

    name = "tldr"

    def validate(self, context: CheckContext) -> List[CheckIssue]:
        issues: List[CheckIssue] = []
        for file, summaries in _group_by_file(context.records).items():
            if len(summaries) > 1:
                issues.append(
                    CheckIssue(
                        file=file,
                        line=summaries[1].start_line,
                        rule=RULE_MULTIPLE_TLDR,
                        severity=SEVERITY_ERROR,
                        message=f"Multiple TLDRs in file (found {len(summaries)})",
                        suggestion="Consolidate into single TLDR at top of file",
                    )
                )

            limit = _position_limit(file, context)
            for summary in summaries:
                if summary.start_line <= limit:
                    continue
                issues.append(
                    CheckIssue(
                        file=file,
                        line=summary.start_line,
                        rule=RULE_TLDR_POSITION,
                        severity=SEVERITY_WARNING,
                        message=(
                            f"TLDR should be near top of file (found at line "
                            f"{summary.start_line}, expected within first {limit} lines)"
                        ),
                        suggestion="Move TLDR to top of file after shebang/frontmatter",
                    )
                )
        return issues


def _group_by_file(records: Sequence[AnnotationRecord]) -> Dict[str, List[AnnotationRecord]]:
    grouped: Dict[str, List[AnnotationRecord]] = OrderedDict()
    for record in records:
        if record.type == SUMMARY_MARKER:
            grouped.setdefault(record.file, []).append(record)
    return grouped


def _position_limit(file: str, context: CheckContext) -> int:
    if is_markdown(language_for_path(file, context.language_overrides)):
        return context.config.tldr_top_lines_max_markdown
    return context.config.tldr_top_lines_max


__all__ = ["RULE_MULTIPLE_TLDR", "RULE_TLDR_POSITION", "TldrPlacementValidator"]
