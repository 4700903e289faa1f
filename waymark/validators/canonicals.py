"""Validators for the canonical/relation graph."""

from __future__ import annotations

from typing import List

from .base import CheckContext, Validator, is_exempt_token
from ..models import SEVERITY_ERROR, CheckIssue

RULE_DUPLICATE_CANONICAL = "duplicate-canonical"
RULE_DANGLING_RELATION = "dangling-relation"


class DuplicateCanonicalValidator(Validator):
    """Reports canonical tokens declared more than once across the repository."""

    name = RULE_DUPLICATE_CANONICAL

    def validate(self, context: CheckContext) -> List[CheckIssue]:
        issues: List[CheckIssue] = []
        for token, occurrences in context.canonicals.duplicates():
            first = occurrences[0]
            locations = ", ".join(str(occurrence) for occurrence in occurrences)
            issues.append(
                CheckIssue(
                    file=first.file,
                    line=first.line,
                    rule=self.name,
                    severity=SEVERITY_ERROR,
                    message=(
                        f"Duplicate canonical reference: {token} defined in "
                        f"{len(occurrences)} places: {locations}"
                    ),
                    suggestion=f"Remove duplicates. Found at: {locations}",
                )
            )
        return issues


class DanglingRelationValidator(Validator):
    """Reports relations whose target canonical does not exist."""

    name = RULE_DANGLING_RELATION

    def validate(self, context: CheckContext) -> List[CheckIssue]:
        checked_kinds = set(context.config.canonical_relations)
        issues: List[CheckIssue] = []
        for record in context.records:
            for relation in record.relations:
                if relation.kind not in checked_kinds:
                    continue
                if is_exempt_token(relation.token) or relation.token in context.canonicals:
                    continue
                issues.append(
                    CheckIssue(
                        file=record.file,
                        line=record.start_line,
                        rule=self.name,
                        severity=SEVERITY_ERROR,
                        message=(
                            f"Dangling relation: {relation.kind}:{relation.token} "
                            "(canonical not found)"
                        ),
                        suggestion=(
                            f"Add a waymark with ref:{relation.token} or remove this relation"
                        ),
                    )
                )
        return issues


__all__ = [
    "DanglingRelationValidator",
    "DuplicateCanonicalValidator",
    "RULE_DANGLING_RELATION",
    "RULE_DUPLICATE_CANONICAL",
]
