"""Core data models shared across waymark components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

RELATION_KINDS = ("see", "docs", "from", "replaces")


@dataclass(frozen=True)
class Signals:
    """Boolean modifiers carried by a waymark marker."""

    flagged: bool = False
    starred: bool = False


@dataclass(frozen=True)
class Relation:
    """Typed reference from one waymark to a canonical token."""

    kind: str
    token: str


@dataclass(frozen=True)
class AnnotationRecord:
    """Parsed waymark as supplied by the grammar collaborator."""

    file: str
    start_line: int
    end_line: int
    type: str
    content_text: str = ""
    signals: Signals = field(default_factory=Signals)
    properties: Dict[str, str] = field(default_factory=dict)
    relations: Tuple[Relation, ...] = ()
    canonicals: Tuple[str, ...] = ()
    mentions: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.start_line < 1:
            raise ValueError(f"start_line must be >= 1 (got {self.start_line})")
        if self.end_line < self.start_line:
            raise ValueError(
                f"end_line {self.end_line} precedes start_line {self.start_line}"
            )
        # Parsers may hand over lists; sequences are stored as tuples.
        for name in ("relations", "canonicals", "mentions", "tags"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))


@dataclass(frozen=True)
class Occurrence:
    """Location where a canonical token is declared."""

    file: str
    line: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


@dataclass(frozen=True)
class CheckIssue:
    """Single integrity problem reported by a validator."""

    file: str
    rule: str
    severity: str
    message: str
    line: Optional[int] = None
    suggestion: Optional[str] = None

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}" if self.line else self.file

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "file": self.file,
            "rule": self.rule,
            "severity": self.severity,
            "message": self.message,
        }
        if self.line is not None:
            payload["line"] = self.line
        if self.suggestion is not None:
            payload["suggestion"] = self.suggestion
        return payload


@dataclass(frozen=True)
class CheckSummary:
    """Aggregate issue counts for a check run."""

    total: int
    errors: int
    warnings: int


@dataclass
class CheckReport:
    """Issues plus the pass/fail determination for one check run."""

    issues: List[CheckIssue]
    summary: CheckSummary
    passed: bool

    def to_dict(self) -> Dict[str, object]:
        return {
            "issues": [issue.to_dict() for issue in self.issues],
            "summary": {
                "total": self.summary.total,
                "errors": self.summary.errors,
                "warnings": self.summary.warnings,
            },
            "passed": self.passed,
        }


@dataclass(frozen=True)
class DocstringInfo:
    """Doc-comment block located in a source file."""

    language: str
    kind: str
    format: str
    raw: str
    content: str
    start_line: int
    end_line: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "language": self.language,
            "kind": self.kind,
            "format": self.format,
            "raw": self.raw,
            "content": self.content,
            "start_line": self.start_line,
            "end_line": self.end_line,
        }
