"""Core integrity validation data structures and helpers."""

from __future__ import annotations

import re
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Protocol, Sequence, Tuple

from ..config import CheckConfig
from ..models import AnnotationRecord, CheckIssue, Occurrence

_URL_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


class Validator(Protocol):
    """Protocol implemented by integrity validators."""

    name: str

    def validate(self, context: "CheckContext") -> List[CheckIssue]:
        """Run validation and return any issues."""


class CanonicalIndex:
    """Maps canonical tokens to every place they are declared.

    Duplicates are retained so they can be reported; insertion order follows
    the order records were added.
    """

    def __init__(self) -> None:
        self._occurrences: Dict[str, List[Occurrence]] = OrderedDict()

    def add(self, token: str, occurrence: Occurrence) -> None:
        self._occurrences.setdefault(token, []).append(occurrence)

    def __contains__(self, token: object) -> bool:
        return token in self._occurrences

    def __len__(self) -> int:
        return len(self._occurrences)

    def __iter__(self) -> Iterator[str]:
        return iter(self._occurrences)

    def occurrences(self, token: str) -> List[Occurrence]:
        return list(self._occurrences.get(token, ()))

    def duplicates(self) -> Iterator[Tuple[str, List[Occurrence]]]:
        for token, occurrences in self._occurrences.items():
            if len(occurrences) > 1:
                yield token, list(occurrences)


def build_canonical_index(records: Iterable[AnnotationRecord]) -> CanonicalIndex:
    """Index every canonical token declared by ``records``."""
    index = CanonicalIndex()
    for record in records:
        for token in record.canonicals:
            index.add(token, Occurrence(file=record.file, line=record.start_line))
    return index


@dataclass
class CheckContext:
    """Records and settings shared with validators during a check run."""

    records: Sequence[AnnotationRecord]
    canonicals: CanonicalIndex
    config: CheckConfig = field(default_factory=CheckConfig)
    language_overrides: Mapping[str, str] = field(default_factory=dict)


def build_check_context(
    records: Sequence[AnnotationRecord],
    config: CheckConfig | None = None,
    language_overrides: Mapping[str, str] | None = None,
) -> CheckContext:
    return CheckContext(
        records=records,
        canonicals=build_canonical_index(records),
        config=config or CheckConfig(),
        language_overrides=dict(language_overrides or {}),
    )


def is_id_reference(token: str) -> bool:
    return token.startswith("[[") and token.endswith("]]")


def is_url(token: str) -> bool:
    return bool(_URL_SCHEME.match(token))


def is_exempt_token(token: str) -> bool:
    """Return True for relation targets that never name a canonical."""
    return is_id_reference(token) or is_url(token)


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


__all__ = [
    "CanonicalIndex",
    "CheckContext",
    "Validator",
    "build_canonical_index",
    "build_check_context",
    "is_exempt_token",
    "is_id_reference",
    "is_url",
    "truncate",
]
