"""Cross-file integrity validators for waymark records."""

from typing import List

from .base import (
    CanonicalIndex,
    CheckContext,
    Validator,
    build_canonical_index,
    build_check_context,
    is_exempt_token,
)
from .canonicals import DanglingRelationValidator, DuplicateCanonicalValidator
from .signals import FlaggedSignalValidator
from .tldr import TldrPlacementValidator


def default_validators() -> List[Validator]:
    """Return the built-in validators in reporting order."""
    return [
        DuplicateCanonicalValidator(),
        DanglingRelationValidator(),
        TldrPlacementValidator(),
        FlaggedSignalValidator(),
    ]


__all__ = [
    "CanonicalIndex",
    "CheckContext",
    "Validator",
    "build_canonical_index",
    "build_check_context",
    "default_validators",
    "is_exempt_token",
    "DanglingRelationValidator",
    "DuplicateCanonicalValidator",
    "FlaggedSignalValidator",
    "TldrPlacementValidator",
]
