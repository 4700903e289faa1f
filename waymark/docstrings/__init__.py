"""Docstring detection across supported languages."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .base import KIND_FILE, KIND_FUNCTION, DocstringDetector
from .jsdoc import JsDocDetector
from .python import PythonDocstringDetector
from .ruby import RubyDocstringDetector
from .rust import RustDocstringDetector
from ..models import DocstringInfo

_DETECTORS: Sequence[DocstringDetector] = (
    JsDocDetector(),
    PythonDocstringDetector(),
    RubyDocstringDetector(),
    RustDocstringDetector(),
)


def detector_for(language: str) -> Optional[DocstringDetector]:
    """Return the detector handling ``language`` (aliases accepted)."""
    normalised = language.strip().lower()
    for detector in _DETECTORS:
        if detector.supports(normalised):
            return detector
    return None


def detect_docstring(content: str, language: str) -> Optional[DocstringInfo]:
    """Return the first doc block of ``content``, or ``None`` if there is none."""
    detector = detector_for(language)
    if detector is None:
        return None
    return detector.detect(content, language.strip().lower())


def extract_summary(docstring: DocstringInfo) -> str:
    """Collapse the first paragraph of a docstring into a single line.

    The paragraph ends at the first blank line or tag line (``@param`` and
    friends).
    """
    collected: List[str] = []
    for line in docstring.content.split("\n"):
        stripped = line.strip()
        if not stripped:
            if collected:
                break
            continue
        if stripped.startswith("@"):
            break
        collected.append(stripped)
    return " ".join(collected)


def wrap_docstring(docstring: DocstringInfo) -> str:
    """Render ``docstring.content`` back with its format's decoration."""
    for detector in _DETECTORS:
        if detector.format == docstring.format:
            return detector.wrap(docstring)
    raise ValueError(f"No docstring format registered for {docstring.format!r}")


__all__ = [
    "DocstringDetector",
    "KIND_FILE",
    "KIND_FUNCTION",
    "detect_docstring",
    "detector_for",
    "extract_summary",
    "wrap_docstring",
]
