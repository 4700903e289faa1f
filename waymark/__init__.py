"""Waymark integrity toolkit: comment-structure analysis and cross-file checks."""

from .checker import CheckFailure, run_check, run_check_command
from .docstrings import detect_docstring, extract_summary, wrap_docstring
from .insertion import find_tldr_insertion_point
from .models import AnnotationRecord, CheckIssue, CheckReport, DocstringInfo, Relation, Signals

__all__ = [
    "AnnotationRecord",
    "CheckFailure",
    "CheckIssue",
    "CheckReport",
    "DocstringInfo",
    "Relation",
    "Signals",
    "detect_docstring",
    "extract_summary",
    "find_tldr_insertion_point",
    "run_check",
    "run_check_command",
    "wrap_docstring",
]
