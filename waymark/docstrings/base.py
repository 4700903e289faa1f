"""Base classes for docstring detectors."""

from abc import ABC, abstractmethod
from typing import FrozenSet, Optional

from ..models import DocstringInfo

KIND_FILE = "file"
KIND_FUNCTION = "function"


class DocstringDetector(ABC):
    """Contract for per-format doc comment detection."""

    format: str
    languages: FrozenSet[str]

    def supports(self, language: str) -> bool:
        return language in self.languages

    @abstractmethod
    def detect(self, content: str, language: str) -> Optional[DocstringInfo]:
        """Return the first doc block in ``content`` or ``None``."""

    @abstractmethod
    def wrap(self, docstring: DocstringInfo) -> str:
        """Re-apply this format's comment decoration to stripped docstring text."""
