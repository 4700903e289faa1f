"""Resolution of the waymark grammar parser collaborator.

The grammar itself lives outside this package. A parser is any callable
``parse(source, *, file) -> Sequence[AnnotationRecord]`` that raises when the
source cannot be parsed. It is found, in order, from an explicit argument, the
``parser`` key of ``.waymark.yml`` (``package.module:callable``) or the first
installed ``waymark.parsers`` entry point.
"""

from __future__ import annotations

import importlib
from importlib import metadata
from typing import Iterable, List, Optional, Protocol, Sequence

from .models import AnnotationRecord

_ENTRY_POINT_GROUP = "waymark.parsers"


class ParseFn(Protocol):
    """Callable contract implemented by grammar parsers."""

    def __call__(self, source: str, *, file: str) -> Sequence[AnnotationRecord]:
        ...


class WaymarkParseError(RuntimeError):
    """Raised by parsers when a source cannot be tokenized."""


class ParserResolutionError(RuntimeError):
    """Raised when no parser collaborator can be located."""


def resolve_parser(
    parser: Optional[ParseFn] = None, *, reference: Optional[str] = None
) -> ParseFn:
    """Return the parser to use, honoring explicit and configured choices."""
    if parser is not None:
        return parser
    if reference:
        return load_parser_reference(reference)

    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:
            raise ParserResolutionError(
                f"Failed to load parser entry point '{entry.name}': {exc}"
            ) from exc
        return _coerce_parser(loaded, entry.name)

    raise ParserResolutionError(
        "No waymark parser available. Set `parser: module:callable` in .waymark.yml "
        f"or install a package exposing a '{_ENTRY_POINT_GROUP}' entry point."
    )


def load_parser_reference(reference: str) -> ParseFn:
    """Import a ``module:attribute`` reference and return the parser callable."""
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise ParserResolutionError(
            f"Parser reference must look like 'package.module:callable' (got {reference!r})"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ParserResolutionError(f"Cannot import parser module '{module_name}': {exc}") from exc

    target: object = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ParserResolutionError(
                f"Parser module '{module_name}' has no attribute '{attribute}'"
            ) from exc
    return _coerce_parser(target, reference)


def available_parsers() -> List[str]:
    """Return the names of installed parser entry points."""
    return [entry.name for entry in _iter_entry_points()]


def _coerce_parser(obj: object, name: str) -> ParseFn:
    if not callable(obj):
        raise ParserResolutionError(f"Parser '{name}' is not callable")
    return obj  # type: ignore[return-value]


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "ParseFn",
    "ParserResolutionError",
    "WaymarkParseError",
    "available_parsers",
    "load_parser_reference",
    "resolve_parser",
]
