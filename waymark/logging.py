"""Logging utilities for waymark commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "waymark"
_CONSOLE_FORMAT = "[waymark] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the waymark hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the waymark logger.

    Per-file progress is logged at debug and recovered per-file failures at
    warning, so the default level keeps reports on stdout uncluttered while
    ``--verbose`` shows the whole run.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked repeatedly.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    _attach(logger, logging.StreamHandler(), level, _CONSOLE_FORMAT)
    if log_file is not None:
        _attach(logger, logging.FileHandler(log_file, encoding="utf-8"), level, _FILE_FORMAT)
    return logger


def log_run_summary(logger: logging.Logger, command: str, files: int, **counts: int) -> str:
    """Log the one-line outcome of a ``check`` or ``seed`` run and return it.

    Counts keep their keyword order; zero counts are still listed so that runs
    can be compared line by line.
    """
    parts = [f"{files} file(s)"]
    parts.extend(f"{count} {name}" for name, count in counts.items())
    message = f"{command}: {', '.join(parts)}"
    logger.info(message)
    return message


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, fmt: str) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


__all__ = ["configure_logging", "get_logger", "log_run_summary"]
