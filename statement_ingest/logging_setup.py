"""Logging for ``statement_ingest``.

Library code only asks for loggers; it never installs handlers. Until an
entrypoint calls :func:`configure_logging`, the ``statement_ingest`` logger
carries a ``NullHandler`` so embedding applications see nothing unless they
opt in.

Extraction is chatty at DEBUG (every dropped row is logged with its reason)
and quiet at INFO (one line per extractor choice, extraction and
reconciliation). Output goes to stderr so that stdout stays free for the
JSON records the CLI prints.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "statement_ingest"
LEVEL_ENV_VAR = "STATEMENT_INGEST_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED = False


def _level_from_name(name: str) -> int | None:
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name)


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or the environment) into a numeric logging level.

    An explicit ``level`` wins; otherwise ``STATEMENT_INGEST_LOG_LEVEL`` is
    consulted. Unknown names fall back to ``INFO``.
    """

    if isinstance(level, int):
        return level
    raw = level if level is not None else os.getenv(LEVEL_ENV_VAR, "")
    resolved = _level_from_name(raw) if raw else None
    return resolved if resolved is not None else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach one stderr handler to the package logger; later calls are no-ops."""

    global _CONFIGURED
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _CONFIGURED:
        return pkg_logger

    for h in [h for h in pkg_logger.handlers if isinstance(h, logging.NullHandler)]:
        pkg_logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler.setLevel(resolved)

    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(resolved)
    pkg_logger.propagate = False

    _CONFIGURED = True
    return pkg_logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, qualified under the package if needed.

    ``get_logger(__name__)`` and ``get_logger("extractors.pnb")`` both land
    under ``statement_ingest``.
    """

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


__all__ = ["DEFAULT_FORMAT", "LEVEL_ENV_VAR", "configure_logging", "get_logger", "resolve_level"]
