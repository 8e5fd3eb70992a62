"""Pytest configuration for test isolation.

The CLI reads its defaults from the environment (optionally populated from a
``.env`` in the working directory) and configures the package logger once per
process. Either can leak between tests: a developer's shell may export
``STATEMENT_INGEST_SOURCE``, and a CLI test that configured logging would
otherwise leave the package logger detached from pytest's capture for every
later test.

To keep tests hermetic, autouse fixtures clear the relevant variables, run
each test from its own temporary directory and reset the logging state.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from statement_ingest import logging_setup


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop configuration variables and move away from any project ``.env``."""

    for name in ("STATEMENT_INGEST_SOURCE", "PDF_PASSWORD", "STATEMENT_INGEST_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch: pytest.MonkeyPatch):
    """Undo ``configure_logging`` side effects after each test."""

    pkg_logger = logging.getLogger("statement_ingest")
    saved = (list(pkg_logger.handlers), pkg_logger.level, pkg_logger.propagate)
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    yield
    handlers, level, propagate = saved
    pkg_logger.handlers[:] = handlers
    pkg_logger.setLevel(level)
    pkg_logger.propagate = propagate
