"""CLI for the ``statement_ingest`` package.

This module exposes callable command handlers (``cmd_sources``,
``cmd_detect``, ``cmd_extract``) that return a process exit status, and a
Typer-based console interface that wraps them. Environment variables
(``STATEMENT_INGEST_SOURCE``, ``PDF_PASSWORD``, ``STATEMENT_INGEST_LOG_LEVEL``)
are loaded from a local ``.env`` using ``python-dotenv`` before any command
runs; command-line options take precedence over them.

Exit statuses: ``0`` success, ``1`` invalid input (e.g. a malformed ledger
file), ``2`` the document could not be read, ``3`` the document needs a
passphrase.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from typer.models import ArgumentInfo

from .errors import DocumentAccessError, PasswordRequiredError
from .logging_setup import configure_logging

EXIT_INVALID_INPUT = 1
EXIT_DOCUMENT_ACCESS = 2
EXIT_PASSWORD_REQUIRED = 3

_SOURCE_ENV_VAR = "STATEMENT_INGEST_SOURCE"
_PASSWORD_ENV_VAR = "PDF_PASSWORD"


# ---- Small module-level helpers used by CLI commands -------------------------


def _is_pdf(path: Path) -> bool:
    return path.suffix.lower() == ".pdf"


def _load_text(path: Path, password: str | None) -> str:
    """Return statement text in reading order for a PDF or a plain text file."""

    if _is_pdf(path):
        from .document import read_pdf_fragments
        from .layout import lines_to_text, reconstruct_lines

        return lines_to_text(reconstruct_lines(read_pdf_fragments(path, password=password)))
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DocumentAccessError(f"not UTF-8 text: {e}") from e


def _load_ledger(path: Path) -> list[Any]:
    """Load a ledger snapshot: a JSON list of objects or 4-element arrays."""

    from .models import PersistedTransaction

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError("ledger must be a JSON list")
    return [PersistedTransaction.from_row(row) for row in data]


def _report_document_error(path: Path, err: Exception) -> int:
    if isinstance(err, PasswordRequiredError):
        hint = "wrong password" if err.retry else "password required"
        print(
            f"Error: {path}: {hint}; retry with --password or set {_PASSWORD_ENV_VAR}.",
            file=sys.stderr,
        )
        return EXIT_PASSWORD_REQUIRED
    print(f"Error: cannot read '{path}': {err}", file=sys.stderr)
    return EXIT_DOCUMENT_ACCESS


# ---- Command handlers --------------------------------------------------------


def cmd_sources() -> int:
    """Print one ``<key>\\t<name>`` line per registered extractor."""

    from .extractors.registry import available_sources

    for key, name in available_sources():
        print(f"{key}\t{name}")
    return 0


def cmd_detect(path: Path, *, password: str | None = None) -> int:
    """Print the extractor key auto-detection picks for ``path``."""

    from .extractors.registry import detect_extractor

    try:
        text = _load_text(path, password)
    except (DocumentAccessError, OSError) as e:
        return _report_document_error(path, e)

    print(detect_extractor(text).key)
    return 0


def cmd_extract(
    path: Path,
    *,
    source: str | None = None,
    password: str | None = None,
    ledger: Path | None = None,
    include_duplicates: bool = False,
) -> int:
    """Extract transactions and print one JSON object per line.

    With ``ledger`` the candidates are reconciled first; exact duplicates are
    omitted unless ``include_duplicates`` is set. Errors are written to
    stderr and a non-zero status is returned.
    """

    from .api import extract_transactions
    from .reconcile import reconcile

    persisted = None
    if ledger is not None:
        try:
            persisted = _load_ledger(ledger)
        except OSError as e:
            print(f"Error: cannot read ledger '{ledger}': {e}", file=sys.stderr)
            return EXIT_INVALID_INPUT
        except (ValueError, TypeError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError.
            print(f"Error: invalid ledger '{ledger}': {e}", file=sys.stderr)
            return EXIT_INVALID_INPUT

    try:
        text = _load_text(path, password)
    except (DocumentAccessError, OSError) as e:
        return _report_document_error(path, e)

    transactions = extract_transactions(text, source)

    if persisted is None:
        records = [tx.as_record() for tx in transactions]
    else:
        records = [
            r.as_record()
            for r in reconcile(transactions, persisted)
            if include_duplicates or not r.exact_match
        ]

    for record in records:
        print(json.dumps(record, ensure_ascii=False))
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Extract transactions from bank and wallet statements (PDF or text) and "
        "reconcile them against an existing ledger. Loads settings from a local .env."
    ),
)

# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect this when used as a default value below.
STATEMENT_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Statement file: a .pdf, or text already in reading order.",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files with its own exit status
)


def _env_default(name: str, value: str | None) -> str | None:
    return value if value is not None else (os.getenv(name) or None)


@app.command("sources")
def sources_cmd() -> None:
    """List registered extractor keys and display names."""

    raise typer.Exit(cmd_sources())


@app.command("detect")
def detect_cmd(
    path: Annotated[Path, STATEMENT_PATH_ARGUMENT],
    *,
    password: str | None = typer.Option(
        None, help=f"PDF passphrase (falls back to {_PASSWORD_ENV_VAR})."
    ),
) -> None:
    """Print the extractor key that auto-detection would choose."""

    raise typer.Exit(cmd_detect(path, password=_env_default(_PASSWORD_ENV_VAR, password)))


@app.command("extract")
def extract_cmd(
    path: Annotated[Path, STATEMENT_PATH_ARGUMENT],
    *,
    source: str | None = typer.Option(
        None, help=f"Force an extractor key (falls back to {_SOURCE_ENV_VAR})."
    ),
    password: str | None = typer.Option(
        None, help=f"PDF passphrase (falls back to {_PASSWORD_ENV_VAR})."
    ),
    ledger: Path | None = typer.Option(
        None, help="JSON ledger snapshot to reconcile against.", dir_okay=False
    ),
    include_duplicates: bool = typer.Option(
        False, help="Also print candidates that exactly match the ledger."
    ),
) -> None:
    """Extract transactions as JSON lines, optionally reconciled against a ledger."""

    raise typer.Exit(
        cmd_extract(
            path,
            source=_env_default(_SOURCE_ENV_VAR, source),
            password=_env_default(_PASSWORD_ENV_VAR, password),
            ledger=ledger,
            include_duplicates=include_duplicates,
        )
    )


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging before the
    subcommand runs.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    # Running as a module: `python -m statement_ingest.cli`
    app()
