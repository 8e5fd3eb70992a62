"""Public API and orchestration for the ``statement_ingest`` package.

The pipeline is: document text layer (PDF only) -> line reconstruction ->
extractor selection -> extraction -> optional reconciliation against the
persisted ledger. Each step lives in its own module; this module wires them
together and is the stable import surface for callers.
"""

from __future__ import annotations

import os
from collections.abc import Iterable

from .document import read_pdf_fragments
from .extractors.registry import select_extractor
from .layout import lines_to_text, reconstruct_lines
from .logging_setup import get_logger
from .models import ParsedTransaction, ReconciledTransaction, TextFragment
from .reconcile import PersistedRow, reconcile

logger = get_logger(__name__)


def extract_transactions(text: str, source: str | None = None) -> list[ParsedTransaction]:
    """Extract transactions from statement text already in reading order.

    ``source`` forces a registered extractor key (e.g. ``"hdfc"``); when it is
    ``None`` or unknown the layout is auto-detected. Never raises on
    malformed input: unmatched rows are skipped and an unrecognized layout
    yields whatever the generic fallback finds, possibly nothing.
    """

    extractor = select_extractor(text, source)
    transactions = extractor.extract(text)
    logger.info("%s extracted %d transactions", extractor.key, len(transactions))
    return transactions


def extract_from_fragments(
    pages: Iterable[Iterable[TextFragment]], source: str | None = None
) -> list[ParsedTransaction]:
    """Reconstruct lines from positioned fragments, then extract."""

    return extract_transactions(lines_to_text(reconstruct_lines(pages)), source)


def extract_from_pdf(
    path: str | os.PathLike[str],
    source: str | None = None,
    password: str | None = None,
) -> list[ParsedTransaction]:
    """Read a PDF statement and extract its transactions.

    Propagates :class:`~statement_ingest.errors.PasswordRequiredError` and
    :class:`~statement_ingest.errors.DocumentAccessError` from the document
    adapter unchanged.
    """

    return extract_from_fragments(read_pdf_fragments(path, password=password), source)


def import_statement(
    text: str,
    persisted: Iterable[PersistedRow],
    source: str | None = None,
) -> list[ReconciledTransaction]:
    """Extract from ``text`` and annotate the result against ``persisted``."""

    return reconcile(extract_transactions(text, source), persisted)


__all__ = [
    "extract_from_fragments",
    "extract_from_pdf",
    "extract_transactions",
    "import_statement",
]
