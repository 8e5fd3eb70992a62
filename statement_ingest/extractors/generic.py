"""Fallback for layouts no institution extractor recognizes.

Picks up any line carrying ``DD/MM/YYYY`` (or ``DD-MM-YYYY``), a description,
an amount and an optional ``DR``/``CR`` marker. An empty result is a valid
outcome here, not an error.
"""

from __future__ import annotations

import re

from ..amounts import parse_amount
from ..dates import normalize_date
from ..logging_setup import get_logger
from ..models import ParsedTransaction, TransactionType
from .base import Extractor, build_transaction, clean_lines

logger = get_logger("extractors.generic")

SOURCE = "Generic"

# The amount keeps its thousands separators ("1,200.50") and must end the
# number; the marker is a whole word.
_ROW_RE = re.compile(
    r"(\d{2}[-/]\d{2}[-/]\d{4})\s+(.+?)\s+(\d[\d,]*(?:\.\d+)?)(?![\d.,])(?:\s*(DR|CR)\b)?",
    re.IGNORECASE,
)


def identify(text: str) -> bool:
    return True


def extract(text: str) -> list[ParsedTransaction]:
    transactions: list[ParsedTransaction] = []
    for line in clean_lines(text):
        m = _ROW_RE.search(line)
        if not m:
            continue
        date, payee, amount, indicator = m.groups()
        is_expense = (indicator or "").upper() == "DR" or "debit" in line.lower()
        tx = build_transaction(
            date=normalize_date(date),
            payee=payee.strip(),
            amount=parse_amount(amount),
            type_=TransactionType.EXPENSE if is_expense else TransactionType.INCOME,
            source=SOURCE,
            raw=line,
        )
        if tx is not None:
            transactions.append(tx)

    logger.debug("generic: extracted %d transactions", len(transactions))
    return transactions


GENERIC = Extractor(key="generic", name=SOURCE, identify=identify, extract=extract)

__all__ = ["GENERIC", "extract", "identify"]
