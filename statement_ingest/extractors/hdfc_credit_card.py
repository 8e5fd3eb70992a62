"""HDFC credit card statements.

Card ledgers print one row per transaction with a pipe between date and time
and a ``C <amount> l`` tail (currency glyph and rupee marker rendered as
letters by the text layer). Domestic rows flag refunds with a ``+`` before
the ``C``; international rows may show the foreign amount before the INR one.
"""

from __future__ import annotations

import re

from ..amounts import parse_amount
from ..dates import normalize_date
from ..logging_setup import get_logger
from ..models import ParsedTransaction, TransactionType
from .base import Extractor, build_transaction, squash

logger = get_logger("extractors.hdfc_credit_card")

SOURCE = "HDFC Credit Card"

_DOMESTIC_RE = re.compile(
    r"(\d{2}/\d{2}/\d{4})\|\s+(\d{2}:\d{2})\s+(.+?)\s+(\+\s*)?C\s+([\d,]+\.\d{2})\s+l"
)
_INTERNATIONAL_RE = re.compile(
    r"(\d{2}/\d{2}/\d{4})\s+\|\s+(\d{2}:\d{2})\s+(.+?)\s+"
    r"(?:USD\s+([\d,]+\.\d{2})\s+)?C\s+([\d,]+\.\d{2})\s+l"
)


def identify(text: str) -> bool:
    return (
        "Domestic Transactions" in text
        or "International Transactions" in text
        or ("HDFC BANK" in text and "Credit Card" in text)
    )


def extract(text: str) -> list[ParsedTransaction]:
    transactions: list[ParsedTransaction] = []

    for m in _DOMESTIC_RE.finditer(text):
        date, _time, description, plus, amount = m.groups()
        tx = build_transaction(
            date=normalize_date(date),
            payee=squash(description),
            amount=parse_amount(amount),
            type_=TransactionType.INCOME if plus else TransactionType.EXPENSE,
            source=SOURCE,
            raw=m.group(0),
        )
        if tx is not None:
            transactions.append(tx)

    # Foreign currency rows are always charges; the INR column is the amount.
    for m in _INTERNATIONAL_RE.finditer(text):
        date, _time, description, _usd, inr = m.groups()
        tx = build_transaction(
            date=normalize_date(date),
            payee=squash(description),
            amount=parse_amount(inr),
            type_=TransactionType.EXPENSE,
            source=SOURCE,
            raw=m.group(0),
        )
        if tx is not None:
            transactions.append(tx)

    logger.debug("hdfc-credit-card: extracted %d transactions", len(transactions))
    return transactions


HDFC_CREDIT_CARD = Extractor(
    key="hdfc-credit-card", name=SOURCE, identify=identify, extract=extract
)

__all__ = ["HDFC_CREDIT_CARD", "extract", "identify"]
