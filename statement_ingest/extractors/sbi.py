"""State Bank of India statements.

Rows read ``date narration [ref] credit debit balance`` with a dash in the
unused movement column (and in an empty ref column).
"""

from __future__ import annotations

import re

from ..amounts import parse_amount
from ..dates import normalize_date
from ..logging_setup import get_logger
from ..models import ParsedTransaction, TransactionType
from .base import Extractor, build_transaction, clean_lines

logger = get_logger("extractors.sbi")

SOURCE = "SBI"

_FIELD = r"-|[\d,]+(?:\.\d+)?"
_BALANCE_AT_END_RE = re.compile(r"[\d,]*\d\.\d{2}$")
_SUFFIX_RE = re.compile(rf"(?:^|\s)({_FIELD})\s+({_FIELD})\s+([\d,]+\.\d{{2}})$")
_DATE_RE = re.compile(r"^(\d{2}-\d{2}-\d{2,4})")
_SKIP_PREFIXES = ("null", "*All dates")


def identify(text: str) -> bool:
    return "STATE BANK OF INDIA" in text or "State Bank of India" in text or "SBI" in text


def extract(text: str) -> list[ParsedTransaction]:
    transactions: list[ParsedTransaction] = []
    for line in clean_lines(text):
        if not line or line.startswith(_SKIP_PREFIXES):
            continue
        if not _BALANCE_AT_END_RE.search(line):
            continue
        suffix = _SUFFIX_RE.search(line)
        date_m = _DATE_RE.match(line)
        if not suffix or not date_m:
            continue

        credit_raw, debit_raw, balance_raw = suffix.groups()
        credit, debit = parse_amount(credit_raw), parse_amount(debit_raw)
        if credit is None or debit is None or (credit > 0) == (debit > 0):
            logger.debug("sbi: dropping row without a single movement column: %r", line)
            continue

        # Whatever sits between the date and the suffix; a trailing lone
        # dash is the empty ref column.
        payee = line[date_m.end() : suffix.start()].strip()
        if payee.endswith("-"):
            payee = payee[:-1].rstrip()

        tx = build_transaction(
            date=normalize_date(date_m.group(1)),
            payee=payee,
            amount=credit if credit > 0 else debit,
            type_=TransactionType.INCOME if credit > 0 else TransactionType.EXPENSE,
            source=SOURCE,
            raw=line,
            balance=parse_amount(balance_raw),
        )
        if tx is not None:
            transactions.append(tx)

    logger.debug("sbi: extracted %d transactions", len(transactions))
    return transactions


SBI = Extractor(key="sbi", name=SOURCE, identify=identify, extract=extract)

__all__ = ["SBI", "extract", "identify"]
