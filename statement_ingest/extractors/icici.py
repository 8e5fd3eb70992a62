"""ICICI Bank savings statements.

The statement is a long account narrative; transactions live in one bounded
section that opens with the "Statement of Transactions in Savings Account"
banner plus the ``DATE MODE PARTICULARS DEPOSITS WITHDRAWALS BALANCE`` column
header, and closes at the "Total:" line, the linked fixed deposit section, or
a page counter.

Within the section each row is ``date mode/particulars [deposit] [withdrawal]
balance``. Empty columns are simply absent, so the number of trailing decimal
tokens decides the row shape:

- one token: balance only (brought forward), skipped;
- two tokens: one movement plus balance, direction read from the particulars;
- three tokens: deposit, withdrawal, balance by position.
"""

from __future__ import annotations

import re

from ..amounts import find_decimal_tokens, parse_amount
from ..dates import normalize_date
from ..heuristics import classify_by_particulars
from ..logging_setup import get_logger
from ..models import ParsedTransaction, TransactionType
from .base import Extractor, build_transaction, clean_lines, squash

logger = get_logger("extractors.icici")

SOURCE = "ICICI Bank"

_SECTION_RE = re.compile(
    r"Statement of Transactions in Savings\s+Account(?:\s+[\dX]+\s+in\s+INR)?"
    r"[\s\S]*?DATE\s+MODE\s+PARTICULARS\s+DEPOSITS\s+WITHDRAWALS\s+BALANCE"
    r"([\s\S]*?)(?=Total:|Statement of Linked Fixed Deposits|Page \d+ of \d+|$)",
    re.IGNORECASE,
)
_DATE_RE = re.compile(r"^(\d{2}[-/]\d{2}[-/]\d{4})")
_MODE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(B/F|CREDIT|DEBIT|NEFT|RTGS|UPI|IMPS|ATM|CHEQUE|CARD|SWEEP|CLOSURE)", re.IGNORECASE),
    re.compile(r"^(CREDIT CARD|DEBIT CARD|AUTO DEBIT|AUTO CREDIT)", re.IGNORECASE),
)


def identify(text: str) -> bool:
    return "ICICI Bank" in text or "ICICI BANK" in text


def split_mode(mode_particulars: str) -> tuple[str, str]:
    """Split the combined column into ``(mode, particulars)``.

    An account-number prefix ends at a colon; otherwise a known transaction
    mode prefix is peeled off; otherwise the first word is the mode.
    """

    if ":" in mode_particulars:
        mode, _, rest = mode_particulars.partition(":")
        return mode.strip(), rest.strip()
    for pattern in _MODE_PATTERNS:
        m = pattern.match(mode_particulars)
        if m:
            return m.group(1).strip(), mode_particulars[m.end() :].strip()
    parts = mode_particulars.split(maxsplit=1)
    if len(parts) > 1:
        return parts[0], parts[1]
    return mode_particulars, ""


def _looks_like_header(mode_particulars: str) -> bool:
    upper = mode_particulars.upper()
    return any(word in upper for word in ("DATE", "MODE", "PARTICULARS"))


def extract(text: str) -> list[ParsedTransaction]:
    section = _SECTION_RE.search(text)
    if not section:
        logger.debug("icici: transaction section not found")
        return []

    transactions: list[ParsedTransaction] = []
    for line in clean_lines(section.group(1)):
        if not line or line.upper().startswith("TOTAL") or "DATE MODE" in line.upper():
            continue
        date_m = _DATE_RE.match(line)
        if not date_m:
            continue
        tokens = find_decimal_tokens(line)
        if not tokens:
            continue

        mode_particulars = squash(line[date_m.end() : tokens[0].start()])
        if not mode_particulars or _looks_like_header(mode_particulars):
            continue

        values = [parse_amount(t.group(0)) for t in tokens[-3:]]
        if any(v is None for v in values):
            continue
        if len(values) == 3:
            deposit, withdrawal = values[0], values[1]
            if (deposit > 0) == (withdrawal > 0):
                logger.debug("icici: dropping row without a single movement column: %r", line)
                continue
            type_ = TransactionType.INCOME if deposit > 0 else TransactionType.EXPENSE
            amount = deposit if deposit > 0 else withdrawal
        elif len(values) == 2:
            amount = values[0]
            type_ = classify_by_particulars(mode_particulars)
        else:
            continue

        _mode, particulars = split_mode(mode_particulars)
        tx = build_transaction(
            date=normalize_date(date_m.group(1)),
            payee=particulars or mode_particulars,
            amount=amount,
            type_=type_,
            source=SOURCE,
            raw=line,
            balance=values[-1],
        )
        if tx is not None:
            transactions.append(tx)

    logger.debug("icici: extracted %d transactions", len(transactions))
    return transactions


ICICI = Extractor(key="icici", name=SOURCE, identify=identify, extract=extract)

__all__ = ["ICICI", "extract", "identify", "split_mode"]
