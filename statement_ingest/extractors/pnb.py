"""Punjab National Bank (PNB ONE) statements.

Each row opens with ``date [instrument id] amount CR|DR balance [remarks]``;
the remarks column wraps onto as many following lines as it needs with no
delimiter other than the next opening row or a footer sentinel.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto

from ..amounts import parse_amount
from ..dates import normalize_date
from ..logging_setup import get_logger
from ..models import UNKNOWN_PAYEE, ParsedTransaction, TransactionType
from .base import Extractor, build_transaction, clean_lines, squash

logger = get_logger("extractors.pnb")

SOURCE = "PNB"

_OPENER_RE = re.compile(
    r"^(\d{2}/\d{2}/\d{4})(?:\s+(.*?))?\s+([\d.,]+)\s+(CR|DR)\s+([\d.,]+)(?:\s+(.+))?$"
)
_FOOTER_MARKER = "***Generated through PNB ONE***"
_COLUMN_HEADER_MARKER = "Amount(INR)"


def identify(text: str) -> bool:
    return "Generated through PNB ONE" in text or "PNB ONE" in text or "PUNB0" in text


def _is_footer(line: str) -> bool:
    return _FOOTER_MARKER in line or line.startswith("Date:") or line.startswith("●")


class _State(Enum):
    IDLE = auto()
    ACCUMULATING = auto()
    CLOSING = auto()


@dataclass
class _Row:
    date: str
    instrument: str
    amount: str
    marker: str
    balance: str
    remarks: list[str] = field(default_factory=list)
    raw_lines: list[str] = field(default_factory=list)


class _ContinuationRun:
    """Opening rows start a remarks accumulator; anything else extends it."""

    def __init__(self) -> None:
        self.state = _State.IDLE
        self.row: _Row | None = None
        self.transactions: list[ParsedTransaction] = []

    def feed(self, line: str) -> None:
        if not line:
            return
        opener = _OPENER_RE.match(line)
        if opener:
            if self.state is _State.ACCUMULATING:
                self._close()
            self._open(opener, line)
            return
        if self.state is not _State.ACCUMULATING:
            return
        if _is_footer(line):
            self._close()
        elif _COLUMN_HEADER_MARKER not in line:
            self.row.remarks.append(line)
            self.row.raw_lines.append(line)

    def finish(self) -> list[ParsedTransaction]:
        if self.state is _State.ACCUMULATING:
            self._close()
        return self.transactions

    def _open(self, opener: re.Match[str], line: str) -> None:
        date, instrument, amount, marker, balance, remarks = opener.groups()
        self.row = _Row(
            date=date,
            instrument=(instrument or "").strip(),
            amount=amount,
            marker=marker,
            balance=balance,
            remarks=[remarks.strip()] if remarks else [],
            raw_lines=[line],
        )
        self.state = _State.ACCUMULATING

    def _close(self) -> None:
        self.state = _State.CLOSING
        row = self.row
        tx = build_transaction(
            date=normalize_date(row.date),
            payee=squash(" ".join(row.remarks)) or UNKNOWN_PAYEE,
            amount=parse_amount(row.amount),
            type_=TransactionType.EXPENSE if row.marker == "DR" else TransactionType.INCOME,
            source=SOURCE,
            raw="\n".join(row.raw_lines),
            reference=row.instrument,
            balance=parse_amount(row.balance),
        )
        if tx is None:
            logger.debug("pnb: dropping zero-amount row: %r", row.raw_lines[0])
        else:
            self.transactions.append(tx)
        self.row = None
        self.state = _State.IDLE


def extract(text: str) -> list[ParsedTransaction]:
    run = _ContinuationRun()
    for line in clean_lines(text):
        run.feed(line)
    transactions = run.finish()
    logger.debug("pnb: extracted %d transactions", len(transactions))
    return transactions


PNB = Extractor(key="pnb", name=SOURCE, identify=identify, extract=extract)

__all__ = ["PNB", "extract", "identify"]
