"""HDFC Bank savings statements.

Two layouts share the same bank markers:

- ``hdfc`` (multi-line stitching): narration wraps over several physical
  lines and the labeled fields ("Value Dt", "Ref") float around the amounts.
  A line that starts with a date opens a transaction; every following line up
  to the next opener belongs to it.
- ``hdfc-simple`` (fixed column): each transaction is exactly one line of
  ``date narration ref value-date withdrawal deposit balance``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, auto

from ..amounts import parse_amount
from ..dates import normalize_date
from ..heuristics import classify_two_amount_row
from ..logging_setup import get_logger
from ..models import UNKNOWN_PAYEE, ParsedTransaction, TransactionType
from .base import Extractor, build_transaction, clean_lines, squash

logger = get_logger("extractors.hdfc")

SOURCE = "HDFC Bank"

_DATE = r"\d{2}/\d{2}/\d{2,4}"

# Boilerplate removed before stitching: repeated column headers, page
# counters, customer/account detail blocks and the summary block.
_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"Txn\s+Date\s+Narration\s+Withdrawals\s+Deposits\s+Closing\s+Balance[ \t]*\n"),
    re.compile(r"[ \t]*Page\s+\d+\s+of\s+\d+[ \t]*"),
    re.compile(r"Customer ID\s*:\s*\d+[\s\S]*?MICR\s*:\s*\d+"),
    re.compile(
        r"(?:Customer ID|Account Number|Account Branch|Account Type|Statement From|"
        rf"Joint Holders|Nomination|RTGS/NEFT IFSC)[\s\S]*?(?=\n{_DATE}\s+|$)"
    ),
    re.compile(
        r"\b(?!(?:Value|Dt|Ref|Interest)\b)(?:[A-Z][a-z]+|[A-Z]{2,})"
        r"(?:[ \t]+(?!(?:Value|Dt|Ref|Interest)\b)(?:[A-Z][a-z]+|[A-Z]{2,}))*"
        r"[ \t]+Customer\s+ID\s*:\s*\d+"
    ),
    re.compile(r"Savings\s+Account\s+Details\s+Opening\s+Balance\s*:[\d,. \t]+", re.IGNORECASE),
    re.compile(
        r"\b(?!(?:Value|Dt|Ref|Interest)\b)(?:[A-Z][a-z]+|[A-Z]{2,})"
        r"(?:[ \t]+(?!(?:Value|Dt|Ref|Interest)\b)(?:[A-Z][a-z]+|[A-Z]{2,}))*"
        r"[ \t]+Savings\s+Account\s+Details"
    ),
    re.compile(r"SUMMARY\s+Opening\s+Balance[\s\S]*?(?=\d{2}/\d{2}/\d{4}|$)"),
)

_OPENER_RE = re.compile(rf"^({_DATE})\s+(.+)$")
_HEADER_RE = re.compile(
    r"Txn\s+Date|Narration|Withdrawals|Deposits|Closing\s+Balance|Opening\s+Balance|Limit",
    re.IGNORECASE,
)
_TAIL_RE = re.compile(r"\s+((?:[\d,.-]+\.\d{2}\s*){1,3})$")
_VALUE_DT_RE = re.compile(rf"Value\s+Dt\s+({_DATE})", re.IGNORECASE)
_VALUE_DT_DANGLING_RE = re.compile(r"Value\s+Dt\s*$", re.IGNORECASE)
_REF_RE = re.compile(r"\bRef\b\s+([A-Z0-9]*\d[A-Z0-9]*)\b", re.IGNORECASE)
_REF_DANGLING_RE = re.compile(r"\bRef\s*$", re.IGNORECASE)
_REF_TOKEN_RE = re.compile(r"[A-Z0-9]{8,20}")
_DATE_AT_END_RE = re.compile(rf"\s+({_DATE})$")
_DATE_ONLY_RE = re.compile(rf"({_DATE})")
_DATE_AT_START_RE = re.compile(rf"^({_DATE})")
_NUMERIC_REF_RE = re.compile(r"(?:\s|^)(\d{10,16})(?:\s|$)")
_ALPHA_REF_RE = re.compile(r"(?=[A-Z0-9]*\d)[A-Z][A-Z0-9]{10,20}")


def identify(text: str) -> bool:
    return "HDFC BANK" in text or "HDFC Bank" in text


def strip_boilerplate(text: str) -> str:
    for pattern in _NOISE_PATTERNS:
        text = pattern.sub("", text)
    return text


def _cut(text: str, m: re.Match[str]) -> str:
    return squash(text[: m.start()] + " " + text[m.end() :])


class _State(Enum):
    IDLE = auto()
    ACCUMULATING = auto()
    CLOSING = auto()


@dataclass
class _Block:
    date: str
    fragments: list[str]
    raw_lines: list[str] = field(default_factory=list)


@dataclass
class _Fields:
    amounts: list[str] = field(default_factory=list)
    reference: str = ""
    value_date: str = ""
    narration: list[str] = field(default_factory=list)


def _tail_line(fragments: list[str]) -> int | None:
    """Index of the line carrying the amounts tail.

    Narration can end in a decimal too ("RATE REVISED TO 3.50"), so the line
    with the most trailing amounts wins; ties go to the earliest line.
    """

    best, best_len = None, 0
    for j, fragment in enumerate(fragments):
        tail = _TAIL_RE.search(" " + fragment.strip())
        if tail and len(tail.group(1).split()) > best_len:
            best, best_len = j, len(tail.group(1).split())
    return best


def _collect_fields(fragments: list[str]) -> _Fields:
    """Pull amounts and labeled metadata out of a block's lines.

    Labels whose value sits alone on the following line ("Value Dt" then a
    date, "Ref" then a token) consume that line, which is why the lines are
    walked by index.
    """

    out = _Fields()
    frags = list(fragments)
    tail_at = _tail_line(frags)
    for j in range(len(frags)):
        current = frags[j].strip()
        if not current:
            continue
        following = frags[j + 1].strip() if j + 1 < len(frags) else None

        tail = _TAIL_RE.search(" " + current) if j == tail_at else None
        if tail:
            out.amounts = tail.group(1).split()
            current = squash((" " + current)[: tail.start()])

        m = _VALUE_DT_RE.search(current)
        if m:
            out.value_date = out.value_date or m.group(1)
            current = _cut(current, m)
        elif _VALUE_DT_DANGLING_RE.search(current) and following:
            nxt = _DATE_AT_START_RE.match(following)
            if nxt:
                out.value_date = out.value_date or nxt.group(1)
                frags[j + 1] = following[nxt.end() :].strip()
                following = frags[j + 1]
                current = _VALUE_DT_DANGLING_RE.sub("", current).strip()

        m = _REF_RE.search(current)
        if m:
            out.reference = out.reference or m.group(1)
            current = _cut(current, m)
        elif _REF_DANGLING_RE.search(current) and following and _REF_TOKEN_RE.fullmatch(following):
            out.reference = out.reference or following
            frags[j + 1] = ""
            following = ""
            current = _REF_DANGLING_RE.sub("", current).strip()

        if not out.value_date:
            m = _DATE_AT_END_RE.search(current)
            if m:
                out.value_date = m.group(1)
                current = _cut(current, m)
            elif following and _DATE_ONLY_RE.fullmatch(following):
                out.value_date = following
                frags[j + 1] = ""

        if not out.reference:
            m = _NUMERIC_REF_RE.search(current)
            if m:
                out.reference = m.group(1)
                current = _cut(current, m)
            elif _ALPHA_REF_RE.fullmatch(current):
                out.reference = current
                current = ""

        if current:
            out.narration.append(current)
    return out


def _resolve(block: _Block, prior_balance: Decimal | None) -> ParsedTransaction | None:
    fields = _collect_fields(block.fragments)
    narration = squash(" ".join(fields.narration))
    raw = "\n".join(block.raw_lines)

    amounts = [parse_amount(a) for a in fields.amounts]
    if not amounts or any(a is None for a in amounts):
        logger.debug("hdfc: dropping block without a numeric tail: %r", raw)
        return None

    balance = amounts[-1]
    if len(amounts) == 3:
        withdrawal, deposit = amounts[0], amounts[1]
        if (withdrawal > 0) == (deposit > 0):
            logger.debug("hdfc: dropping row without a single movement column: %r", raw)
            return None
        type_ = TransactionType.EXPENSE if withdrawal > 0 else TransactionType.INCOME
        amount = withdrawal if withdrawal > 0 else deposit
    elif len(amounts) == 2:
        amount = amounts[0]
        type_ = classify_two_amount_row(narration, balance, prior_balance)
    else:
        # Balance-only rows (opening balance, brought forward).
        return None

    date = normalize_date(block.date)
    return build_transaction(
        date=date,
        payee=narration or UNKNOWN_PAYEE,
        amount=amount,
        type_=type_,
        source=SOURCE,
        raw=raw,
        reference=fields.reference,
        value_date=normalize_date(fields.value_date) if fields.value_date else date,
        balance=balance,
    )


class _StitchingRun:
    """One pass of the stitching state machine over a statement's lines."""

    def __init__(self) -> None:
        self.state = _State.IDLE
        self.block: _Block | None = None
        self.prior_balance: Decimal | None = None
        self.transactions: list[ParsedTransaction] = []

    def feed(self, line: str) -> None:
        if not line:
            return
        opener = _OPENER_RE.match(line)
        if self.state is _State.IDLE:
            if opener:
                self._open(opener, line)
            return
        if opener:
            self._close()
            self._open(opener, line)
        elif not _HEADER_RE.search(line):
            assert self.block is not None
            self.block.fragments.append(line)
            self.block.raw_lines.append(line)

    def finish(self) -> list[ParsedTransaction]:
        if self.state is _State.ACCUMULATING:
            self._close()
        return self.transactions

    def _open(self, opener: re.Match[str], line: str) -> None:
        self.block = _Block(date=opener.group(1), fragments=[opener.group(2).strip()], raw_lines=[line])
        self.state = _State.ACCUMULATING

    def _close(self) -> None:
        self.state = _State.CLOSING
        assert self.block is not None
        tx = _resolve(self.block, self.prior_balance)
        if tx is not None:
            self.transactions.append(tx)
            self.prior_balance = tx.balance
        self.block = None
        self.state = _State.IDLE


def extract(text: str) -> list[ParsedTransaction]:
    run = _StitchingRun()
    for line in clean_lines(strip_boilerplate(text)):
        run.feed(line)
    transactions = run.finish()
    logger.debug("hdfc: extracted %d transactions", len(transactions))
    return transactions


# ---------------------------------------------------------------------------
# Single-line fixed-column layout
# ---------------------------------------------------------------------------

_AMOUNT = r"[\d,]+(?:\.\d+)?"
_ROW_RE = re.compile(
    rf"^({_DATE})\s+(.+?)\s+([\d-]+)\s+({_DATE})\s+({_AMOUNT})\s+({_AMOUNT})\s+({_AMOUNT})"
)


def extract_fixed_columns(text: str) -> list[ParsedTransaction]:
    transactions: list[ParsedTransaction] = []
    for line in clean_lines(text):
        m = _ROW_RE.match(line)
        if not m:
            continue
        date, narration, ref, value_date, debit_raw, credit_raw, balance_raw = m.groups()
        debit, credit = parse_amount(debit_raw), parse_amount(credit_raw)
        if debit is None or credit is None or (debit > 0) == (credit > 0):
            logger.debug("hdfc-simple: dropping row without a single movement column: %r", line)
            continue
        tx = build_transaction(
            date=normalize_date(date),
            payee=narration.strip(),
            amount=debit if debit > 0 else credit,
            type_=TransactionType.EXPENSE if debit > 0 else TransactionType.INCOME,
            source=SOURCE,
            raw=line,
            reference=ref,
            value_date=normalize_date(value_date),
            balance=parse_amount(balance_raw),
        )
        if tx is not None:
            transactions.append(tx)

    logger.debug("hdfc-simple: extracted %d transactions", len(transactions))
    return transactions


HDFC = Extractor(key="hdfc", name=SOURCE, identify=identify, extract=extract)
HDFC_SIMPLE = Extractor(
    key="hdfc-simple", name=SOURCE, identify=identify, extract=extract_fixed_columns
)

__all__ = ["HDFC", "HDFC_SIMPLE", "extract", "extract_fixed_columns", "identify", "strip_boilerplate"]
