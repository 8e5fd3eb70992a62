"""Wallet app statements (Google Pay, PhonePe).

Wallet exports print each transaction as a loose block of lines: a date line
opens it, a payment-method line ("Paid by HDFC Bank 4230", "Credited to
XXXX5678") closes it, and the counterparty, amount, time and transaction id
float in between in an order that varies between app versions and between
the app's PDF and its text export. Blocks are therefore bounded by
consecutive date openers and each field is searched for inside the block.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..amounts import parse_amount
from ..dates import normalize_date
from ..logging_setup import get_logger
from ..models import UNKNOWN_PAYEE, ParsedTransaction, TransactionType
from .base import Extractor, build_transaction, squash

logger = get_logger("extractors.wallets")

_MONTH = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)"

_TIME_RE = re.compile(r"\d{1,2}:\d{2}\s*(?:AM|PM)", re.IGNORECASE)
_DIRECTION_RE = re.compile(r"Paid to|Received from", re.IGNORECASE)
_DIRECTION_WORD_RE = re.compile(r"\b(DEBIT|CREDIT)\b")
_AMOUNT_RE = re.compile(r"(?:INR|₹)\s*([\d,]+(?:\.\d+)?)")
_AMOUNT_FALLBACK_RE = re.compile(r"(?:DEBIT|CREDIT)[^\d]*?([\d,]+(?:\.\d+)?)", re.IGNORECASE)
_TXN_ID_RE = re.compile(r"Transaction ID\s*:?\s*([A-Z0-9]+)", re.IGNORECASE)

_MARKER = r"(?:Paid to|Payment to|Received from|Paid -)"
_STOP = r"(?:Debit|Credit|INR|₹|UPI Transaction ID|Transaction ID|Paid (?:by|to))"
_PAYEE_INLINE_RE = re.compile(rf"{_MARKER}\s+(.+?)(?=\s+{_STOP}|$)", re.IGNORECASE)
_MARKER_ONLY_RE = re.compile(rf"{_MARKER}", re.IGNORECASE)
_MARKER_PREFIX_RE = re.compile(rf"^(?:{_MARKER}|Paid)\s+", re.IGNORECASE)
_TRAILING_NOISE_RE = re.compile(r"\s*(?:Debit|Credit|INR|₹).*$", re.IGNORECASE)
_LEADING_NOISE_RE = re.compile(r"^(?:Debit|Credit|INR|₹)", re.IGNORECASE)
_FIRST_LINE_RE = re.compile(r"^\s*(.+?)(?=\s*(?:Debit|Credit|INR|₹)|$)", re.IGNORECASE)
_TXN_ID_LINE_RE = re.compile(r"^(?:UPI\s+)?Transaction ID", re.IGNORECASE)
_TIME_OR_ID_LINE_RE = re.compile(r"^(?:\d{1,2}:\d{2}|(?:UPI\s+)?Transaction ID)", re.IGNORECASE)
_NUMERIC_RE = re.compile(r"[\d,.]+")
_NOT_A_NAME_RE = re.compile(rf"^(?:Debit|Credit|INR|₹|Page \d+|{_MONTH}\b)", re.IGNORECASE)
_DATE_LIKE_RE = re.compile(rf"^{_MONTH}[a-z]*\.?\s+\d", re.IGNORECASE)
_PLACEHOLDER_RE = re.compile(r"^(?:Debit|Credit|Unknown|)$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class WalletLayout:
    """What distinguishes one wallet export from another."""

    source: str
    opener: re.Pattern[str]
    closing: re.Pattern[str]
    noise: tuple[re.Pattern[str], ...] = ()


def split_blocks(text: str, opener: re.Pattern[str]) -> list[tuple[re.Match[str], str]]:
    """Return ``(opener match, block text)`` pairs in document order."""

    starts = list(opener.finditer(text))
    blocks = []
    for i, m in enumerate(starts):
        end = starts[i + 1].start() if i + 1 < len(starts) else len(text)
        blocks.append((m, text[m.start() : end]))
    return blocks


def _is_numeric(value: str) -> bool:
    return bool(_NUMERIC_RE.fullmatch(value))


def _payee_from_lines(lines: list[str]) -> str:
    # Marker and name on one line, or the marker alone with the name below.
    for i, line in enumerate(lines):
        m = _PAYEE_INLINE_RE.search(line)
        if m and m.group(1).strip():
            return m.group(1).strip()
        if _MARKER_ONLY_RE.fullmatch(line) and i + 1 < len(lines):
            following = lines[i + 1]
            if not _TIME_OR_ID_LINE_RE.match(following):
                return _TRAILING_NOISE_RE.sub("", _LEADING_NOISE_RE.sub("", following)).strip()
    return ""


def _payee_from_opener(first_line: str) -> str:
    m = _FIRST_LINE_RE.match(first_line)
    if not m:
        return ""
    candidate = _MARKER_PREFIX_RE.sub("", m.group(1)).strip()
    return "" if _is_numeric(candidate) else candidate


def _payee_before_txn_id(lines: list[str]) -> str:
    idx = next((i for i, line in enumerate(lines) if _TXN_ID_LINE_RE.match(line)), -1)
    if idx <= 1:
        return ""
    target = idx - 1
    while target > 0 and (_TIME_OR_ID_LINE_RE.match(lines[target]) or _is_numeric(lines[target])):
        target -= 1
    if target <= 0 or _NOT_A_NAME_RE.match(lines[target]):
        return ""
    candidate = _MARKER_PREFIX_RE.sub("", lines[target]).strip()
    candidate = _TRAILING_NOISE_RE.sub("", candidate).strip()
    return "" if _is_numeric(candidate) else candidate


def extract_payee(block: str, opener_end: int) -> str:
    """Best-effort counterparty name for one block.

    ``block`` must already have its time-of-day tokens removed. Falls back,
    in order, to: marker plus name, marker line then name line, the text
    after the date on the opening line, the line above the transaction id.
    Returns ``"Unknown"`` when nothing plausible is left.
    """

    lines = [line.strip() for line in block.splitlines() if line.strip()]
    payee = _payee_from_lines(lines)
    if not payee:
        payee = _payee_from_opener(block[opener_end:].split("\n", 1)[0])
    if not payee or _PLACEHOLDER_RE.fullmatch(payee):
        payee = _payee_before_txn_id(lines) or payee

    payee = squash(payee)
    if _PLACEHOLDER_RE.fullmatch(payee) or _is_numeric(payee) or _DATE_LIKE_RE.match(payee):
        return UNKNOWN_PAYEE
    return payee


def _direction(block: str) -> TransactionType:
    m = _DIRECTION_RE.search(block)
    if m:
        if m.group(0).lower() == "paid to":
            return TransactionType.EXPENSE
        return TransactionType.INCOME
    m = _DIRECTION_WORD_RE.search(block)
    if m and m.group(1) == "CREDIT":
        return TransactionType.INCOME
    return TransactionType.EXPENSE


def _has_closing(block: str, layout: WalletLayout) -> bool:
    # "Paid to <name>" is the direction, not the payment method; the closing
    # line must come after it.
    direction = _DIRECTION_RE.search(block)
    return layout.closing.search(block, direction.end() if direction else 0) is not None


def extract_blocks(text: str, layout: WalletLayout) -> list[ParsedTransaction]:
    for pattern in layout.noise:
        text = pattern.sub("", text)

    transactions: list[ParsedTransaction] = []
    for opener, raw_block in split_blocks(text, layout.opener):
        if not _has_closing(raw_block, layout):
            logger.debug("%s: block without a payment-method line: %r", layout.source, raw_block)
            continue

        # Times look like amounts to the fallbacks below; strip them first.
        offset = opener.end() - opener.start()
        block = raw_block[:offset] + _TIME_RE.sub("", raw_block[offset:])

        amount_m = _AMOUNT_RE.search(block) or _AMOUNT_FALLBACK_RE.search(block)
        if not amount_m:
            logger.debug("%s: block without an amount: %r", layout.source, raw_block)
            continue

        txn_id = _TXN_ID_RE.search(block)
        tx = build_transaction(
            date=normalize_date(opener.group(0)),
            payee=extract_payee(block, offset),
            amount=parse_amount(amount_m.group(1)),
            type_=_direction(block),
            source=layout.source,
            raw=raw_block.strip(),
            reference=txn_id.group(1) if txn_id else None,
        )
        if tx is not None:
            transactions.append(tx)

    logger.debug("%s: extracted %d transactions", layout.source, len(transactions))
    return transactions


# ---------------------------------------------------------------------------
# Google Pay
# ---------------------------------------------------------------------------

GPAY_LAYOUT = WalletLayout(
    source="GPay",
    # "02 Dec, 2025"; the statement period ("01 December 2025") has no comma.
    opener=re.compile(r"\d{1,2}\s+[A-Za-z]{3},\s+\d{4}"),
    closing=re.compile(r"\bPaid (?:by|to)\b"),
)


def identify_gpay(text: str) -> bool:
    return "Google Pay" in text or "UPI Transaction ID" in text


def extract_gpay(text: str) -> list[ParsedTransaction]:
    return extract_blocks(text, GPAY_LAYOUT)


# ---------------------------------------------------------------------------
# PhonePe
# ---------------------------------------------------------------------------

PHONEPE_LAYOUT = WalletLayout(
    source="PhonePe",
    opener=re.compile(rf"{_MONTH}\s+\d{{1,2}},\s+\d{{4}}", re.IGNORECASE),
    closing=re.compile(r"Paid by|Debited from|Credited to", re.IGNORECASE),
    noise=(
        re.compile(r"Page\s+\d+\s+of\s+\d+", re.IGNORECASE),
        re.compile(
            r"This is a system generated statement\.[^\n]*?(?:statement\.|\n|$)", re.IGNORECASE
        ),
        re.compile(r"Transaction Statement for[^\n]*", re.IGNORECASE),
        # Statement period, e.g. "Feb 21, 2025 - Feb 21, 2026".
        re.compile(
            rf"{_MONTH}\s+\d{{1,2}},\s+\d{{4}}\s*-\s*{_MONTH}\s+\d{{1,2}},\s+\d{{4}}",
            re.IGNORECASE,
        ),
        re.compile(r"Date\s+Transaction Details\s+Type\s+Amount", re.IGNORECASE),
    ),
)


def identify_phonepe(text: str) -> bool:
    return "PhonePe" in text and "Transaction Details" in text


def extract_phonepe(text: str) -> list[ParsedTransaction]:
    return extract_blocks(text, PHONEPE_LAYOUT)


GPAY = Extractor(key="gpay", name=GPAY_LAYOUT.source, identify=identify_gpay, extract=extract_gpay)
PHONEPE = Extractor(
    key="phonepe", name=PHONEPE_LAYOUT.source, identify=identify_phonepe, extract=extract_phonepe
)

__all__ = [
    "GPAY",
    "GPAY_LAYOUT",
    "PHONEPE",
    "PHONEPE_LAYOUT",
    "WalletLayout",
    "extract_blocks",
    "extract_gpay",
    "extract_payee",
    "extract_phonepe",
    "identify_gpay",
    "identify_phonepe",
    "split_blocks",
]
