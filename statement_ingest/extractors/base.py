"""Shared descriptor type and small helpers for statement extractors.

An extractor is a pair of pure functions behind a frozen descriptor:

- ``identify(text) -> bool``: a cheap keyword test used for auto-detection.
- ``extract(text) -> list[ParsedTransaction]``: full extraction.

Extractors hold no state between calls and never raise on malformed input;
rows that do not resolve to a positive amount are skipped.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import TypeAlias

from ..models import ParsedTransaction, TransactionType

IdentifyFn: TypeAlias = Callable[[str], bool]
ExtractFn: TypeAlias = Callable[[str], list[ParsedTransaction]]


@dataclass(frozen=True, slots=True)
class Extractor:
    """Registry entry for one statement layout."""

    key: str
    name: str
    identify: IdentifyFn
    extract: ExtractFn


def clean_lines(text: str) -> list[str]:
    """Split ``text`` into stripped lines, keeping blanks as empty strings."""

    return [line.strip() for line in text.splitlines()]


def squash(text: str) -> str:
    # Collapse runs of whitespace (including newlines) to single spaces.
    return " ".join(text.split())


def build_transaction(
    *,
    date: str,
    payee: str,
    amount: Decimal | None,
    type_: TransactionType,
    source: str,
    raw: str,
    reference: str | None = None,
    value_date: str | None = None,
    balance: Decimal | None = None,
) -> ParsedTransaction | None:
    """Construct a transaction, or ``None`` when the amount is missing or zero."""

    if amount is None or amount <= 0:
        return None
    return ParsedTransaction(
        date=date,
        payee=payee,
        amount=amount,
        type=type_,
        source=source,
        raw=raw,
        reference=reference or None,
        value_date=value_date or None,
        balance=balance,
    )


__all__ = ["Extractor", "ExtractFn", "IdentifyFn", "build_transaction", "clean_lines", "squash"]
