"""Data models for ``statement_ingest``.

``ParsedTransaction`` is the canonical output of every extractor. Records are
frozen dataclasses with explicit field order, like the rest of the package's
views; the store snapshot that crosses the process boundary is validated with
pydantic (:class:`PersistedTransaction`).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, field_validator

from .amounts import format_amount, quantize_amount

UNCATEGORIZED = "Uncategorized"
COMPLETED = "completed"
UNKNOWN_PAYEE = "Unknown"


class TransactionType(StrEnum):
    """Direction of money flow relative to the statement holder."""

    INCOME = "income"
    EXPENSE = "expense"


class TextFragment(NamedTuple):
    """A positioned run of text as emitted by a PDF text layer.

    ``y`` uses bottom-origin page coordinates: larger values are nearer the
    top of the page.
    """

    text: str
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class ParsedTransaction:
    """A single transaction recovered from statement text.

    ``amount`` is always a positive magnitude quantized to 2 places; the
    direction lives in ``type``. ``raw`` keeps the matched text span for
    audit and is never interpreted downstream.
    """

    date: str
    payee: str
    amount: Decimal
    type: TransactionType
    source: str
    raw: str
    category: str = UNCATEGORIZED
    status: str = COMPLETED
    reference: str | None = None
    value_date: str | None = None
    balance: Decimal | None = None

    def __post_init__(self) -> None:
        amount = quantize_amount(self.amount)
        if amount <= 0:
            raise ValueError(f"ParsedTransaction.amount must be positive, got {self.amount!r}")
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "type", TransactionType(self.type))

    def as_record(self) -> dict[str, Any]:
        """Return a JSON-friendly mapping (amounts as 2dp strings)."""

        return {
            "date": self.date,
            "payee": self.payee,
            "amount": format_amount(self.amount),
            "type": self.type.value,
            "category": self.category,
            "status": self.status,
            "source": self.source,
            "reference": self.reference,
            "value_date": self.value_date,
            "balance": format_amount(self.balance) if self.balance is not None else None,
            "raw": self.raw,
        }


class PersistedTransaction(BaseModel):
    """One row of the already-persisted ledger snapshot supplied by the store."""

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    date: str
    amount: Decimal
    type: TransactionType
    payee: str

    @field_validator("amount")
    @classmethod
    def _two_places(cls, v: Decimal) -> Decimal:
        return quantize_amount(abs(v))

    @classmethod
    def from_row(cls, row: PersistedTransaction | Mapping[str, Any] | tuple | list) -> PersistedTransaction:
        """Accept a model, a mapping, or a ``(date, amount, type, payee)`` sequence."""

        if isinstance(row, PersistedTransaction):
            return row
        if isinstance(row, Mapping):
            return cls.model_validate(dict(row))
        date, amount, type_, payee = row
        return cls(date=str(date), amount=Decimal(str(amount)), type=type_, payee=str(payee))


class MatchStatus(StrEnum):
    NEW = "new"
    EXACT = "exact"
    PROBABLE = "probable"


@dataclass(frozen=True, slots=True)
class ReconciledTransaction:
    """A candidate annotated against the persisted ledger.

    ``selected`` is only a recommended default for the import dialog; exact
    matches default to deselected, probable duplicates stay selected so a
    human can review them.
    """

    transaction: ParsedTransaction
    exact_match: bool = False
    probable_duplicate: bool = False
    selected: bool = True

    @property
    def status(self) -> MatchStatus:
        if self.exact_match:
            return MatchStatus.EXACT
        if self.probable_duplicate:
            return MatchStatus.PROBABLE
        return MatchStatus.NEW

    def as_record(self) -> dict[str, Any]:
        record = self.transaction.as_record()
        record.update(
            {
                "exact_match": self.exact_match,
                "probable_duplicate": self.probable_duplicate,
                "selected": self.selected,
            }
        )
        return record


__all__ = [
    "COMPLETED",
    "UNCATEGORIZED",
    "UNKNOWN_PAYEE",
    "MatchStatus",
    "ParsedTransaction",
    "PersistedTransaction",
    "ReconciledTransaction",
    "TextFragment",
    "TransactionType",
]
