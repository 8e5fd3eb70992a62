"""Duplicate detection against the persisted ledger.

Signatures are canonical tuples over the fields both sides share:

- exact: ``(date, amount as 2dp string, type, trimmed payee)``
- partial: ``(date, amount as 2dp string, type)``

An exact signature always implies the partial one. Nothing is persisted
here; each candidate is only annotated with a recommended default selection.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
from typing import Any, TypeAlias

from .amounts import format_amount
from .logging_setup import get_logger
from .models import (
    MatchStatus,
    ParsedTransaction,
    PersistedTransaction,
    ReconciledTransaction,
    TransactionType,
)

logger = get_logger(__name__)

ExactSignature: TypeAlias = tuple[str, str, str, str]
PartialSignature: TypeAlias = tuple[str, str, str]
PersistedRow: TypeAlias = PersistedTransaction | Mapping[str, Any] | Sequence[Any]


def _norm_str(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def partial_signature(
    date: str, amount: Decimal | str | float, type_: TransactionType | str
) -> PartialSignature:
    return (
        _norm_str(date),
        format_amount(Decimal(str(amount))),
        TransactionType(_norm_str(type_).lower()).value,
    )


def exact_signature(
    date: str, amount: Decimal | str | float, type_: TransactionType | str, payee: str
) -> ExactSignature:
    return (*partial_signature(date, amount, type_), _norm_str(payee))


def _signatures_of(tx: ParsedTransaction | PersistedTransaction) -> tuple[ExactSignature, PartialSignature]:
    exact = exact_signature(tx.date, tx.amount, tx.type, tx.payee)
    return exact, exact[:3]


def reconcile(
    candidates: Iterable[ParsedTransaction],
    persisted: Iterable[PersistedRow],
) -> list[ReconciledTransaction]:
    """Annotate each candidate as new, an exact duplicate or a probable one.

    ``persisted`` may hold :class:`PersistedTransaction` models, mappings or
    ``(date, amount, type, payee)`` sequences; it is read once and never
    modified. Results keep candidate order.
    """

    exact_seen: set[ExactSignature] = set()
    partial_seen: set[PartialSignature] = set()
    for row in persisted:
        exact, partial = _signatures_of(PersistedTransaction.from_row(row))
        exact_seen.add(exact)
        partial_seen.add(partial)

    results: list[ReconciledTransaction] = []
    for tx in candidates:
        exact, partial = _signatures_of(tx)
        if exact in exact_seen:
            results.append(ReconciledTransaction(tx, exact_match=True, selected=False))
        elif partial in partial_seen:
            results.append(ReconciledTransaction(tx, probable_duplicate=True))
        else:
            results.append(ReconciledTransaction(tx))

    counts = summarize(results)
    logger.info(
        "Reconciled %d candidates: %d new, %d exact, %d probable",
        len(results),
        counts[MatchStatus.NEW],
        counts[MatchStatus.EXACT],
        counts[MatchStatus.PROBABLE],
    )
    return results


def summarize(results: Iterable[ReconciledTransaction]) -> dict[MatchStatus, int]:
    counts = Counter(r.status for r in results)
    return {status: counts.get(status, 0) for status in MatchStatus}


__all__ = ["exact_signature", "partial_signature", "reconcile", "summarize"]
