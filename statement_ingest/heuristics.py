"""Credit/debit disambiguation shared across extractors.

Some layouts print only two trailing amounts (one movement column plus the
closing balance), so the row alone does not say whether money came in or went
out. These helpers make a best-effort call from the narration and, failing
that, from the movement of the running balance. They are inference, not
guarantees: the balance fallback assumes rows are processed in document
order, and statements sorted any other way will degrade silently.
"""

from __future__ import annotations

from decimal import Decimal

from .models import TransactionType

# Narration fragments that mark the lone movement column as a deposit.
CREDIT_KEYWORDS: tuple[str, ...] = ("interest", "credit", "deposit", "neft cr", "ach c-")

# Particulars that mark the lone movement column as a withdrawal on
# section-bounded statements; everything else defaults to a deposit there.
DEBIT_KEYWORDS: tuple[str, ...] = (
    "debit",
    "withdrawal",
    "payment",
    "card atd",
    "auto debit",
)


def has_credit_keyword(narration: str) -> bool:
    lowered = narration.lower()
    return any(k in lowered for k in CREDIT_KEYWORDS)


def has_debit_keyword(narration: str) -> bool:
    lowered = narration.lower()
    return any(k in lowered for k in DEBIT_KEYWORDS)


def classify_two_amount_row(
    narration: str,
    new_balance: Decimal | None,
    prior_balance: Decimal | None,
) -> TransactionType:
    """Decide the direction of a row that carries one movement plus a balance.

    Income when the narration contains a credit keyword, or when the closing
    balance rose strictly above the previously emitted row's balance.
    Expense otherwise, including when no prior balance is known.
    """

    if has_credit_keyword(narration):
        return TransactionType.INCOME
    if new_balance is not None and prior_balance is not None and new_balance > prior_balance:
        return TransactionType.INCOME
    return TransactionType.EXPENSE


def classify_by_particulars(particulars: str) -> TransactionType:
    """Direction for section-bounded rows: debit words mean expense, else income."""

    if has_debit_keyword(particulars):
        return TransactionType.EXPENSE
    return TransactionType.INCOME


__all__ = [
    "CREDIT_KEYWORDS",
    "DEBIT_KEYWORDS",
    "classify_by_particulars",
    "classify_two_amount_row",
    "has_credit_keyword",
    "has_debit_keyword",
]
