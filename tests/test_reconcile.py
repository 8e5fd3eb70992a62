from decimal import Decimal

from statement_ingest.models import (
    MatchStatus,
    ParsedTransaction,
    PersistedTransaction,
    TransactionType,
)
from statement_ingest.reconcile import exact_signature, partial_signature, reconcile, summarize


def _tx(date, payee, amount, type_=TransactionType.EXPENSE):
    return ParsedTransaction(
        date=date, payee=payee, amount=Decimal(amount), type=type_, source="Test", raw=payee
    )


def test_exact_and_probable_duplicates():
    persisted = [
        ("2024-01-05", "4.50", "expense", "Coffee"),
        ("2024-01-06", "3.00", "expense", "Tea House"),
    ]
    candidates = [
        _tx("2024-01-05", "Coffee", "4.50"),
        _tx("2024-01-06", "Tea", "3.00"),
        _tx("2024-01-07", "Lunch", "12.00"),
    ]

    coffee, tea, lunch = reconcile(candidates, persisted)

    assert coffee.exact_match and not coffee.selected
    assert coffee.status is MatchStatus.EXACT
    assert tea.probable_duplicate and tea.selected and not tea.exact_match
    assert tea.status is MatchStatus.PROBABLE
    assert lunch.status is MatchStatus.NEW and lunch.selected
    assert [r.transaction for r in (coffee, tea, lunch)] == candidates


def test_persisted_rows_may_be_models_mappings_or_sequences():
    persisted = [
        PersistedTransaction(date="2024-01-05", amount=Decimal("4.5"), type="expense", payee="Coffee"),
        {"date": "2024-01-06", "amount": 3, "type": "income", "payee": " Refund ", "id": 42},
        ["2024-01-07", 12, "expense", "Lunch"],
    ]
    candidates = [
        _tx("2024-01-05", "Coffee", "4.50"),
        _tx("2024-01-06", "Refund", "3.00", TransactionType.INCOME),
        _tx("2024-01-07", "Lunch", "12.00"),
    ]

    assert all(r.exact_match for r in reconcile(candidates, persisted))


def test_type_must_match():
    persisted = [("2024-01-05", "4.50", "income", "Coffee")]
    (result,) = reconcile([_tx("2024-01-05", "Coffee", "4.50")], persisted)
    assert result.status is MatchStatus.NEW


def test_amounts_compare_at_two_decimals():
    persisted = [("2024-01-05", "4.499", "expense", "Coffee")]
    (result,) = reconcile([_tx("2024-01-05", "Coffee", "4.50")], persisted)
    assert result.exact_match


def test_payee_whitespace_is_trimmed_but_case_matters():
    persisted = [("2024-01-05", "4.50", "expense", "  Coffee  ")]
    same, other_case = reconcile(
        [_tx("2024-01-05", "Coffee", "4.50"), _tx("2024-01-05", "COFFEE", "4.50")], persisted
    )
    assert same.exact_match
    assert other_case.probable_duplicate


def test_exact_signature_implies_partial():
    exact = exact_signature("2024-01-05", Decimal("4.5"), TransactionType.EXPENSE, " Coffee ")
    assert exact == ("2024-01-05", "4.50", "expense", "Coffee")
    assert exact[:3] == partial_signature("2024-01-05", "4.50", "expense")


def test_empty_ledger_marks_everything_new():
    results = reconcile([_tx("2024-01-05", "Coffee", "4.50")], [])
    assert summarize(results) == {MatchStatus.NEW: 1, MatchStatus.EXACT: 0, MatchStatus.PROBABLE: 0}


def test_summarize_counts_each_status():
    persisted = [("2024-01-05", "4.50", "expense", "Coffee")]
    results = reconcile(
        [
            _tx("2024-01-05", "Coffee", "4.50"),
            _tx("2024-01-05", "Cafe", "4.50"),
            _tx("2024-01-05", "Cafe", "5.00"),
        ],
        persisted,
    )
    assert summarize(results) == {MatchStatus.NEW: 1, MatchStatus.EXACT: 1, MatchStatus.PROBABLE: 1}


def test_record_carries_reconciliation_flags():
    persisted = [("2024-01-05", "4.50", "expense", "Coffee")]
    (result,) = reconcile([_tx("2024-01-05", "Coffee", "4.50")], persisted)
    record = result.as_record()
    assert record["amount"] == "4.50"
    assert record["exact_match"] is True
    assert record["selected"] is False
