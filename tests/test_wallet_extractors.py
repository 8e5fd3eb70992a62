# ruff: noqa: E501
import textwrap
from decimal import Decimal

from statement_ingest.extractors.wallets import (
    GPAY,
    PHONEPE,
    extract_gpay,
    extract_phonepe,
)
from statement_ingest.models import TransactionType


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


GPAY_STATEMENT = _dedent(
    """
    Transaction statement
    9915344792, someone@example.com
    Note: This statement reflects payments made by you on the Google Pay app. Self transfer payments are not included in the total money paid and
    received. Any payments transactions and activity deleted from your Google Account will not show up in this statement.
    Page 1 of 1
    Transaction statement period
    01 December 2025 - 31 December 2025
    Sent
    ₹700
    Received
    ₹24,001
    Date & time Transaction details Amount
    02 Dec, 2025
    11:35 AM
    Paid to Akhil Sharma
    UPI Transaction ID: 114999892784
    Paid by HDFC Bank 4230
    ₹200
    04 Dec, 2025
    03:37 PM
    Received from SHWETA SHARMA
    UPI Transaction ID: 717280407367
    Paid to HDFC Bank 4230
    ₹1
    21 Dec, 2025
    12:12 PM
    Received from Nikhil Kalia
    UPI Transaction ID: 115958171197
    Paid to HDFC Bank 4230
    ₹19,000
    25 Dec, 2025
    01:49 PM
    Received from DEEPIKA SHARMA W O GULSHAN KUMAR
    UPI Transaction ID: 541326923930
    Paid to HDFC Bank 4230
    ₹5,000
    27 Dec, 2025
    10:51 AM
    Paid to RANJIT SINGH
    UPI Transaction ID: 116245082657
    Paid by HDFC Bank 4230
    ₹500
    -- 1 of 1 --
    """
)


def test_gpay_statement_blocks():
    transactions = extract_gpay(GPAY_STATEMENT)

    assert [(t.date, t.payee, t.amount, t.type) for t in transactions] == [
        ("2025-12-02", "Akhil Sharma", Decimal("200.00"), TransactionType.EXPENSE),
        ("2025-12-04", "SHWETA SHARMA", Decimal("1.00"), TransactionType.INCOME),
        ("2025-12-21", "Nikhil Kalia", Decimal("19000.00"), TransactionType.INCOME),
        ("2025-12-25", "DEEPIKA SHARMA W O GULSHAN KUMAR", Decimal("5000.00"), TransactionType.INCOME),
        ("2025-12-27", "RANJIT SINGH", Decimal("500.00"), TransactionType.EXPENSE),
    ]
    assert all(t.source == "GPay" for t in transactions)
    assert transactions[0].reference == "114999892784"


def test_gpay_inline_layout():
    text = (
        " Date & time   Transaction details   Amount\n"
        " 02 Dec, 2025  Paid to Akhil Sharma  ₹200\n"
        " 11:35 AM  UPI Transaction ID: 114999892784\n"
        " Paid by HDFC Bank 4230\n"
        " 04 Dec, 2025  Received from SHWETA SHARMA  ₹1\n"
        " 03:37 PM  UPI Transaction ID: 717280407367\n"
        " Paid to HDFC Bank 4230\n"
    )

    akhil, shweta = extract_gpay(text)

    assert (akhil.payee, akhil.amount, akhil.type) == ("Akhil Sharma", Decimal("200.00"), TransactionType.EXPENSE)
    assert (shweta.payee, shweta.amount, shweta.type) == ("SHWETA SHARMA", Decimal("1.00"), TransactionType.INCOME)


def test_gpay_extra_spacing_and_single_line_block():
    text = """
02 Dec, 2025

11:35 AM
Paid to
  Akhil Sharma
UPI Transaction ID:   114999892784
Paid by HDFC Bank 4230
₹200

   04 Dec, 2025   10:00 AM   Received from   Ravi Kumar   UPI Transaction ID: 123456789012   Paid to HDFC Bank 4230   ₹500
        """

    first, second = extract_gpay(text)

    assert first.payee == "Akhil Sharma"
    assert first.amount == Decimal("200.00")
    assert second.payee == "Ravi Kumar"
    assert second.amount == Decimal("500.00")
    assert second.type is TransactionType.INCOME
    assert second.reference == "123456789012"


def test_gpay_payee_does_not_absorb_amount_or_time():
    text = _dedent(
        """
        02 Dec, 2025
        11:35 AM
        Paid to
        SHWETA SHARMA ₹1 03:37 PM
        UPI Transaction ID: 114999892784
        Paid by HDFC Bank 4230
        ₹1
        """
    )

    (tx,) = extract_gpay(text)

    assert tx.payee == "SHWETA SHARMA"
    assert tx.amount == Decimal("1.00")


def test_gpay_block_without_payment_method_is_skipped():
    text = _dedent(
        """
        02 Dec, 2025
        Received from Akhil Sharma ₹200
        UPI Transaction ID: 114999892784
        """
    )
    assert extract_gpay(text) == []


def test_phonepe_single_line_layout():
    text = (
        "Page 1 of 1\n"
        "This is a system generated statement. For any queries, contact us at https://support.phonepe.com/statement.\n"
        "\n"
        "Date   Transaction Details   Type   Amount\n"
        "Oct 11, 2025 Paid to DEEP GARMENTS  DEBIT   ₹ 1,400\n"
        "05:49 pm  Transaction ID T2510111749037008849949\n"
        "UTR No. 414865555749\n"
        "Paid by  \n"
        "652902XXXXXXXX10\n"
    )

    (tx,) = extract_phonepe(text)

    assert tx.date == "2025-10-11"
    assert tx.payee == "DEEP GARMENTS"
    assert tx.amount == Decimal("1400.00")
    assert tx.type is TransactionType.EXPENSE
    assert tx.status == "completed"
    assert tx.reference == "T2510111749037008849949"
    assert tx.source == "PhonePe"


def test_phonepe_multi_line_blocks():
    text = _dedent(
        """
        Transaction Statement for 9915344792
        Oct 11, 2025 - Oct 12, 2025
        Date Transaction Details Type Amount
        Oct 11, 2025
        05:49 pm
        DEBIT ₹1,400
        Paid to DEEP GARMENTS
        Transaction ID T2510111749037008849949
        Paid by XXXXXX1234

        Oct 12, 2025
        10:00 am
        CREDIT ₹5,000
        Received from JOHN DOE
        Transaction ID T2510121000000000000001
        Credited to XXXXXX5678
        Page 1 of 1
        """
    )

    garments, john = extract_phonepe(text)

    assert (garments.date, garments.payee, garments.amount, garments.type) == (
        "2025-10-11",
        "DEEP GARMENTS",
        Decimal("1400.00"),
        TransactionType.EXPENSE,
    )
    assert (john.date, john.payee, john.amount, john.type) == (
        "2025-10-12",
        "JOHN DOE",
        Decimal("5000.00"),
        TransactionType.INCOME,
    )


def test_phonepe_payee_from_line_above_transaction_id():
    text = _dedent(
        """
        Oct 13, 2025
        DEBIT ₹250
        CITY PHARMACY
        07:15 pm
        Transaction ID T2510131915000000000002
        Debited from XXXXXX1234
        """
    )

    (tx,) = extract_phonepe(text)

    assert tx.payee == "CITY PHARMACY"
    assert tx.type is TransactionType.EXPENSE
    assert tx.amount == Decimal("250.00")


def test_phonepe_unnamed_counterparty_is_unknown():
    text = _dedent(
        """
        Oct 14, 2025
        DEBIT ₹99
        Transaction ID T2510140000000000000003
        Paid by XXXXXX1234
        """
    )

    (tx,) = extract_phonepe(text)

    assert tx.payee == "Unknown"


def test_wallet_identify():
    assert GPAY.identify("Google Pay Payment History")
    assert GPAY.identify("UPI Transaction ID: 1")
    assert PHONEPE.identify("PhonePe Statement Transaction Details")
    assert not PHONEPE.identify("PhonePe")


def test_gpay_paid_to_direction_is_not_a_payment_method():
    text = _dedent(
        """
        02 Dec, 2025
        Paid to Akhil Sharma ₹200
        UPI Transaction ID: 114999892784
        """
    )
    assert extract_gpay(text) == []
