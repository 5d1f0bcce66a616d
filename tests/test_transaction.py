"""Tests for transaction service and store operations."""

from datetime import date
from decimal import Decimal

import pytest

from khata.domain.entities import GSTType, TransactionType
from khata.domain.errors import NotFoundError, ValidationError


def test_create_and_list_newest_first(transaction_service, owner, new_transaction):
    count = transaction_service.create_transactions(
        owner,
        [
            new_transaction("100", txn_date=date(2024, 1, 1), description="first"),
            new_transaction("200", txn_date=date(2024, 3, 1), description="third"),
            new_transaction("300", txn_date=date(2024, 2, 1), description="second"),
        ],
    )

    transactions = transaction_service.list_transactions(owner)

    assert count == 3
    assert [t.description for t in transactions] == ["third", "second", "first"]
    assert all(t.owner_id == owner for t in transactions)
    assert all(t.id is not None and t.created_at is not None for t in transactions)


def test_list_filters(transaction_service, owner, new_transaction):
    transaction_service.create_transactions(
        owner,
        [new_transaction("100", txn_date=date(2024, month, 10)) for month in (1, 2, 3)],
    )

    ranged = transaction_service.list_transactions(
        owner, start_date=date(2024, 2, 1), end_date=date(2024, 2, 29)
    )
    limited = transaction_service.list_transactions(owner, limit=2)

    assert [t.date for t in ranged] == [date(2024, 2, 10)]
    assert len(limited) == 2


def test_stored_fields_round_trip(transaction_service, owner, new_transaction):
    transaction_service.create_transactions(
        owner,
        [
            new_transaction(
                "11800.50",
                TransactionType.INCOME,
                "Sales",
                description="Invoice 9",
                gst_rate=18,
                gst_type=GSTType.IGST,
                tds_section="194J",
                tds_rate=10,
                party_name="Asian Paints",
                party_gstin="27AABCA6789A1ZH",
            )
        ],
    )

    [txn] = transaction_service.list_transactions(owner)

    assert txn.amount == Decimal("11800.50")
    assert txn.type == TransactionType.INCOME
    assert txn.gst_rate == Decimal("18")
    assert txn.gst_type == GSTType.IGST
    assert txn.tds_section == "194J"
    assert txn.tds_rate == Decimal("10")
    assert txn.party_gstin == "27AABCA6789A1ZH"


def test_owner_isolation(transaction_service, owner, new_transaction):
    transaction_service.create_transactions(owner, [new_transaction("100")])
    transaction_service.create_transactions("someone-else", [new_transaction("200")])

    [mine] = transaction_service.list_transactions(owner)

    assert mine.amount == Decimal("100")
    assert transaction_service.get_transaction("someone-else", mine.id) is None
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction("someone-else", mine.id)


def test_create_empty_batch_is_noop(transaction_service, owner):
    assert transaction_service.create_transactions(owner, []) == 0


def test_delete_transaction(transaction_service, owner, new_transaction):
    transaction_service.create_transactions(owner, [new_transaction("100"), new_transaction("200")])
    first = transaction_service.list_transactions(owner)[0]

    transaction_service.delete_transaction(owner, first.id)

    remaining = transaction_service.list_transactions(owner)
    assert len(remaining) == 1
    assert transaction_service.get_transaction(owner, first.id) is None


def test_delete_missing_transaction(transaction_service, owner):
    with pytest.raises(NotFoundError, match="Transaction 999 not found"):
        transaction_service.delete_transaction(owner, 999)


def test_delete_all(transaction_service, temp_db, owner, new_transaction):
    transaction_service.create_transactions(
        owner, [new_transaction("11800", TransactionType.INCOME, gst_rate=18)]
    )
    assert temp_db.list_gst_summaries(owner)

    assert transaction_service.delete_all(owner) == 1
    assert transaction_service.list_transactions(owner) == []
    assert temp_db.list_gst_summaries(owner) == []


def test_import_rows(transaction_service, temp_db, owner, today):
    rows = [
        {"Date": "01/03/2024", "Description": "Invoice 12", "Amount": "11,800", "GST Rate": "18"},
        {"Date": "02/03/2024", "Description": "Office rent", "Amount": "-50,000"},
        {"Date": "03/03/2024", "Description": "Refund", "Amount": "0"},
    ]

    result = transaction_service.import_rows(owner, rows, today=today)

    assert result == {"imported": 2, "dropped": 1}
    assert temp_db.get_gst_summary(owner, "2024-03").net_liability == Decimal("1800")


def test_import_rows_requires_rows(transaction_service, owner):
    with pytest.raises(ValidationError, match="No transactions provided"):
        transaction_service.import_rows(owner, [])


def test_import_rows_all_dropped(transaction_service, owner):
    result = transaction_service.import_rows(owner, [{"Amount": "0"}])
    assert result == {"imported": 0, "dropped": 1}
