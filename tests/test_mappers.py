"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from khata.database.models import (
    Transaction as ORMTransaction,
    GSTSummary as ORMGSTSummary,
)
from khata.database.mappers import (
    apply_gst_summary,
    gst_summary_to_domain,
    new_transaction_to_orm,
    transaction_to_domain,
)
from khata.domain.entities import (
    GSTSummary,
    GSTType,
    NewTransaction,
    Transaction,
    TransactionType,
)


class TestTransactionMapper:
    """Tests for Transaction mappers."""

    def test_transaction_to_domain(self):
        """Test converting ORM Transaction to domain Transaction."""
        orm_transaction = ORMTransaction(
            id=7,
            owner_id="acme",
            date=date(2024, 1, 15),
            description="Invoice 1",
            amount=Decimal("11800.00"),
            type="income",
            category="Sales",
            gst_rate=Decimal("18.00"),
            gst_type="igst",
            tds_section=None,
            tds_rate=None,
            party_name="Asian Paints",
            party_gstin="27AABCA6789A1ZH",
            created_at=datetime.now(UTC),
        )

        txn = transaction_to_domain(orm_transaction)

        assert isinstance(txn, Transaction)
        assert txn.id == 7
        assert txn.type == TransactionType.INCOME
        assert txn.gst_type == GSTType.IGST
        assert txn.gst_rate == Decimal("18")
        assert txn.tds_rate is None
        assert txn.created_at == orm_transaction.created_at

    def test_float_amounts_become_decimal(self):
        orm_transaction = ORMTransaction(
            id=1,
            owner_id="acme",
            date=date(2024, 1, 15),
            description="x",
            amount=12.5,
            type="expense",
            category="Other Expense",
            created_at=datetime.now(UTC),
        )

        txn = transaction_to_domain(orm_transaction)

        assert txn.amount == Decimal("12.5")
        assert txn.gst_type is None

    def test_new_transaction_to_orm(self):
        new = NewTransaction(
            date=date(2024, 1, 15),
            description="Rent",
            amount=Decimal("50000"),
            type=TransactionType.EXPENSE,
            category="Rent",
            gst_rate=Decimal("18"),
            gst_type=GSTType.CGST_SGST,
            tds_section="194I",
            tds_rate=Decimal("10"),
        )

        orm_transaction = new_transaction_to_orm("acme", new)

        assert orm_transaction.owner_id == "acme"
        assert orm_transaction.type == "expense"
        assert orm_transaction.gst_type == "cgst_sgst"
        assert orm_transaction.tds_section == "194I"


class TestGSTSummaryMapper:
    """Tests for GSTSummary mappers."""

    def test_round_trip_through_row(self):
        summary = GSTSummary(
            period="2024-01",
            output_cgst=Decimal("900"),
            output_sgst=Decimal("900"),
            input_igst=Decimal("500"),
            net_liability=Decimal("1300"),
        )
        row = ORMGSTSummary(owner_id="acme")

        apply_gst_summary(row, summary)

        assert row.period == "2024-01"
        assert gst_summary_to_domain(row) == summary
