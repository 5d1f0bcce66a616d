"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay
stable when the table layout changes.
"""

from decimal import Decimal
from typing import Optional

from khata.domain import entities as domain
from khata.database.models import (
    Transaction as ORMTransaction,
    GSTSummary as ORMGSTSummary,
)


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    gst_type = orm_transaction.gst_type
    return domain.Transaction(
        id=orm_transaction.id,
        owner_id=orm_transaction.owner_id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        amount=_decimal(orm_transaction.amount),
        type=domain.TransactionType(orm_transaction.type),
        category=orm_transaction.category,
        gst_rate=_decimal(orm_transaction.gst_rate),
        gst_type=domain.GSTType(gst_type) if gst_type else None,
        tds_section=orm_transaction.tds_section,
        tds_rate=_decimal(orm_transaction.tds_rate),
        party_name=orm_transaction.party_name,
        party_gstin=orm_transaction.party_gstin,
        created_at=orm_transaction.created_at,
    )


def new_transaction_to_orm(owner_id: str, txn: domain.NewTransaction) -> ORMTransaction:
    """Build a SQLAlchemy Transaction row from a not-yet-stored transaction."""
    return ORMTransaction(
        owner_id=owner_id,
        date=txn.date,
        description=txn.description,
        amount=txn.amount,
        type=txn.type.value,
        category=txn.category,
        gst_rate=txn.gst_rate,
        gst_type=txn.gst_type.value if txn.gst_type else None,
        tds_section=txn.tds_section,
        tds_rate=txn.tds_rate,
        party_name=txn.party_name,
        party_gstin=txn.party_gstin,
    )


def gst_summary_to_domain(orm_summary: ORMGSTSummary) -> domain.GSTSummary:
    """Convert SQLAlchemy GSTSummary model to domain GSTSummary entity."""
    return domain.GSTSummary(
        period=orm_summary.period,
        output_cgst=_decimal(orm_summary.output_cgst),
        output_sgst=_decimal(orm_summary.output_sgst),
        output_igst=_decimal(orm_summary.output_igst),
        input_cgst=_decimal(orm_summary.input_cgst),
        input_sgst=_decimal(orm_summary.input_sgst),
        input_igst=_decimal(orm_summary.input_igst),
        net_liability=_decimal(orm_summary.net_liability),
    )


def apply_gst_summary(orm_summary: ORMGSTSummary, summary: domain.GSTSummary) -> None:
    """Copy accumulator values from a domain summary onto a SQLAlchemy row."""
    orm_summary.period = summary.period
    orm_summary.output_cgst = summary.output_cgst
    orm_summary.output_sgst = summary.output_sgst
    orm_summary.output_igst = summary.output_igst
    orm_summary.input_cgst = summary.input_cgst
    orm_summary.input_sgst = summary.input_sgst
    orm_summary.input_igst = summary.input_igst
    orm_summary.net_liability = summary.net_liability
