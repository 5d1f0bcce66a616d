"""SQLAlchemy models for khata database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    type = Column(String(16), nullable=False)
    category = Column(String, nullable=False)
    gst_rate = Column(Numeric(5, 2), nullable=True)
    gst_type = Column(String(16), nullable=True)
    tds_section = Column(String(16), nullable=True)
    tds_rate = Column(Numeric(5, 2), nullable=True)
    party_name = Column(String, nullable=True)
    party_gstin = Column(String(15), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_transactions_owner_date", "owner_id", "date"),)


class GSTSummary(Base):
    """Monthly GST summary model, derived from transactions."""

    __tablename__ = "gst_summaries"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    period = Column(String(7), nullable=False)
    output_cgst = Column(Numeric(14, 2), nullable=False, default=0)
    output_sgst = Column(Numeric(14, 2), nullable=False, default=0)
    output_igst = Column(Numeric(14, 2), nullable=False, default=0)
    input_cgst = Column(Numeric(14, 2), nullable=False, default=0)
    input_sgst = Column(Numeric(14, 2), nullable=False, default=0)
    input_igst = Column(Numeric(14, 2), nullable=False, default=0)
    net_liability = Column(Numeric(14, 2), nullable=False, default=0)

    # One summary per owner and month
    __table_args__ = (UniqueConstraint("owner_id", "period", name="uq_owner_period"),)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
