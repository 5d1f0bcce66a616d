"""Sample ledger generation for demos."""

import calendar
import random
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from khata.database.base import Database
from khata.domain.entities import GSTType, NewTransaction, TransactionType
from khata.domain.transaction import TransactionService

VENDORS = [
    ("Tata Steel Ltd", "27AAACT2727Q1ZV"),
    ("Reliance Industries", "27AABCR1234A1Z5"),
    ("Infosys Technologies", "29AABCI1234F1ZB"),
    ("Wipro Ltd", "29AABCW1234L1ZN"),
    ("ABC Suppliers", "27AABCS5678K1Z3"),
    ("XYZ Services", "27AABCX9012M1Z7"),
    ("Mumbai Electricals", "27AABCM3456P1Z1"),
    ("Delhi Transport Co", "07AABCD7890T1ZY"),
    ("Bangalore IT Solutions", "29AABCB2345I1ZW"),
    ("Chennai Logistics", "33AABCC6789L1ZQ"),
]

CUSTOMERS = [
    ("Hindustan Unilever", "27AABCH1234U1ZB"),
    ("Mahindra & Mahindra", "27AABCM4567M1ZN"),
    ("Godrej Industries", "27AABCG8901G1ZK"),
    ("Larsen & Toubro", "27AABCL2345L1ZJ"),
    ("Asian Paints", "27AABCA6789A1ZH"),
]

# (category, min amount, max amount, TDS section withheld above the threshold)
EXPENSE_KINDS = [
    ("Salary", 30000, 200000, "194J"),
    ("Rent", 50000, 150000, "194I"),
    ("Professional Fees", 10000, 100000, "194J"),
    ("Raw Materials", 20000, 300000, None),
    ("Utilities", 5000, 30000, None),
    ("Marketing", 10000, 80000, None),
    ("Travel", 5000, 50000, None),
    ("Office Supplies", 2000, 20000, None),
    ("Software", 5000, 50000, None),
]

SAMPLE_GST_RATES = (Decimal("5"), Decimal("12"), Decimal("18"))
TDS_THRESHOLD = 30000
TDS_RATE = Decimal("10")


def _pick_gst(rng: random.Random, probability: float) -> tuple[Optional[Decimal], Optional[GSTType]]:
    if rng.random() >= probability:
        return None, None
    rate = rng.choice(SAMPLE_GST_RATES)
    gst_type = GSTType.CGST_SGST if rng.random() < 0.7 else GSTType.IGST
    return rate, gst_type


def _income(rng: random.Random, txn_date: date) -> NewTransaction:
    customer, gstin = rng.choice(CUSTOMERS)
    category = "Sales" if rng.random() < 0.8 else "Services"
    gst_rate, gst_type = _pick_gst(rng, 0.9)
    return NewTransaction(
        date=txn_date,
        description=f"{category} to {customer}",
        amount=Decimal(50000 + rng.randrange(500000)),
        type=TransactionType.INCOME,
        category=category,
        gst_rate=gst_rate,
        gst_type=gst_type,
        party_name=customer,
        party_gstin=gstin,
    )


def _expense(rng: random.Random, txn_date: date) -> NewTransaction:
    category, low, high, tds_section = rng.choice(EXPENSE_KINDS)
    vendor, gstin = rng.choice(VENDORS)
    amount = low + rng.randrange(high - low)
    gst_rate, gst_type = _pick_gst(rng, 0.85)
    withholds = tds_section is not None and amount > TDS_THRESHOLD
    return NewTransaction(
        date=txn_date,
        description=f"{category} - {vendor}",
        amount=Decimal(amount),
        type=TransactionType.EXPENSE,
        category=category,
        gst_rate=gst_rate,
        gst_type=gst_type,
        tds_section=tds_section if withholds else None,
        tds_rate=TDS_RATE if withholds else None,
        party_name=vendor,
        party_gstin=gstin,
    )


def generate_sample_transactions(
    months: int = 12,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> list[NewTransaction]:
    """Generate a plausible SMB ledger for the last ``months`` months.

    Each month gets 15-25 transactions, roughly 40% income. Pass a seeded
    ``rng`` for a reproducible ledger.

    Returns:
        Transactions sorted by date
    """
    today = today or date.today()
    rng = rng or random.Random()
    first_month = today.replace(day=1) - relativedelta(months=months - 1)

    transactions = []
    for offset in range(months):
        month_start = first_month + relativedelta(months=offset)
        days_in_month = calendar.monthrange(month_start.year, month_start.month)[1]

        for _ in range(15 + rng.randrange(11)):
            txn_date = month_start.replace(day=1 + rng.randrange(days_in_month))
            if rng.random() < 0.4:
                transactions.append(_income(rng, txn_date))
            else:
                transactions.append(_expense(rng, txn_date))

    transactions.sort(key=lambda txn: txn.date)
    return transactions


class SeedService:
    """Service for loading sample data into a ledger."""

    def __init__(self, db: Database):
        """Initialize seed service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transaction_service = TransactionService(db)

    def seed(
        self,
        owner_id: str,
        months: int = 12,
        seed: Optional[int] = None,
        reset: bool = False,
        today: Optional[date] = None,
    ) -> int:
        """Insert sample transactions for an owner.

        Args:
            owner_id: Owner to seed
            months: Number of months of history
            seed: Random seed for a reproducible ledger
            reset: If True, delete the owner's existing transactions first
            today: Reference date for the last month

        Returns:
            Number of transactions created
        """
        if reset:
            self.transaction_service.delete_all(owner_id)
        transactions = generate_sample_transactions(months, today, random.Random(seed))
        return self.transaction_service.create_transactions(owner_id, transactions)
