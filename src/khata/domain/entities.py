"""Domain model entities for khata.

These are pure data classes representing business concepts, independent of
database schema. Transactions are immutable once created; GST summaries are
derived from them and rebuilt whenever the transaction set changes.
"""

from dataclasses import dataclass, fields
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from khata.domain.errors import (
    ValidationError,
    non_positive_amount,
    paired_field_missing,
    unsupported_gst_rate,
)

DESCRIPTION_MAX_LENGTH = 500
NO_DESCRIPTION = "No description"

GST_RATES = (Decimal("0"), Decimal("5"), Decimal("12"), Decimal("18"), Decimal("28"))


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class GSTType(str, Enum):
    """Intra-state (CGST + SGST) or inter-state (IGST) supply."""

    CGST_SGST = "cgst_sgst"
    IGST = "igst"


@dataclass(frozen=True)
class TDSSection:
    """Income-tax section under which TDS is withheld."""

    code: str
    name: str
    rate: Decimal


TDS_SECTIONS = {
    "194A": TDSSection("194A", "Interest", Decimal("10")),
    "194C": TDSSection("194C", "Contractor", Decimal("1")),
    "194H": TDSSection("194H", "Commission", Decimal("5")),
    "194I": TDSSection("194I", "Rent", Decimal("10")),
    "194J": TDSSection("194J", "Professional Fees", Decimal("10")),
    "194Q": TDSSection("194Q", "Purchase of Goods", Decimal("0.1")),
}

# (name, type) pairs offered as the curated category list. Any string is
# still accepted as a category.
DEFAULT_CATEGORIES = [
    ("Sales", TransactionType.INCOME),
    ("Services", TransactionType.INCOME),
    ("Other Income", TransactionType.INCOME),
    ("Salary", TransactionType.EXPENSE),
    ("Rent", TransactionType.EXPENSE),
    ("Utilities", TransactionType.EXPENSE),
    ("Software", TransactionType.EXPENSE),
    ("Marketing", TransactionType.EXPENSE),
    ("Travel", TransactionType.EXPENSE),
    ("Office Supplies", TransactionType.EXPENSE),
    ("Professional Fees", TransactionType.EXPENSE),
    ("Raw Materials", TransactionType.EXPENSE),
    ("Insurance", TransactionType.EXPENSE),
    ("Bank Charges", TransactionType.EXPENSE),
    ("GST Payment", TransactionType.EXPENSE),
    ("Other Expense", TransactionType.EXPENSE),
]


@dataclass(frozen=True)
class NewTransaction:
    """A transaction that has not been stored yet.

    Raises:
        ValidationError: If the amount is not positive, the GST rate is not
            a standard slab, or a paired field is set without its partner.
    """

    date: date
    description: str
    amount: Decimal
    type: TransactionType
    category: str
    gst_rate: Optional[Decimal] = None
    gst_type: Optional[GSTType] = None
    tds_section: Optional[str] = None
    tds_rate: Optional[Decimal] = None
    party_name: Optional[str] = None
    party_gstin: Optional[str] = None

    def __post_init__(self):
        if self.amount <= 0:
            raise ValidationError(non_positive_amount(self.amount))
        if self.gst_rate is not None and self.gst_rate not in GST_RATES:
            raise ValidationError(unsupported_gst_rate(self.gst_rate))
        if (self.gst_rate is None) != (self.gst_type is None):
            raise ValidationError(paired_field_missing("gst_type", "gst_rate"))
        if (self.tds_section is None) != (self.tds_rate is None):
            raise ValidationError(paired_field_missing("tds_rate", "tds_section"))


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    owner_id: str
    date: date
    description: str
    amount: Decimal
    type: TransactionType
    category: str
    gst_rate: Optional[Decimal]
    gst_type: Optional[GSTType]
    tds_section: Optional[str]
    tds_rate: Optional[Decimal]
    party_name: Optional[str]
    party_gstin: Optional[str]
    created_at: datetime

    @property
    def period(self) -> str:
        """Calendar month of the transaction as ``YYYY-MM``."""
        return self.date.strftime("%Y-%m")

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def has_gst(self) -> bool:
        return self.gst_rate is not None and self.gst_rate != 0


@dataclass(frozen=True)
class GSTSummary:
    """GST position for one calendar month, in whole rupees."""

    period: str
    output_cgst: Decimal = Decimal("0")
    output_sgst: Decimal = Decimal("0")
    output_igst: Decimal = Decimal("0")
    input_cgst: Decimal = Decimal("0")
    input_sgst: Decimal = Decimal("0")
    input_igst: Decimal = Decimal("0")
    net_liability: Decimal = Decimal("0")

    @property
    def output_total(self) -> Decimal:
        return self.output_cgst + self.output_sgst + self.output_igst

    @property
    def input_total(self) -> Decimal:
        return self.input_cgst + self.input_sgst + self.input_igst


@dataclass
class ColumnMapping:
    """Which source column supplies each transaction field.

    ``None`` means the field is not mapped.
    """

    date: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    party_name: Optional[str] = None
    party_gstin: Optional[str] = None
    gst_rate: Optional[str] = None
    gst_type: Optional[str] = None
    tds_section: Optional[str] = None
    tds_rate: Optional[str] = None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def merged_with(self, fallback: "ColumnMapping") -> "ColumnMapping":
        """Return a mapping that keeps this mapping's columns and fills gaps from ``fallback``."""
        values = {
            name: getattr(self, name) or getattr(fallback, name)
            for name in self.field_names()
        }
        return ColumnMapping(**values)
