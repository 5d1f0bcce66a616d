"""Turn raw tabular rows into canonical transactions.

Bank and ERP exports arrive with arbitrary column names, mixed date formats
and signed or unsigned amounts. Normalization is deliberately lenient: a bad
date becomes today, an unparseable amount becomes 0 (and the row is
dropped), an unknown description falls back to "Other Expense". No single
row can fail an import.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from khata.domain.entities import (
    ColumnMapping,
    DESCRIPTION_MAX_LENGTH,
    GST_RATES,
    GSTType,
    NO_DESCRIPTION,
    NewTransaction,
    TDS_SECTIONS,
    TransactionType,
)
from khata.logging_setup import get_logger
from khata.utils.amount_parser import (
    is_negative_amount,
    parse_amount,
    parse_optional_decimal,
)
from khata.utils.date_parser import parse_date

logger = get_logger(__name__)

RawRow = Mapping[str, Optional[str]]

# Tax column patterns are matched first; headers they claim are not
# offered to the generic patterns ("GST Type" is not the transaction type).
TAX_COLUMN_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("party_gstin", re.compile(r"gstin", re.IGNORECASE)),
    ("gst_rate", re.compile(r"gst.*rate|^gst\s*%?$", re.IGNORECASE)),
    ("gst_type", re.compile(r"gst.*type|supply.*type", re.IGNORECASE)),
    ("tds_section", re.compile(r"tds.*section|^section$", re.IGNORECASE)),
    ("tds_rate", re.compile(r"tds.*rate", re.IGNORECASE)),
]

# Header patterns per target field; the first matching header wins.
COLUMN_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("date", re.compile(r"date|time|txn.*date", re.IGNORECASE)),
    ("description", re.compile(r"desc|narration|particular|detail|remark", re.IGNORECASE)),
    ("amount", re.compile(r"amount|value|sum|debit|credit", re.IGNORECASE)),
    ("type", re.compile(r"type|dr.*cr|debit.*credit", re.IGNORECASE)),
    ("category", re.compile(r"category|cat", re.IGNORECASE)),
    ("party_name", re.compile(r"party|vendor|customer|name", re.IGNORECASE)),
]

# Ordered (pattern, category, type) rules; the first match wins.
CATEGORY_RULES: list[tuple[re.Pattern, str, TransactionType]] = [
    (re.compile(r"salary|wages|payroll", re.IGNORECASE), "Salary", TransactionType.EXPENSE),
    (re.compile(r"rent|lease", re.IGNORECASE), "Rent", TransactionType.EXPENSE),
    (
        re.compile(r"electric|water|gas|utility|bill", re.IGNORECASE),
        "Utilities",
        TransactionType.EXPENSE,
    ),
    (
        re.compile(r"software|saas|subscription|aws|azure|google cloud", re.IGNORECASE),
        "Software",
        TransactionType.EXPENSE,
    ),
    (
        re.compile(r"marketing|ads|advertisement|google ads|facebook", re.IGNORECASE),
        "Marketing",
        TransactionType.EXPENSE,
    ),
    (
        re.compile(r"travel|flight|hotel|uber|ola|cab", re.IGNORECASE),
        "Travel",
        TransactionType.EXPENSE,
    ),
    (
        re.compile(r"office|stationery|supplies", re.IGNORECASE),
        "Office Supplies",
        TransactionType.EXPENSE,
    ),
    (
        re.compile(r"legal|accounting|consultant|professional", re.IGNORECASE),
        "Professional Fees",
        TransactionType.EXPENSE,
    ),
    (re.compile(r"insurance", re.IGNORECASE), "Insurance", TransactionType.EXPENSE),
    (
        re.compile(r"bank charge|bank fee|transaction fee", re.IGNORECASE),
        "Bank Charges",
        TransactionType.EXPENSE,
    ),
    (re.compile(r"gst payment|gst challan", re.IGNORECASE), "GST Payment", TransactionType.EXPENSE),
    (
        re.compile(r"invoice|payment received|client payment|sales", re.IGNORECASE),
        "Sales",
        TransactionType.INCOME,
    ),
    (
        re.compile(r"service fee|consulting fee|project", re.IGNORECASE),
        "Services",
        TransactionType.INCOME,
    ),
    (
        re.compile(r"interest received|dividend|refund", re.IGNORECASE),
        "Other Income",
        TransactionType.INCOME,
    ),
]

FALLBACK_CATEGORY = ("Other Expense", TransactionType.EXPENSE)

_INCOME_MARKER = re.compile(r"\b(cr|credit|income|receipt)\b")


def _first_match(pattern: re.Pattern, headers: Sequence[str]) -> Optional[str]:
    return next((header for header in headers if header and pattern.search(header)), None)


def detect_columns(headers: Sequence[str]) -> ColumnMapping:
    """Guess which header supplies each transaction field.

    Args:
        headers: Column names in source order

    Returns:
        ColumnMapping with unmatched fields left as None
    """
    detected = {}
    for field_name, pattern in TAX_COLUMN_PATTERNS:
        detected[field_name] = _first_match(pattern, headers)

    claimed = {header for header in detected.values() if header}
    remaining = [header for header in headers if header not in claimed]
    for field_name, pattern in COLUMN_PATTERNS:
        detected[field_name] = _first_match(pattern, remaining)
    return ColumnMapping(**detected)


def infer_type_and_category(description: str) -> tuple[TransactionType, str]:
    """Classify a transaction from its description text.

    Returns:
        (type, category) from the first matching rule, or
        (expense, "Other Expense") when nothing matches
    """
    for pattern, category, txn_type in CATEGORY_RULES:
        if pattern.search(description or ""):
            return txn_type, category
    category, txn_type = FALLBACK_CATEGORY
    return txn_type, category


def resolve_type(raw_type: Optional[str]) -> TransactionType:
    """Map an explicit type column value ("Cr", "Income", "Dr", ...) to a type.

    Anything that is not recognisably income is an expense.
    """
    value = (raw_type or "").strip().lower()
    if _INCOME_MARKER.search(value):
        return TransactionType.INCOME
    return TransactionType.EXPENSE


def _cell(row: RawRow, column: Optional[str]) -> Optional[str]:
    if not column:
        return None
    value = row.get(column)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _resolve_gst(row: RawRow, mapping: ColumnMapping) -> tuple[Optional[Decimal], Optional[GSTType]]:
    rate = parse_optional_decimal(_cell(row, mapping.gst_rate))
    if rate is None or rate not in GST_RATES:
        return None, None

    raw_type = (_cell(row, mapping.gst_type) or "").lower()
    gst_type = GSTType.IGST if "igst" in raw_type or "inter" in raw_type else GSTType.CGST_SGST
    return rate, gst_type


def _resolve_tds(row: RawRow, mapping: ColumnMapping) -> tuple[Optional[str], Optional[Decimal]]:
    section = _cell(row, mapping.tds_section)
    if section is None:
        return None, None
    section = section.upper()

    rate = parse_optional_decimal(_cell(row, mapping.tds_rate))
    if rate is None or rate <= 0:
        known = TDS_SECTIONS.get(section)
        if known is None:
            return None, None
        rate = known.rate
    return section, rate


def normalize_row(
    row: RawRow, mapping: ColumnMapping, today: Optional[date] = None
) -> Optional[NewTransaction]:
    """Normalize one raw row, or return None if it has no positive amount."""
    raw_amount = _cell(row, mapping.amount)
    amount = parse_amount(raw_amount)
    if amount <= 0:
        return None

    description = (_cell(row, mapping.description) or NO_DESCRIPTION)[:DESCRIPTION_MAX_LENGTH]
    inferred_type, inferred_category = infer_type_and_category(description)

    explicit_type = _cell(row, mapping.type)
    if explicit_type is not None:
        txn_type = resolve_type(explicit_type)
    elif is_negative_amount(raw_amount):
        txn_type = TransactionType.EXPENSE
    else:
        txn_type = inferred_type

    category = _cell(row, mapping.category) or inferred_category
    gst_rate, gst_type = _resolve_gst(row, mapping)
    tds_section, tds_rate = _resolve_tds(row, mapping)

    return NewTransaction(
        date=parse_date(_cell(row, mapping.date), today=today),
        description=description,
        amount=amount,
        type=txn_type,
        category=category,
        gst_rate=gst_rate,
        gst_type=gst_type,
        tds_section=tds_section,
        tds_rate=tds_rate,
        party_name=_cell(row, mapping.party_name),
        party_gstin=_cell(row, mapping.party_gstin),
    )


def normalize_rows(
    rows: Sequence[RawRow],
    mapping: Optional[ColumnMapping] = None,
    today: Optional[date] = None,
) -> list[NewTransaction]:
    """Normalize raw rows into transactions ready to store.

    Args:
        rows: Raw rows (column name -> string value)
        mapping: Optional explicit column mapping; unmapped fields are
            filled from header detection
        today: Date substituted for unparseable dates

    Returns:
        Normalized transactions in input order, rows without a positive
        amount omitted
    """
    if not rows:
        return []

    headers: list[str] = []
    for row in rows:
        for header in row.keys():
            if header not in headers:
                headers.append(header)

    detected = detect_columns(headers)
    resolved = mapping.merged_with(detected) if mapping is not None else detected

    transactions = []
    for row in rows:
        txn = normalize_row(row, resolved, today=today)
        if txn is not None:
            transactions.append(txn)

    dropped = len(rows) - len(transactions)
    if dropped:
        logger.info("Dropped %d of %d rows without a positive amount", dropped, len(rows))
    return transactions
