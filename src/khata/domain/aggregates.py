"""Aggregate queries over a transaction set.

Pure functions shared by the dashboard, the GST report and the chat
responder. Each one has a defined result for an empty transaction set.
"""

import math
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from khata.domain.entities import TDS_SECTIONS, Transaction, TransactionType
from khata.utils.date_parser import last_n_months, month_label

ZERO = Decimal("0")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = 12


def totals(
    transactions: Iterable[Transaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> dict[str, Decimal]:
    """Sum income and expenses, optionally within [start_date, end_date]."""
    income = ZERO
    expenses = ZERO
    for txn in transactions:
        if start_date is not None and txn.date < start_date:
            continue
        if end_date is not None and txn.date > end_date:
            continue
        if txn.type == TransactionType.INCOME:
            income += txn.amount
        else:
            expenses += txn.amount
    return {"income": income, "expenses": expenses}


def top_expense_categories(
    transactions: Iterable[Transaction], limit: int = 5
) -> list[tuple[str, Decimal]]:
    """Largest expense categories by total amount.

    Ties are broken by category name so the result is deterministic.
    """
    by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for txn in transactions:
        if txn.type == TransactionType.EXPENSE:
            by_category[txn.category] += txn.amount

    ranked = sorted(by_category.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]


def monthly_trend(
    transactions: Sequence[Transaction],
    months: int = 12,
    today: Optional[date] = None,
) -> list[dict[str, Any]]:
    """Revenue and expenses for each of the last ``months`` months, oldest first."""
    trend = []
    for start, end in last_n_months(months, today):
        month_totals = totals(transactions, start, end)
        trend.append(
            {
                "period": start.strftime("%Y-%m"),
                "month": month_label(start),
                "revenue": month_totals["income"],
                "expenses": month_totals["expenses"],
            }
        )
    return trend


def profitability(revenue: Decimal, expenses: Decimal) -> dict[str, Any]:
    """Net profit and margin for a period.

    ``margin`` is a percentage, or None when there is no revenue.
    """
    net_profit = revenue - expenses
    margin = None
    if revenue > 0:
        margin = net_profit / revenue * HUNDRED
    return {
        "revenue": revenue,
        "expenses": expenses,
        "net_profit": net_profit,
        "is_profitable": net_profit > 0,
        "margin": margin,
    }


def cash_position(transactions: Iterable[Transaction]) -> dict[str, Any]:
    """Cash balance and runway in months.

    The balance is lifetime income minus lifetime expenses; the burn rate
    is total expenses spread over twelve months. ``runway_months`` is None
    when there are no expenses to burn.
    """
    all_totals = totals(transactions)
    balance = all_totals["income"] - all_totals["expenses"]
    avg_monthly_expense = all_totals["expenses"] / MONTHS_PER_YEAR

    runway = None
    if avg_monthly_expense > 0:
        runway = math.floor(balance / avg_monthly_expense)

    return {
        "cash_balance": balance,
        "avg_monthly_expense": avg_monthly_expense,
        "runway_months": runway,
    }


def tds_breakdown(transactions: Iterable[Transaction]) -> list[dict[str, Any]]:
    """TDS withheld per section, sorted by section code."""
    by_section: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for txn in transactions:
        if not txn.tds_section or not txn.tds_rate:
            continue
        by_section[txn.tds_section] += txn.amount * txn.tds_rate / HUNDRED

    results = []
    for section in sorted(by_section):
        known = TDS_SECTIONS.get(section)
        results.append(
            {
                "section": section,
                "name": known.name if known else None,
                "amount": by_section[section],
            }
        )
    return results
