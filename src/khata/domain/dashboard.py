"""Dashboard domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from khata.database.base import Database
from khata.domain import aggregates
from khata.domain.gst import GSTService
from khata.utils.date_parser import month_range

RECENT_TRANSACTIONS = 10
TOP_EXPENSE_CATEGORIES = 5
TREND_MONTHS = 12


class DashboardService:
    """Service for building the business overview."""

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db
        self.gst_service = GSTService(db)

    def build(self, owner_id: str, today: Optional[date] = None) -> dict[str, Any]:
        """Build dashboard data for an owner.

        Args:
            owner_id: Owner to report on
            today: Reference date (defaults to ``date.today()``)

        Returns:
            Dict with keys ``kpis``, ``monthly_data``, ``top_expenses`` and
            ``recent_transactions``. Every figure is zero on an empty ledger.
        """
        today = today or date.today()
        transactions = self.db.list_transactions(owner_id)

        month_start, month_end = month_range(today)
        this_month = aggregates.totals(transactions, month_start, month_end)
        year_to_date = aggregates.totals(transactions, today.replace(month=1, day=1), today)
        cash = aggregates.cash_position(transactions)

        gst_summary = self.gst_service.current_summary(owner_id, today)
        gst_liability = gst_summary.net_liability if gst_summary else Decimal("0")

        return {
            "kpis": {
                "this_month_revenue": this_month["income"],
                "this_month_expenses": this_month["expenses"],
                "net_profit": this_month["income"] - this_month["expenses"],
                "cash_balance": cash["cash_balance"],
                "gst_liability": gst_liability,
                "ytd_revenue": year_to_date["income"],
                "ytd_expenses": year_to_date["expenses"],
            },
            "monthly_data": aggregates.monthly_trend(transactions, TREND_MONTHS, today),
            "top_expenses": [
                {"category": category, "amount": amount}
                for category, amount in aggregates.top_expense_categories(
                    transactions, TOP_EXPENSE_CATEGORIES
                )
            ],
            "recent_transactions": transactions[:RECENT_TRANSACTIONS],
        }
