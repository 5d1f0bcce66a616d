"""GST computation and the monthly GST summary service.

Transaction amounts are treated as GST-inclusive everywhere: the tax
component of an amount is ``amount * rate / (100 + rate)``. Income carries
output GST (collected on sales), expenses carry input GST (creditable on
purchases). Intra-state supplies split the tax evenly into CGST and SGST,
inter-state supplies are entirely IGST.
"""

import threading
from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional

from khata.database.base import Database
from khata.domain import aggregates
from khata.domain.entities import GSTSummary, GSTType, Transaction
from khata.logging_setup import get_logger
from khata.utils.date_parser import month_label, next_month_day, period_key

logger = get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
RUPEE = Decimal("1")

GSTR3B_DUE_DAY = 20
GSTR1_DUE_DAY = 11
TDS_DEPOSIT_DUE_DAY = 7

RECENT_GST_TRANSACTIONS = 15
TREND_MONTHS = 12

_ACCUMULATORS = (
    "output_cgst",
    "output_sgst",
    "output_igst",
    "input_cgst",
    "input_sgst",
    "input_igst",
)


def round_rupees(value: Decimal) -> Decimal:
    """Round to the nearest whole rupee, halves away from zero."""
    return value.quantize(RUPEE, rounding=ROUND_HALF_UP)


def gst_amount(amount: Decimal, rate: Optional[Decimal]) -> Decimal:
    """Extract the GST component from a GST-inclusive amount."""
    if not rate:
        return ZERO
    return amount * rate / (HUNDRED + rate)


def split_gst(amount: Decimal, gst_type: Optional[GSTType]) -> tuple[Decimal, Decimal, Decimal]:
    """Split a GST amount into (cgst, sgst, igst)."""
    if gst_type == GSTType.IGST:
        return ZERO, ZERO, amount
    half = amount / 2
    return half, half, ZERO


def recompute_gst_summaries(transactions: Iterable[Transaction]) -> list[GSTSummary]:
    """Build monthly GST summaries from scratch.

    Only transactions with a non-zero GST rate contribute; a month without
    any such transaction gets no summary at all. The result depends only on
    the set of transactions, not their order.

    Args:
        transactions: All transactions of one owner

    Returns:
        One GSTSummary per period, sorted by period
    """
    totals: dict[str, dict[str, Decimal]] = defaultdict(
        lambda: {name: ZERO for name in _ACCUMULATORS}
    )

    for txn in transactions:
        if not txn.gst_rate:
            continue

        cgst, sgst, igst = split_gst(gst_amount(txn.amount, txn.gst_rate), txn.gst_type)
        side = "output" if txn.is_income else "input"
        period = totals[period_key(txn.date)]
        period[f"{side}_cgst"] += cgst
        period[f"{side}_sgst"] += sgst
        period[f"{side}_igst"] += igst

    summaries = []
    for period in sorted(totals):
        values = totals[period]
        net = (
            values["output_cgst"] + values["output_sgst"] + values["output_igst"]
            - values["input_cgst"] - values["input_sgst"] - values["input_igst"]
        )
        summaries.append(
            GSTSummary(
                period=period,
                net_liability=round_rupees(net),
                **{name: round_rupees(value) for name, value in values.items()},
            )
        )
    return summaries


class GSTService:
    """Service for maintaining and reporting GST summaries."""

    _locks: dict[str, threading.Lock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, db: Database):
        """Initialize GST service.

        Args:
            db: Database instance
        """
        self.db = db

    @classmethod
    def _owner_lock(cls, owner_id: str) -> threading.Lock:
        with cls._locks_guard:
            return cls._locks.setdefault(owner_id, threading.Lock())

    def recompute(self, owner_id: str) -> list[GSTSummary]:
        """Rebuild and store every GST summary of an owner.

        Rebuilds for the same owner are serialized so two concurrent
        mutations cannot interleave their writes.

        Returns:
            The summaries now stored
        """
        with self._owner_lock(owner_id):
            transactions = self.db.list_transactions(owner_id, gst_only=True)
            summaries = recompute_gst_summaries(transactions)
            self.db.replace_gst_summaries(owner_id, summaries)
        logger.info(
            "Recomputed %d GST summaries from %d transactions for owner %s",
            len(summaries),
            len(transactions),
            owner_id,
        )
        return summaries

    def current_summary(self, owner_id: str, today: Optional[date] = None) -> Optional[GSTSummary]:
        """Get the stored summary for the month containing ``today``."""
        today = today or date.today()
        return self.db.get_gst_summary(owner_id, period_key(today))

    def report(self, owner_id: str, today: Optional[date] = None) -> dict[str, Any]:
        """Build the GST filing overview.

        Returns:
            Dict with keys:
            - summary: totals across all periods plus the current month
            - gst_by_rate: output/input/net GST per rate, highest rate first
            - monthly_trend: up to 12 latest periods, oldest first
            - recent_transactions: latest GST-bearing transactions
            - tds: TDS withheld per section
            - filing: GSTR-3B, GSTR-1 and TDS deposit due dates
        """
        today = today or date.today()
        summaries = self.db.list_gst_summaries(owner_id)
        gst_transactions = self.db.list_transactions(owner_id, gst_only=True)
        all_transactions = self.db.list_transactions(owner_id)

        current = next(
            (s for s in summaries if s.period == period_key(today)),
            GSTSummary(period=period_key(today)),
        )

        return {
            "summary": {
                "total_output_gst": sum((s.output_total for s in summaries), ZERO),
                "total_input_gst": sum((s.input_total for s in summaries), ZERO),
                "total_net_liability": sum((s.net_liability for s in summaries), ZERO),
                "current_month": current,
            },
            "gst_by_rate": gst_by_rate(gst_transactions),
            "monthly_trend": [
                {
                    "period": s.period,
                    "month": month_label(date(int(s.period[:4]), int(s.period[5:]), 1)),
                    "output": s.output_total,
                    "input": s.input_total,
                    "liability": s.net_liability,
                }
                for s in reversed(summaries[:TREND_MONTHS])
            ],
            "recent_transactions": [
                {
                    "transaction": txn,
                    "gst_amount": gst_amount(txn.amount, txn.gst_rate),
                }
                for txn in gst_transactions[:RECENT_GST_TRANSACTIONS]
            ],
            "tds": aggregates.tds_breakdown(all_transactions),
            "filing": {
                "gstr3b_due": next_month_day(GSTR3B_DUE_DAY, today),
                "gstr1_due": next_month_day(GSTR1_DUE_DAY, today),
                "tds_deposit_due": next_month_day(TDS_DEPOSIT_DUE_DAY, today),
            },
        }


def gst_by_rate(transactions: Iterable[Transaction]) -> list[dict[str, Any]]:
    """Output, input and net GST per rate, highest rate first."""
    by_rate: dict[Decimal, dict[str, Decimal]] = {}
    for txn in transactions:
        if not txn.gst_rate:
            continue
        bucket = by_rate.setdefault(txn.gst_rate, {"output": ZERO, "input": ZERO})
        bucket["output" if txn.is_income else "input"] += gst_amount(txn.amount, txn.gst_rate)

    return [
        {
            "rate": rate,
            "output": amounts["output"],
            "input": amounts["input"],
            "net": amounts["output"] - amounts["input"],
        }
        for rate, amounts in sorted(by_rate.items(), key=lambda item: item[0], reverse=True)
    ]
