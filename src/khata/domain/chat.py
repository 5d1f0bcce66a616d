"""Canned query responder for the finance chat.

This is not a language model. A query is lower-cased and tested against an
ordered table of keyword predicates; the first match runs an aggregate
query and renders a fixed template. ``QueryResponder`` is the seam where a
real natural-language backend could be plugged in instead.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional, Sequence

from khata.database.base import Database
from khata.domain import aggregates
from khata.domain.entities import GSTSummary, Transaction
from khata.domain.errors import ValidationError
from khata.domain.gst import GSTService
from khata.logging_setup import get_logger
from khata.utils.date_parser import month_label, month_range
from khata.utils.formatting import lakhs, thousands

logger = get_logger(__name__)

TREND_MONTHS = 6
ZERO = Decimal("0")

SUGGESTED_QUESTIONS = (
    "What are my biggest expenses?",
    "How much GST do I owe?",
    "Show me revenue trend",
    "Am I profitable this month?",
)


@dataclass(frozen=True)
class ChatContext:
    """Data a responder may draw on for one query."""

    transactions: Sequence[Transaction]
    gst_summary: Optional[GSTSummary]
    today: date

    @property
    def this_month(self) -> dict[str, Decimal]:
        start, end = month_range(self.today)
        return aggregates.totals(self.transactions, start, end)


@dataclass(frozen=True)
class ChatReply:
    """Rendered answer plus the figures it was computed from."""

    message: str
    data: Any = None


class QueryResponder(ABC):
    """Answers a free-text finance question."""

    @abstractmethod
    def respond(self, query: str, context: ChatContext) -> ChatReply:
        """Answer ``query`` using ``context``."""
        pass


Predicate = Callable[[str], bool]
Handler = Callable[[str, ChatContext], ChatReply]


@dataclass(frozen=True)
class ChatRule:
    """A keyword predicate paired with the handler that answers it."""

    name: str
    matches: Predicate
    handle: Handler


def _contains_any(*words: str) -> Predicate:
    return lambda query: any(word in query for word in words)


def _contains_all_of(first: str, *alternatives: str) -> Predicate:
    return lambda query: first in query and any(word in query for word in alternatives)


# Handlers


def answer_top_expenses(query: str, context: ChatContext) -> ChatReply:
    top = aggregates.top_expense_categories(context.transactions, limit=5)
    if not top:
        return ChatReply(
            "You have no expenses recorded yet. Import your transactions to see "
            "where your money goes."
        )

    lines = "\n".join(
        f"{i}. {category}: ₹{lakhs(amount)} Lakhs" for i, (category, amount) in enumerate(top, 1)
    )
    biggest, biggest_amount = top[0]
    return ChatReply(
        f"Your top {len(top)} expense categories are:\n\n{lines}\n\n"
        f"{biggest} is your biggest expense, accounting for ₹{lakhs(biggest_amount)} Lakhs.",
        data=[{"category": category, "amount": amount} for category, amount in top],
    )


def answer_gst_liability(query: str, context: ChatContext) -> ChatReply:
    summary = context.gst_summary
    if summary is None:
        return ChatReply(
            "No GST activity is recorded for this month yet, so there is no GST "
            "liability to report."
        )

    liability = summary.net_liability
    if liability > 0:
        message = (
            f"Your GST liability for this month is **₹{thousands(liability)}K**.\n\n"
            f"Breakdown:\n"
            f"- Output GST (collected): ₹{summary.output_total:.0f}\n"
            f"- Input GST (credit): ₹{summary.input_total:.0f}\n\n"
            f"GSTR-3B is due on the 20th of next month."
        )
    else:
        message = (
            f"You have no GST liability this month. In fact, you have an input "
            f"credit of ₹{abs(liability):.0f} that can be carried forward."
        )
    return ChatReply(message, data=summary)


def answer_revenue_trend(query: str, context: ChatContext) -> ChatReply:
    trend = aggregates.monthly_trend(context.transactions, TREND_MONTHS, context.today)
    if all(month["revenue"] == 0 for month in trend):
        return ChatReply(f"No revenue is recorded in the last {TREND_MONTHS} months.")

    first, last = trend[0]["revenue"], trend[-1]["revenue"]
    if last > first:
        direction = "increasing"
    elif last < first:
        direction = "decreasing"
    else:
        direction = "flat"

    if first > 0:
        change = f"{(last - first) / first * 100:.1f}%"
    else:
        change = f"n/a (no revenue in {trend[0]['month']})"

    breakdown = "\n".join(f"- {m['month']}: ₹{lakhs(m['revenue'])}L" for m in trend)
    return ChatReply(
        f"Your revenue has been **{direction}** over the last {TREND_MONTHS} months.\n\n"
        f"Monthly breakdown:\n{breakdown}\n\nOverall change: {change}",
        data=[{"month": m["month"], "revenue": m["revenue"]} for m in trend],
    )


def answer_profitability(query: str, context: ChatContext) -> ChatReply:
    month = context.this_month
    if month["income"] == 0 and month["expenses"] == 0:
        return ChatReply(
            "No transactions are recorded this month yet, so profitability "
            "cannot be assessed."
        )

    result = aggregates.profitability(month["income"], month["expenses"])
    figures = (
        f"- Revenue: ₹{lakhs(result['revenue'])}L\n"
        f"- Expenses: ₹{lakhs(result['expenses'])}L"
    )
    if result["is_profitable"]:
        message = (
            f"Yes! You are **profitable** this month with a net profit of "
            f"₹{lakhs(result['net_profit'])} Lakhs.\n\n{figures}\n"
            f"- Profit margin: {result['margin']:.1f}%"
        )
    else:
        message = (
            f"This month shows a net loss of ₹{lakhs(abs(result['net_profit']))} Lakhs.\n\n"
            f"{figures}\n\n"
            f"Consider reviewing your expense categories for optimization opportunities."
        )
    return ChatReply(message, data=result)


def answer_cash_position(query: str, context: ChatContext) -> ChatReply:
    if not context.transactions:
        return ChatReply(
            "No transactions are recorded yet, so there is no cash position to report."
        )

    cash = aggregates.cash_position(context.transactions)
    message = f"Your current cash position is **₹{lakhs(cash['cash_balance'])} Lakhs**."
    if cash["runway_months"] is None:
        message += "\n\nNo expenses are recorded, so runway cannot be estimated."
    else:
        message += (
            f"\n\nBased on your average monthly expenses of "
            f"₹{lakhs(cash['avg_monthly_expense'])}L, you have approximately "
            f"**{cash['runway_months']} months of runway**."
        )
    return ChatReply(message, data=cash)


def answer_tds(query: str, context: ChatContext) -> ChatReply:
    breakdown = aggregates.tds_breakdown(context.transactions)
    if not breakdown:
        return ChatReply("Your TDS deductions breakdown:\n\nNo TDS deductions recorded.")

    lines = "\n".join(f"- Section {row['section']}: ₹{row['amount']:.0f}" for row in breakdown)
    return ChatReply(
        f"Your TDS deductions breakdown:\n\n{lines}\n\n"
        f"Remember to deposit TDS by the 7th of the following month.",
        data={row["section"]: row["amount"] for row in breakdown},
    )


def answer_overview(query: str, context: ChatContext) -> ChatReply:
    suggestions = "\n".join(f'- "{question}"' for question in SUGGESTED_QUESTIONS)
    if not context.transactions:
        return ChatReply(
            "You don't have any transactions yet. Import a CSV export from your "
            f"bank or accounting tool, then try asking:\n{suggestions}"
        )

    month = context.this_month
    liability = context.gst_summary.net_liability if context.gst_summary else ZERO
    return ChatReply(
        f'I understand you\'re asking about "{query}". Here\'s a summary of your '
        f"current financial position for {month_label(context.today)}:\n\n"
        f"- This month's revenue: ₹{lakhs(month['income'])} Lakhs\n"
        f"- This month's expenses: ₹{lakhs(month['expenses'])} Lakhs\n"
        f"- Net profit: ₹{lakhs(month['income'] - month['expenses'])} Lakhs\n"
        f"- GST liability: ₹{thousands(liability)}K\n\n"
        f"Try asking specific questions like:\n{suggestions}"
    )


DEFAULT_RULES: tuple[ChatRule, ...] = (
    ChatRule(
        "top_expenses",
        _contains_any("biggest expense", "top expense", "largest expense"),
        answer_top_expenses,
    ),
    ChatRule(
        "gst_liability",
        _contains_all_of("gst", "owe", "liability", "payable"),
        answer_gst_liability,
    ),
    ChatRule("revenue_trend", _contains_all_of("revenue", "trend"), answer_revenue_trend),
    ChatRule("profitability", _contains_any("profitable", "profit"), answer_profitability),
    ChatRule("cash_position", _contains_all_of("cash", "balance", "position"), answer_cash_position),
    ChatRule("tds", _contains_any("tds"), answer_tds),
)


class RuleBasedResponder(QueryResponder):
    """Dispatch a query to the first rule whose predicate matches."""

    def __init__(
        self,
        rules: Sequence[ChatRule] = DEFAULT_RULES,
        fallback: Handler = answer_overview,
    ):
        self.rules = tuple(rules)
        self.fallback = fallback

    def match(self, query: str) -> Optional[ChatRule]:
        """Return the first rule matching ``query``, if any."""
        lowered = query.lower()
        return next((rule for rule in self.rules if rule.matches(lowered)), None)

    def respond(self, query: str, context: ChatContext) -> ChatReply:
        rule = self.match(query)
        if rule is None:
            logger.debug("No chat rule matched %r, using overview", query)
            return self.fallback(query, context)
        logger.debug("Chat rule %s matched %r", rule.name, query)
        return rule.handle(query, context)


class ChatService:
    """Service for answering chat messages against an owner's ledger."""

    def __init__(self, db: Database, responder: Optional[QueryResponder] = None):
        """Initialize chat service.

        Args:
            db: Database instance
            responder: Query responder (defaults to the keyword rule table)
        """
        self.db = db
        self.responder = responder or RuleBasedResponder()
        self.gst_service = GSTService(db)

    def ask(self, owner_id: str, message: Any, today: Optional[date] = None) -> ChatReply:
        """Answer a chat message.

        Raises:
            ValidationError: If the message is missing or not a string
        """
        if not message or not isinstance(message, str) or not message.strip():
            raise ValidationError("Message is required")

        today = today or date.today()
        context = ChatContext(
            transactions=self.db.list_transactions(owner_id),
            gst_summary=self.gst_service.current_summary(owner_id, today),
            today=today,
        )
        return self.responder.respond(message.strip(), context)
