# app/services/finance.py
"""
Finance aggregation over study cards.

The reporting model:
- every card's estimated_cost counts as an expense / cash outflow
- completed cards count as revenue / cash inflow
- categories group cards by their free-text label ("Uncategorized" if empty)

All figures are recomputed from the rows on every call; nothing is stored.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import StudyCard
from app.services.periods import month_period, shift_month

UNCATEGORIZED = "Uncategorized"

MAX_HISTORY_MONTHS = 24
DEFAULT_HISTORY_MONTHS = 12


@dataclass
class CategoryTotal:
    name: str
    amount: Decimal = Decimal(0)
    count: int = 0

    def to_dict(self) -> dict:
        return {"name": self.name, "amount": float(self.amount), "count": self.count}


@dataclass
class FinanceSummary:
    total_revenue: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    cash_inflow: Decimal
    cash_outflow: Decimal
    net_cash_flow: Decimal
    item_count: int
    completed_count: int
    expense_categories: List[CategoryTotal] = field(default_factory=list)
    revenue_categories: List[CategoryTotal] = field(default_factory=list)


@dataclass
class MonthlySummary:
    period_start: datetime
    period_end: datetime
    summary: FinanceSummary


# -------------------------------------------------------------------
# Pure aggregation
# -------------------------------------------------------------------

def card_cost(card: StudyCard) -> Decimal:
    # Money is summed as Decimal so category sums match the totals exactly
    if card.estimated_cost is None:
        return Decimal(0)
    return Decimal(str(card.estimated_cost))


def category_name(card: StudyCard) -> str:
    return card.category or UNCATEGORIZED


def group_by_category(cards: Iterable[StudyCard]) -> List[CategoryTotal]:
    """
    Sum cost and count per category.

    Order is the order in which each category first appears in `cards`.
    """
    groups: Dict[str, CategoryTotal] = {}
    for card in cards:
        name = category_name(card)
        entry = groups.get(name)
        if entry is None:
            entry = groups[name] = CategoryTotal(name=name)
        entry.amount += card_cost(card)
        entry.count += 1
    return list(groups.values())


def summarize_cards(cards: Iterable[StudyCard]) -> FinanceSummary:
    """
    Aggregate cards that already fall inside one reporting period.
    """
    cards = list(cards)
    completed = [c for c in cards if c.is_completed]

    total_expenses = sum((card_cost(c) for c in cards), Decimal(0))
    completed_value = sum((card_cost(c) for c in completed), Decimal(0))

    # Revenue and cash inflow are both the realized (completed) value
    total_revenue = completed_value
    cash_inflow = completed_value
    cash_outflow = total_expenses

    return FinanceSummary(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_profit=total_revenue - total_expenses,
        cash_inflow=cash_inflow,
        cash_outflow=cash_outflow,
        net_cash_flow=cash_inflow - cash_outflow,
        item_count=len(cards),
        completed_count=len(completed),
        expense_categories=group_by_category(cards),
        revenue_categories=group_by_category(completed),
    )


def completion_rate(total_items: int, total_completed: int) -> int:
    """
    Percentage of completed cards, rounded half-up, 0 for an empty table.
    """
    if total_items <= 0:
        return 0
    rate = math.floor(100 * total_completed / total_items + 0.5)
    return max(0, min(100, rate))


# -------------------------------------------------------------------
# Data access
# -------------------------------------------------------------------

def fetch_period_cards(db: Session, start: datetime, end: datetime) -> List[StudyCard]:
    # Both ends inclusive; (created_at, id) keeps category order stable
    return (
        db.query(StudyCard)
        .filter(StudyCard.created_at >= start, StudyCard.created_at <= end)
        .order_by(StudyCard.created_at, StudyCard.id)
        .all()
    )


def count_cards(db: Session) -> Tuple[int, int]:
    """
    (total_items, total_completed) over the whole table, ignoring periods.
    """
    total_items = db.query(func.count(StudyCard.id)).scalar() or 0
    total_completed = (
        db.query(func.count(StudyCard.id))
        .filter(StudyCard.is_completed.is_(True))
        .scalar()
        or 0
    )
    return int(total_items), int(total_completed)


# -------------------------------------------------------------------
# Monthly history
# -------------------------------------------------------------------

def clamp_history_months(months: int) -> int:
    return max(0, min(months, MAX_HISTORY_MONTHS))


def history_periods(months_count: int, today: Optional[date] = None) -> List[Tuple[int, int]]:
    """
    (year, month) pairs for the last `months_count` months, newest first.
    """
    today = today or date.today()
    return [shift_month(today.year, today.month, -i) for i in range(months_count)]


def build_history(
    db: Session,
    months_count: int = DEFAULT_HISTORY_MONTHS,
    today: Optional[date] = None,
) -> List[MonthlySummary]:
    """
    Monthly summaries for the last `months_count` months (clamped to 0..24),
    newest first. Entry i is exactly i calendar months before entry 0.

    Runs one range query over the whole window and buckets rows by month.
    """
    months = history_periods(clamp_history_months(months_count), today)
    if not months:
        return []

    buckets: Dict[Tuple[int, int], List[StudyCard]] = {ym: [] for ym in months}
    bounds = {ym: month_period(*ym) for ym in months}

    window_start = bounds[months[-1]][0]
    window_end = bounds[months[0]][1]

    for card in fetch_period_cards(db, window_start, window_end):
        key = (card.created_at.year, card.created_at.month)
        start, end = bounds[key]
        if start <= card.created_at <= end:
            buckets[key].append(card)

    return [
        MonthlySummary(
            period_start=bounds[ym][0],
            period_end=bounds[ym][1],
            summary=summarize_cards(buckets[ym]),
        )
        for ym in months
    ]
