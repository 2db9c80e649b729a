# app/routes_finance.py
"""
Read-only finance reporting API for the executive dashboard.

- GET /api/finance/summary  -> one period (monthly / quarterly / yearly)
- GET /api/finance/monthly  -> last N months, newest first

Both require `Authorization: Bearer <PRESIDENT_API_KEY>` when a key is set.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config import Settings
from app.deps import generated_at, get_db, get_settings, internal_error, require_api_key
from app.services.card_helpers import parse_int_param
from app.services.finance import (
    DEFAULT_HISTORY_MONTHS,
    FinanceSummary,
    build_history,
    completion_rate,
    count_cards,
    fetch_period_cards,
    summarize_cards,
)
from app.services.periods import MONTHLY, is_known_period_type, resolve_period

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/finance", dependencies=[Depends(require_api_key)])


def totals_dict(summary: FinanceSummary) -> Dict[str, Any]:
    return {
        "totalRevenue": float(summary.total_revenue),
        "totalExpenses": float(summary.total_expenses),
        "netProfit": float(summary.net_profit),
        "cashInflow": float(summary.cash_inflow),
        "cashOutflow": float(summary.cash_outflow),
        "netCashFlow": float(summary.net_cash_flow),
    }


# -------------------------------------------------------------------
# Single period
# -------------------------------------------------------------------

@router.get("/summary")
def finance_summary(
    period_type: str = Query(MONTHLY, alias="periodType"),
    year: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Aggregate the cards created inside one calendar period.

    Unparsable year/month fall back to the current ones; an unknown
    periodType is echoed back but resolved as a month.
    """
    today = date.today()
    year_val = parse_int_param(year, today.year)
    month_val = parse_int_param(month, today.month)

    if not is_known_period_type(period_type):
        logger.warning("Unknown periodType %r, resolving as monthly", period_type)

    try:
        period_start, period_end = resolve_period(period_type, year_val, month_val, today)

        period_cards = fetch_period_cards(db, period_start, period_end)
        summary = summarize_cards(period_cards)

        total_items, total_completed = count_cards(db)
    except Exception:
        logger.exception(
            "Finance summary failed (periodType=%r, year=%r, month=%r)",
            period_type, year, month,
        )
        return internal_error()

    return {
        "projectCode": settings.project_code,
        "projectName": settings.project_name,
        "periodType": period_type,
        "periodStart": period_start.date().isoformat(),
        "periodEnd": period_end.date().isoformat(),
        "currency": settings.currency,
        **totals_dict(summary),
        "revenueCategories": [c.to_dict() for c in summary.revenue_categories],
        "expenseCategories": [c.to_dict() for c in summary.expense_categories],
        "metadata": {
            "totalItems": total_items,
            "totalCompleted": total_completed,
            "periodItemCount": summary.item_count,
            "periodCompletedCount": summary.completed_count,
            "completionRate": completion_rate(total_items, total_completed),
        },
        "generatedAt": generated_at(),
    }


# -------------------------------------------------------------------
# Monthly history
# -------------------------------------------------------------------

@router.get("/monthly")
def finance_monthly(
    months: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Last `months` monthly summaries (default 12, at most 24), newest first.
    Used by the dashboard to bulk-sync history.
    """
    months_count = parse_int_param(months, DEFAULT_HISTORY_MONTHS)

    try:
        history = build_history(db, months_count)
    except Exception:
        logger.exception("Finance monthly history failed (months=%r)", months)
        return internal_error()

    summaries = [
        {
            "periodType": MONTHLY,
            "periodStart": entry.period_start.date().isoformat(),
            "periodEnd": entry.period_end.date().isoformat(),
            **totals_dict(entry.summary),
            "itemCount": entry.summary.item_count,
            "completedCount": entry.summary.completed_count,
            "expenseCategories": [c.to_dict() for c in entry.summary.expense_categories],
        }
        for entry in history
    ]

    return {
        "projectCode": settings.project_code,
        "projectName": settings.project_name,
        "currency": settings.currency,
        "summaries": summaries,
        "generatedAt": generated_at(),
    }
