# app/services/periods.py
#
# Period Resolution
# Maps a (period_type, year, month) request to an inclusive calendar interval
# [start 00:00:00 of first day, end 23:59:59 of last day] in local time.

import calendar
import math
from datetime import date, datetime
from typing import Optional, Tuple

MONTHLY = "monthly"
QUARTERLY = "quarterly"
YEARLY = "yearly"

PERIOD_TYPES = (MONTHLY, QUARTERLY, YEARLY)

Period = Tuple[datetime, datetime]


# ---- Month Arithmetic ----

def shift_month(year: int, month: int, delta: int = 0) -> Tuple[int, int]:
    """
    Return the (year, month) that is `delta` months away from (year, month).

    Months outside 1..12 roll over into neighbouring years, so
    shift_month(2024, 13) == (2025, 1) and shift_month(2024, 0) == (2023, 12).
    """
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_start(year: int, month: int) -> datetime:
    y, m = shift_month(year, month)
    return datetime(y, m, 1)


def month_end(year: int, month: int) -> datetime:
    y, m = shift_month(year, month)
    last_day = calendar.monthrange(y, m)[1]
    return datetime(y, m, last_day, 23, 59, 59)


def month_period(year: int, month: int) -> Period:
    return month_start(year, month), month_end(year, month)


# ---- Period Resolver ----

def resolve_period(
    period_type: Optional[str] = None,
    year: Optional[int] = None,
    month: Optional[int] = None,
    today: Optional[date] = None,
) -> Period:
    """
    period_type: "monthly" | "quarterly" | "yearly" (None -> monthly).
    year / month default to the current ones. Month is ignored for yearly.

    Unknown period types fall back to the monthly interval. Out-of-range
    months are not rejected; they roll over (month 13 -> January next year).
    Years outside datetime's range raise ValueError.
    """
    today = today or date.today()
    if year is None:
        year = today.year
    if month is None:
        month = today.month

    if period_type == YEARLY:
        return datetime(year, 1, 1), datetime(year, 12, 31, 23, 59, 59)

    if period_type == QUARTERLY:
        quarter = math.ceil(month / 3)
        first_month = (quarter - 1) * 3 + 1
        return month_start(year, first_month), month_end(year, quarter * 3)

    return month_period(year, month)


def is_known_period_type(period_type: Optional[str]) -> bool:
    return period_type in PERIOD_TYPES
