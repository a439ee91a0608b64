"""Date manipulation utilities"""

from datetime import date
from typing import List, Tuple
from dateutil.relativedelta import relativedelta


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    return day + relativedelta(day=31)


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months (negative goes back), clamping to month end"""
    return day + relativedelta(months=months)


def month_bounds(day: date) -> Tuple[date, date]:
    """First and last day of the month containing day (inclusive)"""
    return start_of_month(day), end_of_month(day)


def trailing_quarter_bounds(day: date) -> Tuple[date, date]:
    """Three full months before day's month: [start, end) with end exclusive"""
    current = start_of_month(day)
    return add_months(current, -3), current


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")


def last_n_months(day: date, n: int) -> List[date]:
    """First days of the n months ending with day's month, oldest first"""
    current = start_of_month(day)
    return [add_months(current, -i) for i in range(n - 1, -1, -1)]
