"""Dashboard metrics - monthly totals, category breakdown and trends"""

from collections import OrderedDict
from datetime import date
from typing import Dict, List
from finance_tracker.domain.health import total_by_type
from finance_tracker.domain.models import (
    Account,
    CategorySpending,
    DashboardStats,
    MonthlyTrend,
    Transaction,
)
from finance_tracker.utils.date_utils import last_n_months, month_key

DEFAULT_CATEGORY_COLOR = "#94a3b8"


def percent_change(current: float, previous: float) -> float:
    """Month-over-month change in percent; 100 when growing from nothing"""
    if previous > 0:
        return (current - previous) / previous * 100
    return 100.0 if current > 0 else 0.0


def compute_dashboard_stats(
    current_month: List[Transaction],
    last_month: List[Transaction],
    accounts: List[Account],
) -> DashboardStats:
    income = total_by_type(current_month, "income")
    expenses = total_by_type(current_month, "expense")
    last_income = total_by_type(last_month, "income")
    last_expenses = total_by_type(last_month, "expense")

    return DashboardStats(
        total_balance=sum(a.balance for a in accounts if a.is_active),
        monthly_income=income,
        monthly_expenses=expenses,
        monthly_net=income - expenses,
        savings_rate=(income - expenses) / income * 100 if income > 0 else 0.0,
        last_month_income=last_income,
        last_month_expenses=last_expenses,
        income_change=percent_change(income, last_income),
        expenses_change=percent_change(expenses, last_expenses),
    )


def spending_by_category(transactions: List[Transaction]) -> List[CategorySpending]:
    """Categorized expenses grouped by category name, largest first"""
    expenses = total_by_type(transactions, "expense") or 1.0

    totals: Dict[str, float] = {}
    colors: Dict[str, str] = {}
    for t in transactions:
        if t.type != "expense" or not t.category_id:
            continue
        name = t.category_name or "Uncategorized"
        totals[name] = totals.get(name, 0.0) + t.amount
        colors[name] = t.category_color or DEFAULT_CATEGORY_COLOR

    breakdown = [
        CategorySpending(category=name, amount=amount, color=colors[name], percentage=amount / expenses * 100)
        for name, amount in totals.items()
    ]
    return sorted(breakdown, key=lambda c: c.amount, reverse=True)


def monthly_trends(transactions: List[Transaction], today: date, months: int = 6) -> List[MonthlyTrend]:
    """Income and expenses per calendar month, oldest first, empty months included"""
    buckets: "OrderedDict[str, MonthlyTrend]" = OrderedDict()
    for first_day in last_n_months(today, months):
        buckets[month_key(first_day)] = MonthlyTrend(
            month=month_key(first_day),
            label=first_day.strftime("%b"),
            income=0.0,
            expenses=0.0,
        )

    for t in transactions:
        bucket = buckets.get(month_key(t.date))
        if bucket is None:
            continue
        if t.type == "income":
            bucket.income += t.amount
        elif t.type == "expense":
            bucket.expenses += t.amount

    return list(buckets.values())
