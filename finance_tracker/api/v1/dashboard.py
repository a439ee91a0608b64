"""GET /v1/dashboard - Monthly stats, category breakdown and 6-month trend"""

from dataclasses import asdict
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import DashboardResponse
from finance_tracker.domain.dashboard import compute_dashboard_stats, monthly_trends, spending_by_category
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import AccountRepository, TransactionRepository
from finance_tracker.utils.date_utils import add_months, last_n_months, month_bounds

router = APIRouter()

TREND_MONTHS = 6


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    today = date.today()
    month_start, month_end = month_bounds(today)
    last_month_start = add_months(month_start, -1)

    transactions_repo = TransactionRepository(db)
    recent = transactions_repo.get_between(user_id, last_n_months(today, TREND_MONTHS)[0], month_end)
    current_month = [t for t in recent if t.date >= month_start]
    last_month = [t for t in recent if last_month_start <= t.date < month_start]
    accounts = AccountRepository(db).get_by_user(user_id)

    return DashboardResponse(
        user_id=user_id,
        stats=asdict(compute_dashboard_stats(current_month, last_month, accounts)),
        spending_by_category=[asdict(c) for c in spending_by_category(current_month)],
        monthly_trends=[asdict(m) for m in monthly_trends(recent, today, TREND_MONTHS)],
    )
