"""GET /v1/financial-health - Health score, badges and next steps"""

import time
from dataclasses import asdict
from datetime import date
from typing import Callable
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import FinancialHealthResponse
from finance_tracker.api.dependencies import get_amount_formatter, get_health_config, get_request_id
from finance_tracker.domain.health import HealthConfig, compute_financial_health
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import (
    AccountRepository,
    BudgetRepository,
    GoalRepository,
    TransactionRepository,
)
from finance_tracker.infrastructure.observability.logging import log_health_score
from finance_tracker.infrastructure.observability.metrics import record_health_score
from finance_tracker.utils.date_utils import month_bounds, trailing_quarter_bounds

router = APIRouter()


@router.get("/financial-health", response_model=FinancialHealthResponse)
def get_financial_health(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
    config: HealthConfig = Depends(get_health_config),
    format_amount: Callable[[float], str] = Depends(get_amount_formatter),
):
    """
    Score the user's current month.

    Flow:
    1. Fetch current-month transactions, budgets, goals, accounts
    2. Sum expenses over the three full months before this one
    3. Run the scorer on that snapshot
    """
    start_time = time.time()
    request_id = get_request_id(request)

    month_start, month_end = month_bounds(date.today())
    quarter_start, quarter_end = trailing_quarter_bounds(date.today())

    transactions_repo = TransactionRepository(db)
    transactions = transactions_repo.get_between(user_id, month_start, month_end)
    trailing_expenses = transactions_repo.sum_expenses(user_id, quarter_start, quarter_end)
    budgets = BudgetRepository(db).get_by_user(user_id)
    goals = GoalRepository(db).get_by_user(user_id)
    accounts = AccountRepository(db).get_by_user(user_id)

    health = compute_financial_health(
        transactions,
        budgets,
        goals,
        accounts,
        trailing_quarter_expenses=trailing_expenses,
        config=config,
        format_amount=format_amount,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_health_score(health.score, health.badges)
    log_health_score(
        request_id,
        user_id,
        health.score,
        sum(1 for b in health.badges if b.unlocked),
        duration_ms,
    )

    return FinancialHealthResponse(user_id=user_id, **asdict(health))
