"""Financial health scoring engine - composite score, badges and next steps"""

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
from finance_tracker.domain.badges import BadgeContext, evaluate_badges
from finance_tracker.domain.models import (
    Account,
    Budget,
    FinancialHealth,
    Goal,
    HealthMetrics,
    Transaction,
)

UNCATEGORIZED = "uncategorized"

SAVINGS_WEIGHT = 0.4
BUDGET_WEIGHT = 0.3
EMERGENCY_FUND_WEIGHT = 0.3


@dataclass(frozen=True)
class HealthConfig:
    """Tunable inputs to the scorer, supplied by the caller"""

    emergency_fund_months: int = 6
    default_monthly_expense: float = 2000.0
    max_next_steps: int = 2


def _plain_amount(amount: float) -> str:
    return f"{round(amount):,}"


def total_by_type(transactions: List[Transaction], txn_type: str) -> float:
    return sum(t.amount for t in transactions if t.type == txn_type)


def calculate_savings_rate(income: float, expenses: float) -> float:
    """Fraction of income not spent; 0 when there is no income"""
    if income <= 0:
        return 0.0
    return max(0.0, (income - expenses) / income)


def spending_by_category_id(transactions: List[Transaction]) -> Dict[str, float]:
    """Sum expense amounts per category id"""
    spending: Dict[str, float] = defaultdict(float)
    for t in transactions:
        if t.type == "expense":
            spending[t.category_id or UNCATEGORIZED] += t.amount
    return dict(spending)


def calculate_budget_adherence(budgets: List[Budget], spending: Dict[str, float]) -> float:
    """
    Fraction of budgets whose category spend stayed within the budget amount.

    No budgets at all counts as perfect adherence.
    """
    if not budgets:
        return 1.0
    on_track = sum(1 for b in budgets if spending.get(b.category_id, 0.0) <= b.amount)
    return on_track / len(budgets)


def calculate_emergency_fund_target(
    trailing_quarter_expenses: float,
    current_month_expenses: float,
    config: HealthConfig,
) -> float:
    """
    Target emergency fund = N months of average expense.

    Average comes from the three full months before the current one. Falls
    back to this month's expenses, then to the configured default, so the
    target is never zero.
    """
    if trailing_quarter_expenses > 0:
        avg_monthly_expenses = trailing_quarter_expenses / 3
    elif current_month_expenses > 0:
        avg_monthly_expenses = current_month_expenses
    else:
        avg_monthly_expenses = config.default_monthly_expense
    return avg_monthly_expenses * config.emergency_fund_months


def calculate_emergency_fund_progress(current: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return min(1.0, max(0.0, current / target))


def calculate_health_score(savings_rate: float, budget_adherence: float, emergency_fund_progress: float) -> int:
    """
    Weighted composite score from 0 to 100.

    Weights:
    - 40%: Savings rate (capped at 100%)
    - 30%: Budget adherence
    - 30%: Emergency fund progress
    """
    savings_component = min(1.0, savings_rate)
    raw = 100 * (
        SAVINGS_WEIGHT * savings_component
        + BUDGET_WEIGHT * budget_adherence
        + EMERGENCY_FUND_WEIGHT * emergency_fund_progress
    )
    return max(0, min(100, math.floor(raw + 0.5)))  # Half-up rounding


def build_next_steps(
    savings_rate: float,
    budget_adherence: float,
    emergency_fund_progress: float,
    has_debt: bool,
    income: float,
    target_emergency_fund: float,
    config: HealthConfig,
    format_amount: Callable[[float], str] = _plain_amount,
) -> List[str]:
    """Prioritized recommendations, truncated to config.max_next_steps"""
    steps: List[str] = []
    if savings_rate < 0.2:
        steps.append(f"Increase monthly savings by {format_amount(income * 0.1)} to boost your score.")
    if budget_adherence < 0.8:
        steps.append("Review categories that are over budget and adjust spending.")
    if emergency_fund_progress < 0.5:
        steps.append(f"Add {format_amount(target_emergency_fund * 0.1)} to your emergency fund.")
    if has_debt:
        steps.append("Prioritize paying off high-interest credit card debt.")
    if not steps:
        steps.append("Great job! Maintain your current habits to keep your score high.")
    return steps[: config.max_next_steps]


def compute_financial_health(
    transactions: List[Transaction],
    budgets: List[Budget],
    goals: List[Goal],
    accounts: List[Account],
    trailing_quarter_expenses: float = 0.0,
    config: Optional[HealthConfig] = None,
    format_amount: Optional[Callable[[float], str]] = None,
) -> FinancialHealth:
    """
    Main entry point: score one user's current-month snapshot.

    transactions are the current calendar month only; trailing_quarter_expenses
    is the expense total of the three full months before it. format_amount is
    only used to render amounts inside next-step messages.
    """
    config = config or HealthConfig()
    format_amount = format_amount or _plain_amount

    income = total_by_type(transactions, "income")
    expenses = total_by_type(transactions, "expense")
    savings_rate = calculate_savings_rate(income, expenses)

    spending = spending_by_category_id(transactions)
    budget_adherence = calculate_budget_adherence(budgets, spending)
    total_budgeted = sum(b.amount for b in budgets)

    current_emergency_fund = sum(a.balance for a in accounts if a.is_savings_like)
    target_emergency_fund = calculate_emergency_fund_target(trailing_quarter_expenses, expenses, config)
    emergency_fund_progress = calculate_emergency_fund_progress(current_emergency_fund, target_emergency_fund)

    score = calculate_health_score(savings_rate, budget_adherence, emergency_fund_progress)

    has_debt = any(a.is_debt_bearing for a in accounts)
    max_goal_progress = max(
        (g.current_amount / g.target_amount * 100 if g.target_amount > 0 else 0.0 for g in goals),
        default=0.0,
    )
    badges = evaluate_badges(
        BadgeContext(
            total_budgeted=total_budgeted,
            total_expenses=expenses,
            savings_rate=savings_rate,
            max_goal_progress=max_goal_progress,
            any_goal_reached=any(g.reached for g in goals),
            has_debt=has_debt,
        )
    )

    next_steps = build_next_steps(
        savings_rate,
        budget_adherence,
        emergency_fund_progress,
        has_debt,
        income,
        target_emergency_fund,
        config,
        format_amount,
    )

    return FinancialHealth(
        score=score,
        savings_rate=savings_rate,
        budget_adherence=budget_adherence,
        emergency_fund_progress=emergency_fund_progress,
        metrics=HealthMetrics(
            monthly_income=income,
            monthly_expenses=expenses,
            total_budgeted=total_budgeted,
            total_spent=expenses,
            target_emergency_fund=target_emergency_fund,
            current_emergency_fund=current_emergency_fund,
        ),
        badges=badges,
        next_steps=next_steps,
    )
