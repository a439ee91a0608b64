"""Unit tests for financial health scoring"""

import math
import pytest
from datetime import date
from finance_tracker.domain.health import (
    HealthConfig,
    calculate_budget_adherence,
    calculate_emergency_fund_target,
    calculate_health_score,
    calculate_savings_rate,
    compute_financial_health,
    spending_by_category_id,
)
from finance_tracker.domain.models import Account, Budget, Goal, Transaction


def test_compute_financial_health_empty_snapshot():
    """Test scorer returns a fully defined result with no data at all"""
    health = compute_financial_health([], [], [], [])

    assert health.savings_rate == 0
    assert health.budget_adherence == 1  # No budgets is vacuously on track
    assert health.emergency_fund_progress == 0
    assert health.score == 30  # Only the budget component contributes
    assert health.metrics.target_emergency_fund == 12000  # 2000 default * 6 months
    assert health.metrics.current_emergency_fund == 0
    assert len(health.badges) == 4
    assert len(health.next_steps) == 2


def test_compute_financial_health_savings_scenario(make_transaction):
    """Test income 5000 / expenses 3000 with no budgets and no emergency fund scores 46"""
    transactions = [
        make_transaction("income", 5000),
        make_transaction("expense", 3000, category_id="rent"),
    ]

    health = compute_financial_health(transactions, [], [], [])

    assert health.savings_rate == pytest.approx(0.4)
    assert health.budget_adherence == 1
    assert health.emergency_fund_progress == 0
    # 0.4 * 40 + 0.3 * 100 + 0.3 * 0 = 16 + 30 + 0
    assert health.score == 46


def test_savings_rate_zero_income():
    """Test no income gives a zero savings rate regardless of spending"""
    assert calculate_savings_rate(0, 0) == 0
    assert calculate_savings_rate(0, 1500) == 0


def test_savings_rate_never_negative():
    """Test overspending floors the savings rate at zero"""
    assert calculate_savings_rate(1000, 2500) == 0
    assert calculate_savings_rate(1000, 250) == pytest.approx(0.75)


@pytest.mark.parametrize(
    "income,expenses,savings_balance",
    [
        (1, 1_000_000_000, 0),
        (1_000_000_000, 0, 1_000_000_000_000),
        (0, 0, -50_000),
        (100, 100, 0),
    ],
)
def test_score_is_bounded_integer(make_transaction, income, expenses, savings_balance):
    """Test score stays an integer in [0, 100] for extreme inputs"""
    transactions = [
        make_transaction("income", income),
        make_transaction("expense", expenses, category_id="misc"),
    ]
    accounts = [Account(type="savings", balance=savings_balance, name="Savings")]

    health = compute_financial_health(transactions, [Budget(category_id="misc", amount=10)], [], accounts)

    assert isinstance(health.score, int)
    assert 0 <= health.score <= 100
    assert math.isfinite(health.savings_rate)
    assert 0 <= health.emergency_fund_progress <= 1


def test_budget_adherence_counts_on_track_categories(make_transaction):
    """Test adherence is the share of budgets not exceeded"""
    transactions = [
        make_transaction("expense", 300, category_id="groceries"),
        make_transaction("expense", 250, category_id="groceries"),
        make_transaction("expense", 90, category_id="fuel"),
        make_transaction("income", 4000, category_id="groceries"),  # Income never counts as spend
    ]
    budgets = [
        Budget(category_id="groceries", amount=500),  # 550 spent, over
        Budget(category_id="fuel", amount=100),  # 90 spent, on track
        Budget(category_id="travel", amount=0),  # Nothing spent, on track at exactly 0
    ]

    spending = spending_by_category_id(transactions)

    assert spending == {"groceries": 550, "fuel": 90}
    assert calculate_budget_adherence(budgets, spending) == pytest.approx(2 / 3)


def test_budget_adherence_no_budgets():
    """Test zero budgets gives perfect adherence"""
    assert calculate_budget_adherence([], {"groceries": 1_000_000}) == 1


def test_uncategorized_expenses_do_not_hit_budgets(make_transaction):
    """Test expenses without a category are grouped separately"""
    spending = spending_by_category_id([make_transaction("expense", 75)])
    assert spending == {"uncategorized": 75}


def test_emergency_fund_target_uses_trailing_quarter():
    """Test average of the previous three months drives the target"""
    config = HealthConfig()
    assert calculate_emergency_fund_target(9000, 5000, config) == 18000  # 3000 avg * 6


def test_emergency_fund_target_falls_back_to_current_month():
    config = HealthConfig()
    assert calculate_emergency_fund_target(0, 2500, config) == 15000


def test_emergency_fund_target_configurable_default():
    """Test the no-history fallback comes from config, not a hard-coded amount"""
    assert calculate_emergency_fund_target(0, 0, HealthConfig()) == 12000
    assert calculate_emergency_fund_target(0, 0, HealthConfig(default_monthly_expense=500)) == 3000
    assert calculate_emergency_fund_target(0, 0, HealthConfig(emergency_fund_months=3)) == 6000


def test_emergency_fund_counts_savings_like_accounts(make_transaction):
    """Test savings accounts and accounts named 'emergency' both count"""
    accounts = [
        Account(type="savings", balance=3000, name="Savings"),
        Account(type="checking", balance=1500, name="My EMERGENCY stash"),
        Account(type="checking", balance=50000, name="Everyday"),
    ]

    health = compute_financial_health([], [], [], accounts, trailing_quarter_expenses=4500)

    assert health.metrics.current_emergency_fund == 4500
    assert health.metrics.target_emergency_fund == 9000  # 1500 avg * 6
    assert health.emergency_fund_progress == pytest.approx(0.5)


def test_emergency_fund_progress_capped_at_one():
    accounts = [Account(type="savings", balance=1_000_000, name="Savings")]
    health = compute_financial_health([], [], [], accounts)
    assert health.emergency_fund_progress == 1


def test_calculate_health_score_weights():
    """Test each component's weight and the savings cap"""
    assert calculate_health_score(1.0, 1.0, 1.0) == 100
    assert calculate_health_score(0.0, 0.0, 0.0) == 0
    assert calculate_health_score(0.5, 0.0, 0.0) == 20
    assert calculate_health_score(0.0, 0.5, 0.0) == 15
    assert calculate_health_score(0.0, 0.0, 0.5) == 15


def test_healthy_snapshot(healthy_snapshot):
    """Test a strong month unlocks everything and gets the generic message"""
    health = compute_financial_health(**healthy_snapshot)

    assert health.savings_rate == pytest.approx(0.7)
    assert health.budget_adherence == 1
    assert health.emergency_fund_progress == 1
    assert health.score == 88
    assert all(b.unlocked for b in health.badges)
    assert health.next_steps == ["Great job! Maintain your current habits to keep your score high."]
    assert health.metrics.monthly_income == 10000
    assert health.metrics.monthly_expenses == 3000
    assert health.metrics.total_budgeted == 4000
    assert health.metrics.total_spent == 3000


def test_next_steps_priority_and_truncation(make_transaction):
    """Test only the first two recommendations survive, in priority order"""
    transactions = [
        make_transaction("income", 1000),
        make_transaction("expense", 950, category_id="food"),
    ]
    budgets = [Budget(category_id="food", amount=100)]
    accounts = [Account(type="credit", balance=-400, name="Card")]

    health = compute_financial_health(transactions, budgets, [], accounts)

    assert health.next_steps == [
        "Increase monthly savings by 100 to boost your score.",
        "Review categories that are over budget and adjust spending.",
    ]


def test_next_steps_debt_recommendation(make_transaction):
    """Test the debt recommendation appears once higher priorities are satisfied"""
    transactions = [
        make_transaction("income", 10000),
        make_transaction("expense", 1000, category_id="food"),
    ]
    accounts = [
        Account(type="credit", balance=-400, name="Card"),
        Account(type="savings", balance=100000, name="Savings"),
    ]

    health = compute_financial_health(transactions, [], [], accounts)

    assert health.next_steps == ["Prioritize paying off high-interest credit card debt."]


def test_next_steps_use_amount_formatter(make_transaction):
    """Test amounts in recommendations go through the supplied formatter"""
    transactions = [make_transaction("income", 2000), make_transaction("expense", 1900, category_id="x")]

    health = compute_financial_health(
        transactions, [], [], [], format_amount=lambda amount: f"EUR {amount:.2f}"
    )

    assert health.next_steps[0] == "Increase monthly savings by EUR 200.00 to boost your score."
    assert health.next_steps[1] == "Add EUR 1140.00 to your emergency fund."


def test_max_next_steps_configurable(make_transaction):
    transactions = [make_transaction("income", 1000), make_transaction("expense", 950, category_id="food")]
    budgets = [Budget(category_id="food", amount=100)]
    accounts = [Account(type="credit", balance=-400, name="Card")]

    health = compute_financial_health(transactions, budgets, [], accounts, config=HealthConfig(max_next_steps=4))

    assert len(health.next_steps) == 4
    assert health.next_steps[3] == "Prioritize paying off high-interest credit card debt."


def test_compute_financial_health_is_deterministic(healthy_snapshot):
    """Test identical snapshots produce identical results"""
    first = compute_financial_health(**healthy_snapshot)
    second = compute_financial_health(**healthy_snapshot)
    assert first == second


def test_compute_financial_health_does_not_mutate_inputs(healthy_snapshot):
    before = [Transaction(**vars(t)) for t in healthy_snapshot["transactions"]]
    compute_financial_health(**healthy_snapshot)
    assert healthy_snapshot["transactions"] == before


def test_transfers_ignored(make_transaction):
    """Test transfers are neither income nor expense"""
    transactions = [
        make_transaction("income", 1000),
        make_transaction("transfer", 800),
    ]
    health = compute_financial_health(transactions, [], [], [])
    assert health.metrics.monthly_expenses == 0
    assert health.savings_rate == 1


def test_goals_feed_goal_crusher():
    goals = [Goal(target_amount=1000, current_amount=1000)]
    health = compute_financial_health([], [], goals, [])
    goal_badge = next(b for b in health.badges if b.id == "goal-crusher")
    assert goal_badge.unlocked is True
    assert goal_badge.progress == 100


def test_dates_outside_month_are_callers_concern(make_transaction):
    """Test the scorer trusts the snapshot it is given"""
    transactions = [make_transaction("income", 500, on=date(2020, 1, 1))]
    health = compute_financial_health(transactions, [], [], [])
    assert health.metrics.monthly_income == 500
