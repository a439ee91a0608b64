"""Debt payoff planning - amortization projections and payoff strategies

Inputs are assumed valid: negative balances, rates or payments are undefined
here and are rejected by request validation before reaching this module.
"""

import logging
import math
from dataclasses import replace
from datetime import date
from typing import Callable, Dict, List, Optional
from finance_tracker.domain.exceptions import InvalidPaymentError
from finance_tracker.domain.models import (
    Debt,
    DebtPayment,
    DebtSummary,
    PayoffEstimate,
    PayoffStrategy,
    StrategyStep,
)

logger = logging.getLogger(__name__)

AMOUNT_REL_TOL = 1e-9
SPLIT_TOLERANCE = 0.005  # Half a cent


def estimate_payoff_months(debt: Debt) -> Optional[int]:
    """
    Months until the debt is cleared paying only the minimum each month.

    Uses the fixed-payment amortization formula:
        n = ln(P / (P - B*r)) / ln(1 + r)

    Returns None ("no estimate") when:
    - balance or minimum payment is zero
    - the payment does not exceed the monthly interest accrual (P <= B*r),
      so the balance never goes down
    """
    balance = debt.current_balance
    payment = debt.minimum_payment
    if balance == 0 or payment == 0:
        return None

    monthly_rate = debt.interest_rate / 100 / 12
    if monthly_rate == 0:
        return math.ceil(balance / payment)

    monthly_interest = balance * monthly_rate
    remaining_after_interest = payment - monthly_interest
    # Float error can leave a tiny positive remainder when P == B*r exactly
    if remaining_after_interest <= 0 or math.isclose(payment, monthly_interest, rel_tol=AMOUNT_REL_TOL):
        logger.debug(
            "Minimum payment does not cover interest",
            extra={"debt_id": debt.id, "monthly_interest": monthly_interest, "minimum_payment": payment},
        )
        return None

    months = math.log(payment / remaining_after_interest) / math.log(1 + monthly_rate)
    return math.ceil(months)


def calculate_total_interest(debt: Debt, payoff_months: Optional[int] = None) -> float:
    """Interest paid over the payoff period; 0 when there is no estimate"""
    if payoff_months is None:
        payoff_months = estimate_payoff_months(debt)
    if not payoff_months or payoff_months <= 0:
        return 0.0
    total_paid = debt.minimum_payment * payoff_months
    return max(0.0, total_paid - debt.current_balance)


def estimate_payoff(debt: Debt) -> PayoffEstimate:
    months = estimate_payoff_months(debt)
    return PayoffEstimate(months=months, total_interest=calculate_total_interest(debt, months))


def debt_progress(debt: Debt) -> float:
    """Percentage of the original amount already paid, 0 to 100"""
    if debt.original_amount == 0:
        return 100.0
    paid = debt.original_amount - debt.current_balance
    return min(100.0, max(0.0, paid / debt.original_amount * 100))


def _payable(debts: List[Debt]) -> List[Debt]:
    return [d for d in debts if d.is_active and d.current_balance > 0]


def rank_snowball(debts: List[Debt]) -> List[Debt]:
    """Smallest balance first"""
    return sorted(_payable(debts), key=lambda d: d.current_balance)


def rank_avalanche(debts: List[Debt]) -> List[Debt]:
    """Highest interest rate first"""
    return sorted(_payable(debts), key=lambda d: d.interest_rate, reverse=True)


STRATEGIES: Dict[str, Callable[[List[Debt]], List[Debt]]] = {
    "snowball": rank_snowball,
    "avalanche": rank_avalanche,
}


def build_strategy(debts: List[Debt], name: str) -> PayoffStrategy:
    """
    Rank debts by the named strategy and attach per-debt projections.

    payoff_months is the longest single payoff, or None when any ranked debt
    cannot be projected.
    """
    try:
        rank = STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown payoff strategy: {name}")

    steps = [
        StrategyStep(debt=debt, payoff_order=i + 1, estimate=estimate_payoff(debt))
        for i, debt in enumerate(rank(debts))
    ]

    months = [s.estimate.months for s in steps]
    payoff_months = None if None in months else max(months, default=0)

    return PayoffStrategy(
        name=name,
        steps=steps,
        monthly_payment=sum(s.debt.minimum_payment for s in steps),
        total_interest=sum(s.estimate.total_interest for s in steps),
        payoff_months=payoff_months,
    )


def summarize_debts(debts: List[Debt]) -> DebtSummary:
    """Totals across active debts plus active/paid-off counts"""
    active = [d for d in debts if d.is_active]
    paid_off = [d for d in debts if not d.is_active or d.current_balance == 0]

    total_debt = sum(d.current_balance for d in active)
    total_original = sum(d.original_amount for d in active)
    average_rate = sum(d.interest_rate for d in active) / len(active) if active else 0.0

    return DebtSummary(
        total_debt=total_debt,
        total_original=total_original,
        total_minimum_payment=sum(d.minimum_payment for d in active),
        average_interest_rate=average_rate,
        total_paid=total_original - total_debt,
        active_count=len(active),
        paid_off_count=len(paid_off),
    )


def split_payment(
    amount: float,
    payment_date: date,
    principal_amount: Optional[float] = None,
    interest_amount: Optional[float] = None,
    debt_id: Optional[str] = None,
    notes: Optional[str] = None,
) -> DebtPayment:
    """
    Build a payment record, deriving principal as amount minus interest
    when it is not given.

    Raises:
        InvalidPaymentError: amount is not positive, a part is negative,
            or principal plus interest exceeds the amount
    """
    if amount <= 0:
        raise InvalidPaymentError("Payment amount must be positive")

    interest = interest_amount if interest_amount is not None else 0.0
    principal = principal_amount if principal_amount is not None else amount - interest
    if interest < 0 or principal < 0:
        raise InvalidPaymentError("Interest exceeds payment amount")
    if principal + interest > amount + SPLIT_TOLERANCE:
        raise InvalidPaymentError(
            f"Principal {principal:.2f} plus interest {interest:.2f} exceeds payment amount {amount:.2f}"
        )

    return DebtPayment(
        amount=amount,
        principal_amount=principal,
        interest_amount=interest,
        payment_date=payment_date,
        debt_id=debt_id,
        notes=notes,
    )


def apply_payment(debt: Debt, payment: DebtPayment) -> float:
    """New balance after the payment's principal; callers persist it"""
    return max(0.0, debt.current_balance - payment.principal_amount)


def mark_paid_off(debt: Debt) -> Debt:
    return replace(debt, current_balance=0.0, is_active=False)
