"""Debt endpoints - payoff projections, payments and strategies"""

import logging
import uuid
from dataclasses import asdict
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    DebtCreateRequest,
    DebtListResponse,
    DebtSchema,
    DebtSummarySchema,
    PaymentHistoryResponse,
    PaymentRequest,
    PaymentResponse,
    PaymentSchema,
    PayoffEstimateSchema,
    StrategiesResponse,
    StrategySchema,
    StrategyStepSchema,
    UserRequest,
)
from finance_tracker.api.dependencies import get_request_id
from finance_tracker.domain.debts import (
    apply_payment,
    build_strategy,
    debt_progress,
    estimate_payoff,
    mark_paid_off,
    split_payment,
    summarize_debts,
)
from finance_tracker.domain.exceptions import DebtNotFoundError, InvalidPaymentError
from finance_tracker.domain.models import Debt, DebtPayment, PayoffEstimate, PayoffStrategy
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import DebtRepository
from finance_tracker.infrastructure.observability.logging import log_payment_recorded
from finance_tracker.infrastructure.observability.metrics import record_debt_payment, record_payoff_estimates

router = APIRouter()


def _parse_debt_id(debt_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(debt_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid debt ID format")


def _debt_schema(debt: Debt, estimate: Optional[PayoffEstimate] = None) -> DebtSchema:
    if estimate is None:
        estimate = estimate_payoff(debt)
    return DebtSchema(
        id=debt.id,
        name=debt.name,
        type=debt.type,
        original_amount=debt.original_amount,
        current_balance=debt.current_balance,
        interest_rate=debt.interest_rate,
        minimum_payment=debt.minimum_payment,
        is_active=debt.is_active,
        progress=debt_progress(debt),
        payoff=PayoffEstimateSchema(months=estimate.months, total_interest=estimate.total_interest),
    )


def _payment_schema(payment: DebtPayment) -> PaymentSchema:
    return PaymentSchema(
        id=payment.id,
        amount=payment.amount,
        principal_amount=payment.principal_amount,
        interest_amount=payment.interest_amount,
        payment_date=payment.payment_date,
        notes=payment.notes,
    )


def _strategy_schema(strategy: PayoffStrategy) -> StrategySchema:
    return StrategySchema(
        name=strategy.name,
        monthly_payment=strategy.monthly_payment,
        total_interest=strategy.total_interest,
        payoff_months=strategy.payoff_months,
        debts=[
            StrategyStepSchema(
                payoff_order=step.payoff_order,
                debt_id=step.debt.id,
                name=step.debt.name,
                current_balance=step.debt.current_balance,
                interest_rate=step.debt.interest_rate,
                payoff=PayoffEstimateSchema(
                    months=step.estimate.months,
                    total_interest=step.estimate.total_interest,
                ),
            )
            for step in strategy.steps
        ],
    )


@router.get("/debts", response_model=DebtListResponse)
def list_debts(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """All debts with payoff projection and progress, plus totals"""
    debts = DebtRepository(db).get_by_user(user_id)
    estimates = [estimate_payoff(d) for d in debts]
    schemas = [_debt_schema(d, e) for d, e in zip(debts, estimates)]
    record_payoff_estimates([e for d, e in zip(debts, estimates) if d.is_active and d.current_balance > 0])

    return DebtListResponse(
        user_id=user_id,
        debts=schemas,
        summary=DebtSummarySchema(**asdict(summarize_debts(debts))),
    )


@router.post("/debts", response_model=DebtSchema, status_code=201)
def create_debt(request_body: DebtCreateRequest, db: Session = Depends(get_db)):
    debt = Debt(
        name=request_body.name,
        type=request_body.type,
        original_amount=request_body.original_amount,
        current_balance=(
            request_body.current_balance
            if request_body.current_balance is not None
            else request_body.original_amount
        ),
        interest_rate=request_body.interest_rate,
        minimum_payment=request_body.minimum_payment,
    )
    created = DebtRepository(db).create_debt(
        request_body.user_id,
        debt,
        due_day=request_body.due_day,
        lender=request_body.lender,
    )
    db.commit()
    return _debt_schema(created)


@router.get("/debts/strategies", response_model=StrategiesResponse)
def get_strategies(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Snowball (smallest balance first) and avalanche (highest rate first) orders"""
    debts = DebtRepository(db).get_by_user(user_id)
    return StrategiesResponse(
        user_id=user_id,
        snowball=_strategy_schema(build_strategy(debts, "snowball")),
        avalanche=_strategy_schema(build_strategy(debts, "avalanche")),
    )


@router.post("/debts/{debt_id}/payments", response_model=PaymentResponse, status_code=201)
def record_payment(
    debt_id: str,
    request_body: PaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Record a payment and reduce the debt's balance by its principal.

    The payment row and the balance update are committed together.
    """
    debt_uuid = _parse_debt_id(debt_id)
    request_id = get_request_id(request)
    repo = DebtRepository(db)

    try:
        debt = repo.get_debt(request_body.user_id, debt_uuid)
        payment = split_payment(
            amount=request_body.amount,
            payment_date=request_body.payment_date or date.today(),
            principal_amount=request_body.principal_amount,
            interest_amount=request_body.interest_amount,
            notes=request_body.notes,
        )
        saved = repo.add_payment(request_body.user_id, debt_uuid, payment)
        new_balance = apply_payment(debt, payment)
        updated = repo.update_balance(request_body.user_id, debt_uuid, new_balance)
        db.commit()

    except DebtNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except InvalidPaymentError as e:
        db.rollback()
        logging.warning(f"Invalid payment: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    estimate = estimate_payoff(updated)
    record_debt_payment(new_balance)
    log_payment_recorded(
        request_id,
        request_body.user_id,
        debt_id,
        payment.principal_amount,
        new_balance,
        estimate.months,
    )

    return PaymentResponse(
        payment=_payment_schema(saved),
        debt=_debt_schema(updated, estimate),
        paid_off=new_balance == 0,
    )


@router.get("/debts/{debt_id}/payments", response_model=PaymentHistoryResponse)
def get_payments(
    debt_id: str,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Ten most recent payments"""
    debt_uuid = _parse_debt_id(debt_id)
    repo = DebtRepository(db)
    try:
        repo.get_debt(user_id, debt_uuid)
    except DebtNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    payments = repo.get_payments(user_id, debt_uuid, limit=10)
    return PaymentHistoryResponse(debt_id=debt_id, payments=[_payment_schema(p) for p in payments])


@router.post("/debts/{debt_id}/payoff", response_model=DebtSchema)
def mark_debt_paid_off(
    debt_id: str,
    request_body: UserRequest,
    db: Session = Depends(get_db),
):
    """Zero the balance and deactivate the debt"""
    debt_uuid = _parse_debt_id(debt_id)
    repo = DebtRepository(db)
    try:
        paid = mark_paid_off(repo.get_debt(request_body.user_id, debt_uuid))
        updated = repo.update_balance(
            request_body.user_id,
            debt_uuid,
            paid.current_balance,
            is_active=paid.is_active,
        )
        db.commit()
    except DebtNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    return _debt_schema(updated)
