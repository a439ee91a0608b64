"""Data access layer - user-scoped queries returning domain models"""

import uuid
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from finance_tracker.domain.exceptions import DebtNotFoundError
from finance_tracker.domain.models import (
    Account,
    Budget,
    Debt,
    DebtPayment,
    Goal,
    Insight,
    Transaction,
)
from finance_tracker.infrastructure.database.models import (
    AccountRecord,
    BudgetRecord,
    DebtPaymentRecord,
    DebtRecord,
    GoalRecord,
    InsightRecord,
    TransactionRecord,
)


def _str_id(value: Optional[uuid.UUID]) -> Optional[str]:
    return str(value) if value is not None else None


def to_transaction(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=str(record.id),
        type=record.type,
        amount=record.amount,
        date=record.date,
        category_id=_str_id(record.category_id),
        description=record.description,
        category_name=record.category.name if record.category else None,
        category_color=record.category.color if record.category else None,
    )


def to_debt(record: DebtRecord) -> Debt:
    return Debt(
        id=str(record.id),
        name=record.name,
        type=record.type,
        original_amount=record.original_amount,
        current_balance=record.current_balance,
        interest_rate=record.interest_rate,
        minimum_payment=record.minimum_payment,
        is_active=record.is_active,
    )


def to_payment(record: DebtPaymentRecord) -> DebtPayment:
    return DebtPayment(
        id=str(record.id),
        debt_id=str(record.debt_id),
        amount=record.amount,
        principal_amount=record.principal_amount,
        interest_amount=record.interest_amount,
        payment_date=record.payment_date,
        notes=record.notes,
    )


def to_insight(record: InsightRecord) -> Insight:
    return Insight(
        id=str(record.id),
        type=record.type,
        title=record.title,
        description=record.description,
        category=record.category,
        amount=record.amount,
        date=record.date,
    )


class TransactionRepository:
    """Repository for transactions"""

    def __init__(self, db: Session):
        self.db = db

    def get_between(self, user_id: str, start: date, end: date) -> List[Transaction]:
        """Transactions dated start..end inclusive"""
        records = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == user_id)
            .filter(TransactionRecord.date >= start, TransactionRecord.date <= end)
            .order_by(TransactionRecord.date.asc())
            .all()
        )
        return [to_transaction(r) for r in records]

    def get_since(self, user_id: str, start: date) -> List[Transaction]:
        records = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == user_id, TransactionRecord.date >= start)
            .order_by(TransactionRecord.date.desc())
            .all()
        )
        return [to_transaction(r) for r in records]

    def get_recent(self, user_id: str, limit: int = 20) -> List[Transaction]:
        records = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == user_id)
            .order_by(TransactionRecord.date.desc())
            .limit(limit)
            .all()
        )
        return [to_transaction(r) for r in records]

    def sum_expenses(self, user_id: str, start: date, end_exclusive: date) -> float:
        """Expense total over [start, end_exclusive)"""
        total = (
            self.db.query(func.coalesce(func.sum(TransactionRecord.amount), 0))
            .filter(TransactionRecord.user_id == user_id, TransactionRecord.type == "expense")
            .filter(TransactionRecord.date >= start, TransactionRecord.date < end_exclusive)
            .scalar()
        )
        return float(total or 0)


class AccountRepository:
    """Repository for accounts"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str) -> List[Account]:
        records = self.db.query(AccountRecord).filter(AccountRecord.user_id == user_id).all()
        return [
            Account(id=str(r.id), type=r.type, balance=r.balance, name=r.name, is_active=r.is_active)
            for r in records
        ]


class BudgetRepository:
    """Repository for budgets"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str) -> List[Budget]:
        records = self.db.query(BudgetRecord).filter(BudgetRecord.user_id == user_id).all()
        return [
            Budget(
                id=str(r.id),
                category_id=str(r.category_id),
                amount=r.amount,
                period=r.period,
                category_name=r.category.name if r.category else None,
            )
            for r in records
        ]


class GoalRepository:
    """Repository for savings goals"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str) -> List[Goal]:
        records = self.db.query(GoalRecord).filter(GoalRecord.user_id == user_id).all()
        return [
            Goal(id=str(r.id), name=r.name, target_amount=r.target_amount, current_amount=r.current_amount)
            for r in records
        ]


class DebtRepository:
    """Repository for debts and their payment history"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str) -> List[Debt]:
        records = (
            self.db.query(DebtRecord)
            .filter(DebtRecord.user_id == user_id)
            .order_by(DebtRecord.is_active.desc(), DebtRecord.current_balance.desc())
            .all()
        )
        return [to_debt(r) for r in records]

    def _get_record(self, user_id: str, debt_id: uuid.UUID) -> DebtRecord:
        record = (
            self.db.query(DebtRecord)
            .filter(DebtRecord.id == debt_id, DebtRecord.user_id == user_id)
            .first()
        )
        if record is None:
            raise DebtNotFoundError(f"Debt {debt_id} not found")
        return record

    def get_debt(self, user_id: str, debt_id: uuid.UUID) -> Debt:
        return to_debt(self._get_record(user_id, debt_id))

    def create_debt(self, user_id: str, debt: Debt, **details) -> Debt:
        """Persist a new debt; details carries optional columns (due_day, lender)"""
        record = DebtRecord(
            user_id=user_id,
            name=debt.name,
            type=debt.type,
            original_amount=debt.original_amount,
            current_balance=debt.current_balance,
            interest_rate=debt.interest_rate,
            minimum_payment=debt.minimum_payment,
            is_active=debt.is_active,
            **details,
        )
        self.db.add(record)
        self.db.flush()
        return to_debt(record)

    def update_balance(self, user_id: str, debt_id: uuid.UUID, balance: float, is_active: Optional[bool] = None) -> Debt:
        record = self._get_record(user_id, debt_id)
        record.current_balance = balance
        if is_active is not None:
            record.is_active = is_active
        self.db.flush()
        return to_debt(record)

    def add_payment(self, user_id: str, debt_id: uuid.UUID, payment: DebtPayment) -> DebtPayment:
        """Append a payment record; the debt balance is updated separately"""
        record = DebtPaymentRecord(
            debt_id=debt_id,
            user_id=user_id,
            amount=payment.amount,
            principal_amount=payment.principal_amount,
            interest_amount=payment.interest_amount,
            payment_date=payment.payment_date,
            notes=payment.notes,
        )
        self.db.add(record)
        self.db.flush()
        return to_payment(record)

    def get_payments(self, user_id: str, debt_id: uuid.UUID, limit: int = 10) -> List[DebtPayment]:
        records = (
            self.db.query(DebtPaymentRecord)
            .filter(DebtPaymentRecord.debt_id == debt_id, DebtPaymentRecord.user_id == user_id)
            .order_by(DebtPaymentRecord.payment_date.desc())
            .limit(limit)
            .all()
        )
        return [to_payment(r) for r in records]


class InsightRepository:
    """Repository for generated insights"""

    def __init__(self, db: Session):
        self.db = db

    def create_insight(self, user_id: str, insight: Insight) -> Insight:
        record = InsightRecord(
            user_id=user_id,
            type=insight.type,
            title=insight.title,
            description=insight.description,
            category=insight.category,
            amount=insight.amount,
            date=insight.date,
        )
        self.db.add(record)
        self.db.flush()
        return to_insight(record)

    def get_active(self, user_id: str, days: int = 7) -> List[Insight]:
        """Non-dismissed insights created in the last `days` days, newest first"""
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        records = (
            self.db.query(InsightRecord)
            .filter(InsightRecord.user_id == user_id)
            .filter(InsightRecord.is_dismissed.is_(False))
            .filter(InsightRecord.created_at > cutoff)
            .order_by(InsightRecord.created_at.desc())
            .all()
        )
        return [to_insight(r) for r in records]

    def dismiss(self, user_id: str, insight_id: uuid.UUID) -> bool:
        updated = (
            self.db.query(InsightRecord)
            .filter(InsightRecord.id == insight_id, InsightRecord.user_id == user_id)
            .update({InsightRecord.is_dismissed: True}, synchronize_session=False)
        )
        return updated > 0
