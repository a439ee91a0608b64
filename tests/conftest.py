"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_tracker.api.main import create_app
from finance_tracker.domain.models import Account, Budget, Debt, Goal, Transaction
from finance_tracker.infrastructure.database.models import (
    AccountRecord,
    Base,
    BudgetRecord,
    CategoryRecord,
    DebtRecord,
    GoalRecord,
    TransactionRecord,
)
from finance_tracker.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


class Seeder:
    """Insert rows for one user directly through the ORM"""

    def __init__(self, db: Session, user_id: str = "user_1"):
        self.db = db
        self.user_id = user_id

    def _add(self, record):
        self.db.add(record)
        self.db.commit()
        return record

    def category(self, name: str, color: str = "#ef4444", type: str = "expense") -> CategoryRecord:
        return self._add(CategoryRecord(user_id=self.user_id, name=name, type=type, color=color))

    def transaction(
        self,
        type: str,
        amount: float,
        on: date,
        category: CategoryRecord | None = None,
        description: str | None = None,
    ) -> TransactionRecord:
        return self._add(
            TransactionRecord(
                user_id=self.user_id,
                type=type,
                amount=amount,
                date=on,
                category_id=category.id if category else None,
                description=description,
            )
        )

    def budget(self, category: CategoryRecord, amount: float) -> BudgetRecord:
        return self._add(BudgetRecord(user_id=self.user_id, category_id=category.id, amount=amount))

    def goal(self, name: str, target: float, current: float) -> GoalRecord:
        return self._add(GoalRecord(user_id=self.user_id, name=name, target_amount=target, current_amount=current))

    def account(self, name: str, type: str, balance: float, is_active: bool = True) -> AccountRecord:
        return self._add(
            AccountRecord(user_id=self.user_id, name=name, type=type, balance=balance, is_active=is_active)
        )

    def debt(
        self,
        name: str,
        balance: float,
        rate: float,
        minimum: float,
        original: float | None = None,
        is_active: bool = True,
    ) -> DebtRecord:
        return self._add(
            DebtRecord(
                user_id=self.user_id,
                name=name,
                type="credit_card",
                original_amount=original if original is not None else balance,
                current_balance=balance,
                interest_rate=rate,
                minimum_payment=minimum,
                is_active=is_active,
            )
        )


@pytest.fixture
def seed(db: Session) -> Seeder:
    return Seeder(db)


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    def _make(type: str, amount: float, category_id: str | None = None, on: date | None = None, **kwargs):
        return Transaction(type=type, amount=amount, date=on or date(2024, 5, 15), category_id=category_id, **kwargs)

    return _make


@pytest.fixture
def healthy_snapshot() -> dict:
    """Saver with budgets on track, a reached goal and a full emergency fund"""
    return {
        "transactions": [
            Transaction(type="income", amount=10000, date=date(2024, 5, 1)),
            Transaction(type="expense", amount=2000, date=date(2024, 5, 3), category_id="groceries"),
            Transaction(type="expense", amount=1000, date=date(2024, 5, 9), category_id="dining"),
        ],
        "budgets": [
            Budget(category_id="groceries", amount=2500),
            Budget(category_id="dining", amount=1500),
        ],
        "goals": [
            Goal(name="Vacation", target_amount=3000, current_amount=3000),
            Goal(name="Car", target_amount=10000, current_amount=2500),
        ],
        "accounts": [
            Account(type="checking", balance=4000, name="Main"),
            Account(type="savings", balance=20000, name="High Yield"),
            Account(type="credit", balance=0, name="Visa"),
        ],
    }


@pytest.fixture
def sample_debts() -> list[Debt]:
    """Mixed portfolio: two active cards, a loan, one paid off and one inactive"""
    return [
        Debt(id="card_a", name="Card A", original_amount=5000, current_balance=3000, interest_rate=22.9, minimum_payment=120),
        Debt(id="card_b", name="Card B", original_amount=1500, current_balance=800, interest_rate=18.0, minimum_payment=40),
        Debt(id="car", name="Car Loan", original_amount=20000, current_balance=12000, interest_rate=6.5, minimum_payment=400),
        Debt(id="paid", name="Old Loan", original_amount=2000, current_balance=0, interest_rate=9.0, minimum_payment=100),
        Debt(
            id="closed",
            name="Closed Card",
            original_amount=1000,
            current_balance=200,
            interest_rate=29.0,
            minimum_payment=25,
            is_active=False,
        ),
    ]
