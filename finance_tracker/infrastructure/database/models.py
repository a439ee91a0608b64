"""SQLAlchemy ORM models for the finance tracker tables"""

import uuid
from sqlalchemy import Column, Boolean, Date, DateTime, ForeignKey, Integer, Numeric, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


MONEY = Numeric(14, 2, asdecimal=False)


class AccountRecord(Base):
    """Checking, savings, credit, investment or cash account"""

    __tablename__ = "accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    balance = Column(MONEY, nullable=False, default=0)
    currency = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CategoryRecord(Base):
    """Income or expense category"""

    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    color = Column(Text, nullable=True)
    icon = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionRecord(Base):
    """Income, expense or transfer"""

    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=True)
    category_id = Column(Uuid, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    type = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    category = relationship("CategoryRecord", lazy="joined")


class BudgetRecord(Base):
    """Spending limit for a category"""

    __tablename__ = "budgets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    category_id = Column(Uuid, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    amount = Column(MONEY, nullable=False)
    period = Column(Text, nullable=False, default="monthly")
    start_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    category = relationship("CategoryRecord", lazy="joined")


class GoalRecord(Base):
    """Savings goal"""

    __tablename__ = "goals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    target_amount = Column(MONEY, nullable=False)
    current_amount = Column(MONEY, nullable=False, default=0)
    deadline = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DebtRecord(Base):
    """Loan, card or other debt"""

    __tablename__ = "debts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False, default="other")
    original_amount = Column(MONEY, nullable=False)
    current_balance = Column(MONEY, nullable=False)
    interest_rate = Column(Numeric(6, 3, asdecimal=False), nullable=False, default=0)
    minimum_payment = Column(MONEY, nullable=False, default=0)
    due_day = Column(Integer, nullable=True)
    lender = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    payments = relationship("DebtPaymentRecord", back_populates="debt", cascade="all, delete-orphan")


class DebtPaymentRecord(Base):
    """Payment history for a debt, append-only"""

    __tablename__ = "debt_payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    debt_id = Column(Uuid, ForeignKey("debts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    principal_amount = Column(MONEY, nullable=False)
    interest_amount = Column(MONEY, nullable=False, default=0)
    payment_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    debt = relationship("DebtRecord", back_populates="payments")


class InsightRecord(Base):
    """Generated anomaly, coaching or kudo insight"""

    __tablename__ = "ai_insights"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Text, nullable=True)
    amount = Column(MONEY, nullable=True)
    date = Column(Date, nullable=True)
    is_dismissed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
