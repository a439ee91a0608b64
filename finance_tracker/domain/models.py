"""Domain models - pure Python dataclasses representing business entities

Amounts are plain floats in the user's currency units. The domain layer never
knows which currency that is.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class Transaction:
    """Income, expense or transfer recorded against an account"""

    type: str  # "income", "expense" or "transfer"
    amount: float
    date: date
    category_id: Optional[str] = None
    description: Optional[str] = None
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    id: Optional[str] = None


@dataclass
class Budget:
    """Spending ceiling for one category over a period"""

    category_id: str
    amount: float
    period: str = "monthly"
    spent: float = 0.0
    category_name: Optional[str] = None
    id: Optional[str] = None


@dataclass
class Goal:
    """Savings goal"""

    target_amount: float
    current_amount: float
    name: str = ""
    id: Optional[str] = None

    @property
    def reached(self) -> bool:
        return self.current_amount >= self.target_amount


@dataclass
class Account:
    """Bank, card or cash account"""

    type: str  # checking | savings | credit | investment | cash | other
    balance: float
    name: str
    is_active: bool = True
    id: Optional[str] = None

    @property
    def is_savings_like(self) -> bool:
        return self.type == "savings" or "emergency" in self.name.lower()

    @property
    def is_debt_bearing(self) -> bool:
        return self.type == "credit" and self.balance < 0


@dataclass
class Debt:
    """Loan or card balance being paid down"""

    original_amount: float
    current_balance: float
    interest_rate: float  # Annual percentage, e.g. 24.0 for 24% APR
    minimum_payment: float
    is_active: bool = True
    name: str = ""
    type: str = "other"
    id: Optional[str] = None


@dataclass
class DebtPayment:
    """Single payment against a debt, never mutated after creation"""

    amount: float
    principal_amount: float
    interest_amount: float
    payment_date: date
    debt_id: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[str] = None


@dataclass
class HealthMetrics:
    """Raw totals behind the health score"""

    monthly_income: float
    monthly_expenses: float
    total_budgeted: float
    total_spent: float
    target_emergency_fund: float
    current_emergency_fund: float


@dataclass
class Badge:
    """Achievement state for one user snapshot"""

    id: str
    name: str
    description: str
    icon: str
    unlocked: bool
    progress: float  # 0 to 100
    target_display: Optional[str] = None


@dataclass
class FinancialHealth:
    """Output of the health scorer"""

    score: int
    savings_rate: float
    budget_adherence: float
    emergency_fund_progress: float
    metrics: HealthMetrics
    badges: List[Badge] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)


@dataclass
class PayoffEstimate:
    """Amortization projection for a single debt; months is None when it cannot be projected"""

    months: Optional[int]
    total_interest: float


@dataclass
class DebtSummary:
    """Aggregate figures across a user's debts"""

    total_debt: float
    total_original: float
    total_minimum_payment: float
    average_interest_rate: float
    total_paid: float
    active_count: int
    paid_off_count: int


@dataclass
class StrategyStep:
    """One debt's position in a payoff strategy"""

    debt: Debt
    payoff_order: int
    estimate: PayoffEstimate


@dataclass
class PayoffStrategy:
    """Ranked payoff plan (snowball or avalanche)"""

    name: str
    steps: List[StrategyStep]
    monthly_payment: float
    total_interest: float
    payoff_months: Optional[int]


@dataclass
class DashboardStats:
    """Headline figures for the current month"""

    total_balance: float
    monthly_income: float
    monthly_expenses: float
    monthly_net: float
    savings_rate: float  # Percentage
    last_month_income: float
    last_month_expenses: float
    income_change: float
    expenses_change: float


@dataclass
class CategorySpending:
    """Expense total for one category"""

    category: str
    amount: float
    color: str
    percentage: float


@dataclass
class MonthlyTrend:
    """Income and expense totals for one calendar month"""

    month: str  # YYYY-MM
    label: str  # Short month name
    income: float
    expenses: float


@dataclass
class Insight:
    """Anomaly, coaching tip or kudo shown on the dashboard"""

    type: str  # "anomaly", "coaching" or "kudo"
    title: str
    description: str
    category: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[date] = None
    id: Optional[str] = None
