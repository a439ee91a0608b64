"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
import datetime
from datetime import date
from typing import List, Literal, Optional


class HealthMetricsSchema(BaseModel):
    monthly_income: float
    monthly_expenses: float
    total_budgeted: float
    total_spent: float
    target_emergency_fund: float
    current_emergency_fund: float


class BadgeSchema(BaseModel):
    """Achievement with unlock state and progress (0-100)"""

    id: str
    name: str
    description: str
    icon: str
    unlocked: bool
    progress: float
    target_display: Optional[str] = None


class FinancialHealthResponse(BaseModel):
    """Response for GET /v1/financial-health"""

    user_id: str
    score: int = Field(..., ge=0, le=100)
    savings_rate: float
    budget_adherence: float
    emergency_fund_progress: float
    metrics: HealthMetricsSchema
    badges: List[BadgeSchema]
    next_steps: List[str]


class DashboardStatsSchema(BaseModel):
    total_balance: float
    monthly_income: float
    monthly_expenses: float
    monthly_net: float
    savings_rate: float
    last_month_income: float
    last_month_expenses: float
    income_change: float
    expenses_change: float


class CategorySpendingSchema(BaseModel):
    category: str
    amount: float
    color: str
    percentage: float


class MonthlyTrendSchema(BaseModel):
    month: str
    label: str
    income: float
    expenses: float


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    user_id: str
    stats: DashboardStatsSchema
    spending_by_category: List[CategorySpendingSchema]
    monthly_trends: List[MonthlyTrendSchema]


class DebtCreateRequest(BaseModel):
    """Request body for POST /v1/debts"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    name: str = Field(..., min_length=1)
    type: Literal[
        "mortgage", "car_loan", "student_loan", "personal_loan", "credit_card", "medical", "other"
    ] = "credit_card"
    original_amount: float = Field(..., ge=0)
    current_balance: Optional[float] = Field(None, ge=0, description="Defaults to original_amount")
    interest_rate: float = Field(0.0, ge=0, description="Annual percentage rate")
    minimum_payment: float = Field(0.0, ge=0)
    due_day: Optional[int] = Field(None, ge=1, le=31)
    lender: Optional[str] = None


class PayoffEstimateSchema(BaseModel):
    """months is null when payoff cannot be projected"""

    months: Optional[int] = None
    total_interest: float


class DebtSchema(BaseModel):
    id: str
    name: str
    type: str
    original_amount: float
    current_balance: float
    interest_rate: float
    minimum_payment: float
    is_active: bool
    progress: float
    payoff: PayoffEstimateSchema


class DebtSummarySchema(BaseModel):
    total_debt: float
    total_original: float
    total_minimum_payment: float
    average_interest_rate: float
    total_paid: float
    active_count: int
    paid_off_count: int


class DebtListResponse(BaseModel):
    """Response for GET /v1/debts"""

    user_id: str
    debts: List[DebtSchema]
    summary: DebtSummarySchema


class PaymentRequest(BaseModel):
    """Request body for POST /v1/debts/{debt_id}/payments"""

    user_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    principal_amount: Optional[float] = Field(None, ge=0, description="Defaults to amount - interest_amount")
    interest_amount: Optional[float] = Field(None, ge=0)
    payment_date: Optional[date] = None
    notes: Optional[str] = None


class PaymentSchema(BaseModel):
    id: str
    amount: float
    principal_amount: float
    interest_amount: float
    payment_date: date
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    """Response for POST /v1/debts/{debt_id}/payments"""

    payment: PaymentSchema
    debt: DebtSchema
    paid_off: bool


class PaymentHistoryResponse(BaseModel):
    debt_id: str
    payments: List[PaymentSchema]


class StrategyStepSchema(BaseModel):
    payoff_order: int
    debt_id: str
    name: str
    current_balance: float
    interest_rate: float
    payoff: PayoffEstimateSchema


class StrategySchema(BaseModel):
    name: str
    monthly_payment: float
    total_interest: float
    payoff_months: Optional[int] = None
    debts: List[StrategyStepSchema]


class StrategiesResponse(BaseModel):
    """Response for GET /v1/debts/strategies"""

    user_id: str
    snowball: StrategySchema
    avalanche: StrategySchema


class UserRequest(BaseModel):
    user_id: str = Field(..., min_length=1)


class GenerateInsightsRequest(BaseModel):
    """Request body for POST /v1/insights/generate"""

    user_id: str = Field(..., min_length=1)
    force_refresh: bool = Field(False, description="Regenerate even when recent insights exist")


class InsightSchema(BaseModel):
    id: Optional[str] = None
    type: str
    title: str
    description: str
    category: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[datetime.date] = None


class InsightsResponse(BaseModel):
    user_id: str
    insights: List[InsightSchema]


class ChatRequest(BaseModel):
    """Request body for POST /v1/chat"""

    user_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1, max_length=2000)


class ChatResponse(BaseModel):
    reply: str
