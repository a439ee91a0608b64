"""Dependency injection for FastAPI endpoints"""

from typing import Callable
from fastapi import Request
from finance_tracker.config import settings
from finance_tracker.domain.health import HealthConfig
from finance_tracker.infrastructure.clients.llm import LLMClient
from finance_tracker.utils.currency import currency_formatter


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_llm_client() -> LLMClient:
    """Provide language model client instance"""
    return LLMClient()


def get_health_config() -> HealthConfig:
    """Scorer tuning taken from settings"""
    return HealthConfig(
        emergency_fund_months=settings.emergency_fund_months,
        default_monthly_expense=settings.default_monthly_expense,
    )


def get_amount_formatter() -> Callable[[float], str]:
    """Currency formatter for amounts embedded in user-facing messages"""
    return currency_formatter(settings.currency)
