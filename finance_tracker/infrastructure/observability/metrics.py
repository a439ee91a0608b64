"""Prometheus metrics for health scores, debt planning and LLM calls"""

from typing import List
from prometheus_client import Counter, Histogram
from finance_tracker.domain.models import Badge, PayoffEstimate

# Health score metrics
health_score_histogram = Histogram(
    "finance_health_score",
    "Distribution of computed financial health scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

badge_unlocked_counter = Counter(
    "finance_badge_unlocked_total",
    "Badges unlocked at scoring time",
    ["badge"],
)

# Debt planning metrics
payoff_no_estimate_counter = Counter(
    "finance_payoff_no_estimate_total",
    "Debts whose payoff could not be projected",
)

debt_payment_counter = Counter(
    "finance_debt_payments_total",
    "Debt payments recorded",
    ["outcome"],  # partial | paid_off
)

# LLM metrics
llm_latency_histogram = Histogram(
    "llm_latency_seconds",
    "Language model response time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)

llm_failure_counter = Counter(
    "llm_failures_total",
    "Failed language model calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_health_score(score: int, badges: List[Badge]) -> None:
    """Record score distribution and which badges are unlocked"""
    health_score_histogram.observe(score)
    for badge in badges:
        if badge.unlocked:
            badge_unlocked_counter.labels(badge=badge.id).inc()


def record_payoff_estimates(estimates: List[PayoffEstimate]) -> None:
    missing = sum(1 for e in estimates if e.months is None)
    if missing:
        payoff_no_estimate_counter.inc(missing)


def record_debt_payment(new_balance: float) -> None:
    debt_payment_counter.labels(outcome="paid_off" if new_balance == 0 else "partial").inc()
