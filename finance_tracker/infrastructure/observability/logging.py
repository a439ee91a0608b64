"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping every record with UTC time, level and service"""

    def __init__(self, *args, service_name: str = "finance-tracker", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "finance-tracker") -> None:
    """Send JSON records from the root logger to stdout"""
    logger = logging.getLogger()
    logger.setLevel(level)

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name=service_name)
    )
    logger.addHandler(handler)

    # httpx logs full request URLs at INFO, and the LLM API key travels as a query param
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_health_score(
    request_id: str,
    user_id: str,
    score: int,
    unlocked_badges: int,
    duration_ms: float,
) -> None:
    """Log structured health score outcome for analysis"""
    logging.info(
        "Health score computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "health_score_complete",
            "score": score,
            "unlocked_badges": unlocked_badges,
            "duration_ms": duration_ms,
        },
    )


def log_payment_recorded(
    request_id: str,
    user_id: str,
    debt_id: str,
    principal_amount: float,
    new_balance: float,
    payoff_months: Optional[int],
) -> None:
    """Log a debt payment and the resulting projection"""
    logging.info(
        "Debt payment recorded",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "debt_id": debt_id,
            "step": "payment_recorded",
            "principal_amount": principal_amount,
            "new_balance": new_balance,
            "paid_off": new_balance == 0,
            "payoff_months": payoff_months,
        },
    )
