"""Insight and chat endpoints backed by spending rules and the language model"""

import logging
import uuid
from dataclasses import asdict
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    ChatRequest,
    ChatResponse,
    GenerateInsightsRequest,
    InsightsResponse,
    UserRequest,
)
from finance_tracker.api.dependencies import get_llm_client, get_request_id
from finance_tracker.config import settings
from finance_tracker.domain.health import spending_by_category_id
from finance_tracker.domain.exceptions import InsightParseError, LLMNotConfiguredError, LLMServiceError
from finance_tracker.domain.insights import (
    build_chat_prompt,
    build_insight_prompt,
    detect_anomalies,
    fallback_insight,
    parse_insight_response,
    summarize_spending,
)
from finance_tracker.infrastructure.clients.llm import LLMClient
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import (
    AccountRepository,
    BudgetRepository,
    InsightRepository,
    TransactionRepository,
)
from finance_tracker.utils.date_utils import add_months, month_bounds, start_of_month

router = APIRouter()

HISTORY_MONTHS = 6


@router.get("/insights", response_model=InsightsResponse)
def list_insights(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Non-dismissed insights from the last 7 days"""
    insights = InsightRepository(db).get_active(user_id)
    return InsightsResponse(user_id=user_id, insights=[asdict(i) for i in insights])


@router.post("/insights/generate", response_model=InsightsResponse, status_code=201)
async def generate_insights(
    request_body: GenerateInsightsRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    llm_client: LLMClient = Depends(get_llm_client),
):
    """
    Generate insights from the last six months of transactions.

    Recent non-dismissed insights are returned as they are unless
    force_refresh is set (200 rather than 201).

    Flow:
    1. Rule-based anomaly detection
    2. Coaching/kudo insights from the language model, when configured
    3. Fallback tip when nothing was produced
    4. Persist and return
    """
    request_id = get_request_id(request)
    repo = InsightRepository(db)

    if not request_body.force_refresh:
        recent = repo.get_active(request_body.user_id)
        if recent:
            response.status_code = 200
            return InsightsResponse(user_id=request_body.user_id, insights=[asdict(i) for i in recent])

    today = date.today()
    since = add_months(start_of_month(today), -HISTORY_MONTHS)
    transactions = TransactionRepository(db).get_since(request_body.user_id, since)

    insights = detect_anomalies(transactions)

    if llm_client.configured and transactions:
        prompt = build_insight_prompt(summarize_spending(transactions, today), settings.currency)
        try:
            insights.extend(parse_insight_response(await llm_client.generate(prompt)))
        except (LLMServiceError, InsightParseError) as e:
            logging.warning(f"AI insights unavailable: {e}", extra={"request_id": request_id})

    if not insights:
        insights.append(fallback_insight())

    try:
        saved = [repo.create_insight(request_body.user_id, insight) for insight in insights]
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to save insights: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return InsightsResponse(user_id=request_body.user_id, insights=[asdict(i) for i in saved])


@router.post("/insights/{insight_id}/dismiss", status_code=204)
def dismiss_insight(insight_id: str, request_body: UserRequest, db: Session = Depends(get_db)):
    try:
        insight_uuid = uuid.UUID(insight_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid insight ID format")

    if not InsightRepository(db).dismiss(request_body.user_id, insight_uuid):
        raise HTTPException(status_code=404, detail="Insight not found")
    db.commit()


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    request: Request,
    db: Session = Depends(get_db),
    llm_client: LLMClient = Depends(get_llm_client),
):
    """Answer a question about the user's finances using their recent data"""
    request_id = get_request_id(request)

    month_start, month_end = month_bounds(date.today())
    transactions_repo = TransactionRepository(db)
    budgets = BudgetRepository(db).get_by_user(request_body.user_id)
    month_spend = spending_by_category_id(transactions_repo.get_between(request_body.user_id, month_start, month_end))
    for budget in budgets:
        budget.spent = month_spend.get(budget.category_id, 0.0)

    prompt = build_chat_prompt(
        request_body.message,
        AccountRepository(db).get_by_user(request_body.user_id),
        transactions_repo.get_recent(request_body.user_id, limit=20),
        budgets,
        settings.currency,
    )

    try:
        reply = await llm_client.generate(prompt)
    except LLMNotConfiguredError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LLMServiceError as e:
        logging.error(f"Chat failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="AI assistant unavailable")

    return ChatResponse(reply=reply.strip())
