"""Spending insights - rule-based anomaly detection and LLM prompt/response handling

The language model itself lives behind infrastructure.clients.llm; this module
only builds prompts and validates what comes back.
"""

import json
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, List
from finance_tracker.domain.exceptions import InsightParseError
from finance_tracker.domain.models import Account, Budget, Insight, Transaction
from finance_tracker.utils.date_utils import add_months, start_of_month

ANOMALY_MULTIPLIER = 1.8
ANOMALY_MIN_AMOUNT = 50
RECENT_PER_CATEGORY = 3
AI_INSIGHT_TYPES = {"coaching", "kudo"}

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


@dataclass
class CategorySummary:
    """Spending shift for one category, sent to the language model"""

    category: str
    current_month_total: float
    last_month_total: float
    average: float


def _expenses_by_category(transactions: List[Transaction]) -> Dict[str, List[Transaction]]:
    """Categorized expenses grouped by category name, most recent first"""
    grouped: Dict[str, List[Transaction]] = {}
    for t in sorted(transactions, key=lambda t: t.date, reverse=True):
        if t.type == "expense" and t.category_name:
            grouped.setdefault(t.category_name, []).append(t)
    return grouped


def detect_anomalies(transactions: List[Transaction]) -> List[Insight]:
    """
    Flag unusually large recent expenses.

    For each category, the three most recent expenses are compared to the
    category's average; anything above 1.8x the average and above 50 units
    becomes an anomaly.
    """
    anomalies = []
    for category, txns in _expenses_by_category(transactions).items():
        average = sum(t.amount for t in txns) / len(txns)
        for t in txns[:RECENT_PER_CATEGORY]:
            if t.amount > average * ANOMALY_MULTIPLIER and t.amount > ANOMALY_MIN_AMOUNT:
                anomalies.append(
                    Insight(
                        type="anomaly",
                        title="Unusual Spending",
                        description=(
                            f"You spent {t.amount:,.2f} on {t.description or category}, "
                            f"which is higher than your typical {average:,.2f} average."
                        ),
                        category=category,
                        amount=t.amount,
                        date=t.date,
                    )
                )
    return anomalies


def summarize_spending(transactions: List[Transaction], today: date) -> List[CategorySummary]:
    current_month = start_of_month(today)
    last_month = add_months(current_month, -1)

    summaries = []
    for category, txns in _expenses_by_category(transactions).items():
        summaries.append(
            CategorySummary(
                category=category,
                current_month_total=sum(t.amount for t in txns if start_of_month(t.date) == current_month),
                last_month_total=sum(t.amount for t in txns if start_of_month(t.date) == last_month),
                average=sum(t.amount for t in txns) / len(txns),
            )
        )
    return summaries


def build_insight_prompt(summaries: List[CategorySummary], currency: str) -> str:
    stats = json.dumps(
        [
            {
                "category": s.category,
                "currentMonthTotal": round(s.current_month_total, 2),
                "lastMonthTotal": round(s.last_month_total, 2),
                "average": round(s.average, 2),
            }
            for s in summaries
        ]
    )
    return (
        "I am a personal finance AI agent. Analyze the following spending data:\n"
        f"Currency: {currency}\n"
        f"Category Stats: {stats}\n\n"
        "Generate 2-3 specific, actionable financial insights focusing on:\n"
        "- Spending shifts (Coaching)\n"
        "- Success stories where spending decreased (Kudo)\n"
        "- Actionable advice\n\n"
        "Return ONLY a JSON array:\n"
        '[{"type": "coaching" | "kudo", "title": "Title", "description": "Description"}]\n'
        "No markdown, no extra text, and NO emojis."
    )


def build_chat_prompt(
    question: str,
    accounts: List[Account],
    recent_transactions: List[Transaction],
    budgets: List[Budget],
    currency: str,
) -> str:
    context = {
        "accounts": [{"name": a.name, "type": a.type, "balance": a.balance} for a in accounts],
        "recent_transactions": [
            {
                "type": t.type,
                "amount": t.amount,
                "date": t.date.isoformat(),
                "description": t.description,
                "category": t.category_name,
            }
            for t in recent_transactions
        ],
        "budgets": [
            {"category": b.category_name, "amount": b.amount, "spent": b.spent, "period": b.period}
            for b in budgets
        ],
    }
    return (
        "You are a helpful, friendly financial advisor assistant. "
        "The user is asking about their personal finances.\n\n"
        f"The user's preferred currency is {currency}. "
        f"Always format monetary values in {currency}.\n\n"
        f"User's financial data: {json.dumps(context)}\n\n"
        f"User's question: {question}\n\n"
        "Instructions:\n"
        "1. Be concise (under 150 words unless more detail is needed)\n"
        "2. Use the data provided to give specific, personalized advice\n"
        "3. If asked about balance, calculate totals from the accounts data\n"
        "4. Be encouraging while staying honest about financial health\n"
        "5. Suggest actionable next steps when appropriate"
    )


def parse_insight_response(text: str) -> List[Insight]:
    """
    Turn a model response into coaching/kudo insights.

    Raises:
        InsightParseError: response is not a JSON array of insight objects
    """
    cleaned = _FENCE_RE.sub("", text).strip()
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise InsightParseError(f"Model response is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise InsightParseError("Model response is not a JSON array")

    insights = []
    for item in payload:
        if not isinstance(item, dict) or item.get("type") not in AI_INSIGHT_TYPES:
            continue
        if not item.get("title") or not item.get("description"):
            continue
        insights.append(Insight(type=item["type"], title=str(item["title"]), description=str(item["description"])))
    return insights


def fallback_insight() -> Insight:
    return Insight(
        type="coaching",
        title="Financial Health Tip",
        description="Try the 50/30/20 rule: 50% for needs, 30% for wants, and 20% for savings.",
    )
