"""Unit tests for insight rules and language model response handling"""

import json
import pytest
from datetime import date, timedelta
from finance_tracker.domain.exceptions import InsightParseError
from finance_tracker.domain.insights import (
    build_chat_prompt,
    build_insight_prompt,
    detect_anomalies,
    fallback_insight,
    parse_insight_response,
    summarize_spending,
)
from finance_tracker.domain.models import Account, Budget, Transaction


def _expense(amount: float, on: date, category: str = "Dining", description: str | None = None) -> Transaction:
    return Transaction(
        type="expense",
        amount=amount,
        date=on,
        category_id=category.lower(),
        category_name=category,
        description=description,
    )


def test_detect_anomalies_flags_recent_spike():
    """Test a recent expense far above the category average is flagged"""
    start = date(2024, 1, 1)
    transactions = [_expense(100, start + timedelta(days=i)) for i in range(5)]
    transactions.append(_expense(1000, start + timedelta(days=10), description="Tasting menu"))

    anomalies = detect_anomalies(transactions)

    # Average is 1500 / 6 = 250; 1000 > 450
    assert len(anomalies) == 1
    assert anomalies[0].type == "anomaly"
    assert anomalies[0].amount == 1000
    assert anomalies[0].category == "Dining"
    assert anomalies[0].date == start + timedelta(days=10)
    assert "Tasting menu" in anomalies[0].description


def test_detect_anomalies_only_checks_three_most_recent():
    start = date(2024, 1, 1)
    transactions = [_expense(1000, start)]  # Oldest, not among the 3 most recent
    transactions += [_expense(100, start + timedelta(days=i)) for i in range(1, 6)]

    assert detect_anomalies(transactions) == []


def test_detect_anomalies_ignores_small_amounts():
    """Test spikes under 50 units are not worth flagging"""
    start = date(2024, 1, 1)
    transactions = [_expense(5, start + timedelta(days=i)) for i in range(5)]
    transactions.append(_expense(45, start + timedelta(days=9)))

    assert detect_anomalies(transactions) == []


def test_detect_anomalies_skips_income_and_uncategorized():
    transactions = [
        Transaction(type="income", amount=9000, date=date(2024, 1, 5), category_name="Salary"),
        Transaction(type="expense", amount=9000, date=date(2024, 1, 5)),
    ]
    assert detect_anomalies(transactions) == []


def test_summarize_spending_month_split():
    today = date(2024, 5, 20)
    transactions = [
        _expense(100, date(2024, 5, 2), "Food"),
        _expense(50, date(2024, 5, 9), "Food"),
        _expense(300, date(2024, 4, 15), "Food"),
        _expense(70, date(2024, 3, 1), "Food"),
    ]

    [summary] = summarize_spending(transactions, today)

    assert summary.category == "Food"
    assert summary.current_month_total == 150
    assert summary.last_month_total == 300
    assert summary.average == pytest.approx(130)


def test_build_insight_prompt_includes_stats():
    summaries = summarize_spending([_expense(100, date(2024, 5, 2), "Food")], date(2024, 5, 20))
    prompt = build_insight_prompt(summaries, "EUR")

    assert "Currency: EUR" in prompt
    assert '"category": "Food"' in prompt
    assert "Return ONLY a JSON array" in prompt


def test_build_chat_prompt_includes_context():
    prompt = build_chat_prompt(
        "Can I afford a holiday?",
        [Account(type="savings", balance=1200, name="Rainy Day")],
        [_expense(40, date(2024, 5, 2), "Food", "Lunch")],
        [Budget(category_id="food", amount=300, spent=40, category_name="Food")],
        "GBP",
    )

    assert "Can I afford a holiday?" in prompt
    assert "Rainy Day" in prompt
    assert "Lunch" in prompt
    assert "GBP" in prompt


def test_parse_insight_response_strips_fences():
    text = '```json\n[{"type": "kudo", "title": "Nice", "description": "Dining fell 20%"}]\n```'

    [insight] = parse_insight_response(text)

    assert insight.type == "kudo"
    assert insight.title == "Nice"
    assert insight.description == "Dining fell 20%"


def test_parse_insight_response_filters_invalid_items():
    payload = [
        {"type": "coaching", "title": "Cut takeout", "description": "Cook twice a week"},
        {"type": "anomaly", "title": "Not allowed", "description": "Only rules produce anomalies"},
        {"type": "kudo", "title": "", "description": "Missing title"},
        "not an object",
    ]

    insights = parse_insight_response(json.dumps(payload))

    assert [i.title for i in insights] == ["Cut takeout"]


def test_parse_insight_response_invalid_json():
    with pytest.raises(InsightParseError):
        parse_insight_response("Here are some tips: spend less!")


def test_parse_insight_response_not_a_list():
    with pytest.raises(InsightParseError):
        parse_insight_response('{"type": "kudo", "title": "x", "description": "y"}')


def test_fallback_insight():
    insight = fallback_insight()
    assert insight.type == "coaching"
    assert "50/30/20" in insight.description
