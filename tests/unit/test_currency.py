"""Unit tests for currency formatting"""

import pytest
from finance_tracker.utils.currency import currency_formatter, format_currency


@pytest.mark.parametrize(
    "amount,currency,expected",
    [
        (1234567, "INR", "₹12,34,567"),
        (999, "INR", "₹999"),
        (1234.6, "USD", "$1,235"),
        (-50, "eur", "-€50"),
        (1000, "CHF", "CHF 1,000"),
    ],
)
def test_format_currency(amount, currency, expected):
    assert format_currency(amount, currency) == expected


def test_currency_formatter():
    fmt = currency_formatter("GBP")
    assert fmt(2500) == "£2,500"
