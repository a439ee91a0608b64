"""Currency formatting for user-facing text (presentation only)"""

from typing import Callable

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
}


def _indian_grouping(digits: str) -> str:
    """1234567 -> 12,34,567 (lakh/crore grouping)"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_currency(amount: float, currency: str = "INR") -> str:
    """
    Format an amount with the currency symbol, rounded to whole units.

    Unknown currency codes are prefixed with the code itself.
    """
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if amount < 0 else ""
    whole = str(round(abs(amount)))

    if currency.upper() == "INR":
        grouped = _indian_grouping(whole)
    else:
        grouped = f"{int(whole):,}"

    return f"{sign}{symbol}{grouped}"


def currency_formatter(currency: str) -> Callable[[float], str]:
    return lambda amount: format_currency(amount, currency)
