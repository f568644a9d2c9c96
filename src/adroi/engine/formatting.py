"""
Input parsing and display formatting

Raw form values (numbers or free text) are turned into floats before they
reach the engine, and engine outputs are formatted for reports and messages.
"""

import math
import re
from typing import Any


DISCLAIMER = (
    "This is a private personal marketing simulation tool for educational and "
    "planning purposes. Not financial advice or professional advertising software."
)

CURRENCIES = ["$", "€", "£", "¥", "₽", "₴", "₹", "R$", "A$", "C$"]

PLATFORM_NAMES = [
    "Facebook Ads",
    "Google Ads",
    "TikTok Ads",
    "Instagram Ads",
    "LinkedIn Ads",
    "Twitter/X Ads",
    "Custom",
]


# ──────────────────────────────────────────────
# Input parsing
# ──────────────────────────────────────────────

def parse_input(value: Any) -> float:
    """
    Convert a raw input value to a float.

    Handles currency symbols, thousands separators, whitespace and a
    trailing "%". Anything that cannot be parsed (None, "", "-", "abc",
    NaN, inf) becomes 0.0 so the engine falls back to its zero result.

    Examples:
        >>> parse_input("1,500.50")
        1500.5
        >>> parse_input("2.5%")
        2.5
        >>> parse_input("abc")
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # ints too large for a float
            return 0.0
    else:
        s = str(value).strip()
        if s in ("-", "—", "–", ""):
            return 0.0

        # currency prefixes first, then separators and whitespace
        s = re.sub(r'^[A-Z]\$', '', s)
        s = re.sub(r'[$€£¥₽₴₹,\s\u00a0\u202d\u202c]', '', s)
        s = s.replace('%', '')

        try:
            number = float(s)
        except ValueError:
            return 0.0

    if not math.isfinite(number):
        return 0.0
    return number


# ──────────────────────────────────────────────
# Display formatting
# ──────────────────────────────────────────────

def currency(value: float, symbol: str = "$") -> str:
    """Compact money: $1.2M, $3.4K, $5.67"""
    if abs(value) >= 1_000_000:
        return f"{symbol}{value / 1_000_000:.1f}M"
    if abs(value) >= 1_000:
        return f"{symbol}{value / 1_000:.1f}K"
    return f"{symbol}{value:.2f}"


def currency_full(value: float, symbol: str = "$") -> str:
    return f"{symbol}{value:,.2f}"


def percent(value: float) -> str:
    return f"{value:.2f}%"


def decimal(value: float, places: int = 2) -> str:
    return f"{value:.{places}f}"


def integer(value: float) -> str:
    return f"{value:,.0f}"


def roas(value: float) -> str:
    return f"{value:.2f}x"
