"""Currency and percentage formatting for tables, cards and chart axes.

Kept free of Streamlit imports so the formatting rules can be tested directly.
"""

from __future__ import annotations

import math
from typing import Any

NOT_AVAILABLE = "N/A"


def _finite(value: Any) -> float | None:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


def format_currency(amount: Any) -> str:
    """``$1,234.56`` style; ``N/A`` for missing or non-finite values."""
    v = _finite(amount)
    if v is None:
        return NOT_AVAILABLE
    # Avoid "-$0.00" from tiny negative residue.
    if round(v, 2) == 0:
        v = 0.0
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v):,.2f}"


def format_currency_compact(amount: Any) -> str:
    """Short axis/tooltip form: ``$950``, ``$12.5K``, ``$1.2M``, ``$3B``."""
    v = _finite(amount)
    if v is None:
        return NOT_AVAILABLE
    sign = "-" if v < 0 else ""
    a = abs(v)
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if a >= threshold:
            scaled = f"{a / threshold:.1f}".rstrip("0").rstrip(".")
            return f"{sign}${scaled}{suffix}"
    return f"{sign}${a:,.0f}"


def format_percent(value: Any, digits: int = 2) -> str:
    v = _finite(value)
    if v is None:
        return NOT_AVAILABLE
    if round(v, digits) == 0:
        v = 0.0
    return f"{v:.{digits}f}%"


def format_down_payment_input(down_payment_input: Any, mode: str) -> str:
    """How the user typed the down payment: ``20%`` or ``$100,000.00``."""
    if mode == "percent":
        v = _finite(down_payment_input)
        if v is None:
            return NOT_AVAILABLE
        return f"{v:g}%"
    return format_currency(down_payment_input)
