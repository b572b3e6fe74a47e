"""Tabular views of a comparison result.

Functions
---------
build_year_table(result)
    One row per (year, scenario) with display strings, mirroring the combined
    comparison table in the app.

build_summary_table(result)
    One row per scenario with its inputs and final-year outcome.
"""

from __future__ import annotations

from typing import Any

import pandas as pd

from msc.core.models import ComparisonResult
from msc.ui.formatting import format_currency, format_down_payment_input, format_percent

YEAR_TABLE_COLUMNS = [
    "Year",
    "Scenario",
    "Beginning Balance",
    "Principal Paid",
    "Interest Paid",
    "Annual Cost",
    "Ending Balance",
    "Total Interest Paid",
    "Invested This Year",
    "Total Principal Paid",
    "Investment Value",
    "Investment Profit",
    "Net Worth",
    "Net Worth Change",
    "vs. Best",
]

_DASH = "-"


def build_year_table(result: ComparisonResult, *, years: list[int] | None = None) -> pd.DataFrame:
    """Combined year-by-year table.

    Parameters
    ----------
    result : ComparisonResult
        Output of ``msc.core.engine.simulate``.
    years : list[int], optional
        Restrict to these years; all years when omitted.

    Notes
    -----
    Scenarios whose mortgage has ended are labelled ``(Ended)`` and show ``-``
    in the loan columns. An investment contribution of exactly zero, and the
    year's leader in the ``vs. Best`` column, are shown as ``-`` as well.
    """
    wanted = set(years) if years is not None else None
    rows: list[dict[str, Any]] = []
    for year in range(1, result.horizon + 1):
        if wanted is not None and year not in wanted:
            continue
        for s in result.scenarios:
            rec = s.record_for(year)
            if rec is None:
                rows.append({"Year": year, "Scenario": f"{s.name} (Data Missing/Error)"})
                continue
            active = s.is_active(year)

            def loan(v: float) -> str:
                return format_currency(v) if active else _DASH

            invested = rec.investment_contribution
            rows.append(
                {
                    "Year": year,
                    "Scenario": s.name if active else f"{s.name} (Ended)",
                    "Beginning Balance": loan(rec.beginning_balance),
                    "Principal Paid": loan(rec.principal_paid),
                    "Interest Paid": loan(rec.interest_paid),
                    "Annual Cost": loan(rec.annual_cost),
                    "Ending Balance": loan(rec.ending_balance),
                    "Total Interest Paid": format_currency(rec.total_interest_paid),
                    "Invested This Year": format_currency(invested) if (active and invested) else _DASH,
                    "Total Principal Paid": format_currency(rec.total_principal_paid),
                    "Investment Value": format_currency(rec.cumulative_investment_value),
                    "Investment Profit": format_currency(rec.investment_profit),
                    "Net Worth": format_currency(rec.total_net_worth),
                    "Net Worth Change": format_currency(rec.net_worth_change),
                    "vs. Best": _DASH if rec.performance_pct == 0 else format_percent(rec.performance_pct),
                }
            )
    return pd.DataFrame(rows, columns=YEAR_TABLE_COLUMNS).fillna(_DASH)


def build_summary_table(result: ComparisonResult) -> pd.DataFrame:
    rows: list[dict[str, Any]] = []
    for s, summary in zip(result.scenarios, result.final_summary()):
        rows.append(
            {
                "Scenario": s.name,
                "Down Payment": f"{format_currency(s.down_payment)} ({format_down_payment_input(s.down_payment_input, s.down_payment_mode)})",
                "Interest Rate": f"{s.interest_rate:g}%",
                "Term": f"{s.term} Years",
                "Monthly P&I": format_currency(s.monthly_payment),
                "Total Interest": format_currency(summary["total_interest_paid"]),
                f"Net Worth (Year {result.horizon})": format_currency(summary["final_net_worth"]),
                "vs. Best": format_percent(summary["final_performance_pct"]),
            }
        )
    return pd.DataFrame(rows)
