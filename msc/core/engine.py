"""Cross-scenario investment growth and net-worth comparison.

Each year, every scenario that is still paying its mortgage invests the gap
between its own annual cost and the most expensive active scenario of that
year. Invested balances compound at a fixed annual rate. Because the yearly
maximum depends on every scenario at once, the whole comparison is recomputed
from the raw amortization schedules on every call; nothing is patched in place.

Years are processed strictly in order (each year's growth needs the previous
year's cumulative value). Per-scenario state lives in plain lists aligned with
the input order, so two scenarios sharing a display name cannot collide.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Sequence

import numpy as np

from .models import (
    DEFAULT_INVESTMENT_RATE,
    ComparisonResult,
    Scenario,
    SimulationParams,
    YearlyRecord,
)

PERFORMANCE_CAP_PCT = 100.0


def _schedule_by_year(scenario: Scenario) -> dict[int, YearlyRecord]:
    """Amortization-only records keyed by year (drops synthesized placeholders)."""
    return {r.year: r for r in scenario.records if not r.is_placeholder}


def _year_max(values: np.ndarray) -> float:
    if values.size == 0 or np.isnan(values).any():
        return math.nan
    return float(values.max())


def performance_percentages(net_worths: Sequence[float]) -> list[float]:
    """Percent distance of each net worth below the year's best.

    The leader gets 0 and everyone else a negative number. Degenerate inputs are
    clamped to +/-100 instead of propagating inf/nan; when no finite maximum
    exists every entry is 0.
    """
    nw = np.asarray(list(net_worths), dtype=np.float64)
    top = _year_max(nw)
    if not math.isfinite(top):
        return [0.0] * int(nw.size)

    denom = abs(top)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        if denom == 0:
            raw = np.where(nw == 0, 0.0, np.copysign(np.inf, nw - top))
        else:
            raw = ((nw - top) / denom) * 100.0
    capped = np.where(
        np.isfinite(raw),
        raw,
        np.where(raw > 0, PERFORMANCE_CAP_PCT, -PERFORMANCE_CAP_PCT),
    )
    return [float(x) for x in capped]


def simulate(
    scenarios: Sequence[Scenario],
    home_price: float,
    initial_investments: float,
    investment_rate: float = DEFAULT_INVESTMENT_RATE,
    horizon: int | None = None,
) -> ComparisonResult:
    """Run the year-by-year comparison and return a fresh snapshot."""
    params = SimulationParams(
        home_price=float(home_price),
        initial_investments=float(initial_investments),
        investment_rate=float(investment_rate),
        horizon=horizon,
    )
    return simulate_with_params(scenarios, params)


def simulate_with_params(scenarios: Sequence[Scenario], params: SimulationParams) -> ComparisonResult:
    scenarios = tuple(scenarios)
    years = params.resolve_horizon(scenarios)
    if not scenarios:
        return ComparisonResult(params=params, horizon=years, scenarios=())

    rate = float(params.investment_rate)
    schedules = [_schedule_by_year(s) for s in scenarios]

    initial_balance = [max(0.0, float(params.initial_investments) - s.down_payment) for s in scenarios]
    cumulative = list(initial_balance)
    prev_net_worth = [s.down_payment + initial_balance[i] for i, s in enumerate(scenarios)]

    # Totals carried into the years after payoff.
    last_totals: list[tuple[float, float]] = []
    for sched in schedules:
        if sched:
            last = sched[max(sched)]
            last_totals.append((last.total_principal_paid, last.total_interest_paid))
        else:
            last_totals.append((0.0, 0.0))

    out: list[list[YearlyRecord]] = [[] for _ in scenarios]

    for year in range(1, years + 1):
        active = [
            sched.get(year) if s.term >= year else None
            for s, sched in zip(scenarios, schedules)
        ]
        max_cost = max((r.annual_cost for r in active if r is not None), default=0.0)

        year_records: list[YearlyRecord] = []
        for i, s in enumerate(scenarios):
            prev_cum = cumulative[i]
            profit = prev_cum * rate
            rec = active[i]

            if rec is not None:
                contribution = (max_cost - rec.annual_cost) if max_cost > 0 else 0.0
                cum = prev_cum * (1.0 + rate) + contribution
                total_principal = rec.total_principal_paid
                total_interest = rec.total_interest_paid
                base = rec
            else:
                contribution = 0.0
                cum = prev_cum * (1.0 + rate)
                total_principal, total_interest = last_totals[i]
                base = schedules[i].get(year) or YearlyRecord.placeholder(year)

            net_worth = s.down_payment + total_principal + cum
            change = net_worth - prev_net_worth[i]
            if not math.isfinite(change):
                change = 0.0

            year_records.append(
                replace(
                    base,
                    total_principal_paid=total_principal,
                    total_interest_paid=total_interest,
                    investment_contribution=contribution,
                    cumulative_investment_value=cum,
                    investment_profit=profit,
                    total_net_worth=net_worth,
                    net_worth_change=change,
                )
            )
            cumulative[i] = cum
            prev_net_worth[i] = net_worth

        perf = performance_percentages([r.total_net_worth for r in year_records])
        for i, r in enumerate(year_records):
            out[i].append(replace(r, performance_pct=perf[i]))

    augmented = tuple(replace(s, records=tuple(out[i])) for i, s in enumerate(scenarios))
    return ComparisonResult(params=params, horizon=years, scenarios=augmented)
