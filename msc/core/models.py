"""Plain data containers shared by the amortization, engine and registry modules."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

DOWN_PAYMENT_AMOUNT = "amount"
DOWN_PAYMENT_PERCENT = "percent"
DOWN_PAYMENT_MODES = (DOWN_PAYMENT_AMOUNT, DOWN_PAYMENT_PERCENT)

MIN_HORIZON_YEARS = 30
DEFAULT_INVESTMENT_RATE = 0.07


@dataclass(frozen=True)
class YearlyRecord:
    """One simulated year of a scenario.

    The amortization fields are always set. The investment fields stay ``None``
    until :func:`msc.core.engine.simulate` fills them in.
    """

    year: int
    beginning_balance: float
    interest_paid: float
    principal_paid: float
    ending_balance: float
    total_principal_paid: float
    total_interest_paid: float
    annual_cost: float
    investment_contribution: float | None = None
    cumulative_investment_value: float | None = None
    investment_profit: float | None = None
    total_net_worth: float | None = None
    net_worth_change: float | None = None
    performance_pct: float | None = None
    is_placeholder: bool = False

    @classmethod
    def placeholder(cls, year: int, *, total_principal_paid: float = 0.0, total_interest_paid: float = 0.0) -> "YearlyRecord":
        """Zero-valued record for a year after the loan was paid off."""
        return cls(
            year=int(year),
            beginning_balance=0.0,
            interest_paid=0.0,
            principal_paid=0.0,
            ending_balance=0.0,
            total_principal_paid=float(total_principal_paid),
            total_interest_paid=float(total_interest_paid),
            annual_cost=0.0,
            is_placeholder=True,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "beginning_balance": self.beginning_balance,
            "interest_paid": self.interest_paid,
            "principal_paid": self.principal_paid,
            "ending_balance": self.ending_balance,
            "total_principal_paid": self.total_principal_paid,
            "total_interest_paid": self.total_interest_paid,
            "annual_cost": self.annual_cost,
            "investment_contribution": self.investment_contribution,
            "cumulative_investment_value": self.cumulative_investment_value,
            "investment_profit": self.investment_profit,
            "total_net_worth": self.total_net_worth,
            "net_worth_change": self.net_worth_change,
            "performance_pct": self.performance_pct,
            "is_placeholder": self.is_placeholder,
        }


@dataclass(frozen=True)
class AmortizationResult:
    records: tuple[YearlyRecord, ...]
    monthly_payment: float


@dataclass(frozen=True)
class ScenarioInputs:
    """Raw scenario proposal, as typed into the form or read from the config file."""

    down_payment_input: float
    down_payment_mode: str = DOWN_PAYMENT_PERCENT
    interest_rate: float = 4.19
    term: int = 30
    name: str | None = None


@dataclass(frozen=True)
class Scenario:
    name: str
    down_payment_input: float
    down_payment_mode: str
    down_payment: float
    interest_rate: float
    term: int
    monthly_payment: float
    records: tuple[YearlyRecord, ...] = field(default_factory=tuple)

    @property
    def inputs(self) -> ScenarioInputs:
        return ScenarioInputs(
            name=self.name,
            down_payment_input=self.down_payment_input,
            down_payment_mode=self.down_payment_mode,
            interest_rate=self.interest_rate,
            term=self.term,
        )

    def record_for(self, year: int) -> YearlyRecord | None:
        # Records are dense and 1-based, so index lookup is exact.
        idx = int(year) - 1
        if 0 <= idx < len(self.records) and self.records[idx].year == year:
            return self.records[idx]
        for rec in self.records:
            if rec.year == year:
                return rec
        return None

    def is_active(self, year: int) -> bool:
        """True while the loan term covers ``year`` and the schedule has a real record for it."""
        rec = self.record_for(year)
        return rec is not None and not rec.is_placeholder and self.term >= year


@dataclass(frozen=True)
class SimulationParams:
    home_price: float
    initial_investments: float
    investment_rate: float = DEFAULT_INVESTMENT_RATE
    horizon: int | None = None

    def resolve_horizon(self, scenarios: "tuple[Scenario, ...] | list[Scenario]") -> int:
        if self.horizon is not None:
            return max(1, int(self.horizon))
        terms = [int(s.term) for s in scenarios]
        return max([MIN_HORIZON_YEARS] + terms)


@dataclass(frozen=True)
class ComparisonResult:
    """Investment-augmented snapshot of every scenario over the full horizon."""

    params: SimulationParams
    horizon: int
    scenarios: tuple[Scenario, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.scenarios)

    def scenario(self, name: str) -> Scenario:
        for s in self.scenarios:
            if s.name == name:
                return s
        raise KeyError(name)

    def to_frame(self):
        """Long-format DataFrame: one row per (scenario, year)."""
        import pandas as pd

        rows: list[dict[str, Any]] = []
        for idx, s in enumerate(self.scenarios):
            for rec in s.records:
                row = {"scenario_index": idx, "scenario": s.name}
                row.update(rec.to_dict())
                row["active"] = s.is_active(rec.year)
                rows.append(row)
        columns = ["scenario_index", "scenario"] + list(_RECORD_COLUMNS) + ["active"]
        return pd.DataFrame(rows, columns=columns)

    def final_summary(self) -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        for s in self.scenarios:
            last = s.records[-1] if s.records else None
            nw = None if last is None else last.total_net_worth
            out.append(
                {
                    "name": s.name,
                    "down_payment": s.down_payment,
                    "monthly_payment": s.monthly_payment,
                    "interest_rate": s.interest_rate,
                    "term": s.term,
                    "final_net_worth": nw if (nw is not None and math.isfinite(nw)) else None,
                    "total_interest_paid": None if last is None else last.total_interest_paid,
                    "final_performance_pct": None if last is None else last.performance_pct,
                }
            )
        return out


_RECORD_COLUMNS = (
    "year",
    "beginning_balance",
    "interest_paid",
    "principal_paid",
    "ending_balance",
    "total_principal_paid",
    "total_interest_paid",
    "annual_cost",
    "investment_contribution",
    "cumulative_investment_value",
    "investment_profit",
    "total_net_worth",
    "net_worth_change",
    "performance_pct",
    "is_placeholder",
)
