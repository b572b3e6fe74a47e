"""Ordered scenario collection with full recomputation on every change."""

from __future__ import annotations

import math
import threading
import warnings as _warnings
from typing import Iterable, Iterator

from .amortization import amortize
from .config import AppConfig, DEFAULT_HOME_PRICE, DEFAULT_INITIAL_INVESTMENTS
from .engine import simulate
from .errors import CalculationError, ScenarioValidationError
from .models import DEFAULT_INVESTMENT_RATE, ComparisonResult, Scenario, ScenarioInputs
from .validation import validate_scenario_inputs


def build_scenario(home_price: float, inputs: ScenarioInputs, existing_names: Iterable[str] = ()) -> Scenario:
    """Validate and amortize one proposal.

    Raises:
        ScenarioValidationError: the inputs break a validation rule.
        CalculationError: the amortization could not be computed.
    """
    check = validate_scenario_inputs(
        home_price,
        inputs.down_payment_input,
        inputs.down_payment_mode,
        inputs.interest_rate,
        inputs.term,
        existing_names,
        inputs.name,
    )
    if not check.ok:
        raise ScenarioValidationError(check.message)

    schedule = amortize(check.principal, inputs.interest_rate, int(float(inputs.term)))
    if schedule is None:
        raise CalculationError()

    return Scenario(
        name=check.scenario_name,
        down_payment_input=float(inputs.down_payment_input),
        down_payment_mode=inputs.down_payment_mode,
        down_payment=float(check.down_payment),
        interest_rate=float(inputs.interest_rate),
        term=int(float(inputs.term)),
        monthly_payment=schedule.monthly_payment,
        records=schedule.records,
    )


def _checked_amount(value: float, label: str) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ScenarioValidationError(f"{label} must be a number.") from None
    if not math.isfinite(v):
        raise ScenarioValidationError(f"{label} must be a number.")
    if v < 0:
        raise ScenarioValidationError(f"{label} cannot be negative.")
    return v


class ScenarioRegistry:
    """Holds the scenarios and the comparison derived from them.

    Every mutation rebuilds the comparison from scratch, under one lock, so a
    reader never sees a scenario list that disagrees with ``result``.
    """

    def __init__(
        self,
        home_price: float = DEFAULT_HOME_PRICE,
        initial_investments: float = DEFAULT_INITIAL_INVESTMENTS,
        investment_rate: float = DEFAULT_INVESTMENT_RATE,
        horizon: int | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._home_price = _checked_amount(home_price, "Home price")
        self._initial_investments = _checked_amount(initial_investments, "Initial investments")
        self._investment_rate = float(investment_rate)
        self._horizon = horizon
        self._scenarios: list[Scenario] = []
        self._result = self._simulate(self._scenarios)

    @classmethod
    def from_config(cls, cfg: AppConfig, *, horizon: int | None = None) -> "ScenarioRegistry":
        """Registry seeded from a config; invalid initial scenarios are skipped with a warning."""
        try:
            reg = cls(cfg.home_price, cfg.initial_investments, cfg.investment_rate, horizon=horizon)
        except ScenarioValidationError as exc:
            _warnings.warn(f"Invalid configuration values ({exc}). Proceeding with default values.")
            reg = cls(investment_rate=cfg.investment_rate, horizon=horizon)

        loaded: list[Scenario] = []
        for inputs in cfg.initial_scenarios:
            label = inputs.name or "(unnamed)"
            try:
                loaded.append(build_scenario(reg.home_price, inputs, [s.name for s in loaded]))
            except ScenarioValidationError as exc:
                _warnings.warn(f"Invalid configuration for scenario {label}: {exc} Skipping.")
            except CalculationError:
                _warnings.warn(f"Failed to calculate amortization for scenario {label}. Skipping.")

        with reg._lock:
            reg._scenarios = loaded
            reg._recompute()
        return reg

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def home_price(self) -> float:
        return self._home_price

    @property
    def initial_investments(self) -> float:
        return self._initial_investments

    @property
    def investment_rate(self) -> float:
        return self._investment_rate

    @property
    def scenarios(self) -> tuple[Scenario, ...]:
        """Scenarios as amortized, without investment augmentation."""
        with self._lock:
            return tuple(self._scenarios)

    @property
    def names(self) -> list[str]:
        with self._lock:
            return [s.name for s in self._scenarios]

    @property
    def result(self) -> ComparisonResult:
        with self._lock:
            return self._result

    def __len__(self) -> int:
        return len(self._scenarios)

    def __iter__(self) -> Iterator[Scenario]:
        return iter(self.scenarios)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, inputs: ScenarioInputs) -> Scenario:
        """Validate, amortize and append a scenario.

        Raises:
            ScenarioValidationError: the registry is left unchanged.
            CalculationError: the registry is left unchanged.
        """
        with self._lock:
            scenario = build_scenario(self._home_price, inputs, self.names)
            self._scenarios.append(scenario)
            self._recompute()
            return scenario

    def remove(self, index: int) -> Scenario:
        """Delete the scenario at ``index``. Raises ``IndexError`` when out of range."""
        with self._lock:
            if not 0 <= int(index) < len(self._scenarios):
                raise IndexError(f"No scenario at position {index}.")
            removed = self._scenarios.pop(int(index))
            self._recompute()
            return removed

    def set_home_price(self, home_price: float) -> list[str]:
        """Change the shared home price and rebuild every scenario against it.

        Percent-mode down payments follow the new price. Scenarios that no longer
        validate are dropped; their names are returned.
        """
        price = _checked_amount(home_price, "Home price")
        with self._lock:
            rebuilt: list[Scenario] = []
            dropped: list[str] = []
            for s in self._scenarios:
                try:
                    rebuilt.append(build_scenario(price, s.inputs, [r.name for r in rebuilt]))
                except (ScenarioValidationError, CalculationError) as exc:
                    _warnings.warn(f"Removing scenario {s.name} after home price change: {exc}")
                    dropped.append(s.name)
            self._home_price = price
            self._scenarios = rebuilt
            self._recompute()
            return dropped

    def set_initial_investments(self, amount: float) -> None:
        value = _checked_amount(amount, "Initial investments")
        with self._lock:
            self._initial_investments = value
            self._recompute()

    def set_investment_rate(self, rate: float) -> None:
        try:
            value = float(rate)
        except (TypeError, ValueError):
            raise ScenarioValidationError("Investment rate must be a number.") from None
        if not math.isfinite(value):
            raise ScenarioValidationError("Investment rate must be a number.")
        with self._lock:
            self._investment_rate = value
            self._recompute()

    def _simulate(self, scenarios: list[Scenario]) -> ComparisonResult:
        return simulate(
            scenarios,
            self._home_price,
            self._initial_investments,
            self._investment_rate,
            self._horizon,
        )

    def _recompute(self) -> None:
        self._result = self._simulate(self._scenarios)
