"""JSON configuration loading.

A configuration file seeds the home price, the cash available to invest and an
ordered list of starting scenarios::

    {
      "homePrice": 500000,
      "initialInvestments": 100000,
      "investmentRate": 0.07,
      "initialScenarios": [
        {"name": "30y 20% down", "downPaymentInput": 20, "downPaymentType": "percent",
         "interestRate": 4.19, "term": 30}
      ]
    }

A missing file is not an error. A file that cannot be read or parsed, or that
has the wrong shape, is reported and replaced by the defaults.

Only JSON is read. A YAML file with the same keys (for example an older
``config.yaml``) has to be converted to JSON first; the key names are unchanged.
"""

from __future__ import annotations

import json
import math
import warnings as _warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigurationError
from .models import DEFAULT_INVESTMENT_RATE, DOWN_PAYMENT_PERCENT, ScenarioInputs

DEFAULT_HOME_PRICE = 500_000.0
DEFAULT_INITIAL_INVESTMENTS = 100_000.0
DEFAULT_CONFIG_FILENAME = "config.json"

# New-scenario form defaults.
DEFAULT_FORM: dict[str, Any] = {
    "name": "",
    "downPaymentType": DOWN_PAYMENT_PERCENT,
    "downPaymentInput": 20.0,
    "interestRate": 4.19,
    "term": 30,
}


@dataclass(frozen=True)
class AppConfig:
    home_price: float = DEFAULT_HOME_PRICE
    initial_investments: float = DEFAULT_INITIAL_INVESTMENTS
    investment_rate: float = DEFAULT_INVESTMENT_RATE
    initial_scenarios: tuple[ScenarioInputs, ...] = field(default_factory=tuple)
    error: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "homePrice": self.home_price,
            "initialInvestments": self.initial_investments,
            "investmentRate": self.investment_rate,
            "initialScenarios": [scenario_inputs_to_payload(s) for s in self.initial_scenarios],
        }


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool) and math.isfinite(float(x))


def scenario_inputs_to_payload(inputs: ScenarioInputs) -> dict[str, Any]:
    return {
        "name": inputs.name or "",
        "downPaymentInput": inputs.down_payment_input,
        "downPaymentType": inputs.down_payment_mode,
        "interestRate": inputs.interest_rate,
        "term": inputs.term,
    }


def scenario_inputs_from_payload(item: Any) -> ScenarioInputs:
    """Map one ``initialScenarios`` entry to ``ScenarioInputs``.

    Values are passed through unconverted; the validator decides whether they
    make sense.
    """
    if not isinstance(item, dict):
        raise ConfigurationError(f"Scenario entry must be an object, got {type(item).__name__}.")
    name = item.get("name")
    return ScenarioInputs(
        name=None if name is None else str(name),
        down_payment_input=item.get("downPaymentInput", DEFAULT_FORM["downPaymentInput"]),
        down_payment_mode=str(item.get("downPaymentType", DEFAULT_FORM["downPaymentType"])),
        interest_rate=item.get("interestRate", DEFAULT_FORM["interestRate"]),
        term=item.get("term", DEFAULT_FORM["term"]),
    )


def parse_config(payload: Any) -> AppConfig:
    """Strict parse of a decoded configuration object.

    Raises:
        ConfigurationError: if the top-level structure is wrong.
    """
    if not isinstance(payload, dict):
        raise ConfigurationError("Invalid configuration structure: expected an object.")
    if not _is_number(payload.get("homePrice")):
        raise ConfigurationError("Invalid configuration structure: 'homePrice' must be a number.")
    if not _is_number(payload.get("initialInvestments")):
        raise ConfigurationError("Invalid configuration structure: 'initialInvestments' must be a number.")
    raw_scenarios = payload.get("initialScenarios")
    if not isinstance(raw_scenarios, list):
        raise ConfigurationError("Invalid configuration structure: 'initialScenarios' must be a list.")

    rate = payload.get("investmentRate", DEFAULT_INVESTMENT_RATE)
    if not _is_number(rate):
        raise ConfigurationError("Invalid configuration structure: 'investmentRate' must be a number.")

    scenarios: list[ScenarioInputs] = []
    for pos, item in enumerate(raw_scenarios, start=1):
        try:
            scenarios.append(scenario_inputs_from_payload(item))
        except ConfigurationError as exc:
            _warnings.warn(f"Skipping initial scenario #{pos}: {exc}")

    return AppConfig(
        home_price=float(payload["homePrice"]),
        initial_investments=float(payload["initialInvestments"]),
        investment_rate=float(rate),
        initial_scenarios=tuple(scenarios),
    )


def _fallback(message: str) -> AppConfig:
    _warnings.warn(f"{message} Proceeding with default values.")
    return AppConfig(error=message)


def load_config_text(text: str) -> AppConfig:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        return _fallback(f"Error parsing configuration: {exc}")
    try:
        return parse_config(payload)
    except ConfigurationError as exc:
        return _fallback(f"Error parsing configuration: {exc}")


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from ``path`` (default ``config.json``), never raising."""
    config_path = Path(path) if path is not None else Path(DEFAULT_CONFIG_FILENAME)
    if not config_path.exists():
        return AppConfig()
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return _fallback(f"Failed to load configuration {config_path}: {exc}")
    return load_config_text(text)


def example_config() -> dict[str, Any]:
    """Template written by ``python -m msc --example``."""
    return {
        "_comment": "Mortgage scenario comparison config. Rates are percent except investmentRate (decimal).",
        "homePrice": DEFAULT_HOME_PRICE,
        "initialInvestments": DEFAULT_INITIAL_INVESTMENTS,
        "investmentRate": DEFAULT_INVESTMENT_RATE,
        "initialScenarios": [
            {"name": "30-year fixed", "downPaymentInput": 20, "downPaymentType": "percent", "interestRate": 4.19, "term": 30},
            {"name": "15-year fixed", "downPaymentInput": 20, "downPaymentType": "percent", "interestRate": 3.5, "term": 15},
        ],
    }
