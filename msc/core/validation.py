"""Scenario input validation.

Every rule yields a distinct, user-facing message. Rules are checked in a fixed
order and the first failure wins, so the message a user sees is stable for a
given set of inputs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from .models import DOWN_PAYMENT_AMOUNT, DOWN_PAYMENT_MODES, DOWN_PAYMENT_PERCENT


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    message: str = ""
    scenario_name: str | None = None
    down_payment: float | None = None
    principal: float | None = None


def _fail(message: str) -> ValidationResult:
    return ValidationResult(ok=False, message=message)


def _num(x) -> float | None:
    try:
        v = float(x)
    except (TypeError, ValueError):
        return None
    if math.isnan(v):
        return None
    return v


def resolve_down_payment(home_price: float, down_payment_input: float, down_payment_mode: str) -> float:
    """Actual down payment in currency units for either input mode."""
    if down_payment_mode == DOWN_PAYMENT_AMOUNT:
        return float(down_payment_input)
    return float(home_price) * (float(down_payment_input) / 100.0)


def default_scenario_name(existing_names: Iterable[str]) -> str:
    return f"Scenario {len(list(existing_names)) + 1}"


def resolve_scenario_name(proposed_name: str | None, existing_names: Iterable[str]) -> str:
    name = (proposed_name or "").strip()
    return name or default_scenario_name(existing_names)


def validate_scenario_inputs(
    home_price: float,
    down_payment_input: float,
    down_payment_mode: str,
    interest_rate: float,
    term: int,
    existing_names: Iterable[str] = (),
    proposed_name: str | None = None,
) -> ValidationResult:
    """Check a proposed scenario and derive its down payment and principal.

    Pure function: nothing is raised for bad values, the outcome is carried by
    ``ValidationResult.ok`` / ``ValidationResult.message``.
    """
    existing = list(existing_names)
    scenario_name = resolve_scenario_name(proposed_name, existing)
    if scenario_name in existing:
        return _fail(f'Scenario name "{scenario_name}" already exists. Please choose a unique name.')

    price = _num(home_price)
    if price is None:
        return _fail("Home price must be a number.")
    dp_in = _num(down_payment_input)
    if dp_in is None:
        return _fail("Down payment must be a number.")
    rate = _num(interest_rate)
    if rate is None:
        return _fail("Interest rate must be a number.")
    term_f = _num(term)
    if term_f is None:
        return _fail("Term must be a number.")
    if down_payment_mode not in DOWN_PAYMENT_MODES:
        return _fail(f"Down payment type must be one of: {', '.join(DOWN_PAYMENT_MODES)}.")

    if down_payment_mode == DOWN_PAYMENT_PERCENT and (dp_in < 0 or dp_in > 100):
        return _fail("Down payment percentage must be between 0 and 100.")

    down = resolve_down_payment(price, dp_in, down_payment_mode)
    if down < 0:
        return _fail("Down payment cannot be negative.")
    if down > price:
        return _fail("Down payment cannot be greater than the home price.")

    principal = price - down
    if principal == 0 and rate != 0:
        return _fail("If down payment covers the full home price (0 principal), the interest rate must be 0.")
    if rate < 0:
        return _fail("Interest rate cannot be negative.")
    if term_f <= 0:
        return _fail("Term must be positive.")
    if math.isinf(term_f) or term_f != int(term_f):
        return _fail("Term must be a whole number of years.")

    return ValidationResult(
        ok=True,
        scenario_name=scenario_name,
        down_payment=down,
        principal=principal,
    )
