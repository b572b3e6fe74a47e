"""Fixed-rate mortgage amortization (monthly simulation, yearly aggregation)."""

from __future__ import annotations

import math
import warnings as _warnings

from .models import AmortizationResult, YearlyRecord

# Balances below this are floating-point residue, not debt.
BALANCE_EPSILON = 0.005


def _monthly_rate(annual_rate_pct: float) -> float:
    """Annual nominal percent compounded monthly -> monthly rate (decimal)."""
    return float(annual_rate_pct) / 12.0 / 100.0


def _pmt(principal: float, mr: float, n: int) -> float:
    """Level monthly payment for ``principal`` over ``n`` months at monthly rate ``mr``.

    Returns ``inf``/``nan`` rather than raising when the inputs overflow; callers
    check ``math.isfinite``.
    """
    principal = float(principal)
    n = int(n)
    if mr == 0:
        return principal / float(n)
    try:
        growth = (1.0 + mr) ** n
    except OverflowError:
        return math.inf
    denom = growth - 1.0
    if denom == 0:
        return math.inf
    return principal * (mr * growth) / denom


def amortize(principal: float, annual_rate_pct: float, term_years: int) -> AmortizationResult | None:
    """Build the yearly payment schedule for a fixed-rate loan.

    Args:
        principal: Amount borrowed.
        annual_rate_pct: Annual nominal rate in percent (e.g. 4.19).
        term_years: Loan term in whole years.

    Returns:
        ``AmortizationResult`` with one ``YearlyRecord`` per year until the balance
        reaches zero, or ``None`` when the inputs are invalid (negative principal or
        rate, non-positive term) or the payment is not finite.
    """
    try:
        principal = float(principal)
        annual_rate_pct = float(annual_rate_pct)
        term_years = int(term_years)
    except (TypeError, ValueError):
        return None

    if principal < 0 or annual_rate_pct < 0 or term_years <= 0:
        return None
    if math.isnan(principal) or math.isnan(annual_rate_pct):
        return None

    if principal == 0:
        if annual_rate_pct != 0:
            _warnings.warn("Interest rate ignored for zero-principal loan.")
        paid_off = YearlyRecord(
            year=1,
            beginning_balance=0.0,
            interest_paid=0.0,
            principal_paid=0.0,
            ending_balance=0.0,
            total_principal_paid=0.0,
            total_interest_paid=0.0,
            annual_cost=0.0,
        )
        return AmortizationResult(records=(paid_off,), monthly_payment=0.0)

    mr = _monthly_rate(annual_rate_pct)
    n_payments = term_years * 12
    pmt = _pmt(principal, mr, n_payments)
    if not math.isfinite(pmt):
        return None

    balance = principal
    total_principal = 0.0
    total_interest = 0.0
    records: list[YearlyRecord] = []

    for year in range(1, term_years + 1):
        beginning = balance
        interest_y = 0.0
        principal_y = 0.0

        for month in range(1, 13):
            if (year - 1) * 12 + month > n_payments or balance <= BALANCE_EPSILON:
                break

            if mr == 0:
                interest_m = 0.0
                principal_m = min(balance, pmt)
            else:
                interest_m = balance * mr
                principal_m = pmt - interest_m

            # Final payment: retire exactly what is left.
            if principal_m > balance:
                principal_m = balance
                interest_m = 0.0 if mr == 0 else max(0.0, balance * mr)

            interest_y += interest_m
            principal_y += principal_m
            balance -= principal_m
            if balance < BALANCE_EPSILON:
                balance = 0.0

        total_principal += principal_y
        total_interest += interest_y
        records.append(
            YearlyRecord(
                year=year,
                beginning_balance=beginning,
                interest_paid=interest_y,
                principal_paid=principal_y,
                ending_balance=balance,
                total_principal_paid=total_principal,
                total_interest_paid=total_interest,
                annual_cost=principal_y + interest_y,
            )
        )

        if balance <= 0:
            break

    return AmortizationResult(records=tuple(records), monthly_payment=pmt)
