#!/usr/bin/env python3
"""Truth-table QA: small, exact, model-level invariants.

These checks are intentionally numeric and explicit. They exist to prove that:
- The level-payment formula and monthly amortization are correct.
- Zero-rate and zero-principal loans behave exactly as documented.
- The investment comparison reproduces a hand-computed year.
- Paid-off scenarios keep compounding on synthesized placeholder years.

Run:
  python -m msc.qa.qa_truth_tables
"""

from __future__ import annotations

import math
import sys
import warnings
from pathlib import Path


# Ensure repo root is on sys.path regardless of where this script is invoked from.
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


def _die(msg: str, code: int = 1) -> None:
    print(f"\n[TRUTH TABLES FAILED] {msg}\n")
    raise SystemExit(code)


def _assert_close(name: str, got: float, exp: float, *, atol: float = 1e-9, rtol: float = 0.0) -> None:
    try:
        g = float(got)
        e = float(exp)
    except (TypeError, ValueError):
        _die(f"{name}: non-numeric (got={got}, exp={exp})")
    if not (math.isfinite(g) and math.isfinite(e)):
        _die(f"{name}: non-finite (got={g}, exp={e})")
    if abs(g - e) > (atol + rtol * abs(e)):
        _die(f"{name}: got {g:.12g} expected {e:.12g} (atol={atol}, rtol={rtol})")


def _annuity(principal: float, annual_rate_pct: float, years: int) -> float:
    mr = annual_rate_pct / 12.0 / 100.0
    n = years * 12
    return principal * (mr * (1.0 + mr) ** n) / ((1.0 + mr) ** n - 1.0)


def _scenario(home_price: float, down: float, rate: float, term: int, name: str):
    from msc.core.models import ScenarioInputs
    from msc.core.registry import build_scenario

    return build_scenario(
        home_price,
        ScenarioInputs(name=name, down_payment_input=down, down_payment_mode="amount", interest_rate=rate, term=term),
    )


def _tt_zero_rate_schedule() -> None:
    from msc.core.amortization import amortize

    res = amortize(120_000.0, 0.0, 10)
    if res is None:
        _die("TT-A1: zero-rate loan was rejected")
    _assert_close("TT-A1 monthly payment", res.monthly_payment, 1_000.0)
    if len(res.records) != 10:
        _die(f"TT-A1: expected 10 yearly records, got {len(res.records)}")
    for rec in res.records:
        _assert_close(f"TT-A1 y{rec.year} principal", rec.principal_paid, 12_000.0, atol=1e-6)
        _assert_close(f"TT-A1 y{rec.year} interest", rec.interest_paid, 0.0)
    _assert_close("TT-A1 final balance", res.records[-1].ending_balance, 0.0)


def _tt_annuity_payment_and_payoff() -> None:
    from msc.core.amortization import amortize

    principal = 400_000.0
    res = amortize(principal, 4.19, 30)
    if res is None:
        _die("TT-A2: standard loan was rejected")
    _assert_close("TT-A2 monthly payment", res.monthly_payment, _annuity(principal, 4.19, 30), atol=1e-9)
    _assert_close("TT-A2 sum principal", sum(r.principal_paid for r in res.records), principal, atol=1e-2)
    _assert_close("TT-A2 final balance", res.records[-1].ending_balance, 0.0, atol=0.0)
    y1 = res.records[0]
    _assert_close("TT-A2 y1 beginning balance", y1.beginning_balance, principal, atol=0.0)
    if not y1.interest_paid > y1.principal_paid:
        _die("TT-A2: early-term interest should exceed principal")
    for prev, cur in zip(res.records, res.records[1:]):
        _assert_close(f"TT-A2 y{cur.year} continuity", cur.beginning_balance, prev.ending_balance, atol=0.0)


def _tt_zero_principal() -> None:
    from msc.core.amortization import amortize

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        res = amortize(0.0, 6.5, 30)
    if res is None or len(res.records) != 1:
        _die("TT-A3: zero principal must produce exactly one record")
    rec = res.records[0]
    for field in ("beginning_balance", "interest_paid", "principal_paid", "ending_balance", "annual_cost"):
        _assert_close(f"TT-A3 {field}", getattr(rec, field), 0.0, atol=0.0)
    _assert_close("TT-A3 monthly payment", res.monthly_payment, 0.0, atol=0.0)


def _tt_hand_computed_year_one() -> None:
    from msc.core.engine import simulate

    # Zero-rate loans keep the arithmetic exact.
    a = _scenario(120_000.0, 0.0, 0.0, 10, "A")        # annual cost 12,000
    b = _scenario(120_000.0, 60_000.0, 0.0, 10, "B")   # annual cost 6,000
    result = simulate([a, b], 120_000.0, 100_000.0, investment_rate=0.10)

    ra = result.scenarios[0].records[0]
    rb = result.scenarios[1].records[0]
    _assert_close("TT-E1 A contribution", ra.investment_contribution, 0.0)
    _assert_close("TT-E1 B contribution", rb.investment_contribution, 6_000.0)
    _assert_close("TT-E1 A cumulative", ra.cumulative_investment_value, 110_000.0)
    _assert_close("TT-E1 B cumulative", rb.cumulative_investment_value, 50_000.0)
    _assert_close("TT-E1 A profit", ra.investment_profit, 10_000.0)
    _assert_close("TT-E1 B profit", rb.investment_profit, 4_000.0)
    _assert_close("TT-E1 A net worth", ra.total_net_worth, 122_000.0)
    _assert_close("TT-E1 B net worth", rb.total_net_worth, 116_000.0)
    _assert_close("TT-E1 A change", ra.net_worth_change, 22_000.0)
    _assert_close("TT-E1 B change", rb.net_worth_change, 16_000.0)
    _assert_close("TT-E1 A performance", ra.performance_pct, 0.0)
    _assert_close("TT-E1 B performance", rb.performance_pct, (116_000.0 - 122_000.0) / 122_000.0 * 100.0)


def _tt_placeholders_after_payoff() -> None:
    from msc.core.engine import simulate

    short = _scenario(500_000.0, 100_000.0, 3.5, 15, "15y")
    long_ = _scenario(500_000.0, 100_000.0, 4.19, 30, "30y")
    result = simulate([short, long_], 500_000.0, 150_000.0)
    if result.horizon != 30:
        _die(f"TT-E2: horizon should be 30, got {result.horizon}")

    s15 = result.scenarios[0]
    if len(s15.records) != 30:
        _die(f"TT-E2: expected 30 records, got {len(s15.records)}")
    prev_value = s15.records[14].cumulative_investment_value
    if not prev_value > 0:
        _die("TT-E2: paid-off scenario should hold a positive invested balance")
    for rec in s15.records[15:]:
        if not rec.is_placeholder:
            _die(f"TT-E2: year {rec.year} should be a placeholder")
        _assert_close(f"TT-E2 y{rec.year} balance", rec.ending_balance, 0.0, atol=0.0)
        _assert_close(f"TT-E2 y{rec.year} contribution", rec.investment_contribution, 0.0, atol=0.0)
        _assert_close(f"TT-E2 y{rec.year} growth", rec.cumulative_investment_value, prev_value * 1.07, rtol=1e-12)
        _assert_close(f"TT-E2 y{rec.year} principal carried", rec.total_principal_paid, 400_000.0, atol=1e-2)
        prev_value = rec.cumulative_investment_value


def main(argv: list[str] | None = None) -> None:
    # Amortization invariants
    _tt_zero_rate_schedule()
    _tt_annuity_payment_and_payoff()
    _tt_zero_principal()

    # Comparison invariants
    _tt_hand_computed_year_one()
    _tt_placeholders_after_payoff()

    print("\n[TRUTH TABLES OK]\n")


if __name__ == "__main__":
    main()
