#!/usr/bin/env python3
"""Randomized invariant sweep over amortization and the scenario comparison.

A seeded generator draws loans and scenario sets; every draw must satisfy:
- principal paid sums to the amount borrowed and the loan ends at exactly 0
- balances carry over between years and never rise
- each year has a leader at 0% and nobody above it
- recomputing the same inputs is bit-identical

Run:
  python -m msc.qa.qa_invariants [--draws N] [--seed S]
"""

from __future__ import annotations

import argparse
import math
import sys
import warnings
from pathlib import Path

import numpy as np

_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


def _die(msg: str, code: int = 1) -> None:
    print(f"\n[INVARIANTS FAILED] {msg}\n")
    raise SystemExit(code)


def _check_schedule(principal: float, rate: float, term: int) -> None:
    from msc.core.amortization import amortize

    res = amortize(principal, rate, term)
    tag = f"amortize({principal:.2f}, {rate:.3f}, {term})"
    if res is None:
        _die(f"{tag} rejected valid inputs")
    recs = res.records
    if len(recs) > term:
        _die(f"{tag}: {len(recs)} records for a {term}-year term")
    paid = sum(r.principal_paid for r in recs)
    if abs(paid - principal) > 1e-2:
        _die(f"{tag}: principal paid {paid:.6f} != {principal:.6f}")
    if recs[-1].ending_balance != 0.0:
        _die(f"{tag}: final balance {recs[-1].ending_balance!r}")
    for prev, cur in zip(recs, recs[1:]):
        if cur.beginning_balance != prev.ending_balance:
            _die(f"{tag}: year {cur.year} does not continue year {prev.year}")
        if cur.ending_balance > prev.ending_balance:
            _die(f"{tag}: balance rose in year {cur.year}")


def _check_comparison(rng: np.random.Generator) -> None:
    from msc.core.engine import simulate
    from msc.core.models import ScenarioInputs
    from msc.core.registry import build_scenario
    from msc.core.snapshots import result_fingerprint

    home_price = float(rng.uniform(100_000, 2_000_000))
    cash = float(rng.uniform(0, 600_000))
    scenarios = []
    for i in range(int(rng.integers(1, 6))):
        pct = float(rng.choice([0.0, 5.0, 10.0, 20.0, 35.0, 100.0]))
        rate = 0.0 if pct == 100.0 else float(rng.uniform(0.0, 9.0))
        term = int(rng.choice([5, 10, 15, 20, 25, 30, 40]))
        scenarios.append(
            build_scenario(
                home_price,
                ScenarioInputs(name=f"S{i}", down_payment_input=pct, down_payment_mode="percent", interest_rate=rate, term=term),
                [s.name for s in scenarios],
            )
        )

    result = simulate(scenarios, home_price, cash)
    expected_horizon = max([30] + [s.term for s in scenarios])
    if result.horizon != expected_horizon:
        _die(f"horizon {result.horizon} != {expected_horizon}")

    for year in range(1, result.horizon + 1):
        perf = [s.records[year - 1].performance_pct for s in result.scenarios]
        if any(p > 0 for p in perf):
            _die(f"year {year}: performance above the leader {perf}")
        if not any(p == 0 for p in perf):
            _die(f"year {year}: no scenario leads {perf}")
        if not all(math.isfinite(p) for p in perf):
            _die(f"year {year}: non-finite performance {perf}")

    if result_fingerprint(simulate(result.scenarios, home_price, cash)) != result_fingerprint(result):
        _die("recomputing from an augmented result changed the output")


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(prog="python -m msc.qa.qa_invariants")
    ap.add_argument("--draws", type=int, default=200)
    ap.add_argument("--seed", type=int, default=20240501)
    args = ap.parse_args(argv)

    rng = np.random.default_rng(args.seed)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        for _ in range(args.draws):
            principal = float(rng.uniform(1_000, 3_000_000))
            rate = float(rng.choice([0.0, float(rng.uniform(0.01, 15.0))]))
            term = int(rng.integers(1, 41))
            _check_schedule(principal, rate, term)
        for _ in range(max(1, args.draws // 4)):
            _check_comparison(rng)

    print("[INVARIANTS OK]")


if __name__ == "__main__":
    main()
