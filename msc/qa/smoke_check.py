#!/usr/bin/env python3
"""Quick smoke checks for the scenario comparison app.

Run:
  python -m msc.qa.smoke_check
"""

from __future__ import annotations
import sys
from pathlib import Path

# Ensure repo root is on sys.path regardless of where this script is invoked from.
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

import compileall
import math


def die(msg: str, code: int = 1) -> None:
    print(f"\n[SMOKE CHECK FAILED] {msg}\n")
    raise SystemExit(code)


def main(argv: list[str] | None = None) -> None:
    root = _REPO_ROOT
    app_py = root / "app.py"
    pkg_dir = root / "msc"

    if not app_py.exists():
        die("app.py not found (run from the repository root).")
    if not compileall.compile_file(str(app_py), quiet=1):
        die("app.py failed to compile.")
    if not compileall.compile_dir(str(pkg_dir), quiet=1):
        die("msc/ package failed to compile.")

    try:
        from msc.core.config import example_config, parse_config
        from msc.core.registry import ScenarioRegistry
        from msc.core.snapshots import result_fingerprint
    except Exception as e:
        die(f"Import failure: {e}")

    registry = ScenarioRegistry.from_config(parse_config(example_config()))
    result = registry.result
    if len(result.scenarios) != 2:
        die(f"Expected the 2 example scenarios, got {len(result.scenarios)}.")

    for s in result.scenarios:
        if len(s.records) != result.horizon:
            die(f"{s.name}: {len(s.records)} records for a {result.horizon}-year horizon.")
        for rec in s.records:
            if rec.total_net_worth is None or not math.isfinite(rec.total_net_worth):
                die(f"{s.name} year {rec.year}: net worth is not finite.")
            if rec.performance_pct is None or rec.performance_pct > 0:
                die(f"{s.name} year {rec.year}: performance {rec.performance_pct} above leader.")

    again = ScenarioRegistry.from_config(parse_config(example_config())).result
    if result_fingerprint(again) != result_fingerprint(result):
        die("Recomputing the same inputs produced a different result.")

    print("[SMOKE CHECK OK]")


if __name__ == "__main__":
    main()
