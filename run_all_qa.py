#!/usr/bin/env python3
"""Run the MSC QA gates in order and report a single pass/fail.

Usage:
  python run_all_qa.py                      # every gate
  python run_all_qa.py --only smoke         # a subset
  python run_all_qa.py --skip invariants
  python run_all_qa.py --list

Each gate is a module under msc/qa exposing ``main(argv)`` that raises
``SystemExit`` with a non-zero code on failure.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

# Gate name -> module, in run order.
GATES: dict[str, str] = {
    "smoke": "msc.qa.smoke_check",
    "truth_tables": "msc.qa.qa_truth_tables",
    "invariants": "msc.qa.qa_invariants",
}


def _exit_code(exc: SystemExit) -> int:
    if exc.code is None:
        return 0
    return exc.code if isinstance(exc.code, int) else 1


def run_gate(name: str) -> int:
    module = importlib.import_module(GATES[name])
    try:
        module.main([])
    except SystemExit as exc:
        return _exit_code(exc)
    except Exception as exc:
        print(f"[RUN_ALL_QA] {name} crashed: {type(exc).__name__}: {exc}")
        return 1
    return 0


def _names(raw: str, flag: str) -> set[str]:
    picked = {x.strip() for x in raw.split(",") if x.strip()}
    unknown = sorted(picked - set(GATES))
    if unknown:
        raise SystemExit(f"[RUN_ALL_QA] Unknown gate(s) in {flag}: {', '.join(unknown)}")
    return picked


def main(argv: list[str] | None = None) -> int:
    repo_root = Path(__file__).resolve().parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("--list", action="store_true", help="List the gates and exit.")
    ap.add_argument("--only", default="", help="Comma-separated gates to run.")
    ap.add_argument("--skip", default="", help="Comma-separated gates to leave out.")
    args = ap.parse_args(argv)

    if args.list:
        for name, module in GATES.items():
            print(f"{name:<14} {module}")
        return 0

    selected = _names(args.only, "--only") if args.only.strip() else set(GATES)
    selected -= _names(args.skip, "--skip")
    order = [g for g in GATES if g in selected]
    if not order:
        print("[RUN_ALL_QA] No gates selected.")
        return 0

    results = {}
    for name in order:
        print(f"--- {name} ---")
        results[name] = run_gate(name)
        print(f"[RUN_ALL_QA] {name}: {'ok' if results[name] == 0 else f'FAILED ({results[name]})'}\n")

    failed = [n for n, code in results.items() if code != 0]
    if failed:
        print(f"=== RUN_ALL_QA FAILED: {', '.join(failed)} ===")
        return 1
    print("=== RUN_ALL_QA PASS ===")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
