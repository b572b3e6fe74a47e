"""Canonical JSON snapshots and SHA-256 fingerprints of comparison results."""

from __future__ import annotations

import datetime as _dt
import hashlib
import json
import math
from typing import Any

import numpy as np

from .models import ComparisonResult, Scenario

SNAPSHOT_SCHEMA = "msc.comparison_snapshot.v1"


def _normalize_float(x: float) -> int | float | None:
    try:
        v = float(x)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(v):
        return None
    # Collapse signed zero so -0.0 and 0.0 hash the same.
    if v == 0.0:
        return 0
    if v == int(v) and abs(v) < 2**53:
        return int(v)
    return v


def canonicalize_jsonish(value: Any) -> Any:
    """JSON-safe, deterministically ordered copy of ``value``.

    Floats are kept at full precision, so two results hash alike only when
    they are bit-identical (modulo signed zero).
    """
    if isinstance(value, np.generic):
        value = value.item()

    if value is None or isinstance(value, (str, bool)):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return _normalize_float(value)
    if isinstance(value, (_dt.datetime, _dt.date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): canonicalize_jsonish(value[k]) for k in sorted(value.keys(), key=str)}
    if isinstance(value, (list, tuple)):
        return [canonicalize_jsonish(v) for v in value]
    return str(value)


def _canonical_json(obj: Any) -> str:
    return json.dumps(canonicalize_jsonish(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def scenario_payload(scenario: Scenario) -> dict[str, Any]:
    return {
        "name": scenario.name,
        "down_payment_input": scenario.down_payment_input,
        "down_payment_mode": scenario.down_payment_mode,
        "down_payment": scenario.down_payment,
        "interest_rate": scenario.interest_rate,
        "term": scenario.term,
        "monthly_payment": scenario.monthly_payment,
        "records": [r.to_dict() for r in scenario.records],
    }


def result_payload(result: ComparisonResult) -> dict[str, Any]:
    return {
        "schema": SNAPSHOT_SCHEMA,
        "params": {
            "home_price": result.params.home_price,
            "initial_investments": result.params.initial_investments,
            "investment_rate": result.params.investment_rate,
        },
        "horizon": result.horizon,
        "scenarios": [scenario_payload(s) for s in result.scenarios],
    }


def result_fingerprint(result: ComparisonResult) -> str:
    """SHA-256 of the canonical result; equal fingerprints mean equal outputs."""
    return hashlib.sha256(_canonical_json(result_payload(result)).encode("utf-8")).hexdigest()


def inputs_fingerprint(result: ComparisonResult) -> str:
    """Hash of what the result was computed from (params and scenario inputs only)."""
    state = {
        "params": result_payload(result)["params"],
        "scenarios": [
            {
                "name": s.name,
                "down_payment_input": s.down_payment_input,
                "down_payment_mode": s.down_payment_mode,
                "interest_rate": s.interest_rate,
                "term": s.term,
            }
            for s in result.scenarios
        ],
    }
    return hashlib.sha256(_canonical_json(state).encode("utf-8")).hexdigest()
