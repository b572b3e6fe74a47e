"""CLI / headless entry point for the mortgage scenario comparison.

Usage
-----
Run with a JSON config file:
    python -m msc --config config.json --output results.csv

Dump an example config file:
    python -m msc --example

Override top-level values on the command line:
    python -m msc --config config.json --set homePrice=650000 --set initialInvestments=150000

Add a scenario without editing the file (name,downPayment,type,rate,term):
    python -m msc --scenario "Low down,5,percent,4.6,30"
"""

from __future__ import annotations

import argparse
import json
import sys
import warnings
from pathlib import Path

from msc.core.config import example_config, load_config, parse_config
from msc.core.errors import CalculationError, ConfigurationError, ScenarioValidationError
from msc.core.models import ScenarioInputs
from msc.core.registry import ScenarioRegistry
from msc.core.snapshots import inputs_fingerprint, result_fingerprint
from msc.ui.charts import CHART_METRICS, chart_frame

_OVERRIDABLE = ("homePrice", "initialInvestments", "investmentRate")


def _coerce(raw: str) -> bool | int | float | str:
    """Coerce a --set value: bool -> int -> float -> str."""
    if raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    try:
        return int(raw)
    except ValueError:
        try:
            return float(raw)
        except ValueError:
            return raw


def _apply_overrides(payload: dict, overrides: list[str]) -> dict:
    for kv in overrides or []:
        if "=" not in kv:
            print(f"Warning: ignoring malformed --set argument (expected key=value): {kv!r}", file=sys.stderr)
            continue
        key, _, raw = kv.partition("=")
        key = key.strip()
        if key not in _OVERRIDABLE:
            print(f"Warning: ignoring unknown --set key {key!r} (expected one of {', '.join(_OVERRIDABLE)})", file=sys.stderr)
            continue
        payload[key] = _coerce(raw.strip())
    return payload


def _parse_scenario_arg(text: str) -> ScenarioInputs:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 5:
        raise ValueError(f"expected name,downPayment,type,rate,term; got {text!r}")
    name, down, mode, rate, term = parts
    return ScenarioInputs(
        name=name or None,
        down_payment_input=float(down),
        down_payment_mode=mode,
        interest_rate=float(rate),
        term=int(term),
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m msc",
        description="Mortgage Scenario Comparison: headless/CLI mode.",
    )
    parser.add_argument(
        "--config", "-c",
        metavar="FILE",
        help="Path to a JSON config file. Use --example to generate a template.",
    )
    parser.add_argument(
        "--output", "-o",
        metavar="FILE",
        default="-",
        help="Output file path. Use '-' (default) to print to stdout.",
    )
    parser.add_argument(
        "--set", "-s",
        dest="overrides",
        metavar="key=value",
        action="append",
        help=f"Override a top-level config value ({', '.join(_OVERRIDABLE)}). Repeatable.",
    )
    parser.add_argument(
        "--scenario",
        dest="extra_scenarios",
        metavar="SCENARIO",
        action="append",
        help="Append a scenario: 'name,downPayment,amount|percent,rate,term'. Repeatable.",
    )
    parser.add_argument(
        "--example",
        action="store_true",
        help="Print an example JSON config file and exit.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output a JSON summary instead of the CSV time-series.",
    )
    parser.add_argument(
        "--metric",
        choices=[key for key, _label, _dash in CHART_METRICS],
        help="Output one metric as a wide CSV (one column per scenario).",
    )

    args = parser.parse_args(argv)

    if args.example:
        print(json.dumps(example_config(), indent=2))
        return 0

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: config file not found: {config_path}", file=sys.stderr)
            return 1
        cfg = load_config(config_path)
    else:
        cfg = parse_config(example_config())
    if cfg.error:
        print(f"Configuration error: {cfg.error}. Proceeding with default values.", file=sys.stderr)

    if args.overrides:
        try:
            cfg = parse_config(_apply_overrides(cfg.to_payload(), args.overrides))
        except ConfigurationError as exc:
            print(f"Config error: {exc}", file=sys.stderr)
            return 1

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        registry = ScenarioRegistry.from_config(cfg)
    for w in caught:
        print(f"Warning: {w.message}", file=sys.stderr)

    for text in args.extra_scenarios or []:
        try:
            registry.add(_parse_scenario_arg(text))
        except ScenarioValidationError as exc:
            print(f"Invalid scenario: {exc}", file=sys.stderr)
            return 1
        except CalculationError as exc:
            print(f"Calculation error: {exc}", file=sys.stderr)
            return 1
        except ValueError as exc:
            print(f"Malformed --scenario argument: {exc}", file=sys.stderr)
            return 1

    result = registry.result
    if not result.scenarios:
        print("Error: no valid scenarios to compare.", file=sys.stderr)
        return 1

    print(
        f"Comparing {len(result.scenarios)} scenario(s): home price=${registry.home_price:,.0f}, "
        f"initial investments=${registry.initial_investments:,.0f}, "
        f"investment rate={registry.investment_rate:.2%}, horizon={result.horizon} years",
        file=sys.stderr,
    )

    if args.json:
        summary = {
            "horizon_years": result.horizon,
            "home_price": registry.home_price,
            "initial_investments": registry.initial_investments,
            "investment_rate": registry.investment_rate,
            "inputs_hash": inputs_fingerprint(result),
            "result_hash": result_fingerprint(result),
            "scenarios": [
                {
                    **row,
                    "monthly_payment": round(row["monthly_payment"], 2),
                    "final_net_worth": None if row["final_net_worth"] is None else round(row["final_net_worth"], 2),
                }
                for row in result.final_summary()
            ],
        }
        output = json.dumps(summary, indent=2)
        if args.output == "-":
            print(output)
        else:
            Path(args.output).write_text(output + "\n")
        return 0

    if args.metric:
        csv_str = chart_frame(result, args.metric).to_csv()
    else:
        csv_str = result.to_frame().to_csv(index=False)
    if args.output == "-":
        print(csv_str, end="")
    else:
        out_path = Path(args.output)
        out_path.write_text(csv_str)
        print(f"Results written to {out_path}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
