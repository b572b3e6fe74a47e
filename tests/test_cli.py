import json

import pytest


def test_cli_json_defaults_to_example_scenarios(capsys):
    """With no config the CLI compares the bundled example scenarios."""
    from msc import __main__ as cli

    rc = cli.main(["--json"])
    assert rc == 0

    data = json.loads(capsys.readouterr().out)
    assert data["horizon_years"] == 30
    assert [s["name"] for s in data["scenarios"]] == ["30-year fixed", "15-year fixed"]
    assert all(s["monthly_payment"] > 0 for s in data["scenarios"])
    assert max(s["final_performance_pct"] for s in data["scenarios"]) == 0.0
    assert len(data["result_hash"]) == 64


def test_cli_hashes_are_stable(capsys):
    from msc import __main__ as cli

    cli.main(["--json"])
    first = json.loads(capsys.readouterr().out)
    cli.main(["--json"])
    second = json.loads(capsys.readouterr().out)
    assert first["result_hash"] == second["result_hash"]
    assert first["inputs_hash"] == second["inputs_hash"]


def test_cli_example_is_loadable(capsys, tmp_path):
    from msc import __main__ as cli

    assert cli.main(["--example"]) == 0
    path = tmp_path / "config.json"
    path.write_text(capsys.readouterr().out)

    assert cli.main(["--config", str(path), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert len(data["scenarios"]) == 2


def test_cli_overrides_and_extra_scenario(capsys):
    from msc import __main__ as cli

    rc = cli.main(["--json", "--set", "homePrice=650000", "--scenario", "Low down,5,percent,4.6,30"])
    assert rc == 0
    data = json.loads(capsys.readouterr().out)
    assert data["home_price"] == 650_000.0
    low = data["scenarios"][-1]
    assert low["name"] == "Low down"
    assert low["down_payment"] == pytest.approx(32_500.0)


def test_cli_rejects_invalid_scenario(capsys):
    from msc import __main__ as cli

    rc = cli.main(["--scenario", "Too much,150,percent,4,30"])
    assert rc == 1
    assert "Down payment percentage must be between 0 and 100." in capsys.readouterr().err


def test_cli_rejects_malformed_scenario(capsys):
    from msc import __main__ as cli

    assert cli.main(["--scenario", "only,three,parts"]) == 1
    assert "Malformed --scenario" in capsys.readouterr().err


def test_cli_missing_config(capsys, tmp_path):
    from msc import __main__ as cli

    assert cli.main(["--config", str(tmp_path / "missing.json")]) == 1
    assert "config file not found" in capsys.readouterr().err


def test_cli_csv_outputs(capsys, tmp_path):
    from msc import __main__ as cli

    out = tmp_path / "results.csv"
    assert cli.main(["--output", str(out)]) == 0
    header = out.read_text().splitlines()[0].split(",")
    assert header[:3] == ["scenario_index", "scenario", "year"]
    assert "total_net_worth" in header

    capsys.readouterr()
    assert cli.main(["--metric", "total_net_worth"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "year,30-year fixed,15-year fixed"
    assert len(lines) == 31
