"""Tests for the presentation helpers (formatting, tables, charts); no Streamlit needed."""

from __future__ import annotations

import math

import pytest

from msc.core.engine import simulate
from msc.core.models import ScenarioInputs
from msc.core.registry import build_scenario
from msc.ui.charts import CHART_METRICS, SCENARIO_COLORS, axis_ticks, build_comparison_figure, chart_frame, scenario_color
from msc.ui.formatting import (
    format_currency,
    format_currency_compact,
    format_down_payment_input,
    format_percent,
)
from msc.ui.tables import YEAR_TABLE_COLUMNS, build_summary_table, build_year_table


@pytest.fixture(scope="module")
def result():
    scenarios = [
        build_scenario(500_000.0, ScenarioInputs(name="30y", down_payment_input=20.0, interest_rate=4.19, term=30)),
        build_scenario(500_000.0, ScenarioInputs(name="15y", down_payment_input=20.0, interest_rate=3.5, term=15)),
    ]
    return simulate(scenarios, 500_000.0, 150_000.0)


class TestFormatting:
    def test_currency(self) -> None:
        assert format_currency(1234.567) == "$1,234.57"
        assert format_currency(-50) == "-$50.00"
        assert format_currency(-0.001) == "$0.00"
        assert format_currency(None) == "N/A"
        assert format_currency(math.nan) == "N/A"
        assert format_currency(math.inf) == "N/A"

    def test_compact(self) -> None:
        assert format_currency_compact(950) == "$950"
        assert format_currency_compact(12_500) == "$12.5K"
        assert format_currency_compact(1_200_000) == "$1.2M"
        assert format_currency_compact(-3_000_000_000) == "-$3B"
        assert format_currency_compact("x") == "N/A"

    def test_percent(self) -> None:
        assert format_percent(-12.346) == "-12.35%"
        assert format_percent(-0.0001) == "0.00%"
        assert format_percent(None) == "N/A"

    def test_down_payment_input(self) -> None:
        assert format_down_payment_input(20.0, "percent") == "20%"
        assert format_down_payment_input(75_000, "amount") == "$75,000.00"


class TestTables:
    def test_year_table_shape(self, result) -> None:
        df = build_year_table(result)
        assert list(df.columns) == YEAR_TABLE_COLUMNS
        assert len(df) == result.horizon * 2

    def test_ended_rows(self, result) -> None:
        df = build_year_table(result, years=[16])
        ended = df[df["Scenario"] == "15y (Ended)"].iloc[0]
        assert ended["Beginning Balance"] == "-"
        assert ended["Annual Cost"] == "-"
        assert ended["Invested This Year"] == "-"
        assert ended["Net Worth"].startswith("$")
        active = df[df["Scenario"] == "30y"].iloc[0]
        assert active["Beginning Balance"].startswith("$")

    def test_zero_contribution_shown_as_dash(self, result) -> None:
        df = build_year_table(result, years=[1])
        # The 15y loan costs more per year, so it sets the maximum and invests nothing.
        row = df[df["Scenario"] == "15y"].iloc[0]
        assert row["Invested This Year"] == "-"
        other = df[df["Scenario"] == "30y"].iloc[0]
        assert other["Invested This Year"].startswith("$")

    def test_total_principal_column(self, result) -> None:
        cols = YEAR_TABLE_COLUMNS
        assert cols.index("Total Principal Paid") == cols.index("Invested This Year") + 1
        df = build_year_table(result, years=[20])
        ended = df[df["Scenario"] == "15y (Ended)"].iloc[0]
        # Carried forward after payoff, so shown even for ended loans.
        paid = result.scenario("15y").records[14].total_principal_paid
        assert paid == pytest.approx(400_000.0, abs=1e-2)
        assert ended["Total Principal Paid"] == format_currency(paid)

    def test_leader_shows_dash(self, result) -> None:
        df = build_year_table(result, years=[1])
        perf = {s.name: s.records[0].performance_pct for s in result.scenarios}
        leader = next(name for name, p in perf.items() if p == 0)
        trailer = next(name for name, p in perf.items() if p != 0)
        assert df[df["Scenario"] == leader].iloc[0]["vs. Best"] == "-"
        assert df[df["Scenario"] == trailer].iloc[0]["vs. Best"].endswith("%")

    def test_summary_table(self, result) -> None:
        df = build_summary_table(result)
        assert list(df["Scenario"]) == ["30y", "15y"]
        assert df.iloc[0]["Down Payment"] == "$100,000.00 (20%)"
        assert df.iloc[1]["Term"] == "15 Years"
        assert "Net Worth (Year 30)" in df.columns


class TestCharts:
    def test_colors_cycle(self) -> None:
        assert scenario_color(0) == SCENARIO_COLORS[0]
        assert scenario_color(len(SCENARIO_COLORS)) == SCENARIO_COLORS[0]

    def test_chart_frame(self, result) -> None:
        wide = chart_frame(result, "total_net_worth")
        assert list(wide.columns) == ["30y", "15y"]
        assert list(wide.index) == list(range(1, 31))
        assert wide.loc[1, "30y"] == pytest.approx(result.scenarios[0].records[0].total_net_worth)

    def test_figure_traces(self, result) -> None:
        fig = build_comparison_figure(result)
        assert len(fig.data) == 2 * len(CHART_METRICS)
        only = build_comparison_figure(result, ["total_net_worth"])
        assert [t.name for t in only.data] == ["30y - Net Worth", "15y - Net Worth"]
        assert only.data[0].line.color == SCENARIO_COLORS[0]

    def test_axis_ticks(self) -> None:
        assert axis_ticks([]) == [0.0]
        assert axis_ticks([None, 0.0]) == [0.0]
        assert axis_ticks([1_000_000.0]) == [0.0, 200_000.0, 400_000.0, 600_000.0, 800_000.0, 1_000_000.0]
        ticks = axis_ticks([-30.0, 70.0, math.nan])
        assert ticks[0] <= -30.0 and ticks[-1] >= 70.0
        assert 0.0 in ticks

    def test_y_axis_uses_compact_labels(self, result) -> None:
        fig = build_comparison_figure(result, ["total_net_worth"])
        labels = list(fig.layout.yaxis.ticktext)
        assert len(labels) == len(fig.layout.yaxis.tickvals)
        assert labels[0] == "$0"
        assert all(label.startswith("$") for label in labels)
        assert any(label.endswith("M") or label.endswith("K") for label in labels)

    def test_empty_result(self) -> None:
        empty = simulate([], 500_000.0, 100_000.0)
        assert len(build_comparison_figure(empty).data) == 0
        assert chart_frame(empty, "total_net_worth").empty
        assert build_year_table(empty).empty
