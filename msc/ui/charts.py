"""Plotly charts for the scenario comparison.

Figures are built from a ``ComparisonResult`` without touching Streamlit, so
they can be unit tested; ``render_comparison_chart`` is the thin Streamlit
wrapper used by ``app.py``.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Sequence

import plotly.graph_objects as go

from msc.core.models import ComparisonResult
from msc.ui.formatting import format_currency, format_currency_compact

# (record field, legend label, plotly dash style)
CHART_METRICS: list[tuple[str, str, str]] = [
    ("total_net_worth", "Net Worth", "solid"),
    ("total_principal_paid", "Principal Paid", "dash"),
    ("total_interest_paid", "Interest Paid", "dot"),
    ("cumulative_investment_value", "Investment Value", "dashdot"),
    ("ending_balance", "Ending Balance", "5px,3px"),
]

SCENARIO_COLORS = [
    "#8884d8",
    "#82ca9d",
    "#ffc658",
    "#ff7300",
    "#00C49F",
    "#FFBB28",
    "#FF8042",
]


def scenario_color(index: int) -> str:
    return SCENARIO_COLORS[index % len(SCENARIO_COLORS)]


def axis_ticks(values: Iterable[Any], target: int = 6) -> list[float]:
    """Round-number tick positions (steps of 1, 2 or 5 x 10^k) spanning 0 and ``values``."""
    finite = [float(v) for v in values if v is not None and math.isfinite(float(v))]
    lo = min([0.0] + finite)
    hi = max([0.0] + finite)
    if hi == lo:
        return [lo]
    raw = (hi - lo) / max(1, target - 1)
    mag = 10.0 ** math.floor(math.log10(raw))
    step = next(m * mag for m in (1.0, 2.0, 5.0, 10.0) if m * mag >= raw)
    first = math.floor(lo / step)
    last = math.ceil(hi / step)
    return [k * step for k in range(first, last + 1)]


def chart_frame(result: ComparisonResult, metric: str):
    """Wide DataFrame (index = year, one column per scenario) for ``metric``."""
    df = result.to_frame()
    if df.empty:
        return df
    wide = df.pivot(index="year", columns="scenario_index", values=metric)
    wide.columns = [result.scenarios[i].name for i in wide.columns]
    return wide


def build_comparison_figure(
    result: ComparisonResult,
    metrics: Sequence[str] | None = None,
) -> go.Figure:
    """One line per (scenario, metric); colour by scenario, dash style by metric."""
    wanted = set(metrics) if metrics is not None else None
    years = list(range(1, result.horizon + 1))

    fig = go.Figure()
    for idx, s in enumerate(result.scenarios):
        for key, label, dash in CHART_METRICS:
            if wanted is not None and key not in wanted:
                continue
            ys = []
            for year in years:
                rec = s.record_for(year)
                ys.append(None if rec is None else getattr(rec, key))
            fig.add_trace(
                go.Scatter(
                    x=years,
                    y=ys,
                    mode="lines+markers",
                    name=f"{s.name} - {label}",
                    legendgroup=s.name,
                    line=dict(color=scenario_color(idx), dash=dash),
                    connectgaps=True,
                    customdata=[format_currency(v) for v in ys],
                    hovertemplate="Year %{x}<br>%{fullData.name}: %{customdata}<extra></extra>",
                )
            )
    fig.update_layout(
        title="Scenario Comparison",
        xaxis_title="Year",
        yaxis_title="Amount ($)",
        legend_title="Scenario - Metric",
        template="plotly_white",
        hovermode="x unified",
    )
    ticks = axis_ticks(y for trace in fig.data for y in trace.y)
    fig.update_yaxes(tickvals=ticks, ticktext=[format_currency_compact(t) for t in ticks])
    return fig


def render_comparison_chart(result: ComparisonResult, st_module: Any, metrics: Sequence[str] | None = None) -> None:
    """Render the comparison chart, or a hint when there is nothing to plot.

    Parameters
    ----------
    result : ComparisonResult
        Current registry result.
    st_module : Any
        The Streamlit module instance used for rendering.
    metrics : Sequence[str], optional
        Record fields to plot; all of ``CHART_METRICS`` by default.
    """
    if not result.scenarios:
        st_module.info("Add scenarios to see the comparison chart.")
        return
    st_module.plotly_chart(build_comparison_figure(result, metrics), use_container_width=True)
