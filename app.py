import os
import sys
import warnings

import streamlit as st

# Ensure the local package (msc/) is importable when running via an absolute path
sys.path.insert(0, os.path.dirname(__file__))

from msc.core.config import DEFAULT_FORM, load_config
from msc.core.errors import CalculationError, ScenarioValidationError
from msc.core.models import DOWN_PAYMENT_AMOUNT, DOWN_PAYMENT_PERCENT, ScenarioInputs
from msc.core.registry import ScenarioRegistry
from msc.core.snapshots import inputs_fingerprint
from msc.core.validation import default_scenario_name
from msc.ui.charts import CHART_METRICS, render_comparison_chart
from msc.ui.formatting import format_currency, format_down_payment_input
from msc.ui.tables import build_summary_table, build_year_table

st.set_page_config(page_title="Mortgage Scenario Comparison", layout="wide", page_icon="🏠")

CONFIG_PATH = os.environ.get("MSC_CONFIG", "config.json")


def _init_state() -> None:
    """Load config once per session and seed the form defaults."""
    if "registry" in st.session_state:
        return
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        cfg = load_config(CONFIG_PATH)
        registry = ScenarioRegistry.from_config(cfg)
    st.session_state["registry"] = registry
    st.session_state["config_error"] = cfg.error
    st.session_state["startup_notices"] = [str(w.message) for w in caught]
    st.session_state["home_price"] = registry.home_price
    st.session_state["initial_investments"] = registry.initial_investments
    _reset_form()


def _reset_form() -> None:
    st.session_state["new_name"] = DEFAULT_FORM["name"]
    st.session_state["new_mode"] = DEFAULT_FORM["downPaymentType"]
    st.session_state["new_down"] = float(DEFAULT_FORM["downPaymentInput"])
    st.session_state["new_rate"] = float(DEFAULT_FORM["interestRate"])
    st.session_state["new_term"] = int(DEFAULT_FORM["term"])


def _on_mode_change() -> None:
    # Percent mode restarts at 20%; amount mode at 20% of the home price.
    if st.session_state["new_mode"] == DOWN_PAYMENT_PERCENT:
        st.session_state["new_down"] = float(DEFAULT_FORM["downPaymentInput"])
    else:
        st.session_state["new_down"] = float(st.session_state["registry"].home_price) * 0.2


def _on_home_price_change() -> None:
    registry: ScenarioRegistry = st.session_state["registry"]
    try:
        dropped = registry.set_home_price(st.session_state["home_price"])
    except ScenarioValidationError as exc:
        st.session_state["flash"] = ("error", str(exc))
        st.session_state["home_price"] = registry.home_price
        return
    if dropped:
        st.session_state["flash"] = ("warning", "Removed scenarios no longer valid at this home price: " + ", ".join(dropped))
    if st.session_state["new_mode"] == DOWN_PAYMENT_AMOUNT:
        st.session_state["new_down"] = float(registry.home_price) * 0.2


def _on_initial_investments_change() -> None:
    registry: ScenarioRegistry = st.session_state["registry"]
    try:
        registry.set_initial_investments(st.session_state["initial_investments"])
    except ScenarioValidationError as exc:
        st.session_state["flash"] = ("error", str(exc))
        st.session_state["initial_investments"] = registry.initial_investments


def _on_add() -> None:
    registry: ScenarioRegistry = st.session_state["registry"]
    inputs = ScenarioInputs(
        name=st.session_state["new_name"],
        down_payment_input=st.session_state["new_down"],
        down_payment_mode=st.session_state["new_mode"],
        interest_rate=st.session_state["new_rate"],
        term=st.session_state["new_term"],
    )
    try:
        added = registry.add(inputs)
    except ScenarioValidationError as exc:
        st.session_state["flash"] = ("error", str(exc))
        return
    except CalculationError as exc:
        st.session_state["flash"] = ("error", str(exc))
        return
    st.session_state["flash"] = ("success", f"Added {added.name}.")
    _reset_form()


def _on_remove(index: int) -> None:
    registry: ScenarioRegistry = st.session_state["registry"]
    try:
        removed = registry.remove(index)
    except IndexError:
        return
    st.session_state["flash"] = ("info", f"Removed {removed.name}.")


@st.cache_data(show_spinner=False)
def _year_table_csv(_result, key: str) -> str:
    # key (the inputs hash) drives the cache; _result is not hashed by Streamlit.
    return build_year_table(_result).to_csv(index=False)


_init_state()
registry: ScenarioRegistry = st.session_state["registry"]

st.title("Mortgage Scenario Comparison")

if st.session_state.get("config_error"):
    st.error(
        f"Configuration Error: {st.session_state['config_error']}\n\n"
        "Attempting to proceed with default values."
    )
for notice in st.session_state.get("startup_notices", []):
    st.warning(notice)

flash = st.session_state.pop("flash", None)
if flash is not None:
    level, message = flash
    getattr(st, level)(message)

# --- Global inputs ---
g1, g2, g3 = st.columns(3)
with g1:
    st.number_input("Home Price", min_value=0.0, step=10_000.0, key="home_price", on_change=_on_home_price_change)
with g2:
    st.number_input(
        "Initial Investments",
        min_value=0.0,
        step=5_000.0,
        key="initial_investments",
        on_change=_on_initial_investments_change,
    )
with g3:
    st.metric("Investment Growth Rate", f"{registry.investment_rate:.1%}")

st.divider()

# --- Add scenario ---
st.subheader("Add New Scenario")
f1, f2, f3, f4, f5 = st.columns([2, 1.2, 1.2, 1, 1])
with f1:
    st.text_input(
        "Scenario Name (Optional)",
        key="new_name",
        placeholder=f"e.g., {default_scenario_name(registry.names)}",
    )
with f2:
    st.radio(
        "Down Payment Type",
        options=[DOWN_PAYMENT_PERCENT, DOWN_PAYMENT_AMOUNT],
        format_func=lambda m: "Percent (%)" if m == DOWN_PAYMENT_PERCENT else "Amount ($)",
        key="new_mode",
        horizontal=True,
        on_change=_on_mode_change,
    )
with f3:
    if st.session_state["new_mode"] == DOWN_PAYMENT_PERCENT:
        st.number_input("Down Payment (%)", min_value=0.0, max_value=100.0, step=1.0, key="new_down")
        st.caption(f"= {format_currency(registry.home_price * st.session_state['new_down'] / 100.0)}")
    else:
        st.number_input("Down Payment ($)", min_value=0.0, step=1_000.0, key="new_down")
with f4:
    st.number_input("Interest Rate (%)", min_value=0.0, step=0.05, format="%.2f", key="new_rate")
with f5:
    st.number_input("Term (Years)", min_value=1, step=1, key="new_term")
st.button("Add Scenario", type="primary", on_click=_on_add)

st.divider()

# --- Current scenarios ---
st.subheader("Current Scenarios")
scenarios = registry.scenarios
if not scenarios:
    st.info("No scenarios added yet.")
else:
    cols = st.columns(min(len(scenarios), 4))
    for idx, s in enumerate(scenarios):
        with cols[idx % len(cols)]:
            with st.container(border=True):
                st.markdown(f"**{s.name}**")
                st.write(
                    f"Down Payment: {format_currency(s.down_payment)} "
                    f"({format_down_payment_input(s.down_payment_input, s.down_payment_mode)})"
                )
                st.write(f"Interest Rate: {s.interest_rate:g}%")
                st.write(f"Term: {s.term} Years")
                st.write(f"Monthly P&I: {format_currency(s.monthly_payment)}")
                st.button("Remove", key=f"remove_{idx}_{s.name}", on_click=_on_remove, args=(idx,))

st.divider()

# --- Chart ---
result = registry.result
st.subheader("Scenario Comparison Chart")
labels = {key: label for key, label, _dash in CHART_METRICS}
chosen = st.multiselect(
    "Metrics",
    options=list(labels),
    default=list(labels),
    format_func=lambda k: labels[k],
)
render_comparison_chart(result, st, metrics=chosen)

# --- Tables ---
if result.scenarios:
    st.subheader("Summary")
    st.dataframe(build_summary_table(result), use_container_width=True, hide_index=True)

    st.subheader("Year-by-Year Comparison")
    st.dataframe(build_year_table(result), use_container_width=True, hide_index=True, height=600)
    st.download_button(
        "Download table (CSV)",
        data=_year_table_csv(result, inputs_fingerprint(result)),
        file_name="mortgage_comparison.csv",
        mime="text/csv",
    )
