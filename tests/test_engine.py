"""Tests for the cross-scenario investment comparison (msc.core.engine)."""

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from msc.core.engine import performance_percentages, simulate
from msc.core.models import ScenarioInputs
from msc.core.registry import build_scenario
from msc.core.snapshots import result_fingerprint


def _amount(home_price: float, down: float, rate: float, term: int, name: str):
    return build_scenario(
        home_price,
        ScenarioInputs(name=name, down_payment_input=down, down_payment_mode="amount", interest_rate=rate, term=term),
    )


@pytest.fixture
def zero_rate_pair():
    # A costs 12,000/yr, B costs 6,000/yr, both for 10 years.
    a = _amount(120_000.0, 0.0, 0.0, 10, "A")
    b = _amount(120_000.0, 60_000.0, 0.0, 10, "B")
    return a, b


class TestEmptyAndHorizon:
    def test_empty(self) -> None:
        res = simulate([], 500_000.0, 100_000.0)
        assert res.scenarios == ()
        assert res.horizon == 30

    def test_horizon_at_least_thirty(self, zero_rate_pair) -> None:
        res = simulate(list(zero_rate_pair), 120_000.0, 0.0)
        assert res.horizon == 30
        assert all(len(s.records) == 30 for s in res.scenarios)

    def test_horizon_follows_longest_term(self) -> None:
        s = _amount(300_000.0, 60_000.0, 5.0, 40, "Long")
        res = simulate([s], 300_000.0, 0.0)
        assert res.horizon == 40
        assert [r.year for r in res.scenarios[0].records] == list(range(1, 41))

    def test_explicit_horizon(self, zero_rate_pair) -> None:
        res = simulate(list(zero_rate_pair), 120_000.0, 0.0, horizon=12)
        assert res.horizon == 12
        assert len(res.scenarios[0].records) == 12


class TestYearOne:
    def test_hand_computed(self, zero_rate_pair) -> None:
        res = simulate(list(zero_rate_pair), 120_000.0, 100_000.0, investment_rate=0.10)
        a = res.scenarios[0].records[0]
        b = res.scenarios[1].records[0]

        assert a.investment_contribution == 0.0
        assert b.investment_contribution == pytest.approx(6_000.0)
        assert a.investment_profit == pytest.approx(10_000.0)
        assert b.investment_profit == pytest.approx(4_000.0)
        assert a.cumulative_investment_value == pytest.approx(110_000.0)
        assert b.cumulative_investment_value == pytest.approx(50_000.0)
        assert a.total_net_worth == pytest.approx(122_000.0)
        assert b.total_net_worth == pytest.approx(116_000.0)
        assert a.net_worth_change == pytest.approx(22_000.0)
        assert b.net_worth_change == pytest.approx(16_000.0)
        assert a.performance_pct == 0.0
        assert b.performance_pct == pytest.approx(-6_000.0 / 122_000.0 * 100.0)

    def test_initial_balance_floored_at_zero(self) -> None:
        s = _amount(200_000.0, 150_000.0, 0.0, 10, "Big down")
        res = simulate([s], 200_000.0, 50_000.0, investment_rate=0.05)
        rec = res.scenarios[0].records[0]
        assert rec.investment_profit == 0.0
        assert rec.cumulative_investment_value == 0.0
        # Year-one baseline is down payment + (floored) initial balance.
        assert rec.net_worth_change == pytest.approx(rec.total_net_worth - 150_000.0)

    def test_single_scenario_invests_nothing(self) -> None:
        s = _amount(500_000.0, 100_000.0, 4.19, 30, "Solo")
        res = simulate([s], 500_000.0, 100_000.0)
        assert all(r.investment_contribution == 0.0 for r in res.scenarios[0].records)
        assert all(r.performance_pct == 0.0 for r in res.scenarios[0].records)


class TestMultiYear:
    def test_growth_recurrence(self, zero_rate_pair) -> None:
        rate = 0.07
        res = simulate(list(zero_rate_pair), 120_000.0, 100_000.0, investment_rate=rate)
        for s in res.scenarios:
            prev = max(0.0, 100_000.0 - s.down_payment)
            prev_nw = s.down_payment + prev
            for rec in s.records:
                assert rec.investment_profit == pytest.approx(prev * rate)
                assert rec.cumulative_investment_value == pytest.approx(prev * (1 + rate) + rec.investment_contribution)
                assert rec.net_worth_change == pytest.approx(rec.total_net_worth - prev_nw)
                assert rec.total_net_worth == pytest.approx(
                    s.down_payment + rec.total_principal_paid + rec.cumulative_investment_value
                )
                prev = rec.cumulative_investment_value
                prev_nw = rec.total_net_worth

    def test_ended_scenario_leaves_max_cost(self) -> None:
        short = _amount(120_000.0, 0.0, 0.0, 5, "Short")   # 24,000/yr for 5 years
        long_ = _amount(120_000.0, 0.0, 0.0, 10, "Long")   # 12,000/yr for 10 years
        res = simulate([short, long_], 120_000.0, 0.0, investment_rate=0.0)
        long_recs = res.scenarios[1].records
        assert long_recs[0].investment_contribution == pytest.approx(12_000.0)
        assert long_recs[4].investment_contribution == pytest.approx(12_000.0)
        # From year 6 Long is the only active scenario, so it is the max itself.
        assert long_recs[5].investment_contribution == 0.0

    def test_placeholders_after_payoff(self) -> None:
        s15 = _amount(500_000.0, 100_000.0, 3.5, 15, "15y")
        s30 = _amount(500_000.0, 100_000.0, 4.19, 30, "30y")
        res = simulate([s15, s30], 500_000.0, 150_000.0)
        recs = res.scenarios[0].records
        assert len(recs) == 30
        assert not any(r.is_placeholder for r in recs[:15])
        tail = recs[15:]
        assert all(r.is_placeholder for r in tail)
        assert all(r.beginning_balance == 0.0 and r.ending_balance == 0.0 for r in tail)
        assert all(r.annual_cost == 0.0 and r.investment_contribution == 0.0 for r in tail)
        assert all(r.total_principal_paid == recs[14].total_principal_paid for r in tail)
        assert all(r.total_interest_paid == recs[14].total_interest_paid for r in tail)
        values = [r.cumulative_investment_value for r in recs[14:]]
        assert values[0] > 0
        assert all(b > a for a, b in zip(values, values[1:]))

    def test_paid_in_full_with_long_term(self) -> None:
        rate = 0.07
        cash = _amount(500_000.0, 500_000.0, 0.0, 30, "Cash")
        loan = _amount(500_000.0, 100_000.0, 4.19, 30, "Loan")
        res = simulate([cash, loan], 500_000.0, 600_000.0, investment_rate=rate)
        recs = res.scenarios[0].records
        assert len(recs) == 30

        first = recs[0]
        assert not first.is_placeholder
        assert res.scenarios[0].is_active(1)
        assert first.investment_contribution == pytest.approx(res.scenarios[1].records[0].annual_cost)
        assert first.investment_contribution > 0

        # The term still covers years 2-30, but the schedule ended in year 1.
        for prev, rec in zip(recs, recs[1:]):
            assert rec.is_placeholder
            assert not res.scenarios[0].is_active(rec.year)
            assert rec.investment_contribution == 0.0
            assert rec.total_principal_paid == first.total_principal_paid
            assert rec.total_interest_paid == first.total_interest_paid
            assert rec.cumulative_investment_value == prev.cumulative_investment_value * (1.0 + rate)

    def test_is_active(self) -> None:
        s15 = _amount(500_000.0, 100_000.0, 3.5, 15, "15y")
        res = simulate([s15], 500_000.0, 0.0)
        out = res.scenarios[0]
        assert out.is_active(15)
        assert not out.is_active(16)

    def test_inputs_not_mutated(self, zero_rate_pair) -> None:
        a, b = zero_rate_pair
        simulate([a, b], 120_000.0, 100_000.0)
        assert len(a.records) == 10
        assert a.records[0].total_net_worth is None

    def test_duplicate_names_tracked_by_position(self) -> None:
        x = _amount(120_000.0, 0.0, 0.0, 10, "Same")
        y = _amount(120_000.0, 60_000.0, 0.0, 10, "Same")
        res = simulate([x, y], 120_000.0, 100_000.0, investment_rate=0.1)
        assert res.scenarios[0].records[0].cumulative_investment_value == pytest.approx(110_000.0)
        assert res.scenarios[1].records[0].cumulative_investment_value == pytest.approx(50_000.0)


class TestPerformance:
    def test_leader_zero_others_negative(self) -> None:
        assert performance_percentages([100.0, 50.0, 100.0]) == [0.0, -50.0, 0.0]

    def test_negative_max(self) -> None:
        assert performance_percentages([-100.0, -200.0]) == [0.0, -100.0]

    def test_zero_max(self) -> None:
        assert performance_percentages([0.0, 0.0]) == [0.0, 0.0]
        assert performance_percentages([0.0, -5.0]) == [0.0, -100.0]

    def test_non_finite(self) -> None:
        assert performance_percentages([]) == []
        assert performance_percentages([math.nan, 1.0]) == [0.0, 0.0]
        assert performance_percentages([math.inf, 1.0]) == [0.0, 0.0]
        assert performance_percentages([1.0, -math.inf]) == [0.0, -100.0]

    def test_never_positive_in_simulation(self) -> None:
        scenarios = [
            _amount(600_000.0, 60_000.0, 6.1, 30, "Low down"),
            _amount(600_000.0, 120_000.0, 5.4, 15, "Mid"),
            _amount(600_000.0, 600_000.0, 0.0, 1, "Cash"),
        ]
        res = simulate(scenarios, 600_000.0, 700_000.0)
        for year in range(1, res.horizon + 1):
            perf = [s.records[year - 1].performance_pct for s in res.scenarios]
            assert max(perf) == 0.0
            assert all(p <= 0.0 for p in perf)


class TestIdempotence:
    def test_bit_identical(self, zero_rate_pair) -> None:
        first = simulate(list(zero_rate_pair), 120_000.0, 100_000.0)
        second = simulate(list(zero_rate_pair), 120_000.0, 100_000.0)
        assert first == second
        assert result_fingerprint(first) == result_fingerprint(second)

    def test_resimulating_output_is_stable(self) -> None:
        s15 = _amount(500_000.0, 100_000.0, 3.5, 15, "15y")
        s30 = _amount(500_000.0, 100_000.0, 4.19, 30, "30y")
        first = simulate([s15, s30], 500_000.0, 150_000.0)
        again = simulate(first.scenarios, 500_000.0, 150_000.0)
        assert again == first

    def test_fingerprint_changes_with_inputs(self, zero_rate_pair) -> None:
        base = simulate(list(zero_rate_pair), 120_000.0, 100_000.0)
        bumped = simulate(list(zero_rate_pair), 120_000.0, 100_001.0)
        assert result_fingerprint(base) != result_fingerprint(bumped)

    def test_removal_changes_other_trajectories(self, zero_rate_pair) -> None:
        a, b = zero_rate_pair
        both = simulate([a, b], 120_000.0, 0.0)
        alone = simulate([b], 120_000.0, 0.0)
        assert both.scenarios[1].records[0].investment_contribution > 0
        assert alone.scenarios[0].records[0].investment_contribution == 0.0
        assert replace(both.scenarios[1], records=()) == replace(alone.scenarios[0], records=())
