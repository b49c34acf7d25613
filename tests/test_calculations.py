"""
Tests for financial calculation engine.
"""

import math

import pytest

from fincalc.calculations.debt import (
    Debt,
    MAX_PAYOFF_MONTHS,
    PAYOFF_EPSILON,
    simulate_payoff,
)
from fincalc.calculations.growth import (
    cagr,
    contribution_future_value,
    future_value_annuity_due,
    future_value_lump_sum,
    future_value_ordinary_annuity,
    present_value_ordinary_annuity,
    required_payment,
    simulate_step_up,
)
from fincalc.calculations.irr import (
    IRR_LOWER_BOUND,
    IRR_UPPER_BOUND,
    calculate_irr,
    calculate_multiple,
    calculate_npv,
    solve_irr,
)
from fincalc.calculations.projections import (
    classify_probability,
    compare_start_now_vs_wait,
    cost_of_waiting,
    project_contributions,
    sample_series,
)
from fincalc.calculations.rates import periodic_rate, real_return_percent


class TestRates:
    """Test annual percent conversions."""

    def test_monthly_rate(self):
        assert periodic_rate(12) == pytest.approx(0.01)

    def test_quarterly_rate(self):
        assert periodic_rate(8, 4) == pytest.approx(0.02)

    def test_real_return(self):
        assert real_return_percent(7, 3) == pytest.approx((1.07 / 1.03 - 1) * 100)


class TestGrowth:
    """Test compound and annuity growth functions."""

    def test_lump_sum(self):
        assert future_value_lump_sum(1000, 0.10, 2) == pytest.approx(1210)

    def test_lump_sum_fractional_periods(self):
        # Half a period at 21% is exactly 10%
        assert future_value_lump_sum(1000, 0.21, 0.5) == pytest.approx(1100)

    @pytest.mark.parametrize("periods", [0, 1, 12, 7.5, 600])
    def test_zero_rate_is_linear(self, periods):
        assert future_value_lump_sum(2500, 0, periods) == 2500
        assert future_value_annuity_due(100, 0, periods) == 100 * periods

    def test_annuity_due_matches_start_of_period_loop(self):
        balance = 0.0
        for _ in range(120):
            balance = (balance + 1000) * 1.01
        assert future_value_annuity_due(1000, 0.01, 120) == pytest.approx(balance)

    def test_monotonic_in_rate(self):
        rates = [0.001, 0.005, 0.01, 0.02]
        lump = [future_value_lump_sum(1000, r, 24) for r in rates]
        annuity = [future_value_annuity_due(100, r, 24) for r in rates]
        assert lump == sorted(lump) and len(set(lump)) == len(lump)
        assert annuity == sorted(annuity) and len(set(annuity)) == len(annuity)

    @pytest.mark.parametrize("rate", [0, 0.001, 0.005, 0.01, 0.02])
    @pytest.mark.parametrize("periods", [1, 12, 120, 600])
    def test_required_payment_reaches_target(self, rate, periods):
        target = 1_000_000
        payment = required_payment(target, rate, periods)
        assert future_value_annuity_due(payment, rate, periods) == pytest.approx(
            target, rel=1e-6
        )

    @pytest.mark.parametrize("periods", [0, -3])
    def test_required_payment_unreachable(self, periods):
        assert required_payment(50000, 0.01, periods) == math.inf

    def test_step_up_without_increase_equals_closed_form(self):
        fv, invested = simulate_step_up(1000, 0.01, 120, 0)
        assert fv == pytest.approx(future_value_annuity_due(1000, 0.01, 120))
        assert invested == 120000

    def test_step_up_increases_yearly(self):
        # 12 months at 1000 then 12 months at 1100
        fv, invested = simulate_step_up(1000, 0, 24, 0.10)
        assert invested == pytest.approx(25200)
        assert fv == pytest.approx(25200)

    def test_contribution_future_value_picks_strategy(self):
        level = contribution_future_value(1000, 0.01, 60)
        stepped = contribution_future_value(1000, 0.01, 60, step_up_rate=0.1)
        assert level[0] == pytest.approx(future_value_annuity_due(1000, 0.01, 60))
        assert stepped[0] > level[0]
        assert stepped[1] > level[1]

    def test_ordinary_annuity_is_one_period_less_growth(self):
        due = future_value_annuity_due(100, 0.05, 10)
        ordinary = future_value_ordinary_annuity(100, 0.05, 10)
        assert due == pytest.approx(ordinary * 1.05)

    def test_present_value_zero_rate(self):
        assert present_value_ordinary_annuity(1000, 0, 12) == 12000

    def test_present_value_services_payment(self):
        # A 100,000 loan at 0.5% monthly over 360 months costs ~599.55
        assert present_value_ordinary_annuity(599.55, 0.005, 360) == pytest.approx(
            100000, rel=1e-4
        )

    def test_cagr(self):
        assert cagr(100, 121, 2) == pytest.approx(0.10)
        assert cagr(0, 121, 2) == 0
        assert cagr(100, 121, 0) == 0


class TestIRRCalculations:
    """Test IRR calculation functions."""

    def test_calculate_irr_simple(self):
        """Investment of 100 returning 110 after one period is 10%."""
        assert calculate_irr([-100, 110]) == pytest.approx(0.10, abs=1e-4)

    def test_calculate_irr_multi_period(self):
        expected = (161.05 / 100) ** 0.25 - 1
        assert calculate_irr([-100, 0, 0, 0, 161.05]) == pytest.approx(expected, abs=1e-4)

    def test_irr_negative_returns(self):
        result = solve_irr([-100, 40, 40, 10])
        assert result.rate < 0
        assert result.bracketed

    def test_irr_degenerate_inputs(self):
        assert calculate_irr([-100]) == 0
        assert calculate_irr([]) == 0

    def test_irr_reports_convergence(self):
        result = solve_irr([-100000, 30000, 40000, 50000, 60000])
        assert result.converged
        assert result.bracketed
        assert abs(calculate_npv([-100000, 30000, 40000, 50000, 60000], result.rate)) < 1e-4

    def test_irr_outside_bracket_clamps_to_edge(self):
        # True IRR is 900% per period
        result = solve_irr([-100, 1000])
        assert not result.bracketed
        assert not result.converged
        assert result.rate == pytest.approx(IRR_UPPER_BOUND, abs=1e-6)

    def test_irr_below_bracket_clamps_to_lower_edge(self):
        result = solve_irr([-100, 0.5])
        assert not result.bracketed
        assert result.rate == pytest.approx(IRR_LOWER_BOUND, abs=1e-6)

    def test_irr_long_monthly_series_is_bracketed(self):
        """Twenty years of monthly deposits overflow NPV at the lower edge."""
        flows = [-100.0] * 240 + [40000.0]
        result = solve_irr(flows)
        assert result.converged
        assert result.bracketed
        assert 0 < result.rate < 0.01
        assert abs(calculate_npv(flows, result.rate)) < 1e-4

    def test_calculate_npv(self):
        assert calculate_npv([-100, 110], 0.10) == pytest.approx(0)
        assert calculate_npv([-100, 50, 50, 50], 0.10) > 0

    def test_calculate_multiple(self):
        assert calculate_multiple([-100, 50, 100]) == pytest.approx(1.5)
        assert calculate_multiple([50, 100]) == 0


class TestDebtPayoff:
    """Test the avalanche / snowball simulator."""

    def sample_debts(self):
        return [
            Debt("Credit Card", 5000, 18, 150),
            Debt("Car Loan", 15000, 7, 400),
        ]

    def test_terminates_with_interest(self):
        result = simulate_payoff(self.sample_debts(), extra_payment=200)
        assert 0 < result.months < MAX_PAYOFF_MONTHS
        assert not result.capped
        assert result.total_interest > 0
        for outcome in result.outcomes:
            assert outcome.remaining_balance <= PAYOFF_EPSILON
            assert outcome.payoff_month is not None

    def test_inputs_not_mutated(self):
        debts = self.sample_debts()
        simulate_payoff(debts, extra_payment=200)
        assert debts[0].balance == 5000
        assert debts[1].balance == 15000

    def test_avalanche_costs_no_more_than_snowball(self):
        avalanche = simulate_payoff(self.sample_debts(), 200, "avalanche")
        snowball = simulate_payoff(self.sample_debts(), 200, "snowball")
        assert avalanche.total_interest <= snowball.total_interest

    def test_first_month_priority(self):
        debts = [
            Debt("High rate", 5000, 18, 100),
            Debt("Small balance", 1000, 5, 50),
        ]
        avalanche = simulate_payoff(debts, 300, "avalanche", max_months=1)
        snowball = simulate_payoff(debts, 300, "snowball", max_months=1)

        av_high, av_small = [o.remaining_balance for o in avalanche.outcomes]
        sb_high, sb_small = [o.remaining_balance for o in snowball.outcomes]

        # Avalanche sends the surplus to the 18% debt
        assert 5000 - av_high > 1000 - av_small
        assert av_high == pytest.approx(5000 + 75 - 100 - 300)
        # Snowball sends it to the 1,000 balance
        assert 1000 - sb_small > 5000 - sb_high
        assert sb_small == pytest.approx(1000 + 1000 * 0.05 / 12 - 50 - 300)

    def test_ties_follow_input_order(self):
        debts = [Debt("First", 1000, 10, 10), Debt("Second", 1000, 10, 10)]
        result = simulate_payoff(debts, 100, "avalanche", max_months=1)
        first, second = [o.remaining_balance for o in result.outcomes]
        assert first < second

        result = simulate_payoff(list(reversed(debts)), 100, "snowball", max_months=1)
        second, first = [o.remaining_balance for o in result.outcomes]
        assert second < first

    def test_empty_debt_list(self):
        result = simulate_payoff([], extra_payment=500)
        assert result.months == 0
        assert result.total_interest == 0
        assert not result.capped

    def test_minimum_exceeding_balance_closes_in_one_month(self):
        result = simulate_payoff([Debt("Tiny", 100, 12, 500)])
        assert result.months == 1
        assert result.outcomes[0].payoff_month == 1

    def test_divergent_budget_hits_cap(self):
        # 2% monthly interest on 10,000 dwarfs a 10 minimum
        result = simulate_payoff([Debt("Runaway", 10000, 24, 10)])
        assert result.months == MAX_PAYOFF_MONTHS
        assert result.capped
        assert result.outcomes[0].payoff_month is None

    def test_schedule_and_series(self):
        result = simulate_payoff(self.sample_debts(), extra_payment=200)
        assert len(result.schedule) == result.months
        assert len(result.balance_series) == result.months + 1
        assert result.balance_series[0] == 20000
        assert result.schedule[-1]["remaining_balance"] == 0
        assert result.years == pytest.approx(result.months / 12)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            simulate_payoff(self.sample_debts(), strategy="lottery")


class TestStartNowVsWait:
    """Test the start-now vs wait projections."""

    def test_series_shape(self):
        series = project_contributions(1000, 0.01, 24)
        assert len(series) == 25
        assert series[0] == 0

    def test_start_now_matches_annuity_due(self):
        series = project_contributions(1000, 0.01, 120)
        assert series[-1] == pytest.approx(future_value_annuity_due(1000, 0.01, 120))

    @pytest.mark.parametrize("delay", [1, 6, 12, 60])
    def test_start_now_dominates(self, delay):
        start_now = project_contributions(500, 0.008, 120)
        wait = project_contributions(500, 0.008, 120, delay)
        assert start_now[-1] > wait[-1]
        assert cost_of_waiting(start_now, wait) > 0

    def test_no_delay_is_equal(self):
        start_now = project_contributions(500, 0.008, 120)
        wait = project_contributions(500, 0.008, 120, 0)
        assert start_now[-1] == wait[-1]
        assert cost_of_waiting(start_now, wait) == 0

    def test_zero_rate_wait_series(self):
        wait = project_contributions(100, 0, 24, 12)
        assert wait[12] == 0
        assert wait[-1] == 1200

    def test_delay_past_horizon(self):
        wait = project_contributions(100, 0.01, 12, 24)
        assert all(value == 0 for value in wait)

    def test_classify_probability(self):
        assert classify_probability(100, 120, 110) == "high"
        assert classify_probability(120, 100, 110) == "medium"
        assert classify_probability(100, 90, 110) == "low"

    def test_compare_with_target(self):
        result = compare_start_now_vs_wait(
            contribution=10000,
            annual_return_percent=12,
            months_total=120,
            delay_months=12,
            target=1_900_000,
        )
        assert result.start_now_final > result.wait_final
        assert result.cost_of_waiting == pytest.approx(
            result.start_now_final - result.wait_final
        )
        assert result.probability == {"start_now": "high", "wait": "medium"}

    def test_compare_unreachable_target(self):
        result = compare_start_now_vs_wait(10000, 12, 120, 12, target=3_000_000)
        assert result.probability == {"start_now": "low", "wait": "low"}

    def test_compare_without_target(self):
        result = compare_start_now_vs_wait(10000, 12, 120)
        assert result.probability is None
        assert result.start_now_low_final is None


class TestSampleSeries:
    """Test chart down-sampling."""

    def test_keeps_last_point(self):
        series = list(range(10))
        sampled = sample_series(series, max_points=4)
        assert [i for i, _ in sampled] == [0, 2, 4, 6, 8, 9]
        assert sampled[-1] == (9, 9.0)

    def test_short_series_untouched(self):
        series = [0.0, 1.0, 2.0]
        assert sample_series(series) == [(0, 0.0), (1, 1.0), (2, 2.0)]

    def test_long_series(self):
        sampled = sample_series([float(i) for i in range(481)])
        assert len(sampled) == 161
        assert sampled[-1] == (480, 480.0)

    def test_empty(self):
        assert sample_series([]) == []
