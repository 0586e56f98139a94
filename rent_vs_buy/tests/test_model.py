import dataclasses
import math

import pytest

from rent_vs_buy.core.errors import InvalidInputError
from rent_vs_buy.core.inputs import InvestmentInputs, MortgageInputs
from rent_vs_buy.core.model import RentVsBuyModel, calculate_results
from rent_vs_buy.core.units import Amount, Unit


def reference_inputs():
    mortgage = MortgageInputs(
        home_price=400_000,
        down_payment=Amount(50, Unit.PERCENT),
        mortgage_term_years=10,
        interest_rate=4,
        property_tax=Amount(2_800, Unit.DOLLAR_YEARLY),
        maintenance=Amount(500, Unit.DOLLAR_MONTHLY),
        other_costs=Amount(0.7, Unit.PERCENT),
        buying_costs=2_000,
    )
    investment = InvestmentInputs(
        monthly_rent=2_300,
        rent_increase_rate=2.1,
        investment_return_rate=11,
    )
    return mortgage, investment


def test_reference_scenario():
    res = calculate_results(*reference_inputs())
    assert res.down_payment == 200_000
    assert res.loan_amount == 200_000
    assert res.monthly_breakdown.mortgage_payment == pytest.approx(2024.90, abs=0.01)
    assert len(res.yearly_results) == 11
    assert res.yearly_results[10].remaining_balance == pytest.approx(0.0, abs=1e-6 * res.loan_amount)


def test_reference_scenario_monthly_costs():
    res = calculate_results(*reference_inputs())
    mb = res.monthly_breakdown
    assert mb.property_tax == pytest.approx(2_800 / 12)
    assert mb.maintenance == 500
    assert mb.other_costs == pytest.approx(2_800 / 12)
    assert mb.principal == pytest.approx(200_000 / 120)
    assert mb.principal + mb.interest == pytest.approx(mb.mortgage_payment)
    assert mb.total_monthly_cost == pytest.approx(2991.57, abs=0.01)
    assert res.initial_monthly_contribution == pytest.approx(691.57, abs=0.01)


def test_year_zero_snapshot():
    res = calculate_results(*reference_inputs())
    first = res.yearly_results[0]
    assert first.year == 0
    assert first.home_equity == res.down_payment
    assert first.remaining_balance == res.loan_amount
    assert first.mortgage_cumulative_cost == 202_000
    assert first.investment_value == res.down_payment
    assert first.rent_cumulative_cost == 0
    assert first.difference == 0


@pytest.mark.parametrize("term", [1, 7, 15, 30])
@pytest.mark.parametrize("rate", [0.0, 3.25, 9.0])
def test_yearly_invariants(term, rate):
    mortgage, investment = reference_inputs()
    mortgage = dataclasses.replace(mortgage, mortgage_term_years=term, interest_rate=rate)
    res = calculate_results(mortgage, investment)

    assert len(res.yearly_results) == term + 1
    assert [r.year for r in res.yearly_results] == list(range(term + 1))

    balances = [r.remaining_balance for r in res.yearly_results]
    assert all(b2 <= b1 for b1, b2 in zip(balances, balances[1:]))
    assert all(b >= 0 for b in balances)
    assert balances[-1] <= 1e-6 * res.loan_amount

    for r in res.yearly_results:
        assert r.home_value == mortgage.home_price
        assert math.isclose(r.home_equity, r.home_value - r.remaining_balance)
        assert r.mortgage_net_worth == r.home_equity


def test_zero_rate_balance_is_linear_by_year():
    mortgage, investment = reference_inputs()
    mortgage = dataclasses.replace(mortgage, interest_rate=0)
    res = calculate_results(mortgage, investment)
    for r in res.yearly_results:
        assert r.remaining_balance == pytest.approx(200_000 * (1 - r.year / 10), abs=1e-6)


def test_growth_applied_before_contribution():
    mortgage, investment = reference_inputs()
    investment = dataclasses.replace(investment, use_manual_contribution=True, manual_monthly_contribution=1_000)
    model = RentVsBuyModel(mortgage, investment)
    first = model.run().monthly_steps[0]
    r = (1.11) ** (1 / 12) - 1
    assert first.investment_value == pytest.approx(200_000 * (1 + r) + 1_000)
    assert first.investment_value != pytest.approx((200_000 + 1_000) * (1 + r))


def test_manual_contribution_always_added():
    mortgage, investment = reference_inputs()
    # Rent far above the cost of buying: automatic mode would contribute nothing
    investment = dataclasses.replace(
        investment, monthly_rent=10_000, use_manual_contribution=True, manual_monthly_contribution=750
    )
    res = calculate_results(mortgage, investment)
    previous = res.down_payment
    for step in res.monthly_steps:
        assert step.contribution == 750
        assert step.contribution_applied
        assert step.investment_value == pytest.approx(previous + step.growth + 750)
        previous = step.investment_value
    assert res.cost_breakdown.total_contributions == pytest.approx(750 * 120)
    assert res.initial_monthly_contribution == 750


def test_automatic_mode_drops_negative_contributions():
    mortgage, investment = reference_inputs()
    investment = dataclasses.replace(investment, monthly_rent=10_000)
    res = calculate_results(mortgage, investment)
    r = (1.11) ** (1 / 12) - 1
    for step in res.monthly_steps:
        assert step.contribution < 0
        assert not step.contribution_applied
    assert res.cost_breakdown.total_contributions == 0
    assert res.final_year.investment_value == pytest.approx(200_000 * (1 + r) ** 120)
    assert res.initial_monthly_contribution < 0


def test_automatic_contributions_follow_rent_growth():
    res = calculate_results(*reference_inputs())
    steps = res.monthly_steps
    assert len(steps) == 120
    assert all(s.rent == 2_300 for s in steps[:12])
    assert steps[12].rent == pytest.approx(2_300 * 1.021)
    assert steps[0].contribution == pytest.approx(691.57, abs=0.01)
    assert steps[12].contribution == pytest.approx(steps[0].contribution - 2_300 * 0.021)
    applied = sum(s.contribution for s in steps if s.contribution_applied)
    assert res.cost_breakdown.total_contributions == pytest.approx(applied)


def test_rent_cumulative_cost_grows_once_a_year():
    res = calculate_results(*reference_inputs())
    assert res.yearly_results[1].rent_cumulative_cost == pytest.approx(27_600)
    assert res.yearly_results[2].rent_cumulative_cost == pytest.approx(27_600 + 2_300 * 1.021 * 12)


def test_mortgage_cumulative_cost():
    res = calculate_results(*reference_inputs())
    yearly = res.monthly_breakdown.total_monthly_cost * 12
    assert res.yearly_results[1].mortgage_cumulative_cost == pytest.approx(202_000 + yearly)
    assert res.total_mortgage_cost == pytest.approx(202_000 + 10 * yearly)


def test_investment_net_worth_buys_the_home_at_the_end():
    res = calculate_results(*reference_inputs())
    for r in res.yearly_results[1:]:
        assert r.investment_net_worth == pytest.approx(r.investment_value - 400_000)
        assert r.difference == pytest.approx(r.investment_net_worth - r.mortgage_net_worth)
    final = res.final_year
    assert res.final_investment_net_worth == final.investment_net_worth
    assert res.final_mortgage_net_worth == final.home_equity
    expected = "investment" if final.investment_net_worth > final.mortgage_net_worth else "mortgage"
    assert res.winner == expected


def test_results_are_deterministic_and_frozen():
    a = calculate_results(*reference_inputs())
    b = calculate_results(*reference_inputs())
    assert a == b
    with pytest.raises(dataclasses.FrozenInstanceError):
        a.yearly_results[0].home_equity = 0.0  # type: ignore[misc]


def test_zero_term_fails_fast():
    mortgage, investment = reference_inputs()
    with pytest.raises(InvalidInputError):
        calculate_results(dataclasses.replace(mortgage, mortgage_term_years=0), investment)


def test_full_cash_purchase_has_no_loan():
    mortgage, investment = reference_inputs()
    mortgage = dataclasses.replace(mortgage, down_payment=Amount(400_000, Unit.DOLLAR))
    res = calculate_results(mortgage, investment)
    assert res.loan_amount == 0
    assert res.monthly_breakdown.mortgage_payment == 0
    assert all(r.remaining_balance == 0 for r in res.yearly_results)
    assert all(r.home_equity == 400_000 for r in res.yearly_results)


def test_portfolio_compounds_by_multiplication():
    mortgage, investment = reference_inputs()
    mortgage = dataclasses.replace(mortgage, mortgage_term_years=30)
    investment = dataclasses.replace(investment, use_manual_contribution=True, manual_monthly_contribution=0)
    model = RentVsBuyModel(mortgage, investment)
    expected = model.down_payment
    for _ in range(360):
        expected *= 1.0 + model.monthly_return
    steps = model.run().monthly_steps
    assert steps[-1].investment_value == expected
    assert steps[0].growth == pytest.approx(model.down_payment * model.monthly_return)
