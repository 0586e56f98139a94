from __future__ import annotations

import logging
from typing import List

from .amortization import monthly_payment, remaining_balance
from .inputs import InvestmentInputs, MortgageInputs
from .results import CalculationResults, MonthStep, Projection, YearlyResult
from .summary import build_results
from .units import (
    MONTHS_IN_YEAR,
    down_payment_dollars,
    monthly_maintenance,
    yearly_other_costs,
    yearly_property_tax,
)
from .utils import monthly_rate_from_annual

logger = logging.getLogger(__name__)

'''
Buy vs rent-and-invest.

The buyer pays the down payment and one-time buying costs up front, then the
mortgage P&I and recurring costs every month. The renter starts with the down
payment invested and, each month, invests whatever the buyer spends beyond
rent. Home value stays at the purchase price for the whole horizon.
'''


class RentVsBuyModel:
    def __init__(self, mortgage: MortgageInputs, investment: InvestmentInputs):
        self.mortgage = mortgage
        self.investment = investment

        self.home_price = float(mortgage.home_price)
        self.term_years = int(mortgage.mortgage_term_years)
        self.n_months = self.term_years * MONTHS_IN_YEAR

        # Canonical dollar figures
        self.down_payment = down_payment_dollars(self.home_price, mortgage.down_payment)
        self.loan_amount = self.home_price - self.down_payment
        self.buying_costs = float(mortgage.buying_costs)
        self.yearly_property_tax = yearly_property_tax(self.home_price, mortgage.property_tax)
        self.monthly_property_tax = self.yearly_property_tax / MONTHS_IN_YEAR
        self.monthly_maintenance = monthly_maintenance(self.home_price, mortgage.maintenance)
        self.yearly_maintenance = self.monthly_maintenance * MONTHS_IN_YEAR
        self.yearly_other_costs = yearly_other_costs(self.home_price, mortgage.other_costs)
        self.monthly_other_costs = self.yearly_other_costs / MONTHS_IN_YEAR

        # Loan
        self.annual_rate = float(mortgage.interest_rate) / 100.0
        self.monthly_pi = monthly_payment(self.loan_amount, self.annual_rate, self.term_years)
        self.total_monthly_cost = (
            self.monthly_pi
            + self.monthly_property_tax
            + self.monthly_maintenance
            + self.monthly_other_costs
        )

        # Renter
        self.monthly_home_savings = 0.0
        self.monthly_return = monthly_rate_from_annual(float(investment.investment_return_rate) / 100.0)
        self.rent_growth = float(investment.rent_increase_rate) / 100.0

    # ------------------------- Core calculators ------------------------- #
    def renter_outflow(self, monthly_rent: float) -> float:
        return monthly_rent + self.monthly_home_savings

    def monthly_contribution(self, monthly_rent: float) -> float:
        """Amount the renter would invest this month, before the drop rule."""
        if self.investment.use_manual_contribution:
            return float(self.investment.manual_monthly_contribution)
        return self.total_monthly_cost - self.renter_outflow(monthly_rent)

    def contribution_applies(self, contribution: float) -> bool:
        # Negative automatic contributions are dropped, never withdrawn.
        return self.investment.use_manual_contribution or contribution > 0

    def balance_after(self, months_paid: int) -> float:
        balance = remaining_balance(self.loan_amount, self.annual_rate, self.term_years, months_paid)
        return max(0.0, balance)

    def yearly_buy_cost(self) -> float:
        return (
            self.monthly_pi * MONTHS_IN_YEAR
            + self.yearly_property_tax
            + self.yearly_maintenance
            + self.yearly_other_costs
        )

    def initial_snapshot(self) -> YearlyResult:
        return YearlyResult(
            year=0,
            home_value=self.home_price,
            remaining_balance=self.loan_amount,
            home_equity=self.down_payment,
            mortgage_cumulative_cost=self.down_payment + self.buying_costs,
            investment_value=self.down_payment,
            rent_cumulative_cost=0.0,
            mortgage_net_worth=self.down_payment,
            investment_net_worth=self.down_payment,
            difference=0.0,
        )

    # ------------------------- Projection ------------------------- #
    def run(self) -> Projection:
        """Simulate the full term month by month, one snapshot per year."""
        first = self.initial_snapshot()
        yearly: List[YearlyResult] = [first]
        steps: List[MonthStep] = []

        mortgage_cumulative_cost = first.mortgage_cumulative_cost
        rent_cumulative_cost = first.rent_cumulative_cost
        investment_value = first.investment_value
        current_rent = float(self.investment.monthly_rent)

        total_contributions = 0.0
        total_property_tax = 0.0
        total_maintenance = 0.0
        total_other_costs = 0.0

        for y in range(1, self.term_years + 1):
            for m in range(1, MONTHS_IN_YEAR + 1):
                outflow = self.renter_outflow(current_rent)
                contribution = self.monthly_contribution(current_rent)

                # Growth first, then the contribution
                previous_value = investment_value
                investment_value *= 1.0 + self.monthly_return
                growth = investment_value - previous_value

                applied = self.contribution_applies(contribution)
                if applied:
                    investment_value += contribution
                    total_contributions += contribution

                rent_cumulative_cost += outflow
                steps.append(
                    MonthStep(
                        month=(y - 1) * MONTHS_IN_YEAR + m,
                        year=y,
                        rent=current_rent,
                        contribution=contribution,
                        contribution_applied=applied,
                        growth=growth,
                        investment_value=investment_value,
                        rent_cumulative_cost=rent_cumulative_cost,
                    )
                )

            balance = self.balance_after(y * MONTHS_IN_YEAR)
            mortgage_cumulative_cost += self.yearly_buy_cost()
            total_property_tax += self.yearly_property_tax
            total_maintenance += self.yearly_maintenance
            total_other_costs += self.yearly_other_costs
            current_rent *= 1.0 + self.rent_growth

            home_value = self.home_price
            home_equity = home_value - balance
            # The renter buys the same home at the end with the portfolio
            investment_net_worth = investment_value - home_value
            yearly.append(
                YearlyResult(
                    year=y,
                    home_value=home_value,
                    remaining_balance=balance,
                    home_equity=home_equity,
                    mortgage_cumulative_cost=mortgage_cumulative_cost,
                    investment_value=investment_value,
                    rent_cumulative_cost=rent_cumulative_cost,
                    mortgage_net_worth=home_equity,
                    investment_net_worth=investment_net_worth,
                    difference=investment_net_worth - home_equity,
                )
            )

        return Projection(
            yearly_results=tuple(yearly),
            monthly_steps=tuple(steps),
            total_contributions=total_contributions,
            total_property_tax=total_property_tax,
            total_maintenance=total_maintenance,
            total_other_costs=total_other_costs,
        )


def calculate_results(mortgage: MortgageInputs, investment: InvestmentInputs) -> CalculationResults:
    """Run the full projection and derive the summary views from it."""
    model = RentVsBuyModel(mortgage, investment)
    results = build_results(model, model.run())
    logger.debug(
        "Projected %d years: loan=%.2f P&I=%.2f winner=%s",
        model.term_years,
        model.loan_amount,
        model.monthly_pi,
        results.winner,
    )
    return results
