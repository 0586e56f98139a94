from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple


Winner = Literal["mortgage", "investment"]


@dataclass(frozen=True)
class YearlyResult:
    year: int
    # Mortgage strategy
    home_value: float
    remaining_balance: float
    home_equity: float
    mortgage_cumulative_cost: float
    # Investment strategy
    investment_value: float
    rent_cumulative_cost: float
    # Comparison
    mortgage_net_worth: float
    investment_net_worth: float
    difference: float

    @property
    def portfolio_net_of_rent(self) -> float:
        """Renter metric that charges all rent paid against the portfolio."""
        return self.investment_value - self.rent_cumulative_cost


@dataclass(frozen=True)
class MonthStep:
    """State of the renter's portfolio at the end of one simulated month."""

    month: int  # 1..term*12
    year: int
    rent: float
    contribution: float  # computed amount, before the drop rule
    contribution_applied: bool
    growth: float
    investment_value: float
    rent_cumulative_cost: float


@dataclass(frozen=True)
class Projection:
    """Raw engine output: snapshots plus the running totals kept alongside them."""

    yearly_results: Tuple[YearlyResult, ...]
    monthly_steps: Tuple[MonthStep, ...]
    total_contributions: float
    total_property_tax: float
    total_maintenance: float
    total_other_costs: float


@dataclass(frozen=True)
class MonthlyBreakdown:
    mortgage_payment: float
    principal: float
    interest: float
    property_tax: float
    maintenance: float
    other_costs: float
    total_monthly_cost: float


@dataclass(frozen=True)
class CostBreakdown:
    # Buy strategy
    down_payment: float
    buying_costs: float
    total_principal: float
    total_interest: float
    total_property_tax: float
    total_maintenance: float
    total_other_costs: float
    # Invest strategy
    initial_investment: float
    total_contributions: float
    total_rent_paid: float

    @property
    def total_buy_cost(self) -> float:
        return (
            self.down_payment
            + self.buying_costs
            + self.total_principal
            + self.total_interest
            + self.total_property_tax
            + self.total_maintenance
            + self.total_other_costs
        )

    @property
    def total_invest_cost(self) -> float:
        return self.initial_investment + self.total_contributions + self.total_rent_paid


@dataclass(frozen=True)
class CalculationResults:
    yearly_results: Tuple[YearlyResult, ...]
    monthly_breakdown: MonthlyBreakdown
    cost_breakdown: CostBreakdown
    down_payment: float
    loan_amount: float
    final_mortgage_net_worth: float
    final_investment_net_worth: float
    total_mortgage_cost: float
    total_rent_cost: float
    winner: Winner
    initial_monthly_contribution: float
    initial_monthly_rent: float
    monthly_home_savings: float
    final_home_value: float
    monthly_steps: Tuple[MonthStep, ...] = ()

    @property
    def final_year(self) -> YearlyResult:
        return self.yearly_results[-1]

    @property
    def net_worth_gap(self) -> float:
        """Absolute gap between the two final net worths."""
        return abs(self.final_investment_net_worth - self.final_mortgage_net_worth)
