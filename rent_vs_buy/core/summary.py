from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

import pandas as pd

from .results import (
    CalculationResults,
    CostBreakdown,
    MonthlyBreakdown,
    Projection,
    Winner,
)

if TYPE_CHECKING:
    from .model import RentVsBuyModel


def pick_winner(investment_net_worth: float, mortgage_net_worth: float) -> Winner:
    """Investing wins only when strictly ahead; ties go to the mortgage."""
    return "investment" if investment_net_worth > mortgage_net_worth else "mortgage"


def monthly_breakdown(model: "RentVsBuyModel") -> MonthlyBreakdown:
    # Straight-line principal over the term; interest is the rest of the P&I
    avg_principal = model.loan_amount / model.n_months
    return MonthlyBreakdown(
        mortgage_payment=model.monthly_pi,
        principal=avg_principal,
        interest=model.monthly_pi - avg_principal,
        property_tax=model.monthly_property_tax,
        maintenance=model.monthly_maintenance,
        other_costs=model.monthly_other_costs,
        total_monthly_cost=model.total_monthly_cost,
    )


def cost_breakdown(model: "RentVsBuyModel", projection: Projection) -> CostBreakdown:
    """Lifetime totals per category, assuming the loan is paid off at term."""
    total_payments = model.monthly_pi * model.n_months
    return CostBreakdown(
        down_payment=model.down_payment,
        buying_costs=model.buying_costs,
        total_principal=model.loan_amount,
        total_interest=total_payments - model.loan_amount,
        total_property_tax=projection.total_property_tax,
        total_maintenance=projection.total_maintenance,
        total_other_costs=projection.total_other_costs,
        initial_investment=model.down_payment,
        total_contributions=projection.total_contributions,
        total_rent_paid=projection.yearly_results[-1].rent_cumulative_cost,
    )


def build_results(model: "RentVsBuyModel", projection: Projection) -> CalculationResults:
    """Derive the summary views from a finished projection. Nothing is mutated."""
    final = projection.yearly_results[-1]
    initial_rent = float(model.investment.monthly_rent)
    return CalculationResults(
        yearly_results=projection.yearly_results,
        monthly_breakdown=monthly_breakdown(model),
        cost_breakdown=cost_breakdown(model, projection),
        down_payment=model.down_payment,
        loan_amount=model.loan_amount,
        final_mortgage_net_worth=final.mortgage_net_worth,
        final_investment_net_worth=final.investment_net_worth,
        total_mortgage_cost=final.mortgage_cumulative_cost,
        total_rent_cost=final.rent_cumulative_cost,
        winner=pick_winner(final.investment_net_worth, final.mortgage_net_worth),
        initial_monthly_contribution=model.monthly_contribution(initial_rent),
        initial_monthly_rent=initial_rent,
        monthly_home_savings=model.monthly_home_savings,
        final_home_value=model.home_price,
        monthly_steps=projection.monthly_steps,
    )


# ------------------------- Tabular views ------------------------- #
def results_frame(results: CalculationResults) -> pd.DataFrame:
    """Yearly results as a DataFrame (one row per year, 0..term)."""
    rows = []
    for r in results.yearly_results:
        row = asdict(r)
        row["portfolio_net_of_rent"] = r.portfolio_net_of_rent
        rows.append(row)
    return pd.DataFrame(rows)


def monthly_frame(results: CalculationResults) -> pd.DataFrame:
    """Month-by-month renter portfolio trace."""
    return pd.DataFrame([asdict(step) for step in results.monthly_steps])


def cost_breakdown_frame(results: CalculationResults) -> pd.DataFrame:
    cb = results.cost_breakdown
    rows = [
        ("buy", "Down payment", cb.down_payment),
        ("buy", "Buying costs", cb.buying_costs),
        ("buy", "Principal", cb.total_principal),
        ("buy", "Interest", cb.total_interest),
        ("buy", "Property tax", cb.total_property_tax),
        ("buy", "Maintenance", cb.total_maintenance),
        ("buy", "Other costs", cb.total_other_costs),
        ("invest", "Initial investment", cb.initial_investment),
        ("invest", "Contributions", cb.total_contributions),
        ("invest", "Rent paid", cb.total_rent_paid),
    ]
    return pd.DataFrame(rows, columns=["strategy", "category", "amount"])
