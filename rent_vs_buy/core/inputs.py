from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import List

from .units import Amount, Unit, Quantity, ALLOWED_UNITS


MIN_TERM_YEARS = 1
MAX_TERM_YEARS = 30

# Percent bounds shared with the sidebar widgets
MAX_RATE = 100.0
MIN_RETURN_RATE = -99.0


@dataclass(frozen=True)
class MortgageInputs:
    # Purchase
    home_price: float = 400_000.0
    down_payment: Amount = field(default_factory=lambda: Amount(50.0, Unit.PERCENT))
    buying_costs: float = 2_000.0  # one-time, paid at year 0

    # Loan
    mortgage_term_years: int = 10
    interest_rate: float = 4.0  # percent, nominal annual

    # Recurring costs
    property_tax: Amount = field(default_factory=lambda: Amount(2_800.0, Unit.DOLLAR_YEARLY))
    maintenance: Amount = field(default_factory=lambda: Amount(500.0, Unit.DOLLAR_MONTHLY))
    other_costs: Amount = field(default_factory=lambda: Amount(0.7, Unit.PERCENT))


@dataclass(frozen=True)
class InvestmentInputs:
    monthly_rent: float = 2_300.0
    rent_increase_rate: float = 2.1  # percent per year
    investment_return_rate: float = 11.0  # percent per year, compounded monthly
    use_manual_contribution: bool = False
    manual_monthly_contribution: float = 500.0


_AMOUNT_FIELDS = {
    "down_payment": Quantity.DOWN_PAYMENT,
    "property_tax": Quantity.PROPERTY_TAX,
    "maintenance": Quantity.MAINTENANCE,
    "other_costs": Quantity.OTHER_COSTS,
}


def _numbers(inputs: object) -> List[tuple]:
    out = []
    for f in fields(inputs):
        value = getattr(inputs, f.name)
        if isinstance(value, Amount):
            out.append((f.name, value.value))
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            out.append((f.name, value))
    return out


def validate_inputs(mortgage: MortgageInputs, investment: InvestmentInputs) -> List[str]:
    """Return a list of problems with the inputs; empty when they are usable.

    The projection engine does not call this; the input layer does before
    handing inputs over.
    """
    problems: List[str] = []

    for name, value in _numbers(mortgage) + _numbers(investment):
        if not math.isfinite(value):
            problems.append(f"{name} must be a finite number")
    if problems:
        return problems

    if mortgage.home_price <= 0:
        problems.append("home_price must be positive")
    if not MIN_TERM_YEARS <= int(mortgage.mortgage_term_years) <= MAX_TERM_YEARS:
        problems.append(f"mortgage_term_years must be between {MIN_TERM_YEARS} and {MAX_TERM_YEARS}")
    if mortgage.interest_rate < 0:
        problems.append("interest_rate cannot be negative")
    elif mortgage.interest_rate > MAX_RATE:
        problems.append(f"interest_rate cannot exceed {MAX_RATE:g}%")
    if mortgage.buying_costs < 0:
        problems.append("buying_costs cannot be negative")

    for name, quantity in _AMOUNT_FIELDS.items():
        amount: Amount = getattr(mortgage, name)
        if amount.unit not in ALLOWED_UNITS[quantity]:
            problems.append(f"{name} cannot be expressed in {amount.unit}")
        elif amount.value < 0:
            problems.append(f"{name} cannot be negative")

    dp = mortgage.down_payment
    if dp.unit == Unit.PERCENT and dp.value > 100:
        problems.append("down_payment cannot exceed 100% of the home price")
    elif dp.unit == Unit.DOLLAR and dp.value > mortgage.home_price:
        problems.append("down_payment cannot exceed the home price")

    if investment.monthly_rent < 0:
        problems.append("monthly_rent cannot be negative")
    if not 0 <= investment.rent_increase_rate <= MAX_RATE:
        problems.append(f"rent_increase_rate must be between 0 and {MAX_RATE:g}%")
    if not MIN_RETURN_RATE <= investment.investment_return_rate <= MAX_RATE:
        problems.append(f"investment_return_rate must be between {MIN_RETURN_RATE:g} and {MAX_RATE:g}%")
    if investment.manual_monthly_contribution < 0:
        problems.append("manual_monthly_contribution cannot be negative")

    return problems
