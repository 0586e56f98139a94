from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from .errors import InvalidInputError
from .units import MONTHS_IN_YEAR


SCHEDULE_COLUMNS = ["month", "year", "payment", "interest", "principal", "balance"]
YEARLY_COLUMNS = ["year", "payment", "interest", "principal", "end_balance"]


def _n_payments(years: int) -> int:
    n_months = int(years) * MONTHS_IN_YEAR
    if n_months <= 0:
        raise InvalidInputError("Mortgage term must be at least one year")
    return n_months


def monthly_payment(principal: float, annual_rate: float, years: int) -> float:
    """Compute the fixed monthly payment for a fully amortizing loan.

    Parameters
    ----------
    principal : float
        Initial loan amount.
    annual_rate : float
        Nominal annual interest rate as a decimal (e.g., 0.04 for 4%).
    years : int
        Loan term in years.

    Returns
    -------
    float
        The constant monthly principal-and-interest payment.

    Raises
    ------
    InvalidInputError
        If the term is shorter than one month.
    """
    n_months = _n_payments(years)
    monthly_rate = annual_rate / MONTHS_IN_YEAR
    if monthly_rate == 0:
        return principal / n_months
    factor = (1 + monthly_rate) ** n_months
    return principal * (monthly_rate * factor) / (factor - 1)


def remaining_balance(principal: float, annual_rate: float, years: int, months_paid: int) -> float:
    """Outstanding balance after ``months_paid`` fixed payments.

    The result is not clamped: floating-point residue can leave a tiny
    negative value at the final period, callers take ``max(0.0, ...)``.
    """
    n_months = _n_payments(years)
    monthly_rate = annual_rate / MONTHS_IN_YEAR
    if monthly_rate == 0:
        return principal - (principal / n_months) * months_paid
    payment = monthly_payment(principal, annual_rate, years)
    growth = (1 + monthly_rate) ** months_paid
    return principal * growth - payment * ((growth - 1) / monthly_rate)


def amort_schedule(principal: float, annual_rate: float, years: int) -> pd.DataFrame:
    """Generate a monthly amortization schedule.

    Columns: month (1..N), year, payment, interest, principal, balance

    Notes
    -----
    - The last period absorbs rounding so the balance ends at zero.
    - Payment is constant (except for that final adjustment).
    """
    n_months = _n_payments(years)
    payment = monthly_payment(principal, annual_rate, years)
    monthly_rate = annual_rate / MONTHS_IN_YEAR

    rows = []
    balance = float(principal)
    for m in range(1, n_months + 1):
        interest = balance * monthly_rate
        principal_component = payment - interest
        new_balance = balance - principal_component

        if m == n_months:
            principal_component = balance
            new_balance = 0.0

        rows.append(
            {
                "month": m,
                "year": (m - 1) // MONTHS_IN_YEAR + 1,
                "payment": float(interest + principal_component),
                "interest": float(interest),
                "principal": float(principal_component),
                "balance": float(max(new_balance, 0.0)),
            }
        )
        balance = max(new_balance, 0.0)

    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def aggregate_yearly(schedule: pd.DataFrame) -> pd.DataFrame:
    """Aggregate a monthly amortization schedule by year.

    Returns a DataFrame with columns: year, payment, interest, principal, end_balance
    """
    if schedule.empty:
        return pd.DataFrame(columns=YEARLY_COLUMNS, data=[])

    agg = (
        schedule.groupby("year", as_index=False)[["payment", "interest", "principal"]]
        .sum()
        .sort_values("year")
    )
    end_balances = (
        schedule.groupby("year", as_index=False)["balance"].last().rename(columns={"balance": "end_balance"})
    )
    return agg.merge(end_balances, on="year", how="left")[YEARLY_COLUMNS]


@dataclass(frozen=True)
class AmortizationSummary:
    payment_monthly: float
    schedule_monthly: pd.DataFrame
    schedule_yearly: pd.DataFrame


def summarize(principal: float, annual_rate: float, years: int) -> AmortizationSummary:
    """Convenience wrapper returning payment and schedules."""
    schedule = amort_schedule(principal, annual_rate, years)
    yearly = aggregate_yearly(schedule)
    payment = monthly_payment(principal, annual_rate, years)
    return AmortizationSummary(payment_monthly=payment, schedule_monthly=schedule, schedule_yearly=yearly)
