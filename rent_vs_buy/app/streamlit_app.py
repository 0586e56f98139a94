from __future__ import annotations

import io
import logging
import os
import sys
from typing import Tuple

import pandas as pd
import streamlit as st
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer

# Ensure package import works on Streamlit Cloud when CWD != repo root
_THIS_DIR = os.path.dirname(__file__)
_REPO_ROOT = os.path.abspath(os.path.join(_THIS_DIR, "..", ".."))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from rent_vs_buy.core import plots
from rent_vs_buy.core.amortization import summarize as amort_summarize
from rent_vs_buy.core.errors import InvalidInputError
from rent_vs_buy.core.inputs import (
    MAX_RATE,
    MAX_TERM_YEARS,
    MIN_RETURN_RATE,
    MIN_TERM_YEARS,
    InvestmentInputs,
    MortgageInputs,
    validate_inputs,
)
from rent_vs_buy.core.model import calculate_results
from rent_vs_buy.core.results import CalculationResults
from rent_vs_buy.core.share import decode_inputs, drop_invalid, encode_inputs
from rent_vs_buy.core.summary import cost_breakdown_frame, monthly_frame, results_frame
from rent_vs_buy.core.units import ALLOWED_UNITS, Amount, Quantity, Unit, convert, display_decimals
from rent_vs_buy.core.utils import percent, usd
from config import LOG_LEVEL, default_inputs

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Mortgage vs Investment Calculator", layout="wide")

DEFAULTS = default_inputs()

UNIT_LABELS = {
    Unit.PERCENT: "% of price",
    Unit.DOLLAR: "$",
    Unit.DOLLAR_MONTHLY: "$ / month",
    Unit.DOLLAR_YEARLY: "$ / year",
}

AMOUNT_FIELDS = {
    "down_payment": Quantity.DOWN_PAYMENT,
    "property_tax": Quantity.PROPERTY_TAX,
    "maintenance": Quantity.MAINTENANCE,
    "other_costs": Quantity.OTHER_COSTS,
}


# ------------------------- Session state ------------------------- #
def init_state() -> None:
    """Seed widget state once per session, from the share link if present."""
    if st.session_state.get("_initialized"):
        return
    mortgage, investment = decode_inputs(dict(st.query_params), DEFAULTS)
    # Out-of-range values would be silently clamped by the widgets
    mortgage, investment, dropped = drop_invalid(mortgage, investment, DEFAULTS)
    if dropped:
        st.sidebar.warning(f"Ignored out-of-range link values: {', '.join(dropped)}. Using defaults instead.")
    st.session_state["home_price"] = float(mortgage.home_price)
    st.session_state["buying_costs"] = float(mortgage.buying_costs)
    st.session_state["mortgage_term_years"] = int(mortgage.mortgage_term_years)
    st.session_state["interest_rate"] = float(mortgage.interest_rate)
    for name in AMOUNT_FIELDS:
        amount: Amount = getattr(mortgage, name)
        st.session_state[name] = float(amount.value)
        st.session_state[f"{name}_unit"] = Unit(amount.unit)
        st.session_state[f"_{name}_unit_prev"] = Unit(amount.unit)
    st.session_state["monthly_rent"] = float(investment.monthly_rent)
    st.session_state["rent_increase_rate"] = float(investment.rent_increase_rate)
    st.session_state["investment_return_rate"] = float(investment.investment_return_rate)
    st.session_state["use_manual_contribution"] = bool(investment.use_manual_contribution)
    st.session_state["manual_monthly_contribution"] = float(investment.manual_monthly_contribution)
    st.session_state["_initialized"] = True


def on_unit_change(name: str) -> None:
    """Re-express the stored value in the newly selected unit."""
    quantity = AMOUNT_FIELDS[name]
    previous = st.session_state[f"_{name}_unit_prev"]
    selected = st.session_state[f"{name}_unit"]
    try:
        st.session_state[name] = convert(
            st.session_state["home_price"], st.session_state[name], previous, selected, quantity
        )
    except InvalidInputError as exc:
        logger.warning("Unit switch for %s rejected: %s", name, exc)
        st.session_state[f"{name}_unit"] = previous
        st.session_state["_unit_error"] = str(exc)
        return
    st.session_state[f"_{name}_unit_prev"] = selected


def amount_input(label: str, name: str) -> Amount:
    unit_key = f"{name}_unit"
    c1, c2 = st.sidebar.columns([3, 2])
    unit = st.session_state[unit_key]
    decimals = display_decimals(unit)
    with c1:
        value = st.number_input(
            label,
            min_value=0.0,
            step=0.1 if decimals else 50.0,
            format=f"%0.{decimals}f",
            key=name,
        )
    with c2:
        unit = st.selectbox(
            "Unit",
            ALLOWED_UNITS[AMOUNT_FIELDS[name]],
            format_func=lambda u: UNIT_LABELS[u],
            key=unit_key,
            on_change=on_unit_change,
            args=(name,),
        )
    return Amount(float(value), unit)


def sidebar_inputs() -> Tuple[MortgageInputs, InvestmentInputs]:
    st.sidebar.header("Buying")
    home_price = st.sidebar.number_input("Home price ($)", min_value=0.0, step=5_000.0, format="%0.0f", key="home_price")
    down_payment = amount_input("Down payment", "down_payment")
    buying_costs = st.sidebar.number_input(
        "One-time buying costs ($)", min_value=0.0, step=500.0, format="%0.0f", key="buying_costs"
    )

    st.sidebar.subheader("Mortgage")
    term = int(
        st.sidebar.number_input(
            "Term (years)", min_value=MIN_TERM_YEARS, max_value=MAX_TERM_YEARS, step=1, key="mortgage_term_years"
        )
    )
    interest_rate = st.sidebar.number_input(
        "Interest rate (% annual)", min_value=0.0, max_value=MAX_RATE, step=0.1, format="%0.2f", key="interest_rate"
    )

    st.sidebar.subheader("Recurring costs")
    property_tax = amount_input("Property tax", "property_tax")
    maintenance = amount_input("Maintenance", "maintenance")
    other_costs = amount_input("Other costs", "other_costs")

    st.sidebar.header("Renting & investing")
    monthly_rent = st.sidebar.number_input("Monthly rent ($)", min_value=0.0, step=50.0, format="%0.0f", key="monthly_rent")
    rent_increase_rate = st.sidebar.number_input(
        "Rent increase (% annual)", min_value=0.0, max_value=MAX_RATE, step=0.1, format="%0.1f", key="rent_increase_rate"
    )
    investment_return_rate = st.sidebar.number_input(
        "Investment return (% annual)", min_value=MIN_RETURN_RATE, max_value=MAX_RATE, step=0.1, format="%0.1f",
        key="investment_return_rate",
    )
    use_manual = st.sidebar.toggle(
        "Set monthly contribution manually",
        key="use_manual_contribution",
        help="Otherwise the renter invests whatever buying would cost beyond rent, when positive.",
    )
    manual_contribution = st.sidebar.number_input(
        "Monthly contribution ($)", min_value=0.0, step=50.0, format="%0.0f",
        key="manual_monthly_contribution", disabled=not use_manual,
    )

    mortgage = MortgageInputs(
        home_price=home_price,
        down_payment=down_payment,
        buying_costs=buying_costs,
        mortgage_term_years=term,
        interest_rate=interest_rate,
        property_tax=property_tax,
        maintenance=maintenance,
        other_costs=other_costs,
    )
    investment = InvestmentInputs(
        monthly_rent=monthly_rent,
        rent_increase_rate=rent_increase_rate,
        investment_return_rate=investment_return_rate,
        use_manual_contribution=use_manual,
        manual_monthly_contribution=manual_contribution,
    )
    return mortgage, investment


# ------------------------- Rendering ------------------------- #
def kpi_card(label: str, value: str, help_text: str | None = None):
    st.metric(label, value, help=help_text)


def style_with_commas(df: pd.DataFrame):
    num_cols = df.select_dtypes(include=["number"]).columns.drop("year", errors="ignore")
    if len(num_cols) == 0:
        return df
    return df.style.format({col: "{:,.0f}" for col in num_cols})


def render_summary(results: CalculationResults):
    st.subheader("Summary")
    if results.winner == "investment":
        st.success(f"Renting & investing comes out ahead by {usd(results.net_worth_gap)}")
    else:
        st.info(f"Buying comes out ahead by {usd(results.net_worth_gap)}")

    mb = results.monthly_breakdown
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        kpi_card("Final net worth (buy)", usd(results.final_mortgage_net_worth), "Home equity at the end of the term")
        kpi_card("Down payment", usd(results.down_payment))
    with c2:
        kpi_card(
            "Final net worth (rent & invest)",
            usd(results.final_investment_net_worth),
            "Portfolio minus the price of buying the same home at the end",
        )
        kpi_card("Portfolio minus rent paid", usd(results.final_year.portfolio_net_of_rent))
    with c3:
        kpi_card("Monthly P&I", usd(mb.mortgage_payment))
        kpi_card("Total monthly cost (buy)", usd(mb.total_monthly_cost))
    with c4:
        kpi_card("Initial monthly rent", usd(results.initial_monthly_rent))
        kpi_card(
            "Initial monthly contribution",
            usd(results.initial_monthly_contribution),
            "Negative values are not withdrawn from the portfolio",
        )

    st.markdown("Monthly cost breakdown (buy)")
    st.table(
        pd.DataFrame(
            {
                "item": ["P&I", "Avg principal", "Avg interest", "Property tax", "Maintenance", "Other costs", "Total"],
                "amount": [
                    usd(mb.mortgage_payment), usd(mb.principal), usd(mb.interest), usd(mb.property_tax),
                    usd(mb.maintenance), usd(mb.other_costs), usd(mb.total_monthly_cost),
                ],
            }
        )
    )


def render_graphs(results: CalculationResults):
    st.subheader("Charts")
    yearly_df = results_frame(results)
    c1, c2 = st.columns(2)
    with c1:
        st.plotly_chart(plots.net_worth_curve(yearly_df), use_container_width=True)
        st.plotly_chart(plots.balance_and_equity_bars(yearly_df), use_container_width=True)
    with c2:
        st.plotly_chart(plots.cumulative_cost_curve(yearly_df), use_container_width=True)
        st.plotly_chart(plots.cost_breakdown_bars(cost_breakdown_frame(results)), use_container_width=True)


def render_tables(results: CalculationResults, mortgage: MortgageInputs):
    st.subheader("Tables")
    view_monthly = st.toggle("Monthly view", value=False)

    if not view_monthly:
        yearly_df = results_frame(results)
        st.markdown("Yearly breakdown")
        st.dataframe(style_with_commas(yearly_df), use_container_width=True)
        st.download_button(
            "Export CSV (yearly)",
            data=yearly_df.to_csv(index=False).encode("utf-8"),
            file_name="rent_vs_buy_yearly.csv",
            mime="text/csv",
        )

        st.markdown("Amortization (yearly)")
        amort = amort_summarize(results.loan_amount, mortgage.interest_rate / 100.0, mortgage.mortgage_term_years)
        st.dataframe(style_with_commas(amort.schedule_yearly), use_container_width=True)
        st.download_button(
            "Export CSV (amortization)",
            data=amort.schedule_yearly.to_csv(index=False).encode("utf-8"),
            file_name="amortization_yearly.csv",
            mime="text/csv",
        )
        return

    monthly_df = monthly_frame(results)
    st.markdown("Renter portfolio (monthly)")
    st.dataframe(style_with_commas(monthly_df), use_container_width=True)
    st.download_button(
        "Export CSV (monthly)",
        data=monthly_df.to_csv(index=False).encode("utf-8"),
        file_name="rent_vs_buy_monthly.csv",
        mime="text/csv",
    )


def render_costs(results: CalculationResults):
    st.subheader("Lifetime costs")
    df = cost_breakdown_frame(results)
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("**Buy**")
        buy = df[df["strategy"] == "buy"][["category", "amount"]]
        st.dataframe(style_with_commas(buy), use_container_width=True, hide_index=True)
        st.caption(f"Total: {usd(results.cost_breakdown.total_buy_cost)}")
    with c2:
        st.markdown("**Rent & invest**")
        invest = df[df["strategy"] == "invest"][["category", "amount"]]
        st.dataframe(style_with_commas(invest), use_container_width=True, hide_index=True)
        st.caption(f"Total: {usd(results.cost_breakdown.total_invest_cost)}")


def render_report(results: CalculationResults, mortgage: MortgageInputs, investment: InvestmentInputs):
    st.subheader("Report")
    if st.button("Generate PDF"):
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=LETTER)
        styles = getSampleStyleSheet()
        story = []
        story.append(Paragraph("Mortgage vs investment", styles["Title"]))
        story.append(Spacer(1, 12))
        story.append(Paragraph(f"Home price: {usd(mortgage.home_price)}", styles["Normal"]))
        story.append(Paragraph(f"Down payment: {usd(results.down_payment)}", styles["Normal"]))
        story.append(
            Paragraph(
                f"Loan: {usd(results.loan_amount)} over {mortgage.mortgage_term_years} years "
                f"at {percent(mortgage.interest_rate, 2)}",
                styles["Normal"],
            )
        )
        story.append(Paragraph(f"Monthly P&I: {usd(results.monthly_breakdown.mortgage_payment)}", styles["Normal"]))
        story.append(
            Paragraph(
                f"Rent: {usd(investment.monthly_rent)}/month, growing {percent(investment.rent_increase_rate)} a year; "
                f"investments return {percent(investment.investment_return_rate)} a year",
                styles["Normal"],
            )
        )
        story.append(Spacer(1, 12))
        story.append(Paragraph(f"Final net worth (buy): {usd(results.final_mortgage_net_worth)}", styles["Normal"]))
        story.append(
            Paragraph(f"Final net worth (rent & invest): {usd(results.final_investment_net_worth)}", styles["Normal"])
        )
        winner = "Renting & investing" if results.winner == "investment" else "Buying"
        story.append(Paragraph(f"{winner} wins by {usd(results.net_worth_gap)}", styles["Heading2"]))
        doc.build(story)
        buffer.seek(0)
        st.download_button("Download PDF", data=buffer, file_name="rent_vs_buy_report.pdf", mime="application/pdf")


def main():
    st.title("Mortgage vs Investment Calculator")
    st.caption("Compare buying a home vs renting and investing the difference")
    init_state()
    mortgage, investment = sidebar_inputs()

    unit_error = st.session_state.pop("_unit_error", None)
    if unit_error:
        st.sidebar.error(unit_error)

    problems = validate_inputs(mortgage, investment)
    if problems:
        for problem in problems:
            st.error(problem)
        st.stop()

    try:
        results = calculate_results(mortgage, investment)
    except InvalidInputError as exc:
        st.error(str(exc))
        st.stop()

    # Keep the URL shareable
    st.query_params.from_dict(encode_inputs(mortgage, investment, DEFAULTS))

    tabs = st.tabs(["Summary", "Charts", "Tables", "Lifetime costs"])
    with tabs[0]:
        render_summary(results)
    with tabs[1]:
        render_graphs(results)
    with tabs[2]:
        render_tables(results, mortgage)
    with tabs[3]:
        render_costs(results)

    st.divider()
    render_report(results, mortgage, investment)
    st.caption("This calculator is for educational purposes only. Consult a financial advisor for personalized advice.")


if __name__ == "__main__":
    main()
