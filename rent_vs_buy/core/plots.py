from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go


BUY_COLOR = "#1f77b4"
INVEST_COLOR = "#2ca02c"


def net_worth_curve(yearly_df: pd.DataFrame, title: str = "Net worth by year") -> go.Figure:
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=yearly_df["year"],
            y=yearly_df["mortgage_net_worth"],
            mode="lines+markers",
            name="Buy (home equity)",
            line=dict(color=BUY_COLOR),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=yearly_df["year"],
            y=yearly_df["investment_net_worth"],
            mode="lines+markers",
            name="Rent & invest (portfolio - home)",
            line=dict(color=INVEST_COLOR),
        )
    )
    fig.update_layout(title=title, xaxis_title="Year", yaxis_title="$")
    fig.update_yaxes(tickprefix="$", tickformat=",.0f")
    return fig


def cumulative_cost_curve(yearly_df: pd.DataFrame, title: str = "Cumulative spend") -> go.Figure:
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=yearly_df["year"],
            y=yearly_df["mortgage_cumulative_cost"],
            mode="lines",
            name="Buy",
            line=dict(color=BUY_COLOR),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=yearly_df["year"],
            y=yearly_df["rent_cumulative_cost"],
            mode="lines",
            name="Rent",
            line=dict(color=INVEST_COLOR, dash="dot"),
        )
    )
    fig.update_layout(title=title, xaxis_title="Year", yaxis_title="$")
    fig.update_yaxes(tickprefix="$", tickformat=",.0f")
    return fig


def balance_and_equity_bars(yearly_df: pd.DataFrame, title: str = "Mortgage balance vs equity") -> go.Figure:
    fig = go.Figure()
    fig.add_bar(x=yearly_df["year"], y=yearly_df["home_equity"], name="Equity", marker_color=BUY_COLOR)
    fig.add_bar(x=yearly_df["year"], y=yearly_df["remaining_balance"], name="Balance", marker_color="#d62728")
    fig.update_layout(title=title, barmode="stack", xaxis_title="Year", yaxis_title="$")
    return fig


def cost_breakdown_bars(breakdown_df: pd.DataFrame, title: str = "Lifetime cost breakdown") -> go.Figure:
    """Stacked bar per strategy.

    breakdown_df: columns strategy, category, amount (see summary.cost_breakdown_frame).
    """
    fig = go.Figure()
    for category, group in breakdown_df.groupby("category", sort=False):
        fig.add_bar(x=group["strategy"], y=group["amount"], name=category)
    fig.update_layout(title=title, barmode="stack", yaxis_title="$")
    fig.update_yaxes(tickprefix="$", tickformat=",.0f")
    return fig
