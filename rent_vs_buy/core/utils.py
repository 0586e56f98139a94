from __future__ import annotations


def usd(value: float) -> str:
    """Whole-dollar currency string, e.g. ``-$1,235``."""
    sign = "-" if round(value) < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def percent(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"


def monthly_rate_from_annual(annual_rate: float) -> float:
    """Convert an annual rate to its monthly-compounding equivalent.

    Uses compounding: r_m = (1 + r_a)^(1/12) - 1
    """
    if annual_rate <= -1.0:
        return 0.0
    return (1.0 + annual_rate) ** (1.0 / 12.0) - 1.0
