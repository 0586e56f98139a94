from __future__ import annotations

import logging
import os
import yaml
from pathlib import Path
from typing import Any, Dict, Tuple

from rent_vs_buy.core.inputs import InvestmentInputs, MortgageInputs
from rent_vs_buy.core.units import Amount, Unit

logger = logging.getLogger(__name__)

# Project root (parent of this file)
BASE_DIR = Path(__file__).resolve().parent
CONFIG_PATH = Path(os.environ.get("RENT_VS_BUY_CONFIG", BASE_DIR / "config.yaml"))

_MORTGAGE = MortgageInputs()
_INVESTMENT = InvestmentInputs()


def _load_yaml(path: Path = CONFIG_PATH) -> Dict[str, Any]:
    if not path.exists():
        logger.info("No config file at %s, using built-in defaults", path)
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        logger.info("Loaded config from %s", path)
        return data


CFG = _load_yaml()

# Purchase
HOME_PRICE: float = float(CFG.get("home_price", _MORTGAGE.home_price))
DOWN_PAYMENT: float = float(CFG.get("down_payment", _MORTGAGE.down_payment.value))
DOWN_PAYMENT_UNIT: Unit = Unit(CFG.get("down_payment_unit", _MORTGAGE.down_payment.unit))
BUYING_COSTS: float = float(CFG.get("buying_costs", _MORTGAGE.buying_costs))

# Loan
MORTGAGE_TERM_YEARS: int = int(CFG.get("mortgage_term_years", _MORTGAGE.mortgage_term_years))
INTEREST_RATE: float = float(CFG.get("interest_rate", _MORTGAGE.interest_rate))  # percent

# Recurring costs
PROPERTY_TAX: float = float(CFG.get("property_tax", _MORTGAGE.property_tax.value))
PROPERTY_TAX_UNIT: Unit = Unit(CFG.get("property_tax_unit", _MORTGAGE.property_tax.unit))
MAINTENANCE: float = float(CFG.get("maintenance", _MORTGAGE.maintenance.value))
MAINTENANCE_UNIT: Unit = Unit(CFG.get("maintenance_unit", _MORTGAGE.maintenance.unit))
OTHER_COSTS: float = float(CFG.get("other_costs", _MORTGAGE.other_costs.value))
OTHER_COSTS_UNIT: Unit = Unit(CFG.get("other_costs_unit", _MORTGAGE.other_costs.unit))

# Renting & investing
MONTHLY_RENT: float = float(CFG.get("monthly_rent", _INVESTMENT.monthly_rent))
RENT_INCREASE_RATE: float = float(CFG.get("rent_increase_rate", _INVESTMENT.rent_increase_rate))  # percent
INVESTMENT_RETURN_RATE: float = float(CFG.get("investment_return_rate", _INVESTMENT.investment_return_rate))  # percent
USE_MANUAL_CONTRIBUTION: bool = bool(CFG.get("use_manual_contribution", _INVESTMENT.use_manual_contribution))
MANUAL_MONTHLY_CONTRIBUTION: float = float(
    CFG.get("manual_monthly_contribution", _INVESTMENT.manual_monthly_contribution)
)

LOG_LEVEL: str = str(CFG.get("log_level", "INFO")).upper()


def default_inputs() -> Tuple[MortgageInputs, InvestmentInputs]:
    """Inputs the app starts from, and the baseline share links are encoded against."""
    mortgage = MortgageInputs(
        home_price=HOME_PRICE,
        down_payment=Amount(DOWN_PAYMENT, DOWN_PAYMENT_UNIT),
        buying_costs=BUYING_COSTS,
        mortgage_term_years=MORTGAGE_TERM_YEARS,
        interest_rate=INTEREST_RATE,
        property_tax=Amount(PROPERTY_TAX, PROPERTY_TAX_UNIT),
        maintenance=Amount(MAINTENANCE, MAINTENANCE_UNIT),
        other_costs=Amount(OTHER_COSTS, OTHER_COSTS_UNIT),
    )
    investment = InvestmentInputs(
        monthly_rent=MONTHLY_RENT,
        rent_increase_rate=RENT_INCREASE_RATE,
        investment_return_rate=INVESTMENT_RETURN_RATE,
        use_manual_contribution=USE_MANUAL_CONTRIBUTION,
        manual_monthly_contribution=MANUAL_MONTHLY_CONTRIBUTION,
    )
    return mortgage, investment
