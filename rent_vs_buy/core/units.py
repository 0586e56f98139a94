from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, Tuple

from .errors import DivisionByZeroError, InvalidInputError


MONTHS_IN_YEAR: Final[int] = 12

DOLLAR_DECIMALS: Final[int] = 0
PERCENT_DECIMALS: Final[int] = 2


class Unit(str, Enum):
    PERCENT = "percent"
    DOLLAR = "dollar"
    DOLLAR_MONTHLY = "dollarMonthly"
    DOLLAR_YEARLY = "dollarYearly"


class Quantity(str, Enum):
    DOWN_PAYMENT = "down_payment"
    PROPERTY_TAX = "property_tax"
    MAINTENANCE = "maintenance"
    OTHER_COSTS = "other_costs"


ALLOWED_UNITS: Final[Dict[Quantity, Tuple[Unit, ...]]] = {
    Quantity.DOWN_PAYMENT: (Unit.PERCENT, Unit.DOLLAR),
    Quantity.PROPERTY_TAX: (Unit.DOLLAR_YEARLY, Unit.PERCENT),
    Quantity.MAINTENANCE: (Unit.DOLLAR_MONTHLY, Unit.DOLLAR_YEARLY, Unit.PERCENT),
    Quantity.OTHER_COSTS: (Unit.PERCENT, Unit.DOLLAR_MONTHLY, Unit.DOLLAR_YEARLY),
}

CANONICAL_UNIT: Final[Dict[Quantity, Unit]] = {
    Quantity.DOWN_PAYMENT: Unit.DOLLAR,
    Quantity.PROPERTY_TAX: Unit.DOLLAR_YEARLY,
    Quantity.MAINTENANCE: Unit.DOLLAR_MONTHLY,
    Quantity.OTHER_COSTS: Unit.DOLLAR_YEARLY,
}


@dataclass(frozen=True)
class Amount:
    """A raw user-entered value together with the unit it was entered in."""

    value: float
    unit: Unit


def _check_unit(quantity: Quantity, unit: Unit) -> Unit:
    try:
        unit = Unit(unit)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown unit {unit!r}") from exc
    if unit not in ALLOWED_UNITS[quantity]:
        raise InvalidInputError(f"Unit {unit.value!r} is not allowed for {quantity.value}")
    return unit


def _to_dollars(home_price: float, value: float, unit: Unit) -> float:
    # Recurring quantities are based on yearly dollars, down payment on a lump sum.
    if unit is Unit.PERCENT:
        return home_price * (value / 100.0)
    if unit is Unit.DOLLAR_MONTHLY:
        return value * MONTHS_IN_YEAR
    return float(value)


def _from_dollars(home_price: float, dollars: float, unit: Unit) -> float:
    if unit is Unit.PERCENT:
        if home_price == 0:
            raise DivisionByZeroError("Cannot express an amount as a percent of a zero home price")
        return dollars / home_price * 100.0
    if unit is Unit.DOLLAR_MONTHLY:
        return dollars / MONTHS_IN_YEAR
    return float(dollars)


def normalize(home_price: float, amount: Amount, quantity: Quantity) -> float:
    """Convert ``amount`` into the canonical dollar unit of ``quantity``.

    Canonical units: down payment in dollars, property tax and other costs in
    yearly dollars, maintenance in monthly dollars.
    """
    unit = _check_unit(quantity, amount.unit)
    dollars = _to_dollars(home_price, amount.value, unit)
    return _from_dollars(home_price, dollars, CANONICAL_UNIT[quantity])


def display_decimals(unit: Unit) -> int:
    return PERCENT_DECIMALS if Unit(unit) is Unit.PERCENT else DOLLAR_DECIMALS


def convert(
    home_price: float,
    value: float,
    from_unit: Unit,
    to_unit: Unit,
    quantity: Quantity,
) -> float:
    """Re-express ``value`` from one display unit to another.

    The value goes through its dollar form and is rounded to the display
    precision of ``to_unit``. The result is meant for the input field only;
    the engine always works from the stored raw value.
    """
    from_unit = _check_unit(quantity, from_unit)
    to_unit = _check_unit(quantity, to_unit)
    if from_unit is to_unit:
        return float(value)
    dollars = _to_dollars(home_price, value, from_unit)
    return round(_from_dollars(home_price, dollars, to_unit), display_decimals(to_unit))


# Per-quantity helpers used by the engine


def down_payment_dollars(home_price: float, amount: Amount) -> float:
    return normalize(home_price, amount, Quantity.DOWN_PAYMENT)


def yearly_property_tax(home_price: float, amount: Amount) -> float:
    return normalize(home_price, amount, Quantity.PROPERTY_TAX)


def monthly_maintenance(home_price: float, amount: Amount) -> float:
    return normalize(home_price, amount, Quantity.MAINTENANCE)


def yearly_other_costs(home_price: float, amount: Amount) -> float:
    return normalize(home_price, amount, Quantity.OTHER_COSTS)
