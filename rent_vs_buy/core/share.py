"""Compact key/value encoding of the inputs for shareable links.

Only fields that differ from the defaults are written; decoding starts from
the defaults and ignores keys it does not know.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

from .inputs import InvestmentInputs, MortgageInputs, validate_inputs
from .units import Amount, Unit

logger = logging.getLogger(__name__)

# field -> short key. Amount fields carry a value key and a unit key.
MORTGAGE_KEYS: Dict[str, str] = {
    "home_price": "p",
    "down_payment": "d",
    "mortgage_term_years": "t",
    "interest_rate": "r",
    "property_tax": "x",
    "maintenance": "m",
    "other_costs": "o",
    "buying_costs": "b",
}
UNIT_KEYS: Dict[str, str] = {
    "down_payment": "du",
    "property_tax": "xu",
    "maintenance": "mu",
    "other_costs": "ou",
}
INVESTMENT_KEYS: Dict[str, str] = {
    "monthly_rent": "n",
    "rent_increase_rate": "i",
    "investment_return_rate": "v",
    "use_manual_contribution": "u",
    "manual_monthly_contribution": "c",
}

INT_FIELDS = {"mortgage_term_years"}
BOOL_FIELDS = {"use_manual_contribution"}


def _format_number(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _parse(name: str, raw: str):
    if name in BOOL_FIELDS:
        return raw == "1"
    if name in INT_FIELDS:
        return int(float(raw))
    return float(raw)


def encode_inputs(
    mortgage: MortgageInputs,
    investment: InvestmentInputs,
    defaults: Optional[Tuple[MortgageInputs, InvestmentInputs]] = None,
) -> Dict[str, str]:
    default_mortgage, default_investment = defaults or (MortgageInputs(), InvestmentInputs())
    params: Dict[str, str] = {}

    for name, key in MORTGAGE_KEYS.items():
        value = getattr(mortgage, name)
        default = getattr(default_mortgage, name)
        if isinstance(value, Amount):
            if value.value != default.value:
                params[key] = _format_number(value.value)
            if Unit(value.unit) != Unit(default.unit):
                params[UNIT_KEYS[name]] = Unit(value.unit).value
        elif value != default:
            params[key] = _format_number(value)

    for name, key in INVESTMENT_KEYS.items():
        value = getattr(investment, name)
        if value == getattr(default_investment, name):
            continue
        params[key] = ("1" if value else "0") if name in BOOL_FIELDS else _format_number(value)

    return params


def decode_inputs(
    params: Mapping[str, str],
    defaults: Optional[Tuple[MortgageInputs, InvestmentInputs]] = None,
) -> Tuple[MortgageInputs, InvestmentInputs]:
    mortgage, investment = defaults or (MortgageInputs(), InvestmentInputs())
    mortgage_keys = {v: k for k, v in MORTGAGE_KEYS.items()}
    unit_keys = {v: k for k, v in UNIT_KEYS.items()}
    investment_keys = {v: k for k, v in INVESTMENT_KEYS.items()}

    mortgage_changes: Dict[str, object] = {}
    investment_changes: Dict[str, object] = {}
    amount_values: Dict[str, float] = {}
    amount_units: Dict[str, Unit] = {}

    for key, raw in params.items():
        try:
            if key in mortgage_keys:
                name = mortgage_keys[key]
                if name in UNIT_KEYS:
                    amount_values[name] = float(raw)
                else:
                    mortgage_changes[name] = _parse(name, raw)
            elif key in unit_keys:
                amount_units[unit_keys[key]] = Unit(raw)
            elif key in investment_keys:
                name = investment_keys[key]
                investment_changes[name] = _parse(name, raw)
        except ValueError:
            logger.warning("Ignoring malformed share parameter %s=%r", key, raw)

    for name in UNIT_KEYS:
        if name in amount_values or name in amount_units:
            current: Amount = getattr(mortgage, name)
            mortgage_changes[name] = Amount(
                amount_values.get(name, current.value),
                amount_units.get(name, current.unit),
            )

    return replace(mortgage, **mortgage_changes), replace(investment, **investment_changes)


def to_query(
    mortgage: MortgageInputs,
    investment: InvestmentInputs,
    defaults: Optional[Tuple[MortgageInputs, InvestmentInputs]] = None,
) -> str:
    return urlencode(encode_inputs(mortgage, investment, defaults))


def from_query(
    query: str,
    defaults: Optional[Tuple[MortgageInputs, InvestmentInputs]] = None,
) -> Tuple[MortgageInputs, InvestmentInputs]:
    return decode_inputs(dict(parse_qsl(query.lstrip("?"))), defaults)


def _keys_for(name: str, value, default) -> List[str]:
    if name in INVESTMENT_KEYS:
        return [INVESTMENT_KEYS[name]]
    if not isinstance(value, Amount):
        return [MORTGAGE_KEYS[name]]
    keys = []
    if value.value != default.value:
        keys.append(MORTGAGE_KEYS[name])
    if Unit(value.unit) != Unit(default.unit):
        keys.append(UNIT_KEYS[name])
    return keys


def drop_invalid(
    mortgage: MortgageInputs,
    investment: InvestmentInputs,
    defaults: Optional[Tuple[MortgageInputs, InvestmentInputs]] = None,
) -> Tuple[MortgageInputs, InvestmentInputs, List[str]]:
    """Fall back to the defaults for decoded fields that fail validation.

    Fields are laid over the defaults one at a time, in declaration order, and
    a field is kept only if it adds no new problem. Returns the kept inputs and
    the share keys that were dropped.
    """
    kept_mortgage, kept_investment = defaults or (MortgageInputs(), InvestmentInputs())
    baseline = set(validate_inputs(kept_mortgage, kept_investment))
    dropped: List[str] = []

    def accepted(candidate_mortgage, candidate_investment) -> bool:
        nonlocal baseline
        problems = set(validate_inputs(candidate_mortgage, candidate_investment))
        if problems - baseline:
            return False
        baseline = problems
        return True

    for f in fields(mortgage):
        value, default = getattr(mortgage, f.name), getattr(kept_mortgage, f.name)
        if value == default:
            continue
        candidate = replace(kept_mortgage, **{f.name: value})
        if accepted(candidate, kept_investment):
            kept_mortgage = candidate
        else:
            dropped.extend(_keys_for(f.name, value, default))

    for f in fields(investment):
        value, default = getattr(investment, f.name), getattr(kept_investment, f.name)
        if value == default:
            continue
        candidate = replace(kept_investment, **{f.name: value})
        if accepted(kept_mortgage, candidate):
            kept_investment = candidate
        else:
            dropped.extend(_keys_for(f.name, value, default))

    if dropped:
        logger.warning("Ignoring out-of-range share parameters: %s", ", ".join(dropped))
    return kept_mortgage, kept_investment, dropped
