import dataclasses
import logging

from rent_vs_buy.core.inputs import InvestmentInputs, MortgageInputs
from rent_vs_buy.core.share import decode_inputs, drop_invalid, encode_inputs, from_query, to_query
from rent_vs_buy.core.units import Amount, Unit


def customized():
    mortgage = MortgageInputs(
        home_price=525_000,
        down_payment=Amount(105_000, Unit.DOLLAR),
        buying_costs=7_350.5,
        mortgage_term_years=30,
        interest_rate=6.125,
        property_tax=Amount(1.1, Unit.PERCENT),
        maintenance=Amount(4_800, Unit.DOLLAR_YEARLY),
        other_costs=Amount(150, Unit.DOLLAR_MONTHLY),
    )
    investment = InvestmentInputs(
        monthly_rent=2_875,
        rent_increase_rate=3.3,
        investment_return_rate=7,
        use_manual_contribution=True,
        manual_monthly_contribution=1_250,
    )
    return mortgage, investment


def test_defaults_encode_to_nothing():
    assert encode_inputs(MortgageInputs(), InvestmentInputs()) == {}
    assert to_query(MortgageInputs(), InvestmentInputs()) == ""


def test_only_changed_fields_are_encoded():
    mortgage = dataclasses.replace(MortgageInputs(), home_price=500_000)
    investment = dataclasses.replace(InvestmentInputs(), use_manual_contribution=True)
    assert encode_inputs(mortgage, investment) == {"p": "500000", "u": "1"}


def test_unit_change_encodes_unit_key_only():
    mortgage = dataclasses.replace(MortgageInputs(), down_payment=Amount(50, Unit.DOLLAR))
    assert encode_inputs(mortgage, InvestmentInputs()) == {"du": "dollar"}


def test_round_trip_restores_model():
    mortgage, investment = customized()
    params = encode_inputs(mortgage, investment)
    assert params["r"] == "6.125"
    assert params["ou"] == "dollarMonthly"
    assert decode_inputs(params) == (mortgage, investment)


def test_query_string_round_trip():
    mortgage, investment = customized()
    query = to_query(mortgage, investment)
    assert from_query("?" + query) == (mortgage, investment)
    assert from_query(query) == (mortgage, investment)


def test_round_trip_against_custom_defaults():
    defaults = customized()
    mortgage = dataclasses.replace(defaults[0], interest_rate=5.5)
    params = encode_inputs(mortgage, defaults[1], defaults)
    assert params == {"r": "5.5"}
    assert decode_inputs(params, defaults) == (mortgage, defaults[1])


def test_unknown_keys_are_ignored():
    assert decode_inputs({"zz": "3", "it": "15"}) == (MortgageInputs(), InvestmentInputs())


def test_boolean_decoding():
    _, investment = decode_inputs({"u": "1"})
    assert investment.use_manual_contribution is True
    _, investment = decode_inputs({"u": "0"})
    assert investment.use_manual_contribution is False


def test_malformed_values_fall_back_to_defaults(caplog):
    with caplog.at_level(logging.WARNING, logger="rent_vs_buy.core.share"):
        mortgage, investment = decode_inputs({"p": "lots", "t": "15", "mu": "weekly", "n": "1900"})
    assert mortgage.home_price == MortgageInputs().home_price
    assert mortgage.mortgage_term_years == 15
    assert mortgage.maintenance == MortgageInputs().maintenance
    assert investment.monthly_rent == 1_900
    assert "p='lots'" in caplog.text
    assert "mu='weekly'" in caplog.text


def test_amount_value_and_unit_decode_independently():
    mortgage, _ = decode_inputs({"x": "1.25", "xu": "percent"})
    assert mortgage.property_tax == Amount(1.25, Unit.PERCENT)
    mortgage, _ = decode_inputs({"m": "900"})
    assert mortgage.maintenance == Amount(900, Unit.DOLLAR_MONTHLY)


def test_out_of_range_values_fall_back_to_defaults(caplog):
    decoded = decode_inputs({"t": "45", "p": "500000"})
    assert decoded[0].mortgage_term_years == 45
    with caplog.at_level(logging.WARNING, logger="rent_vs_buy.core.share"):
        mortgage, investment, dropped = drop_invalid(*decoded)
    assert dropped == ["t"]
    assert mortgage.mortgage_term_years == MortgageInputs().mortgage_term_years
    assert mortgage.home_price == 500_000
    assert investment == InvestmentInputs()
    assert "share parameters: t" in caplog.text


def test_each_out_of_range_key_is_reported():
    params = {"p": "-1", "x": "-5", "m": "-20", "o": "-0.5", "r": "150", "i": "-2", "v": "-100", "c": "-10"}
    mortgage, investment, dropped = drop_invalid(*decode_inputs(params))
    assert dropped == ["p", "r", "x", "m", "o", "i", "v", "c"]
    assert (mortgage, investment) == (MortgageInputs(), InvestmentInputs())


def test_amount_with_disallowed_unit_is_dropped_whole():
    mortgage, _, dropped = drop_invalid(*decode_inputs({"x": "3000", "xu": "dollarMonthly"}))
    assert dropped == ["x", "xu"]
    assert mortgage.property_tax == MortgageInputs().property_tax


def test_down_payment_checked_against_decoded_price():
    params = {"p": "500000", "d": "450000", "du": "dollar"}
    mortgage, _, dropped = drop_invalid(*decode_inputs(params))
    assert dropped == []
    assert mortgage.down_payment == Amount(450_000, Unit.DOLLAR)

    mortgage, _, dropped = drop_invalid(*decode_inputs({"d": "450000", "du": "dollar"}))
    assert dropped == ["d", "du"]
    assert mortgage.down_payment == MortgageInputs().down_payment


def test_valid_link_is_kept_whole():
    mortgage, investment = customized()
    decoded = decode_inputs(encode_inputs(mortgage, investment))
    assert drop_invalid(*decoded) == (mortgage, investment, [])
