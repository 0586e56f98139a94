from .amortization import amort_schedule, aggregate_yearly, monthly_payment, remaining_balance, summarize
from .errors import DivisionByZeroError, InvalidInputError
from .inputs import InvestmentInputs, MortgageInputs, validate_inputs
from .model import RentVsBuyModel, calculate_results
from .results import CalculationResults, CostBreakdown, MonthlyBreakdown, YearlyResult
from .share import decode_inputs, drop_invalid, encode_inputs, from_query, to_query
from .units import Amount, Quantity, Unit, convert, normalize
from .utils import percent, usd

__all__ = [
	"amort_schedule",
	"aggregate_yearly",
	"monthly_payment",
	"remaining_balance",
	"summarize",
	"DivisionByZeroError",
	"InvalidInputError",
	"InvestmentInputs",
	"MortgageInputs",
	"validate_inputs",
	"RentVsBuyModel",
	"calculate_results",
	"CalculationResults",
	"CostBreakdown",
	"MonthlyBreakdown",
	"YearlyResult",
	"decode_inputs",
	"drop_invalid",
	"encode_inputs",
	"from_query",
	"to_query",
	"Amount",
	"Quantity",
	"Unit",
	"convert",
	"normalize",
	"percent",
	"usd",
]
