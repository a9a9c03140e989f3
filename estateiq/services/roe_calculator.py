"""
Return-on-equity and return-on-investment calculator for rental properties.

Pure arithmetic over the cash-flow figures a user enters. Results keep
full float precision; rounding happens only when the narrative is rendered.

Metrics:
    NOI           = annual rental income - annual expenses
    Equity        = current market value - current loan balance
    Cash flow     = NOI - annual debt service
    Unlevered ROE = NOI / equity * 100
    Levered ROE   = cash flow / equity * 100

Both ROE figures are 0 when equity is 0. Figures that overflow a float are
rejected with a ValidationError instead of producing infinity or NaN.

ROI metrics (see compute_roi) are relative to the purchase price instead.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping

from estateiq.errors import ValidationError
from estateiq.utils.numbers import parse_value

# Request keys for the five inputs
INPUT_FIELDS = {
    "annual_rental_income": "annualRentalIncome",
    "annual_expenses": "annualExpenses",
    "current_market_value": "currentMarketValue",
    "current_loan_balance": "currentLoanBalance",
    "annual_debt_service": "annualDebtService",
}


@dataclass(frozen=True)
class RoeResult:
    annual_rental_income: float
    annual_expenses: float
    current_market_value: float
    current_loan_balance: float
    annual_debt_service: float
    noi: float
    equity: float
    cash_flow: float
    unlevered_roe: float
    levered_roe: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _require_finite(*figures: float) -> None:
    if not all(math.isfinite(value) for value in figures):
        raise ValidationError("Property figures are out of range")


def _percent(amount: float, base: float) -> float:
    if base == 0:
        return 0.0
    percent = (amount * 100) / base
    if not math.isfinite(percent):
        # amount * 100 overflowed; divide first
        percent = amount / base * 100
    _require_finite(percent)
    return percent


def compute(
    annual_rental_income: float,
    annual_expenses: float,
    current_market_value: float,
    current_loan_balance: float,
    annual_debt_service: float,
) -> RoeResult:
    """
    Compute NOI, equity, cash flow and unlevered/levered ROE.

    Example:
        compute(24000, 9600, 300000, 200000, 12000)
        -> noi=14400, equity=100000, unlevered_roe=14.4, levered_roe=2.4
    """
    income = float(annual_rental_income)
    expenses = float(annual_expenses)
    market_value = float(current_market_value)
    loan_balance = float(current_loan_balance)
    debt_service = float(annual_debt_service)

    noi = income - expenses
    equity = market_value - loan_balance
    cash_flow = noi - debt_service
    _require_finite(noi, equity, cash_flow)

    return RoeResult(
        annual_rental_income=income,
        annual_expenses=expenses,
        current_market_value=market_value,
        current_loan_balance=loan_balance,
        annual_debt_service=debt_service,
        noi=noi,
        equity=equity,
        cash_flow=cash_flow,
        unlevered_roe=_percent(noi, equity),
        levered_roe=_percent(cash_flow, equity),
    )


def compute_from_payload(payload: Mapping[str, Any]) -> RoeResult:
    """Parse the five raw request figures (numbers or numeric strings) and compute."""
    values = {
        field: parse_value(payload.get(key), 0.0)
        for field, key in INPUT_FIELDS.items()
    }
    return compute(**values)


def recompute(record: Any) -> RoeResult:
    """Recompute the derived figures of a stored analysis from its own inputs."""
    return compute(**{field: getattr(record, field) for field in INPUT_FIELDS})


def _money(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def build_narrative(result: RoeResult) -> str:
    """Plain-text summary of an ROE result."""
    lines = [
        f"Net operating income is {_money(result.noi)} per year "
        f"({_money(result.annual_rental_income)} rent less {_money(result.annual_expenses)} expenses).",
        f"Current equity is {_money(result.equity)} "
        f"({_money(result.current_market_value)} market value less {_money(result.current_loan_balance)} loan balance).",
    ]

    if result.equity == 0:
        lines.append("With no equity in the property, return on equity cannot be measured and is reported as 0%.")
        return " ".join(lines)

    lines.append(f"Unlevered ROE: {result.unlevered_roe:.2f}%.")
    lines.append(
        f"After {_money(result.annual_debt_service)} of annual debt service, cash flow is "
        f"{_money(result.cash_flow)} and levered ROE is {result.levered_roe:.2f}%."
    )
    if result.equity < 0:
        lines.append("The loan balance exceeds market value, so the property is underwater and ROE figures are inverted.")
    elif result.cash_flow < 0:
        lines.append("Debt service exceeds net operating income, so the property is cash-flow negative.")
    return " ".join(lines)


@dataclass(frozen=True)
class RoiResult:
    purchase_price: float
    current_market_value: float
    annual_rental_income: float
    annual_expenses: float
    noi: float
    cap_rate: float
    cash_on_cash: float
    roi_percentage: float
    roi_category: str
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def roi_category(roi_percentage: float) -> str:
    if roi_percentage >= 15:
        return "excellent"
    if roi_percentage >= 10:
        return "good"
    if roi_percentage >= 5:
        return "moderate"
    if roi_percentage >= 0:
        return "fair"
    return "poor"


def roi_recommendation(roi_percentage: float, noi: float) -> str:
    if roi_percentage < 0 or noi < 0:
        return "sell"
    if roi_percentage < 5:
        return "improve"
    return "hold"


def compute_roi(
    purchase_price: float,
    current_market_value: float,
    annual_rental_income: float,
    annual_expenses: float,
) -> RoiResult:
    """
    Compute return on the purchase price of a property.

    Cap rate and cash-on-cash are NOI over the purchase price; ROI is the
    appreciation of market value over the purchase price. All three are 0
    when the purchase price is not positive.

    Example:
        compute_roi(250000, 300000, 30000, 10000)
        -> noi=20000, cap_rate=8.0, cash_on_cash=8.0, roi_percentage=20.0 (excellent)
    """
    price = float(purchase_price)
    market_value = float(current_market_value)
    income = float(annual_rental_income)
    expenses = float(annual_expenses)

    noi = income - expenses
    appreciation = market_value - price
    _require_finite(noi, appreciation)

    # No debt service is known here, so cash flow equals NOI
    cap_rate = _percent(noi, price) if price > 0 else 0.0
    roi_percentage = _percent(appreciation, price) if price > 0 else 0.0

    return RoiResult(
        purchase_price=price,
        current_market_value=market_value,
        annual_rental_income=income,
        annual_expenses=expenses,
        noi=noi,
        cap_rate=cap_rate,
        cash_on_cash=cap_rate,
        roi_percentage=roi_percentage,
        roi_category=roi_category(roi_percentage),
        recommendation=roi_recommendation(roi_percentage, noi),
    )
