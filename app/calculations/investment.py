"""
Rental Investment Returns

Cash-on-cash return, cap rate and holding-period ROI for a rental
acquisition.

Management and maintenance are charged as a percentage of gross rent,
not of rent after vacancy. This matches the calculator's published
results and is intentional.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Optional

from app.calculations.amortization import MONTHS_PER_YEAR, calculate_payment
from app.calculations.common import (
    MAX_GROWTH_PERCENT,
    MAX_RATE_PERCENT,
    MIN_GROWTH_PERCENT,
    require_non_negative,
    require_positive,
    require_range,
    require_term_years,
    round_currency,
    round_percent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvestmentReturns:
    """Return metrics, all on a 0-100 percentage scale."""

    cash_on_cash_percent: float
    cap_rate_percent: float
    total_roi_percent: float
    annualized_roi_percent: float
    projected_future_value: float


@dataclass(frozen=True)
class MonthlyCashFlow:
    gross_rent: float
    effective_rent: float
    mortgage: float
    management: float
    maintenance: float
    taxes: float
    insurance: float
    hoa: float
    total_expenses: float
    cash_flow: float


@dataclass(frozen=True)
class InvestmentAnalysis:
    """Full analysis: acquisition, monthly operations, returns and projection."""

    purchase_price: float
    total_cash_invested: float
    loan_amount: float
    is_financed: bool
    monthly: MonthlyCashFlow
    annual_noi: float
    annual_cash_flow: float
    returns: InvestmentReturns
    holding_period: int
    total_appreciation: float
    total_cash_flow: float
    total_return: float

    def to_dict(self) -> Dict:
        return asdict(self)


def calculate_cap_rate(annual_noi: float, purchase_price: float) -> float:
    """Cap rate as a percentage. Independent of financing by definition."""
    return annual_noi / purchase_price * 100


def calculate_cash_on_cash(annual_cash_flow: float, total_cash_invested: float) -> float:
    """Cash-on-cash return as a percentage; zero when nothing was invested."""
    if total_cash_invested <= 0:
        return 0.0
    return annual_cash_flow / total_cash_invested * 100


def calculate_future_value(
    purchase_price: float, appreciation_rate_percent: float, years: int
) -> float:
    return purchase_price * (1 + appreciation_rate_percent / 100) ** years


def annualize_roi(total_roi_percent: float, years: int) -> float:
    """
    Geometric annualization of a holding-period ROI.

    A total loss of 100% or more has no real annual rate; it is
    reported as -100.
    """
    growth = 1 + total_roi_percent / 100
    if growth <= 0:
        return -100.0
    return (growth ** (1 / years) - 1) * 100


def analyze_investment(
    purchase_price: float,
    down_payment: float,
    monthly_rent: float,
    property_tax: float,
    insurance: float,
    closing_costs: float = 0.0,
    renovation_costs: float = 0.0,
    vacancy_rate: float = 5.0,
    property_management: float = 10.0,
    maintenance_reserve: float = 5.0,
    hoa_fees: float = 0.0,
    annual_rate_percent: Optional[float] = None,
    term_years: Optional[int] = None,
    appreciation_rate: float = 3.0,
    holding_period: int = 5,
) -> InvestmentAnalysis:
    """
    Analyze a rental acquisition.

    Args:
        purchase_price: Purchase price
        down_payment: Cash toward the price; equal to price for a cash purchase
        monthly_rent: Gross scheduled monthly rent
        property_tax: Annual property tax
        insurance: Annual insurance
        closing_costs: Closing costs paid in cash
        renovation_costs: Up-front renovation paid in cash
        vacancy_rate: Vacancy as a percent of gross rent
        property_management: Management fee as a percent of gross rent
        maintenance_reserve: Maintenance reserve as a percent of gross rent
        hoa_fees: Monthly HOA dues
        annual_rate_percent: Mortgage rate; None for an unfinanced purchase
        term_years: Mortgage term; None for an unfinanced purchase
        appreciation_rate: Annual appreciation percent (may be negative)
        holding_period: Years held, at least 1

    Returns:
        InvestmentAnalysis with rounded figures

    Raises:
        InvalidInputError: If any input is out of range
    """
    purchase_price = require_positive("purchase_price", purchase_price)
    down_payment = require_non_negative("down_payment", down_payment)
    monthly_rent = require_non_negative("monthly_rent", monthly_rent)
    property_tax = require_non_negative("property_tax", property_tax)
    insurance = require_non_negative("insurance", insurance)
    closing_costs = require_non_negative("closing_costs", closing_costs)
    renovation_costs = require_non_negative("renovation_costs", renovation_costs)
    vacancy_rate = require_range("vacancy_rate", vacancy_rate, 0, 100)
    property_management = require_range("property_management", property_management, 0, 100)
    maintenance_reserve = require_range("maintenance_reserve", maintenance_reserve, 0, 100)
    hoa_fees = require_non_negative("hoa_fees", hoa_fees)
    appreciation_rate = require_range(
        "appreciation_rate", appreciation_rate, MIN_GROWTH_PERCENT, MAX_GROWTH_PERCENT
    )
    holding_period = require_term_years("holding_period", holding_period)
    if annual_rate_percent is not None:
        annual_rate_percent = require_range(
            "annual_rate_percent", annual_rate_percent, 0, MAX_RATE_PERCENT
        )
    if term_years is not None:
        term_years = require_term_years("term_years", term_years)

    total_cash_invested = down_payment + closing_costs + renovation_costs
    loan_amount = purchase_price - down_payment

    # Financed only with a loan balance and both rate and term supplied
    is_financed = loan_amount > 0 and annual_rate_percent is not None and term_years is not None
    monthly_mortgage = 0.0
    if is_financed:
        monthly_mortgage = calculate_payment(loan_amount, annual_rate_percent, term_years)

    effective_rent = monthly_rent * (1 - vacancy_rate / 100)

    monthly_management = monthly_rent * property_management / 100
    monthly_maintenance = monthly_rent * maintenance_reserve / 100
    monthly_tax = property_tax / MONTHS_PER_YEAR
    monthly_insurance = insurance / MONTHS_PER_YEAR

    operating_expenses = (
        monthly_management + monthly_maintenance + monthly_tax + monthly_insurance + hoa_fees
    )
    total_monthly_expenses = monthly_mortgage + operating_expenses

    monthly_cash_flow = effective_rent - total_monthly_expenses
    annual_cash_flow = monthly_cash_flow * MONTHS_PER_YEAR

    # NOI excludes debt service
    annual_noi = (effective_rent - operating_expenses) * MONTHS_PER_YEAR

    cash_on_cash = calculate_cash_on_cash(annual_cash_flow, total_cash_invested)
    cap_rate = calculate_cap_rate(annual_noi, purchase_price)

    future_value = calculate_future_value(purchase_price, appreciation_rate, holding_period)
    total_appreciation = future_value - purchase_price

    total_cash_flow = annual_cash_flow * holding_period
    total_return = total_cash_flow + total_appreciation
    total_roi = total_return / total_cash_invested * 100 if total_cash_invested > 0 else 0.0
    annualized_roi = annualize_roi(total_roi, holding_period)

    if total_cash_invested <= 0:
        logger.debug("No cash invested; cash-on-cash and ROI reported as zero")

    return InvestmentAnalysis(
        purchase_price=purchase_price,
        total_cash_invested=round_currency(total_cash_invested),
        loan_amount=round_currency(max(0.0, loan_amount)),
        is_financed=is_financed,
        monthly=MonthlyCashFlow(
            gross_rent=round_currency(monthly_rent),
            effective_rent=round_currency(effective_rent),
            mortgage=round_currency(monthly_mortgage),
            management=round_currency(monthly_management),
            maintenance=round_currency(monthly_maintenance),
            taxes=round_currency(monthly_tax),
            insurance=round_currency(monthly_insurance),
            hoa=round_currency(hoa_fees),
            total_expenses=round_currency(total_monthly_expenses),
            cash_flow=round_currency(monthly_cash_flow),
        ),
        annual_noi=round_currency(annual_noi),
        annual_cash_flow=round_currency(annual_cash_flow),
        returns=InvestmentReturns(
            cash_on_cash_percent=round_percent(cash_on_cash),
            cap_rate_percent=round_percent(cap_rate),
            total_roi_percent=round_percent(total_roi),
            annualized_roi_percent=round_percent(annualized_roi),
            projected_future_value=round_currency(future_value),
        ),
        holding_period=holding_period,
        total_appreciation=round_currency(total_appreciation),
        total_cash_flow=round_currency(total_cash_flow),
        total_return=round_currency(total_return),
    )
