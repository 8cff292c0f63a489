"""
Mortgage Cost Planning

Combines principal and interest with escrow items (property tax,
homeowners insurance, PMI, HOA) into a monthly and over-term cost breakdown.

Escrow inputs follow the usual quoting convention: property tax and
insurance are annual amounts, PMI and HOA fees are monthly amounts.
"""

import logging
from dataclasses import dataclass, asdict, field
from datetime import date
from typing import List, Dict, Optional

from app.calculations.amortization import (
    AmortizationRow,
    LoanTerms,
    MONTHS_PER_YEAR,
    generate_schedule,
    level_payment,
    monthly_rate,
)
from app.calculations.common import (
    MAX_PROPERTY_PRICE,
    require_non_negative,
    require_positive,
    require_range,
    round_currency,
    round_percent,
)
from app.calculations.errors import InvalidInputError

logger = logging.getLogger(__name__)

# Down payment percentage at or above which PMI is dropped
PMI_THRESHOLD_PERCENT = 20.0


@dataclass(frozen=True)
class MortgageTotals:
    total_payments: float
    total_interest: float
    total_principal: float


@dataclass(frozen=True)
class MortgageBreakdown:
    """Monthly housing cost, rounded to cents."""

    principal_and_interest: float
    escrow_tax: float
    escrow_insurance: float
    pmi: float
    hoa: float
    total_monthly: float
    totals_over_term: MortgageTotals

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class MortgagePlan:
    """Breakdown plus the schedule it was derived from."""

    property_price: float
    down_payment: float
    loan_amount: float
    down_payment_percent: float
    terms: LoanTerms
    breakdown: MortgageBreakdown
    schedule: List[AmortizationRow] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "inputs": {
                "property_price": self.property_price,
                "down_payment": self.down_payment,
                "down_payment_percent": self.down_payment_percent,
                "loan_amount": round_currency(self.loan_amount),
                "term_years": self.terms.term_years,
                "annual_rate_percent": self.terms.annual_rate_percent,
            },
            "breakdown": self.breakdown.to_dict(),
            "schedule": [row.to_dict() for row in self.schedule],
        }


def calculate_down_payment_percent(property_price: float, down_payment: float) -> float:
    """Down payment as a 0-100 percentage of price."""
    # Multiply first so exact thresholds like 20000 / 100000 land on 20.0
    return down_payment * 100 / property_price


def pmi_applies(down_payment_percent: float) -> bool:
    return down_payment_percent < PMI_THRESHOLD_PERCENT


def plan_mortgage(
    property_price: float,
    down_payment: float,
    annual_rate_percent: float,
    term_years: int = 30,
    property_tax: float = 0.0,
    home_insurance: float = 0.0,
    pmi: float = 0.0,
    hoa_fees: float = 0.0,
    include_schedule: bool = True,
    truncated_schedule: bool = True,
    start_date: Optional[date] = None,
) -> MortgagePlan:
    """
    Build the monthly cost breakdown for a purchase.

    Args:
        property_price: Purchase price
        down_payment: Cash paid at closing toward the price
        annual_rate_percent: Annual interest rate as a percentage
        term_years: Loan term in years
        property_tax: Annual property tax
        home_insurance: Annual homeowners insurance
        pmi: Monthly PMI premium; ignored once down payment reaches 20%
        hoa_fees: Monthly HOA dues
        include_schedule: Attach an amortization schedule
        truncated_schedule: First year plus anniversaries instead of every month
        start_date: Date of first payment for dated schedule rows

    Returns:
        MortgagePlan with breakdown and optional schedule

    Raises:
        InvalidInputError: If the price, down payment or escrow figures are invalid,
            or the down payment leaves nothing to finance
    """
    property_price = require_positive("property_price", property_price)
    property_price = require_range("property_price", property_price, high=MAX_PROPERTY_PRICE)
    down_payment = require_non_negative("down_payment", down_payment)
    property_tax = require_non_negative("property_tax", property_tax)
    home_insurance = require_non_negative("home_insurance", home_insurance)
    pmi = require_non_negative("pmi", pmi)
    hoa_fees = require_non_negative("hoa_fees", hoa_fees)

    loan_amount = property_price - down_payment
    if loan_amount <= 0:
        raise InvalidInputError(
            "down_payment", "must be less than the property price", down_payment
        )

    terms = LoanTerms(loan_amount, annual_rate_percent, term_years)
    num_payments = terms.num_payments

    monthly_pi = level_payment(loan_amount, terms.monthly_rate, num_payments)

    # Annual escrow spread evenly across the year
    monthly_tax = property_tax / MONTHS_PER_YEAR
    monthly_insurance = home_insurance / MONTHS_PER_YEAR

    down_payment_percent = calculate_down_payment_percent(property_price, down_payment)
    monthly_pmi = pmi if pmi_applies(down_payment_percent) else 0.0
    if pmi and not monthly_pmi:
        logger.debug(
            "Dropping PMI of %.2f at %.2f%% down", pmi, down_payment_percent
        )

    total_monthly = monthly_pi + monthly_tax + monthly_insurance + monthly_pmi + hoa_fees

    total_payments = total_monthly * num_payments
    total_interest = monthly_pi * num_payments - loan_amount

    breakdown = MortgageBreakdown(
        principal_and_interest=round_currency(monthly_pi),
        escrow_tax=round_currency(monthly_tax),
        escrow_insurance=round_currency(monthly_insurance),
        pmi=round_currency(monthly_pmi),
        hoa=round_currency(hoa_fees),
        total_monthly=round_currency(total_monthly),
        totals_over_term=MortgageTotals(
            total_payments=round_currency(total_payments),
            total_interest=round_currency(total_interest),
            total_principal=round_currency(loan_amount),
        ),
    )

    schedule = []
    if include_schedule:
        schedule = generate_schedule(
            terms, truncated=truncated_schedule, start_date=start_date
        )

    return MortgagePlan(
        property_price=property_price,
        down_payment=down_payment,
        loan_amount=loan_amount,
        down_payment_percent=round_percent(down_payment_percent),
        terms=terms,
        breakdown=breakdown,
        schedule=schedule,
    )


def monthly_housing_cost(
    home_price: float,
    down_payment: float,
    annual_rate_percent: float,
    term_years: int,
    property_tax_rate_percent: float,
    insurance_rate_percent: float,
) -> Dict[str, float]:
    """
    Monthly housing cost at a candidate price, escrow priced as a percent of value.

    Pure function of price used by the affordability search. A down payment
    covering the whole price leaves no loan, so P&I is zero but escrow is owed.

    Returns:
        Dict with principal_and_interest, escrow_tax, escrow_insurance and total
        at full precision
    """
    loan_amount = home_price - down_payment
    rate = monthly_rate(annual_rate_percent)
    num_payments = term_years * MONTHS_PER_YEAR

    monthly_pi = level_payment(loan_amount, rate, num_payments) if loan_amount > 0 else 0.0
    monthly_tax = home_price * property_tax_rate_percent / 100 / MONTHS_PER_YEAR
    monthly_insurance = home_price * insurance_rate_percent / 100 / MONTHS_PER_YEAR

    return {
        "principal_and_interest": monthly_pi,
        "escrow_tax": monthly_tax,
        "escrow_insurance": monthly_insurance,
        "total": monthly_pi + monthly_tax + monthly_insurance,
    }
