"""
Home Affordability Solver

Finds the highest home price whose monthly housing cost fits within a
debt-to-income ceiling, by bisection over price.

Housing cost (P&I plus tax and insurance escrow priced as a percent of
value) never decreases as price rises, so the bracket always narrows
toward the affordability boundary.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict

from app.calculations.common import (
    MAX_INSURANCE_RATE_PERCENT,
    MAX_RATE_PERCENT,
    MAX_TAX_RATE_PERCENT,
    require_non_negative,
    require_positive,
    require_range,
    require_term_years,
    round_currency,
)
from app.calculations.amortization import MONTHS_PER_YEAR
from app.calculations.mortgage import monthly_housing_cost

logger = logging.getLogger(__name__)

# Home prices are quoted coarsely; finer brackets add nothing
PRICE_TOLERANCE = 100.0
MAX_ITERATIONS = 200

STATUS_OK = "ok"
STATUS_DEBTS_EXCEED_DTI = "debts_exceed_dti"


@dataclass(frozen=True)
class AffordabilityResult:
    """Maximum affordable price and the payment it implies."""

    max_home_price: float
    max_loan_amount: float
    monthly_budget: float
    estimated_payment: float
    principal_and_interest: float
    gross_monthly_income: float
    existing_debts: float
    dti_ratio: float
    status: str = STATUS_OK
    message: str = ""
    iterations: int = 0

    @property
    def is_affordable(self) -> bool:
        return self.status == STATUS_OK

    def to_dict(self) -> Dict:
        return asdict(self)


def calculate_affordability(
    annual_income: float,
    monthly_debts: float,
    down_payment: float,
    annual_rate_percent: float,
    term_years: int = 30,
    property_tax_rate_percent: float = 1.2,
    insurance_rate_percent: float = 0.5,
    max_dti_ratio: float = 43.0,
) -> AffordabilityResult:
    """
    Solve for the maximum home price under a DTI ceiling.

    Args:
        annual_income: Gross annual income
        monthly_debts: Existing monthly debt payments
        down_payment: Cash available toward the purchase
        annual_rate_percent: Annual mortgage rate as a percentage
        term_years: Loan term in years
        property_tax_rate_percent: Annual property tax as a percent of price
        insurance_rate_percent: Annual insurance as a percent of price
        max_dti_ratio: Maximum debt-to-income ratio, 0-100

    Returns:
        AffordabilityResult. When existing debts already use up the DTI
        ceiling the result is all zeros with status "debts_exceed_dti".

    Raises:
        InvalidInputError: If any input is out of range
    """
    annual_income = require_positive("annual_income", annual_income)
    monthly_debts = require_non_negative("monthly_debts", monthly_debts)
    down_payment = require_non_negative("down_payment", down_payment)
    annual_rate_percent = require_range(
        "annual_rate_percent", annual_rate_percent, 0, MAX_RATE_PERCENT
    )
    term_years = require_term_years("term_years", term_years)
    property_tax_rate_percent = require_range(
        "property_tax_rate_percent", property_tax_rate_percent, 0, MAX_TAX_RATE_PERCENT
    )
    insurance_rate_percent = require_range(
        "insurance_rate_percent", insurance_rate_percent, 0, MAX_INSURANCE_RATE_PERCENT
    )
    max_dti_ratio = require_range("max_dti_ratio", max_dti_ratio, 0, 100)

    monthly_income = annual_income / MONTHS_PER_YEAR
    monthly_budget = monthly_income * max_dti_ratio / 100 - monthly_debts

    if monthly_budget <= 0:
        logger.debug(
            "Debts of %.2f exceed DTI ceiling of %.2f%%", monthly_debts, max_dti_ratio
        )
        return AffordabilityResult(
            max_home_price=0.0,
            max_loan_amount=0.0,
            monthly_budget=round_currency(monthly_budget),
            estimated_payment=0.0,
            principal_and_interest=0.0,
            gross_monthly_income=round_currency(monthly_income),
            existing_debts=round_currency(monthly_debts),
            dti_ratio=max_dti_ratio,
            status=STATUS_DEBTS_EXCEED_DTI,
            message="Your current debts exceed the maximum DTI ratio",
        )

    def cost_at(price: float) -> Dict[str, float]:
        return monthly_housing_cost(
            price,
            down_payment,
            annual_rate_percent,
            term_years,
            property_tax_rate_percent,
            insurance_rate_percent,
        )

    # Twice the budget's undiscounted payments, on top of the cash down payment,
    # always costs more than the budget
    low = 0.0
    high = monthly_budget * MONTHS_PER_YEAR * term_years * 2 + down_payment
    max_home_price = 0.0
    iterations = 0

    while high - low > PRICE_TOLERANCE and iterations < MAX_ITERATIONS:
        iterations += 1
        mid = (low + high) / 2

        if cost_at(mid)["total"] <= monthly_budget:
            max_home_price = mid
            low = mid
        else:
            high = mid

    logger.debug(
        "Affordability converged to %.2f after %d iterations", max_home_price, iterations
    )

    # Recompute once at the converged price
    final_cost = cost_at(max_home_price)
    max_loan_amount = max(0.0, max_home_price - down_payment)

    return AffordabilityResult(
        max_home_price=round_currency(max_home_price),
        max_loan_amount=round_currency(max_loan_amount),
        monthly_budget=round_currency(monthly_budget),
        estimated_payment=round_currency(final_cost["total"]),
        principal_and_interest=round_currency(final_cost["principal_and_interest"]),
        gross_monthly_income=round_currency(monthly_income),
        existing_debts=round_currency(monthly_debts),
        dti_ratio=max_dti_ratio,
        iterations=iterations,
    )

