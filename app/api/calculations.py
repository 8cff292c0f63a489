"""
Financial calculator API endpoints.

These endpoints accept inputs and return calculated results. Request
models enforce the published input bounds; the calculators validate again
so they stay safe to call directly.
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from app.calculations import affordability, amortization, investment, mortgage, rent_vs_buy
from app.calculations.common import round_currency
from app.calculations.errors import CalculationError
from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _bad_request(error: CalculationError) -> HTTPException:
    logger.info(f"Rejected calculator input: {error}")
    return HTTPException(status_code=400, detail=str(error))


# ============================================================================
# MORTGAGE
# ============================================================================


class MortgageInput(BaseModel):
    """Input for the mortgage calculator."""

    property_price: float = Field(gt=0, le=100_000_000)
    down_payment: float = Field(ge=0)
    term_years: int = Field(default=30, ge=1, le=50)
    annual_rate_percent: float = Field(ge=0, le=30)

    # Escrow: tax and insurance are annual, PMI and HOA monthly
    property_tax: float = Field(default=0.0, ge=0)
    home_insurance: float = Field(default=0.0, ge=0)
    pmi: float = Field(default=0.0, ge=0)
    hoa_fees: float = Field(default=0.0, ge=0)

    start_date: Optional[date] = None
    full_schedule: Optional[bool] = None


@router.post("/mortgage")
async def calculate_mortgage(
    inputs: MortgageInput, settings: Settings = Depends(get_settings)
):
    """Monthly cost breakdown and amortization schedule for a purchase."""
    full_schedule = inputs.full_schedule
    if full_schedule is None:
        full_schedule = settings.schedule_mode == "full"

    try:
        plan = mortgage.plan_mortgage(
            property_price=inputs.property_price,
            down_payment=inputs.down_payment,
            annual_rate_percent=inputs.annual_rate_percent,
            term_years=inputs.term_years,
            property_tax=inputs.property_tax,
            home_insurance=inputs.home_insurance,
            pmi=inputs.pmi,
            hoa_fees=inputs.hoa_fees,
            truncated_schedule=not full_schedule,
            start_date=inputs.start_date,
        )
    except CalculationError as e:
        raise _bad_request(e)

    return plan.to_dict()


# ============================================================================
# AFFORDABILITY
# ============================================================================


class AffordabilityInput(BaseModel):
    """Input for the affordability calculator."""

    annual_income: float = Field(gt=0)
    monthly_debts: float = Field(default=0.0, ge=0)
    down_payment: float = Field(ge=0)
    annual_rate_percent: float = Field(ge=0, le=30)
    term_years: int = Field(default=30, ge=1, le=50)
    property_tax_rate_percent: float = Field(default=1.2, ge=0, le=10)
    insurance_rate_percent: float = Field(default=0.5, ge=0, le=5)
    max_dti_ratio: float = Field(default=43.0, ge=0, le=100)


@router.post("/affordability")
async def calculate_affordability(inputs: AffordabilityInput):
    """Maximum home price that fits the debt-to-income ceiling."""
    try:
        result = affordability.calculate_affordability(**inputs.model_dump())
    except CalculationError as e:
        raise _bad_request(e)

    return {"inputs": inputs.model_dump(), "results": result.to_dict()}


# ============================================================================
# RENTAL ROI
# ============================================================================


class ROIInput(BaseModel):
    """Input for the rental investment calculator."""

    purchase_price: float = Field(gt=0)
    down_payment: float = Field(ge=0)
    closing_costs: float = Field(default=0.0, ge=0)
    renovation_costs: float = Field(default=0.0, ge=0)
    monthly_rent: float = Field(gt=0)
    vacancy_rate: float = Field(default=5.0, ge=0, le=100)
    property_management: float = Field(default=10.0, ge=0, le=100)
    maintenance_reserve: float = Field(default=5.0, ge=0, le=100)
    property_tax: float = Field(ge=0)
    insurance: float = Field(ge=0)
    hoa_fees: float = Field(default=0.0, ge=0)

    # Financing is optional; omit both for a cash purchase
    annual_rate_percent: Optional[float] = Field(default=None, ge=0, le=30)
    term_years: Optional[int] = Field(default=None, ge=1, le=50)

    appreciation_rate: float = Field(default=3.0, ge=-20, le=50)
    holding_period: int = Field(default=5, ge=1, le=50)


@router.post("/roi")
async def calculate_roi(inputs: ROIInput):
    """Cash-on-cash, cap rate and holding-period returns for a rental."""
    try:
        analysis = investment.analyze_investment(**inputs.model_dump())
    except CalculationError as e:
        raise _bad_request(e)

    return {"inputs": inputs.model_dump(), **analysis.to_dict()}


# ============================================================================
# RENT VS BUY
# ============================================================================


class RentVsBuyInput(BaseModel):
    """Input for the rent vs buy comparison."""

    # Buying
    home_price: float = Field(gt=0)
    down_payment: float = Field(ge=0)
    annual_rate_percent: float = Field(ge=0, le=30)
    term_years: int = Field(default=30, ge=1, le=50)
    property_tax: float = Field(ge=0)
    insurance: float = Field(ge=0)
    maintenance: float = Field(ge=0)
    hoa_fees: float = Field(default=0.0, ge=0)
    home_appreciation: float = Field(default=3.0, ge=-20, le=50)

    # Renting
    monthly_rent: float = Field(gt=0)
    rent_increase: float = Field(default=3.0, ge=0, le=20)
    renters_insurance: float = Field(default=200.0, ge=0)

    # Investment assumptions
    investment_return: float = Field(default=7.0, ge=-20, le=50)
    time_horizon: int = Field(default=10, ge=1, le=50)
    tax_bracket: float = Field(default=25.0, ge=0, le=50)


@router.post("/rent-vs-buy")
async def calculate_rent_vs_buy(inputs: RentVsBuyInput):
    """Year-by-year net worth of buying versus renting and investing."""
    try:
        result = rent_vs_buy.simulate_rent_vs_buy(**inputs.model_dump())
    except CalculationError as e:
        raise _bad_request(e)

    return {"inputs": inputs.model_dump(), **result.to_dict()}


# ============================================================================
# AMORTIZATION
# ============================================================================


class AmortizationInput(BaseModel):
    """Input for a bare loan amortization schedule."""

    principal: float = Field(ge=0)
    annual_rate_percent: float = Field(ge=0, le=30)
    term_years: int = Field(ge=1, le=50)
    truncated: bool = False
    start_date: Optional[date] = None


class AmortizationResponse(BaseModel):
    """Schedule with its closed-form totals."""

    monthly_payment: float
    total_interest: float
    total_principal: float
    schedule: List[dict]


@router.post("/amortization", response_model=AmortizationResponse)
async def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""
    try:
        terms = amortization.LoanTerms(
            inputs.principal, inputs.annual_rate_percent, inputs.term_years
        )
    except CalculationError as e:
        raise _bad_request(e)

    schedule = amortization.generate_schedule(
        terms, truncated=inputs.truncated, start_date=inputs.start_date
    )

    return AmortizationResponse(
        monthly_payment=round_currency(
            amortization.level_payment(terms.principal, terms.monthly_rate, terms.num_payments)
        ),
        total_interest=round_currency(amortization.calculate_total_interest(terms)),
        total_principal=round_currency(terms.principal),
        schedule=[row.to_dict() for row in schedule],
    )
