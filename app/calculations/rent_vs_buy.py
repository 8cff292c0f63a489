"""
Rent vs Buy Simulation

Year-by-year comparison of owning a home against renting and investing
the money the owner would otherwise spend.

Each year starts from the previous year's ending loan balance, home value,
rent and investment balance, so years are simulated strictly in order.

The renter's investment only ever receives contributions. In years where
renting costs more than owning, the balance compounds but is never drawn
down to cover the difference.
"""

import logging
from dataclasses import dataclass, asdict
from typing import List, Dict, Optional

from app.calculations.amortization import (
    LoanTerms,
    MONTHS_PER_YEAR,
    amortize_months,
    level_payment,
)
from app.calculations.common import (
    MAX_GROWTH_PERCENT,
    MAX_RENT_INCREASE_PERCENT,
    MAX_TAX_BRACKET_PERCENT,
    MIN_GROWTH_PERCENT,
    require_non_negative,
    require_positive,
    require_range,
    require_term_years,
    round_currency,
)
from app.calculations.errors import InvalidInputError

logger = logging.getLogger(__name__)

ADVANTAGE_BUYING = "buying"
ADVANTAGE_RENTING = "renting"


@dataclass(frozen=True)
class YearlyComparison:
    """End-of-year position of the buyer and the renter."""

    year: int
    buying_annual_cost: float
    buying_cumulative_cost: float
    home_equity: float
    renting_annual_cost: float
    renting_cumulative_cost: float
    investment_value: float
    home_value: float
    loan_balance: float
    tax_savings: float


@dataclass(frozen=True)
class RentVsBuySummary:
    buying_net_worth: float
    renting_net_worth: float
    advantage: str
    advantage_amount: float
    break_even_year: Optional[int]


@dataclass(frozen=True)
class MonthlyBuyingCost:
    mortgage: float
    taxes: float
    insurance: float
    maintenance: float
    hoa: float
    total: float


@dataclass(frozen=True)
class MonthlyRentingCost:
    rent: float
    insurance: float
    total: float


@dataclass(frozen=True)
class RentVsBuyResult:
    years: List[YearlyComparison]
    summary: RentVsBuySummary
    monthly_buying: MonthlyBuyingCost
    monthly_renting: MonthlyRentingCost
    loan_amount: float
    time_horizon: int

    def to_dict(self) -> Dict:
        return asdict(self)


def grow_investment(
    balance: float, monthly_contribution: float, annual_return_percent: float
) -> float:
    """
    Advance the renter's investment by one year.

    With a positive contribution the balance compounds monthly and the
    contribution is added after each month's growth. Otherwise the balance
    takes one full year of growth and nothing is added or withdrawn.
    """
    if monthly_contribution > 0:
        monthly_growth = 1 + annual_return_percent / 100 / MONTHS_PER_YEAR
        for _ in range(MONTHS_PER_YEAR):
            balance *= monthly_growth
            balance += monthly_contribution
        return balance

    return balance * (1 + annual_return_percent / 100)


def simulate_rent_vs_buy(
    home_price: float,
    down_payment: float,
    annual_rate_percent: float,
    monthly_rent: float,
    term_years: int = 30,
    property_tax: float = 0.0,
    insurance: float = 0.0,
    maintenance: float = 0.0,
    hoa_fees: float = 0.0,
    home_appreciation: float = 3.0,
    rent_increase: float = 3.0,
    renters_insurance: float = 200.0,
    investment_return: float = 7.0,
    time_horizon: int = 10,
    tax_bracket: float = 25.0,
) -> RentVsBuyResult:
    """
    Simulate buying versus renting over a time horizon.

    Args:
        home_price: Purchase price
        down_payment: Buyer's cash down; the renter invests this instead
        annual_rate_percent: Mortgage rate as a percentage
        monthly_rent: Starting monthly rent
        term_years: Mortgage term in years
        property_tax: Annual property tax
        insurance: Annual homeowners insurance
        maintenance: Annual maintenance
        hoa_fees: Monthly HOA dues
        home_appreciation: Annual home appreciation percent
        rent_increase: Annual rent growth percent
        renters_insurance: Annual renter's insurance
        investment_return: Annual return earned on the renter's investments
        time_horizon: Years to simulate
        tax_bracket: Marginal tax rate applied to mortgage interest

    Returns:
        RentVsBuyResult with one row per year (1..time_horizon) and a summary

    Raises:
        InvalidInputError: If any input is out of range
    """
    home_price = require_positive("home_price", home_price)
    down_payment = require_non_negative("down_payment", down_payment)
    monthly_rent = require_non_negative("monthly_rent", monthly_rent)
    property_tax = require_non_negative("property_tax", property_tax)
    insurance = require_non_negative("insurance", insurance)
    maintenance = require_non_negative("maintenance", maintenance)
    hoa_fees = require_non_negative("hoa_fees", hoa_fees)
    home_appreciation = require_range(
        "home_appreciation", home_appreciation, MIN_GROWTH_PERCENT, MAX_GROWTH_PERCENT
    )
    rent_increase = require_range(
        "rent_increase", rent_increase, 0, MAX_RENT_INCREASE_PERCENT
    )
    renters_insurance = require_non_negative("renters_insurance", renters_insurance)
    investment_return = require_range(
        "investment_return", investment_return, MIN_GROWTH_PERCENT, MAX_GROWTH_PERCENT
    )
    time_horizon = require_term_years("time_horizon", time_horizon)
    tax_bracket = require_range("tax_bracket", tax_bracket, 0, MAX_TAX_BRACKET_PERCENT)

    loan_amount = home_price - down_payment
    if loan_amount < 0:
        raise InvalidInputError(
            "down_payment", "must not exceed the home price", down_payment
        )

    terms = LoanTerms(loan_amount, annual_rate_percent, term_years)
    rate = terms.monthly_rate
    monthly_pi = level_payment(loan_amount, rate, terms.num_payments)

    loan_balance = loan_amount
    home_value = home_price
    current_rent = monthly_rent
    investment_balance = down_payment
    buying_cumulative = down_payment
    renting_cumulative = 0.0

    years = []
    break_even_year = None

    for year in range(1, time_horizon + 1):
        interest_paid, principal_paid, loan_balance = amortize_months(
            loan_balance, monthly_pi, rate, MONTHS_PER_YEAR
        )
        mortgage_paid = interest_paid + principal_paid

        # Interest deduction applied once per year
        tax_savings = interest_paid * tax_bracket / 100
        buying_annual = (
            mortgage_paid
            + property_tax
            + insurance
            + maintenance
            + hoa_fees * MONTHS_PER_YEAR
            - tax_savings
        )
        buying_cumulative += buying_annual

        home_value *= 1 + home_appreciation / 100
        equity = home_value - loan_balance

        renting_annual = current_rent * MONTHS_PER_YEAR + renters_insurance
        renting_cumulative += renting_annual

        monthly_savings = buying_annual / MONTHS_PER_YEAR - (
            current_rent + renters_insurance / MONTHS_PER_YEAR
        )
        investment_balance = grow_investment(
            investment_balance, monthly_savings, investment_return
        )

        if break_even_year is None and equity > investment_balance:
            break_even_year = year

        years.append(
            YearlyComparison(
                year=year,
                buying_annual_cost=round_currency(buying_annual),
                buying_cumulative_cost=round_currency(buying_cumulative),
                home_equity=round_currency(equity),
                renting_annual_cost=round_currency(renting_annual),
                renting_cumulative_cost=round_currency(renting_cumulative),
                investment_value=round_currency(investment_balance),
                home_value=round_currency(home_value),
                loan_balance=round_currency(loan_balance),
                tax_savings=round_currency(tax_savings),
            )
        )

        current_rent *= 1 + rent_increase / 100

    buying_net_worth = home_value - loan_balance
    renting_net_worth = investment_balance
    buying_advantage = buying_net_worth - renting_net_worth

    if break_even_year is None:
        logger.debug("No break-even year within %d years", time_horizon)

    summary = RentVsBuySummary(
        buying_net_worth=round_currency(buying_net_worth),
        renting_net_worth=round_currency(renting_net_worth),
        advantage=ADVANTAGE_BUYING if buying_advantage > 0 else ADVANTAGE_RENTING,
        advantage_amount=round_currency(abs(buying_advantage)),
        break_even_year=break_even_year,
    )

    monthly_tax = property_tax / MONTHS_PER_YEAR
    monthly_insurance = insurance / MONTHS_PER_YEAR
    monthly_maintenance = maintenance / MONTHS_PER_YEAR
    monthly_renters_insurance = renters_insurance / MONTHS_PER_YEAR

    return RentVsBuyResult(
        years=years,
        summary=summary,
        monthly_buying=MonthlyBuyingCost(
            mortgage=round_currency(monthly_pi),
            taxes=round_currency(monthly_tax),
            insurance=round_currency(monthly_insurance),
            maintenance=round_currency(monthly_maintenance),
            hoa=round_currency(hoa_fees),
            total=round_currency(
                monthly_pi + monthly_tax + monthly_insurance + monthly_maintenance + hoa_fees
            ),
        ),
        monthly_renting=MonthlyRentingCost(
            rent=round_currency(monthly_rent),
            insurance=round_currency(monthly_renters_insurance),
            total=round_currency(monthly_rent + monthly_renters_insurance),
        ),
        loan_amount=round_currency(loan_amount),
        time_horizon=time_horizon,
    )
