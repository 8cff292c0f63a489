"""
Loan Amortization Calculations

Level monthly payment and amortization schedule for fixed-rate,
fully amortizing loans. Every other calculator prices its debt service here.

Rates are annual percentages (6.0 means 6%). Intermediate math runs at full
float precision; values handed to callers are rounded to cents.
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import List, Dict, Optional, Tuple

from dateutil.relativedelta import relativedelta

from app.calculations.common import (
    MAX_RATE_PERCENT,
    require_non_negative,
    require_range,
    require_term_years,
    round_currency,
)

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class LoanTerms:
    """Principal, annual rate (percent) and term (years) of a fixed-rate loan."""

    principal: float
    annual_rate_percent: float
    term_years: int

    def __post_init__(self):
        object.__setattr__(self, "principal", require_non_negative("principal", self.principal))
        object.__setattr__(
            self,
            "annual_rate_percent",
            require_range(
                "annual_rate_percent", self.annual_rate_percent, 0, MAX_RATE_PERCENT
            ),
        )
        object.__setattr__(self, "term_years", require_term_years("term_years", self.term_years))

    @property
    def monthly_rate(self) -> float:
        return monthly_rate(self.annual_rate_percent)

    @property
    def num_payments(self) -> int:
        return self.term_years * MONTHS_PER_YEAR


@dataclass(frozen=True)
class AmortizationRow:
    """One payment period of a schedule, rounded to cents."""

    period: int
    payment: float
    principal_portion: float
    interest_portion: float
    remaining_balance: float
    cumulative_interest: float
    cumulative_principal: float
    payment_date: Optional[date] = None

    def to_dict(self) -> Dict:
        row = asdict(self)
        row["payment_date"] = self.payment_date.isoformat() if self.payment_date else None
        return row


def monthly_rate(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return annual_rate_percent / 100 / MONTHS_PER_YEAR


def level_payment(principal: float, rate: float, num_payments: int) -> float:
    """
    Level payment for an already-validated loan.

    Args:
        principal: Loan principal
        rate: Monthly rate as decimal
        num_payments: Number of monthly payments

    Returns:
        Monthly payment (straight-line principal / n when rate is zero)
    """
    if principal <= 0:
        return 0.0

    if rate == 0:
        return principal / num_payments

    growth = (1 + rate) ** num_payments
    return principal * rate * growth / (growth - 1)


def calculate_payment(
    principal: float, annual_rate_percent: float, term_years: int
) -> float:
    """
    Calculate the monthly principal and interest payment.

    Matches the standard PMT formula.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate as a percentage (6.0 for 6%)
        term_years: Loan term in years

    Returns:
        Monthly payment at full precision

    Raises:
        InvalidInputError: If any term is out of range
    """
    terms = LoanTerms(principal, annual_rate_percent, term_years)
    return level_payment(terms.principal, terms.monthly_rate, terms.num_payments)


def calculate_total_interest(terms: LoanTerms) -> float:
    """Total interest over the full term, derived from the closed-form payment."""
    payment = level_payment(terms.principal, terms.monthly_rate, terms.num_payments)
    return payment * terms.num_payments - terms.principal


def calculate_remaining_balance(terms: LoanTerms, payments_completed: int) -> float:
    """Calculate remaining loan balance after N payments."""
    if payments_completed <= 0:
        return terms.principal
    if payments_completed >= terms.num_payments:
        return 0.0

    rate = terms.monthly_rate
    payment = level_payment(terms.principal, rate, terms.num_payments)

    if rate == 0:
        return max(0.0, terms.principal - payment * payments_completed)

    balance = terms.principal * ((1 + rate) ** payments_completed) - payment * (
        ((1 + rate) ** payments_completed - 1) / rate
    )

    return max(0.0, balance)


def amortize_months(
    balance: float, payment: float, rate: float, months: int = MONTHS_PER_YEAR
) -> Tuple[float, float, float]:
    """
    Run the amortization recurrence for a number of months.

    Payments stop once the balance reaches zero; the last payment only
    covers what is owed.

    Returns:
        (interest_paid, principal_paid, ending_balance)
    """
    interest_paid = 0.0
    principal_paid = 0.0

    for _ in range(months):
        if balance <= 0:
            break
        interest = balance * rate
        principal_pmt = min(payment - interest, balance)
        interest_paid += interest
        principal_paid += principal_pmt
        balance -= principal_pmt

    return interest_paid, principal_paid, max(0.0, balance)


def full_precision_schedule(terms: LoanTerms) -> List[Dict]:
    """Unrounded rows for every period, for reconciliation against the closed form."""
    rate = terms.monthly_rate
    num_payments = terms.num_payments
    payment = level_payment(terms.principal, rate, num_payments)

    rows = []
    balance = terms.principal
    total_interest = 0.0
    total_principal = 0.0

    for period in range(1, num_payments + 1):
        interest = balance * rate

        if period == num_payments:
            # Final payment retires whatever float drift left on the balance
            principal_pmt = balance
            period_payment = principal_pmt + interest
            balance = 0.0
        else:
            principal_pmt = payment - interest
            period_payment = payment
            balance = max(0.0, balance - principal_pmt)

        total_interest += interest
        total_principal += principal_pmt

        rows.append(
            {
                "period": period,
                "payment": period_payment,
                "principal_portion": principal_pmt,
                "interest_portion": interest,
                "remaining_balance": balance,
                "cumulative_interest": total_interest,
                "cumulative_principal": total_principal,
            }
        )

    return rows


def is_display_period(period: int) -> bool:
    """First year monthly, then one row per loan anniversary."""
    return period <= MONTHS_PER_YEAR or period % MONTHS_PER_YEAR == 0


def generate_schedule(
    terms: LoanTerms,
    truncated: bool = False,
    start_date: Optional[date] = None,
) -> List[AmortizationRow]:
    """
    Generate an amortization schedule.

    Truncated mode is a display convenience: it returns the first 12 periods
    plus every anniversary period (period % 12 == 0). All periods are still
    computed, so cumulative columns in the returned rows are exact.

    Args:
        terms: Loan terms
        truncated: Return the display subset instead of every period
        start_date: Date of first payment; when given each row is dated

    Returns:
        List of amortization rows, ordered by period
    """
    schedule = []
    # Per-period portions are differences of the rounded running totals, so
    # the rounded rows sum to the rounded totals without drift
    prior_interest = 0.0
    prior_principal = 0.0

    for raw in full_precision_schedule(terms):
        period = raw["period"]
        cumulative_interest = round_currency(raw["cumulative_interest"])
        cumulative_principal = round_currency(raw["cumulative_principal"])
        principal_portion = round_currency(cumulative_principal - prior_principal)
        interest_portion = round_currency(cumulative_interest - prior_interest)
        prior_interest = cumulative_interest
        prior_principal = cumulative_principal

        if truncated and not is_display_period(period):
            continue

        payment_date = None
        if start_date is not None:
            payment_date = start_date + relativedelta(months=period - 1)

        schedule.append(
            AmortizationRow(
                period=period,
                payment=round_currency(raw["payment"]),
                principal_portion=principal_portion,
                interest_portion=interest_portion,
                remaining_balance=round_currency(raw["remaining_balance"]),
                cumulative_interest=cumulative_interest,
                cumulative_principal=cumulative_principal,
                payment_date=payment_date,
            )
        )

    return schedule
