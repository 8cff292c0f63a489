"""
Financial Projection Engine

Stateless calculators for home purchase and rental investment analysis.
All calculators share the fixed-rate amortization formula and round
currency to cents only in their outputs.
"""

from app.calculations import (
    amortization,
    mortgage,
    affordability,
    investment,
    rent_vs_buy,
)
from app.calculations.errors import CalculationError, InvalidInputError

__all__ = [
    "amortization",
    "mortgage",
    "affordability",
    "investment",
    "rent_vs_buy",
    "CalculationError",
    "InvalidInputError",
]
