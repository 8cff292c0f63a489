"""
Calculation Errors

Exceptions raised by the calculation engine when inputs cannot be computed.
"""

from typing import Optional


class CalculationError(ValueError):
    """Base error for the calculation engine."""


class InvalidInputError(CalculationError):
    """
    Raised when an input is out of range or structurally impossible.

    Always raised before any iteration starts, so no partial result exists.
    """

    def __init__(self, field: str, message: str, value: Optional[float] = None):
        self.field = field
        self.message = message
        self.value = value
        super().__init__(f"{field}: {message}")
