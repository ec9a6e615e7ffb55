# -*- coding: utf-8 -*-
"""
Validation errors raised by the commission and reminder calculators.

Each error names the offending field so the API layer can answer with a
precise 400 response.
"""


class CalculationError(ValueError):
    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self):
        return {"detail": self.message, "field": self.field}


class InvalidPolicy(CalculationError):
    """Unknown commission type."""


class InvalidAmount(CalculationError):
    """Negative, non-numeric or otherwise unacceptable money amount."""


class InvalidInput(CalculationError):
    """Malformed attendance, payment or transaction data."""
