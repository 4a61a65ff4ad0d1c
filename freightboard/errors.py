"""Mini README: Exception hierarchy shared by the Freightboard packages.

Structure:
    * FinanceError - base class for every error raised by the engine.
    * ValidationError - user input rejected before a record is built.
    * DateRangeError - structurally invalid query windows.
    * UnsupportedCurrencyError - conversion requested from an unknown currency.

Malformed individual records never raise; they are excluded from the
ledger instead. These exceptions cover the calls that cannot be answered at
all, and each carries a single human-readable message.
"""

from __future__ import annotations

from typing import Optional


class FinanceError(Exception):
    """Base class for Freightboard finance errors."""


class ValidationError(FinanceError, ValueError):
    """Raised when form input does not meet the record requirements."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class DateRangeError(FinanceError, ValueError):
    """Raised when a query window is unparsable or ends before it starts."""


class UnsupportedCurrencyError(FinanceError, ValueError):
    """Raised when an amount is entered in a currency without a conversion rule."""
