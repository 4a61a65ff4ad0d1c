"""Mini README: Conversion of entered amounts into the settlement currency.

Operators may type amounts in RSD; records are always stored in EUR. The
conversion uses the fixed divisor from settings and happens once, when a
record payload is built, never inside the simulation.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from ..configuration import get_settings
from ..errors import UnsupportedCurrencyError
from .records import to_number
from .simulation import round2


class InputCurrency(str, Enum):
    EUR = "EUR"
    RSD = "RSD"

    @classmethod
    def from_str(cls, value: object) -> "InputCurrency":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as error:
            raise UnsupportedCurrencyError(f"Unsupported input currency: {value}") from error


def convert(amount: float, from_currency: object, *, divisor: Optional[float] = None) -> float:
    """Return ``amount`` expressed in EUR."""

    currency = InputCurrency.from_str(from_currency)
    value = to_number(amount)
    if currency is InputCurrency.EUR:
        return value
    rate = divisor if divisor is not None else get_settings().rsd_to_eur_divisor
    return round2(value / rate)
