"""Calculation results: a quantity shown in a display unit, or a price quote."""
from typing import Optional
from qpcalc.domain.Unit import Unit
from qpcalc.utilities.constants import VOLUME, SMALL_VOLUME_PRECISION


class CalculationResult:
    def __init__(self, value: float, unit: Unit, precision: int):
        self.value = value
        self.unit = unit
        self.precision = precision

    @property
    def display_precision(self) -> int:
        '''Decimals actually rendered; small volumes get extra digits.'''
        if self.unit.category == VOLUME and self.value < 1:
            return SMALL_VOLUME_PRECISION
        return self.precision

    @property
    def formatted(self) -> str:
        return f"{self.value:.{self.display_precision}f} {self.unit.symbol}"

    def __str__(self) -> str:
        return self.formatted

    __repr__ = __str__

    def to_dict(self):
        return {
            "value": self.value,
            "unit": self.unit.symbol,
            "precision": self.precision,
            "formatted": self.formatted,
        }


class PriceQuote:
    def __init__(self, value: float, category: str, precision: int, currency: str,
                 formatted: Optional[str] = None):
        self.value = value
        self.category = category
        self.precision = precision
        self.currency = currency
        # The offline worker hands back an already formatted string
        self._formatted = formatted

    @property
    def formatted(self) -> str:
        if self._formatted is not None:
            return self._formatted
        return f"{self.currency}{self.value:.{self.precision}f}"

    def __str__(self) -> str:
        return self.formatted

    __repr__ = __str__

    def to_dict(self):
        return {
            "value": self.value,
            "category": self.category,
            "precision": self.precision,
            "formatted": self.formatted,
        }
