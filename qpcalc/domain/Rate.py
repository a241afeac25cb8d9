"""Rate domain entity: price per canonical base unit plus the unit it was configured in."""
from qpcalc.domain.Unit import Unit


class Rate:
    def __init__(self, category: str, price_per_base_unit: float, anchor: Unit, price_per_anchor_unit: float):
        self.category = category
        self.price_per_base_unit = price_per_base_unit
        # Unit the user configured the rate in; display ladders are keyed on it
        self.anchor = anchor
        self.price_per_anchor_unit = price_per_anchor_unit

    def describe(self, currency: str) -> str:
        '''Badge text, e.g. "₹20.00/kg".'''
        return f"{currency}{self.price_per_anchor_unit:.2f}/{self.anchor.symbol}"

    def __str__(self) -> str:
        return f"Rate {self.category}: {self.price_per_base_unit} per base unit (set in {self.anchor.symbol})"

    __repr__ = __str__

    def to_dict(self):
        return {
            "category": self.category,
            "price_per_base_unit": self.price_per_base_unit,
            "anchor": self.anchor.symbol,
            "price_per_anchor_unit": self.price_per_anchor_unit,
        }
