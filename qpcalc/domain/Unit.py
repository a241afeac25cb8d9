"""Unit domain entity: symbol, display name, category and factor to the category base unit."""


class Unit:
    def __init__(self, symbol: str, name: str, category: str, factor_to_base: float):
        self.symbol = symbol
        self.name = name
        self.category = category
        self.factor_to_base = factor_to_base

    def __eq__(self, other) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return self.symbol == other.symbol and self.category == other.category

    def __hash__(self) -> int:
        return hash((self.symbol, self.category))

    def __str__(self) -> str:
        return f"{self.symbol} ({self.name})"

    def __repr__(self) -> str:
        return f"Unit({self.symbol!r}, {self.category!r}, {self.factor_to_base})"

    def to_dict(self):
        return {
            "symbol": self.symbol,
            "name": self.name,
            "category": self.category,
            "factor_to_base": self.factor_to_base,
        }
