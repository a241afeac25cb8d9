"""Conversion engine.

Converts quantities to and from the category base unit and picks the most
readable display unit for a computed quantity.

Display unit selection is a lookup in DISPLAY_LADDERS, keyed on the unit the
rate was configured in (the anchor). The thresholds are a fixed policy and are
not derived from the catalog factors, so the ladder for 'l' and the ladder for
'ml' intentionally disagree on where gallons start.

Rules of a ladder are tried in order; the first one whose condition holds wins.
  - "ge" rules scale up: value = quantity / divisor.
  - "lt" rules scale down: value = quantity * multiplier, trying each step in
    order and taking the first that reaches 1; the last step is the fallback.
A quantity matching no rule stays in the anchor unit.
"""
from __future__ import annotations
from typing import Dict, List, NamedTuple, Optional, Tuple
from qpcalc.domain.Unit import Unit
from qpcalc.domain.CalculationResult import CalculationResult
from qpcalc.logic.units.catalog import get_unit, base_unit, factor
from qpcalc.utilities.constants import PRECISION

__all__ = [
    "DISPLAY_LADDERS", "LadderRule", "to_base", "from_base", "from_anchored",
    "pick_display_unit", "format_price",
]


class LadderRule(NamedTuple):
    op: str  # "ge" or "lt"
    threshold: float
    steps: Tuple[Tuple[str, float], ...]  # (unit symbol, divisor or multiplier)


def _up(threshold: float, symbol: str, divisor: float) -> LadderRule:
    return LadderRule("ge", threshold, ((symbol, divisor),))


def _down(*steps: Tuple[str, float]) -> LadderRule:
    return LadderRule("lt", 1, tuple(steps))


DISPLAY_LADDERS: Dict[str, List[LadderRule]] = {
    # weight
    "g": [
        _up(1_000_000, "ton", 1_000_000),
        _up(100_000, "quintal", 100_000),
        _up(1_000, "kg", 1_000),
    ],
    "kg": [
        _up(1_000, "ton", 1_000),
        _up(100, "quintal", 100),
        _down(("g", 1_000)),
    ],
    "quintal": [
        _up(10, "ton", 10),
        _down(("kg", 100), ("g", 100_000)),
    ],
    "ton": [
        _down(("kg", 1_000), ("quintal", 10), ("g", 1_000_000)),
    ],
    # volume
    "ml": [
        _up(3_785_410, "gallon", 3785.41),
        _up(1_000, "l", 1_000),
    ],
    "l": [
        _up(3785.41, "gallon", 3785.41),
        _down(("ml", 1_000)),
    ],
    "gallon": [
        _down(("l", 3.785), ("ml", 3785.41)),
    ],
}


def to_base(quantity: float, unit: Unit) -> float:
    return quantity * factor(unit)


def _apply(rule: LadderRule, quantity: float) -> Optional[Tuple[float, str]]:
    if rule.op == "ge":
        if quantity >= rule.threshold:
            symbol, divisor = rule.steps[0]
            return quantity / divisor, symbol
        return None
    if quantity < rule.threshold:
        for symbol, multiplier in rule.steps[:-1]:
            value = quantity * multiplier
            if value >= 1:
                return value, symbol
        symbol, multiplier = rule.steps[-1]
        return quantity * multiplier, symbol
    return None


def pick_display_unit(quantity: float, anchor: Unit) -> Tuple[float, Unit]:
    """Re-express `quantity` (given in `anchor` units) in the most readable unit."""
    for rule in DISPLAY_LADDERS.get(anchor.symbol, []):
        hit = _apply(rule, quantity)
        if hit is not None:
            value, symbol = hit
            return value, get_unit(symbol, anchor.category)
    return quantity, anchor


def from_anchored(quantity: float, anchor: Unit) -> CalculationResult:
    value, unit = pick_display_unit(quantity, anchor)
    return CalculationResult(value, unit, PRECISION[anchor.category])


def from_base(quantity_in_base: float, category: str, anchor: Optional[Unit] = None) -> CalculationResult:
    """Convert a base-unit quantity for display, anchored on `anchor` (defaults to the base unit)."""
    anchor = anchor or base_unit(category)
    return from_anchored(quantity_in_base / factor(anchor), anchor)


def format_price(value: float, category: str, currency: str) -> str:
    return f"{currency}{value:.{PRECISION[category]}f}"
