"""Static unit catalog.

Every unit belongs to exactly one category and carries a factor that converts
a quantity in that unit into the category base unit (kg for weight, l for volume).
Order inside a category is the order shown in unit pickers.
"""
from __future__ import annotations
from typing import Dict, List, Optional
from qpcalc.domain.Unit import Unit
from qpcalc.domain.errors import UnknownUnit
from qpcalc.utilities.constants import WEIGHT, VOLUME, CATEGORIES, DEFAULT_UNIT, BASE_UNIT

__all__ = ["units_for", "factor", "get_unit", "default_unit", "base_unit", "UNITS"]

UNITS: Dict[str, List[Unit]] = {
    WEIGHT: [
        Unit("g", "gram", WEIGHT, 0.001),
        Unit("kg", "kilogram", WEIGHT, 1),
        Unit("quintal", "quintal", WEIGHT, 100),
        Unit("ton", "ton", WEIGHT, 1000),
    ],
    VOLUME: [
        Unit("ml", "millilitre", VOLUME, 0.001),
        Unit("l", "litre", VOLUME, 1),
        Unit("gallon", "gallon", VOLUME, 3.785),
    ],
}

_BY_SYMBOL: Dict[str, Unit] = {u.symbol: u for units in UNITS.values() for u in units}


def _check_category(category: str) -> None:
    if category not in CATEGORIES:
        raise UnknownUnit(f"Unknown category: {category!r}")


def units_for(category: str) -> List[Unit]:
    """Units of a category, smallest first."""
    _check_category(category)
    return list(UNITS[category])


def factor(unit: Unit) -> float:
    return unit.factor_to_base


def get_unit(symbol: str, category: Optional[str] = None) -> Unit:
    """Look up a unit by symbol, optionally requiring it to belong to `category`."""
    unit = _BY_SYMBOL.get((symbol or '').strip())
    if unit is None:
        raise UnknownUnit(f"Unknown unit: {symbol!r}")
    if category is not None and unit.category != category:
        raise UnknownUnit(f"Unit {symbol!r} is not a {category} unit")
    return unit


def default_unit(category: str) -> Unit:
    _check_category(category)
    return _BY_SYMBOL[DEFAULT_UNIT[category]]


def base_unit(category: str) -> Unit:
    _check_category(category)
    return _BY_SYMBOL[BASE_UNIT[category]]
