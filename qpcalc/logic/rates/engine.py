"""Rate engine.

Derives a Rate from a (price, quantity, unit) triple and answers
price -> quantity and quantity -> price questions against it.

compute_price() is the single multiply step shared by the in-process path and
the offline worker, so both produce identical numbers.
"""
from __future__ import annotations
import math
from typing import Optional
from qpcalc.domain.Rate import Rate
from qpcalc.domain.Unit import Unit
from qpcalc.domain.CalculationResult import CalculationResult, PriceQuote
from qpcalc.domain.errors import InvalidInput, MissingRate, UnknownUnit
from qpcalc.logic.conversion.engine import to_base, from_anchored
from qpcalc.utilities.config import CURRENCY_SYMBOL
from qpcalc.utilities.constants import PRECISION
from qpcalc.utilities.validators import parse_rate_input, parse_amount

__all__ = ["configure", "compute_price", "price_for", "price_to_quantity", "base_quantity_for", "quantity_to_price"]


def configure(price, quantity, unit: Unit) -> Rate:
    """Build a Rate; raises InvalidInput unless price and quantity are finite and > 0."""
    values = parse_rate_input(price, quantity)
    quantity_in_base = values.quantity * unit.factor_to_base
    if quantity_in_base == 0:
        raise InvalidInput(f"Quantity {values.quantity!r} is too small to price")
    price_per_base = _in_range(values.price / quantity_in_base, "price per base unit")
    price_per_anchor = _in_range(values.price / values.quantity, "price per unit")
    return Rate(unit.category, price_per_base, unit, price_per_anchor)


def _in_range(value: float, label: str) -> float:
    # Positive finite inputs can still underflow to 0 or overflow to inf
    if not math.isfinite(value) or value <= 0:
        raise InvalidInput(f"{label} out of range: {value!r}")
    return value


def compute_price(quantity_in_base: float, price_per_base_unit: float) -> float:
    return quantity_in_base * price_per_base_unit


def price_for(quantity_in_base: float, rate: Rate) -> float:
    """compute_price() for a validated quantity; InvalidInput if the product leaves float range."""
    return _in_range(compute_price(quantity_in_base, rate.price_per_base_unit), "price")


def _require(rate: Optional[Rate]) -> Rate:
    if rate is None:
        raise MissingRate("No base rate configured")
    return rate


def price_to_quantity(price, rate: Optional[Rate]) -> CalculationResult:
    """How much can be bought for `price`, in the most readable unit."""
    rate = _require(rate)
    amount = parse_amount(price, 'price')
    # Anchored on the configured unit so the display ladder of that unit applies
    return from_anchored(_in_range(amount / rate.price_per_anchor_unit, "quantity"), rate.anchor)


def base_quantity_for(quantity, unit: Unit, rate: Optional[Rate]) -> float:
    """Validate a quantity-to-price input and return it in base units."""
    rate = _require(rate)
    if unit.category != rate.category:
        raise UnknownUnit(f"Unit {unit.symbol!r} is not a {rate.category} unit")
    return to_base(parse_amount(quantity, 'quantity'), unit)


def quantity_to_price(quantity, unit: Unit, rate: Optional[Rate], currency: str = CURRENCY_SYMBOL) -> PriceQuote:
    """What `quantity` of `unit` costs at `rate`."""
    quantity_in_base = base_quantity_for(quantity, unit, rate)
    value = price_for(quantity_in_base, rate)
    return PriceQuote(value, rate.category, PRECISION[rate.category], currency)
