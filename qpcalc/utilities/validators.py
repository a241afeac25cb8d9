"""
Input validation schemas using Pydantic for calculator inputs and API bodies.
"""
from pydantic import BaseModel, Field, ValidationError, field_validator
from typing import Optional, Union
from qpcalc.domain.errors import InvalidInput

RawNumber = Optional[Union[float, str]]


def _require_number(v):
    """Reject empty and boolean inputs before float coercion."""
    if isinstance(v, bool):
        raise ValueError('Boolean is not a number')
    if isinstance(v, str):
        v = v.strip()
    if v is None or v == '':
        raise ValueError('Value is required')
    return v


class RateInput(BaseModel):
    """Schema for the base price / base quantity pair."""
    price: float = Field(..., gt=0, allow_inf_nan=False)
    quantity: float = Field(..., gt=0, allow_inf_nan=False)

    @field_validator('price', 'quantity', mode='before')
    @classmethod
    def require_number(cls, v):
        return _require_number(v)


class AmountInput(BaseModel):
    """Schema for a single positive amount (calculator price or quantity)."""
    amount: float = Field(..., gt=0, allow_inf_nan=False)

    @field_validator('amount', mode='before')
    @classmethod
    def require_number(cls, v):
        return _require_number(v)


def parse_rate_input(price, quantity) -> RateInput:
    try:
        return RateInput(price=price, quantity=quantity)
    except ValidationError as e:
        raise InvalidInput(f"Invalid base rate input (price={price!r}, quantity={quantity!r})") from e


def parse_amount(value, label: str = 'amount') -> float:
    try:
        return AmountInput(amount=value).amount
    except ValidationError as e:
        raise InvalidInput(f"Invalid {label}: {value!r}") from e


# --- API request bodies -----------------------------------------------------
# Numbers stay raw here: bad numbers are declined by the calculator, not rejected with 422.

class CategoryRequest(BaseModel):
    category: str = Field(..., pattern=r'^(weight|volume)$')


class UnitRequest(BaseModel):
    unit: str = Field(..., min_length=1, max_length=20)

    @field_validator('unit')
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip()


class RateRequest(BaseModel):
    price: RawNumber = None
    quantity: RawNumber = None
    unit: Optional[str] = None


class ToolRequest(BaseModel):
    tool: Optional[str] = Field(None, pattern=r'^(price-to-quantity|quantity-to-price)$')


class PriceRequest(BaseModel):
    price: RawNumber = None


class QuantityRequest(BaseModel):
    quantity: RawNumber = None
    unit: Optional[str] = None
