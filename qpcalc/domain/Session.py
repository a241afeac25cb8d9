"""SessionState: everything one interactive calculator session holds in memory."""
from typing import Any, Optional
from qpcalc.domain.Unit import Unit
from qpcalc.domain.Rate import Rate
from qpcalc.utilities.constants import STEP_CATEGORY, TOOL_PRICE_TO_QUANTITY, TOOL_QUANTITY_TO_PRICE


class BaseRateForm:
    def __init__(self, unit: Optional[Unit] = None):
        self.price: Any = ''
        self.quantity: Any = ''
        self.unit = unit

    def clear(self, unit: Optional[Unit] = None):
        self.price = ''
        self.quantity = ''
        self.unit = unit

    def to_dict(self):
        return {
            "price": self.price,
            "quantity": self.quantity,
            "unit": self.unit.symbol if self.unit else None,
        }


class SubForm:
    '''One calculator sub-tool: raw input, its unit and the last result.'''

    def __init__(self, tool: str, unit: Optional[Unit] = None):
        self.tool = tool
        self.value: Any = ''
        self.unit = unit
        self.result = None
        # Bumped on clear and on every offline request so late answers can be recognised as stale
        self.generation = 0

    def clear(self, unit: Optional[Unit] = None):
        self.value = ''
        self.unit = unit
        self.result = None
        self.generation += 1

    def to_dict(self):
        return {
            "tool": self.tool,
            "input": self.value,
            "unit": self.unit.symbol if self.unit else None,
            "result": self.result.to_dict() if self.result is not None else None,
        }


class SessionState:
    def __init__(self):
        self.step = STEP_CATEGORY
        self.category: Optional[str] = None
        self.rate: Optional[Rate] = None
        self.active_tool: Optional[str] = None
        self.base_form = BaseRateForm()
        self.price_form = SubForm(TOOL_PRICE_TO_QUANTITY)
        self.quantity_form = SubForm(TOOL_QUANTITY_TO_PRICE)

    def form(self, tool: str) -> SubForm:
        if tool == TOOL_PRICE_TO_QUANTITY:
            return self.price_form
        if tool == TOOL_QUANTITY_TO_PRICE:
            return self.quantity_form
        raise ValueError(f"Unknown calculator tool: {tool!r}")

    def reset_forms(self, unit: Optional[Unit] = None):
        '''Discard both sub-forms (fresh objects, so pending work on the old ones is stale).'''
        self.price_form = SubForm(TOOL_PRICE_TO_QUANTITY, unit)
        self.quantity_form = SubForm(TOOL_QUANTITY_TO_PRICE, unit)
        self.active_tool = None

    def __str__(self) -> str:
        return f"Session step={self.step} category={self.category} rate={self.rate}"

    __repr__ = __str__

    def to_dict(self, currency: str = ''):
        return {
            "step": self.step,
            "category": self.category,
            "rate": self.rate.to_dict() if self.rate else None,
            "rate_display": self.rate.describe(currency) if self.rate else None,
            "active_tool": self.active_tool,
            "base_form": self.base_form.to_dict(),
            "forms": {
                self.price_form.tool: self.price_form.to_dict(),
                self.quantity_form.tool: self.quantity_form.to_dict(),
            },
        }
