"""Calculator aggregate: the three-step state machine driving one session.

Steps: category-selection -> base-rate-configuration -> calculating.
Inside calculating one of the two sub-tools (price-to-quantity,
quantity-to-price) may be active.

Operations return False / None when they decline to advance (wrong step,
invalid input, no rate). Nothing is raised for those cases; the state is
simply left as it was. Unknown category or unit symbols do raise UnknownUnit.
"""
from __future__ import annotations
import logging
from typing import Optional

from qpcalc.domain.CalculationResult import CalculationResult, PriceQuote
from qpcalc.domain.Rate import Rate
from qpcalc.domain.Session import SessionState
from qpcalc.domain.errors import InvalidInput, MissingRate
from qpcalc.events.Event_Bus import GLOBAL_EVENT_BUS
from qpcalc.events import event_helpers
from qpcalc.logic.rates import engine as rates
from qpcalc.logic.units.catalog import get_unit, default_unit
from qpcalc.utilities.config import CURRENCY_SYMBOL
from qpcalc.utilities.constants import (
    PRECISION, STEP_CATEGORY, STEP_BASE_RATE, STEP_CALCULATING,
    TOOLS, TOOL_PRICE_TO_QUANTITY, TOOL_QUANTITY_TO_PRICE,
)

logger = logging.getLogger(__name__)


class CalculatorStateMachine:
    def __init__(self, currency: str = CURRENCY_SYMBOL, session_id: Optional[str] = None):
        self.state = SessionState()
        self.currency = currency
        self.session_id = session_id
        self._event_bus = GLOBAL_EVENT_BUS

    # --- Observer helpers -------------------------------------------------
    def set_event_bus(self, bus):
        self._event_bus = bus
        return self

    @property
    def step(self) -> str:
        return self.state.step

    @property
    def category(self) -> Optional[str]:
        return self.state.category

    @property
    def rate(self) -> Optional[Rate]:
        return self.state.rate

    def _in_step(self, step: str, action: str) -> bool:
        if self.state.step != step:
            logger.debug("%s ignored in step %s", action, self.state.step)
            return False
        return True

    # --- Step 1: category -------------------------------------------------
    def select_category(self, category: str) -> bool:
        default = default_unit(category)  # raises UnknownUnit for a bad category
        if not self._in_step(STEP_CATEGORY, "select_category"):
            return False
        self.state.category = category
        self.state.base_form.clear(default)
        self.state.reset_forms(default)
        self.state.step = STEP_BASE_RATE
        event_helpers.publish_category_selected(category, self._event_bus, self.session_id)
        return True

    # --- Step 2: base rate ------------------------------------------------
    def select_base_unit(self, symbol: str) -> bool:
        if not self._in_step(STEP_BASE_RATE, "select_base_unit"):
            return False
        unit = get_unit(symbol, self.state.category)
        self.state.base_form.unit = unit
        event_helpers.publish_unit_selected(self.state.category, unit, 'base', self._event_bus, self.session_id)
        return True

    def set_base_values(self, price=None, quantity=None) -> bool:
        '''Store raw form input; None leaves a field untouched.'''
        if not self._in_step(STEP_BASE_RATE, "set_base_values"):
            return False
        if price is not None:
            self.state.base_form.price = price
        if quantity is not None:
            self.state.base_form.quantity = quantity
        return True

    def clear_base_form(self) -> bool:
        if not self._in_step(STEP_BASE_RATE, "clear_base_form"):
            return False
        self.state.base_form.clear(default_unit(self.state.category))
        event_helpers.publish_form_cleared(self.state.category, 'base', self._event_bus, self.session_id)
        return True

    def confirm_rate(self) -> bool:
        '''Configure the rate from the base form and move on to calculating.'''
        if not self._in_step(STEP_BASE_RATE, "confirm_rate"):
            return False
        form = self.state.base_form
        try:
            rate = rates.configure(form.price, form.quantity, form.unit)
        except InvalidInput as e:
            logger.info("Base rate not configured: %s", e)
            return False
        self.state.rate = rate
        self.state.active_tool = None
        self.state.step = STEP_CALCULATING
        logger.debug("Rate configured: %s", rate)
        event_helpers.publish_rate_configured(rate, self._event_bus, self.session_id)
        return True

    def configure_rate(self, price, quantity, unit: Optional[str] = None) -> bool:
        if not self._in_step(STEP_BASE_RATE, "configure_rate"):
            return False
        if unit is not None and (self.state.base_form.unit is None or unit != self.state.base_form.unit.symbol):
            self.select_base_unit(unit)
        self.state.base_form.price = price
        self.state.base_form.quantity = quantity
        return self.confirm_rate()

    # --- Step 3: calculating ----------------------------------------------
    def open_tool(self, tool: str) -> bool:
        if tool not in TOOLS:
            raise ValueError(f"Unknown calculator tool: {tool!r}")
        if not self._in_step(STEP_CALCULATING, "open_tool"):
            return False
        self.state.active_tool = tool
        event_helpers.publish_tool_opened(self.state.category, tool, self._event_bus, self.session_id)
        return True

    def close_tool(self) -> bool:
        if not self._in_step(STEP_CALCULATING, "close_tool"):
            return False
        self.state.active_tool = None
        return True

    def select_calc_unit(self, symbol: str) -> bool:
        '''Unit of the quantity entered in the quantity-to-price tool.'''
        if not self._in_step(STEP_CALCULATING, "select_calc_unit"):
            return False
        unit = get_unit(symbol, self.state.category)
        self.state.quantity_form.unit = unit
        event_helpers.publish_unit_selected(self.state.category, unit, TOOL_QUANTITY_TO_PRICE, self._event_bus, self.session_id)
        return True

    def calculate_quantity(self, price) -> Optional[CalculationResult]:
        '''Price -> quantity; None when declined (previous result kept).'''
        if not self._in_step(STEP_CALCULATING, "calculate_quantity"):
            return None
        form = self.state.price_form
        form.value = price
        try:
            result = rates.price_to_quantity(price, self.state.rate)
        except (InvalidInput, MissingRate) as e:
            logger.info("Quantity not calculated: %s", e)
            return None
        form.result = result
        form.unit = result.unit
        self.state.active_tool = TOOL_PRICE_TO_QUANTITY
        event_helpers.publish_calculation(TOOL_PRICE_TO_QUANTITY, self.state.rate, result, price,
                                          result.unit, self._event_bus, self.session_id)
        return result

    def _prepare_price(self, quantity, unit: Optional[str]):
        if not self._in_step(STEP_CALCULATING, "calculate_price"):
            return None
        if unit is not None:
            self.select_calc_unit(unit)
        form = self.state.quantity_form
        form.value = quantity
        try:
            quantity_in_base = rates.base_quantity_for(quantity, form.unit, self.state.rate)
            return quantity_in_base, rates.price_for(quantity_in_base, self.state.rate)
        except (InvalidInput, MissingRate) as e:
            logger.info("Price not calculated: %s", e)
            return None

    def _store_price(self, quote: PriceQuote, quantity) -> PriceQuote:
        form = self.state.quantity_form
        form.result = quote
        self.state.active_tool = TOOL_QUANTITY_TO_PRICE
        event_helpers.publish_calculation(TOOL_QUANTITY_TO_PRICE, self.state.rate, quote, quantity,
                                          form.unit, self._event_bus, self.session_id)
        return quote

    def calculate_price(self, quantity, unit: Optional[str] = None) -> Optional[PriceQuote]:
        '''Quantity -> price; None when declined (previous result kept).'''
        prepared = self._prepare_price(quantity, unit)
        if prepared is None:
            return None
        _, value = prepared
        rate = self.state.rate
        return self._store_price(PriceQuote(value, rate.category, PRECISION[rate.category], self.currency), quantity)

    async def calculate_price_offline(self, quantity, bridge, unit: Optional[str] = None) -> Optional[PriceQuote]:
        '''Quantity -> price through an OfflineComputeBridge.

        If the session moved on while waiting (back, reset, clear, a newer
        request on the same form), the late answer is dropped and None is returned.
        '''
        prepared = self._prepare_price(quantity, unit)
        if prepared is None:
            return None
        quantity_in_base, value = prepared
        form = self.state.quantity_form
        # A newer request on the same form supersedes this one
        form.generation += 1
        generation = form.generation
        rate = self.state.rate
        formatted = await bridge.calculate(quantity_in_base, rate.price_per_base_unit, rate.category)
        if (self.state.quantity_form is not form or form.generation != generation
                or self.state.rate is not rate or self.state.step != STEP_CALCULATING):
            logger.info("Discarding stale offline result %s", formatted)
            return None
        quote = PriceQuote(value, rate.category, PRECISION[rate.category], self.currency, formatted=formatted)
        return self._store_price(quote, quantity)

    def clear(self, tool: str) -> bool:
        '''Reset one sub-tool's input, result and unit; the rate and the other tool are untouched.'''
        form = self.state.form(tool)
        if not self._in_step(STEP_CALCULATING, "clear"):
            return False
        form.clear(default_unit(self.state.category))
        event_helpers.publish_form_cleared(self.state.category, tool, self._event_bus, self.session_id)
        return True

    # --- Navigation -------------------------------------------------------
    def back(self) -> bool:
        '''Go one step back, discarding data of the step left. The rate survives.'''
        step = self.state.step
        if step == STEP_CALCULATING:
            self.state.reset_forms(default_unit(self.state.category))
            self.state.step = STEP_BASE_RATE
            return True
        if step == STEP_BASE_RATE:
            self.state.category = None
            self.state.base_form.clear()
            self.state.reset_forms()
            self.state.step = STEP_CATEGORY
            return True
        return False

    def reset(self) -> None:
        '''Back to category selection with nothing kept.'''
        self.state = SessionState()
        event_helpers.publish_reset(self._event_bus, self.session_id)

    def snapshot(self) -> dict:
        return self.state.to_dict(self.currency)

    def __str__(self) -> str:
        return f"Calculator {self.state}"

    __repr__ = __str__
