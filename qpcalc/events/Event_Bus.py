"""Simple Event Bus / Observer implementation for calculator notifications.

Event names used so far:
  calculator.category_selected -> payload {"kind", "category"}
  calculator.unit_selected -> payload {"kind", "category", "unit", "target"}
  calculator.rate_configured -> payload {"kind", "category", "unit", "rate"}
  calculator.calculation_performed -> payload {"kind", "category", "unit", "rate", "result", "tool", "input"}
  calculator.tool_opened -> payload {"kind", "category", "tool"}
  calculator.form_cleared -> payload {"kind", "category", "tool"}
  calculator.reset -> payload {"kind"}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
CATEGORY_SELECTED = "calculator.category_selected"
UNIT_SELECTED = "calculator.unit_selected"
RATE_CONFIGURED = "calculator.rate_configured"
CALCULATION_PERFORMED = "calculator.calculation_performed"
TOOL_OPENED = "calculator.tool_opened"
FORM_CLEARED = "calculator.form_cleared"
CALCULATOR_RESET = "calculator.reset"

ALL_EVENTS = (
    CATEGORY_SELECTED, UNIT_SELECTED, RATE_CONFIGURED, CALCULATION_PERFORMED,
    TOOL_OPENED, FORM_CLEARED, CALCULATOR_RESET,
)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def subscribe_all(self, callback: Callable[[str, Any], None]):
		for event_name in ALL_EVENTS:
			self.subscribe(event_name, callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				# A failing renderer must never break the calculator
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()

__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'ALL_EVENTS',
	'CATEGORY_SELECTED', 'UNIT_SELECTED', 'RATE_CONFIGURED', 'CALCULATION_PERFORMED',
	'TOOL_OPENED', 'FORM_CLEARED', 'CALCULATOR_RESET'
]
