"""Event helper utilities.

Builds the structured notification payload `{kind, category?, unit?, rate?, result?}`
(plus the originating session_id when the calculator has one) and publishes it
on a bus (the global one unless another is given).

Quick import:
    from qpcalc.events.event_helpers import (
        publish_category_selected, publish_unit_selected, publish_rate_configured,
        publish_calculation, publish_tool_opened, publish_form_cleared, publish_reset
    )
"""
from __future__ import annotations
from typing import Any, Optional
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS,
    CATEGORY_SELECTED, UNIT_SELECTED, RATE_CONFIGURED, CALCULATION_PERFORMED,
    TOOL_OPENED, FORM_CLEARED, CALCULATOR_RESET,
)

__all__ = [
    'build_event', 'publish_category_selected', 'publish_unit_selected',
    'publish_rate_configured', 'publish_calculation', 'publish_tool_opened',
    'publish_form_cleared', 'publish_reset'
]


def build_event(kind: str, category: Optional[str] = None, unit: Any = None,
                rate: Any = None, result: Any = None, **extra) -> dict:
    """Return the payload dict; absent fields are left out."""
    event = {'kind': kind}
    for key, value in (('category', category), ('unit', unit), ('rate', rate), ('result', result)):
        if value is not None:
            event[key] = value
    event.update({k: v for k, v in extra.items() if v is not None})
    return event


def _publish(bus: Optional[EventBus], event_name: str, payload: dict) -> None:
    (bus or GLOBAL_EVENT_BUS).publish(event_name, payload)


def publish_category_selected(category: str, bus: Optional[EventBus] = None, session_id: Optional[str] = None):
    _publish(bus, CATEGORY_SELECTED, build_event('category_selected', category, session_id=session_id))


def publish_unit_selected(category: str, unit, target: str, bus: Optional[EventBus] = None,
                          session_id: Optional[str] = None):
    """target is 'base' for the rate form or a tool name for a calculator form."""
    _publish(bus, UNIT_SELECTED, build_event('unit_selected', category, unit, target=target, session_id=session_id))


def publish_rate_configured(rate, bus: Optional[EventBus] = None, session_id: Optional[str] = None):
    _publish(bus, RATE_CONFIGURED, build_event('rate_configured', rate.category, rate.anchor, rate,
                                               session_id=session_id))


def publish_calculation(tool: str, rate, result, user_input, unit=None, bus: Optional[EventBus] = None,
                        session_id: Optional[str] = None):
    _publish(bus, CALCULATION_PERFORMED, build_event(
        'calculation_performed', rate.category, unit, rate, result,
        tool=tool, input=user_input, session_id=session_id))


def publish_tool_opened(category: str, tool: str, bus: Optional[EventBus] = None, session_id: Optional[str] = None):
    _publish(bus, TOOL_OPENED, build_event('tool_opened', category, tool=tool, session_id=session_id))


def publish_form_cleared(category: Optional[str], tool: str, bus: Optional[EventBus] = None,
                         session_id: Optional[str] = None):
    _publish(bus, FORM_CLEARED, build_event('form_cleared', category, tool=tool, session_id=session_id))


def publish_reset(bus: Optional[EventBus] = None, session_id: Optional[str] = None):
    _publish(bus, CALCULATOR_RESET, build_event('reset', session_id=session_id))
