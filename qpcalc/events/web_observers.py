"""Web-facing observers for calculator events.

This module subscribes to the GLOBAL_EVENT_BUS for every calculator event and
stores a lightweight in-memory ring buffer of rendered chat messages that the
web layer can poll (since=<last_id_seen>), so the assistant header can show
what just happened without the core knowing anything about display.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events.
  * Thread-safety ensured with a simple Lock (uvicorn may serve requests from
    a threadpool).
  * A MAX_EVENTS cap prevents unbounded memory growth.
  * Events carry the session_id of the calculator that published them so each
    client can poll its own feed.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any, Optional
from threading import Lock
from datetime import datetime, timezone

from qpcalc.utilities.config import CURRENCY_SYMBOL, MAX_EVENTS
from qpcalc.utilities.constants import WEIGHT, VOLUME, TOOL_PRICE_TO_QUANTITY, TOOL_QUANTITY_TO_PRICE
from .Event_Bus import GLOBAL_EVENT_BUS

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
_started = False

_CATEGORY_MESSAGES = {
    WEIGHT: "Excellent choice! Weight calculations are perfect for solid items like grains, spices, or produce. Let's set up your rate!",
    VOLUME: "Great selection! Volume calculations work wonderfully for liquids like oil, milk, or any fluid measurements. Let's configure your rate!",
}

_TOOL_MESSAGES = {
    TOOL_PRICE_TO_QUANTITY: "Price Calculator activated! Enter your budget to find out how much you can buy.",
    TOOL_QUANTITY_TO_PRICE: "Quantity Calculator ready! Enter quantity to find the total cost.",
}


def _symbol(unit) -> str:
    return getattr(unit, 'symbol', unit or '')


def render_message(payload: Dict[str, Any], currency: str = CURRENCY_SYMBOL) -> str:
    """Turn a notification payload into the assistant's chat line."""
    kind = payload.get('kind')
    category = payload.get('category')
    if kind == 'category_selected':
        return _CATEGORY_MESSAGES.get(category, f"{category} selected.")
    if kind == 'unit_selected':
        unit = payload.get('unit')
        return f"Nice choice! {getattr(unit, 'name', _symbol(unit)).capitalize()} selected."
    if kind == 'rate_configured':
        rate = payload['rate']
        return f"Rate locked in: {rate.describe(currency)}. Pick a calculator!"
    if kind == 'tool_opened':
        return _TOOL_MESSAGES.get(payload.get('tool'), "Calculator ready!")
    if kind == 'calculation_performed':
        rate = payload['rate']
        result = payload['result']
        if payload.get('tool') == TOOL_PRICE_TO_QUANTITY:
            return f"Excellent! For {currency}{payload.get('input')}, you get {result}. Rate: {rate.describe(currency)}."
        return (f"Perfect! {payload.get('input')} {_symbol(payload.get('unit'))} costs {result}. "
                f"Rate: {rate.describe(currency)}.")
    if kind == 'form_cleared':
        return "Values cleared."
    if kind == 'reset':
        return "Calculator reset. Select your unit category to begin calculations."
    return str(kind)


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt: Dict[str, Any] = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }
        if isinstance(payload, dict):
            evt['kind'] = payload.get('kind')
            for k in ('session_id', 'category', 'tool'):
                if payload.get(k) is not None:
                    evt[k] = payload[k]
            if payload.get('unit') is not None:
                evt['unit'] = _symbol(payload['unit'])
            if payload.get('result') is not None:
                evt['result'] = str(payload['result'])
            evt['message'] = render_message(payload)
        _events.append(evt)
        _next_id += 1
        # Trim buffer
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    GLOBAL_EVENT_BUS.subscribe_all(_record)
    _started = True
    logger.debug("Web observers subscribed to calculator events")


def get_events(since: Optional[int] = None, session_id: Optional[str] = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive).

    If since is None, returns the last N (up to MAX_EVENTS) events.
    With session_id only that session's events are returned; the cursor stays global.
    Response includes next_cursor (largest id) so client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        if session_id is not None:
            data = [e for e in data if e.get('session_id') == session_id]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events', 'render_message']
