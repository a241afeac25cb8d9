"""Calculator session endpoints.

Every state-machine operation is exposed as a POST on /api/sessions/{session_id}/...
and answers with {"session_id", "advanced", "state"}. A declined step (bad
number, wrong step, no rate) is not an error: it returns 200 with
advanced=false and the unchanged state.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from qpcalc.domain.Calculator import CalculatorStateMachine
from qpcalc.domain.errors import UnknownUnit
from qpcalc.events.web_observers import get_events
from qpcalc.infra.Session_Repository import SESSIONS
from qpcalc.logic.units.catalog import units_for
from qpcalc.utilities.validators import (
    CategoryRequest, UnitRequest, RateRequest, ToolRequest, PriceRequest, QuantityRequest,
)

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)

# Set by api_run at import time; tests may swap it
bridge = None


def _session(session_id: str) -> CalculatorStateMachine:
    calculator = SESSIONS.get(session_id)
    if calculator is None:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return calculator


def _respond(session_id: str, calculator: CalculatorStateMachine, advanced: bool, **extra):
    body = {"session_id": session_id, "advanced": bool(advanced), "state": calculator.snapshot()}
    body.update(extra)
    return body


def _bad_unit(e: UnknownUnit):
    return HTTPException(status_code=400, detail=e.args[0] if e.args else "Unknown unit")


# === Catalog ===
@router.get("/units/{category}")
def list_units(category: str):
    try:
        units = units_for(category)
    except UnknownUnit as e:
        raise _bad_unit(e)
    return {"category": category, "units": [u.to_dict() for u in units]}


# === Session lifecycle ===
@router.post("/sessions", status_code=201)
def create_session():
    session_id, calculator = SESSIONS.create()
    logger.info("Session %s created", session_id)
    return _respond(session_id, calculator, True)


@router.get("/sessions/{session_id}")
def get_session(session_id: str):
    return _respond(session_id, _session(session_id), True)


@router.delete("/sessions/{session_id}")
def delete_session(session_id: str):
    if not SESSIONS.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return {"deleted": session_id}


@router.get("/sessions/{session_id}/events")
def session_events(session_id: str, since: Optional[int] = Query(default=None, ge=0)):
    """Assistant messages published by this session only."""
    _session(session_id)
    return get_events(since, session_id)


# === Navigation ===
@router.post("/sessions/{session_id}/back")
def go_back(session_id: str):
    calculator = _session(session_id)
    return _respond(session_id, calculator, calculator.back())


@router.post("/sessions/{session_id}/reset")
def reset_session(session_id: str):
    calculator = _session(session_id)
    calculator.reset()
    return _respond(session_id, calculator, True)


# === Step 1 / 2 ===
@router.post("/sessions/{session_id}/category")
def select_category(session_id: str, body: CategoryRequest):
    calculator = _session(session_id)
    return _respond(session_id, calculator, calculator.select_category(body.category))


@router.post("/sessions/{session_id}/base-unit")
def select_base_unit(session_id: str, body: UnitRequest):
    calculator = _session(session_id)
    try:
        advanced = calculator.select_base_unit(body.unit)
    except UnknownUnit as e:
        raise _bad_unit(e)
    return _respond(session_id, calculator, advanced)


@router.post("/sessions/{session_id}/rate")
def configure_rate(session_id: str, body: RateRequest):
    calculator = _session(session_id)
    try:
        advanced = calculator.configure_rate(body.price, body.quantity, body.unit)
    except UnknownUnit as e:
        raise _bad_unit(e)
    return _respond(session_id, calculator, advanced)


@router.post("/sessions/{session_id}/base-form/clear")
def clear_base_form(session_id: str):
    calculator = _session(session_id)
    return _respond(session_id, calculator, calculator.clear_base_form())


# === Step 3 ===
@router.post("/sessions/{session_id}/tool")
def select_tool(session_id: str, body: Optional[ToolRequest] = None):
    calculator = _session(session_id)
    if body is None or body.tool is None:
        advanced = calculator.close_tool()
    else:
        advanced = calculator.open_tool(body.tool)
    return _respond(session_id, calculator, advanced)


@router.post("/sessions/{session_id}/calc-unit")
def select_calc_unit(session_id: str, body: UnitRequest):
    calculator = _session(session_id)
    try:
        advanced = calculator.select_calc_unit(body.unit)
    except UnknownUnit as e:
        raise _bad_unit(e)
    return _respond(session_id, calculator, advanced)


@router.post("/sessions/{session_id}/price-to-quantity")
def price_to_quantity(session_id: str, body: PriceRequest):
    calculator = _session(session_id)
    result = calculator.calculate_quantity(body.price)
    return _respond(session_id, calculator, result is not None,
                    result=result.to_dict() if result is not None else None)


@router.post("/sessions/{session_id}/quantity-to-price")
async def quantity_to_price(session_id: str, body: QuantityRequest):
    calculator = _session(session_id)
    try:
        if bridge is not None:
            quote = await calculator.calculate_price_offline(body.quantity, bridge, body.unit)
        else:
            quote = calculator.calculate_price(body.quantity, body.unit)
    except UnknownUnit as e:
        raise _bad_unit(e)
    return _respond(session_id, calculator, quote is not None,
                    result=quote.to_dict() if quote is not None else None)


@router.post("/sessions/{session_id}/clear/{tool}")
def clear_tool(session_id: str, tool: str):
    calculator = _session(session_id)
    try:
        advanced = calculator.clear(tool)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _respond(session_id, calculator, advanced)
