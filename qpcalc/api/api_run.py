from fastapi import FastAPI, Query
from typing import Optional
import logging

from qpcalc.api.routes import calculator
from qpcalc.events.web_observers import start as start_event_observers, get_events as get_web_events
from qpcalc.infra.offline_bridge import OfflineComputeBridge
from qpcalc.infra.offline_worker import OfflineComputeWorker
from qpcalc.infra.Session_Repository import SESSIONS
from qpcalc.utilities.config import OFFLINE_WORKER_ENABLED, CURRENCY_SYMBOL

# Logging
logger = logging.getLogger("qpcalc_app")

# Offline compute: the worker only runs once the app has started; until then
# (and whenever it is disabled) the bridge computes in-process.
offline_worker = OfflineComputeWorker(currency=CURRENCY_SYMBOL)
offline_bridge = OfflineComputeBridge(offline_worker if OFFLINE_WORKER_ENABLED else None,
                                      currency=CURRENCY_SYMBOL)
calculator.bridge = offline_bridge

# Initialize FastAPI app
app = FastAPI(title="Quantity Price Calculator API")

# Include routers
app.include_router(calculator.router)


@app.on_event("startup")
async def _startup():
    """Register event bus subscribers and start the offline worker."""
    start_event_observers()
    logger.info("Web observers for calculator events started")
    if OFFLINE_WORKER_ENABLED:
        offline_worker.start()


@app.on_event("shutdown")
async def _shutdown():
    abandoned = offline_bridge.abandon_all()
    if abandoned:
        logger.info("Abandoned %s offline requests on shutdown", abandoned)
    await offline_worker.stop()


# -------------------- API --------------------
@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "sessions": len(SESSIONS),
        "offline_worker": offline_worker.running,
    }


@app.get("/api/events")
def api_events(since: Optional[int] = Query(default=None, ge=0), session_id: Optional[str] = None):
    """Rendered assistant messages newer than `since` (cursor polling), optionally for one session."""
    return get_web_events(since, session_id)
