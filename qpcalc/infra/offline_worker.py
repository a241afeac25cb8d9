"""Background worker answering offline price calculations.

Runs as an asyncio task fed through a queue. Each message arrives with its own
reply future (the dedicated reply channel); the worker answers exactly once per
CALCULATE_OFFLINE request and stays silent for anything else.

Request:  {"type": "CALCULATE_OFFLINE", "quantity": <base qty>, "rate": <price per base unit>, "category": "weight"|"volume"}
Response: {"type": "CALCULATION_RESULT", "result": "₹10.00"}
"""
from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

from qpcalc.logic.conversion.engine import format_price
from qpcalc.logic.rates.engine import compute_price
from qpcalc.utilities.config import CURRENCY_SYMBOL
from qpcalc.utilities.constants import CALCULATE_OFFLINE, CALCULATION_RESULT

logger = logging.getLogger(__name__)

__all__ = ["OfflineComputeWorker", "handle_message"]


def handle_message(message: Dict[str, Any], currency: str = CURRENCY_SYMBOL) -> Optional[Dict[str, Any]]:
    """Answer one message; None means no reply is due."""
    if not isinstance(message, dict) or message.get('type') != CALCULATE_OFFLINE:
        return None
    value = compute_price(float(message['quantity']), float(message['rate']))
    return {
        'type': CALCULATION_RESULT,
        'result': format_price(value, message['category'], currency),
    }


class OfflineComputeWorker:
    def __init__(self, currency: str = CURRENCY_SYMBOL):
        self.currency = currency
        self._queue: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        """Start the worker task on the running loop (idempotent)."""
        if self.running:
            return self
        self._queue = asyncio.Queue()
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Offline compute worker started")
        return self

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self._queue = None
        logger.info("Offline compute worker stopped")

    def post_message(self, message: Dict[str, Any], reply: asyncio.Future) -> None:
        if not self.running:
            raise RuntimeError("Offline compute worker is not running")
        self._queue.put_nowait((message, reply))

    async def _run(self):
        while True:
            message, reply = await self._queue.get()
            try:
                response = handle_message(message, self.currency)
            except (KeyError, TypeError, ValueError):
                logger.warning("Malformed offline request dropped: %r", message)
                response = None
            finally:
                self._queue.task_done()
            # Abandoned requests have a cancelled future: the answer is dropped
            if response is not None and not reply.done():
                reply.set_result(response)
