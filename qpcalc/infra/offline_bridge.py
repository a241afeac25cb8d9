"""Offline compute bridge.

Delegates the quantity -> price multiply step to the background worker when one
is running, and computes in-process otherwise. Both paths end in
compute_price(), so the returned string is the same either way.
"""
from __future__ import annotations
import asyncio
import itertools
import logging
from typing import Dict, Optional

from qpcalc.infra.offline_worker import OfflineComputeWorker
from qpcalc.logic.conversion.engine import format_price
from qpcalc.logic.rates.engine import compute_price
from qpcalc.utilities.config import CURRENCY_SYMBOL, OFFLINE_TIMEOUT_SECONDS
from qpcalc.utilities.constants import CALCULATE_OFFLINE, CALCULATION_RESULT

logger = logging.getLogger(__name__)

__all__ = ["OfflineComputeBridge", "build_request"]


def build_request(quantity: float, rate: float, category: str) -> dict:
    return {'type': CALCULATE_OFFLINE, 'quantity': quantity, 'rate': rate, 'category': category}


class OfflineComputeBridge:
    def __init__(self, worker: Optional[OfflineComputeWorker] = None,
                 timeout: Optional[float] = OFFLINE_TIMEOUT_SECONDS,
                 currency: str = CURRENCY_SYMBOL):
        self.worker = worker
        self.timeout = timeout
        self.currency = currency
        self._ids = itertools.count(1)
        self._pending: Dict[int, asyncio.Future] = {}

    @property
    def pending(self) -> int:
        return len(self._pending)

    def compute_locally(self, quantity: float, rate: float, category: str) -> str:
        return format_price(compute_price(quantity, rate), category, self.currency)

    async def calculate(self, quantity: float, rate: float, category: str) -> str:
        """Formatted price for `quantity` base units at `rate`; never raises for a missing worker."""
        if self.worker is None or not self.worker.running:
            return self.compute_locally(quantity, rate, category)

        reply = asyncio.get_running_loop().create_future()
        request_id = next(self._ids)
        self._pending[request_id] = reply
        try:
            self.worker.post_message(build_request(quantity, rate, category), reply)
            response = await asyncio.wait_for(asyncio.shield(reply), self.timeout)
        except asyncio.TimeoutError:
            logger.info("Offline worker did not answer request %s, computing in-process", request_id)
            reply.cancel()
            return self.compute_locally(quantity, rate, category)
        except asyncio.CancelledError:
            if not reply.cancelled():
                raise
            # Abandoned through abandon_all(); the caller discards whatever comes back
            logger.debug("Offline request %s abandoned", request_id)
            return self.compute_locally(quantity, rate, category)
        except RuntimeError as e:
            logger.info("Offline worker unavailable (%s), computing in-process", e)
            return self.compute_locally(quantity, rate, category)
        finally:
            self._pending.pop(request_id, None)

        if not isinstance(response, dict) or response.get('type') != CALCULATION_RESULT:
            logger.info("Unexpected offline response %r, computing in-process", response)
            return self.compute_locally(quantity, rate, category)
        return response['result']

    def abandon_all(self) -> int:
        """Cancel every in-flight request; late answers for them are dropped."""
        count = 0
        for reply in self._pending.values():
            if not reply.done():
                reply.cancel()
                count += 1
        self._pending.clear()
        return count
