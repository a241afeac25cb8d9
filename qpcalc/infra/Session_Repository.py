"""In-memory store of live calculator sessions (nothing is written to disk)."""
import logging
from collections import OrderedDict
from threading import Lock
from typing import Optional
from uuid import uuid4

from qpcalc.domain.Calculator import CalculatorStateMachine
from qpcalc.utilities.config import MAX_SESSIONS

logger = logging.getLogger(__name__)


class SessionRepository:
    def __init__(self, max_sessions: int = MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, CalculatorStateMachine]" = OrderedDict()
        self._lock = Lock()

    def create(self) -> tuple[str, CalculatorStateMachine]:
        session_id = uuid4().hex
        calculator = CalculatorStateMachine(session_id=session_id)
        with self._lock:
            self._sessions[session_id] = calculator
            # Oldest sessions go first once the cap is hit
            while len(self._sessions) > self.max_sessions:
                dropped, _ = self._sessions.popitem(last=False)
                logger.info("Session %s evicted (limit %s)", dropped, self.max_sessions)
        return session_id, calculator

    def get(self, session_id: str) -> Optional[CalculatorStateMachine]:
        with self._lock:
            calculator = self._sessions.get(session_id)
            if calculator is not None:
                self._sessions.move_to_end(session_id)
            return calculator

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Shared store used by the API
SESSIONS = SessionRepository()
