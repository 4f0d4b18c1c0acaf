from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..core.constants import DEFAULT_SCAN_DEBOUNCE_SECONDS
from ..core.exceptions import DuplicateScanError, ScannerBusyError


@dataclass
class _SessionState:
    last_code: Optional[str] = None
    last_at: float = 0.0
    in_flight: bool = False


class ScanGate:
    """Per scanning session: drop repeats of the same code inside the window
    and allow one scan in flight at a time."""

    def __init__(
        self,
        window_seconds: float = DEFAULT_SCAN_DEBOUNCE_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._window = float(window_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: Dict[str, _SessionState] = {}

    @contextmanager
    def admit(self, session_id: str, code: str):
        with self._lock:
            state = self._sessions.setdefault(session_id, _SessionState())
            if state.in_flight:
                raise ScannerBusyError("Scanner is busy, please wait")

            now = self._clock()
            if state.last_code == code and now - state.last_at < self._window:
                raise DuplicateScanError("Duplicate scan ignored")

            state.last_code = code
            state.last_at = now
            state.in_flight = True

        try:
            yield
        finally:
            with self._lock:
                state.in_flight = False
