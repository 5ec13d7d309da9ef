"""Deferred callbacks for the game engine.

The engine never sleeps. It asks a scheduler to run a callback later and
guards the callback itself (generation token), so schedulers do not need
cancellation. Both schedulers also own the engine's notion of "now".
"""

import heapq
import itertools
import logging
import time
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


class BackgroundScheduler:
    """Runs each callback in a Socket.IO background task after a real delay."""

    def __init__(self, socketio, clock: Callable[[], float] = time.time):
        self._socketio = socketio
        self._clock = clock

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        def _worker():
            self._socketio.sleep(max(0.0, delay))
            try:
                callback()
            except Exception:
                logger.exception('[timer-error] deferred callback failed')

        self._socketio.start_background_task(_worker)


class ManualScheduler:
    """Virtual clock; callbacks run only when the clock is advanced.

    Due callbacks run in (due time, scheduling order). Callbacks scheduled
    while advancing run in the same pass if they fall inside the window.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self._now + max(0.0, delay), next(self._seq), callback))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def advance(self, seconds: float = 0.0) -> int:
        """Move the clock forward, running everything that falls due. Returns how many ran."""
        deadline = self._now + max(0.0, seconds)
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            due, _, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            callback()
            ran += 1
        self._now = deadline
        return ran
