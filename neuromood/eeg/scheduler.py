"""Periodic task scheduling for the acquisition and classification timers."""

import heapq
import itertools
import logging
import threading
import traceback
from typing import Callable, List, Protocol

logger = logging.getLogger(__name__)


class CancellationToken:
    """Set-once flag shared by the tasks of one monitor connection."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to timeout seconds; return True as soon as the token is cancelled."""
        return self._event.wait(timeout)


class Scheduler(Protocol):
    def every(self, interval: float, callback: Callable[[], None], token: CancellationToken) -> None:
        """Run callback every interval seconds until token is cancelled."""
        ...


class PeriodicTask(threading.Thread):
    """Call a function at a fixed interval until its token is cancelled."""

    def __init__(self, interval: float, callback: Callable[[], None], token: CancellationToken, name: str = None):
        super().__init__(name=name, daemon=True)
        self._interval = max(1e-3, float(interval))
        self._callback = callback
        self._token = token

    def run(self):
        while not self._token.wait(self._interval):
            try:
                self._callback()
            except Exception as e:
                logger.error(f"Error in periodic task {self.name}: {e}")
                logger.error(traceback.format_exc())


class ThreadScheduler:
    """Wall-clock scheduler: one daemon thread per periodic task."""

    def __init__(self):
        self.tasks: List[PeriodicTask] = []

    def every(self, interval: float, callback: Callable[[], None], token: CancellationToken) -> None:
        task = PeriodicTask(interval, callback, token, name=getattr(callback, '__name__', None))
        self.tasks = [t for t in self.tasks if t.is_alive()]
        self.tasks.append(task)
        task.start()


class ManualScheduler:
    """Virtual-time scheduler; nothing runs until advance() moves the clock."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._order = itertools.count()

    def every(self, interval: float, callback: Callable[[], None], token: CancellationToken) -> None:
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        heapq.heappush(self._queue, (self.now + interval, next(self._order), interval, callback, token))

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due callbacks in time order. Returns how many ran."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, interval, callback, token = heapq.heappop(self._queue)
            self.now = due
            if token.cancelled:
                continue
            callback()
            fired += 1
            heapq.heappush(self._queue, (due + interval, next(self._order), interval, callback, token))
        self.now = target
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[4].cancelled)
