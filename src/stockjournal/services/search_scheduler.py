from __future__ import annotations

import threading
from typing import Callable, Hashable


class DebouncedScheduler:
    """Run at most one pending task per key.

    ``schedule`` replaces whatever is pending under the same key, so keying
    by line id keeps searches on different lines independent while each new
    keystroke on a line restarts that line's timer.
    """

    def __init__(self, timer_factory: Callable[..., threading.Timer] = threading.Timer):
        self._timer_factory = timer_factory
        self._timers: dict[Hashable, threading.Timer] = {}
        self._lock = threading.Lock()

    def schedule(self, key: Hashable, delay: float, task: Callable[[], None]) -> None:
        def fire() -> None:
            with self._lock:
                if self._timers.get(key) is not timer:
                    return
                del self._timers[key]
            task()

        with self._lock:
            previous = self._timers.pop(key, None)
            if previous is not None:
                previous.cancel()
            timer = self._timer_factory(delay, fire)
            timer.daemon = True
            self._timers[key] = timer
        timer.start()

    def cancel(self, key: Hashable) -> bool:
        with self._lock:
            timer = self._timers.pop(key, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for t in timers:
            t.cancel()

    def pending(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._timers
