"""One-shot timers keyed by schedule id.

┌──────────────────────────────────────────────────────────────────────┐
│  TimerRegistry                                                       │
│                                                                      │
│   arm(key, delay, callback)                                          │
│      ├── cancel existing timer for key   (at most one per key)       │
│      └── threading.Timer(delay) daemon  ──► callback()               │
│                                                                      │
│   cancel(key)        cancel_all()        active_count                │
└──────────────────────────────────────────────────────────────────────┘

Timers are daemon threads so pending schedules never block process exit.
A callback that raises is logged; the registry keeps working.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from zyra.core.logging import get_logger
from zyra.core.timestamps import to_iso8601, utc_now

logger = get_logger(__name__)


class TimerRegistry:
    """Keeps at most one pending ``threading.Timer`` per key.

    Example:
        >>> timers = TimerRegistry()
        >>> timers.arm("schedule-1", 30.0, lambda: print("fire"))
        >>> timers.cancel("schedule-1")
        True
    """

    name = "thread"

    def __init__(self) -> None:
        self._timers: dict[str, threading.Timer] = {}
        self._lock = threading.Lock()
        self._fire_count = 0
        self._last_fire = None

    def arm(self, key: str, delay_seconds: float, callback: Callable[[], Any]) -> None:
        """Schedule ``callback`` after ``delay_seconds``, replacing any pending timer for ``key``."""
        delay_seconds = max(0.0, delay_seconds)

        def _run() -> None:
            with self._lock:
                if self._timers.get(key) is timer:
                    del self._timers[key]
                self._fire_count += 1
                self._last_fire = utc_now()
            try:
                callback()
            except Exception:
                logger.exception("timer_callback_failed", key=key)

        timer = threading.Timer(delay_seconds, _run)
        timer.daemon = True
        timer.name = f"zyra-timer-{key}"

        with self._lock:
            previous = self._timers.pop(key, None)
            if previous is not None:
                previous.cancel()
            self._timers[key] = timer
        timer.start()

    def cancel(self, key: str) -> bool:
        """Cancel the pending timer for ``key``. Returns True if one was pending."""
        with self._lock:
            timer = self._timers.pop(key, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all(self) -> int:
        """Cancel every pending timer; returns how many were cancelled."""
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        return len(timers)

    def is_armed(self, key: str) -> bool:
        with self._lock:
            return key in self._timers

    @property
    def active_count(self) -> int:
        with self._lock:
            return len(self._timers)

    def health(self) -> dict[str, Any]:
        """Return timer health status."""
        return {
            "backend": self.name,
            "active_timers": self.active_count,
            "fire_count": self._fire_count,
            "last_fire": to_iso8601(self._last_fire),
        }
