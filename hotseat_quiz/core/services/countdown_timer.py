"""Cooperative countdown advanced by the host's update loop."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CountdownTimer:
    """Counts down by the elapsed time handed to :meth:`tick`.

    ``on_expire`` fires at most once per :meth:`start`, on the tick where the
    remaining time reaches zero while the timer is running.
    """

    def __init__(self, on_expire: Callable[[], None] | None = None) -> None:
        self._on_expire = on_expire
        self._duration: float = 0.0
        self._remaining: float = 0.0
        self._running: bool = False
        self._armed: bool = False

    def start(self, duration_seconds: float) -> None:
        if duration_seconds < 0:
            raise ValueError("Timer duration must not be negative.")
        self._duration = float(duration_seconds)
        self._remaining = float(duration_seconds)
        self._running = True
        self._armed = True
        logger.debug("Timer started for %.2fs", self._duration)

    def resume(self) -> None:
        """Continue counting down from the current remaining time.

        A resumed timer with no time left expires on the next tick.
        """
        if self._armed:
            self._running = True

    def stop(self) -> None:
        self._running = False

    def remaining(self) -> float:
        return max(0.0, self._remaining)

    @property
    def is_running(self) -> bool:
        return self._running

    def fraction_remaining(self) -> float:
        if self._duration <= 0:
            return 0.0
        return max(0.0, min(1.0, self._remaining / self._duration))

    def tick(self, delta_seconds: float) -> bool:
        """Advance the countdown. Returns True when this tick expired the timer."""
        if not self._running:
            return False
        if delta_seconds < 0:
            raise ValueError("Elapsed time must not be negative.")
        self._remaining -= delta_seconds
        if self._remaining > 0:
            return False
        self._running = False
        self._armed = False
        logger.debug("Timer expired after %.2fs", self._duration)
        if self._on_expire is not None:
            self._on_expire()
        return True
