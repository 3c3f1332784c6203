"""Cancellable delayed job used to play the automated opponent's move."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DelayedMoveScheduler:
    """Holds at most one armed timer.

    Each arm or cancel bumps a generation counter. The callback receives the
    generation it was armed with and should confirm it with ``is_current``
    while holding its own state lock; a stale job must do nothing, so a
    cancelled or superseded job can never apply a move.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._timer is not None

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return self._timer is not None and generation == self._generation

    def arm(self, delay: float, callback: Callable[[int], None]) -> int:
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            generation = self._generation
            timer = threading.Timer(max(delay, 0.0), self._fire, args=(generation, callback))
            timer.daemon = True
            self._timer = timer
            timer.start()
        logger.debug("armed job %d (%.3fs)", generation, delay)
        return generation

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        self._generation += 1
        logger.debug("cancelled pending job")

    def _fire(self, generation: int, callback: Callable[[int], None]) -> None:
        if not self.is_current(generation):
            return
        try:
            callback(generation)
        except Exception:  # noqa: BLE001
            logger.exception("delayed job %d failed", generation)
        finally:
            with self._lock:
                if generation == self._generation:
                    self._timer = None
