"""Repeating refresh timer."""

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 30.0


class Poller:
    """Runs a callback after a fixed delay, one pending run at a time.

    The callback decides whether polling continues by calling schedule()
    again; stop() cancels whatever is pending.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval: float = DEFAULT_POLL_INTERVAL,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.callback = callback
        self.interval = interval
        self._timer_factory = timer_factory
        self._timer: threading.Timer | None = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._timer is not None

    def schedule(self) -> None:
        """Arm the timer, replacing any run that is already pending."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = self._timer_factory(
                self.interval, self._fire, args=(self._generation,)
            )
            self._timer.daemon = True
            self._timer.start()
        logger.debug("Next refresh in %.0fs", self.interval)

    def start(self) -> None:
        self.schedule()

    def stop(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            # a timer replaced or stopped after it started firing
            if generation != self._generation:
                return
            self._timer = None
        self.callback()
