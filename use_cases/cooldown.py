"""Resend cooldown for verification codes."""

import logging
import threading
from typing import Callable, Optional, Protocol

log = logging.getLogger(__name__)


class ScheduledTick(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], ScheduledTick]


def thread_timer_scheduler(delay: float, callback: Callable[[], None]) -> ScheduledTick:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class ResendCooldown:
    """
    Countdown started after a code is sent. While it runs the send action is
    disabled; reaching zero re-enables it. Screens poll `remaining` to
    show the countdown.

    The owner must call `cancel()` when it is discarded so no tick fires
    against stale state.
    """

    def __init__(
        self,
        seconds: int = 60,
        interval: float = 1.0,
        scheduler: Scheduler = thread_timer_scheduler,
    ):
        self.seconds = seconds
        self.interval = interval
        self._scheduler = scheduler
        self._lock = threading.Lock()
        self._remaining = 0
        self._pending: Optional[ScheduledTick] = None

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def active(self) -> bool:
        return self._remaining > 0

    def start(self) -> None:
        with self._lock:
            self._cancel_pending()
            self._remaining = self.seconds
            self._pending = self._scheduler(self.interval, self.tick)

    def tick(self) -> None:
        with self._lock:
            if self._remaining <= 0:
                return
            self._remaining -= 1
            if self._remaining > 0:
                self._pending = self._scheduler(self.interval, self.tick)
                return
            self._pending = None
        log.debug("Resend cooldown finished")

    def cancel(self) -> None:
        with self._lock:
            self._cancel_pending()
            self._remaining = 0

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
