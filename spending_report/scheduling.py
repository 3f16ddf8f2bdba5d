"""Self-renewing timer that fires at each calendar month boundary."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
TimerFactory = Callable[[float, Callable[[], None]], "threading.Timer"]


def next_month_boundary(now: datetime) -> datetime:
    """Return the first instant of the calendar month after ``now``."""
    return (now + relativedelta(months=1)).replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class MonthlyRollover:
    """Cancellable one-shot timer keyed by the next month boundary.

    Each time the timer fires the callback runs and a new timer is armed for
    the following boundary, until :meth:`cancel` is called.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        clock: Clock = datetime.now,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self._callback = callback
        self._clock = clock
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._next_fire_at: Optional[datetime] = None
        self._cancelled = False
        self._lock = threading.Lock()

    @property
    def next_fire_at(self) -> Optional[datetime]:
        return self._next_fire_at

    @property
    def is_armed(self) -> bool:
        return self._timer is not None and not self._cancelled

    def start(self) -> "MonthlyRollover":
        with self._lock:
            self._cancelled = False
            if self._timer is None:
                self._arm()
        return self

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._next_fire_at = None

    def _arm(self) -> None:
        now = self._clock()
        fire_at = next_month_boundary(now)
        delay = max((fire_at - now).total_seconds(), 0.0)
        timer = self._timer_factory(delay, self._fire)
        timer.daemon = True
        self._timer = timer
        self._next_fire_at = fire_at
        timer.start()
        logger.debug("Monthly rollover armed for %s (in %.0fs)", fire_at.isoformat(), delay)

    def _fire(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._timer = None
            if self._next_fire_at is not None and self._clock() < self._next_fire_at:
                # Wall clock lags the monotonic timer across a DST fall-back.
                self._arm()
                return
        try:
            self._callback()
        except Exception:
            # The schedule must survive a failing reset; the next month retries.
            logger.exception("Monthly rollover callback failed")
        with self._lock:
            if not self._cancelled:
                self._arm()
