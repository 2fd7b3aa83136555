"""Re-fetch scheduling aligned to GDELT's publication cadence.

GDELT publishes a new export every 15 minutes. The next file is expected a
fixed offset after the timestamp embedded in the file just fetched; the
scheduler waits until then (plus a small grace) and triggers exactly one new
fetch cycle. At most one timer is ever pending: scheduling cancels the
previous timer first.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from config.defaults import (
    FALLBACK_RETRY_SECONDS,
    NEXT_UPDATE_OFFSET_MINUTES,
    UPDATE_GRACE_SECONDS,
)
from eventglobe.models.pipeline import utcnow
from eventglobe.utils.date_utils import isoformat_utc, parse_feed_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdatePlan:
    """When the next fetch should run and how long to wait for it."""

    next_update_time: Optional[datetime]   # None when the file timestamp was unusable
    delay_seconds: float
    is_fallback: bool = False

    @property
    def delay_ms(self) -> int:
        return int(round(self.delay_seconds * 1000))


def compute_update_plan(
    file_timestamp: Union[str, datetime, None],
    now: Optional[datetime] = None,
    offset_minutes: int = NEXT_UPDATE_OFFSET_MINUTES,
    grace_seconds: float = UPDATE_GRACE_SECONDS,
    fallback_seconds: float = FALLBACK_RETRY_SECONDS,
) -> UpdatePlan:
    """Compute the next fetch time from a file's embedded timestamp.

    next = timestamp + offset; delay = next - now + grace. A non-positive delay
    (the next file is already overdue) or an unparsable timestamp yields the
    fixed fallback delay instead.

    Args:
        file_timestamp: 14-digit YYYYMMDDHHMMSS string or aware UTC datetime.
        now: Current time (aware UTC); defaults to the wall clock.
        offset_minutes: Expected publication offset after the file timestamp.
        grace_seconds: Extra wait added after the expected publication time.
        fallback_seconds: Delay used when the computed delay is not positive.

    Returns:
        UpdatePlan with the next update time and the delay in seconds.
    """
    now = now or utcnow()
    if isinstance(file_timestamp, datetime):
        stamp: Optional[datetime] = file_timestamp
    else:
        stamp = parse_feed_timestamp(file_timestamp)

    if stamp is None:
        logger.warning("Unusable file timestamp %r — retrying in %.0fs", file_timestamp, fallback_seconds)
        return UpdatePlan(next_update_time=None, delay_seconds=fallback_seconds, is_fallback=True)

    next_update = stamp + timedelta(minutes=offset_minutes)
    delay = (next_update - now).total_seconds() + grace_seconds
    if delay <= 0:
        return UpdatePlan(next_update_time=next_update, delay_seconds=fallback_seconds, is_fallback=True)
    return UpdatePlan(next_update_time=next_update, delay_seconds=delay)


class UpdateScheduler:
    """Single-slot re-fetch timer.

    Args:
        callback: Zero-argument callable run when the timer fires (one fetch cycle).
        offset_minutes: Expected publication offset after the file timestamp.
        grace_seconds: Extra wait after the expected publication time.
        fallback_seconds: Delay used when the next file is already overdue.
        clock: Returns the current aware UTC time.
        timer_factory: threading.Timer-compatible factory ``(interval, function)``.
    """

    def __init__(
        self,
        callback: Callable[[], object],
        offset_minutes: int = NEXT_UPDATE_OFFSET_MINUTES,
        grace_seconds: float = UPDATE_GRACE_SECONDS,
        fallback_seconds: float = FALLBACK_RETRY_SECONDS,
        clock: Callable[[], datetime] = utcnow,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ) -> None:
        self._callback = callback
        self.offset_minutes = offset_minutes
        self.grace_seconds = grace_seconds
        self.fallback_seconds = fallback_seconds
        self._clock = clock
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._plan: Optional[UpdatePlan] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        """True while a timer is scheduled and has not fired or been cancelled."""
        with self._lock:
            return self._timer is not None

    @property
    def plan(self) -> Optional[UpdatePlan]:
        """The plan of the pending timer, if any."""
        with self._lock:
            return self._plan

    def compute(self, file_timestamp: Union[str, datetime, None]) -> UpdatePlan:
        return compute_update_plan(
            file_timestamp,
            now=self._clock(),
            offset_minutes=self.offset_minutes,
            grace_seconds=self.grace_seconds,
            fallback_seconds=self.fallback_seconds,
        )

    def schedule(self, file_timestamp: Union[str, datetime, None]) -> UpdatePlan:
        """Replace any pending timer with one aligned to the given file timestamp."""
        plan = self.compute(file_timestamp)
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            timer = self._timer_factory(plan.delay_seconds, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            self._plan = plan
            timer.start()

        logger.info(
            "Next update scheduled for %s (in %.1fs%s)",
            isoformat_utc(plan.next_update_time) or "unknown",
            plan.delay_seconds,
            ", fallback" if plan.is_fallback else "",
        )
        return plan

    def cancel(self) -> None:
        """Cancel the pending timer, if any."""
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            logger.debug("Cancelled pending update timer")
        self._timer = None
        self._plan = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A superseded or cancelled timer that already started must not run a cycle
            if self._timer is None or generation != self._generation:
                return
            self._timer = None
            self._plan = None

        logger.info("Update timer fired — starting fetch cycle")
        self._callback()
