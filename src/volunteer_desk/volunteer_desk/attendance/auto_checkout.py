from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import minutes_of_day, now_local
from ..core.constants import (
    DEFAULT_CHECKOUT_BUFFER_MINUTES,
    DEFAULT_MAX_LATE_CHECKOUT_MINUTES,
    DEFAULT_SWEEP_WORKERS,
)
from ..core.enums import CheckoutOutcome
from ..realtime.notifier import Notifier
from ..signups.model import Signup
from ..signups.repository import SignupRepository
from .service import AttendanceService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepOutcome:
    signup_id: str
    position_id: str
    volunteer_name: str
    outcome: CheckoutOutcome
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "signup_id": self.signup_id,
            "position_id": self.position_id,
            "volunteer_name": self.volunteer_name,
            "outcome": self.outcome.value,
            "error": self.error,
        }


@dataclass(frozen=True)
class SweepReport:
    outcomes: tuple[SweepOutcome, ...] = ()

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.outcome == CheckoutOutcome.CHECKED_OUT)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.outcome == CheckoutOutcome.FAILED)

    def summary(self) -> str:
        parts = []
        if self.succeeded:
            n = self.succeeded
            parts.append(f"{n} volunteer{'s' if n > 1 else ''} automatically checked out - shift{'s' if n > 1 else ''} ended")
        if self.failed:
            n = self.failed
            parts.append(f"Failed to auto-check out {n} volunteer{'s' if n > 1 else ''}")
        return "; ".join(parts) or "No shifts to close"


def is_due_for_checkout(
    signup: Signup,
    current_minutes: int,
    *,
    buffer_minutes: int = DEFAULT_CHECKOUT_BUFFER_MINUTES,
    max_late_window_minutes: int = DEFAULT_MAX_LATE_CHECKOUT_MINUTES,
) -> bool:
    """A checked-in signup is due once its buffered end time passed, but not later than the late window.

    Works on minutes of the day, so dates are not compared.
    """
    if not signup.arrived:
        return False
    elapsed = current_minutes - (minutes_of_day(signup.end_time) + buffer_minutes)
    return 0 <= elapsed <= max_late_window_minutes


class AutoCheckoutSweep:
    """Checks out volunteers whose shift ended, over whatever volunteer list it is handed.

    The sweep remembers which signups it already checked out so the same
    stale list does not trigger a second checkout on the next tick. An id is
    forgotten as soon as it no longer appears in a non-empty input.
    """

    def __init__(
        self,
        engine: AttendanceService,
        notifier: Optional[Notifier] = None,
        *,
        buffer_minutes: int = DEFAULT_CHECKOUT_BUFFER_MINUTES,
        max_late_window_minutes: int = DEFAULT_MAX_LATE_CHECKOUT_MINUTES,
        max_workers: int = DEFAULT_SWEEP_WORKERS,
    ):
        self._engine = engine
        self._notifier = notifier
        self._buffer = int(buffer_minutes)
        self._window = int(max_late_window_minutes)
        self._max_workers = max(1, int(max_workers))
        self._processed: set[str] = set()
        self._lock = threading.Lock()

    @property
    def processed_ids(self) -> frozenset[str]:
        return frozenset(self._processed)

    def select_due(self, volunteers: Iterable[Signup], now: datetime) -> list[Signup]:
        current = minutes_of_day(now)
        return [
            v
            for v in volunteers
            if v.signup_id not in self._processed
            and is_due_for_checkout(
                v,
                current,
                buffer_minutes=self._buffer,
                max_late_window_minutes=self._window,
            )
        ]

    def run(self, volunteers: Sequence[Signup], now: Optional[datetime] = None) -> SweepReport:
        with self._lock:
            if not volunteers:
                return SweepReport()
            self._processed &= {v.signup_id for v in volunteers}

            due = self.select_due(volunteers, now or now_local())
            if not due:
                return SweepReport()

            logger.info("Auto-checkout: found %d volunteer(s) to check out", len(due))
            with ThreadPoolExecutor(max_workers=min(self._max_workers, len(due))) as pool:
                outcomes = tuple(pool.map(self._check_out, due))

            for outcome in outcomes:
                if outcome.outcome == CheckoutOutcome.CHECKED_OUT:
                    self._processed.add(outcome.signup_id)

        report = SweepReport(outcomes=outcomes)
        if report.succeeded:
            logger.info(report.summary())
            if self._notifier is not None:
                self._notifier.invalidate_positions(v.position_id for v in due)
        if report.failed:
            logger.error("Auto-checkout failures: %s", [o.to_dict() for o in outcomes if o.error])
        return report

    def _check_out(self, volunteer: Signup) -> SweepOutcome:
        logger.info("Auto-checking out volunteer %s - shift ended", volunteer.volunteer_name)
        try:
            self._engine.set_arrival(volunteer.signup_id, False, volunteer.position_id, notify=False)
        except Exception as exc:
            logger.error("Failed to auto-check out volunteer %s: %s", volunteer.volunteer_name, exc)
            return SweepOutcome(
                signup_id=volunteer.signup_id,
                position_id=volunteer.position_id,
                volunteer_name=volunteer.volunteer_name,
                outcome=CheckoutOutcome.FAILED,
                error=str(exc),
            )
        return SweepOutcome(
            signup_id=volunteer.signup_id,
            position_id=volunteer.position_id,
            volunteer_name=volunteer.volunteer_name,
            outcome=CheckoutOutcome.CHECKED_OUT,
        )


def scoped_volunteer_loader(
    signups: SignupRepository,
    *,
    event_id: Optional[str] = None,
    position_id: Optional[str] = None,
) -> Callable[[], Sequence[Signup]]:
    """Loader for the volunteer list a sweep session works on."""

    def load() -> Sequence[Signup]:
        if position_id:
            return signups.list_for_position(position_id)
        if event_id:
            return signups.list_for_event(event_id)
        return signups.list_all()

    return load
