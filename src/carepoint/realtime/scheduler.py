"""Reminder scheduler — per-user periodic appointment reminders.

Learn: One ReminderScheduler per connected user, owned by that user's
registry entry. Lifecycle:

  idle → running (start) → stopped (stop/cancel)

Every tick re-reads the user's full appointment list and dispatches an
appointment_reminder for each one starting within the window (24h by
default). Nothing is remembered between ticks, so an appointment inside
the window is reminded on every tick until it starts. Pass dedupe=True
to remind each appointment once per connection instead.

A failing fetch skips the tick; the next tick simply tries again.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Awaitable, Callable, Optional

import structlog

from carepoint.events.notification import appointment_reminder
from carepoint.store.models import Appointment

logger = structlog.get_logger()

AppointmentFetcher = Callable[[int], Awaitable[list[Appointment]]]

DEFAULT_INTERVAL_SECONDS = 60.0
DEFAULT_WINDOW_MINUTES = 24 * 60


class ReminderState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def minutes_until(appointment: Appointment, now: datetime) -> int:
    """Whole minutes until the appointment, rounded down."""
    return (appointment.date - now) // timedelta(minutes=1)


def due_reminders(
    appointments: list[Appointment],
    now: datetime,
    window_minutes: int = DEFAULT_WINDOW_MINUTES,
) -> list[tuple[Appointment, int]]:
    """Appointments starting within the window, with minutes remaining."""
    due = []
    for appointment in appointments:
        minutes = minutes_until(appointment, now)
        if 0 < minutes <= window_minutes:
            due.append((appointment, minutes))
    return due


class ReminderScheduler:
    """Periodic reminder task for a single user."""

    def __init__(
        self,
        user_id: int,
        fetch: AppointmentFetcher,
        dispatcher,
        *,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        window_minutes: int = DEFAULT_WINDOW_MINUTES,
        dedupe: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.user_id = user_id
        self.interval = interval
        self.window_minutes = window_minutes
        self.dedupe = dedupe
        self._fetch = fetch
        self._dispatcher = dispatcher
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._notified: set[int] = set()
        self.state = ReminderState.IDLE
        self.ticks = 0

    # ─── Lifecycle ────────────────────────────────────────

    def start(self) -> None:
        if self.state is ReminderState.STOPPED:
            raise RuntimeError(f"Reminder for user {self.user_id} already stopped")
        if self.state is ReminderState.RUNNING:
            return
        self._task = asyncio.create_task(
            self._run(), name=f"reminder:user:{self.user_id}"
        )
        self.state = ReminderState.RUNNING
        logger.debug("reminder.started", user_id=self.user_id, interval=self.interval)

    def cancel(self) -> None:
        """Request cancellation without waiting. Safe to call repeatedly."""
        self.state = ReminderState.STOPPED
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def stop(self) -> None:
        """Cancel the periodic task and wait for it to finish."""
        self.cancel()
        task = self._task
        if task is None or task is asyncio.current_task():
            return
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("reminder.stopped", user_id=self.user_id, ticks=self.ticks)

    @property
    def is_running(self) -> bool:
        return (
            self.state is ReminderState.RUNNING
            and self._task is not None
            and not self._task.done()
        )

    # ─── Ticking ──────────────────────────────────────────

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.tick()

    async def tick(self) -> int:
        """Check appointments once. Returns the number of reminders dispatched."""
        try:
            appointments = await self._fetch(self.user_id)
        except Exception as e:
            logger.warning("reminder.fetch_failed", user_id=self.user_id, error=str(e))
            return 0

        self.ticks += 1
        sent = 0
        for appointment, minutes in due_reminders(
            appointments, self._clock(), self.window_minutes
        ):
            if self.dedupe and appointment.id in self._notified:
                continue
            try:
                delivered = await self._dispatcher.dispatch(
                    self.user_id, appointment_reminder(appointment, minutes)
                )
            except Exception as e:
                logger.warning(
                    "reminder.dispatch_failed",
                    user_id=self.user_id,
                    appointment_id=appointment.id,
                    error=str(e),
                )
                continue
            sent += 1
            if self.dedupe and delivered:
                self._notified.add(appointment.id)
        return sent
