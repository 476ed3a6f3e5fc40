"""Reminder scheduler tests.

Learn: tick() is exercised directly with a fixed clock, so window math
is deterministic. The periodic loop itself is covered with a tiny
interval.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from carepoint.events.types import APPOINTMENT_REMINDER
from carepoint.realtime.scheduler import (
    ReminderScheduler,
    ReminderState,
    due_reminders,
    minutes_until,
)
from carepoint.store.models import Appointment

NOW = datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc)


def _appt(appt_id: int, delta: timedelta, user_id: int = 7) -> Appointment:
    return Appointment(
        id=appt_id,
        user_id=user_id,
        doctor_id=1,
        date=NOW + delta,
        status="scheduled",
        reason="checkup",
    )


def _fetcher(appointments):
    async def fetch(user_id):
        return [a for a in appointments if a.user_id == user_id]
    return fetch


def _scheduler(fetch, dispatcher, **kwargs):
    kwargs.setdefault("clock", lambda: NOW)
    return ReminderScheduler(7, fetch, dispatcher, **kwargs)


# ═══════════════════════════════════════════════════════════
# Window math
# ═══════════════════════════════════════════════════════════


def test_minutes_until_rounds_down():
    assert minutes_until(_appt(1, timedelta(minutes=30, seconds=59)), NOW) == 30
    assert minutes_until(_appt(1, timedelta(seconds=59)), NOW) == 0


def test_due_reminders_window_edges():
    appointments = [
        _appt(1, timedelta(minutes=30)),        # inside
        _appt(2, timedelta(hours=24)),          # exactly 1440 min → inside
        _appt(3, timedelta(hours=24, minutes=1)),  # 1441 → outside
        _appt(4, timedelta(seconds=30)),        # 0 whole minutes → outside
        _appt(5, timedelta(minutes=-5)),        # past → outside
    ]
    due = due_reminders(appointments, NOW)
    assert [(a.id, m) for a, m in due] == [(1, 30), (2, 1440)]


def test_due_reminders_custom_window():
    due = due_reminders([_appt(1, timedelta(minutes=90))], NOW, window_minutes=60)
    assert due == []


# ═══════════════════════════════════════════════════════════
# Ticks
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_tick_dispatches_only_within_window(recording_dispatcher):
    fetch = _fetcher([
        _appt(1, timedelta(minutes=30)),
        _appt(2, timedelta(days=3)),
        _appt(3, timedelta(minutes=45), user_id=8),
    ])
    scheduler = _scheduler(fetch, recording_dispatcher)

    assert await scheduler.tick() == 1

    [(user_id, event)] = recording_dispatcher.calls
    assert user_id == 7
    assert event.type == APPOINTMENT_REMINDER
    assert event.message == "Upcoming appointment in 30 minutes"
    assert event.appointment.id == 1


@pytest.mark.asyncio
async def test_tick_refires_every_time(recording_dispatcher):
    """No memory between ticks: the same appointment is reminded again."""
    scheduler = _scheduler(_fetcher([_appt(1, timedelta(minutes=30))]), recording_dispatcher)

    await scheduler.tick()
    await scheduler.tick()
    await scheduler.tick()

    assert len(recording_dispatcher.calls) == 3


@pytest.mark.asyncio
async def test_far_appointment_reminded_once_window_opens(recording_dispatcher):
    now = [NOW]
    scheduler = _scheduler(
        _fetcher([_appt(1, timedelta(hours=25))]),
        recording_dispatcher,
        clock=lambda: now[0],
    )

    assert await scheduler.tick() == 0
    now[0] = NOW + timedelta(hours=1, minutes=1)
    assert await scheduler.tick() == 1


@pytest.mark.asyncio
async def test_reminders_stop_once_appointment_starts(recording_dispatcher):
    now = [NOW]
    scheduler = _scheduler(
        _fetcher([_appt(1, timedelta(minutes=2))]),
        recording_dispatcher,
        clock=lambda: now[0],
    )

    assert await scheduler.tick() == 1
    now[0] = NOW + timedelta(minutes=2)
    assert await scheduler.tick() == 0


@pytest.mark.asyncio
async def test_dedupe_reminds_once(recording_dispatcher):
    scheduler = _scheduler(
        _fetcher([_appt(1, timedelta(minutes=30))]), recording_dispatcher, dedupe=True
    )

    assert await scheduler.tick() == 1
    assert await scheduler.tick() == 0


@pytest.mark.asyncio
async def test_dedupe_retries_undelivered(recording_dispatcher):
    """A dropped reminder (user offline) is not marked as sent."""
    recording_dispatcher.delivered = False
    scheduler = _scheduler(
        _fetcher([_appt(1, timedelta(minutes=30))]), recording_dispatcher, dedupe=True
    )

    await scheduler.tick()
    await scheduler.tick()
    assert len(recording_dispatcher.calls) == 2


@pytest.mark.asyncio
async def test_fetch_failure_skips_tick(recording_dispatcher):
    attempts = []

    async def flaky_fetch(user_id):
        attempts.append(user_id)
        if len(attempts) == 1:
            raise ConnectionError("store unavailable")
        return [_appt(1, timedelta(minutes=30))]

    scheduler = _scheduler(flaky_fetch, recording_dispatcher)

    assert await scheduler.tick() == 0
    assert await scheduler.tick() == 1
    assert scheduler.ticks == 1


@pytest.mark.asyncio
async def test_dispatch_failure_does_not_abort_tick():
    class ExplodingDispatcher:
        def __init__(self):
            self.calls = 0

        async def dispatch(self, user_id, event):
            self.calls += 1
            if self.calls == 1:
                raise RuntimeError("boom")
            return True

    dispatcher = ExplodingDispatcher()
    scheduler = _scheduler(
        _fetcher([_appt(1, timedelta(minutes=10)), _appt(2, timedelta(minutes=20))]),
        dispatcher,
    )

    assert await scheduler.tick() == 1
    assert dispatcher.calls == 2


# ═══════════════════════════════════════════════════════════
# Lifecycle
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_periodic_loop_fires_and_stops(recording_dispatcher):
    scheduler = _scheduler(
        _fetcher([_appt(1, timedelta(minutes=30))]), recording_dispatcher, interval=0.01
    )
    assert scheduler.state is ReminderState.IDLE

    scheduler.start()
    assert scheduler.state is ReminderState.RUNNING
    for _ in range(100):
        if len(recording_dispatcher.calls) >= 2:
            break
        await asyncio.sleep(0.01)
    assert len(recording_dispatcher.calls) >= 2

    await scheduler.stop()
    assert scheduler.state is ReminderState.STOPPED
    fired = len(recording_dispatcher.calls)
    await asyncio.sleep(0.05)
    assert len(recording_dispatcher.calls) == fired


@pytest.mark.asyncio
async def test_fetch_failure_keeps_timer_running(recording_dispatcher):
    async def broken_fetch(user_id):
        raise ConnectionError("store unavailable")

    scheduler = _scheduler(broken_fetch, recording_dispatcher, interval=0.01)
    scheduler.start()
    await asyncio.sleep(0.05)

    assert scheduler.is_running
    await scheduler.stop()


@pytest.mark.asyncio
async def test_start_after_stop_rejected(recording_dispatcher):
    scheduler = _scheduler(_fetcher([]), recording_dispatcher)
    scheduler.start()
    await scheduler.stop()

    with pytest.raises(RuntimeError):
        scheduler.start()


@pytest.mark.asyncio
async def test_stop_is_idempotent(recording_dispatcher):
    scheduler = _scheduler(_fetcher([]), recording_dispatcher)
    await scheduler.stop()  # never started
    await scheduler.stop()
    assert scheduler.state is ReminderState.STOPPED
