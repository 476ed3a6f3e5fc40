"""Map-backed store for users, doctors, appointments and water intake.

Learn: Every method is async even though nothing here awaits. Callers
(services, the reminder scheduler) are written against an I/O-bound
store, so a database-backed replacement drops in without touching them.

No method awaits between reading and writing its maps, so each call is
atomic with respect to other tasks on the event loop.
"""

import itertools
from datetime import datetime, timezone
from typing import Optional

from carepoint.store.models import Appointment, Doctor, User, WaterIntake

SEED_DOCTORS = (
    Doctor(
        id=1,
        name="Dr. Sarah Johnson",
        specialty="General Medicine",
        image_url="https://api.dicebear.com/7.x/avataaars/svg?seed=dr1",
        available_days=("Monday", "Tuesday", "Wednesday"),
    ),
    Doctor(
        id=2,
        name="Dr. Michael Chen",
        specialty="Cardiology",
        image_url="https://api.dicebear.com/7.x/avataaars/svg?seed=dr2",
        available_days=("Wednesday", "Thursday", "Friday"),
    ),
)


class MemoryStore:
    """Process-local store. One instance per application."""

    def __init__(self, doctors: tuple[Doctor, ...] = SEED_DOCTORS):
        self._users: dict[int, User] = {}
        self._doctors: dict[int, Doctor] = {d.id: d for d in doctors}
        self._appointments: dict[int, Appointment] = {}
        self._water: dict[int, WaterIntake] = {}

        self._user_ids = itertools.count(1)
        self._appointment_ids = itertools.count(1)
        self._water_ids = itertools.count(1)

    # ─── Users ─────────────────────────────────────────────

    async def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    async def create_user(
        self,
        *,
        username: str,
        password_hash: str,
        full_name: str,
        email: str,
    ) -> User:
        user = User(
            id=next(self._user_ids),
            username=username,
            password_hash=password_hash,
            full_name=full_name,
            email=email,
        )
        self._users[user.id] = user
        return user

    # ─── Doctors ───────────────────────────────────────────

    async def get_doctors(self) -> list[Doctor]:
        return list(self._doctors.values())

    async def get_doctor(self, doctor_id: int) -> Optional[Doctor]:
        return self._doctors.get(doctor_id)

    # ─── Appointments ──────────────────────────────────────

    async def create_appointment(
        self,
        *,
        user_id: int,
        doctor_id: int,
        date: datetime,
        status: str,
        reason: str,
    ) -> Appointment:
        appointment = Appointment(
            id=next(self._appointment_ids),
            user_id=user_id,
            doctor_id=doctor_id,
            date=date,
            status=status,
            reason=reason,
        )
        self._appointments[appointment.id] = appointment
        return appointment

    async def get_user_appointments(self, user_id: int) -> list[Appointment]:
        return [a for a in self._appointments.values() if a.user_id == user_id]

    # ─── Water intake ──────────────────────────────────────

    async def add_water_intake(
        self,
        user_id: int,
        amount: int,
        timestamp: Optional[datetime] = None,
    ) -> WaterIntake:
        record = WaterIntake(
            id=next(self._water_ids),
            user_id=user_id,
            amount=amount,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        self._water[record.id] = record
        return record

    async def get_water_intake_history(self, user_id: int) -> list[WaterIntake]:
        """Newest first."""
        records = [w for w in self._water.values() if w.user_id == user_id]
        return sorted(records, key=lambda w: (w.timestamp, w.id), reverse=True)
