"""Appointment service — booking, listing, doctor directory.

Learn: create_appointment() is the trigger point for real-time
notifications. After the appointment is stored it awaits a dispatch of
an appointment_created event to the owner, before the HTTP response goes
out. The dispatch is fire-and-forget from the caller's point of view:
if the user is offline, or delivery blows up, the booking still succeeds.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog

from carepoint.events.notification import appointment_created
from carepoint.store.memory import MemoryStore
from carepoint.store.models import Appointment, Doctor

logger = structlog.get_logger()


class DoctorNotFoundError(Exception):
    """Raised when booking with an unknown doctor id."""


class InvalidAppointmentError(Exception):
    """Raised when appointment fields fail domain validation."""


class AppointmentService:
    def __init__(self, store: MemoryStore, dispatcher=None):
        self.store = store
        self.dispatcher = dispatcher

    # ─── Doctors ─────────────────────────────────────────

    async def list_doctors(self) -> list[Doctor]:
        return await self.store.get_doctors()

    async def get_doctor(self, doctor_id: int) -> Optional[Doctor]:
        return await self.store.get_doctor(doctor_id)

    # ─── Appointments ────────────────────────────────────

    async def get_user_appointments(self, user_id: int) -> list[Appointment]:
        appointments = await self.store.get_user_appointments(user_id)
        return sorted(appointments, key=lambda a: (a.date, a.id))

    async def create_appointment(
        self,
        user_id: int,
        *,
        doctor_id: int,
        date: datetime,
        reason: str,
        status: str = "scheduled",
    ) -> Appointment:
        """Book an appointment and notify the owner."""
        if await self.store.get_doctor(doctor_id) is None:
            raise DoctorNotFoundError(f"Doctor {doctor_id} not found")

        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        if date <= datetime.now(timezone.utc):
            raise InvalidAppointmentError("Appointment date must be in the future")

        appointment = await self.store.create_appointment(
            user_id=user_id,
            doctor_id=doctor_id,
            date=date,
            status=status,
            reason=reason,
        )
        logger.info(
            "appointment.created",
            appointment_id=appointment.id,
            user_id=user_id,
            doctor_id=doctor_id,
        )

        await self._notify_created(appointment)
        return appointment

    async def _notify_created(self, appointment: Appointment) -> None:
        if self.dispatcher is None:
            return
        try:
            await self.dispatcher.dispatch(
                appointment.user_id, appointment_created(appointment)
            )
        except Exception as e:
            logger.warning(
                "appointment.notify_failed",
                appointment_id=appointment.id,
                error=str(e),
            )
