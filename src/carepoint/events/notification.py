"""Notification events pushed to the browser.

Learn: A NotificationEvent is an immutable value. The wire envelope is
always the same shape, whatever the type:

    {"type": "<event type>", "data": {"message": "...", "appointment": {...}}}

"appointment" is only present for appointment events.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from carepoint.events.types import (
    ALL_EVENT_TYPES,
    APPOINTMENT_CREATED,
    APPOINTMENT_REMINDER,
    CONNECTION_ESTABLISHED,
)
from carepoint.schemas.appointment import AppointmentRead
from carepoint.store.models import Appointment


@dataclass(frozen=True)
class NotificationEvent:
    type: str
    message: str
    appointment: Optional[Appointment] = None

    def __post_init__(self):
        if self.type not in ALL_EVENT_TYPES:
            raise ValueError(f"Unknown notification type: {self.type}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"message": self.message}
        if self.appointment is not None:
            data["appointment"] = AppointmentRead.model_validate(
                self.appointment
            ).model_dump(mode="json", by_alias=True)
        return {"type": self.type, "data": data}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def connection_established() -> NotificationEvent:
    return NotificationEvent(
        type=CONNECTION_ESTABLISHED,
        message="Connected to notification service",
    )


def appointment_created(appointment: Appointment) -> NotificationEvent:
    return NotificationEvent(
        type=APPOINTMENT_CREATED,
        message="New appointment scheduled successfully",
        appointment=appointment,
    )


def appointment_reminder(appointment: Appointment, minutes: int) -> NotificationEvent:
    return NotificationEvent(
        type=APPOINTMENT_REMINDER,
        message=f"Upcoming appointment in {minutes} minutes",
        appointment=appointment,
    )
