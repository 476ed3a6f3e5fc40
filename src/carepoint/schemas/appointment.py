"""Pydantic schemas for appointments.

Learn: JSON field names are camelCase (doctorId, userId) to match what
the browser client sends and expects. Aliases keep the Python side
snake_case. Naive datetimes from the client are taken as UTC so every
stored date is comparable with datetime.now(timezone.utc).
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator


class AppointmentCreate(BaseModel):
    """Booking request. The owner comes from the session, never the body."""
    doctor_id: int = Field(..., alias="doctorId", description="Doctor to book")
    date: datetime = Field(..., description="Scheduled time (must be in the future)")
    reason: str = Field(..., min_length=1, description="Reason for the visit")
    status: str = Field("scheduled", description="Initial status")

    model_config = {"populate_by_name": True}

    @field_validator("date")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class AppointmentRead(BaseModel):
    id: int
    user_id: int = Field(alias="userId")
    doctor_id: int = Field(alias="doctorId")
    date: datetime
    status: str
    reason: str

    model_config = {"from_attributes": True, "populate_by_name": True}
