"""Domain entities held by the store.

Plain dataclasses: the API layer converts them to Pydantic schemas
(from_attributes) on the way out.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    id: int
    username: str
    password_hash: str
    full_name: str
    email: str
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class Doctor:
    id: int
    name: str
    specialty: str
    image_url: str
    available_days: tuple[str, ...]


@dataclass(frozen=True)
class Appointment:
    """A booked appointment. `date` is always timezone-aware UTC."""
    id: int
    user_id: int
    doctor_id: int
    date: datetime
    status: str
    reason: str


@dataclass(frozen=True)
class WaterIntake:
    id: int
    user_id: int
    amount: int  # ml
    timestamp: datetime
