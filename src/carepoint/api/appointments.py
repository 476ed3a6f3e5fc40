"""Appointments API — list and book for the current user.

Learn: Booking goes through AppointmentService, which pushes an
appointment_created event to the user's WebSocket (if any) before the
201 is returned. A missing or broken socket never fails the booking.
"""

from fastapi import APIRouter, Depends, HTTPException

from carepoint.api.deps import get_appointment_service
from carepoint.auth.dependencies import CurrentUser, get_current_user
from carepoint.schemas.appointment import AppointmentCreate, AppointmentRead
from carepoint.services.appointment_service import (
    AppointmentService,
    DoctorNotFoundError,
    InvalidAppointmentError,
)

router = APIRouter()


@router.get("/appointments", response_model=list[AppointmentRead])
async def list_appointments(
    current: CurrentUser = Depends(get_current_user),
    svc: AppointmentService = Depends(get_appointment_service),
):
    """List the current user's appointments, soonest first."""
    return await svc.get_user_appointments(current.user_id)


@router.post("/appointments", response_model=AppointmentRead, status_code=201)
async def create_appointment(
    body: AppointmentCreate,
    current: CurrentUser = Depends(get_current_user),
    svc: AppointmentService = Depends(get_appointment_service),
):
    """Book an appointment for the current user."""
    try:
        return await svc.create_appointment(
            current.user_id,
            doctor_id=body.doctor_id,
            date=body.date,
            reason=body.reason,
            status=body.status,
        )
    except DoctorNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidAppointmentError as e:
        raise HTTPException(status_code=400, detail=str(e))
