"""Doctor directory API — read-only, no auth required."""

from fastapi import APIRouter, Depends, HTTPException

from carepoint.api.deps import get_appointment_service
from carepoint.schemas.doctor import DoctorRead
from carepoint.services.appointment_service import AppointmentService

router = APIRouter()


@router.get("/doctors", response_model=list[DoctorRead])
async def list_doctors(svc: AppointmentService = Depends(get_appointment_service)):
    """List all doctors."""
    return await svc.list_doctors()


@router.get("/doctors/{doctor_id}", response_model=DoctorRead)
async def get_doctor(
    doctor_id: int,
    svc: AppointmentService = Depends(get_appointment_service),
):
    """Get a doctor by id."""
    doctor = await svc.get_doctor(doctor_id)
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return doctor
