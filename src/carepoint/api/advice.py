"""Health assistant API — symptom checker, daily tip, emergency requests."""

import time

from fastapi import APIRouter, Depends, HTTPException

from carepoint.api.deps import get_advisor
from carepoint.schemas.advice import (
    EmergencyRequest,
    EmergencyResponse,
    HealthAdviceRead,
    HealthTipRead,
    SymptomsRequest,
)
from carepoint.services.health_advisor import random_tip
from carepoint.services.llm_advisor import AdviceUnavailableError

router = APIRouter()


@router.post("/health-advice", response_model=HealthAdviceRead)
async def health_advice(body: SymptomsRequest, advisor=Depends(get_advisor)):
    """Get advice for free-text symptoms."""
    if not body.symptoms.strip():
        raise HTTPException(status_code=400, detail="Symptoms are required")
    try:
        return await advisor.advise(body.symptoms)
    except AdviceUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/health-tip", response_model=HealthTipRead)
async def health_tip():
    """Get a random daily health tip."""
    return HealthTipRead(tip=random_tip())


@router.post("/emergency", response_model=EmergencyResponse)
async def request_emergency(body: EmergencyRequest):
    """Request emergency services.

    Simulated: no emergency-services provider is integrated, the request
    is acknowledged immediately.
    """
    if not body.location.strip() or not body.details.strip():
        raise HTTPException(
            status_code=400,
            detail="Location and emergency details are required",
        )
    return EmergencyResponse(
        message="Emergency services have been notified",
        estimated_arrival="10-15 minutes",
        emergency_id=str(int(time.time() * 1000)),
        instructions=(
            "Stay calm. Emergency services are on their way. If possible, send "
            "someone to guide the ambulance to your exact location."
        ),
    )
