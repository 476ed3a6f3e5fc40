"""Schemas for the symptom checker, health tips and emergency requests."""

from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["low", "medium", "high"]


class SymptomsRequest(BaseModel):
    symptoms: str = Field("", description="Free-text description of symptoms")


class HealthAdviceRead(BaseModel):
    advice: str
    severity: Severity
    seek_medical_attention: bool = Field(alias="seekMedicalAttention")

    model_config = {"from_attributes": True, "populate_by_name": True}


class HealthTipRead(BaseModel):
    tip: str


class EmergencyRequest(BaseModel):
    location: str = ""
    details: str = ""


class EmergencyResponse(BaseModel):
    message: str
    estimated_arrival: str = Field(alias="estimatedArrival")
    emergency_id: str = Field(alias="emergencyId")
    instructions: str

    model_config = {"populate_by_name": True}
