"""Water-intake tracking schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class WaterIntakeCreate(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in milliliters")


class WaterIntakeRead(BaseModel):
    id: int
    user_id: int = Field(alias="userId")
    amount: int
    timestamp: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class WaterAdviceRead(BaseModel):
    today_total: int = Field(alias="todayTotal")
    target: int
    advice: str

    model_config = {"populate_by_name": True}
