"""Doctor directory schema."""

from pydantic import BaseModel, Field


class DoctorRead(BaseModel):
    id: int
    name: str
    specialty: str
    image_url: str = Field(alias="imageUrl")
    available_days: list[str] = Field(alias="availableDays")

    model_config = {"from_attributes": True, "populate_by_name": True}
