"""Treatment-facility API schemas."""

from typing import Any

from pydantic import Field

from wastems.domain.enums import FacilityStatus, FacilityType
from wastems.schemas.common import CamelModel, GeoLocation, Quality, WasteType, partial_model


class FacilityCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    type: FacilityType
    location: GeoLocation
    capacity: float = Field(..., gt=0, description="Tons per day")
    ulb_id: str = Field(..., min_length=1)
    current_load: float | None = Field(default=None, ge=0)
    efficiency: float | None = Field(default=None, ge=0, le=100)
    status: FacilityStatus | None = None
    manager: str | dict[str, Any] | None = None
    contact: str | None = None
    operating_hours: dict[str, Any] | None = None


FacilityUpdate = partial_model(FacilityCreate)


class IntakeRequest(CamelModel):
    facility_id: str = Field(..., min_length=1)
    waste_type: WasteType
    quantity: float = Field(..., gt=0, description="Tons")
    source: str = Field(..., min_length=1)
    quality: Quality
    notes: str | None = None
