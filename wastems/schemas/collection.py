"""Collection-vehicle API schemas."""

from typing import Any, Literal

from pydantic import Field

from wastems.domain.enums import VehicleStatus
from wastems.schemas.common import CamelModel, GeoLocation, partial_model

VehicleType = Literal["truck", "van", "tractor", "compactor", "other"]


class VehicleCreate(CamelModel):
    vehicle_number: str = Field(..., min_length=1)
    type: VehicleType
    capacity: float = Field(..., gt=0)
    ulb_id: str = Field(..., min_length=1)
    area: str | None = None
    driver: dict[str, Any] | None = None
    route: dict[str, Any] | list[Any] | None = None
    status: VehicleStatus | None = None
    location: GeoLocation | None = None
    fuel_efficiency: float | None = Field(default=None, ge=0)


VehicleUpdate = partial_model(VehicleCreate)


class VehicleStatusRequest(CamelModel):
    status: VehicleStatus
    location: GeoLocation | None = None
    fuel_level: float | None = Field(default=None, ge=0, le=100)
    notes: str | None = None
