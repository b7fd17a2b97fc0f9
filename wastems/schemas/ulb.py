"""ULB API schemas."""

from typing import Any

from pydantic import Field

from wastems.schemas.common import Address, CamelModel, partial_model


class WasteManagementStatus(CamelModel):
    total_ward: int | None = Field(default=None, ge=1)
    active_wards: int | None = Field(default=None, ge=1)
    total_population: int | None = Field(default=None, ge=1)
    waste_generated_per_day: float | None = Field(default=None, ge=0)
    segregation_compliance: float | None = Field(default=None, ge=0, le=100)
    treatment_capacity: float | None = Field(default=None, ge=0)
    collection_efficiency: float | None = Field(default=None, ge=0, le=100)


class Policies(CamelModel):
    segregation_mandatory: bool | None = None
    penalty_amount: float | None = Field(default=None, ge=0)
    incentive_amount: float | None = Field(default=None, ge=0)
    training_required: bool | None = None


class ULBCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    code: str = Field(..., min_length=2, max_length=20)
    state: str = Field(..., min_length=1)
    district: str = Field(..., min_length=1)
    address: Address | None = None
    contact: dict[str, Any] | None = None
    waste_management_status: WasteManagementStatus | None = None
    policies: Policies | None = None
    is_active: bool | None = None


ULBUpdate = partial_model(ULBCreate)
