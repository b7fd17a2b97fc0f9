"""Household, bulk-generator and segregation API schemas."""

from typing import Any, Literal

from pydantic import Field

from wastems.schemas.common import (
    Address,
    CamelModel,
    GeoLocation,
    PenaltyHistoryEntry,
    ViolationType,
    partial_model,
)

BulkGeneratorType = Literal[
    "restaurant", "hotel", "mall", "hospital", "school", "office", "factory", "other"
]
ComplianceStatus = Literal["pending", "compliant", "non_compliant"]


class HouseholdCreate(CamelModel):
    address: Address
    resident_count: int = Field(..., ge=1, le=20)
    ulb_id: str = Field(..., min_length=1)
    contact_info: dict[str, Any] | None = None
    segregation_status: dict[str, Any] | None = None
    collection_schedule: dict[str, Any] | None = None
    compliance_score: float | None = Field(default=None, ge=0, le=100)


HouseholdUpdate = partial_model(HouseholdCreate)


class BulkGeneratorCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    type: BulkGeneratorType
    address: Address
    ulb_id: str = Field(..., min_length=1)
    contact_info: dict[str, Any] | None = None
    waste_generation: dict[str, float] | None = None
    compliance_status: ComplianceStatus | None = None
    penalty_history: list[PenaltyHistoryEntry] | None = None


BulkGeneratorUpdate = partial_model(BulkGeneratorCreate)


class ViolationReportRequest(CamelModel):
    household_id: str = Field(..., min_length=1)
    citizen_id: str | None = None
    violation_type: ViolationType
    description: str = Field(..., min_length=1)
    evidence: list[str] | None = None
    location: GeoLocation
    reported_by: str | None = None
