"""Citizen API schemas."""

from datetime import datetime

from pydantic import Field

from wastems.domain.enums import TrainingModule
from wastems.schemas.common import (
    Address,
    CamelModel,
    PenaltyHistoryEntry,
    PersonalInfo,
    ViolationType,
    partial_model,
)


class CitizenRegisterRequest(CamelModel):
    personal_info: PersonalInfo
    aadhaar: str = Field(..., pattern=r"^[0-9]{12}$")
    address: Address
    ulb_id: str = Field(..., min_length=1)


class TrainingStatus(CamelModel):
    completed: bool = False
    modules: list[TrainingModule] = Field(default_factory=list)
    completed_modules: list[TrainingModule] = Field(default_factory=list)
    certificate: str | None = None
    score: float | None = Field(default=None, ge=0, le=100)
    enrolled_at: datetime | None = None
    completed_at: datetime | None = None


class KitRecord(CamelModel):
    request_id: str | None = None
    status: str = Field(default="pending", min_length=1)
    requested_at: datetime | None = None


class KitsReceived(CamelModel):
    dustbins: KitRecord | None = None
    compost_kit: KitRecord | None = None


class ComplianceViolation(CamelModel):
    violation_id: str | None = None
    violation_type: ViolationType
    amount: float | None = Field(default=None, ge=0)
    reported_at: datetime | None = None
    reported_by: str | None = None


class SegregationCompliance(CamelModel):
    score: float = Field(default=0, ge=0, le=100)
    violations: list[ComplianceViolation] = Field(default_factory=list)
    last_assessment: datetime | None = None


class CitizenCreate(CitizenRegisterRequest):
    """Admin-side create: registration fields plus any tracked state."""

    training_status: TrainingStatus | None = None
    kits_received: KitsReceived | None = None
    segregation_compliance: SegregationCompliance | None = None
    reward_points: int | None = Field(default=None, ge=0)
    penalty_history: list[PenaltyHistoryEntry] | None = None
    is_active: bool | None = None


CitizenUpdate = partial_model(CitizenCreate)


class TrainingEnrollRequest(CamelModel):
    module: TrainingModule
    citizen_id: str | None = None


class TrainingCompleteRequest(CamelModel):
    module: TrainingModule
    citizen_id: str | None = None
    score: float | None = Field(default=None, ge=0, le=100)


class KitRequest(CamelModel):
    citizen_id: str | None = None
    notes: str | None = None


class CertificateRequest(CamelModel):
    citizen_id: str | None = None
