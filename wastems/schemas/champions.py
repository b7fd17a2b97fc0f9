"""Green-champion API schemas."""

from datetime import datetime

from pydantic import EmailStr, Field

from wastems.schemas.common import (
    Address,
    CamelModel,
    GeoLocation,
    PersonalInfo,
    ViolationType,
    partial_model,
)
from wastems.schemas.monitoring import IssueType, Priority


class ChampionPersonalInfo(PersonalInfo):
    email: EmailStr


class ChampionRegisterRequest(CamelModel):
    personal_info: ChampionPersonalInfo
    area_assigned: str = Field(..., min_length=1)
    address: Address
    ulb_id: str = Field(..., min_length=1)


class PerformanceMetrics(CamelModel):
    total_reports: int = Field(default=0, ge=0)
    resolved_reports: int = Field(default=0, ge=0)
    citizens_trained: int = Field(default=0, ge=0)
    violations_reported: int = Field(default=0, ge=0)


class ChampionCreate(ChampionRegisterRequest):
    citizens_under_supervision: list[str] | None = None
    trainings_conducted: int | None = Field(default=None, ge=0)
    violations_reported: int | None = Field(default=None, ge=0)
    performance_metrics: PerformanceMetrics | None = None
    is_active: bool | None = None


ChampionUpdate = partial_model(ChampionCreate)


class MonitoringReportRequest(CamelModel):
    area: str = Field(..., min_length=1)
    issue_type: IssueType
    description: str = Field(..., min_length=1)
    location: GeoLocation | None = None
    photos: list[str] | None = None
    priority: Priority = "medium"


class ChampionViolationRequest(CamelModel):
    citizen_id: str = Field(..., min_length=1)
    violation_type: ViolationType
    description: str = Field(..., min_length=1)
    evidence: list[str] | None = None
    location: GeoLocation | None = None


class TrainingScheduleRequest(CamelModel):
    """Area, type and date are required; the handler reports a single message for them."""

    area: str | None = None
    training_type: str | None = None
    scheduled_date: datetime | None = None
    max_participants: int = Field(default=50, ge=1)
    description: str | None = None
