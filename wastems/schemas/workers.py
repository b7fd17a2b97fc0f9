"""Waste-worker API schemas."""

from datetime import date, datetime
from typing import Literal

from pydantic import Field

from wastems.domain.enums import AttendanceStatus, WorkerRole, WorkerTrainingPhase
from wastems.schemas.common import (
    PHONE_PATTERN,
    TIME_PATTERN,
    Address,
    CamelModel,
    PersonalInfo,
    partial_model,
)

SafetyGearItem = Literal["helmet", "gloves", "uniform", "boots", "mask"]


class WorkerPersonalInfo(PersonalInfo):
    emergency_contact: str = Field(..., pattern=PHONE_PATTERN)


class WorkerRegisterRequest(CamelModel):
    personal_info: WorkerPersonalInfo
    employee_id: str = Field(..., min_length=1)
    area: str = Field(..., min_length=1)
    role: WorkerRole
    address: Address
    ulb_id: str = Field(..., min_length=1)


class TrainingPhases(CamelModel):
    """Enrolment date per phase; None until the worker starts it."""

    phase1: datetime | None = None
    phase2: datetime | None = None
    phase3: datetime | None = None


class SafetyGear(CamelModel):
    helmet: bool = False
    gloves: bool = False
    uniform: bool = False
    boots: bool = False
    mask: bool = False


class AttendanceEntry(CamelModel):
    date: date
    check_in: str = Field(..., pattern=TIME_PATTERN)
    check_out: str | None = Field(default=None, pattern=TIME_PATTERN)
    status: AttendanceStatus
    notes: str | None = None
    marked_at: datetime | None = None


class WorkerCreate(WorkerRegisterRequest):
    training_phases: TrainingPhases | None = None
    safety_gear: SafetyGear | None = None
    attendance: list[AttendanceEntry] | None = None
    performance_rating: float | None = Field(default=None, ge=0, le=5)
    is_active: bool | None = None


WorkerUpdate = partial_model(WorkerCreate)


class AttendanceRequest(CamelModel):
    worker_id: str | None = None
    date: date
    check_in: str = Field(..., pattern=TIME_PATTERN)
    check_out: str | None = Field(default=None, pattern=TIME_PATTERN)
    status: AttendanceStatus
    notes: str | None = None


class PhaseEnrollRequest(CamelModel):
    worker_id: str = Field(..., min_length=1)


class PhaseCompleteRequest(CamelModel):
    worker_id: str = Field(..., min_length=1)
    phase: WorkerTrainingPhase
    score: float | None = Field(default=None, ge=0, le=100)


class SafetyGearRequest(CamelModel):
    worker_id: str | None = None
    equipment: list[SafetyGearItem] = Field(..., min_length=1)
    reason: str | None = None


class SafetyGearIssueRequest(CamelModel):
    worker_id: str = Field(..., min_length=1)
    equipment: list[SafetyGearItem] = Field(..., min_length=1)
