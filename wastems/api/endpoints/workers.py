"""Waste-worker API: registration, training phases, safety gear, attendance and CRUD."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from wastems.api.crud import CrudResource, list_page, register_crud_routes
from wastems.api.dependencies import (
    CurrentUser,
    ListQueryDep,
    ensure_self_or_roles,
    repository,
    supervisor_or_above,
    ulb_admin_or_above,
)
from wastems.core.constants import SUPERVISOR_OR_ABOVE, ULB_ADMIN_OR_ABOVE
from wastems.domain.entities import AuthenticatedUser
from wastems.domain.enums import UserRole
from wastems.domain.exceptions import ValidationException
from wastems.domain.ratings import (
    WORKER_TRAINING_PHASES,
    as_mapping,
    as_records,
    attendance_rate,
    safety_gear_percentage,
    safety_gear_status,
    worker_training_progress,
)
from wastems.infrastructure.firebase.collections import (
    COLLECTION_SAFETY_GEAR_REQUESTS,
    COLLECTION_WASTE_WORKERS,
)
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.workers import (
    AttendanceRequest,
    PhaseCompleteRequest,
    PhaseEnrollRequest,
    SafetyGearIssueRequest,
    SafetyGearRequest,
    WorkerCreate,
    WorkerRegisterRequest,
    WorkerUpdate,
)
from wastems.shared.listing import field_equals
from wastems.shared.utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

WorkerRepo = Annotated[DocumentRepository, Depends(repository(COLLECTION_WASTE_WORKERS, "Worker"))]
GearRequestRepo = Annotated[
    DocumentRepository,
    Depends(repository(COLLECTION_SAFETY_GEAR_REQUESTS, "Safety gear request")),
]
Supervisor = Annotated[AuthenticatedUser, Depends(supervisor_or_above)]


def initial_worker_state() -> dict[str, Any]:
    return {
        "trainingPhases": {phase: None for phase in WORKER_TRAINING_PHASES},
        "safetyGear": {
            "helmet": False,
            "gloves": False,
            "uniform": False,
            "boots": False,
            "mask": False,
        },
        "attendance": [],
        "performanceRating": 0,
        "isActive": True,
    }


def decorate_worker(worker: dict[str, Any]) -> dict[str, Any]:
    return {
        **worker,
        "trainingProgress": worker_training_progress(worker),
        "safetyGearStatus": safety_gear_status(worker),
    }


WORKERS = CrudResource(
    collection=COLLECTION_WASTE_WORKERS,
    label="Worker",
    plural="workers",
    create_model=WorkerCreate,
    update_model=WorkerUpdate,
    search_fields=("personalInfo.name", "employeeId", "area"),
    filter_predicate=field_equals("role"),
    decorate=decorate_worker,
    defaults=initial_worker_state,
    read_roles=SUPERVISOR_OR_ABOVE,
    get_roles=ULB_ADMIN_OR_ABOVE,
)


def _target_worker(user: AuthenticatedUser, worker_id: str | None) -> str:
    """Workers act on themselves; staff name the worker in the body."""
    if user.role == UserRole.WORKER.value:
        return user.id
    if not worker_id:
        raise ValidationException("Worker ID required", field="workerId")
    return worker_id


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_worker(
    body: WorkerRegisterRequest,
    workers: WorkerRepo,
    _user: Annotated[AuthenticatedUser, Depends(ulb_admin_or_above)],
) -> dict:
    """Register a worker; employee IDs are unique."""
    if await workers.find_one("employeeId", body.employee_id) is not None:
        raise ValidationException(
            "Worker already registered with this employee ID", field="employeeId"
        )
    record = await workers.create({**initial_worker_state(), **body.to_document()})
    logger.info("Worker registered: %s", record["id"])
    return {
        "success": True,
        "message": "Waste worker registered successfully",
        "worker": {
            "id": record["id"],
            "personalInfo": record["personalInfo"],
            "employeeId": record["employeeId"],
            "area": record["area"],
            "role": record["role"],
        },
    }


@router.get("/list")
async def list_workers(
    workers: WorkerRepo,
    query: ListQueryDep,
    _user: Supervisor,
) -> dict:
    """Same as GET /api/workers; kept for console builds that call /list."""
    return await list_page(workers, WORKERS, query)


@router.put("/attendance")
async def mark_attendance(body: AttendanceRequest, workers: WorkerRepo, user: CurrentUser) -> dict:
    """Append one attendance record; a date can only be marked once."""
    worker_id = _target_worker(user, body.worker_id)
    ensure_self_or_roles(user, worker_id, SUPERVISOR_OR_ABOVE)
    worker = await workers.get_or_404(worker_id)

    stored = worker.get("attendance")
    attendance = list(stored) if isinstance(stored, list) else []
    day = body.date.isoformat()
    if any(str(a.get("date", ""))[:10] == day for a in as_records(attendance)):
        raise ValidationException("Attendance already marked for this date", field="date")

    entry = {
        "date": day,
        "checkIn": body.check_in,
        "checkOut": body.check_out,
        "status": body.status.value,
        "notes": body.notes,
        "markedAt": utc_now(),
    }
    await workers.update(worker_id, {"attendance": attendance + [entry]})
    return {"success": True, "message": "Attendance marked successfully", "data": entry}


@router.get("/performance/{worker_id}")
async def worker_performance(
    worker_id: str,
    workers: WorkerRepo,
    _user: Supervisor,
) -> dict:
    worker = await workers.get_or_404(worker_id)
    attendance = as_records(worker.get("attendance"))
    phases = as_mapping(worker.get("trainingPhases"))
    return {
        "success": True,
        "data": {
            "workerId": worker["id"],
            "name": as_mapping(worker.get("personalInfo")).get("name"),
            "area": worker.get("area"),
            "role": worker.get("role"),
            "attendanceRate": attendance_rate(attendance),
            "performanceRating": worker.get("performanceRating", 0),
            "trainingProgress": {p: bool(phases.get(p)) for p in WORKER_TRAINING_PHASES},
            "trainingStatus": worker_training_progress(worker),
            "safetyGear": as_mapping(worker.get("safetyGear")),
            "safetyGearPercentage": round(safety_gear_percentage(worker)),
            "safetyGearStatus": safety_gear_status(worker),
            "totalDaysWorked": sum(1 for a in attendance if a.get("status") == "present"),
            "lastAttendance": attendance[-1] if attendance else None,
        },
    }


@router.post("/training/phase/{phase}")
async def enroll_training_phase(
    phase: str, body: PhaseEnrollRequest, workers: WorkerRepo, _user: Supervisor
) -> dict:
    """Start a worker on phase1, phase2 or phase3; the start date marks enrolment."""
    if phase not in WORKER_TRAINING_PHASES:
        raise ValidationException("Invalid training phase", field="phase")
    worker = await workers.get_or_404(body.worker_id)
    phases = dict(as_mapping(worker.get("trainingPhases")))
    if phases.get(phase):
        raise ValidationException(f"Already enrolled in {phase}", field="phase")
    phases[phase] = utc_now()
    updated = await workers.update(body.worker_id, {"trainingPhases": phases})
    return {
        "success": True,
        "message": f"Successfully enrolled in {phase}",
        "data": updated["trainingPhases"],
    }


@router.put("/training/complete")
async def complete_training_phase(
    body: PhaseCompleteRequest, workers: WorkerRepo, _user: Supervisor
) -> dict:
    phase = body.phase.value
    worker = await workers.get_or_404(body.worker_id)
    if not as_mapping(worker.get("trainingPhases")).get(phase):
        raise ValidationException(f"Not enrolled in {phase}", field="phase")
    stored = worker.get("completedPhases")
    completed = [p for p in stored if isinstance(p, str)] if isinstance(stored, list) else []
    if phase not in completed:
        completed.append(phase)
    score = body.score or 0
    scores = {**as_mapping(worker.get("trainingScores")), phase: score}
    await workers.update(body.worker_id, {"completedPhases": completed, "trainingScores": scores})
    return {
        "success": True,
        "message": f"{phase} completed successfully",
        "data": {"completedPhases": completed, "score": score},
    }


@router.get("/safety-gear/status/{worker_id}")
async def safety_gear(worker_id: str, workers: WorkerRepo, user: CurrentUser) -> dict:
    ensure_self_or_roles(user, worker_id, ULB_ADMIN_OR_ABOVE)
    worker = await workers.get_or_404(worker_id)
    return {
        "success": True,
        "data": {
            **as_mapping(worker.get("safetyGear")),
            "percentage": round(safety_gear_percentage(worker)),
            "status": safety_gear_status(worker),
        },
    }


@router.post("/safety-gear/request")
async def request_safety_gear(
    body: SafetyGearRequest,
    workers: WorkerRepo,
    gear_requests: GearRequestRepo,
    user: CurrentUser,
) -> dict:
    worker = await workers.get_or_404(_target_worker(user, body.worker_id))
    request = await gear_requests.create({
        "workerId": worker["id"],
        "equipment": body.equipment,
        "reason": body.reason,
        "status": "pending",
        "requestedAt": utc_now(),
        "ulbId": worker.get("ulbId"),
    })
    logger.info("Safety gear request %s for worker %s", request["id"], worker["id"])
    return {
        "success": True,
        "message": "Safety gear request submitted successfully",
        "data": {"requestId": request["id"], "equipment": body.equipment, "status": "pending"},
    }


@router.put("/safety-gear/issue")
async def issue_safety_gear(
    body: SafetyGearIssueRequest,
    workers: WorkerRepo,
    gear_requests: GearRequestRepo,
    _user: Supervisor,
) -> dict:
    """Mark equipment as handed over and close the worker's pending requests."""
    worker = await workers.get_or_404(body.worker_id)
    gear = {**as_mapping(worker.get("safetyGear")), **dict.fromkeys(body.equipment, True)}
    updated = await workers.update(body.worker_id, {"safetyGear": gear})
    pending = await gear_requests.query(
        [("workerId", "==", body.worker_id), ("status", "==", "pending")]
    )
    for request in pending:
        await gear_requests.update(request["id"], {"status": "issued", "issuedAt": utc_now()})
    return {
        "success": True,
        "message": "Safety gear issued successfully",
        "data": {
            "safetyGear": updated["safetyGear"],
            "safetyGearStatus": safety_gear_status(updated),
            "requestsClosed": len(pending),
        },
    }


register_crud_routes(router, WORKERS)
