"""Citizens API: public registration, segregation training, kits and admin CRUD."""

import logging
from datetime import timedelta
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from wastems.api.crud import CrudResource, register_crud_routes
from wastems.api.dependencies import CurrentUser, ensure_self_or_roles, repository
from wastems.core.constants import SUPERVISOR_OR_ABOVE, ULB_ADMIN_OR_ABOVE
from wastems.domain.enums import TrainingModule, UserRole
from wastems.domain.exceptions import ValidationException
from wastems.domain.ratings import (
    as_mapping,
    as_number,
    citizen_compliance_score,
    citizen_training_progress,
    compliance_status,
    is_compliant,
)
from wastems.infrastructure.firebase.collections import COLLECTION_CITIZENS, COLLECTION_KIT_REQUESTS
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.citizens import (
    CertificateRequest,
    CitizenCreate,
    CitizenRegisterRequest,
    CitizenUpdate,
    KitRequest,
    TrainingCompleteRequest,
    TrainingEnrollRequest,
)
from wastems.shared.utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

COMPLETION_REWARD_POINTS = 100

# kitsReceived key, kit_requests kitType, delivery estimate in days
DUSTBIN_KIT = ("dustbins", "dustbin", 7)
COMPOST_KIT = ("compostKit", "compost", 5)

CitizenRepo = Annotated[DocumentRepository, Depends(repository(COLLECTION_CITIZENS, "Citizen"))]
KitRequestRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_KIT_REQUESTS, "Kit request"))
]


def initial_citizen_state() -> dict[str, Any]:
    return {
        "trainingStatus": {
            "completed": False,
            "modules": [],
            "completedModules": [],
            "certificate": None,
            "enrolledAt": None,
            "completedAt": None,
        },
        "kitsReceived": {"dustbins": None, "compostKit": None},
        "segregationCompliance": {"score": 0, "violations": [], "lastAssessment": None},
        "rewardPoints": 0,
        "penaltyHistory": [],
        "isActive": True,
    }


def _training_completed(citizen: dict[str, Any]) -> bool:
    return bool(as_mapping(citizen.get("trainingStatus")).get("completed"))


def _string_list(value: Any) -> list[str]:
    return [v for v in value if isinstance(v, str)] if isinstance(value, list) else []


def citizen_filter(citizen: dict[str, Any], value: str) -> bool:
    """trained / untrained / compliant (score >= 70) / non-compliant."""
    completed = _training_completed(citizen)
    if value == "trained":
        return completed
    if value == "untrained":
        return not completed
    if value == "compliant":
        return is_compliant(citizen_compliance_score(citizen))
    if value == "non-compliant":
        return not is_compliant(citizen_compliance_score(citizen))
    return False


def decorate_citizen(citizen: dict[str, Any]) -> dict[str, Any]:
    return {
        **citizen,
        "complianceStatus": compliance_status(citizen_compliance_score(citizen)),
        "trainingProgress": citizen_training_progress(citizen),
    }


CITIZENS = CrudResource(
    collection=COLLECTION_CITIZENS,
    label="Citizen",
    plural="citizens",
    create_model=CitizenCreate,
    update_model=CitizenUpdate,
    search_fields=("personalInfo.name", "aadhaar", "address.city"),
    filter_predicate=citizen_filter,
    decorate=decorate_citizen,
    defaults=initial_citizen_state,
    read_roles=SUPERVISOR_OR_ABOVE,
    get_roles=ULB_ADMIN_OR_ABOVE,
)


def _target_citizen(user: CurrentUser, citizen_id: str | None) -> str:
    """Citizens act on themselves; staff name the citizen in the body."""
    if user.role == UserRole.CITIZEN.value:
        return user.id
    if not citizen_id:
        raise ValidationException("Citizen ID required", field="citizenId")
    return citizen_id


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_citizen(body: CitizenRegisterRequest, citizens: CitizenRepo) -> dict:
    """Public self-registration; one citizen per Aadhaar number."""
    if await citizens.find_one("aadhaar", body.aadhaar) is not None:
        raise ValidationException(
            "Citizen already registered with this Aadhaar number", field="aadhaar"
        )
    record = await citizens.create({**initial_citizen_state(), **body.to_document()})
    logger.info("Citizen registered: %s", record["id"])
    return {
        "success": True,
        "message": "Citizen registered successfully",
        "citizen": {
            "id": record["id"],
            "personalInfo": record["personalInfo"],
            "aadhaar": record["aadhaar"],
            "address": record["address"],
            "trainingStatus": record["trainingStatus"],
        },
    }


@router.post("/training/enroll")
async def enroll_training(
    body: TrainingEnrollRequest, citizens: CitizenRepo, user: CurrentUser
) -> dict:
    citizen_id = _target_citizen(user, body.citizen_id)
    citizen = await citizens.get_or_404(citizen_id)
    training = dict(as_mapping(citizen.get("trainingStatus")))
    modules = _string_list(training.get("modules"))
    if body.module.value in modules:
        raise ValidationException("Already enrolled in this training module", field="module")
    training["modules"] = modules + [body.module.value]
    training["enrolledAt"] = utc_now()
    updated = await citizens.update(citizen_id, {"trainingStatus": training})
    return {
        "success": True,
        "message": "Successfully enrolled in training",
        "data": updated["trainingStatus"],
    }


@router.put("/training/complete")
async def complete_training(
    body: TrainingCompleteRequest, citizens: CitizenRepo, user: CurrentUser
) -> dict:
    """Mark one module complete; finishing all three awards bonus points once."""
    citizen_id = _target_citizen(user, body.citizen_id)
    citizen = await citizens.get_or_404(citizen_id)
    training = dict(as_mapping(citizen.get("trainingStatus")))
    if body.module.value not in _string_list(training.get("modules")):
        raise ValidationException("Not enrolled in this training module", field="module")

    completed_modules = _string_list(training.get("completedModules"))
    if body.module.value not in completed_modules:
        completed_modules.append(body.module.value)
    all_done = all(m.value in completed_modules for m in TrainingModule)
    newly_done = all_done and not training.get("completed")

    training["completedModules"] = completed_modules
    training["completed"] = all_done
    if newly_done:
        training["completedAt"] = utc_now()
    if body.score is not None:
        training["score"] = body.score

    changes: dict[str, Any] = {"trainingStatus": training}
    if newly_done:
        changes["rewardPoints"] = as_number(citizen.get("rewardPoints")) + COMPLETION_REWARD_POINTS
    updated = await citizens.update(citizen_id, changes)
    return {
        "success": True,
        "message": "Training module completed successfully",
        "data": updated["trainingStatus"],
    }


@router.get("/training/status/{citizen_id}")
async def training_status(citizen_id: str, citizens: CitizenRepo, user: CurrentUser) -> dict:
    ensure_self_or_roles(user, citizen_id, ULB_ADMIN_OR_ABOVE)
    citizen = await citizens.get_or_404(citizen_id)
    return {
        "success": True,
        "data": {
            **as_mapping(citizen.get("trainingStatus")),
            "progress": citizen_training_progress(citizen),
        },
    }


@router.post("/training/certificate")
async def issue_certificate(
    body: CertificateRequest, citizens: CitizenRepo, user: CurrentUser
) -> dict:
    """Stamp a certificate ID on a citizen who finished every module."""
    citizen_id = _target_citizen(user, body.citizen_id)
    citizen = await citizens.get_or_404(citizen_id)
    if not _training_completed(citizen):
        raise ValidationException("Training not completed", field="trainingStatus")
    training = dict(as_mapping(citizen.get("trainingStatus")))
    now = utc_now()
    training["certificate"] = f"CERT-{citizen.get('aadhaar')}-{int(now.timestamp() * 1000)}"
    await citizens.update(citizen_id, {"trainingStatus": training})
    return {
        "success": True,
        "message": "Certificate generated successfully",
        "data": {
            "certificateId": training["certificate"],
            "citizenName": as_mapping(citizen.get("personalInfo")).get("name"),
            "completedAt": training.get("completedAt"),
        },
    }


@router.get("/dustbin-kit/eligibility/{citizen_id}")
async def dustbin_kit_eligibility(citizen_id: str, citizens: CitizenRepo, user: CurrentUser) -> dict:
    ensure_self_or_roles(user, citizen_id, SUPERVISOR_OR_ABOVE)
    citizen = await citizens.get_or_404(citizen_id)
    trained = _training_completed(citizen)
    received = bool(as_mapping(citizen.get("kitsReceived")).get("dustbins"))
    if not trained:
        reason = "Training not completed"
    elif received:
        reason = "Already received"
    else:
        reason = "Eligible"
    return {
        "success": True,
        "data": {
            "isEligible": trained and not received,
            "reason": reason,
            "trainingCompleted": trained,
            "alreadyReceived": received,
        },
    }


async def _request_kit(
    kit: tuple[str, str, int],
    citizen: dict[str, Any],
    citizens: DocumentRepository,
    kit_requests: DocumentRepository,
) -> dict[str, Any]:
    """Open a kit request and record it under the citizen's kitsReceived."""
    key, kit_type, delivery_days = kit
    now = utc_now()
    request = await kit_requests.create({
        "citizenId": citizen["id"],
        "kitType": kit_type,
        "status": "pending",
        "requestedAt": now,
        "ulbId": citizen.get("ulbId"),
    })
    kits = dict(as_mapping(citizen.get("kitsReceived")))
    kits[key] = {"requestId": request["id"], "status": "pending", "requestedAt": now}
    await citizens.update(citizen["id"], {"kitsReceived": kits})
    logger.info("Kit request %s (%s) for citizen %s", request["id"], kit_type, citizen["id"])
    return {
        "requestId": request["id"],
        "status": "pending",
        "estimatedDelivery": now + timedelta(days=delivery_days),
    }


@router.post("/dustbin-kit/request")
async def request_dustbin_kit(
    body: KitRequest, citizens: CitizenRepo, kit_requests: KitRequestRepo, user: CurrentUser
) -> dict:
    """Trained citizens may request one dustbin kit."""
    citizen = await citizens.get_or_404(_target_citizen(user, body.citizen_id))
    if not _training_completed(citizen):
        raise ValidationException(
            "Training must be completed before requesting dustbin kit", field="trainingStatus"
        )
    if as_mapping(citizen.get("kitsReceived")).get("dustbins"):
        raise ValidationException("Dustbin kit already received", field="kitsReceived")
    data = await _request_kit(DUSTBIN_KIT, citizen, citizens, kit_requests)
    return {"success": True, "message": "Dustbin kit request submitted successfully", "data": data}


@router.post("/compost-kit/request")
async def request_compost_kit(
    body: KitRequest, citizens: CitizenRepo, kit_requests: KitRequestRepo, user: CurrentUser
) -> dict:
    citizen = await citizens.get_or_404(_target_citizen(user, body.citizen_id))
    if as_mapping(citizen.get("kitsReceived")).get("compostKit"):
        raise ValidationException("Compost kit already received", field="kitsReceived")
    data = await _request_kit(COMPOST_KIT, citizen, citizens, kit_requests)
    return {"success": True, "message": "Compost kit request submitted successfully", "data": data}


register_crud_routes(router, CITIZENS)
