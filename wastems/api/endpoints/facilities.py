"""Treatment-facility API: capacity, intake and CRUD."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from wastems.api.crud import CrudResource, register_crud_routes
from wastems.api.dependencies import CurrentUser, repository, supervisor_or_above
from wastems.domain.entities import AuthenticatedUser
from wastems.domain.exceptions import ValidationException
from wastems.domain.ratings import as_number, efficiency_band, utilization
from wastems.infrastructure.firebase.collections import COLLECTION_WASTE_FACILITIES
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.facilities import FacilityCreate, FacilityUpdate, IntakeRequest
from wastems.shared.listing import field_in
from wastems.shared.utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

# Intake log entries kept on the facility document.
MAX_INTAKE_HISTORY = 50

FacilityRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_WASTE_FACILITIES, "Facility"))
]


def decorate_facility(facility: dict[str, Any]) -> dict[str, Any]:
    return {
        **facility,
        "utilization": utilization(
            as_number(facility.get("currentLoad")), as_number(facility.get("capacity"))
        ),
        "efficiencyBand": efficiency_band(as_number(facility.get("efficiency"))),
    }


FACILITIES = CrudResource(
    collection=COLLECTION_WASTE_FACILITIES,
    label="Facility",
    plural="facilities",
    create_model=FacilityCreate,
    update_model=FacilityUpdate,
    search_fields=("name", "location.address", "type"),
    filter_predicate=field_in("type", "status"),
    decorate=decorate_facility,
    defaults=lambda: {"currentLoad": 0, "efficiency": 0, "status": "active"},
)


@router.get("/capacity/{facility_id}")
async def facility_capacity(facility_id: str, facilities: FacilityRepo, _user: CurrentUser) -> dict:
    facility = await facilities.get_or_404(facility_id)
    capacity = facility.get("capacity") or 0
    current_load = facility.get("currentLoad") or 0
    return {
        "success": True,
        "data": {
            "facilityId": facility["id"],
            "name": facility.get("name"),
            "capacity": capacity,
            "currentLoad": current_load,
            "availableCapacity": max(0, capacity - current_load),
            "utilization": utilization(current_load, capacity),
            "status": facility.get("status"),
        },
    }


@router.put("/intake")
async def record_intake(
    body: IntakeRequest,
    facilities: FacilityRepo,
    user: Annotated[AuthenticatedUser, Depends(supervisor_or_above)],
) -> dict:
    """Add incoming tonnage to a facility's current load."""
    facility = await facilities.get_or_404(body.facility_id)
    capacity = facility.get("capacity") or 0
    new_load = (facility.get("currentLoad") or 0) + body.quantity
    if new_load > capacity:
        raise ValidationException(
            "Intake exceeds facility capacity",
            field="quantity",
            details={"capacity": capacity, "currentLoad": facility.get("currentLoad") or 0},
        )
    entry = {
        "wasteType": body.waste_type,
        "quantity": body.quantity,
        "source": body.source,
        "quality": body.quality,
        "notes": body.notes,
        "recordedBy": user.id,
        "receivedAt": utc_now(),
    }
    stored = facility.get("intakeHistory")
    history = (list(stored) if isinstance(stored, list) else []) + [entry]
    record = await facilities.update(
        body.facility_id,
        {"currentLoad": new_load, "intakeHistory": history[-MAX_INTAKE_HISTORY:]},
    )
    logger.info("Facility %s intake: %.2f t", body.facility_id, body.quantity)
    return {
        "success": True,
        "message": "Waste intake recorded successfully",
        "data": decorate_facility(record),
    }


register_crud_routes(router, FACILITIES)
