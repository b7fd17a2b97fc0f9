"""Collection-vehicle API."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from wastems.api.crud import CrudResource, register_crud_routes
from wastems.api.dependencies import repository, supervisor_or_above
from wastems.domain.entities import AuthenticatedUser
from wastems.infrastructure.firebase.collections import COLLECTION_COLLECTION_VEHICLES
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.collection import VehicleCreate, VehicleStatusRequest, VehicleUpdate
from wastems.shared.listing import field_equals
from wastems.shared.utils import utc_now

router = APIRouter()

VehicleRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_COLLECTION_VEHICLES, "Vehicle"))
]

VEHICLES = CrudResource(
    collection=COLLECTION_COLLECTION_VEHICLES,
    label="Vehicle",
    plural="vehicles",
    create_model=VehicleCreate,
    update_model=VehicleUpdate,
    search_fields=("vehicleNumber", "driver.name", "area"),
    filter_predicate=field_equals("status"),
    defaults=lambda: {"status": "active"},
)


@router.put("/vehicles/{vehicle_id}/status")
async def update_vehicle_status(
    vehicle_id: str,
    body: VehicleStatusRequest,
    vehicles: VehicleRepo,
    _user: Annotated[AuthenticatedUser, Depends(supervisor_or_above)],
) -> dict:
    await vehicles.get_or_404(vehicle_id)
    changes: dict[str, Any] = {"status": body.status.value, "statusUpdatedAt": utc_now()}
    if body.location is not None:
        changes["location"] = body.location.to_document()
    if body.fuel_level is not None:
        changes["fuelLevel"] = body.fuel_level
    if body.notes:
        changes["statusNotes"] = body.notes
    record = await vehicles.update(vehicle_id, changes)
    return {"success": True, "message": "Vehicle status updated successfully", "data": record}


register_crud_routes(router, VEHICLES, base="/vehicles")
