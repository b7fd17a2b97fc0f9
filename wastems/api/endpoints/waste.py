"""Waste-source API: households, bulk generators and segregation."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from wastems.api.crud import CrudResource, register_crud_routes
from wastems.api.dependencies import CurrentUser, StoreDep, repository
from wastems.domain.exceptions import ResourceNotFoundException, ValidationException
from wastems.domain.ratings import as_number
from wastems.infrastructure.firebase.collections import (
    COLLECTION_BULK_GENERATORS,
    COLLECTION_HOUSEHOLDS,
    COLLECTION_SEGREGATION_VIOLATIONS,
    COLLECTION_WASTE_GUIDELINES,
)
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.infrastructure.services.schema_bootstrap import GUIDELINES_DOCUMENT_ID
from wastems.schemas.waste import (
    BulkGeneratorCreate,
    BulkGeneratorUpdate,
    HouseholdCreate,
    HouseholdUpdate,
    ViolationReportRequest,
)
from wastems.shared.listing import field_equals
from wastems.shared.utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

VIOLATION_SCORE_PENALTY = 10

HouseholdRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_HOUSEHOLDS, "Household"))
]
ViolationRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_SEGREGATION_VIOLATIONS, "Violation"))
]

HOUSEHOLDS = CrudResource(
    collection=COLLECTION_HOUSEHOLDS,
    label="Household",
    plural="households",
    create_model=HouseholdCreate,
    update_model=HouseholdUpdate,
    search_fields=("address.street", "address.city", "address.ward"),
    filter_predicate=field_equals("ulbId"),
    defaults=lambda: {"complianceScore": 100},
)

BULK_GENERATORS = CrudResource(
    collection=COLLECTION_BULK_GENERATORS,
    label="Bulk generator",
    plural="bulkGenerators",
    create_model=BulkGeneratorCreate,
    update_model=BulkGeneratorUpdate,
    search_fields=("name", "address.city"),
    filter_predicate=field_equals("type"),
    defaults=lambda: {"complianceStatus": "pending", "penaltyHistory": []},
)


@router.get("/segregation/guidelines")
async def segregation_guidelines(store: StoreDep) -> dict:
    """Public three-bin guidance seeded at startup."""
    snapshot = await (
        store.collection(COLLECTION_WASTE_GUIDELINES).document(GUIDELINES_DOCUMENT_ID).get()
    )
    if snapshot is None:
        raise ResourceNotFoundException("Guidelines", GUIDELINES_DOCUMENT_ID)
    return {"success": True, "data": snapshot.to_dict()}


@router.post("/segregation/violation", status_code=status.HTTP_201_CREATED)
async def report_violation(
    body: ViolationReportRequest,
    households: HouseholdRepo,
    violations: ViolationRepo,
    user: CurrentUser,
) -> dict:
    """Record a violation against a household and lower its compliance score."""
    household = await households.get_or_404(body.household_id)
    citizen_id = body.citizen_id or household.get("citizenId")
    if not citizen_id:
        raise ValidationException("Citizen ID required", field="citizenId")

    violation = await violations.create({
        "householdId": household["id"],
        "citizenId": citizen_id,
        "violationType": body.violation_type,
        "description": body.description,
        "evidence": body.evidence or [],
        "location": body.location.to_document(),
        "reportedBy": body.reported_by or user.id,
        "reportedAt": utc_now(),
        "status": "pending",
    })

    score = household.get("complianceScore")
    score = 100 if score is None else as_number(score)
    await households.update(
        household["id"],
        {"complianceScore": max(0, score - VIOLATION_SCORE_PENALTY)},
    )
    logger.info("Segregation violation %s reported for household %s", violation["id"], household["id"])
    return {
        "success": True,
        "message": "Violation reported successfully",
        "data": violation,
    }


register_crud_routes(router, HOUSEHOLDS, base="/households")
register_crud_routes(router, BULK_GENERATORS, base="/bulk-generators")
