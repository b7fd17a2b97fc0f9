"""ULB (urban local body) API: governance records, status, policies and compliance reports."""

from datetime import timedelta
from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, Query

from wastems.api.crud import CrudResource, register_crud_routes
from wastems.api.dependencies import CurrentUser, StoreDep, repository, ulb_admin_or_above
from wastems.api.endpoints.facilities import decorate_facility
from wastems.core.constants import ADMIN_ONLY
from wastems.domain.entities import AuthenticatedUser
from wastems.domain.exceptions import ValidationException
from wastems.domain.ratings import as_mapping, as_number, is_compliant, ulb_compliance_band
from wastems.domain.summaries import count_by, percent, within_days
from wastems.infrastructure.firebase.collections import (
    COLLECTION_BULK_GENERATORS,
    COLLECTION_HOUSEHOLDS,
    COLLECTION_PENALTIES,
    COLLECTION_SEGREGATION_VIOLATIONS,
    COLLECTION_ULBS,
    COLLECTION_WASTE_FACILITIES,
)
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.ulb import Policies, ULBCreate, ULBUpdate, WasteManagementStatus
from wastems.shared.utils import utc_now

router = APIRouter()

ULBRepo = Annotated[DocumentRepository, Depends(repository(COLLECTION_ULBS, "ULB"))]
FacilityRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_WASTE_FACILITIES, "Facility"))
]
UlbAdmin = Annotated[AuthenticatedUser, Depends(ulb_admin_or_above)]

ReportPeriod = Literal["weekly", "monthly", "quarterly", "yearly"]
PERIOD_DAYS = {"weekly": 7, "monthly": 30, "quarterly": 90, "yearly": 365}


def decorate_ulb(ulb: dict[str, Any]) -> dict[str, Any]:
    status = as_mapping(ulb.get("wasteManagementStatus"))
    score = as_number(status.get("segregationCompliance"))
    return {**ulb, "complianceBand": ulb_compliance_band(score)}


def _active_filter(ulb: dict[str, Any], value: str) -> bool:
    active = ulb.get("isActive", True)
    if value == "active":
        return bool(active)
    if value == "inactive":
        return not active
    return ulb.get("state") == value


ULBS = CrudResource(
    collection=COLLECTION_ULBS,
    label="ULB",
    plural="ulbs",
    create_model=ULBCreate,
    update_model=ULBUpdate,
    search_fields=("name", "code", "district"),
    filter_predicate=_active_filter,
    decorate=decorate_ulb,
    defaults=lambda: {"isActive": True},
    create_roles=ADMIN_ONLY,
)


async def _merge_section(ulbs: DocumentRepository, ulb_id: str, key: str, changes: dict) -> dict:
    if not changes:
        raise ValidationException("No updatable fields provided")
    ulb = await ulbs.get_or_404(ulb_id)
    merged = {**as_mapping(ulb.get(key)), **changes, "lastUpdated": utc_now()}
    return await ulbs.update(ulb_id, {key: merged})


@router.put("/{ulb_id}/waste-management-status")
async def update_waste_management_status(
    ulb_id: str, body: WasteManagementStatus, ulbs: ULBRepo, _user: UlbAdmin
) -> dict:
    record = await _merge_section(
        ulbs, ulb_id, "wasteManagementStatus", body.to_document(exclude_unset=True)
    )
    return {
        "success": True,
        "message": "Waste management status updated successfully",
        "data": decorate_ulb(record),
    }


@router.put("/{ulb_id}/policies")
async def update_policies(ulb_id: str, body: Policies, ulbs: ULBRepo, _user: UlbAdmin) -> dict:
    record = await _merge_section(ulbs, ulb_id, "policies", body.to_document(exclude_unset=True))
    return {
        "success": True,
        "message": "Policies updated successfully",
        "data": decorate_ulb(record),
    }


@router.get("/{ulb_id}/facilities")
async def ulb_facilities(
    ulb_id: str, ulbs: ULBRepo, facilities: FacilityRepo, _user: CurrentUser
) -> dict:
    await ulbs.get_or_404(ulb_id)
    records = await facilities.query([("ulbId", "==", ulb_id)])
    return {
        "success": True,
        "data": {
            "ulbId": ulb_id,
            "facilities": [decorate_facility(f) for f in records],
            "total": len(records),
        },
    }


def compliance_recommendations(
    household_rate: float, bulk_generator_rate: float, total_violations: int
) -> list[dict[str, str]]:
    recommendations = []
    if household_rate < 70:
        recommendations.append({
            "type": "household_compliance",
            "priority": "high",
            "message": "Household compliance rate is below 70%. "
            "Consider increasing training programs and awareness campaigns.",
        })
    if bulk_generator_rate < 80:
        recommendations.append({
            "type": "bulk_generator_compliance",
            "priority": "high",
            "message": "Bulk generator compliance rate is below 80%. "
            "Consider stricter monitoring and penalties.",
        })
    if total_violations > 100:
        recommendations.append({
            "type": "violation_management",
            "priority": "medium",
            "message": "High number of violations detected. "
            "Consider increasing monitoring frequency and enforcement.",
        })
    if household_rate > 90 and bulk_generator_rate > 90:
        recommendations.append({
            "type": "maintenance",
            "priority": "low",
            "message": "Excellent compliance rates. "
            "Focus on maintaining current standards and continuous improvement.",
        })
    return recommendations


@router.get("/compliance/report/{ulb_id}")
async def compliance_report(
    ulb_id: str,
    ulbs: ULBRepo,
    store: StoreDep,
    _user: UlbAdmin,
    period: Annotated[ReportPeriod, Query()] = "monthly",
) -> dict:
    """Household and bulk-generator compliance plus violations and penalties for a period.

    A household is compliant at a complianceScore of 70 or more; a bulk
    generator when its complianceStatus is "compliant".
    """
    ulb = await ulbs.get_or_404(ulb_id)
    days = PERIOD_DAYS[period]
    end = utc_now()
    in_ulb = [("ulbId", "==", ulb_id)]
    households = await DocumentRepository(store, COLLECTION_HOUSEHOLDS).query(in_ulb)
    generators = await DocumentRepository(store, COLLECTION_BULK_GENERATORS).query(in_ulb)
    violations = within_days(
        await DocumentRepository(store, COLLECTION_SEGREGATION_VIOLATIONS).query(), "reportedAt", days
    )
    penalties = within_days(
        await DocumentRepository(store, COLLECTION_PENALTIES).query(), "imposedAt", days
    )

    household_rate = percent(
        sum(1 for h in households if is_compliant(as_number(h.get("complianceScore")))),
        len(households),
    )
    generator_rate = percent(
        sum(1 for g in generators if g.get("complianceStatus") == "compliant"), len(generators)
    )
    paid = sum(1 for p in penalties if p.get("status") == "paid")
    return {
        "success": True,
        "data": {
            "ulb": {key: ulb.get(key) for key in ("id", "name", "code", "state", "district")},
            "period": {"startDate": end - timedelta(days=days), "endDate": end, "type": period},
            "compliance": {
                "householdComplianceRate": household_rate,
                "bulkGeneratorComplianceRate": generator_rate,
                "overallComplianceRate": round((household_rate + generator_rate) / 2, 2),
            },
            "violations": {
                "totalViolations": len(violations),
                "violationsByType": count_by(
                    violations, lambda v: str(v.get("violationType") or "other")
                ),
                "totalPenalties": len(penalties),
                "paidPenalties": paid,
                "penaltyCollectionRate": percent(paid, len(penalties)),
            },
            "recommendations": compliance_recommendations(
                household_rate, generator_rate, len(violations)
            ),
        },
    }


register_crud_routes(router, ULBS)
