"""Green-champion API: registration, field reporting, training sessions, ratings and CRUD."""

import logging
from collections import Counter
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status

from wastems.api.crud import CrudResource, register_crud_routes
from wastems.api.dependencies import CurrentUser, repository, ulb_admin_or_above
from wastems.domain.entities import AuthenticatedUser
from wastems.domain.exceptions import ValidationException
from wastems.domain.ratings import (
    as_mapping,
    as_number,
    champion_performance_rating,
    champion_performance_score,
)
from wastems.domain.summaries import percent, within_days
from wastems.infrastructure.firebase.collections import (
    COLLECTION_CITIZENS,
    COLLECTION_GREEN_CHAMPIONS,
    COLLECTION_MONITORING_REPORTS,
    COLLECTION_SEGREGATION_VIOLATIONS,
    COLLECTION_TRAINING_SESSIONS,
)
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.champions import (
    ChampionCreate,
    ChampionRegisterRequest,
    ChampionUpdate,
    ChampionViolationRequest,
    MonitoringReportRequest,
    TrainingScheduleRequest,
)
from wastems.shared.listing import field_equals
from wastems.shared.utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

ChampionRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_GREEN_CHAMPIONS, "Green champion"))
]
ReportRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_MONITORING_REPORTS, "Report"))
]
ViolationRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_SEGREGATION_VIOLATIONS, "Violation"))
]
CitizenRepo = Annotated[DocumentRepository, Depends(repository(COLLECTION_CITIZENS, "Citizen"))]
SessionRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_TRAINING_SESSIONS, "Training session"))
]

# Penalty attached to a champion-reported violation, by violation type.
VIOLATION_PENALTIES = {
    "non_segregation": 200,
    "illegal_dumping": 500,
    "missed_collection": 100,
    "other": 150,
}
RECENT_REPORTS = 10


def initial_champion_state() -> dict[str, Any]:
    return {
        "citizensUnderSupervision": [],
        "trainingsConducted": 0,
        "violationsReported": 0,
        "performanceMetrics": {
            "totalReports": 0,
            "resolvedReports": 0,
            "citizensTrained": 0,
            "violationsReported": 0,
        },
        "isActive": True,
    }


def decorate_champion(champion: dict[str, Any]) -> dict[str, Any]:
    metrics = as_mapping(champion.get("performanceMetrics"))
    return {
        **champion,
        "performanceScore": round(champion_performance_score(metrics), 1),
        "performanceRating": champion_performance_rating(metrics),
    }


CHAMPIONS = CrudResource(
    collection=COLLECTION_GREEN_CHAMPIONS,
    label="Green champion",
    plural="champions",
    create_model=ChampionCreate,
    update_model=ChampionUpdate,
    search_fields=("personalInfo.name", "areaAssigned", "personalInfo.email"),
    filter_predicate=field_equals("areaAssigned"),
    decorate=decorate_champion,
    defaults=initial_champion_state,
)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_champion(
    body: ChampionRegisterRequest,
    champions: ChampionRepo,
    _user: Annotated[AuthenticatedUser, Depends(ulb_admin_or_above)],
) -> dict:
    record = await champions.create({**initial_champion_state(), **body.to_document()})
    logger.info("Green champion registered: %s", record["id"])
    return {
        "success": True,
        "message": "Green champion registered successfully",
        "champion": {
            "id": record["id"],
            "personalInfo": record["personalInfo"],
            "areaAssigned": record["areaAssigned"],
        },
    }


@router.get("/area/{area_id}")
async def champions_in_area(area_id: str, champions: ChampionRepo, _user: CurrentUser) -> dict:
    records = await champions.query([("areaAssigned", "==", area_id)])
    return {
        "success": True,
        "data": {
            "area": area_id,
            "champions": [decorate_champion(r) for r in records],
            "total": len(records),
        },
    }


@router.get("/performance/{champion_id}")
async def champion_performance(
    champion_id: str,
    champions: ChampionRepo,
    reports: ReportRepo,
    violations: ViolationRepo,
    _user: CurrentUser,
) -> dict:
    """Rating from stored metrics plus live counts of the champion's reports."""
    champion = await champions.get_or_404(champion_id)
    filed = await reports.query([("reporterId", "==", champion_id)])
    reported = await violations.query([("reportedBy", "==", champion_id)])
    metrics = as_mapping(champion.get("performanceMetrics"))
    return {
        "success": True,
        "data": {
            "championId": champion["id"],
            "name": as_mapping(champion.get("personalInfo")).get("name"),
            "areaAssigned": champion.get("areaAssigned"),
            "metrics": metrics,
            "performanceScore": round(champion_performance_score(metrics), 1),
            "performanceRating": champion_performance_rating(metrics),
            "detailedStats": {
                "totalReports": len(filed),
                "resolvedReports": sum(1 for r in filed if r.get("status") == "resolved"),
                "violationsReported": len(reported),
            },
            "recentActivity": {"reports": filed[:5], "violations": reported[:5]},
        },
    }


async def _bump_metric(champions: DocumentRepository, champion_id: str, metric: str) -> None:
    """Increment one performanceMetrics counter when the caller has a champion record."""
    champion = await champions.get(champion_id)
    if champion is None:
        return
    metrics = dict(as_mapping(champion.get("performanceMetrics")))
    metrics[metric] = as_number(metrics.get(metric)) + 1
    await champions.update(champion_id, {"performanceMetrics": metrics})


@router.post("/monitoring/report", status_code=status.HTTP_201_CREATED)
async def submit_monitoring_report(
    body: MonitoringReportRequest,
    reports: ReportRepo,
    champions: ChampionRepo,
    user: CurrentUser,
) -> dict:
    report = await reports.create({
        "reporterId": user.id,
        "reporterType": "green_champion",
        **body.to_document(),
        "photos": body.photos or [],
        "status": "open",
        "reportedAt": utc_now(),
    })
    await _bump_metric(champions, user.id, "totalReports")
    logger.info("Monitoring report %s filed by %s", report["id"], user.id)
    return {
        "success": True,
        "message": "Monitoring report submitted successfully",
        "data": {"reportId": report["id"], "status": report["status"], "priority": body.priority},
    }


@router.get("/monitoring/dashboard")
async def monitoring_dashboard(
    reports: ReportRepo,
    _user: CurrentUser,
    area: Annotated[str | None, Query(max_length=100)] = None,
    days: Annotated[int, Query(ge=1, le=365)] = 30,
) -> dict:
    filters = [("area", "==", area)] if area else None
    records = within_days(await reports.query(filters), "reportedAt", days)
    records.sort(key=lambda r: str(r.get("reportedAt") or r.get("createdAt") or ""), reverse=True)
    statuses = Counter(r.get("status") for r in records)
    return {
        "success": True,
        "data": {
            "summary": {
                "totalReports": len(records),
                "resolvedReports": statuses["resolved"],
                "pendingReports": statuses["open"],
                "inProgressReports": statuses["in_progress"],
                "resolutionRate": round(percent(statuses["resolved"], len(records))),
            },
            "reportsByType": dict(Counter(str(r.get("issueType")) for r in records)),
            "reportsByPriority": dict(Counter(str(r.get("priority")) for r in records)),
            "recentReports": records[:RECENT_REPORTS],
        },
    }


@router.put("/violations/report", status_code=status.HTTP_201_CREATED)
async def report_citizen_violation(
    body: ChampionViolationRequest,
    citizens: CitizenRepo,
    violations: ViolationRepo,
    champions: ChampionRepo,
    user: CurrentUser,
) -> dict:
    """Record a citizen's violation with its standard penalty amount."""
    citizen = await citizens.get_or_404(body.citizen_id)
    now = utc_now()
    amount = VIOLATION_PENALTIES[body.violation_type]
    violation = await violations.create({
        "citizenId": citizen["id"],
        "reportedBy": user.id,
        "reporterType": "green_champion",
        "violationType": body.violation_type,
        "description": body.description,
        "evidence": body.evidence or [],
        "status": "reported",
        "reportedAt": now,
        "penaltyAmount": amount,
        **({"location": body.location.to_document()} if body.location else {}),
    })

    compliance = dict(as_mapping(citizen.get("segregationCompliance")))
    logged = compliance.get("violations")
    entries = list(logged) if isinstance(logged, list) else []
    entries.append({
        "violationId": violation["id"],
        "violationType": body.violation_type,
        "amount": amount,
        "reportedAt": now,
        "reportedBy": user.id,
    })
    compliance["violations"] = entries
    await citizens.update(citizen["id"], {"segregationCompliance": compliance})
    await _bump_metric(champions, user.id, "violationsReported")
    logger.info("Violation %s reported against citizen %s", violation["id"], citizen["id"])
    return {
        "success": True,
        "message": "Violation reported successfully",
        "data": {
            "violationId": violation["id"],
            "citizenId": citizen["id"],
            "violationType": body.violation_type,
            "penaltyAmount": amount,
        },
    }


@router.post("/training/schedule", status_code=status.HTTP_201_CREATED)
async def schedule_training(
    body: TrainingScheduleRequest, sessions: SessionRepo, user: CurrentUser
) -> dict:
    if not (body.area and body.training_type and body.scheduled_date):
        raise ValidationException("Area, training type, and scheduled date are required")
    session = await sessions.create({
        "organizerId": user.id,
        "organizerType": "green_champion",
        "area": body.area,
        "trainingType": body.training_type,
        "scheduledDate": body.scheduled_date,
        "description": body.description,
        "maxParticipants": body.max_participants,
        "status": "scheduled",
        "participants": [],
    })
    return {
        "success": True,
        "message": "Training session scheduled successfully",
        "data": {
            "trainingId": session["id"],
            "area": body.area,
            "trainingType": body.training_type,
            "scheduledDate": body.scheduled_date,
            "status": "scheduled",
        },
    }


register_crud_routes(router, CHAMPIONS)
