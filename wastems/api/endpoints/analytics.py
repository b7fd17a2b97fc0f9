"""Analytics API: dashboard aggregates for ULB administrators.

Aggregates are computed on read from full collection scans; the
collections involved stay small for a single municipality.
"""

from collections import Counter
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from wastems.api.dependencies import StoreDep, ulb_admin_or_above
from wastems.domain.entities import AuthenticatedUser
from wastems.domain.enums import TrainingModule
from wastems.domain.ratings import (
    as_mapping,
    as_number,
    citizen_compliance_score,
    compliance_status,
    efficiency_band,
    utilization,
)
from wastems.domain.summaries import (
    WASTE_TYPES,
    count_by,
    daily_intake,
    penalty_summary,
    penalty_type,
    percent,
    points_by_type,
    revenue_by_type,
    training_completion,
    within_days,
)
from wastems.infrastructure.firebase.collections import (
    COLLECTION_BULK_GENERATORS,
    COLLECTION_CITIZENS,
    COLLECTION_CLEANING_EVENTS,
    COLLECTION_COLLECTION_VEHICLES,
    COLLECTION_GREEN_CHAMPIONS,
    COLLECTION_HOUSEHOLDS,
    COLLECTION_INCENTIVE_REWARDS,
    COLLECTION_MONITORING_REPORTS,
    COLLECTION_PENALTIES,
    COLLECTION_POINT_REDEMPTIONS,
    COLLECTION_SEGREGATION_VIOLATIONS,
    COLLECTION_ULBS,
    COLLECTION_WASTE_FACILITIES,
    COLLECTION_WASTE_WORKERS,
)
from wastems.infrastructure.firebase.repositories import DocumentRepository

router = APIRouter()

UlbAdmin = Annotated[AuthenticatedUser, Depends(ulb_admin_or_above)]
Days = Annotated[int, Query(ge=1, le=365)]

COMPLIANCE_LABELS = ("Excellent", "Good", "Fair", "Poor")

OVERVIEW_COLLECTIONS = {
    "citizens": COLLECTION_CITIZENS,
    "workers": COLLECTION_WASTE_WORKERS,
    "champions": COLLECTION_GREEN_CHAMPIONS,
    "households": COLLECTION_HOUSEHOLDS,
    "bulkGenerators": COLLECTION_BULK_GENERATORS,
    "facilities": COLLECTION_WASTE_FACILITIES,
    "vehicles": COLLECTION_COLLECTION_VEHICLES,
    "reports": COLLECTION_MONITORING_REPORTS,
    "violations": COLLECTION_SEGREGATION_VIOLATIONS,
    "events": COLLECTION_CLEANING_EVENTS,
    "ulbs": COLLECTION_ULBS,
}


@router.get("/segregation/compliance")
async def segregation_compliance(store: StoreDep, _user: UlbAdmin) -> dict:
    citizens = await DocumentRepository(store, COLLECTION_CITIZENS).query()
    scores = [citizen_compliance_score(c) for c in citizens]
    counts = Counter(compliance_status(s) for s in scores)
    return {
        "success": True,
        "data": {
            "totalCitizens": len(citizens),
            "averageScore": round(sum(scores) / len(scores), 1) if scores else 0,
            "distribution": {label: counts.get(label, 0) for label in COMPLIANCE_LABELS},
            "trainedCitizens": sum(
                1 for c in citizens if as_mapping(c.get("trainingStatus")).get("completed")
            ),
        },
    }


@router.get("/facilities/utilization")
async def facilities_utilization(store: StoreDep, _user: UlbAdmin) -> dict:
    facilities = await DocumentRepository(store, COLLECTION_WASTE_FACILITIES).query()
    rows = [
        {
            "facilityId": f["id"],
            "name": f.get("name"),
            "type": f.get("type"),
            "capacity": as_number(f.get("capacity")),
            "currentLoad": as_number(f.get("currentLoad")),
            "utilization": utilization(as_number(f.get("currentLoad")), as_number(f.get("capacity"))),
            "efficiencyBand": efficiency_band(as_number(f.get("efficiency"))),
        }
        for f in facilities
    ]
    total_capacity = sum(r["capacity"] for r in rows)
    total_load = sum(r["currentLoad"] for r in rows)
    return {
        "success": True,
        "data": {
            "facilities": rows,
            "totalCapacity": total_capacity,
            "totalLoad": total_load,
            "overallUtilization": utilization(total_load, total_capacity),
        },
    }


@router.get("/overview")
async def overview(store: StoreDep, _user: UlbAdmin) -> dict:
    counts = {
        key: await DocumentRepository(store, collection).count()
        for key, collection in OVERVIEW_COLLECTIONS.items()
    }
    return {"success": True, "data": {"counts": counts}}


@router.get("/waste-generation/daily")
async def daily_waste(store: StoreDep, _user: UlbAdmin, days: Days = 30) -> dict:
    """Tonnage received at facilities per day, from the intake log."""
    rows = daily_intake(await DocumentRepository(store, COLLECTION_WASTE_FACILITIES).query(), days)
    total = sum(r["totalWaste"] for r in rows)
    peak = max(rows, key=lambda r: r["totalWaste"])
    return {
        "success": True,
        "data": {
            "dailyData": rows,
            "summary": {
                "totalWaste": round(total, 2),
                "averageDailyWaste": round(total / len(rows), 2),
                "peakWasteDay": peak,
                "totalDays": len(rows),
                "totalIntakes": sum(r["totalIntakes"] for r in rows),
            },
            "wasteDistribution": {
                f"{t}Waste": round(sum(r[f"{t}Waste"] for r in rows), 2) for t in WASTE_TYPES
            },
        },
    }


@router.get("/citizen-training/completion")
async def training_completion_rates(store: StoreDep, _user: UlbAdmin) -> dict:
    citizens = await DocumentRepository(store, COLLECTION_CITIZENS).query()
    modules = tuple(m.value for m in TrainingModule)
    return {"success": True, "data": training_completion(citizens, modules)}


@router.get("/penalties/revenue")
async def penalty_revenue(store: StoreDep, _user: UlbAdmin, days: Days = 30) -> dict:
    penalties = await DocumentRepository(store, COLLECTION_PENALTIES).query()
    recent = within_days(penalties, "imposedAt", days)
    return {
        "success": True,
        "data": {
            "summary": penalty_summary(recent),
            "penaltiesByType": count_by(recent, penalty_type),
            "revenueByType": revenue_by_type(recent),
        },
    }


@router.get("/incentives/distribution")
async def incentive_distribution(store: StoreDep, _user: UlbAdmin, days: Days = 30) -> dict:
    rewards = await DocumentRepository(store, COLLECTION_INCENTIVE_REWARDS).query()
    redemptions = await DocumentRepository(store, COLLECTION_POINT_REDEMPTIONS).query()
    recent_rewards = within_days(rewards, "awardedAt", days)
    recent_redemptions = within_days(redemptions, "redeemedAt", days)
    awarded = sum(as_number(r.get("points")) for r in recent_rewards)
    redeemed = sum(as_number(r.get("pointsUsed")) for r in recent_redemptions)
    return {
        "success": True,
        "data": {
            "summary": {
                "totalIncentives": len(recent_rewards),
                "totalPointsAwarded": awarded,
                "totalRedemptions": len(recent_redemptions),
                "totalPointsRedeemed": redeemed,
                "redemptionRate": percent(redeemed, awarded),
            },
            "incentivesByType": count_by(recent_rewards, lambda r: str(r.get("type") or "other")),
            "pointsByType": points_by_type(recent_rewards),
        },
    }
