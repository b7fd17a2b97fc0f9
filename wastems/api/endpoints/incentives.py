"""Incentive API: reward points, redemption, penalties and their payment."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status

from wastems.api.crud import CrudResource, register_crud_routes
from wastems.api.dependencies import (
    CurrentUser,
    ensure_self_or_roles,
    repository,
    supervisor_or_above,
    ulb_admin_or_above,
)
from wastems.core.constants import SUPERVISOR_OR_ABOVE, ULB_ADMIN_OR_ABOVE
from wastems.domain.entities import AuthenticatedUser
from wastems.domain.exceptions import ValidationException
from wastems.domain.ratings import as_number
from wastems.domain.summaries import count_by, penalty_summary, penalty_type, within_days
from wastems.infrastructure.firebase.collections import (
    COLLECTION_AVAILABLE_REWARDS,
    COLLECTION_CITIZENS,
    COLLECTION_INCENTIVE_REWARDS,
    COLLECTION_PENALTIES,
    COLLECTION_POINT_REDEMPTIONS,
)
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.incentives import (
    AwardPointsRequest,
    CatalogItemCreate,
    CatalogItemUpdate,
    ImposePenaltyRequest,
    PenaltyCreate,
    PenaltyPaymentRequest,
    PenaltyUpdate,
    RedeemRequest,
    RewardCreate,
    RewardUpdate,
)
from wastems.shared.listing import field_equals
from wastems.shared.utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

RECENT_REWARDS = 10
RECENT_ACTIVITY = 10

CitizenRepo = Annotated[DocumentRepository, Depends(repository(COLLECTION_CITIZENS, "Citizen"))]
RewardRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_INCENTIVE_REWARDS, "Reward"))
]
PenaltyRepo = Annotated[DocumentRepository, Depends(repository(COLLECTION_PENALTIES, "Penalty"))]
CatalogRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_AVAILABLE_REWARDS, "Reward item"))
]
RedemptionRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_POINT_REDEMPTIONS, "Redemption"))
]

REWARDS = CrudResource(
    collection=COLLECTION_INCENTIVE_REWARDS,
    label="Reward",
    plural="rewards",
    create_model=RewardCreate,
    update_model=RewardUpdate,
    search_fields=("citizenId", "type", "description"),
    filter_predicate=field_equals("status"),
    defaults=lambda: {"status": "awarded"},
    read_roles=SUPERVISOR_OR_ABOVE,
)

PENALTIES = CrudResource(
    collection=COLLECTION_PENALTIES,
    label="Penalty",
    plural="penalties",
    create_model=PenaltyCreate,
    update_model=PenaltyUpdate,
    search_fields=("citizenId", "type", "description"),
    filter_predicate=field_equals("status"),
    defaults=lambda: {"status": "pending"},
    read_roles=SUPERVISOR_OR_ABOVE,
)

CATALOG = CrudResource(
    collection=COLLECTION_AVAILABLE_REWARDS,
    label="Reward item",
    plural="items",
    create_model=CatalogItemCreate,
    update_model=CatalogItemUpdate,
    search_fields=("name", "category", "description"),
    filter_predicate=field_equals("category"),
    defaults=lambda: {"isActive": True},
)


@router.post("/citizen/award", status_code=status.HTTP_201_CREATED)
async def award_points(
    body: AwardPointsRequest,
    citizens: CitizenRepo,
    rewards: RewardRepo,
    user: Annotated[AuthenticatedUser, Depends(supervisor_or_above)],
) -> dict:
    """Credit points to a citizen and keep a reward record."""
    citizen = await citizens.get_or_404(body.citizen_id)
    now = utc_now()
    reward = await rewards.create({
        "citizenId": citizen["id"],
        "type": body.category,
        "points": body.points,
        "description": body.reason,
        "awardedBy": user.id,
        "awardedAt": now,
        "status": "awarded",
    })
    total = as_number(citizen.get("rewardPoints")) + body.points
    await citizens.update(citizen["id"], {"rewardPoints": total})
    logger.info("Awarded %d points to citizen %s", body.points, citizen["id"])
    return {
        "success": True,
        "message": "Points awarded successfully",
        "data": {"reward": reward, "totalPoints": total},
    }


@router.post("/penalties/impose", status_code=status.HTTP_201_CREATED)
async def impose_penalty(
    body: ImposePenaltyRequest,
    citizens: CitizenRepo,
    penalties: PenaltyRepo,
    user: Annotated[AuthenticatedUser, Depends(ulb_admin_or_above)],
) -> dict:
    """Create a pending penalty and append it to the citizen's history."""
    citizen = await citizens.get_or_404(body.citizen_id)
    now = utc_now()
    penalty = await penalties.create({
        "citizenId": citizen["id"],
        "type": body.violation_type,
        "violationType": body.violation_type,
        "amount": body.amount,
        "description": body.description,
        "evidence": body.evidence or [],
        "imposedBy": user.id,
        "imposedAt": now,
        "status": "pending",
    })
    history = citizen.get("penaltyHistory")
    history = list(history) if isinstance(history, list) else []
    history.append({
        "penaltyId": penalty["id"],
        "violationType": body.violation_type,
        "amount": body.amount,
        "date": now,
        "status": "pending",
    })
    await citizens.update(citizen["id"], {"penaltyHistory": history})
    logger.info("Penalty %s imposed on citizen %s", penalty["id"], citizen["id"])
    return {"success": True, "message": "Penalty imposed successfully", "data": penalty}


@router.put("/penalties/{penalty_id}/pay")
async def pay_penalty(
    penalty_id: str,
    body: PenaltyPaymentRequest,
    citizens: CitizenRepo,
    penalties: PenaltyRepo,
    user: CurrentUser,
) -> dict:
    """Settle a pending penalty; the amount must match exactly."""
    penalty = await penalties.get_or_404(penalty_id)
    ensure_self_or_roles(user, penalty.get("citizenId", ""), SUPERVISOR_OR_ABOVE)
    if penalty.get("status") == "paid":
        raise ValidationException("Penalty already paid", field="status")
    if body.amount != penalty.get("amount"):
        raise ValidationException(
            "Payment amount does not match penalty amount",
            field="amount",
            details={"expected": penalty.get("amount")},
        )
    now = utc_now()
    record = await penalties.update(
        penalty_id,
        {
            "status": "paid",
            "paidAt": now,
            "paymentMethod": body.payment_method,
            "transactionId": body.transaction_id,
        },
    )

    citizen = await citizens.get(penalty.get("citizenId", ""))
    if citizen is not None:
        history: list[Any] = []
        stored = citizen.get("penaltyHistory")
        for entry in stored if isinstance(stored, list) else []:
            if isinstance(entry, dict) and entry.get("penaltyId") == penalty_id:
                entry = {**entry, "status": "paid", "paidAt": now}
            history.append(entry)
        await citizens.update(citizen["id"], {"penaltyHistory": history})

    return {"success": True, "message": "Penalty paid successfully", "data": record}


@router.get("/citizen/points/{citizen_id}")
async def citizen_points(
    citizen_id: str, citizens: CitizenRepo, rewards: RewardRepo, user: CurrentUser
) -> dict:
    ensure_self_or_roles(user, citizen_id, SUPERVISOR_OR_ABOVE)
    citizen = await citizens.get_or_404(citizen_id)
    history = await rewards.query([("citizenId", "==", citizen_id)])
    history.sort(key=lambda r: str(r.get("awardedAt") or r.get("createdAt") or ""), reverse=True)
    return {
        "success": True,
        "data": {
            "citizenId": citizen_id,
            "totalPoints": as_number(citizen.get("rewardPoints")),
            "recentRewards": history[:RECENT_REWARDS],
        },
    }




@router.post("/redeem", status_code=status.HTTP_201_CREATED)
async def redeem_points(
    body: RedeemRequest,
    citizens: CitizenRepo,
    catalog: CatalogRepo,
    redemptions: RedemptionRepo,
    user: CurrentUser,
) -> dict:
    """Spend a citizen's points on a catalog item; points and stock are both checked."""
    citizen_id = body.citizen_id or user.id
    ensure_self_or_roles(user, citizen_id, ULB_ADMIN_OR_ABOVE)
    citizen = await citizens.get_or_404(citizen_id)
    item = await catalog.get_or_404(body.reward_id)
    if item.get("isActive") is False:
        raise ValidationException("Reward is not available", field="rewardId")

    points_used = as_number(item.get("pointsRequired")) * body.quantity
    balance = as_number(citizen.get("rewardPoints"))
    if balance < points_used:
        raise ValidationException(
            "Insufficient points for redemption",
            field="quantity",
            details={"available": balance, "required": points_used},
        )
    stock = as_number(item.get("stock"))
    if stock < body.quantity:
        raise ValidationException(
            "Insufficient stock for this reward", field="quantity", details={"stock": stock}
        )

    redemption = await redemptions.create({
        "citizenId": citizen_id,
        "rewardId": item["id"],
        "rewardName": item.get("name"),
        "quantity": body.quantity,
        "pointsUsed": points_used,
        "redeemedAt": utc_now(),
        "status": "pending",
    })
    remaining = balance - points_used
    await citizens.update(citizen_id, {"rewardPoints": remaining})
    await catalog.update(item["id"], {"stock": stock - body.quantity})
    logger.info("Citizen %s redeemed %s x%d", citizen_id, item["id"], body.quantity)
    return {
        "success": True,
        "message": "Redemption successful",
        "data": {"redemption": redemption, "remainingPoints": remaining},
    }


@router.get("/penalties/citizen/{citizen_id}")
async def citizen_penalties(citizen_id: str, penalties: PenaltyRepo, user: CurrentUser) -> dict:
    ensure_self_or_roles(user, citizen_id, ULB_ADMIN_OR_ABOVE)
    records = await penalties.query([("citizenId", "==", citizen_id)])
    records.sort(key=lambda p: str(p.get("imposedAt") or p.get("createdAt") or ""), reverse=True)
    return {"success": True, "data": {"penalties": records, "summary": penalty_summary(records)}}


@router.get("/stats")
async def incentive_stats(
    rewards: RewardRepo,
    penalties: PenaltyRepo,
    redemptions: RedemptionRepo,
    _user: Annotated[AuthenticatedUser, Depends(ulb_admin_or_above)],
    days: Annotated[int, Query(ge=1, le=365)] = 30,
) -> dict:
    """Reward, penalty and redemption totals over the last days days."""
    recent_rewards = within_days(await rewards.query(), "awardedAt", days)
    recent_penalties = within_days(await penalties.query(), "imposedAt", days)
    recent_redemptions = within_days(await redemptions.query(), "redeemedAt", days)
    penalty_totals = penalty_summary(recent_penalties)
    return {
        "success": True,
        "data": {
            "summary": {
                "totalRewards": len(recent_rewards),
                "totalPenalties": len(recent_penalties),
                "totalRedemptions": len(recent_redemptions),
                "totalPointsAwarded": sum(as_number(r.get("points")) for r in recent_rewards),
                "totalPointsRedeemed": sum(
                    as_number(r.get("pointsUsed")) for r in recent_redemptions
                ),
                "totalPenaltyAmount": penalty_totals["totalAmount"],
                "paidPenaltyAmount": penalty_totals["paidAmount"],
                "pendingPenaltyAmount": round(
                    penalty_totals["totalAmount"] - penalty_totals["paidAmount"], 2
                ),
            },
            "rewardsByType": count_by(recent_rewards, lambda r: str(r.get("type") or "other")),
            "penaltiesByType": count_by(recent_penalties, penalty_type),
            "recentActivity": {
                "rewards": recent_rewards[:RECENT_ACTIVITY],
                "penalties": recent_penalties[:RECENT_ACTIVITY],
                "redemptions": recent_redemptions[:RECENT_ACTIVITY],
            },
        },
    }


register_crud_routes(router, REWARDS, base="/rewards")
register_crud_routes(router, PENALTIES, base="/penalties")
register_crud_routes(router, CATALOG, base="/catalog")
