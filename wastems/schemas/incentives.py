"""Reward and penalty API schemas."""

from typing import Literal

from pydantic import Field

from wastems.schemas.common import (
    CamelModel,
    PaymentMethod,
    PenaltyStatus,
    ViolationType,
    partial_model,
)

RewardCategory = Literal["training", "segregation", "participation", "innovation", "referral"]
RewardStatus = Literal["awarded", "redeemed", "expired"]


class RewardCreate(CamelModel):
    citizen_id: str = Field(..., min_length=1)
    type: RewardCategory
    points: int = Field(..., ge=1, le=1000)
    description: str | None = None
    status: RewardStatus | None = None


RewardUpdate = partial_model(RewardCreate)


class PenaltyCreate(CamelModel):
    citizen_id: str = Field(..., min_length=1)
    type: ViolationType
    amount: float = Field(..., ge=0)
    description: str | None = None
    status: PenaltyStatus | None = None


PenaltyUpdate = partial_model(PenaltyCreate)


class AwardPointsRequest(CamelModel):
    citizen_id: str = Field(..., min_length=1)
    points: int = Field(..., ge=1, le=500)
    reason: str = Field(..., min_length=1)
    category: RewardCategory


class ImposePenaltyRequest(CamelModel):
    citizen_id: str = Field(..., min_length=1)
    violation_type: ViolationType
    amount: float = Field(..., ge=0)
    description: str = Field(..., min_length=1)
    evidence: list[str] | None = None


class PenaltyPaymentRequest(CamelModel):
    payment_method: PaymentMethod
    amount: float = Field(..., ge=0)
    transaction_id: str | None = None


class CatalogItemCreate(CamelModel):
    """A reward citizens can redeem points for."""

    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1)
    points_required: int = Field(..., ge=1)
    stock: int = Field(..., ge=0)
    description: str | None = None
    is_active: bool | None = None


CatalogItemUpdate = partial_model(CatalogItemCreate)


class RedeemRequest(CamelModel):
    citizen_id: str | None = None
    reward_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1)
