"""Kit-order API schemas."""

from typing import Literal

from pydantic import Field

from wastems.domain.enums import OrderStatus
from wastems.schemas.common import Address, CamelModel, PaymentMethod, partial_model

KitType = Literal["basic", "premium", "deluxe", "3_bin_set", "wet_waste", "dry_waste", "hazardous_waste"]


class OrderCreate(CamelModel):
    citizen_id: str = Field(..., min_length=1)
    kit_type: KitType
    quantity: int = Field(..., ge=1, le=10)
    delivery_address: Address | None = None
    payment_method: PaymentMethod | None = None
    status: OrderStatus | None = None


OrderUpdate = partial_model(OrderCreate)


class OrderStatusRequest(CamelModel):
    status: OrderStatus
    tracking_number: str | None = None
    notes: str | None = None
