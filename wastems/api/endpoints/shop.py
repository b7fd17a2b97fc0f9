"""Kit-shop API: dustbin and compost kit orders."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from wastems.api.crud import CrudResource, register_crud_routes
from wastems.api.dependencies import repository, ulb_admin_or_above
from wastems.core.constants import ANY_ROLE
from wastems.domain.entities import AuthenticatedUser
from wastems.domain.enums import OrderStatus
from wastems.domain.exceptions import ValidationException
from wastems.infrastructure.firebase.collections import COLLECTION_KIT_ORDERS
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.shop import OrderCreate, OrderStatusRequest, OrderUpdate
from wastems.shared.listing import field_equals
from wastems.shared.utils import utc_now

router = APIRouter()

# Orders in these states can no longer change status.
_FINAL_STATUSES = (OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value)

OrderRepo = Annotated[DocumentRepository, Depends(repository(COLLECTION_KIT_ORDERS, "Order"))]


def _stamp_order(data: dict[str, Any], user: AuthenticatedUser) -> dict[str, Any]:
    return {**data, "orderedBy": user.id, "orderedAt": utc_now()}


ORDERS = CrudResource(
    collection=COLLECTION_KIT_ORDERS,
    label="Order",
    plural="orders",
    create_model=OrderCreate,
    update_model=OrderUpdate,
    search_fields=("citizenId", "kitType", "trackingNumber"),
    filter_predicate=field_equals("status"),
    defaults=lambda: {"status": OrderStatus.PENDING.value},
    prepare=_stamp_order,
    create_roles=ANY_ROLE,
)


@router.put("/orders/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: OrderStatusRequest,
    orders: OrderRepo,
    _user: Annotated[AuthenticatedUser, Depends(ulb_admin_or_above)],
) -> dict:
    order = await orders.get_or_404(order_id)
    if order.get("status") in _FINAL_STATUSES:
        raise ValidationException(f"Order is already {order['status']}", field="status")
    changes: dict[str, Any] = {"status": body.status.value}
    if body.tracking_number:
        changes["trackingNumber"] = body.tracking_number
    if body.notes:
        changes["notes"] = body.notes
    if body.status is OrderStatus.DELIVERED:
        changes["deliveredAt"] = utc_now()
    record = await orders.update(order_id, changes)
    return {"success": True, "message": "Order status updated successfully", "data": record}


register_crud_routes(router, ORDERS, base="/orders")
