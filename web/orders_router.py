"""
Order endpoints.

Customers create and read their own orders; admins read everything and
move orders through their statuses. Tracking by order number is public.
"""

from fastapi import APIRouter, Depends, Query, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from enums.order_filter import OrderFilterType
from models.search_filters import MAX_PAGE
from models.user import UserDTO
from services.order import OrderService
from web.dependencies import get_current_user, get_redis, get_session
from web.schemas import OrderCreateRequest, OrderUpdateRequest
from web.serializers import order_to_dict, pagination, tracking_to_dict

orders_router = APIRouter(prefix="/api/orders", tags=["orders"])


@orders_router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreateRequest,
    user: UserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    redis: Redis = Depends(get_redis),
):
    order = await OrderService.create_order(
        user=user,
        items=[(line.part_id, line.quantity) for line in payload.items],
        shipping_method=payload.shipping.method,
        address=payload.shipping.address.model_dump(),
        payment_method=payload.payment.method,
        session=session,
        redis=redis,
        client_tax_rate=payload.tax_rate,
        notes=payload.notes,
    )
    return {
        "success": True,
        "message": OrderService.created_message(order),
        "order": order_to_dict(order),
    }


@orders_router.get("")
async def list_orders(
    status_filter: OrderFilterType | None = Query(None, alias="status"),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=100),
    user: UserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    orders, total = await OrderService.list_orders(user, session, status=status_filter, page=page, limit=limit)
    return {
        "orders": [order_to_dict(order) for order in orders],
        "pagination": pagination(page, limit, total),
    }


@orders_router.get("/track/{order_number}")
async def track_order(order_number: str, session: AsyncSession = Depends(get_session)):
    order, timeline = await OrderService.track_order(order_number, session)
    return tracking_to_dict(order, timeline)


@orders_router.get("/{order_id}")
async def get_order(
    order_id: int,
    user: UserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    order = await OrderService.get_order(order_id, user, session)
    return {"order": order_to_dict(order)}


@orders_router.patch("/{order_id}")
async def update_order(
    order_id: int,
    payload: OrderUpdateRequest,
    user: UserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Admins: status, trackingNumber, adminNotes. Customers: cancel a pending order."""
    order = await OrderService.update_order(
        order_id, user, session,
        status=payload.status,
        tracking_number=payload.tracking_number,
        admin_notes=payload.admin_notes,
    )
    return {"order": order_to_dict(order)}
