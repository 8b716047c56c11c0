import logging
import secrets
import string
import time
from datetime import datetime
from decimal import Decimal

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

import config
from db import session_commit
from enums.message_scope import MessageScope
from enums.order_filter import OrderFilterType
from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus
from enums.rate_limit_operation import RateLimitOperation
from exceptions.base import AccessDeniedException
from exceptions.order import (
    EmptyOrderException,
    InsufficientStockException,
    InvalidOrderStateException,
    OrderNotFoundException,
    OrderOwnershipException,
    UnknownOrderPartException,
)
from middleware.rate_limit import RateLimiter
from models.order import OrderDTO
from models.orderItem import OrderItemDTO
from models.user import UserDTO
from repositories.order import OrderRepository
from repositories.part import PartRepository
from services.notification import NotificationService
from services.pricing import PricingService
from services.shipping import ShippingService
from utils.localizator import Localizator
from utils.order_filters import get_status_filter_for_filter_type
from utils.order_state_machine import OrderStateMachine

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "AMO-"
_BASE36 = string.digits + string.ascii_uppercase

# Timestamp column stamped when an order enters a status
STATUS_TIMESTAMPS = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.SHIPPED: "shipped_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}

# Cancelling before dispatch puts the units back on the shelf
RESTOCK_FROM = {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING}


def _to_base36(number: int) -> str:
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


class OrderService:

    @staticmethod
    async def generate_order_number(session: AsyncSession) -> str:
        """AMO- + base36 millisecond timestamp + 4 random base36 characters, unique in the table."""
        while True:
            suffix = "".join(secrets.choice(_BASE36) for _ in range(4))
            order_number = f"{ORDER_NUMBER_PREFIX}{_to_base36(int(time.time() * 1000))}{suffix}"
            if not await OrderRepository.order_number_exists(order_number, session):
                return order_number

    @staticmethod
    def _merge_lines(items: list[tuple[int, int]]) -> dict[int, int]:
        """Sum quantities of repeated part ids, keeping first-seen order."""
        merged: dict[int, int] = {}
        for part_id, quantity in items:
            merged[part_id] = merged.get(part_id, 0) + quantity
        return merged

    @staticmethod
    async def create_order(
        user: UserDTO,
        items: list[tuple[int, int]],
        shipping_method: str,
        address: dict,
        payment_method: PaymentMethod,
        session: AsyncSession,
        redis: Redis,
        client_tax_rate: float | None = None,
        notes: str | None = None,
    ) -> OrderDTO:
        """
        Place an order from (part_id, quantity) lines.

        Prices, shipping and tax are recomputed server-side; figures sent by
        the storefront are never used. Stock is taken out in the same
        transaction that stores the order.

        Raises:
            EmptyOrderException: No lines
            InvalidAddressException / UnknownShippingMethodException: Bad checkout data
            UnknownOrderPartException: A line references a missing or inactive part
            InsufficientStockException: A line asks for more than is left
            RateLimitExceededException: Too many orders in the last hour
        """
        if not items:
            raise EmptyOrderException(user.id)
        ShippingService.validate_address(address)
        shipping_cents = ShippingService.get_cost_cents(shipping_method)
        await RateLimiter(redis).enforce(
            RateLimitOperation.ORDER_CREATE, user.id,
            max_count=config.MAX_ORDERS_PER_USER_PER_HOUR,
            window_seconds=3600,
        )

        lines = OrderService._merge_lines(items)
        parts = await PartRepository.get_by_ids(list(lines.keys()), session)
        order_items = []
        for part_id, quantity in lines.items():
            part = parts.get(part_id)
            if part is None or not part.is_active:
                raise UnknownOrderPartException(part_id)
            if part.stock < quantity:
                raise InsufficientStockException(part_id, quantity, part.stock)
            order_items.append(OrderItemDTO(
                part_id=part.id,
                part_number=part.part_number,
                name=part.name,
                unit_price_cents=part.price_cents,
                quantity=quantity,
                line_total_cents=part.price_cents * quantity,
            ))

        tax_rate = PricingService.get_tax_rate()
        if client_tax_rate is not None and Decimal(str(client_tax_rate)) != tax_rate:
            logger.warning(f"Ignoring client tax rate {client_tax_rate} for user {user.id}, using {tax_rate}")
        subtotal = PricingService.calculate_subtotal([(i.unit_price_cents, i.quantity) for i in order_items])
        totals = PricingService.calculate_totals(subtotal, shipping_cents, tax_rate)

        for item in order_items:
            if not await PartRepository.decrement_stock(item.part_id, item.quantity, session):
                # Another order took the stock between the check and the update
                await session.rollback()
                current = await PartRepository.get_by_id(item.part_id, session)
                raise InsufficientStockException(item.part_id, item.quantity, current.stock if current else 0)

        order_dto = OrderDTO(
            order_number=await OrderService.generate_order_number(session),
            user_id=user.id,
            status=OrderStatus.PENDING if payment_method == PaymentMethod.COD else OrderStatus.PROCESSING,
            subtotal_cents=totals.subtotal_cents,
            shipping_cents=totals.shipping_cents,
            tax_cents=totals.tax_cents,
            total_cents=totals.total_cents,
            tax_rate=float(totals.tax_rate),
            currency=config.CURRENCY,
            shipping_method=shipping_method,
            shipping_name=address["name"].strip(),
            shipping_email=address["email"].strip(),
            shipping_phone=address["phone"].strip(),
            shipping_street=address["street"].strip(),
            shipping_city=address["city"].strip(),
            shipping_postal_code=address.get("postal_code") or address.get("postalCode"),
            shipping_country=address.get("country") or "Mauritius",
            estimated_delivery=ShippingService.estimate_delivery(shipping_method),
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING,
            customer_notes=notes,
        )
        order = await OrderRepository.create(order_dto, order_items, session)
        await session_commit(session)
        logger.info(f"✅ Order {order.order_number} created for user {user.id} "
                    f"({len(order_items)} lines, total {order.total_cents} cents)")

        await NotificationService.order_confirmation(order)
        return order

    @staticmethod
    def created_message(order: OrderDTO) -> str:
        return Localizator.get_text(MessageScope.CUSTOMER, "order_created").format(order_number=order.order_number)

    @staticmethod
    async def list_orders(
        user: UserDTO,
        session: AsyncSession,
        status: OrderFilterType | str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[OrderDTO], int]:
        """Customers see their own orders, admins see everyone's."""
        statuses = get_status_filter_for_filter_type(status)
        return await OrderRepository.get_paginated(
            session,
            user_id=None if user.is_admin else user.id,
            statuses=statuses,
            page=page,
            limit=limit,
        )

    @staticmethod
    async def get_order(order_id: int, user: UserDTO, session: AsyncSession) -> OrderDTO:
        order = await OrderRepository.get_by_id(order_id, session)
        if order is None:
            raise OrderNotFoundException(order_id)
        if not user.is_admin and order.user_id != user.id:
            raise OrderOwnershipException(order_id, user.id)
        return order

    @staticmethod
    async def update_order(
        order_id: int,
        user: UserDTO,
        session: AsyncSession,
        status: OrderStatus | None = None,
        tracking_number: str | None = None,
        admin_notes: str | None = None,
    ) -> OrderDTO:
        """
        Change status, tracking number or staff notes of an order.

        Admins may do any valid transition. A customer may only cancel their
        own order while the state machine allows it without staff.

        Raises:
            InvalidOrderStateException: Transition not allowed from the current status
            AccessDeniedException: Non-admin asking for an admin-only change
        """
        order = await OrderService.get_order(order_id, user, session)

        if not user.is_admin:
            if tracking_number is not None or admin_notes is not None or status is None:
                raise AccessDeniedException(user.id, "update_order")
            if OrderStateMachine.requires_admin(order.status, status):
                raise AccessDeniedException(user.id, f"order_status:{status.value}")

        values = {}
        status_changed = status is not None and status != order.status
        if status_changed:
            if not OrderStateMachine.validate_and_log_transition(
                    order.id, order.status, status,
                    admin_id=user.id if user.is_admin else None,
                    user_id=user.id):
                raise InvalidOrderStateException(order.id, order.status.value, status.value)
            values["status"] = status
            now = datetime.now()
            if status in STATUS_TIMESTAMPS:
                values[STATUS_TIMESTAMPS[status]] = now
            if status == OrderStatus.DELIVERED and order.payment_method == PaymentMethod.COD:
                values["payment_status"] = PaymentStatus.PAID
                values["paid_at"] = now
            if status == OrderStatus.REFUNDED:
                values["payment_status"] = PaymentStatus.REFUNDED
            if status == OrderStatus.CANCELLED and order.status in RESTOCK_FROM:
                for item in order.items:
                    await PartRepository.increment_stock(item.part_id, item.quantity, session)
                logger.info(f"Order {order.order_number} cancelled, {len(order.items)} lines restocked")
        if tracking_number is not None:
            values["tracking_number"] = tracking_number
        if admin_notes is not None:
            values["admin_notes"] = admin_notes

        if values:
            values["updated_at"] = datetime.now()
            await OrderRepository.update(order.id, values, session)
            await session_commit(session)
        order = await OrderRepository.get_by_id(order.id, session)

        if status_changed:
            await NotificationService.order_status_update(order)
        return order

    @staticmethod
    def build_timeline(order: OrderDTO) -> list[dict]:
        """Customer-facing progress steps of an order, oldest first."""
        def step(key: str, timestamp: datetime | None, completed: bool = True, description: str | None = None,
                 estimated: bool = False) -> dict:
            entry = {
                "status": key,
                "title": Localizator.get_text(MessageScope.COMMON, f"timeline_{key}"),
                "description": description or Localizator.get_text(MessageScope.COMMON, f"timeline_{key}_description"),
                "timestamp": timestamp,
                "completed": completed,
            }
            if estimated:
                entry["estimated"] = True
            return entry

        status = order.status
        shipped_or_later = status in (OrderStatus.SHIPPED, OrderStatus.DELIVERED)
        timeline = []
        if order.created_at:
            timeline.append(step("placed", order.created_at))
        if order.paid_at or order.payment_status == PaymentStatus.PAID:
            timeline.append(step("paid", order.paid_at or order.created_at))
        if order.confirmed_at or status == OrderStatus.CONFIRMED:
            timeline.append(step("confirmed", order.confirmed_at or order.created_at))
        if status == OrderStatus.PROCESSING or shipped_or_later:
            timeline.append(step("processing", order.updated_at))
        if order.shipped_at or shipped_or_later:
            description = None
            if order.tracking_number:
                description = Localizator.get_text(
                    MessageScope.COMMON, "timeline_shipped_tracking_description"
                ).format(tracking_number=order.tracking_number)
            timeline.append(step("shipped", order.shipped_at or order.updated_at,
                                 completed=shipped_or_later, description=description))
        if order.delivered_at or status == OrderStatus.DELIVERED:
            timeline.append(step("delivered", order.delivered_at, completed=status == OrderStatus.DELIVERED))
        else:
            timeline.append(step("delivery", order.estimated_delivery, completed=False, estimated=True))
        return timeline

    @staticmethod
    async def track_order(order_number: str, session: AsyncSession) -> tuple[OrderDTO, list[dict]]:
        """Public lookup by order number (case-insensitive)."""
        order = await OrderRepository.get_by_order_number(order_number.strip().upper(), session)
        if order is None:
            raise OrderNotFoundException(order_number)
        return order, OrderService.build_timeline(order)
