from datetime import datetime
import logging

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from enums.order_status import OrderStatus
from enums.payment_status import PaymentStatus
from models.order import Order, OrderDTO
from models.orderItem import OrderItem, OrderItemDTO

logger = logging.getLogger(__name__)


class OrderRepository:

    @staticmethod
    async def create(order_dto: OrderDTO, items: list[OrderItemDTO], session: AsyncSession) -> OrderDTO:
        order = Order(**order_dto.model_dump(exclude={'id', 'items', 'created_at', 'updated_at'}))
        order.items = [OrderItem(**item.model_dump(exclude={'id', 'order_id'})) for item in items]
        session.add(order)
        await session_flush(session)
        return await OrderRepository.get_by_id(order.id, session)

    @staticmethod
    async def get_by_id(order_id: int, session: AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is not None:
            return OrderDTO.model_validate(order, from_attributes=True)
        else:
            return None

    @staticmethod
    async def get_by_order_number(order_number: str, session: AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.order_number == order_number)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is not None:
            return OrderDTO.model_validate(order, from_attributes=True)
        return None

    @staticmethod
    async def get_paginated(
        session: AsyncSession,
        user_id: int | None = None,
        statuses: list[OrderStatus] | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[OrderDTO], int]:
        """
        Newest-first order listing.

        Args:
            user_id: Restrict to one customer (None = all customers, admin view)
            statuses: Restrict to these statuses (None = any status)
        """
        conditions = []
        if user_id is not None:
            conditions.append(Order.user_id == user_id)
        if statuses is not None:
            conditions.append(Order.status.in_(statuses))

        count_stmt = select(func.count(Order.id)).where(*conditions)
        total = await session_execute(count_stmt, session)
        total = total.scalar_one()

        stmt = (select(Order)
                .where(*conditions)
                .order_by(Order.created_at.desc(), Order.id.desc())
                .offset((page - 1) * limit)
                .limit(limit))
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()], total

    @staticmethod
    async def count_by_user(user_id: int, session: AsyncSession) -> int:
        stmt = select(func.count(Order.id)).where(Order.user_id == user_id)
        result = await session_execute(stmt, session)
        return result.scalar_one()

    @staticmethod
    async def get_recent_by_user(user_id: int, session: AsyncSession, limit: int = 5) -> list[OrderDTO]:
        stmt = (select(Order)
                .where(Order.user_id == user_id)
                .order_by(Order.created_at.desc(), Order.id.desc())
                .limit(limit))
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()]

    @staticmethod
    async def update(order_id: int, values: dict, session: AsyncSession) -> None:
        stmt = update(Order).where(Order.id == order_id).values(**values)
        await session_execute(stmt, session)

    @staticmethod
    async def order_number_exists(order_number: str, session: AsyncSession) -> bool:
        stmt = select(Order.id).where(Order.order_number == order_number)
        result = await session_execute(stmt, session)
        return result.scalar() is not None

    @staticmethod
    async def get_statistics(
        session: AsyncSession,
        today: datetime,
        month_start: datetime,
        previous_month_start: datetime,
        user_id: int | None = None,
        pending_statuses: list[OrderStatus] | None = None,
    ) -> dict[str, int]:
        """
        Order counts and paid revenue (cents) for the dashboards.

        Args:
            today / month_start / previous_month_start: Period boundaries, local time
            user_id: Restrict to one customer
            pending_statuses: Statuses counted as "pending" (default: pending only)
        """
        pending_statuses = pending_statuses or [OrderStatus.PENDING]
        paid = Order.payment_status == PaymentStatus.PAID
        stmt = select(
            func.count(Order.id),
            func.count(Order.id).filter(Order.status.in_(pending_statuses)),
            func.count(Order.id).filter(Order.created_at >= today),
            func.count(Order.id).filter(Order.created_at >= month_start),
            func.count(Order.id).filter(Order.created_at >= previous_month_start, Order.created_at < month_start),
            func.coalesce(func.sum(Order.total_cents).filter(paid), 0),
            func.coalesce(func.sum(Order.total_cents).filter(paid, Order.created_at >= today), 0),
            func.coalesce(func.sum(Order.total_cents).filter(paid, Order.created_at >= month_start), 0),
        )
        if user_id is not None:
            stmt = stmt.where(Order.user_id == user_id)
        result = await session_execute(stmt, session)
        (total, pending, today_count, month_count, previous_month_count,
         revenue, revenue_today, revenue_month) = result.one()
        return {
            "total": total,
            "pending": pending,
            "today": today_count,
            "this_month": month_count,
            "previous_month": previous_month_count,
            "revenue_cents": revenue,
            "revenue_today_cents": revenue_today,
            "revenue_this_month_cents": revenue_month,
        }

    @staticmethod
    async def get_top_selling_parts(session: AsyncSession, limit: int = 5) -> list[dict]:
        """Best sellers by units, cancelled and refunded orders excluded."""
        units = func.sum(OrderItem.quantity)
        stmt = (select(OrderItem.part_id,
                       func.max(OrderItem.name),
                       func.max(OrderItem.part_number),
                       units,
                       func.sum(OrderItem.line_total_cents))
                .join(Order, Order.id == OrderItem.order_id)
                .where(Order.status.not_in([OrderStatus.CANCELLED, OrderStatus.REFUNDED]))
                .group_by(OrderItem.part_id)
                .order_by(units.desc(), OrderItem.part_id)
                .limit(limit))
        result = await session_execute(stmt, session)
        return [
            {
                "part_id": part_id,
                "name": name,
                "part_number": part_number,
                "quantity": quantity,
                "revenue_cents": revenue,
            }
            for part_id, name, part_number, quantity, revenue in result.all()
        ]
