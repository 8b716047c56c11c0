"""
Dashboard statistics for staff and for signed-in customers.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from enums.order_status import OrderStatus
from enums.quote_status import QuoteStatus
from models.user import UserDTO
from repositories.order import OrderRepository
from repositories.part import PartRepository
from repositories.quote import QuoteRepository
from repositories.user import UserRepository
from utils.money import from_cents

RECENT_LIMIT = 5

# What a customer sees as "still open"
CUSTOMER_OPEN_STATUSES = [OrderStatus.PENDING, OrderStatus.PROCESSING]


def period_starts(now: datetime) -> tuple[datetime, datetime, datetime]:
    """(start of today, start of this month, start of the previous month)"""
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    month_start = today.replace(day=1)
    if month_start.month == 1:
        previous_month_start = month_start.replace(year=month_start.year - 1, month=12)
    else:
        previous_month_start = month_start.replace(month=month_start.month - 1)
    return today, month_start, previous_month_start


def growth_percent(current: int, previous: int) -> float:
    """Month-over-month change, 0 when there is nothing to compare with."""
    if previous <= 0:
        return 0.0
    return round((current - previous) / previous * 100, 1)


class DashboardService:

    @staticmethod
    async def admin_statistics(session: AsyncSession, now: datetime | None = None) -> dict:
        """
        Returns:
            {"statistics": {users, parts, orders, revenue, quotes},
             "recent_orders": [OrderDTO], "top_selling_parts": [dict]}
        """
        now = now or datetime.now()
        today, month_start, previous_month_start = period_starts(now)

        users = await UserRepository.get_statistics(session, now)
        orders = await OrderRepository.get_statistics(session, today, month_start, previous_month_start)
        recent_orders, _ = await OrderRepository.get_paginated(session, page=1, limit=RECENT_LIMIT)

        return {
            "statistics": {
                "users": {
                    "total": users["customers"],
                    "newToday": users["newToday"],
                    "activeUsers": users["activeLastWeek"],
                },
                "parts": await PartRepository.get_stock_statistics(session),
                "orders": {
                    "total": orders["total"],
                    "pending": orders["pending"],
                    "today": orders["today"],
                    "thisMonth": orders["this_month"],
                    "growth": growth_percent(orders["this_month"], orders["previous_month"]),
                },
                "revenue": {
                    "total": float(from_cents(orders["revenue_cents"])),
                    "today": float(from_cents(orders["revenue_today_cents"])),
                    "thisMonth": float(from_cents(orders["revenue_this_month_cents"])),
                },
                "quotes": {
                    "pending": await QuoteRepository.count(session, status=QuoteStatus.PENDING),
                },
            },
            "recent_orders": recent_orders,
            "top_selling_parts": await OrderRepository.get_top_selling_parts(session, limit=RECENT_LIMIT),
        }

    @staticmethod
    async def customer_statistics(user: UserDTO, session: AsyncSession, now: datetime | None = None) -> dict:
        now = now or datetime.now()
        today, month_start, previous_month_start = period_starts(now)

        orders = await OrderRepository.get_statistics(
            session, today, month_start, previous_month_start,
            user_id=user.id,
            pending_statuses=CUSTOMER_OPEN_STATUSES,
        )
        recent_quotes, total_quotes = await QuoteRepository.get_paginated(
            session, user_id=user.id, page=1, limit=RECENT_LIMIT
        )
        return {
            "statistics": {
                "orders": {
                    "total": orders["total"],
                    "pending": orders["pending"],
                    "today": orders["today"],
                    "thisMonth": orders["this_month"],
                },
                "quotes": {
                    "total": total_quotes,
                    "pending": await QuoteRepository.count(session, user_id=user.id, status=QuoteStatus.PENDING),
                },
            },
            "recent_orders": await OrderRepository.get_recent_by_user(user.id, session, limit=RECENT_LIMIT),
            "recent_quotes": recent_quotes,
        }
