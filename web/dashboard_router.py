"""
Dashboard statistics: the staff overview and a customer's own summary.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import UserDTO
from services.dashboard import DashboardService
from utils.money import from_cents
from web.dependencies import get_current_user, get_session, require_admin
from web.serializers import order_summary, quote_summary

dashboard_router = APIRouter(prefix="/api", tags=["dashboard"])


@dashboard_router.get("/admin/dashboard")
async def admin_dashboard(
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    dashboard = await DashboardService.admin_statistics(session)
    return {
        "statistics": dashboard["statistics"],
        "recentOrders": [
            {**order_summary(order), "customerName": order.shipping_name}
            for order in dashboard["recent_orders"]
        ],
        "topSellingParts": [
            {
                "id": part["part_id"],
                "name": part["name"],
                "partNumber": part["part_number"],
                "totalQuantity": part["quantity"],
                "totalRevenue": float(from_cents(part["revenue_cents"])),
            }
            for part in dashboard["top_selling_parts"]
        ],
    }


@dashboard_router.get("/user/dashboard")
async def customer_dashboard(
    user: UserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    dashboard = await DashboardService.customer_statistics(user, session)
    return {
        "statistics": dashboard["statistics"],
        "recentOrders": [order_summary(order) for order in dashboard["recent_orders"]],
        "recentQuotes": [quote_summary(quote) for quote in dashboard["recent_quotes"]],
    }
