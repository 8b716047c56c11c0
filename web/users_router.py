"""
Admin user management endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from enums.user_role import UserRole
from models.search_filters import MAX_PAGE
from models.user import UserDTO
from services.user import UserService
from web.dependencies import get_session, require_admin
from web.schemas import UserUpdateRequest
from web.serializers import order_summary, pagination, user_to_dict

users_router = APIRouter(prefix="/api/users", tags=["users"])


@users_router.get("")
async def list_users(
    search: str | None = Query(None),
    role: UserRole | None = Query(None),
    status_filter: str | None = Query(None, alias="status", pattern="^(all|active|inactive)$"),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(20, ge=1, le=100),
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    users, total, statistics = await UserService.list_users(
        session, search=search, role=role, status=status_filter, page=page, limit=limit
    )
    return {
        "users": [user_to_dict(user) for user in users],
        "pagination": pagination(page, limit, total),
        "statistics": statistics,
    }


@users_router.get("/{user_id}")
async def get_user(
    user_id: int,
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    detail = await UserService.get_user_detail(user_id, session)
    partner_status = detail["partner_status"]
    return {
        "user": {
            **user_to_dict(detail["user"]),
            "orderCount": detail["order_count"],
            "hasPartnerApplication": detail["has_partner_application"],
            "partnerStatus": partner_status.value if partner_status else None,
        },
        "recentOrders": [order_summary(order) for order in detail["recent_orders"]],
    }


@users_router.patch("/{user_id}")
async def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    user = await UserService.update_user(user_id, admin, payload.model_dump(exclude_unset=True), session)
    return {"user": user_to_dict(user)}
