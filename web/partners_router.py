"""
Partner application endpoints.
"""

from fastapi import APIRouter, Depends, Query, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from enums.business_type import BusinessType
from enums.message_scope import MessageScope
from enums.partner_status import PartnerStatus
from models.search_filters import MAX_PAGE
from models.user import UserDTO
from services.partner import PartnerService
from utils.localizator import Localizator
from web.dependencies import get_current_user, get_redis, get_session, require_admin
from web.schemas import PartnerApplicationRequest, PartnerReviewRequest
from web.serializers import pagination, partner_to_dict

partners_router = APIRouter(prefix="/api/partners", tags=["partners"])


@partners_router.post("", status_code=status.HTTP_201_CREATED)
async def submit_application(
    payload: PartnerApplicationRequest,
    user: UserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    redis: Redis = Depends(get_redis),
):
    application = await PartnerService.apply(user, payload.model_dump(), session, redis)
    message = Localizator.get_text(MessageScope.CUSTOMER, "partner_application_submitted").format(
        application_number=application.application_number
    )
    return {
        "success": True,
        "message": message,
        "application": partner_to_dict(application),
    }


@partners_router.get("")
async def list_applications(
    status_filter: PartnerStatus | None = Query(None, alias="status"),
    business_type: BusinessType | None = Query(None, alias="businessType"),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=100),
    user: UserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    applications, total, statistics = await PartnerService.list_applications(
        user, session, status=status_filter, business_type=business_type, page=page, limit=limit
    )
    response = {
        "applications": [partner_to_dict(application) for application in applications],
        "pagination": pagination(page, limit, total),
    }
    if statistics is not None:
        response["statistics"] = statistics
    return response


@partners_router.get("/{application_id}")
async def get_application(
    application_id: int,
    user: UserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    application = await PartnerService.get_application(application_id, user, session)
    return {"application": partner_to_dict(application)}


@partners_router.patch("/{application_id}")
async def review_application(
    application_id: int,
    payload: PartnerReviewRequest,
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    application = await PartnerService.review(
        application_id, admin, payload.status, session,
        partner_level=payload.partner_level,
        discount_rate=payload.discount_rate,
        credit_limit_cents=payload.credit_limit_cents,
        admin_notes=payload.admin_notes,
    )
    return {"application": partner_to_dict(application)}


@partners_router.delete("/{application_id}")
async def delete_application(
    application_id: int,
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    await PartnerService.delete(application_id, admin, session)
    return {"success": True}
