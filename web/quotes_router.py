"""
Quote request endpoints.

Anyone may ask for a quote; signed-in customers see their own requests,
staff see and answer all of them.
"""

from fastapi import APIRouter, Depends, Query, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from enums.message_scope import MessageScope
from enums.quote_status import QuoteStatus
from enums.quote_urgency import QuoteUrgency
from models.search_filters import MAX_PAGE
from models.user import UserDTO
from services.quote import QuoteService
from utils.localizator import Localizator
from web.dependencies import get_current_user, get_optional_user, get_redis, get_session, require_admin
from web.schemas import QuoteCreateRequest, QuoteUpdateRequest
from web.serializers import pagination, quote_to_dict

quotes_router = APIRouter(prefix="/api/quotes", tags=["quotes"])


@quotes_router.post("", status_code=status.HTTP_201_CREATED)
async def submit_quote(
    payload: QuoteCreateRequest,
    user: UserDTO | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_session),
    redis: Redis = Depends(get_redis),
):
    quote = await QuoteService.submit(payload.to_values(), user, session, redis)
    message = Localizator.get_text(MessageScope.CUSTOMER, "quote_submitted").format(
        quote_number=quote.quote_number
    )
    return {"message": message, "quote": quote_to_dict(quote)}


@quotes_router.get("")
async def list_quotes(
    status_filter: QuoteStatus | None = Query(None, alias="status"),
    urgency: QuoteUrgency | None = Query(None),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(20, ge=1, le=100),
    user: UserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    quotes, total = await QuoteService.list_quotes(
        user, session, status=status_filter, urgency=urgency, page=page, limit=limit
    )
    return {
        "quotes": [quote_to_dict(quote) for quote in quotes],
        "pagination": pagination(page, limit, total),
    }


@quotes_router.get("/{quote_id}")
async def get_quote(
    quote_id: int,
    user: UserDTO = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    quote = await QuoteService.get_quote(quote_id, user, session)
    return {"quote": quote_to_dict(quote)}


@quotes_router.put("/{quote_id}")
async def respond_to_quote(
    quote_id: int,
    payload: QuoteUpdateRequest,
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    quote = await QuoteService.respond(
        quote_id, admin, session,
        quoted_price_cents=payload.quoted_price_cents,
        quotation_notes=payload.quotation_notes,
        valid_until=payload.valid_until,
        status=payload.status,
    )
    return {
        "message": Localizator.get_text(MessageScope.CUSTOMER, "quote_updated"),
        "quote": quote_to_dict(quote),
    }


@quotes_router.delete("/{quote_id}")
async def delete_quote(
    quote_id: int,
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    await QuoteService.delete(quote_id, admin, session)
    return {"success": True}
