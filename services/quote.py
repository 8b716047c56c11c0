"""
Quote requests: customers (or guests) describe the parts they need for a
vehicle, staff answer with a price that stays valid for a limited time.
"""

import logging
from datetime import datetime, timedelta

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

import config
from db import session_commit
from enums.quote_status import QuoteStatus
from enums.quote_urgency import QuoteUrgency
from enums.rate_limit_operation import RateLimitOperation
from exceptions.base import AccessDeniedException
from exceptions.quote import InvalidQuoteDataException, QuoteNotFoundException
from middleware.rate_limit import RateLimiter
from models.quote import QuoteDTO
from models.user import UserDTO
from repositories.quote import QuoteRepository
from services.notification import NotificationService

logger = logging.getLogger(__name__)

QUOTE_NUMBER_PREFIX = "QT"
OLDEST_VEHICLE_YEAR = 1900


class QuoteService:

    @staticmethod
    async def generate_quote_number(session: AsyncSession, now: datetime | None = None) -> str:
        """QT + year + running number, e.g. QT2026000042."""
        year = (now or datetime.now()).year
        sequence = await QuoteRepository.count(session) + 1
        while True:
            quote_number = f"{QUOTE_NUMBER_PREFIX}{year}{sequence:06d}"
            if not await QuoteRepository.quote_number_exists(quote_number, session):
                return quote_number
            sequence += 1

    @staticmethod
    async def submit(data: dict, user: UserDTO | None, session: AsyncSession, redis: Redis) -> QuoteDTO:
        """
        Record a quote request and mail the customer and the shop.

        Args:
            data: QuoteDTO fields (customer_*, vehicle_*, items, urgency, ...)
            user: The signed-in customer, or None for a guest request

        Raises:
            InvalidQuoteDataException: No items or an impossible vehicle year
            RateLimitExceededException: Too many requests in the last hour
        """
        now = datetime.now()
        if not data.get("items"):
            raise InvalidQuoteDataException("items", "at least one item is required")
        year = data.get("vehicle_year")
        if year is None or not OLDEST_VEHICLE_YEAR <= year <= now.year + 1:
            raise InvalidQuoteDataException("vehicleYear", f"must be between {OLDEST_VEHICLE_YEAR} and {now.year + 1}")

        await RateLimiter(redis).enforce(
            RateLimitOperation.QUOTE_REQUEST,
            user.id if user is not None else data["customer_email"].lower(),
            max_count=config.MAX_QUOTE_REQUESTS_PER_HOUR,
            window_seconds=3600,
        )

        quote_dto = QuoteDTO(
            **data,
            user_id=user.id if user is not None else None,
            quote_number=await QuoteService.generate_quote_number(session, now),
            status=QuoteStatus.PENDING,
        )
        quote = await QuoteRepository.create(quote_dto, session)
        await session_commit(session)
        logger.info(f"Quote {quote.quote_number} submitted ({quote.urgency.value}, {len(quote.items)} items)")

        # Mail failures are logged by EmailService and never undo the request
        await NotificationService.quote_to_admin(quote)
        await NotificationService.quote_received(quote)
        return quote

    @staticmethod
    async def list_quotes(
        user: UserDTO,
        session: AsyncSession,
        status: QuoteStatus | None = None,
        urgency: QuoteUrgency | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[QuoteDTO], int]:
        """Admins see every quote, customers only their own."""
        return await QuoteRepository.get_paginated(
            session,
            user_id=None if user.is_admin else user.id,
            status=status,
            urgency=urgency,
            page=page,
            limit=limit,
        )

    @staticmethod
    async def get_quote(quote_id: int, user: UserDTO, session: AsyncSession) -> QuoteDTO:
        quote = await QuoteRepository.get_by_id(quote_id, session)
        if quote is None:
            raise QuoteNotFoundException(quote_id)
        if not user.is_admin and quote.user_id != user.id:
            raise AccessDeniedException(user.id, f"quote:{quote_id}")
        return quote

    @staticmethod
    async def respond(
        quote_id: int,
        admin: UserDTO,
        session: AsyncSession,
        quoted_price_cents: int | None = None,
        quotation_notes: str | None = None,
        valid_until: datetime | None = None,
        status: QuoteStatus | None = None,
    ) -> QuoteDTO:
        """
        Staff update of a quote.

        Giving a price records who quoted and when, moves the quote to
        "quoted" unless another status is given, and defaults the validity
        to QUOTE_VALIDITY_DAYS. The customer is mailed when a price is sent
        and the quote ends up "quoted".
        """
        quote = await QuoteRepository.get_by_id(quote_id, session)
        if quote is None:
            raise QuoteNotFoundException(quote_id)

        now = datetime.now()
        if valid_until is not None and valid_until.tzinfo is not None:
            # Stored as naive local time like every other timestamp
            valid_until = valid_until.astimezone().replace(tzinfo=None)
        if valid_until is not None and valid_until <= now:
            raise InvalidQuoteDataException("validUntil", "must be in the future")

        values = {"updated_at": now}
        if status is not None:
            values["status"] = status
        if quotation_notes is not None:
            values["quotation_notes"] = quotation_notes
        if valid_until is not None:
            values["valid_until"] = valid_until
        if quoted_price_cents is not None:
            values["quoted_price_cents"] = quoted_price_cents
            values["quoted_by"] = admin.id
            values["quoted_at"] = now
            values["responded_at"] = now
            values.setdefault("status", QuoteStatus.QUOTED)
            values.setdefault("valid_until", now + timedelta(days=config.QUOTE_VALIDITY_DAYS))

        await QuoteRepository.update(quote_id, values, session)
        await session_commit(session)
        quote = await QuoteRepository.get_by_id(quote_id, session)
        logger.info(f"Quote {quote.quote_number} updated by admin {admin.id} (status {quote.status.value})")

        if quoted_price_cents is not None and quote.status == QuoteStatus.QUOTED:
            await NotificationService.quote_response(quote)
        return quote

    @staticmethod
    async def delete(quote_id: int, admin: UserDTO, session: AsyncSession) -> None:
        quote = await QuoteRepository.get_by_id(quote_id, session)
        if quote is None:
            raise QuoteNotFoundException(quote_id)
        await QuoteRepository.delete(quote_id, session)
        await session_commit(session)
        logger.info(f"Quote {quote.quote_number} deleted by admin {admin.id}")
