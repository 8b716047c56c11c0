from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush, session_refresh
from enums.quote_status import QuoteStatus
from enums.quote_urgency import QuoteUrgency
from models.quote import Quote, QuoteDTO


class QuoteRepository:

    @staticmethod
    async def create(quote_dto: QuoteDTO, session: AsyncSession) -> QuoteDTO:
        values = quote_dto.model_dump(exclude={'id', 'created_at', 'updated_at'})
        quote = Quote(**values)
        session.add(quote)
        await session_flush(session)
        await session_refresh(session, quote)
        return QuoteDTO.model_validate(quote, from_attributes=True)

    @staticmethod
    async def get_by_id(quote_id: int, session: AsyncSession) -> QuoteDTO | None:
        stmt = select(Quote).where(Quote.id == quote_id).execution_options(populate_existing=True)
        quote = await session_execute(stmt, session)
        quote = quote.scalar()
        if quote is not None:
            return QuoteDTO.model_validate(quote, from_attributes=True)
        return None

    @staticmethod
    async def get_paginated(
        session: AsyncSession,
        user_id: int | None = None,
        status: QuoteStatus | None = None,
        urgency: QuoteUrgency | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[QuoteDTO], int]:
        """
        Newest-first quote listing.

        Args:
            user_id: Restrict to one customer (None = every quote, admin view)
        """
        conditions = []
        if user_id is not None:
            conditions.append(Quote.user_id == user_id)
        if status is not None:
            conditions.append(Quote.status == status)
        if urgency is not None:
            conditions.append(Quote.urgency == urgency)

        count_stmt = select(func.count(Quote.id)).where(*conditions)
        total = await session_execute(count_stmt, session)
        total = total.scalar_one()

        stmt = (select(Quote)
                .where(*conditions)
                .order_by(Quote.created_at.desc(), Quote.id.desc())
                .offset((page - 1) * limit)
                .limit(limit))
        quotes = await session_execute(stmt, session)
        return [QuoteDTO.model_validate(q, from_attributes=True) for q in quotes.scalars().all()], total

    @staticmethod
    async def count(session: AsyncSession, user_id: int | None = None, status: QuoteStatus | None = None) -> int:
        conditions = []
        if user_id is not None:
            conditions.append(Quote.user_id == user_id)
        if status is not None:
            conditions.append(Quote.status == status)
        stmt = select(func.count(Quote.id)).where(*conditions)
        result = await session_execute(stmt, session)
        return result.scalar_one()

    @staticmethod
    async def update(quote_id: int, values: dict, session: AsyncSession) -> None:
        stmt = update(Quote).where(Quote.id == quote_id).values(**values)
        await session_execute(stmt, session)

    @staticmethod
    async def delete(quote_id: int, session: AsyncSession) -> None:
        stmt = delete(Quote).where(Quote.id == quote_id)
        await session_execute(stmt, session)

    @staticmethod
    async def quote_number_exists(quote_number: str, session: AsyncSession) -> bool:
        stmt = select(Quote.id).where(Quote.quote_number == quote_number)
        result = await session_execute(stmt, session)
        return result.scalar() is not None
