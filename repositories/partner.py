from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush, session_refresh
from enums.business_type import BusinessType
from enums.partner_status import PartnerStatus
from models.partner import PartnerApplication, PartnerApplicationDTO


class PartnerRepository:

    @staticmethod
    async def create(application_dto: PartnerApplicationDTO, session: AsyncSession) -> PartnerApplicationDTO:
        application = PartnerApplication(**application_dto.model_dump(exclude={'id', 'created_at', 'updated_at'}))
        session.add(application)
        await session_flush(session)
        await session_refresh(session, application)
        return PartnerApplicationDTO.model_validate(application, from_attributes=True)

    @staticmethod
    async def get_by_id(application_id: int, session: AsyncSession) -> PartnerApplicationDTO | None:
        stmt = (select(PartnerApplication)
                .where(PartnerApplication.id == application_id)
                .execution_options(populate_existing=True))
        application = await session_execute(stmt, session)
        application = application.scalar()
        if application is not None:
            return PartnerApplicationDTO.model_validate(application, from_attributes=True)
        return None

    @staticmethod
    async def get_active_by_user(user_id: int, session: AsyncSession) -> PartnerApplicationDTO | None:
        """Latest pending, under review or approved application of a user."""
        stmt = (select(PartnerApplication)
                .where(PartnerApplication.user_id == user_id,
                       PartnerApplication.status.in_(PartnerStatus.active()))
                .order_by(PartnerApplication.created_at.desc())
                .limit(1))
        application = await session_execute(stmt, session)
        application = application.scalar()
        if application is not None:
            return PartnerApplicationDTO.model_validate(application, from_attributes=True)
        return None

    @staticmethod
    async def get_latest_by_user(user_id: int, session: AsyncSession) -> PartnerApplicationDTO | None:
        stmt = (select(PartnerApplication)
                .where(PartnerApplication.user_id == user_id)
                .order_by(PartnerApplication.created_at.desc(), PartnerApplication.id.desc())
                .limit(1))
        application = await session_execute(stmt, session)
        application = application.scalar()
        if application is not None:
            return PartnerApplicationDTO.model_validate(application, from_attributes=True)
        return None

    @staticmethod
    async def get_paginated(
        session: AsyncSession,
        user_id: int | None = None,
        status: PartnerStatus | None = None,
        business_type: BusinessType | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[PartnerApplicationDTO], int]:
        conditions = []
        if user_id is not None:
            conditions.append(PartnerApplication.user_id == user_id)
        if status is not None:
            conditions.append(PartnerApplication.status == status)
        if business_type is not None:
            conditions.append(PartnerApplication.business_type == business_type)

        count_stmt = select(func.count(PartnerApplication.id)).where(*conditions)
        total = await session_execute(count_stmt, session)
        total = total.scalar_one()

        stmt = (select(PartnerApplication)
                .where(*conditions)
                .order_by(PartnerApplication.created_at.desc(), PartnerApplication.id.desc())
                .offset((page - 1) * limit)
                .limit(limit))
        applications = await session_execute(stmt, session)
        return [PartnerApplicationDTO.model_validate(a, from_attributes=True) for a in applications.scalars().all()], total

    @staticmethod
    async def count_by_status(session: AsyncSession) -> dict[str, int]:
        stmt = (select(PartnerApplication.status, func.count(PartnerApplication.id))
                .group_by(PartnerApplication.status))
        result = await session_execute(stmt, session)
        counts = {status.value: 0 for status in PartnerStatus}
        for status, count in result.all():
            counts[status.value] = count
        return counts

    @staticmethod
    async def update(application_id: int, values: dict, session: AsyncSession) -> None:
        stmt = update(PartnerApplication).where(PartnerApplication.id == application_id).values(**values)
        await session_execute(stmt, session)

    @staticmethod
    async def delete(application_id: int, session: AsyncSession) -> None:
        stmt = delete(PartnerApplication).where(PartnerApplication.id == application_id)
        await session_execute(stmt, session)

    @staticmethod
    async def application_number_exists(application_number: str, session: AsyncSession) -> bool:
        stmt = select(PartnerApplication.id).where(PartnerApplication.application_number == application_number)
        result = await session_execute(stmt, session)
        return result.scalar() is not None
