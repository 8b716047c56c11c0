from datetime import datetime, timedelta

from sqlalchemy import select, update, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from enums.user_role import UserRole
from models.user import UserDTO, User


class UserRepository:
    @staticmethod
    async def get_by_id(user_id: int, session: AsyncSession) -> UserDTO | None:
        stmt = select(User).where(User.id == user_id).execution_options(populate_existing=True)
        user = await session_execute(stmt, session)
        user = user.scalar()
        if user is not None:
            return UserDTO.model_validate(user, from_attributes=True)
        else:
            return user

    @staticmethod
    async def get_by_email(email: str, session: AsyncSession) -> UserDTO | None:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        user = await session_execute(stmt, session)
        user = user.scalar()
        if user is not None:
            return UserDTO.model_validate(user, from_attributes=True)
        return None

    @staticmethod
    async def create(user_dto: UserDTO, session: AsyncSession) -> int:
        user = User(**user_dto.model_dump(exclude_none=True))
        session.add(user)
        await session_flush(session)
        return user.id

    @staticmethod
    async def update(user_id: int, values: dict, session: AsyncSession) -> None:
        stmt = update(User).where(User.id == user_id).values(**values)
        await session_execute(stmt, session)

    @staticmethod
    async def get_paginated(
        session: AsyncSession,
        search: str | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[UserDTO], int]:
        """Newest-first user listing; search matches name or e-mail, case-insensitive."""
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        if role is not None:
            conditions.append(User.role == role)
        if is_active is not None:
            conditions.append(User.is_active == is_active)

        count_stmt = select(func.count(User.id)).where(*conditions)
        total = await session_execute(count_stmt, session)
        total = total.scalar_one()

        stmt = (select(User)
                .where(*conditions)
                .order_by(User.created_at.desc(), User.id.desc())
                .offset((page - 1) * limit)
                .limit(limit))
        users = await session_execute(stmt, session)
        return [UserDTO.model_validate(user, from_attributes=True) for user in users.scalars().all()], total

    @staticmethod
    async def get_statistics(session: AsyncSession, now: datetime | None = None) -> dict[str, int]:
        now = now or datetime.now()
        stmt = select(
            func.count(User.id),
            func.count(User.id).filter(User.role == UserRole.CUSTOMER),
            func.count(User.id).filter(User.role == UserRole.ADMIN),
            func.count(User.id).filter(User.email_verified == True),
            func.count(User.id).filter(User.created_at >= now - timedelta(days=1)),
            func.count(User.id).filter(User.last_login_at >= now - timedelta(days=7)),
        )
        result = await session_execute(stmt, session)
        total, customers, admins, verified, new_today, active_last_week = result.one()
        return {
            "total": total,
            "customers": customers,
            "admins": admins,
            "verified": verified,
            "unverified": total - verified,
            "newToday": new_today,
            "activeLastWeek": active_last_week,
        }
