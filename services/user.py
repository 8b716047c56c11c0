import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from db import session_commit
from enums.user_role import UserRole
from exceptions.base import AuthenticationRequiredException
from exceptions.user import (
    EmailAlreadyInUseException,
    SelfModificationException,
    UserDeactivatedException,
    UserNotFoundException,
)
from models.user import UserDTO
from repositories.order import OrderRepository
from repositories.partner import PartnerRepository
from repositories.user import UserRepository

logger = logging.getLogger(__name__)

# Fields an admin may change through PATCH /api/users/{id}
UPDATABLE_FIELDS = {"name", "email", "phone", "role", "email_verified", "is_active", "admin_notes"}


class UserService:

    @staticmethod
    async def authenticate(raw_user_id: str | None, session: AsyncSession) -> UserDTO:
        """
        Resolve the identity forwarded by the authentication proxy.

        Raises:
            AuthenticationRequiredException: Header missing, malformed or unknown user
            UserDeactivatedException: Account switched off by staff
        """
        if not raw_user_id:
            raise AuthenticationRequiredException()
        try:
            user_id = int(raw_user_id)
        except ValueError:
            raise AuthenticationRequiredException("malformed identity")
        user = await UserRepository.get_by_id(user_id, session)
        if user is None:
            raise AuthenticationRequiredException("unknown user")
        if not user.is_active:
            raise UserDeactivatedException(user.id)
        return user

    @staticmethod
    async def get_or_create(email: str, name: str, session: AsyncSession) -> UserDTO:
        """Find a customer by e-mail or register a new one (used by seeding and the auth proxy)."""
        user = await UserRepository.get_by_email(email, session)
        if user is not None:
            return user
        user_id = await UserRepository.create(UserDTO(email=email, name=name, role=UserRole.CUSTOMER), session)
        await session_commit(session)
        logger.info(f"User {user_id} registered")
        return await UserRepository.get_by_id(user_id, session)

    @staticmethod
    async def list_users(
        session: AsyncSession,
        search: str | None = None,
        role: UserRole | None = None,
        status: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[UserDTO], int, dict[str, int]]:
        """
        Args:
            status: "active" or "inactive" (account switch), anything else means both
        """
        is_active = {"active": True, "inactive": False}.get(status)
        users, total = await UserRepository.get_paginated(
            session, search=search, role=role, is_active=is_active, page=page, limit=limit
        )
        statistics = await UserRepository.get_statistics(session)
        return users, total, statistics

    @staticmethod
    async def get_user_detail(user_id: int, session: AsyncSession) -> dict:
        """User with order count, partner status and the five latest orders."""
        user = await UserRepository.get_by_id(user_id, session)
        if user is None:
            raise UserNotFoundException(user_id)
        application = await PartnerRepository.get_latest_by_user(user_id, session)
        return {
            "user": user,
            "order_count": await OrderRepository.count_by_user(user_id, session),
            "has_partner_application": application is not None,
            "partner_status": application.status if application else None,
            "recent_orders": await OrderRepository.get_recent_by_user(user_id, session, limit=5),
        }

    @staticmethod
    async def update_user(user_id: int, admin: UserDTO, values: dict, session: AsyncSession) -> UserDTO:
        """
        Raises:
            UserNotFoundException: No such user
            SelfModificationException: Admin dropping their own admin role or deactivating themselves
            EmailAlreadyInUseException: E-mail belongs to another account
        """
        user = await UserRepository.get_by_id(user_id, session)
        if user is None:
            raise UserNotFoundException(user_id)

        changes = {key: value for key, value in values.items() if key in UPDATABLE_FIELDS}
        if user_id == admin.id:
            if "role" in changes and changes["role"] != UserRole.ADMIN:
                raise SelfModificationException(admin.id, "role")
            if changes.get("is_active") is False:
                raise SelfModificationException(admin.id, "status")

        new_email = changes.get("email")
        if new_email is not None and new_email.lower() != (user.email or "").lower():
            other = await UserRepository.get_by_email(new_email, session)
            if other is not None and other.id != user_id:
                raise EmailAlreadyInUseException(new_email)

        if changes:
            changes["updated_at"] = datetime.now()
            await UserRepository.update(user_id, changes, session)
            await session_commit(session)
            logger.info(f"User {user_id} updated by admin {admin.id}: {sorted(k for k in changes if k != 'updated_at')}")
        return await UserRepository.get_by_id(user_id, session)
