"""
Partner (trade account) applications: submission by garages and dealers,
review by staff.
"""

import logging
import secrets
import string
import time
from datetime import datetime

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

import config
from db import session_commit
from enums.business_type import BusinessType
from enums.partner_level import PartnerLevel
from enums.partner_status import PartnerStatus
from enums.rate_limit_operation import RateLimitOperation
from exceptions.base import AccessDeniedException
from exceptions.partner import (
    DuplicatePartnerApplicationException,
    InvalidPartnerDataException,
    PartnerApplicationLockedException,
    PartnerApplicationNotFoundException,
)
from middleware.rate_limit import RateLimiter
from models.partner import PartnerApplicationDTO
from models.user import UserDTO
from repositories.partner import PartnerRepository
from services.notification import NotificationService

logger = logging.getLogger(__name__)

APPLICATION_NUMBER_PREFIX = "PA-"
_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


class PartnerService:

    @staticmethod
    async def generate_application_number(session: AsyncSession) -> str:
        while True:
            timestamp = str(int(time.time() * 1000))[-6:]
            suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
            application_number = f"{APPLICATION_NUMBER_PREFIX}{timestamp}-{suffix}"
            if not await PartnerRepository.application_number_exists(application_number, session):
                return application_number

    @staticmethod
    async def apply(user: UserDTO, data: dict, session: AsyncSession, redis: Redis) -> PartnerApplicationDTO:
        """
        Submit a partner application for the current user.

        Args:
            data: PartnerApplicationDTO fields (contact_email, business_type, ...)

        Raises:
            InvalidPartnerDataException: Terms not accepted or no specialization chosen
            DuplicatePartnerApplicationException: User already has a pending, in-review or approved application
            RateLimitExceededException: Too many submissions in the last hour
        """
        if not data.get("terms_accepted"):
            raise InvalidPartnerDataException("termsAccepted", "you must accept the partnership terms and conditions")
        if not data.get("specialization"):
            raise InvalidPartnerDataException("specialization", "at least one vehicle type must be selected")

        existing = await PartnerRepository.get_active_by_user(user.id, session)
        if existing is not None:
            raise DuplicatePartnerApplicationException(user.id, existing.application_number, existing.status.value)

        await RateLimiter(redis).enforce(
            RateLimitOperation.PARTNER_APPLY, user.id,
            max_count=config.MAX_PARTNER_APPLICATIONS_PER_HOUR,
            window_seconds=3600,
        )

        application_dto = PartnerApplicationDTO(
            **data,
            user_id=user.id,
            application_number=await PartnerService.generate_application_number(session),
            status=PartnerStatus.PENDING,
        )
        application = await PartnerRepository.create(application_dto, session)
        await session_commit(session)
        logger.info(f"Partner application {application.application_number} submitted by user {user.id}")

        # Mail failures are logged by EmailService and never undo the submission
        await NotificationService.partner_application_received(application)
        await NotificationService.partner_application_to_admin(application)
        return application

    @staticmethod
    async def list_applications(
        user: UserDTO,
        session: AsyncSession,
        status: PartnerStatus | None = None,
        business_type: BusinessType | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[PartnerApplicationDTO], int, dict[str, int] | None]:
        """
        Returns:
            (applications, total, statistics); statistics only for admins
        """
        applications, total = await PartnerRepository.get_paginated(
            session,
            user_id=None if user.is_admin else user.id,
            status=status,
            business_type=business_type,
            page=page,
            limit=limit,
        )
        statistics = None
        if user.is_admin:
            counts = await PartnerRepository.count_by_status(session)
            statistics = {
                "total": sum(counts.values()),
                "pending": counts[PartnerStatus.PENDING.value],
                "approved": counts[PartnerStatus.APPROVED.value],
                "rejected": counts[PartnerStatus.REJECTED.value],
                "underReview": counts[PartnerStatus.UNDER_REVIEW.value],
            }
        return applications, total, statistics

    @staticmethod
    async def get_application(application_id: int, user: UserDTO, session: AsyncSession) -> PartnerApplicationDTO:
        application = await PartnerRepository.get_by_id(application_id, session)
        if application is None:
            raise PartnerApplicationNotFoundException(application_id)
        if not user.is_admin and application.user_id != user.id:
            raise AccessDeniedException(user.id, f"partner_application:{application_id}")
        return application

    @staticmethod
    async def review(
        application_id: int,
        admin: UserDTO,
        status: PartnerStatus,
        session: AsyncSession,
        partner_level: PartnerLevel | None = None,
        discount_rate: float | None = None,
        credit_limit_cents: int | None = None,
        admin_notes: str | None = None,
    ) -> PartnerApplicationDTO:
        """
        Record a staff decision on an application.

        approved_at / rejected_at are stamped only when the status actually
        moves into that state. The applicant is mailed on approval or rejection.
        """
        application = await PartnerRepository.get_by_id(application_id, session)
        if application is None:
            raise PartnerApplicationNotFoundException(application_id)
        if discount_rate is not None and not 0 <= discount_rate <= 50:
            raise InvalidPartnerDataException("discountRate", "must be between 0 and 50")
        if credit_limit_cents is not None and credit_limit_cents < 0:
            raise InvalidPartnerDataException("creditLimit", "must be zero or positive")

        now = datetime.now()
        values = {
            "status": status,
            "reviewed_by": admin.id,
            "reviewed_at": now,
            "updated_at": now,
        }
        if partner_level is not None:
            values["partner_level"] = partner_level
        if discount_rate is not None:
            values["discount_rate"] = discount_rate
        if credit_limit_cents is not None:
            values["credit_limit_cents"] = credit_limit_cents
        if admin_notes is not None:
            values["admin_notes"] = admin_notes
        if status == PartnerStatus.APPROVED and application.status != PartnerStatus.APPROVED:
            values["approved_at"] = now
        if status == PartnerStatus.REJECTED and application.status != PartnerStatus.REJECTED:
            values["rejected_at"] = now

        await PartnerRepository.update(application_id, values, session)
        await session_commit(session)
        application = await PartnerRepository.get_by_id(application_id, session)
        logger.info(f"Partner application {application.application_number} set to {status.value} by admin {admin.id}")

        if status in (PartnerStatus.APPROVED, PartnerStatus.REJECTED):
            await NotificationService.partner_status_update(application)
        return application

    @staticmethod
    async def delete(application_id: int, admin: UserDTO, session: AsyncSession) -> None:
        """
        Raises:
            PartnerApplicationLockedException: Approved applications are kept
        """
        application = await PartnerRepository.get_by_id(application_id, session)
        if application is None:
            raise PartnerApplicationNotFoundException(application_id)
        if application.status == PartnerStatus.APPROVED:
            raise PartnerApplicationLockedException(application_id, application.status.value)
        await PartnerRepository.delete(application_id, session)
        await session_commit(session)
        logger.info(f"Partner application {application.application_number} deleted by admin {admin.id}")
