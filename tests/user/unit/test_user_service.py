"""
Unit tests for UserService.

Tests cover:
- authenticate(): missing, malformed, unknown and deactivated identities
- get_or_create()
- list_users(): search, role and account-status filters, statistics
- get_user_detail(): order count, partner status, recent orders
- update_user(): self-modification guard, e-mail clash, field whitelist
"""

from datetime import datetime, timedelta

import pytest

from enums.partner_status import PartnerStatus
from enums.user_role import UserRole
from exceptions.base import AuthenticationRequiredException
from exceptions.user import (
    EmailAlreadyInUseException,
    SelfModificationException,
    UserDeactivatedException,
    UserNotFoundException,
)
from models.partner import PartnerApplicationDTO
from models.user import UserDTO
from repositories.partner import PartnerRepository
from repositories.user import UserRepository
from services.user import UserService


class TestAuthenticate:

    @pytest.mark.asyncio
    async def test_known_user(self, customer, test_session):
        user = await UserService.authenticate(str(customer.id), test_session)

        assert user.id == customer.id
        assert user.email == "jean@example.mu"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [None, "", "abc", "9999"])
    async def test_missing_malformed_or_unknown(self, raw, test_session):
        with pytest.raises(AuthenticationRequiredException):
            await UserService.authenticate(raw, test_session)

    @pytest.mark.asyncio
    async def test_deactivated_user(self, customer, test_session):
        await UserRepository.update(customer.id, {"is_active": False}, test_session)
        await test_session.commit()

        with pytest.raises(UserDeactivatedException):
            await UserService.authenticate(str(customer.id), test_session)


class TestGetOrCreate:

    @pytest.mark.asyncio
    async def test_creates_customer_once(self, test_session):
        first = await UserService.get_or_create("new@example.mu", "New Buyer", test_session)
        second = await UserService.get_or_create("NEW@example.mu", "Other Name", test_session)

        assert first.id == second.id
        assert first.role == UserRole.CUSTOMER
        assert second.name == "New Buyer"


class TestListUsers:

    @pytest.mark.asyncio
    async def test_filters_and_statistics(self, customer, admin, test_session):
        inactive_id = await UserRepository.create(
            UserDTO(email="old@example.mu", name="Old Account", role=UserRole.CUSTOMER,
                    is_active=False, email_verified=True),
            test_session
        )
        await UserRepository.update(customer.id, {"last_login_at": datetime.now() - timedelta(days=2)}, test_session)
        await test_session.commit()

        _, total, statistics = await UserService.list_users(test_session)
        inactive, inactive_total, _ = await UserService.list_users(test_session, status="inactive")
        admins, admin_total, _ = await UserService.list_users(test_session, role=UserRole.ADMIN)
        found, found_total, _ = await UserService.list_users(test_session, search="DUPONT")

        assert total == 3
        assert inactive_total == 1 and inactive[0].id == inactive_id
        assert admin_total == 1 and admins[0].id == admin.id
        assert found_total == 1 and found[0].id == customer.id
        assert statistics["total"] == 3
        assert statistics["customers"] == 2
        assert statistics["admins"] == 1
        assert statistics["verified"] == 1
        assert statistics["unverified"] == 2
        assert statistics["activeLastWeek"] == 1

    @pytest.mark.asyncio
    async def test_pagination(self, test_session):
        for i in range(5):
            await UserRepository.create(UserDTO(email=f"user{i}@example.mu", name=f"User {i}"), test_session)
        await test_session.commit()

        page, total, _ = await UserService.list_users(test_session, page=2, limit=2)

        assert total == 5
        assert len(page) == 2


class TestUserDetail:

    @pytest.mark.asyncio
    async def test_detail_with_partner_application(self, customer, test_session):
        await PartnerRepository.create(PartnerApplicationDTO(
            application_number="PA-000001-ABCDEF",
            user_id=customer.id,
            business_name="Rose Hill Motors",
            business_type="dealer",
            location="Rose Hill",
            address="1 Main Street, Rose Hill",
            contact_name="Jean Dupont",
            contact_phone="+230 5000 0000",
            contact_email="jean@example.mu",
            specialization=["European"],
            status=PartnerStatus.UNDER_REVIEW,
            terms_accepted=True,
        ), test_session)
        await test_session.commit()

        detail = await UserService.get_user_detail(customer.id, test_session)

        assert detail["user"].id == customer.id
        assert detail["order_count"] == 0
        assert detail["has_partner_application"] is True
        assert detail["partner_status"] == PartnerStatus.UNDER_REVIEW
        assert detail["recent_orders"] == []

    @pytest.mark.asyncio
    async def test_missing_user(self, test_session):
        with pytest.raises(UserNotFoundException):
            await UserService.get_user_detail(404, test_session)


class TestUpdateUser:

    @pytest.mark.asyncio
    async def test_admin_updates_customer(self, customer, admin, test_session):
        updated = await UserService.update_user(
            customer.id, admin,
            {"name": "Jean-Pierre Dupont", "email_verified": True, "admin_notes": "VIP"},
            test_session
        )

        assert updated.name == "Jean-Pierre Dupont"
        assert updated.email_verified is True
        assert updated.admin_notes == "VIP"

    @pytest.mark.asyncio
    async def test_unknown_fields_ignored(self, customer, admin, test_session):
        updated = await UserService.update_user(customer.id, admin, {"id": 999, "created_at": None}, test_session)

        assert updated.id == customer.id

    @pytest.mark.asyncio
    async def test_admin_cannot_demote_self(self, admin, test_session):
        with pytest.raises(SelfModificationException) as exc_info:
            await UserService.update_user(admin.id, admin, {"role": UserRole.CUSTOMER}, test_session)

        assert exc_info.value.field == "role"

    @pytest.mark.asyncio
    async def test_admin_cannot_deactivate_self(self, admin, test_session):
        with pytest.raises(SelfModificationException) as exc_info:
            await UserService.update_user(admin.id, admin, {"is_active": False}, test_session)

        assert exc_info.value.field == "status"

    @pytest.mark.asyncio
    async def test_admin_may_edit_own_name(self, admin, test_session):
        updated = await UserService.update_user(admin.id, admin, {"name": "Head Office", "role": UserRole.ADMIN},
                                                test_session)

        assert updated.name == "Head Office"

    @pytest.mark.asyncio
    async def test_email_clash(self, customer, admin, test_session):
        with pytest.raises(EmailAlreadyInUseException):
            await UserService.update_user(customer.id, admin, {"email": "STAFF@example.mu"}, test_session)

    @pytest.mark.asyncio
    async def test_same_email_different_case_allowed(self, customer, admin, test_session):
        updated = await UserService.update_user(customer.id, admin, {"email": "Jean@Example.mu"}, test_session)

        assert updated.email == "Jean@Example.mu"
