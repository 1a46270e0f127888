"""
Tests for staff routes and authentication.
"""

import pytest
from httpx import AsyncClient

from gymdesk.core.security import create_access_token
from gymdesk.staff.models.staff import StaffRole
from tests.utils.factories import create_staff_factory
from tests.utils.helpers import assert_error_response, decode_jwt_token


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_should_require_access_token(self, test_client: AsyncClient):
        response = await test_client.get("/api/v1/staff/me")

        error = assert_error_response(response, 401, "UNAUTHORIZED")
        assert error["message"] == "Missing access token"

    @pytest.mark.asyncio
    async def test_should_reject_malformed_token(self, test_client: AsyncClient):
        response = await test_client.get(
            "/api/v1/staff/me", cookies={"access_token": "not-a-jwt"}
        )

        assert_error_response(response, 401, "UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_should_reject_inactive_staff(self, test_client: AsyncClient, db_session):
        inactive = create_staff_factory(db_session, is_active=False)
        token = create_access_token({"sub": str(inactive.id)})

        response = await test_client.get("/api/v1/staff/me", cookies={"access_token": token})

        assert_error_response(response, 403, "FORBIDDEN")

    def test_access_token_carries_subject_and_type(self, test_admin, test_admin_token):
        payload = decode_jwt_token(test_admin_token)

        assert payload["sub"] == str(test_admin.id)
        assert payload["type"] == "access"


class TestGetMe:
    """Tests for GET /api/v1/staff/me"""

    @pytest.mark.asyncio
    async def test_should_return_profile_with_capabilities(
        self, test_client: AsyncClient, test_trainer_token
    ):
        response = await test_client.get(
            "/api/v1/staff/me", cookies={"access_token": test_trainer_token}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "trainer"
        assert data["capabilities"] == [
            "apply_discounts",
            "view_dashboard",
            "view_my_schedule",
            "view_packages",
        ]


class TestManageStaff:
    @pytest.mark.asyncio
    async def test_admin_can_create_staff(self, test_client: AsyncClient, test_admin_token):
        response = await test_client.post(
            "/api/v1/staff",
            json={
                "email": "New.Coach@Gym.Example.com",
                "full_name": "New Coach",
                "role": "trainer",
            },
            cookies={"access_token": test_admin_token},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new.coach@gym.example.com"
        assert data["role"] == "trainer"
        assert data["is_active"] is True

    @pytest.mark.asyncio
    async def test_should_reject_duplicate_email(
        self, test_client: AsyncClient, test_admin_token, test_trainer
    ):
        response = await test_client.post(
            "/api/v1/staff",
            json={"email": test_trainer.email, "full_name": "Copy"},
            cookies={"access_token": test_admin_token},
        )

        assert_error_response(response, 409, "CONFLICT")

    @pytest.mark.asyncio
    async def test_should_filter_staff_by_role(
        self, test_client: AsyncClient, test_admin_token, test_trainer, test_staff
    ):
        response = await test_client.get(
            "/api/v1/staff",
            params={"role": "trainer"},
            cookies={"access_token": test_admin_token},
        )

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [str(test_trainer.id)]

    @pytest.mark.asyncio
    async def test_should_deactivate_staff(
        self, test_client: AsyncClient, db_session, test_admin_token
    ):
        trainer = create_staff_factory(db_session, role=StaffRole.TRAINER)

        response = await test_client.patch(
            f"/api/v1/staff/{trainer.id}",
            json={"is_active": False},
            cookies={"access_token": test_admin_token},
        )

        assert response.status_code == 200
        assert response.json()["is_active"] is False

    @pytest.mark.asyncio
    async def test_non_admin_cannot_manage_staff(
        self, test_client: AsyncClient, test_staff_token
    ):
        response = await test_client.get(
            "/api/v1/staff", cookies={"access_token": test_staff_token}
        )

        error = assert_error_response(response, 403, "FORBIDDEN")
        assert error["details"]["capability"] == "manage_staff"
