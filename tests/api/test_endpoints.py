"""
API tests through the ASGI app with the database dependency overridden.
"""

import logging

import httpx
import pytest
import pytest_asyncio

from sat_portal.core.database import get_db
from sat_portal.main import app, log_identity_event
from sat_portal.modules.auth.provider import IdentityEvent, issue_tokens


@pytest_asyncio.fixture
async def client(db):
    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.state.identity_listeners = []
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def _auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_tokens(user).access_token}"}


class TestEndpoints:
    """Routing, authentication and error responses."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client):
        response = await client.get("/api/v1/lecturers")

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "NOT_AUTHENTICATED"

    @pytest.mark.asyncio
    async def test_student_cannot_add_lecturer(self, client, student):
        response = await client.post(
            "/api/v1/lecturers", json={"name": "Budi", "nip": "1"}, headers=_auth(student)
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_lecturer_directory(self, client, lecturer_user, student):
        created = await client.post(
            "/api/v1/lecturers", json={"name": "Budi", "nip": "1"}, headers=_auth(lecturer_user)
        )
        listed = await client.get("/api/v1/lecturers", headers=_auth(student))

        assert created.status_code == 201
        assert [item["name"] for item in listed.json()["items"]] == ["Budi"]

    @pytest.mark.asyncio
    async def test_validation_error_format(self, client, lecturer_user):
        response = await client.post(
            "/api/v1/lecturers", json={"name": "", "nip": ""}, headers=_auth(lecturer_user)
        )

        assert response.status_code == 400
        assert response.json()["detail"] == {
            "error": "VALIDATION_ERROR",
            "message": "Nama dan NIP wajib.",
        }

    @pytest.mark.asyncio
    async def test_register_and_me(self, client):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "ani@student.example.ac.id",
                "password": "rahasia123",
                "full_name": "Ani",
            },
        )
        assert response.status_code == 201
        token = response.json()["access_token"]

        me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert me.status_code == 200
        assert me.json()["email"] == "ani@student.example.ac.id"


class TestIdentityAuditLog:
    """Tests for the sign-in / sign-out audit listener."""

    def test_logs_signed_in_user(self, caplog, student):
        with caplog.at_level(logging.INFO, logger="sat_portal.audit"):
            log_identity_event(IdentityEvent.SIGNED_IN, student)

        assert caplog.messages == [f"SIGNED_IN: {student.id} (STUDENT)"]

    def test_logs_anonymous_sign_out(self, caplog):
        with caplog.at_level(logging.INFO, logger="sat_portal.audit"):
            log_identity_event(IdentityEvent.SIGNED_OUT, None)

        assert caplog.messages == ["SIGNED_OUT: anonymous session"]
