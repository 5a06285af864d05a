"""
HTTP tests for authentication and per-route role checks.
"""

import pytest
from sqlalchemy import func, select

from petclinic.models import PetType

from .conftest import PetTypeFactory

pytestmark = pytest.mark.integration

OWNER_ADMIN = ("owneradmin", "secret")
VET_ADMIN = ("vetadmin", "secret")


class TestAuthentication:
    """Test cases for HTTP Basic authentication."""

    @pytest.mark.asyncio
    async def test_missing_credentials(self, secure_client):
        response = await secure_client.get("/api/pettypes")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == 'Basic realm="petclinic"'

    @pytest.mark.asyncio
    async def test_wrong_password(self, secure_client):
        response = await secure_client.get("/api/pettypes", auth=("vetadmin", "guess"))

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_user(self, secure_client):
        response = await secure_client.get("/api/pettypes", auth=("nobody", "secret"))

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_disabled_user(self, secure_client):
        response = await secure_client.get("/api/pettypes", auth=("disabled", "secret"))

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_health_needs_no_credentials(self, secure_client):
        assert (await secure_client.get("/health")).status_code == 200


class TestAuthorization:
    """Test cases for role checks on the pet type and specialty routes."""

    @pytest.mark.asyncio
    async def test_owner_admin_can_read_pet_types(self, secure_client):
        response = await secure_client.get("/api/pettypes", auth=OWNER_ADMIN)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_owner_admin_cannot_create_pet_types(
        self, secure_client, test_session_manager
    ):
        response = await secure_client.post(
            "/api/pettypes", json={"name": "cat"}, auth=OWNER_ADMIN
        )

        assert response.status_code == 403
        assert response.json()["error"]["details"] == {
            "required_roles": ["VET_ADMIN"],
            "caller": "owneradmin",
        }
        async with test_session_manager.get_session() as session:
            assert await session.scalar(select(func.count()).select_from(PetType)) == 0

    @pytest.mark.asyncio
    async def test_role_check_precedes_validation(self, secure_client):
        response = await secure_client.post(
            "/api/pettypes", json={"name": ""}, auth=OWNER_ADMIN
        )

        assert response.status_code == 403
        assert "errors" not in response.headers

    @pytest.mark.asyncio
    async def test_role_check_precedes_lookup(self, secure_client):
        response = await secure_client.delete("/api/pettypes/999", auth=OWNER_ADMIN)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_vet_admin_can_create_pet_types(self, secure_client):
        response = await secure_client.post(
            "/api/pettypes", json={"name": "cat"}, auth=VET_ADMIN
        )

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_vet_admin_can_read_pet_types(self, secure_client, test_session_manager):
        async with test_session_manager.get_transaction() as session:
            await PetTypeFactory.create(session, name="cat")

        response = await secure_client.get("/api/pettypes", auth=VET_ADMIN)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_owner_admin_cannot_read_specialties(self, secure_client):
        response = await secure_client.get("/api/specialties", auth=OWNER_ADMIN)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_vet_admin_cannot_manage_owners(self, secure_client):
        response = await secure_client.get("/api/owners", auth=VET_ADMIN)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_owner_admin_can_manage_owners(self, secure_client):
        response = await secure_client.post(
            "/api/owners",
            json={
                "firstName": "George",
                "lastName": "Franklin",
                "address": "110 W. Liberty St.",
                "city": "Madison",
                "telephone": "6085551023",
            },
            auth=OWNER_ADMIN,
        )

        assert response.status_code == 201
