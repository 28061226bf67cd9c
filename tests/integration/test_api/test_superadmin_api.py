"""Integration tests for the super-administrator endpoints."""

from httpx import AsyncClient

from evote_api.lib.gateway import InMemoryGateway
from evote_api.models import Vote


class TestSuperadminSession:
    """Tests for login, verify and logout."""

    async def test_login_and_verify(self, client: AsyncClient, superadmin_headers) -> None:
        resp = await client.get("/api/superadmin/verify", headers=superadmin_headers)
        assert resp.status_code == 200

    async def test_admin_credentials_rejected(self, client: AsyncClient, settings) -> None:
        resp = await client.post(
            "/api/superadmin/login",
            json={"email": settings.admin_email, "password": settings.admin_password},
        )
        assert resp.status_code == 401

    async def test_admin_token_rejected(self, client: AsyncClient, admin_headers) -> None:
        resp = await client.get("/api/superadmin/verify", headers=admin_headers)
        assert resp.status_code == 401

    async def test_logout(self, client: AsyncClient, superadmin_headers) -> None:
        await client.post("/api/superadmin/logout", headers=superadmin_headers)
        resp = await client.get("/api/superadmin/verify", headers=superadmin_headers)
        assert resp.status_code == 401


class TestMigrationExport:
    """Tests for GET /superadmin/migration/export."""

    async def test_export(self, client: AsyncClient, gateway: InMemoryGateway, superadmin_headers) -> None:
        gateway.seed(votes=[Vote(id="a", voter_dni="12345678", category="presidencial", candidate_id="p1")])

        resp = await client.get("/api/superadmin/migration/export", headers=superadmin_headers)

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["votes"] == 1
        assert len(data["voters"]) == 2
        assert len(data["candidates"]) == 4
        assert "fullName" in data["voters"][0]
        assert "exportedAt" in data

    async def test_requires_superadmin(self, client: AsyncClient, admin_headers) -> None:
        resp = await client.get("/api/superadmin/migration/export", headers=admin_headers)
        assert resp.status_code == 401
