"""Tests for FastAPI endpoints -- calculation, lookups, admin dashboard, CORS, health."""

import pytest
from httpx import ASGITransport, AsyncClient

from leadgen.api.auth import AdminSessionManager, get_session_manager
from leadgen.api.dependencies import get_stores
from leadgen.config.settings import Settings, get_settings
from leadgen.main import app
from leadgen.models.roi_config import RoiConfig
from leadgen.storage import StoreError
from leadgen.storage.memory import InMemoryLeadStore

ADMIN_PASSWORD = "s3cret"


class _FailingLeadStore(InMemoryLeadStore):
    def stats(self, now=None):
        raise StoreError("leads.stats", RuntimeError("connection reset"))


@pytest.fixture
def overrides(stores):
    sessions = AdminSessionManager()
    app.dependency_overrides[get_stores] = lambda: stores
    app.dependency_overrides[get_settings] = lambda: Settings(admin_password=ADMIN_PASSWORD)
    app.dependency_overrides[get_session_manager] = lambda: sessions
    yield stores
    app.dependency_overrides.clear()


def _client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


async def _admin_headers(client: AsyncClient) -> dict:
    resp = await client.post("/api/admin/auth", json={"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


class TestPublicAPI:
    @pytest.mark.asyncio
    async def test_health(self, overrides):
        """GET /health returns ok."""
        async with _client() as client:
            resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_roi_defaults(self, overrides):
        """GET /api/roi-defaults returns the stored configuration."""
        async with _client() as client:
            resp = await client.get("/api/roi-defaults")
        body = resp.json()
        assert body["triage_time_per_doc"] == 5
        assert body["backfill_hourly_rate"] == 150.0

    @pytest.mark.asyncio
    async def test_calculate_uses_stored_defaults(self, overrides, lead_form):
        """A re-seeded analyst rate flows into the next calculation."""
        overrides.roi_defaults.set(RoiConfig(analyst_hourly_rate=100.0))
        async with _client() as client:
            resp = await client.post("/api/calculate", json=lead_form)
        results = resp.json()["results"]
        assert results["annual_recurring_savings"] == pytest.approx(200000.0, abs=0.01)
        assert results["backfill_cost_saved"] == pytest.approx(166666.67)

    @pytest.mark.asyncio
    async def test_strategic_benefits_fallback(self, overrides):
        """Built-in bullets are served when none are curated."""
        async with _client() as client:
            resp = await client.get("/api/strategic-benefits/new_investor_onboarding")
        assert "Faster capital deployment" in resp.json()["benefits"]

    @pytest.mark.asyncio
    async def test_calculate_returns_results_and_captures_lead(self, overrides, lead_form):
        """POST /api/calculate returns the public results and stores the lead."""
        async with _client() as client:
            resp = await client.post(
                "/api/calculate",
                json=lead_form,
                headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1", "User-Agent": "pytest"},
            )
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        results = body["results"]
        assert results["monthly_hours_saved"] == pytest.approx(166.67)
        assert results["annual_recurring_savings"] == pytest.approx(100000.0, abs=0.01)
        assert results["backfill_cost_saved"] == pytest.approx(83333.33)
        assert "monthly_documents" not in results

        lead = overrides.leads.get(1)
        assert lead["ip_address"] == "203.0.113.7"
        assert lead["user_agent"] == "pytest"

    @pytest.mark.asyncio
    async def test_calculate_requires_email(self, overrides, lead_form):
        """Missing email is rejected with 400."""
        del lead_form["email"]
        async with _client() as client:
            resp = await client.post("/api/calculate", json=lead_form)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Email is required"

    @pytest.mark.asyncio
    async def test_calculate_requires_use_case(self, overrides, lead_form):
        """Missing use case is rejected with 400."""
        lead_form["use_case"] = ""
        async with _client() as client:
            resp = await client.post("/api/calculate", json=lead_form)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Use case is required"

    @pytest.mark.asyncio
    async def test_cors_allows_localhost_3000(self, overrides):
        """OPTIONS request with Origin: http://localhost:3000 is allowed."""
        async with _client() as client:
            resp = await client.options(
                "/api/calculate",
                headers={
                    "Origin": "http://localhost:3000",
                    "Access-Control-Request-Method": "POST",
                },
            )
        assert resp.headers.get("access-control-allow-origin") == "http://localhost:3000"


class TestAdminAuth:
    @pytest.mark.asyncio
    async def test_admin_routes_require_token(self, overrides):
        """Admin endpoints answer 401 without a bearer token."""
        async with _client() as client:
            resp = await client.get("/api/admin/stats")
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_password_rejected(self, overrides):
        async with _client() as client:
            resp = await client.post("/api/admin/auth", json={"password": "guess"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_login_status_logout(self, overrides):
        """A session token is valid until logout."""
        async with _client() as client:
            headers = await _admin_headers(client)
            status = await client.get("/api/admin/auth/status", headers=headers)
            assert status.json() == {"isAuthenticated": True}

            await client.post("/api/admin/auth/logout", headers=headers)
            status = await client.get("/api/admin/auth/status", headers=headers)
            assert status.json() == {"isAuthenticated": False}
            resp = await client.get("/api/admin/stats", headers=headers)
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_login_disabled_without_configured_password(self, overrides):
        app.dependency_overrides[get_settings] = lambda: Settings(admin_password="")
        async with _client() as client:
            resp = await client.post("/api/admin/auth", json={"password": ""})
        assert resp.status_code == 401


class TestAdminLeads:
    @pytest.mark.asyncio
    async def test_stats_list_and_update(self, overrides, lead_form):
        """Captured leads appear in stats and the list, and can be updated."""
        async with _client() as client:
            await client.post("/api/calculate", json=lead_form)
            headers = await _admin_headers(client)

            stats = (await client.get("/api/admin/stats", headers=headers)).json()
            assert stats["total_leads"] == 1
            assert stats["by_use_case"] == {"critical_business_process": 1}

            listing = (
                await client.get(
                    "/api/admin/leads", params={"search": "acme", "page": "1"}, headers=headers
                )
            ).json()
            assert listing["total"] == 1
            assert listing["pages"] == 1
            lead_id = listing["leads"][0]["id"]

            resp = await client.put(
                f"/api/admin/leads/{lead_id}",
                json={"status": "contacted", "notes": "Intro call booked"},
                headers=headers,
            )
            assert resp.status_code == 200
            assert resp.json()["contacted_at"] is not None

            resp = await client.get(f"/api/admin/leads/{lead_id}", headers=headers)
            assert resp.json()["notes"] == "Intro call booked"

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, overrides, lead_form):
        async with _client() as client:
            await client.post("/api/calculate", json=lead_form)
            headers = await _admin_headers(client)
            resp = await client.put(
                "/api/admin/leads/1", json={"status": "archived"}, headers=headers
            )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_lead_is_404(self, overrides):
        async with _client() as client:
            headers = await _admin_headers(client)
            get_resp = await client.get("/api/admin/leads/999", headers=headers)
            delete_resp = await client.delete("/api/admin/leads/999", headers=headers)
        assert get_resp.status_code == 404
        assert delete_resp.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_lead(self, overrides, lead_form):
        async with _client() as client:
            await client.post("/api/calculate", json=lead_form)
            headers = await _admin_headers(client)
            resp = await client.delete("/api/admin/leads/1", headers=headers)
        assert resp.json() == {"success": True}
        assert overrides.leads.get(1) is None

    @pytest.mark.asyncio
    async def test_invalid_date_filter_is_400(self, overrides):
        async with _client() as client:
            headers = await _admin_headers(client)
            resp = await client.get(
                "/api/admin/leads", params={"from": "last tuesday"}, headers=headers
            )
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_export_csv(self, overrides, lead_form):
        """GET /api/admin/leads/export returns a CSV attachment."""
        async with _client() as client:
            await client.post("/api/calculate", json=lead_form)
            headers = await _admin_headers(client)
            resp = await client.get("/api/admin/leads/export", headers=headers)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert 'filename="leads-' in resp.headers["content-disposition"]
        lines = resp.text.splitlines()
        assert lines[0].startswith('"Email"')
        assert lines[1].startswith('"jane@acmewealth.com"')

    @pytest.mark.asyncio
    async def test_store_failure_is_500(self, overrides):
        """StoreError surfaces as 500 with an error message."""
        overrides.leads = _FailingLeadStore()
        async with _client() as client:
            headers = await _admin_headers(client)
            resp = await client.get("/api/admin/stats", headers=headers)
        assert resp.status_code == 500
        assert "leads.stats" in resp.json()["error"]


class TestAdminBenefits:
    @pytest.mark.asyncio
    async def test_curate_and_reorder(self, overrides):
        """Curated benefits replace the built-in copy and follow reorder."""
        async with _client() as client:
            headers = await _admin_headers(client)
            first = (
                await client.post(
                    "/api/admin/benefits",
                    json={"use_case": "prospects_onboarding", "benefit_text": "First"},
                    headers=headers,
                )
            ).json()
            second = (
                await client.post(
                    "/api/admin/benefits",
                    json={
                        "use_case": "prospects_onboarding",
                        "benefit_text": "Second",
                        "display_order": 1,
                    },
                    headers=headers,
                )
            ).json()

            resp = await client.get("/api/strategic-benefits/prospects_onboarding")
            assert resp.json()["benefits"] == ["First", "Second"]

            resp = await client.put(
                "/api/admin/benefits/reorder",
                json={
                    "use_case": "prospects_onboarding",
                    "ordered_ids": [second["id"], first["id"]],
                },
                headers=headers,
            )
            assert resp.status_code == 200

            resp = await client.get("/api/strategic-benefits/prospects_onboarding")
            assert resp.json()["benefits"] == ["Second", "First"]

            listing = (await client.get("/api/admin/benefits", headers=headers)).json()
            assert len(listing) == 2

    @pytest.mark.asyncio
    async def test_update_and_delete_benefit(self, overrides):
        async with _client() as client:
            headers = await _admin_headers(client)
            created = (
                await client.post(
                    "/api/admin/benefits",
                    json={"use_case": "m_and_a_transitions", "benefit_text": "Draft"},
                    headers=headers,
                )
            ).json()

            resp = await client.put(
                f"/api/admin/benefits/{created['id']}",
                json={"is_active": False},
                headers=headers,
            )
            assert resp.json()["is_active"] is False

            resp = await client.get("/api/strategic-benefits/m_and_a_transitions")
            assert "Draft" not in resp.json()["benefits"]

            resp = await client.delete(f"/api/admin/benefits/{created['id']}", headers=headers)
            assert resp.status_code == 200
            resp = await client.put(
                f"/api/admin/benefits/{created['id']}",
                json={"benefit_text": "Gone"},
                headers=headers,
            )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_use_case_rejected(self, overrides):
        async with _client() as client:
            headers = await _admin_headers(client)
            resp = await client.post(
                "/api/admin/benefits",
                json={"use_case": "bogus", "benefit_text": "x"},
                headers=headers,
            )
        assert resp.status_code == 422
