"""
Integration tests for the Mythic Journey REST API.

Tests the full HTTP request/response cycle using httpx AsyncClient
against the actual FastAPI application, backed by an in-memory journey.

Covers:
- Health endpoints (root + versioned)
- Journey snapshot and entry listing
- Entry creation, unlock syncing and validation errors
- Realm, spirit, legend and milestone endpoints
- Metrics endpoint
- Error envelope format and translations
- CORS headers
"""

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from src.api import create_app
from src.config.settings import Settings
from src.journey.facade import ProgressionFacade
from src.journey.storage import InMemoryStorage, JsonFileStorage
from src.journey.store import JourneyStore
from src.lib.errors import STORAGE_UNAVAILABLE, get_error_message
from src.lib.exceptions import StorageUnavailable

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path, cors_origins=("http://localhost:3000",))


@pytest.fixture()
def app(settings: Settings, facade: ProgressionFacade):
    """Create a fresh FastAPI application for each test."""
    return create_app(settings, facade=facade)


@pytest.fixture()
async def client(app):
    """Async HTTP client wired to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


async def _write(client: AsyncClient, content: str, **fields) -> dict:
    resp = await client.post("/api/v1/journey/entries", json={"content": content, **fields})
    assert resp.status_code == 201
    return resp.json()["data"]


# ============================================================================
# 1. Health Endpoints
# ============================================================================


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_root_health_returns_200(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    @pytest.mark.asyncio
    async def test_versioned_health_returns_envelope(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["status"] == "ok"
        assert body["error"] is None
        assert "timestamp" in body["meta"]


# ============================================================================
# 2. Journey Reads
# ============================================================================


class TestJourneyReads:
    """Tests for snapshot and entry listing."""

    @pytest.mark.asyncio
    async def test_fresh_snapshot(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/journey")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["totalEntries"] == 0
        assert data["treeGrowth"] == 0.0
        assert data["treeStage"] == "seedling"
        assert data["dominantTheme"] == "balance"
        assert data["activeRealm"] == "midgard"
        assert data["season"] == "spring"

    @pytest.mark.asyncio
    async def test_list_entries_with_limit(self, client: AsyncClient) -> None:
        for text in ["first", "second", "third"]:
            await _write(client, text)

        resp = await client.get("/api/v1/journey/entries", params={"limit": 2})
        data = resp.json()["data"]
        assert data["total"] == 3
        assert [entry["content"] for entry in data["entries"]] == ["second", "third"]

    @pytest.mark.asyncio
    async def test_list_all_entries(self, client: AsyncClient) -> None:
        await _write(client, "only one")
        data = (await client.get("/api/v1/journey/entries")).json()["data"]
        assert len(data["entries"]) == 1

    @pytest.mark.asyncio
    async def test_invalid_limit(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/journey/entries", params={"limit": 0})
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


# ============================================================================
# 3. Entry Creation
# ============================================================================


class TestAddEntry:
    """Tests for POST /journey/entries."""

    @pytest.mark.asyncio
    async def test_first_entry_unlocks(self, client: AsyncClient) -> None:
        data = await _write(client, "I found wisdom today", title="Dawn", emotion="wonder")
        assert data["entry"]["title"] == "Dawn"
        assert data["entry"]["rune"] == "ᚨ"
        assert data["entry"]["themes"]["wisdom"] == 1
        assert data["unlocked"] == {"legends": ["beginning"], "milestones": ["first-dawn"]}
        assert data["totalEntries"] == 1
        assert data["spiritEnergy"] == 10
        assert data["durable"] is True

    @pytest.mark.asyncio
    async def test_blank_content_rejected(self, client: AsyncClient, facade: ProgressionFacade) -> None:
        resp = await client.post("/api/v1/journey/entries", json={"content": "   "})
        assert resp.status_code == 422
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "INVALID_ENTRY"
        assert facade.state.total_entries == 0

    @pytest.mark.asyncio
    async def test_missing_content(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/journey/entries", json={"title": "no body"})
        assert resp.status_code == 422
        error = resp.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "body.content" in error["details"]["fields"]

    @pytest.mark.asyncio
    async def test_error_message_translated(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/journey/entries",
            json={"content": ""},
            headers={"Accept-Language": "de-DE,de;q=0.9"},
        )
        assert resp.json()["error"]["message"].startswith("Eine Erinnerung")


# ============================================================================
# 4. Realms, Spirits, Legends, Milestones
# ============================================================================


class TestProgressionWrites:
    """Tests for the remaining mutation endpoints."""

    @pytest.mark.asyncio
    async def test_change_realm(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/journey/realm", json={"realm": "sky"})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["activeRealm"] == "sky"
        assert data["unlockedRealms"] == ["midgard", "sky"]

        entry = await _write(client, "Clouds")
        assert entry["entry"]["realm"] == "sky"

    @pytest.mark.asyncio
    async def test_unknown_realm(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/journey/realm", json={"realm": "asgard"})
        assert resp.status_code == 422
        body = resp.json()
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert "asgard" in body["error"]["message"]

    @pytest.mark.asyncio
    async def test_bond_spirit_idempotent(self, client: AsyncClient) -> None:
        spirit = {"id": "raven", "name": "Huginn", "type": "messenger", "color": "black"}
        first = (await client.post("/api/v1/journey/spirits", json=spirit)).json()["data"]
        second = (await client.post("/api/v1/journey/spirits", json=spirit)).json()["data"]
        assert first["bonded"] is True
        assert second["bonded"] is False
        assert second["spiritEnergy"] == 25

        snapshot = (await client.get("/api/v1/journey")).json()["data"]
        assert snapshot["bondedSpirits"][0]["attributes"] == {"color": "black"}

    @pytest.mark.asyncio
    async def test_unlock_legend(self, client: AsyncClient) -> None:
        first = await client.post("/api/v1/journey/legends", json={"id": "wisdom-path"})
        second = await client.post("/api/v1/journey/legends", json={"id": "wisdom-path"})
        assert first.json()["data"]["unlocked"] is True
        assert second.json()["data"] == {
            "unlocked": False,
            "unlockedLegends": ["wisdom-path"],
            "durable": True,
        }

    @pytest.mark.asyncio
    async def test_achieve_milestone(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/journey/milestones", json={"name": "Solstice"})
        data = resp.json()["data"]
        assert data["achieved"] is True
        assert data["achievedMilestones"][0]["id"] == "Solstice"

    @pytest.mark.asyncio
    async def test_milestone_without_id_or_name(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/journey/milestones", json={})
        assert resp.status_code == 422


# ============================================================================
# 5. Storage failures
# ============================================================================


class ReadOnlyStorage(InMemoryStorage):
    """In-memory storage that refuses writes while ``blocked`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.blocked = True

    def save(self, document: dict) -> None:
        if self.blocked:
            raise StorageUnavailable("disk full")
        super().save(document)


class TestStorageFailures:
    """Unsaved changes are reported on every journey response."""

    @pytest.fixture()
    def read_only(self) -> ReadOnlyStorage:
        return ReadOnlyStorage()

    @pytest.fixture()
    async def failing_client(self, settings: Settings, read_only: ReadOnlyStorage, clock, ids):
        store = JourneyStore.open(read_only, clock=clock, id_factory=ids)
        app = create_app(settings, facade=ProgressionFacade(store))
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac

    @pytest.mark.asyncio
    async def test_realm_change_reports_unsaved(self, failing_client: AsyncClient) -> None:
        resp = await failing_client.post(
            "/api/v1/journey/realm",
            json={"realm": "sky"},
            headers={"Accept-Language": "de"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["activeRealm"] == "sky"
        assert body["data"]["durable"] is False
        assert body["meta"]["warnings"] == [{
            "code": STORAGE_UNAVAILABLE,
            "message": get_error_message(STORAGE_UNAVAILABLE, "de"),
        }]

    @pytest.mark.asyncio
    async def test_snapshot_reports_unsaved(self, failing_client: AsyncClient) -> None:
        body = (await failing_client.get("/api/v1/journey")).json()
        assert body["data"]["durable"] is False
        assert body["meta"]["warnings"][0]["code"] == STORAGE_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_warning_clears_after_successful_write(
        self, failing_client: AsyncClient, read_only: ReadOnlyStorage
    ) -> None:
        await failing_client.post("/api/v1/journey/legends", json={"id": "beginning"})
        read_only.blocked = False
        body = (await failing_client.post("/api/v1/journey/spirits", json={"id": "fox"})).json()
        assert body["data"]["durable"] is True
        assert "warnings" not in body["meta"]
        assert read_only.load()["unlockedLegends"] == ["beginning"]


# ============================================================================
# 6. Metrics
# ============================================================================


class TestMetrics:
    """Tests for GET /journey/metrics."""

    @pytest.mark.asyncio
    async def test_empty_metrics(self, client: AsyncClient) -> None:
        data = (await client.get("/api/v1/journey/metrics")).json()["data"]
        assert data["totalEntries"] == 0
        assert data["mostActiveDay"] is None

    @pytest.mark.asyncio
    async def test_metrics_after_writing(self, client: AsyncClient) -> None:
        await _write(client, "river stone river", emotion="joy")
        data = (await client.get("/api/v1/journey/metrics")).json()["data"]
        assert data["totalWords"] == 3
        assert data["moodDistribution"] == {"joy": 1}
        assert data["topWords"]["river"] == 2
        assert data["mostActiveDay"] == "Monday"


# ============================================================================
# 7. CORS and app wiring
# ============================================================================


class TestAppWiring:
    """Tests for middleware and default construction."""

    @pytest.mark.asyncio
    async def test_cors_allowed_origin(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/health", headers={"Origin": "http://localhost:3000"})
        assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"

    @pytest.mark.asyncio
    async def test_cors_unknown_origin(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/health", headers={"Origin": "http://evil.example"})
        assert "access-control-allow-origin" not in resp.headers

    @pytest.mark.asyncio
    async def test_default_facade_uses_file_storage(self, tmp_path: Path) -> None:
        app = create_app(Settings(data_dir=tmp_path, storage_key="api_journey"))
        assert isinstance(app.state.facade.store.storage, JsonFileStorage)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            await ac.post("/api/v1/journey/entries", json={"content": "persisted"})

        assert (tmp_path / "api_journey.json").exists()
