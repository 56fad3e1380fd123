"""API tests for the career routes."""

import pytest
from httpx import ASGITransport, AsyncClient

from talentscout.config import Settings
from talentscout.main import create_app


@pytest.fixture
async def client(settings: Settings):
    application = create_app(settings)
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _first_player(client: AsyncClient) -> str:
    resp = await client.get("/api/career")
    return sorted(resp.json()["data"]["players"])[0]


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestReads:
    async def test_career_snapshot(self, client: AsyncClient) -> None:
        resp = await client.get("/api/career")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["season"] == 1
        assert data["week"] == 1
        assert data["seed"] == 7

    async def test_unknown_player_readings_404(self, client: AsyncClient) -> None:
        resp = await client.get("/api/career/players/nobody/readings")
        assert resp.status_code == 404

    async def test_readings_empty_before_observation(self, client: AsyncClient) -> None:
        player_id = await _first_player(client)
        resp = await client.get(f"/api/career/players/{player_id}/readings")
        assert resp.status_code == 200
        assert resp.json()["data"]["readings"] == {}
        assert "true_attributes" not in resp.json()["data"]
        assert set(resp.json()["data"]["coverage"].values()) == {0}

    async def test_rivals_carry_threat_level(self, client: AsyncClient) -> None:
        resp = await client.get("/api/career/rivals")
        assert resp.status_code == 200
        rivals = resp.json()["data"]
        assert 3 <= len(rivals) <= 5
        assert {r["threat"] for r in rivals} <= {"low", "medium", "high"}


class TestCommands:
    async def test_plan_and_advance(self, client: AsyncClient) -> None:
        player_id = await _first_player(client)
        resp = await client.post(
            "/api/career/plan",
            json={"days": [{"type": "attend_match", "target_player_ids": [player_id]}]},
        )
        assert resp.status_code == 200
        assert resp.json()["version"] == 1

        resp = await client.post("/api/career/advance-day")
        assert resp.status_code == 200
        assert resp.json()["data"]["data"]["day_result"]["day"] == 1

        resp = await client.get(f"/api/career/players/{player_id}/readings")
        assert resp.json()["data"]["readings"]
        data = resp.json()["data"]
        assert sum(data["coverage"].values()) == len(data["readings"])

    async def test_rejection_returns_409(self, client: AsyncClient) -> None:
        resp = await client.post("/api/career/loans", json={"loan_type": "business", "amount": 0})
        assert resp.status_code == 409
        detail = resp.json()["detail"]
        assert detail["ok"] is False
        assert detail["reason"] == "invalid_amount"

        snapshot = await client.get("/api/career")
        assert snapshot.json()["data"]["version"] == 0

    async def test_fast_forward(self, client: AsyncClient) -> None:
        resp = await client.post("/api/career/fast-forward")
        assert resp.status_code == 200
        assert len(resp.json()["data"]["data"]["day_results"]) == 7
        snapshot = await client.get("/api/career")
        assert snapshot.json()["data"]["week"] == 2

    async def test_report_without_observations(self, client: AsyncClient) -> None:
        player_id = await _first_player(client)
        resp = await client.post(
            "/api/career/reports", json={"player_id": player_id, "conviction": "note"}
        )
        assert resp.status_code == 409
        assert resp.json()["detail"]["reason"] == "missing_observations"

    async def test_invalid_conviction_422(self, client: AsyncClient) -> None:
        player_id = await _first_player(client)
        resp = await client.post(
            "/api/career/reports", json={"player_id": player_id, "conviction": "shout"}
        )
        assert resp.status_code == 422

    async def test_shared_targets_empty(self, client: AsyncClient) -> None:
        resp = await client.get("/api/career/shared-targets")
        assert resp.status_code == 200
        assert resp.json()["data"] == []

    async def test_unknown_event(self, client: AsyncClient) -> None:
        resp = await client.post("/api/career/events/evt-1/choose", json={"choice_index": 0})
        assert resp.status_code == 409
        assert resp.json()["detail"]["reason"] == "not_found"
