"""Unit tests for the HTTP API, using FastAPI's TestClient with overridden dependencies."""

import random
from datetime import date

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from courtside.chat import CompletionClient
from courtside.db.models import Match, Player, Statistics, Tournament
from courtside.db.session import get_db
from courtside.services.refresh import RefreshPipeline
from courtside.web.main import app, get_completion_client, get_refresh_pipeline


@pytest.fixture
def completion_handler():
    """Mutable holder for the completion service's behaviour."""
    state = {"status": 200, "text": "Sinner is world No. 1."}

    def handler(request: httpx.Request) -> httpx.Response:
        if state["status"] != 200:
            return httpx.Response(state["status"], text="unavailable")
        return httpx.Response(
            200, json={"choices": [{"message": {"role": "assistant", "content": state["text"]}}]}
        )

    handler.state = state
    return handler


@pytest.fixture
def client(test_engine, session_factory, fetcher_factory, healthy_site, test_settings, completion_handler):
    Session = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_refresh_pipeline] = lambda: RefreshPipeline(
        session_factory=session_factory,
        fetcher_factory=fetcher_factory(healthy_site),
        config=test_settings,
        today=date(2025, 2, 12),
        rng=random.Random(1),
    )
    app.dependency_overrides[get_completion_client] = lambda: CompletionClient(
        api_key="test-key",
        api_url="https://llm.test/v1/chat/completions",
        model="gpt-4o-mini",
        transport=httpx.MockTransport(completion_handler),
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestFetchTennisData:
    @pytest.mark.parametrize("method", ["GET", "POST"])
    def test_returns_summary(self, client, method):
        response = client.request(method, "/fetch-tennis-data")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["players_scraped"] == 4
        assert body["tournaments_processed"] == 2
        assert body["message"] == "ATP tennis data updated successfully"

    def test_unexpected_error_is_500(self, client):
        class Exploding:
            async def run(self):
                raise RuntimeError("database unreachable")

        app.dependency_overrides[get_refresh_pipeline] = lambda: Exploding()

        response = client.post("/fetch-tennis-data")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "database unreachable",
            "message": "Failed to fetch ATP tennis data",
        }

    def test_cors_preflight(self, client):
        response = client.options(
            "/fetch-tennis-data",
            headers={
                "Origin": "https://dashboard.example",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers


class TestTennisChatbot:
    def test_requires_message(self, client):
        response = client.post("/tennis-chatbot", json={"message": "", "sessionId": "abc"})

        assert response.status_code == 400
        assert response.json() == {"error": "Message is required"}

    def test_reply_is_stored_in_history(self, client):
        response = client.post("/tennis-chatbot", json={"message": "Who is No. 1?", "sessionId": "abc"})

        assert response.status_code == 200
        assert response.json() == {"response": "Sinner is world No. 1."}

        history = client.get("/api/chat/abc/history").json()
        assert [m["role"] for m in history["messages"]] == ["user", "assistant"]

    def test_conversation_id_alias(self, client):
        client.post("/tennis-chatbot", json={"message": "Hi", "conversationId": "conv-1"})

        history = client.get("/api/chat/conv-1/history").json()
        assert len(history["messages"]) == 2

    def test_degraded_reply_is_still_200(self, client, completion_handler):
        completion_handler.state["status"] = 503

        response = client.post("/tennis-chatbot", json={"message": "Who is No. 1?", "sessionId": "abc"})

        assert response.status_code == 200
        assert "What would you like to know about tennis?" in response.json()["response"]
        assert client.get("/api/chat/abc/history").json()["messages"] == []


class TestDashboardReads:
    @pytest.fixture
    def seeded(self, session_factory):
        with session_factory() as session:
            sinner = Player(name="Jannik Sinner", country="ITA", ranking=1, points=11480)
            fritz = Player(name="Taylor Fritz", country="USA", ranking=4, points=5100)
            rotterdam = Tournament(name="Rotterdam", status="ongoing", start_date=date(2025, 2, 10))
            dubai = Tournament(name="Dubai", status="upcoming", start_date=date(2025, 2, 24))
            session.add_all([sinner, fritz, rotterdam, dubai])
            session.flush()
            session.add_all([
                Match(tournament_id=rotterdam.id, player1_id=sinner.id, player2_id=fritz.id,
                      round="Final", status="live", score="6-4"),
                Match(tournament_id=dubai.id, player1_id=sinner.id, player2_id=fritz.id,
                      round="Round 1", status="scheduled"),
                Statistics(active_players=2, live_tournaments=1, ranking_updates=2),
            ])

    def test_players_ordered_by_ranking(self, client, seeded):
        players = client.get("/api/players").json()["players"]
        assert [p["name"] for p in players] == ["Jannik Sinner", "Taylor Fritz"]

    def test_tournaments_status_filter(self, client, seeded):
        tournaments = client.get("/api/tournaments", params={"status": "ongoing"}).json()["tournaments"]
        assert [t["name"] for t in tournaments] == ["Rotterdam"]

    def test_live_matches(self, client, seeded):
        matches = client.get("/api/matches/live").json()["matches"]

        assert len(matches) == 1
        assert matches[0]["player1"] == "Jannik Sinner"
        assert matches[0]["tournament"] == "Rotterdam"

    def test_matches_status_filter_ignores_unknown(self, client, seeded):
        matches = client.get("/api/matches", params={"status": "scheduled,bogus"}).json()["matches"]
        assert [m["round"] for m in matches] == ["Round 1"]

    def test_statistics(self, client, seeded):
        stats = client.get("/api/statistics").json()["statistics"]
        assert stats["active_players"] == 2
        assert stats["matches_today"] is None

    def test_statistics_empty(self, client):
        assert client.get("/api/statistics").json() == {"statistics": None}
