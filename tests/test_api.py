"""
HTTP surface tests
"""

import pytest
from fastapi.testclient import TestClient

from concierge_ai.main import app


@pytest.fixture
def client(regex_only_global):
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["components"]["travel_types"] == 16


class TestTravelTypes:

    def test_list(self, client):
        response = client.get("/api/ai/travel-types")
        assert response.status_code == 200
        assert len(response.json()) == 16

    def test_get(self, client):
        response = client.get("/api/ai/travel-types/GDLF")
        assert response.status_code == 200
        assert response.json()["name"] == "The Glitch Hunter"

    def test_unknown_is_404(self, client):
        response = client.get("/api/ai/travel-types/gdlf")
        assert response.status_code == 404
        assert "Unknown travel type code" in response.json()["detail"]


class TestScoring:

    def test_forced_choice(self, client):
        response = client.post("/api/ai/quiz/score", json={"answers": [
            {"axis": "People", "value": "G", "questionIndex": 0},
            {"axis": "World", "value": "D", "questionIndex": 1},
            {"axis": "Decision", "value": "L", "questionIndex": 2},
            {"axis": "Time", "value": "F", "questionIndex": 3},
        ]})
        assert response.status_code == 200
        body = response.json()
        assert body["code"] == "GDLF"
        assert body["travel_type"]["name"] == "The Glitch Hunter"
        assert [a["letter"] for a in body["axes"]] == ["G", "D", "L", "F"]

    def test_bad_letter_is_rejected(self, client):
        response = client.post("/api/ai/quiz/score", json={"answers": [
            {"axis": "People", "value": "Q", "questionIndex": 0},
        ]})
        assert response.status_code == 422

    def test_scale(self, client):
        response = client.post("/api/ai/quiz/scale-score", json={"answers": {"sq1": 3, "sq2": None}})
        assert response.status_code == 200
        assert response.json()["code"] == "GDHF"


def test_intent(client):
    response = client.post("/api/ai/intent", json={"message": "find ramen near me"})
    assert response.status_code == 200
    assert response.json()["label"] == "specific"
    assert response.json()["method"] == "regex"


class TestContext:

    def test_builds_prompt(self, client):
        response = client.post("/api/ai/context", json={
            "message": "any ideas for tonight?",
            "sessionId": "s-1",
            "conversationHistory": [
                {"role": "user", "content": "hi"},
                {"role": "assistant", "content": "hello!"},
            ],
            "currentLocation": {"lat": 35.68, "lng": 139.76, "permission": True},
            "quizResults": {"travelType": {"travelTypeCode": "GDLF"}},
            "homeDurationPreference": "30-60",
        })
        assert response.status_code == 200
        body = response.json()

        assert body["session_id"] == "s-1"
        assert body["intent"]["label"] == "inspiration"
        assert body["conversation_length"] == 2
        assert [m["role"] for m in body["prompt_messages"]] == ["system", "user", "assistant", "user"]
        assert body["prompt_messages"][-1]["content"] == "any ideas for tonight?"
        assert "CONTEXT_JSON:" in body["prompt_messages"][0]["content"]

    def test_message_is_required(self, client):
        assert client.post("/api/ai/context", json={}).status_code == 422
