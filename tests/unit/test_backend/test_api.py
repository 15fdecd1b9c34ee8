"""
Unit tests for the FastAPI backend.
Runs the app against an isolated Coordinator and SQLite store.
"""

import pytest
from pathlib import Path
from unittest.mock import patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from fastapi.testclient import TestClient

from backend.dependencies import get_classifier, get_coordinator
from backend.main import app
from mitra.agents import Coordinator, KeywordIntentClassifier
from mitra.core.config import Config
from mitra.core.database import SQLiteDocumentStore
from mitra.core.errors import StorageError
from mitra.core.models import AgentKind


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def coordinator(tmp_path):
    """Coordinator over a temporary store."""
    store = SQLiteDocumentStore.initialize(tmp_path / "test.db")
    coord = Coordinator(store, Config(tmp_path / "config"))
    yield coord
    coord.cleanup()


@pytest.fixture
def client(coordinator):
    """Test client with the coordinator injected."""
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    app.dependency_overrides[get_classifier] = KeywordIntentClassifier
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Root / health / activity
# =============================================================================

class TestRoot:

    def test_root_lists_agents(self, client):
        data = client.get("/").json()
        assert data["name"] == "Mitra API"
        assert len(data["agents"]) == 6
        assert data["endpoints"]["optimize"] == "POST /optimize-schedule"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy", "database": "connected"}

    def test_health_reports_store_failure(self, client, coordinator):
        with patch.object(coordinator.store, "ping", side_effect=StorageError("locked")):
            data = client.get("/health").json()
        assert data == {"status": "unhealthy", "error": "locked"}


class TestActivity:

    def test_empty(self, client):
        assert client.get("/activity").json() == {"activity": [], "count": 0}

    def test_lists_routed_events(self, client):
        client.post("/chat", json={"message": "Spent $12 on lunch"})
        client.post("/chat", json={"message": "hello there"})
        data = client.get("/activity").json()
        assert data["count"] == 1
        assert data["activity"][0]["agent"] == "Finance Agent"

    def test_limit(self, client):
        for habit in ["a", "b", "c"]:
            client.post("/chat", json={"intent": "add_habit", "arguments": {"habit": habit}})
        data = client.get("/activity", params={"limit": 2}).json()
        assert [e["response"]["data"]["habit"] for e in data["activity"]] == ["b", "c"]

    def test_limit_validated(self, client):
        assert client.get("/activity", params={"limit": 0}).status_code == 422


# =============================================================================
# Chat
# =============================================================================

class TestChat:
    """Tests for POST /chat."""

    def test_free_text_routes(self, client):
        response = client.post("/chat", json={"message": "Did bench press 3x8 at 80kg"})
        assert response.status_code == 200
        data = response.json()
        assert data["agentResponse"]["agent"] == "Fitness Agent"
        assert data["agentResponse"]["action"] == "logged_workout"
        assert data["reply"] == "Logged your bench press workout."
        assert "schedule" not in data

    def test_explicit_intent(self, client):
        response = client.post("/chat", json={
            "intent": "add_medication",
            "arguments": {"medicine": "Metformin", "time": "evening"},
        })
        data = response.json()
        assert data["agentResponse"]["scheduledTime"] == "18:00"
        assert data["reply"] == "Scheduled Metformin at 18:00 every day."

    def test_unrecognized_message(self, client, coordinator):
        data = client.post("/chat", json={"message": "hello there"}).json()
        assert set(data) == {"reply"}
        assert coordinator.activity_log == []

    def test_unknown_explicit_intent_is_noop(self, client):
        data = client.post("/chat", json={"intent": "book_flight", "arguments": {}}).json()
        assert data["agentResponse"] == {"agent": "unknown", "action": "none"}

    def test_plan_my_day_returns_schedule(self, client):
        data = client.post("/chat", json={"message": "Plan my day"}).json()
        assert "agentResponse" not in data
        assert [i["time"] for i in data["schedule"]["schedule"]] == ["07:00", "12:00", "21:00"]

    def test_bad_arguments_400(self, client):
        response = client.post("/chat", json={
            "intent": "log_finance", "arguments": {"item": "Tea", "amount": "lots"},
        })
        assert response.status_code == 400
        assert "amount" in response.json()["detail"]

    def test_fetch_failure_500(self, client, coordinator):
        task_agent = coordinator.get_agent(AgentKind.TASK)
        with patch.object(task_agent, "pending_tasks", side_effect=StorageError("disk gone")):
            response = client.post("/chat", json={"message": "Plan my day"})
        assert response.status_code == 500


# =============================================================================
# Schedule
# =============================================================================

class TestGetSchedule:

    def test_generated_schedule(self, client):
        client.post("/chat", json={"intent": "add_task", "arguments": {"task": "Finish report", "priority": "high"}})
        data = client.get("/schedule", params={"date": "2025-03-01"}).json()
        assert data["date"] == "2025-03-01"
        assert data["totalActivities"] == len(data["schedule"])
        task = next(i for i in data["schedule"] if i["type"] == "task")
        assert task["time"] == "09:00"
        assert task["duration"] == 120
        assert 0 <= data["balanceScore"] <= 100

    def test_alternative_times_only_on_workout(self, client):
        items = client.get("/schedule").json()["schedule"]
        with_alternatives = [i for i in items if "alternativeTimes" in i]
        assert [i["type"] for i in with_alternatives] == ["fitness"]

    def test_bad_date_400(self, client):
        assert client.get("/schedule", params={"date": "tomorrow-ish"}).status_code == 400


class TestOptimizeSchedule:
    """Tests for POST /optimize-schedule."""

    def test_medication_conflict(self, client):
        client.post("/chat", json={"intent": "add_medication", "arguments": {"medicine": "Vitamin D", "time": "morning"}})
        data = client.post("/optimize-schedule", json={
            "userSchedule": [{"time": "08:00", "activity": "Standup", "duration": 30, "type": "user"}],
        }).json()
        assert data["totalActivities"] == 1
        assert data["userActivities"] == 1
        assert "conflicts with" in data["suggestions"][0]

    def test_medication_added(self, client):
        client.post("/chat", json={"intent": "add_medication", "arguments": {"medicine": "Vitamin D", "time": "afternoon"}})
        data = client.post("/optimize-schedule", json={
            "userSchedule": [{"time": "08:00", "activity": "Standup", "duration": 30, "type": "user"}],
        }).json()
        assert len(data["schedule"]) == 2
        assert data["schedule"][1]["time"] == "14:00"
        assert data["schedule"][1]["addedByAI"] is True
        assert data["aiSuggestions"] == 1

    def test_empty_schedule_gets_task(self, client):
        client.post("/chat", json={"intent": "add_task", "arguments": {"task": "Finish report", "priority": "high"}})
        data = client.post("/optimize-schedule", json={"userSchedule": []}).json()
        assert data["schedule"][0]["time"] == "09:00"
        assert data["schedule"][0]["duration"] == 120

    @pytest.mark.parametrize("body", [{}, {"userSchedule": None}, {"userSchedule": "08:00 standup"}])
    def test_missing_schedule_400(self, client, body):
        response = client.post("/optimize-schedule", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid user schedule provided"

    def test_malformed_item_400(self, client):
        response = client.post("/optimize-schedule", json={"userSchedule": [{"time": "8am", "activity": "x"}]})
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid user schedule provided:")

    def test_user_medication_pinned(self, client):
        data = client.post("/optimize-schedule", json={
            "userSchedule": [{"time": "08:00", "activity": "Vitamins", "duration": 5,
                              "type": "medication", "flexible": True, "priority": 2}],
        }).json()
        vitamins = data["schedule"][0]
        assert vitamins["type"] == "medication"
        assert vitamins["priority"] == 10
        assert vitamins["flexible"] is False

    @pytest.mark.parametrize("item", [
        {"time": "08:00", "activity": "x", "alternativeTimes": 5},
        {"time": "08:00", "activity": "x", "alternativeTimes": "07:00"},
        {"time": "08:00", "activity": "x", "flexible": "false"},
    ])
    def test_malformed_fields_400(self, client, item):
        response = client.post("/optimize-schedule", json={"userSchedule": [item]})
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid user schedule provided:")


# =============================================================================
# Records
# =============================================================================

class TestRecords:

    def test_tasks(self, client):
        client.post("/chat", json={"message": "Remind me to call the plumber"})
        tasks = client.get("/tasks").json()["tasks"]
        assert tasks[0]["task"] == "call the plumber"
        assert tasks[0]["completed"] is False

    def test_workouts(self, client):
        client.post("/chat", json={"intent": "log_workout", "arguments": {"exercise": "squat"}})
        assert client.get("/workouts").json()["workouts"][0]["exercise"] == "squat"

    def test_journal(self, client):
        client.post("/chat", json={"message": "Dear diary, today was calm"})
        assert len(client.get("/journal").json()["entries"]) == 1

    def test_delete_finance(self, client):
        data = client.post("/chat", json={"message": "Spent $12 on lunch"}).json()
        entry_id = data["agentResponse"]["data"]["id"]

        response = client.delete(f"/finance/{entry_id}")
        assert response.json() == {"success": True, "message": "Finance entry deleted", "id": entry_id}
        assert client.get("/finance").json()["entries"] == []

    def test_delete_missing_finance_404(self, client):
        assert client.delete("/finance/999").status_code == 404


# =============================================================================
# Serverless entry point
# =============================================================================

class TestServerlessHandler:

    def test_handler_wraps_app(self):
        from api.index import handler
        assert handler.app is app
