"""
Unit tests for the Fitness, Finance, Journal, Healthcare and Lifestyle agents.
Tests argument parsing, stored records, scheduling hints and requirements.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from mitra.agents import (
    FinanceAgent,
    FitnessAgent,
    Flexibility,
    HealthcareAgent,
    JournalAgent,
    LifestyleAgent,
)
from mitra.agents.base_agent import AgentResponse, BaseAgent
from mitra.core.database import SQLiteDocumentStore
from mitra.core.errors import InvalidArgumentError


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def temp_store(tmp_path):
    """Create a temporary document store."""
    return SQLiteDocumentStore.initialize(tmp_path / "test.db")


@pytest.fixture
def fitness_agent(temp_store):
    return FitnessAgent(temp_store)


@pytest.fixture
def finance_agent(temp_store):
    return FinanceAgent(temp_store)


@pytest.fixture
def journal_agent(temp_store):
    return JournalAgent(temp_store)


@pytest.fixture
def healthcare_agent(temp_store):
    return HealthcareAgent(temp_store)


@pytest.fixture
def lifestyle_agent(temp_store):
    return LifestyleAgent(temp_store)


# =============================================================================
# Shared parsing helpers
# =============================================================================

class TestNumericParsing:
    """Tests for BaseAgent.parse_int / parse_float."""

    def test_parse_int_absent_uses_default(self):
        assert BaseAgent.parse_int(None, "sets") == 0
        assert BaseAgent.parse_int("  ", "sets") == 0

    def test_parse_int_valid(self):
        assert BaseAgent.parse_int(" 5 ", "sets") == 5
        assert BaseAgent.parse_int(3, "sets") == 3

    def test_parse_int_invalid(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            BaseAgent.parse_int("five", "sets")
        assert exc_info.value.field == "sets"

    def test_parse_float_currency(self):
        assert BaseAgent.parse_float("$1,250.50", "amount") == 1250.5
        assert BaseAgent.parse_float("₹300", "amount") == 300.0

    def test_parse_float_absent_is_none(self):
        assert BaseAgent.parse_float(None, "weight") is None

    def test_parse_float_invalid(self):
        with pytest.raises(InvalidArgumentError):
            BaseAgent.parse_float("a lot", "amount")

    def test_booleans_rejected(self):
        with pytest.raises(InvalidArgumentError):
            BaseAgent.parse_int(True, "reps")


# =============================================================================
# Fitness
# =============================================================================

class TestFitnessAgent:
    """Tests for workout logging."""

    def test_log_workout(self, fitness_agent, temp_store):
        response = fitness_agent.process({
            "exercise": "squat", "sets": "5", "reps": "5", "weight": "100", "is_pr": "TRUE",
        })

        assert response.action == "logged_workout"
        assert response.category == "fitness"
        assert response.time_required == 30
        assert response.priority == 8
        assert response.flexibility == Flexibility.HIGH
        assert response.preferred_time == "morning"

        record = temp_store.get("gym_logs", response.payload["id"])
        assert record["sets"] == 5
        assert record["reps"] == 5
        assert record["weight"] == 100.0
        assert record["is_pr"] is True

    def test_optional_numbers_default(self, fitness_agent):
        payload = fitness_agent.process({"exercise": "plank"}).payload
        assert payload["sets"] == 0
        assert payload["reps"] == 0
        assert payload["weight"] is None
        assert payload["is_pr"] is False

    def test_bad_reps_rejected(self, fitness_agent, temp_store):
        with pytest.raises(InvalidArgumentError):
            fitness_agent.process({"exercise": "squat", "reps": "many"})
        assert temp_store.count("gym_logs") == 0

    def test_requirements(self, fitness_agent):
        fitness_agent.process({"exercise": "run"})
        req = fitness_agent.get_requirements()
        assert req.duration == 45
        assert req.recommended_frequency == 5
        assert req.preferred_times == ["06:00-08:00", "17:00-19:00"]
        assert req.details["recentWorkouts"] == 1

    def test_recent_workouts_limited(self, fitness_agent):
        for i in range(9):
            fitness_agent.process({"exercise": f"set {i}"})
        assert len(fitness_agent.recent_workouts()) == 7


# =============================================================================
# Finance
# =============================================================================

class TestFinanceAgent:
    """Tests for transaction logging."""

    def test_small_expense(self, finance_agent):
        response = finance_agent.process({"item": "Coffee", "amount": "4.50"})
        assert response.action == "logged_transaction"
        assert response.priority == 6
        assert response.time_required == 5
        assert response.payload["type"] == "expense"
        assert response.payload["category"] == "General"

    def test_large_expense_priority(self, finance_agent):
        assert finance_agent.process({"item": "Laptop", "amount": "1500"}).priority == 8

    def test_large_income_keeps_base_priority(self, finance_agent):
        response = finance_agent.process({"item": "Salary", "amount": "5000", "type": "income"})
        assert response.priority == 6

    def test_threshold_from_preferences(self, temp_store, tmp_path):
        from mitra.core.config import Config
        config = Config(tmp_path / "config")
        config.set("large_expense_threshold", 100, section="preferences")
        agent = FinanceAgent(temp_store, config)
        assert agent.process({"item": "Shoes", "amount": "150"}).priority == 8

    def test_amount_required(self, finance_agent):
        with pytest.raises(InvalidArgumentError):
            finance_agent.process({"item": "Coffee"})

    def test_bad_amount_rejected(self, finance_agent):
        with pytest.raises(InvalidArgumentError) as exc_info:
            finance_agent.process({"item": "Coffee", "amount": "four"})
        assert exc_info.value.field == "amount"

    def test_requirements(self, finance_agent):
        req = finance_agent.get_requirements()
        assert req.details["recommendedActivity"] == "Weekly budget review"
        assert req.duration == 30


# =============================================================================
# Journal
# =============================================================================

class TestJournalAgent:
    """Tests for journal entries."""

    def test_write_journal(self, journal_agent, temp_store):
        response = journal_agent.process({"content": "Long day.", "mood": "Tired"})
        assert response.action == "wrote_journal"
        assert response.category == "wellness"
        assert response.time_required == 15
        assert response.preferred_time == "evening"
        record = temp_store.get("journal", response.payload["id"])
        assert record["mood"] == "tired"
        assert record["title"] == ""

    def test_mood_defaults_to_neutral(self, journal_agent):
        assert journal_agent.process({"content": "ok"}).payload["mood"] == "neutral"

    def test_content_required(self, journal_agent):
        with pytest.raises(InvalidArgumentError):
            journal_agent.process({"title": "Empty"})

    def test_requirements(self, journal_agent):
        req = journal_agent.get_requirements()
        assert req.duration == 15
        assert req.preferred_times == ["20:00-22:00"]


# =============================================================================
# Healthcare
# =============================================================================

class TestHealthcareAgent:
    """Tests for medication scheduling."""

    @pytest.mark.parametrize("time_of_day,clock", [
        ("morning", "08:00"),
        ("Afternoon", "14:00"),
        ("evening", "18:00"),
        ("night", "22:00"),
        ("whenever", "08:00"),
        ("", "08:00"),
    ])
    def test_time_to_clock(self, time_of_day, clock):
        assert HealthcareAgent.time_to_clock(time_of_day) == clock

    def test_add_medication(self, healthcare_agent):
        response = healthcare_agent.process({"medicine": "Metformin", "time": "evening", "dose": "500mg"})
        assert response.action == "scheduled_medication"
        assert response.category == "health"
        assert response.priority == 10
        assert response.flexibility == Flexibility.NONE
        assert response.scheduled_time == "18:00"
        assert response.to_dict()["scheduledTime"] == "18:00"

    def test_time_required(self, healthcare_agent):
        with pytest.raises(InvalidArgumentError):
            healthcare_agent.process({"medicine": "Metformin"})

    def test_medication_doses(self, healthcare_agent):
        healthcare_agent.process({"medicine": "A", "time": "night"})
        healthcare_agent.process({"medicine": "B", "time": "morning"})
        doses = healthcare_agent.medication_doses()
        assert [(d.medicine, d.time) for d in doses] == [("A", "22:00"), ("B", "08:00")]

    def test_requirements(self, healthcare_agent):
        healthcare_agent.process({"medicine": "A", "time": "night"})
        req = healthcare_agent.get_requirements()
        assert req.details["medicationCount"] == 1
        assert req.details["criticalTimes"] == ["08:00", "14:00", "18:00", "22:00"]


# =============================================================================
# Lifestyle
# =============================================================================

class TestLifestyleAgent:
    """Tests for habit tracking."""

    def test_add_habit(self, lifestyle_agent):
        response = lifestyle_agent.process({"habit": "Drink water"})
        assert response.action == "added_habit"
        assert response.priority == 6
        assert response.time_required == 10

    def test_recent_habits_newest_first(self, lifestyle_agent, temp_store):
        temp_store.add("lifestyle", {"habit": "Old", "timestamp": "2025-01-01T00:00:00+00:00"})
        temp_store.add("lifestyle", {"habit": "New", "timestamp": "2025-03-01T00:00:00+00:00"})
        assert [h["habit"] for h in lifestyle_agent.recent_habits()] == ["New", "Old"]

    def test_requirements_list_habits(self, lifestyle_agent):
        lifestyle_agent.process({"habit": "Stretch"})
        assert lifestyle_agent.get_requirements().details["recentHabits"] == ["Stretch"]


# =============================================================================
# Response serialization
# =============================================================================

class TestAgentResponse:
    """Tests for AgentResponse.to_dict."""

    def test_unknown_is_minimal(self):
        assert AgentResponse.unknown().to_dict() == {"agent": "unknown", "action": "none"}

    def test_optional_keys_omitted(self):
        data = AgentResponse(agent="Finance Agent", action="logged_transaction",
                             category="finance", time_required=5, priority=6).to_dict()
        assert "flexibility" not in data
        assert "scheduledTime" not in data
        assert data["data"] == {}
