"""
Unit tests for balance scoring and schedule insights.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from mitra.core.models import ScheduleItem
from mitra.schedule.scoring import (
    calculate_balance,
    count_categories,
    generate_insights,
    minutes_by_type,
)


def items_of(*types, duration=30):
    return [ScheduleItem(start=i * 60, duration=duration, activity=t, type=t) for i, t in enumerate(types)]


class TestCountCategories:

    def test_buckets(self):
        items = items_of("task", "task", "fitness", "medication", "wellness", "break", "user")
        assert count_categories(items) == {"work": 2, "health": 3, "breaks": 1}


class TestCalculateBalance:
    """Tests for the work/health/break balance score."""

    def test_empty_is_zero(self):
        assert calculate_balance([]) == 0

    def test_only_user_items_is_zero(self):
        assert calculate_balance(items_of("user", "user")) == 0

    def test_ideal_mix_is_hundred(self):
        items = items_of(*(["task"] * 5 + ["fitness", "medication", "wellness"] + ["break"] * 2))
        assert calculate_balance(items) == pytest.approx(100)

    def test_all_work(self):
        # |1 - .5| + |0 - .3| + |0 - .2| = 1.0
        assert calculate_balance(items_of("task", "task")) == pytest.approx(0)

    def test_partial_mix(self):
        # work .5, health .5, breaks 0 -> deviation .4
        assert calculate_balance(items_of("task", "fitness")) == pytest.approx(60)

    @pytest.mark.parametrize("types", [
        ("break",),
        ("fitness", "wellness", "medication"),
        ("task", "break", "user"),
        ("task",) * 20 + ("break",),
    ])
    def test_bounds(self, types):
        assert 0 <= calculate_balance(items_of(*types)) <= 100


class TestMinutesByType:

    def test_sums_matching_types(self):
        items = items_of("task", "user", "fitness", duration=40)
        assert minutes_by_type(items, "task", "user") == 80
        assert minutes_by_type(items, "break") == 0


class TestGenerateInsights:

    def test_needs_improvement_without_wellness(self):
        insights = generate_insights(items_of("fitness", duration=45))
        assert insights["workLifeBalance"] == "Needs Improvement"
        assert insights["healthScore"] == "Excellent"
        assert insights["recommendations"] == ["Add reflection time"]

    def test_short_workout_could_be_better(self):
        insights = generate_insights(items_of("fitness", "wellness", duration=20))
        assert insights["healthScore"] == "Could be better"
        assert insights["workLifeBalance"] == "Good"

    def test_work_time_string(self):
        insights = generate_insights(items_of("task", "task", duration=250))
        assert insights["totalWorkTime"] == "500 minutes"
        assert insights["recommendations"][0] == "Consider taking more breaks"
