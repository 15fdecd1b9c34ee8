"""
Unit tests for clean-slate schedule generation.
"""

import pytest
from datetime import date, datetime, timezone
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from mitra.core.models import (
    COORDINATOR_NAME,
    MedicationDose,
    PendingTask,
    ScheduleItem,
    ScheduleRequirement,
    parse_clock,
)
from mitra.schedule.builder import build_daily_schedule, sort_items


DAY = date(2025, 3, 1)
NOW = datetime(2025, 3, 1, 6, 0, tzinfo=timezone.utc)


@pytest.fixture
def fitness_req():
    return ScheduleRequirement(agent="Fitness Agent", priority=8, recommended_frequency=5, duration=45)


@pytest.fixture
def journal_req():
    return ScheduleRequirement(agent="Journal Agent", priority=5, recommended_frequency=7, duration=15)


def build(tasks=None, medications=None, fitness=None, journal=None, **kwargs):
    return build_daily_schedule(
        tasks=tasks or [],
        medications=medications or [],
        fitness_requirement=fitness,
        journal_requirement=journal,
        schedule_date=DAY,
        now=NOW,
        **kwargs
    )


def dose(medicine, clock):
    return MedicationDose(medicine=medicine, start=parse_clock(clock))


class TestEmptyDay:
    """Generation with no tasks and no medications."""

    def test_only_fixed_blocks(self, fitness_req, journal_req):
        schedule = build(fitness=fitness_req, journal=journal_req)
        assert [(i.time, i.activity) for i in schedule.items] == [
            ("07:00", "Workout Session"),
            ("12:00", "Lunch Break"),
            ("21:00", "Evening Reflection / Journal"),
        ]

    def test_fixed_block_details(self, fitness_req, journal_req):
        fitness, lunch, wellness = build(fitness=fitness_req, journal=journal_req).items
        assert fitness.duration == 45
        assert fitness.alternative_times == ["07:00", "18:00"]
        assert fitness.flexible is True
        assert lunch.agent == COORDINATOR_NAME
        assert lunch.type == "break"
        assert wellness.duration == 15
        assert wellness.type == "wellness"

    def test_requirement_duration_used_as_is(self):
        fitness = ScheduleRequirement(agent="Fitness Agent", priority=8, duration=0)
        journal = ScheduleRequirement(agent="Journal Agent", priority=5, duration=20)
        workout, _, reflection = build(fitness=fitness, journal=journal).items
        assert workout.duration == 0
        assert reflection.duration == 20

    def test_lunch_always_present(self):
        schedule = build()
        assert [i.activity for i in schedule.items] == ["Lunch Break"]
        assert schedule.insights["recommendations"] == ["Add a workout session", "Add reflection time"]

    def test_schedule_metadata(self):
        schedule = build()
        assert schedule.date == "2025-03-01"
        assert schedule.generated_at == NOW
        assert schedule.total_activities == 1


class TestMedications:
    """Medications are pinned to their clock times."""

    def test_every_dose_inserted(self):
        schedule = build(medications=[dose("A", "08:00"), dose("B", "22:00")])
        meds = [i for i in schedule.items if i.type == "medication"]
        assert [(m.activity, m.time) for m in meds] == [("Take A", "08:00"), ("Take B", "22:00")]
        assert all(m.priority == 10 and m.flexible is False and m.duration == 5 for m in meds)

    def test_same_time_doses_both_kept(self):
        schedule = build(medications=[dose("A", "08:00"), dose("B", "08:00")])
        meds = [i.activity for i in schedule.items if i.type == "medication"]
        assert meds == ["Take A", "Take B"]


class TestTaskPlacement:
    """High and medium task placement on the hourly cursor."""

    def test_high_tasks_fill_hours(self):
        tasks = [
            PendingTask("Finish report", "high", 120),
            PendingTask("Call bank", "high", 15),
        ]
        schedule = build(tasks=tasks)
        placed = {i.activity: i.time for i in schedule.items if i.type == "task"}
        assert placed == {"Finish report": "09:00", "Call bank": "11:00"}

    def test_medium_tasks_follow_high(self):
        tasks = [
            PendingTask("Medium one", "medium", 30),
            PendingTask("Urgent one", "high", 60),
        ]
        schedule = build(tasks=tasks)
        placed = {i.activity: (i.time, i.priority, i.flexible) for i in schedule.items if i.type == "task"}
        assert placed["Urgent one"] == ("09:00", 10, False)
        assert placed["Medium one"] == ("10:00", 7, True)

    def test_low_tasks_never_placed(self):
        schedule = build(tasks=[PendingTask("Tidy desk", "low", 30)])
        assert all(i.type != "task" for i in schedule.items)

    def test_at_most_three_medium_tasks(self):
        tasks = [PendingTask(f"M{i}", "medium", 30) for i in range(5)]
        schedule = build(tasks=tasks)
        assert [i.activity for i in schedule.items if i.type == "task"] == ["M0", "M1", "M2"]

    def test_high_tasks_stop_at_workday_end(self):
        tasks = [PendingTask(f"H{i}", "high", 60) for i in range(11)]
        schedule = build(tasks=tasks)
        placed = [i for i in schedule.items if i.type == "task"]
        assert len(placed) == 9
        assert placed[-1].time == "17:00"
        assert schedule.insights["unscheduledTasks"] == ["H9", "H10"]
        assert "2 high-priority task(s) did not fit before 18:00" in schedule.insights["recommendations"][-1]

    def test_medium_tasks_need_an_hour_left(self):
        tasks = [PendingTask(f"H{i}", "high", 60) for i in range(8)] + [PendingTask("Late", "medium", 30)]
        schedule = build(tasks=tasks)
        assert "Late" not in [i.activity for i in schedule.items]
        assert "unscheduledTasks" not in schedule.insights

    def test_custom_workday(self):
        schedule = build(tasks=[PendingTask("Early", "high", 30)], workday_start=parse_clock("08:00"))
        assert [i.time for i in schedule.items if i.activity == "Early"] == ["08:00"]

    def test_custom_lunch(self):
        schedule = build(lunch_start=parse_clock("13:30"), lunch_duration=45)
        lunch = schedule.items[0]
        assert (lunch.time, lunch.duration) == ("13:30", 45)


class TestOrdering:
    """Items come back sorted by start time."""

    def test_sorted_by_start(self, fitness_req, journal_req):
        tasks = [PendingTask("Finish report", "high", 120), PendingTask("Email", "medium", 15)]
        schedule = build(tasks=tasks, medications=[dose("Night pill", "22:00"), dose("Morning pill", "08:00")],
                         fitness=fitness_req, journal=journal_req)
        starts = [i.start for i in schedule.items]
        assert starts == sorted(starts)

    def test_sort_is_stable(self):
        first = ScheduleItem(start=480, duration=5, activity="first", type="medication")
        second = ScheduleItem(start=480, duration=5, activity="second", type="medication")
        earlier = ScheduleItem(start=420, duration=5, activity="earlier", type="fitness")
        assert [i.activity for i in sort_items([first, second, earlier])] == ["earlier", "first", "second"]


class TestInsights:
    """Insights and balance score attached to the schedule."""

    def test_good_balance_with_fitness_and_wellness(self, fitness_req, journal_req):
        insights = build(fitness=fitness_req, journal=journal_req).insights
        assert insights["workLifeBalance"] == "Good"
        assert insights["healthScore"] == "Excellent"
        assert insights["totalWorkTime"] == "0 minutes"

    def test_long_workday_recommendation(self):
        tasks = [PendingTask(f"H{i}", "high", 120) for i in range(5)]
        insights = build(tasks=tasks).insights
        assert insights["totalWorkTime"] == "600 minutes"
        assert "Consider taking more breaks" in insights["recommendations"]

    def test_balance_score_in_range(self, fitness_req, journal_req):
        schedule = build(tasks=[PendingTask("A", "high", 30)], fitness=fitness_req, journal=journal_req)
        assert 0 <= schedule.balance_score <= 100
