"""
Merging a user-supplied schedule with agent suggestions.

User items are never moved or overwritten. Medications, a workout block and
up to two high-priority tasks are added around them, and every addition or
conflict is reported as a human-readable suggestion.
"""

from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from ..core.models import (
    AgentKind,
    MedicationDose,
    MergedSchedule,
    PendingTask,
    ScheduleItem,
    parse_clock,
)
from .builder import sort_items
from .scoring import HEALTH_TYPES, calculate_balance, minutes_by_type


# Candidate start times for AI additions, tried in this order
CANDIDATE_SLOTS = [
    parse_clock(t) for t in (
        "07:00", "08:00", "09:00", "10:00", "11:00",
        "14:00", "15:00", "16:00", "17:00", "18:00", "19:00",
    )
]
FITNESS_FALLBACK = parse_clock("07:00")
TASK_SEARCH_FROM = parse_clock("09:00")

FITNESS_KEYWORDS = ("workout", "exercise", "gym")
WORKOUT_MINUTES = 45
LONG_ITEM_MINUTES = 90
HIGH_PRIORITY_LIMIT = 2
GOOD_BALANCE_SCORE = 70
MEDICATION_PRIORITY = 10


def find_open_slot(items: Iterable[ScheduleItem], start_from: Optional[int] = None) -> Optional[int]:
    """
    Return the first candidate slot that no item starts at.

    Args:
        items: Current schedule items
        start_from: Skip candidate slots earlier than this (minutes since midnight)

    Returns:
        Slot start in minutes since midnight, or None if every slot is taken
    """
    occupied = {item.start for item in items}
    for slot in CANDIDATE_SLOTS:
        if start_from is not None and slot < start_from:
            continue
        if slot not in occupied:
            return slot
    return None


def pin_medication(item: ScheduleItem) -> ScheduleItem:
    """Medication items are fixed at priority 10 and never flexible."""
    if item.type != "medication":
        return item
    return replace(item, priority=MEDICATION_PRIORITY, flexible=False)


def has_fitness_activity(items: Iterable[ScheduleItem]) -> bool:
    return any(
        keyword in item.activity.lower()
        for item in items
        for keyword in FITNESS_KEYWORDS
    )


def merge_user_schedule(
    user_items: List[ScheduleItem],
    tasks: List[PendingTask],
    workouts: List[Dict[str, Any]],
    medications: List[MedicationDose],
    habits: List[Dict[str, Any]],
    schedule_date: date,
    now: datetime,
) -> MergedSchedule:
    """
    Enrich a user schedule with medications, fitness and urgent tasks.

    Args:
        user_items: Caller-supplied items, kept in place (medication items
            are pinned to priority 10, not flexible)
        tasks: Incomplete tasks, with estimated durations
        workouts: Recent workout records; a workout is only suggested if non-empty
        medications: Medications at their fixed clock times
        habits: Recent habit records, echoed in the insights
        schedule_date: Day being planned
        now: Generation timestamp

    Returns:
        MergedSchedule with sorted items, suggestions and balance score
    """
    items = [pin_medication(item) for item in user_items]
    suggestions: List[str] = []

    for dose in medications:
        conflict = next((item for item in items if item.start == dose.start), None)
        if conflict is not None:
            suggestions.append(
                f'Medication "{dose.medicine}" scheduled at {dose.time} conflicts '
                f'with "{conflict.activity}". Consider adjusting.'
            )
            continue
        items.append(ScheduleItem(
            start=dose.start,
            duration=5,
            activity=f"Take {dose.medicine}",
            type="medication",
            priority=MEDICATION_PRIORITY,
            flexible=False,
            agent=AgentKind.HEALTHCARE.display_name,
            added_by_ai=True,
        ))
        suggestions.append(f'Added medication "{dose.medicine}" at {dose.time}')

    if workouts and not has_fitness_activity(items):
        slot = find_open_slot(items)
        if slot is None:
            slot = FITNESS_FALLBACK
        workout = ScheduleItem(
            start=slot,
            duration=WORKOUT_MINUTES,
            activity="Workout Session (AI Suggested)",
            type="fitness",
            priority=8,
            flexible=True,
            agent=AgentKind.FITNESS.display_name,
            added_by_ai=True,
        )
        items.append(workout)
        suggestions.append(f"Added workout session at {workout.time} based on your fitness history")

    for item in items:
        if item.duration > LONG_ITEM_MINUTES and item.type != "break":
            suggestions.append(
                f'Consider adding a break during "{item.activity}" '
                f"({item.duration} min is quite long)"
            )

    urgent = [t for t in tasks if t.is_high_priority][:HIGH_PRIORITY_LIMIT]
    for task in urgent:
        slot = find_open_slot(items, start_from=TASK_SEARCH_FROM)
        if slot is None:
            continue
        added = ScheduleItem(
            start=slot,
            duration=task.duration,
            activity=f"{task.title} (High Priority)",
            type="task",
            priority=9,
            flexible=False,
            agent=AgentKind.TASK.display_name,
            added_by_ai=True,
        )
        items.append(added)
        suggestions.append(f'Added high-priority task "{task.title}" at {added.time}')

    items = sort_items(items)

    ai_added = sum(1 for item in items if item.added_by_ai)
    balance_score = calculate_balance(items)
    insights = {
        "recommendations": list(suggestions),
        "workLifeBalance": "Good Balance" if balance_score > GOOD_BALANCE_SCORE else "Needs Improvement",
        "totalWorkTime": minutes_by_type(items, "task", "user"),
        "totalHealthTime": minutes_by_type(items, *HEALTH_TYPES),
        "aiEnhancements": f"AI added {ai_added} suggestions to improve your schedule",
        "recentHabits": [habit.get("habit") for habit in habits],
    }

    return MergedSchedule(
        date=schedule_date.isoformat(),
        generated_at=now,
        items=items,
        insights=insights,
        balance_score=balance_score,
        user_activities=len(user_items),
        ai_suggestions=ai_added,
        suggestions=suggestions,
    )
