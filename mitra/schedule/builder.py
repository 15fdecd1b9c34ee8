"""
Clean-slate daily schedule generation.

Items are placed in a fixed order with no backtracking:
medications, high-priority tasks, fitness, medium-priority tasks,
wellness, lunch. The result is then sorted by start time.
"""

from datetime import date, datetime
from math import ceil
from typing import List, Optional
import logging

from ..core.models import (
    AgentKind,
    COORDINATOR_NAME,
    MedicationDose,
    PendingTask,
    Schedule,
    ScheduleItem,
    ScheduleRequirement,
    format_clock,
    parse_clock,
)
from .scoring import calculate_balance, generate_insights


logger = logging.getLogger("mitra.schedule")

MEDIUM_TASK_LIMIT = 3
FITNESS_TIME = parse_clock("07:00")
FITNESS_ALTERNATIVES = ["07:00", "18:00"]
WELLNESS_TIME = parse_clock("21:00")


def sort_items(items: List[ScheduleItem]) -> List[ScheduleItem]:
    """Order items by start time, keeping insertion order for ties."""
    return sorted(items, key=lambda item: item.start)


def _hours_spanned(duration: int) -> int:
    return ceil(duration / 60)


def build_daily_schedule(
    tasks: List[PendingTask],
    medications: List[MedicationDose],
    fitness_requirement: Optional[ScheduleRequirement],
    journal_requirement: Optional[ScheduleRequirement],
    schedule_date: date,
    now: datetime,
    workday_start: int = 9 * 60,
    workday_end: int = 18 * 60,
    lunch_start: int = 12 * 60,
    lunch_duration: int = 60,
) -> Schedule:
    """
    Build a schedule for one day from scratch.

    High-priority tasks are placed on an hourly cursor that starts at
    workday_start and only while the cursor is before workday_end; tasks
    that do not fit are listed in insights["unscheduledTasks"]. Medium
    tasks continue from the same cursor while it is before workday_end - 1h.

    Args:
        tasks: Incomplete tasks, newest first, with estimated durations
        medications: Medications at their fixed clock times
        fitness_requirement: Fitness Agent requirement, if any
        journal_requirement: Journal Agent requirement, if any
        schedule_date: Day being planned
        now: Generation timestamp
        workday_start: Cursor start, minutes since midnight
        workday_end: Workday end, minutes since midnight
        lunch_start: Lunch break start, minutes since midnight
        lunch_duration: Lunch break length in minutes

    Returns:
        Schedule with sorted items, insights and balance score
    """
    items: List[ScheduleItem] = []
    unscheduled: List[str] = []

    # Fixed medication times; doses at the same time are all kept
    for dose in medications:
        items.append(ScheduleItem(
            start=dose.start,
            duration=5,
            activity=f"Take {dose.medicine}",
            type="medication",
            priority=10,
            flexible=False,
            agent=AgentKind.HEALTHCARE.display_name,
        ))

    cursor = workday_start
    for task in (t for t in tasks if t.is_high_priority):
        if cursor >= workday_end:
            unscheduled.append(task.title)
            continue
        items.append(ScheduleItem(
            start=cursor,
            duration=task.duration,
            activity=task.title,
            type="task",
            priority=10,
            flexible=False,
            agent=AgentKind.TASK.display_name,
        ))
        cursor += _hours_spanned(task.duration) * 60

    if fitness_requirement is not None:
        items.append(ScheduleItem(
            start=FITNESS_TIME,
            duration=fitness_requirement.duration,
            activity="Workout Session",
            type="fitness",
            priority=8,
            flexible=True,
            agent=AgentKind.FITNESS.display_name,
            alternative_times=list(FITNESS_ALTERNATIVES),
        ))

    medium_tasks = [t for t in tasks if t.is_medium_priority][:MEDIUM_TASK_LIMIT]
    for task in medium_tasks:
        if cursor >= workday_end - 60:
            continue
        items.append(ScheduleItem(
            start=cursor,
            duration=task.duration,
            activity=task.title,
            type="task",
            priority=7,
            flexible=True,
            agent=AgentKind.TASK.display_name,
        ))
        cursor += _hours_spanned(task.duration) * 60

    if journal_requirement is not None:
        items.append(ScheduleItem(
            start=WELLNESS_TIME,
            duration=journal_requirement.duration,
            activity="Evening Reflection / Journal",
            type="wellness",
            priority=5,
            flexible=True,
            agent=AgentKind.JOURNAL.display_name,
        ))

    items.append(ScheduleItem(
        start=lunch_start,
        duration=lunch_duration,
        activity="Lunch Break",
        type="break",
        priority=8,
        flexible=False,
        agent=COORDINATOR_NAME,
    ))

    items = sort_items(items)

    insights = generate_insights(items)
    if unscheduled:
        insights["unscheduledTasks"] = unscheduled
        insights["recommendations"].append(
            f"{len(unscheduled)} high-priority task(s) did not fit before "
            f"{format_clock(workday_end)}; consider moving them to tomorrow"
        )
        logger.info("%d high-priority tasks left unscheduled", len(unscheduled))

    return Schedule(
        date=schedule_date.isoformat(),
        generated_at=now,
        items=items,
        insights=insights,
        balance_score=calculate_balance(items),
    )
