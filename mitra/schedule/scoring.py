"""
Balance scoring and insights for daily schedules.

Score formula:
    deviation = |work - 0.5| + |health - 0.3| + |breaks - 0.2|
    score = clamp(0, 100, 100 - 100 * deviation)

where work/health/breaks are each bucket's share of the counted items.
"""

from typing import Any, Dict, List

from ..core.models import ScheduleItem


HEALTH_TYPES = ("fitness", "medication", "wellness")

# Ideal split of work : health : breaks. Each ratio is divided by 10, which
# only yields fractions because the three values sum to exactly 10.
IDEAL_RATIO = {"work": 5, "health": 3, "breaks": 2}

LONG_WORKDAY_MINUTES = 480
HEALTHY_FITNESS_MINUTES = 30


def count_categories(items: List[ScheduleItem]) -> Dict[str, int]:
    """Count items per balance bucket. User items fall in no bucket."""
    return {
        "work": sum(1 for item in items if item.type == "task"),
        "health": sum(1 for item in items if item.type in HEALTH_TYPES),
        "breaks": sum(1 for item in items if item.type == "break"),
    }


def calculate_balance(items: List[ScheduleItem]) -> float:
    """
    Calculate how closely a schedule matches the ideal work/health/break mix.

    Args:
        items: Schedule items to score

    Returns:
        Score in [0, 100]; 0 when no item falls in any bucket
    """
    categories = count_categories(items)
    total = sum(categories.values())
    if total == 0:
        return 0

    deviation = sum(
        abs(categories[bucket] / total - IDEAL_RATIO[bucket] / 10)
        for bucket in IDEAL_RATIO
    )
    return max(0, min(100, 100 - deviation * 100))


def minutes_by_type(items: List[ScheduleItem], *types: str) -> int:
    """Total duration of the items whose type is one of types."""
    return sum(item.duration for item in items if item.type in types)


def generate_insights(items: List[ScheduleItem]) -> Dict[str, Any]:
    """
    Summarize a generated schedule.

    Returns:
        Dict with workLifeBalance, totalWorkTime, healthScore and
        recommendations
    """
    work_time = minutes_by_type(items, "task")
    fitness_time = minutes_by_type(items, "fitness")
    wellness_time = minutes_by_type(items, "wellness")

    recommendations = []
    if work_time > LONG_WORKDAY_MINUTES:
        recommendations.append("Consider taking more breaks")
    if fitness_time == 0:
        recommendations.append("Add a workout session")
    if wellness_time == 0:
        recommendations.append("Add reflection time")

    return {
        "workLifeBalance": "Good" if fitness_time > 0 and wellness_time > 0 else "Needs Improvement",
        "totalWorkTime": f"{work_time} minutes",
        "healthScore": "Excellent" if fitness_time >= HEALTHY_FITNESS_MINUTES else "Could be better",
        "recommendations": recommendations,
    }
