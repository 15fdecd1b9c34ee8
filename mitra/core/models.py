"""
Data models for the Mitra coordinator
Defines schedule items, agent requirements and schedules.

Times of day are held as integer minutes since midnight and only rendered
as zero-padded "HH:MM" strings when a model is serialized.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any
import re

from .errors import InvalidArgumentError


ITEM_TYPES = ("task", "fitness", "medication", "wellness", "break", "user")

COORDINATOR_NAME = "Central Coordinator"


class AgentKind(str, Enum):
    """The closed set of domain agents the coordinator owns"""
    FITNESS = "fitness"
    TASK = "task"
    FINANCE = "finance"
    JOURNAL = "journal"
    HEALTHCARE = "healthcare"
    LIFESTYLE = "lifestyle"

    @property
    def display_name(self) -> str:
        return f"{self.value.capitalize()} Agent"

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_clock(value: Any) -> int:
    """
    Parse an "HH:MM" (or "H:MM") clock string into minutes since midnight.

    Raises:
        InvalidArgumentError: if the value is not a valid 24h clock time
    """
    if not isinstance(value, str):
        raise InvalidArgumentError(f"Invalid time: {value!r}", field="time")
    match = _CLOCK_RE.match(value.strip())
    if not match:
        raise InvalidArgumentError(f"Invalid time: {value!r} (expected HH:MM)", field="time")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidArgumentError(f"Invalid time: {value!r} (expected HH:MM)", field="time")
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    """Format minutes since midnight as zero-padded "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _whole_number(value: Any, name: str) -> int:
    """Coerce an int, integral float or digit string; anything else is rejected."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid {name}: {value!r}", field=name)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
        return int(value)
    raise InvalidArgumentError(f"Invalid {name}: {value!r}", field=name)


def _flag(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid {name}: {value!r} (expected true or false)", field=name)
    return value


def _clock_list(value: Any, name: str) -> Optional[List[str]]:
    """Validate a list of "HH:MM" strings and normalize each to zero-padded form."""
    if value is None:
        return None
    if not isinstance(value, list):
        raise InvalidArgumentError(f"Invalid {name}: expected a list of HH:MM times", field=name)
    try:
        return [format_clock(parse_clock(entry)) for entry in value]
    except InvalidArgumentError as e:
        raise InvalidArgumentError(f"Invalid {name}: {e}", field=name)


@dataclass
class ScheduleItem:
    """One time-slotted activity in a daily schedule"""
    start: int  # minutes since midnight
    duration: int
    activity: str
    type: str
    priority: int = 5
    flexible: bool = False
    agent: str = "User"
    added_by_ai: bool = False
    alternative_times: Optional[List[str]] = None

    @property
    def time(self) -> str:
        return format_clock(self.start)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format used by the HTTP API"""
        data = {
            "time": self.time,
            "duration": self.duration,
            "activity": self.activity,
            "type": self.type,
            "priority": self.priority,
            "flexible": self.flexible,
            "agent": self.agent,
            "addedByAI": self.added_by_ai,
        }
        if self.alternative_times:
            data["alternativeTimes"] = list(self.alternative_times)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_type: str = "user") -> 'ScheduleItem':
        """
        Create a ScheduleItem from a caller-supplied dictionary.

        Accepts either "duration" or "durationMinutes" for the length.
        Numbers may be ints, integral floats or digit strings; flags must be
        JSON booleans.

        Raises:
            InvalidArgumentError: on a malformed time, duration, priority,
                flag, alternative time or type
        """
        if not isinstance(data, dict):
            raise InvalidArgumentError(f"Schedule item must be an object, got {type(data).__name__}")
        if "time" not in data:
            raise InvalidArgumentError("Schedule item is missing 'time'", field="time")

        duration = _whole_number(data.get("duration", data.get("durationMinutes", 0)), "duration")
        if duration < 0:
            raise InvalidArgumentError(f"Invalid duration: {duration!r}", field="duration")

        item_type = data.get("type") or default_type
        if item_type not in ITEM_TYPES:
            raise InvalidArgumentError(f"Invalid item type: {item_type!r}", field="type")

        priority = _whole_number(data.get("priority", 5), "priority")
        flexible = _flag(data.get("flexible", False), "flexible")

        return cls(
            start=parse_clock(data["time"]),
            duration=duration,
            activity=str(data.get("activity") or ""),
            type=item_type,
            priority=priority,
            flexible=flexible,
            agent=data.get("agent") or "User",
            added_by_ai=_flag(data.get("addedByAI", False), "addedByAI"),
            alternative_times=_clock_list(data.get("alternativeTimes"), "alternativeTimes"),
        )


@dataclass
class PendingTask:
    """An incomplete to-do as seen by the schedulers"""
    title: str
    priority: str  # 'high', 'medium', 'low'
    duration: int  # estimated minutes

    @property
    def is_high_priority(self) -> bool:
        return self.priority == "high"

    @property
    def is_medium_priority(self) -> bool:
        return self.priority == "medium"


@dataclass
class MedicationDose:
    """A medication pinned to its fixed clock time"""
    medicine: str
    start: int  # minutes since midnight

    @property
    def time(self) -> str:
        return format_clock(self.start)


@dataclass
class ScheduleRequirement:
    """An agent's summary of how often and when its activity should happen"""
    agent: str
    priority: int
    recommended_frequency: Optional[int] = None  # days per week
    duration: Optional[int] = None  # minutes
    preferred_times: List[str] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agent": self.agent,
            "priority": self.priority,
            "recommendedFrequency": self.recommended_frequency,
            "duration": self.duration,
            "preferredTimes": list(self.preferred_times),
            **self.details,
        }


@dataclass
class Schedule:
    """A generated daily schedule. Recomputed per request, never persisted."""
    date: str
    generated_at: datetime
    items: List[ScheduleItem]
    insights: Dict[str, Any]
    balance_score: float

    @property
    def total_activities(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "generatedAt": self.generated_at.isoformat(),
            "totalActivities": self.total_activities,
            "schedule": [item.to_dict() for item in self.items],
            "insights": self.insights,
            "balanceScore": self.balance_score,
        }


@dataclass
class MergedSchedule(Schedule):
    """A user-supplied schedule enriched with AI additions and suggestions"""
    user_activities: int = 0
    ai_suggestions: int = 0
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["userActivities"] = self.user_activities
        data["aiSuggestions"] = self.ai_suggestions
        data["suggestions"] = list(self.suggestions)
        return data
