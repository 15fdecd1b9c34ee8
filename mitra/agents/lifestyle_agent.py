"""
Lifestyle Agent for the Mitra coordinator
Tracks habits the user wants to build.
"""

from typing import Any, Dict, List

from .base_agent import BaseAgent, AgentResponse
from ..core.models import AgentKind, ScheduleRequirement


class LifestyleAgent(BaseAgent):
    """
    Specialized agent for habits.

    Handles the add_habit intent. Stored records live in the "lifestyle"
    collection as {habit, timestamp}.
    """

    kind = AgentKind.LIFESTYLE
    priority = 6
    collection = "lifestyle"

    HISTORY_LIMIT = 5

    def process(self, args: Dict[str, Any]) -> AgentResponse:
        self.require(args, ["habit"])
        habit = str(args["habit"]).strip()

        record_id = self.record({"habit": habit})
        self.log_action("added_habit", {"id": record_id})

        return AgentResponse(
            agent=self.name,
            action="added_habit",
            category="lifestyle",
            time_required=10,
            priority=self.priority,
            payload={"id": record_id, "habit": habit},
        )

    def get_requirements(self) -> ScheduleRequirement:
        habits = self.recent_habits()
        return ScheduleRequirement(
            agent=self.name,
            priority=self.priority,
            recommended_frequency=7,
            duration=10,
            details={"recentHabits": [h.get("habit") for h in habits]},
        )

    def recent_habits(self, limit: int = HISTORY_LIMIT) -> List[Dict[str, Any]]:
        return self.recent(limit)
