"""
Journal Agent for the Mitra coordinator
Stores journal entries with mood and recommends a nightly reflection block.
"""

from typing import Any, Dict

from .base_agent import BaseAgent, AgentResponse, Flexibility
from ..core.models import AgentKind, ScheduleRequirement


class JournalAgent(BaseAgent):
    """
    Specialized agent for journaling.

    Handles the write_journal intent. Stored records live in the "journal"
    collection as {title, content, mood, timestamp}.
    """

    kind = AgentKind.JOURNAL
    priority = 5
    collection = "journal"

    def process(self, args: Dict[str, Any]) -> AgentResponse:
        self.require(args, ["content"])
        title = str(args.get("title") or "")
        mood = str(args.get("mood") or "neutral").strip().lower()

        record_id = self.record({"title": title, "content": str(args["content"]), "mood": mood})
        self.log_action("wrote_journal", {"id": record_id, "mood": mood})

        return AgentResponse(
            agent=self.name,
            action="wrote_journal",
            category="wellness",
            time_required=15,
            priority=self.priority,
            flexibility=Flexibility.HIGH,
            preferred_time="evening",
            payload={"id": record_id, "title": title, "mood": mood},
        )

    def get_requirements(self) -> ScheduleRequirement:
        return ScheduleRequirement(
            agent=self.name,
            priority=self.priority,
            recommended_frequency=7,
            duration=15,
            preferred_times=["20:00-22:00"],
        )
