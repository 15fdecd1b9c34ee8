"""
Task Agent for the Mitra coordinator
Records to-dos and estimates how long they take and when they are due.

The estimation heuristics here are also used by the schedulers to size
task blocks, so they are exposed as class methods.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .base_agent import BaseAgent, AgentResponse, Flexibility
from ..core.models import AgentKind, PendingTask, ScheduleRequirement


class TaskAgent(BaseAgent):
    """
    Specialized agent for to-do management.

    Handles the add_task intent. Stored records live in the "todos"
    collection as {task, priority, completed, timestamp}.
    """

    kind = AgentKind.TASK
    priority = 9
    collection = "todos"

    # Priority labels to scheduling priority
    PRIORITY_SCORES = {"high": 10, "medium": 7, "low": 5}

    # Keyword rules for duration estimates, checked in order
    DURATION_RULES = [
        (("call", "email"), 15),
        (("meeting",), 60),
        (("report", "project"), 120),
    ]
    DEFAULT_MINUTES = 30

    URGENT_KEYWORDS = ("urgent", "today")

    def process(self, args: Dict[str, Any]) -> AgentResponse:
        """
        Record a new to-do.

        Args:
            args: task (str), priority (str, optional: high/medium/low)
        """
        self.require(args, ["task"])
        task = str(args["task"]).strip()
        priority = str(args.get("priority") or "medium").strip().lower()
        if priority not in self.PRIORITY_SCORES:
            self.logger.warning("Unknown priority %r, recording as low", args.get("priority"))
            priority = "low"

        record_id = self.record({"task": task, "priority": priority, "completed": False})
        self.log_action("added_task", {"id": record_id, "priority": priority})

        return AgentResponse(
            agent=self.name,
            action="added_task",
            category="productivity",
            time_required=self.estimate_task_time(task),
            priority=self.PRIORITY_SCORES[priority],
            flexibility=Flexibility.LOW if priority == "high" else Flexibility.MEDIUM,
            deadline=self.infer_deadline(task),
            payload={"id": record_id, "task": task, "priority": priority},
        )

    def get_requirements(self) -> ScheduleRequirement:
        pending = self.pending_records()
        return ScheduleRequirement(
            agent=self.name,
            priority=self.priority,
            details={
                "pendingTasks": len(pending),
                "totalEstimatedTime": len(pending) * self.DEFAULT_MINUTES,
            },
        )

    def pending_records(self) -> List[Dict[str, Any]]:
        """Incomplete to-dos, newest first."""
        return self.store.query(
            self.collection,
            filters={"completed": False},
            order_by="timestamp",
            descending=True,
        )

    def pending_tasks(self) -> List[PendingTask]:
        """Incomplete to-dos sized for scheduling, newest first."""
        return [
            PendingTask(
                title=record.get("task", ""),
                priority=str(record.get("priority", "medium")).lower(),
                duration=self.estimate_task_time(record.get("task", "")),
            )
            for record in self.pending_records()
        ]

    @classmethod
    def estimate_task_time(cls, task: str) -> int:
        """Estimate minutes for a task from keywords in its text."""
        text = (task or "").lower()
        for keywords, minutes in cls.DURATION_RULES:
            if any(keyword in text for keyword in keywords):
                return minutes
        return cls.DEFAULT_MINUTES

    @classmethod
    def infer_deadline(cls, task: str, now: Optional[datetime] = None) -> datetime:
        """Urgent or same-day tasks are due in 4 hours, everything else in a day."""
        if now is None:
            now = datetime.now(timezone.utc)
        text = (task or "").lower()
        if any(keyword in text for keyword in cls.URGENT_KEYWORDS):
            return now + timedelta(hours=4)
        return now + timedelta(hours=24)
