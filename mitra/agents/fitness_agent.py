"""
Fitness Agent for the Mitra coordinator
Logs gym sessions and recommends a daily workout block.
"""

from typing import Any, Dict, List

from .base_agent import BaseAgent, AgentResponse, Flexibility
from ..core.models import AgentKind, ScheduleRequirement


class FitnessAgent(BaseAgent):
    """
    Specialized agent for workouts.

    Handles the log_workout intent. Stored records live in the "gym_logs"
    collection as {exercise, sets, reps, weight, is_pr, timestamp}.
    """

    kind = AgentKind.FITNESS
    priority = 8
    collection = "gym_logs"

    HISTORY_LIMIT = 7
    SESSION_MINUTES = 45
    WEEKLY_SESSIONS = 5
    PREFERRED_WINDOWS = ["06:00-08:00", "17:00-19:00"]

    def process(self, args: Dict[str, Any]) -> AgentResponse:
        """
        Record a workout.

        Args:
            args: exercise (str), sets, reps, weight (numeric strings, optional),
                is_pr ("true"/"false", optional)
        """
        self.require(args, ["exercise"])
        exercise = str(args["exercise"]).strip()
        sets = self.parse_int(args.get("sets"), "sets")
        reps = self.parse_int(args.get("reps"), "reps")
        weight = self.parse_float(args.get("weight"), "weight")
        is_pr = str(args.get("is_pr", "")).strip().lower() == "true"

        workout = {
            "exercise": exercise,
            "sets": sets,
            "reps": reps,
            "weight": weight,
            "is_pr": is_pr,
        }
        record_id = self.record(workout)
        self.log_action("logged_workout", {"id": record_id, "exercise": exercise, "is_pr": is_pr})

        return AgentResponse(
            agent=self.name,
            action="logged_workout",
            category="fitness",
            time_required=30,
            priority=self.priority,
            flexibility=Flexibility.HIGH,
            preferred_time="morning",
            payload={"id": record_id, **workout},
        )

    def get_requirements(self) -> ScheduleRequirement:
        history = self.recent_workouts()
        return ScheduleRequirement(
            agent=self.name,
            priority=self.priority,
            recommended_frequency=self.WEEKLY_SESSIONS,
            duration=self.SESSION_MINUTES,
            preferred_times=list(self.PREFERRED_WINDOWS),
            details={"recentWorkouts": len(history)},
        )

    def recent_workouts(self, limit: int = HISTORY_LIMIT) -> List[Dict[str, Any]]:
        return self.recent(limit)
