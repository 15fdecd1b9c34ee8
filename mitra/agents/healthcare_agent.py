"""
Healthcare Agent for the Mitra coordinator
Keeps the medication list. Medications are pinned to a fixed clock time
derived from the time of day they are taken and are never moved.
"""

from typing import Any, Dict, List

from .base_agent import BaseAgent, AgentResponse, Flexibility
from ..core.models import AgentKind, MedicationDose, ScheduleRequirement, parse_clock


class HealthcareAgent(BaseAgent):
    """
    Specialized agent for medications.

    Handles the add_medication intent. Stored records live in the
    "medications" collection as {medicine, time, dose, taken_today, timestamp},
    where time is a time of day such as "morning".
    """

    kind = AgentKind.HEALTHCARE
    priority = 10
    collection = "medications"

    TIME_OF_DAY = {
        "morning": "08:00",
        "afternoon": "14:00",
        "evening": "18:00",
        "night": "22:00",
    }
    DEFAULT_TIME = "08:00"

    def process(self, args: Dict[str, Any]) -> AgentResponse:
        """
        Record a medication.

        Args:
            args: medicine (str), time (time of day), dose (str, optional)
        """
        self.require(args, ["medicine", "time"])
        medicine = str(args["medicine"]).strip()
        time_of_day = str(args["time"]).strip()
        dose = str(args.get("dose") or "")

        record_id = self.record({
            "medicine": medicine,
            "time": time_of_day,
            "dose": dose,
            "taken_today": False,
        })
        scheduled = self.time_to_clock(time_of_day)
        self.log_action("scheduled_medication", {"id": record_id, "at": scheduled})

        return AgentResponse(
            agent=self.name,
            action="scheduled_medication",
            category="health",
            time_required=5,
            priority=self.priority,
            flexibility=Flexibility.NONE,
            scheduled_time=scheduled,
            payload={"id": record_id, "medicine": medicine, "time": time_of_day, "dose": dose},
        )

    def get_requirements(self) -> ScheduleRequirement:
        medications = self.store.query(self.collection)
        return ScheduleRequirement(
            agent=self.name,
            priority=self.priority,
            details={
                "medicationCount": len(medications),
                "criticalTimes": list(self.TIME_OF_DAY.values()),
            },
        )

    def medication_doses(self) -> List[MedicationDose]:
        """All medications at their fixed clock times, in storage order."""
        return [
            MedicationDose(
                medicine=record.get("medicine", ""),
                start=parse_clock(self.time_to_clock(record.get("time", ""))),
            )
            for record in self.store.query(self.collection)
        ]

    @classmethod
    def time_to_clock(cls, time_of_day: str) -> str:
        """Map a time of day to its "HH:MM" slot; unknown values map to 08:00."""
        return cls.TIME_OF_DAY.get(str(time_of_day or "").strip().lower(), cls.DEFAULT_TIME)
