"""
Finance Agent for the Mitra coordinator
Logs expenses and income; large expenses are flagged with a higher priority.
"""

from typing import Any, Dict

from .base_agent import BaseAgent, AgentResponse
from ..core.models import AgentKind, ScheduleRequirement


class FinanceAgent(BaseAgent):
    """
    Specialized agent for money tracking.

    Handles the log_finance intent. Stored records live in the "finance"
    collection as {item, amount, type, category, timestamp}.
    """

    kind = AgentKind.FINANCE
    priority = 6
    collection = "finance"

    LARGE_EXPENSE = 1000
    LARGE_EXPENSE_PRIORITY = 8

    def process(self, args: Dict[str, Any]) -> AgentResponse:
        """
        Record a transaction.

        Args:
            args: item (str), amount (numeric string), type (expense/income,
                default expense), category (default "General")
        """
        self.require(args, ["item", "amount"])
        item = str(args["item"]).strip()
        amount = self.parse_float(args["amount"], "amount")
        entry_type = str(args.get("type") or "expense").strip().lower()
        category = str(args.get("category") or "General").strip()

        entry = {"item": item, "amount": amount, "type": entry_type, "category": category}
        record_id = self.record(entry)
        self.log_action("logged_transaction", {"id": record_id, "type": entry_type, "amount": amount})

        priority = self.priority
        threshold = self.get_config_value("large_expense_threshold", default=self.LARGE_EXPENSE)
        if entry_type == "expense" and amount > threshold:
            priority = self.LARGE_EXPENSE_PRIORITY

        return AgentResponse(
            agent=self.name,
            action="logged_transaction",
            category="finance",
            time_required=5,
            priority=priority,
            payload={"id": record_id, **entry},
        )

    def get_requirements(self) -> ScheduleRequirement:
        return ScheduleRequirement(
            agent=self.name,
            priority=self.priority,
            recommended_frequency=1,
            duration=30,
            preferred_times=["Sunday evening"],
            details={"recommendedActivity": "Weekly budget review"},
        )
