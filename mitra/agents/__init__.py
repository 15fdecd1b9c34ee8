"""
Agent Layer for the Mitra assistant

One specialized agent per life domain, coordinated by a central router
that also builds daily schedules.

Agents:
- FitnessAgent: Workouts and training cadence
- TaskAgent: To-dos, time estimates and deadlines
- FinanceAgent: Expenses and income
- JournalAgent: Journal entries and mood
- HealthcareAgent: Medications at fixed times
- LifestyleAgent: Habits
- Coordinator: Routes intents and builds schedules
"""

from .base_agent import BaseAgent, AgentResponse, Flexibility
from .fitness_agent import FitnessAgent
from .task_agent import TaskAgent
from .finance_agent import FinanceAgent
from .journal_agent import JournalAgent
from .healthcare_agent import HealthcareAgent
from .lifestyle_agent import LifestyleAgent
from .intents import Intent, INTENT_ROUTES, ClassifiedIntent, KeywordIntentClassifier
from .coordinator import Coordinator, AGENT_CLASSES

__all__ = [
    "BaseAgent",
    "AgentResponse",
    "Flexibility",
    "FitnessAgent",
    "TaskAgent",
    "FinanceAgent",
    "JournalAgent",
    "HealthcareAgent",
    "LifestyleAgent",
    "Intent",
    "INTENT_ROUTES",
    "ClassifiedIntent",
    "KeywordIntentClassifier",
    "Coordinator",
    "AGENT_CLASSES",
]
