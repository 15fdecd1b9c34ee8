"""
Central Coordinator for the Mitra assistant

The Coordinator is the orchestration layer that:
1. Owns one agent per AgentKind
2. Routes structured intents to the owning agent
3. Keeps an in-process activity log of every routed event
4. Builds clean-slate daily schedules and merges user schedules

Design Pattern: Router/Dispatcher
- Single entry point for all agent events
- Dispatch goes through an exhaustive Intent -> AgentKind table
- Schedule reads are fanned out concurrently and fail as a whole

The Coordinator is an owned context object: the HTTP layer builds one per
application and tests build isolated instances.
"""

from datetime import date, datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional
import asyncio
import logging
import threading

from dateutil import parser as date_parser

from .base_agent import BaseAgent, AgentResponse
from .fitness_agent import FitnessAgent
from .task_agent import TaskAgent
from .finance_agent import FinanceAgent
from .journal_agent import JournalAgent
from .healthcare_agent import HealthcareAgent
from .lifestyle_agent import LifestyleAgent
from .intents import COORDINATOR_INTENTS, INTENT_ROUTES, Intent
from ..core.config import Config
from ..core.errors import InvalidArgumentError, ScheduleFetchError, UnsupportedIntentError
from ..core.models import AgentKind, MergedSchedule, Schedule, ScheduleItem, parse_clock
from ..schedule.builder import build_daily_schedule
from ..schedule.merger import merge_user_schedule


AGENT_CLASSES = {
    AgentKind.FITNESS: FitnessAgent,
    AgentKind.TASK: TaskAgent,
    AgentKind.FINANCE: FinanceAgent,
    AgentKind.JOURNAL: JournalAgent,
    AgentKind.HEALTHCARE: HealthcareAgent,
    AgentKind.LIFESTYLE: LifestyleAgent,
}

DEFAULT_FETCH_TIMEOUT = 10.0


class Coordinator:
    """
    Central router and scheduler over the domain agents.

    Attributes:
        agents: Registry of agents keyed by AgentKind
        fetch_timeout: Seconds allowed for the concurrent read phase
    """

    def __init__(
        self,
        store,
        config: Optional[Config] = None,
        agents: Optional[Dict[AgentKind, BaseAgent]] = None,
        fetch_timeout: Optional[float] = None,
    ):
        """
        Initialize the Coordinator.

        Args:
            store: Document store shared by all agents
            config: Config instance for settings/preferences
            agents: Agent instances to use instead of the defaults
            fetch_timeout: Overrides the configured fetch timeout

        Raises:
            ValueError: if an AgentKind or routed intent has no agent
        """
        self.store = store
        self.config = config
        self.logger = logging.getLogger("agent.coordinator")

        if agents is None:
            agents = {kind: cls(store, config) for kind, cls in AGENT_CLASSES.items()}
        self.agents: Dict[AgentKind, BaseAgent] = dict(agents)
        self._check_routes()

        if fetch_timeout is None:
            fetch_timeout = config.get_fetch_timeout() if config is not None else DEFAULT_FETCH_TIMEOUT
        self.fetch_timeout = fetch_timeout

        self._activity_log: List[Dict[str, Any]] = []
        self._log_lock = threading.Lock()

        for agent in self.agents.values():
            agent.initialize()

        self.logger.info("Coordinator initialized with agents: %s",
                         [kind.value for kind in self.agents])

    def _check_routes(self) -> None:
        missing_kinds = [kind.value for kind in AgentKind if kind not in self.agents]
        if missing_kinds:
            raise ValueError(f"No agent registered for: {', '.join(missing_kinds)}")
        unrouted = [
            intent.value for intent in Intent
            if intent not in INTENT_ROUTES and intent not in COORDINATOR_INTENTS
        ]
        if unrouted:
            raise ValueError(f"No route for intents: {', '.join(unrouted)}")

    # =========================================================================
    # Routing
    # =========================================================================

    def route(self, intent_name: str, args: Optional[Dict[str, Any]] = None,
              strict: bool = False) -> AgentResponse:
        """
        Dispatch one classified intent to its agent.

        Args:
            intent_name: Intent name from the classifier
            args: Structured arguments for the agent
            strict: Raise instead of returning a no-op for unknown intents

        Returns:
            The agent's AgentResponse, or a neutral no-op response when no
            agent handles the intent

        Raises:
            InvalidArgumentError: if the agent rejects the arguments
            UnsupportedIntentError: for an unknown intent in strict mode
        """
        try:
            intent = Intent.from_name(intent_name)
        except UnsupportedIntentError:
            if strict:
                raise
            self.logger.info("Unknown intent: %s", intent_name)
            return AgentResponse.unknown()

        kind = INTENT_ROUTES.get(intent)
        if kind is None:
            if strict:
                raise UnsupportedIntentError(intent_name)
            return AgentResponse.unknown()

        agent = self.agents[kind]
        self.logger.info("Routing %s to %s", intent.value, agent.name)
        response = agent.process(dict(args or {}))
        self._append_activity(agent.name, response)
        return response

    def _append_activity(self, agent_name: str, response: AgentResponse) -> None:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "agent": agent_name,
            "response": response.to_dict(),
        }
        with self._log_lock:
            self._activity_log.append(entry)

    @property
    def activity_log(self) -> List[Dict[str, Any]]:
        """Copy of the activity log, oldest first."""
        with self._log_lock:
            return list(self._activity_log)

    def get_activity_log(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Most recent activity entries, oldest first."""
        entries = self.activity_log
        if limit is not None:
            entries = entries[-limit:] if limit > 0 else []
        return entries

    # =========================================================================
    # Scheduling
    # =========================================================================

    async def _fan_out(self, **calls) -> Dict[str, Any]:
        """
        Run blocking reads concurrently in worker threads.

        All reads must succeed within fetch_timeout.

        Raises:
            ScheduleFetchError: on the first failure or on timeout
        """
        names = list(calls)
        try:
            results = await asyncio.wait_for(
                asyncio.gather(*(asyncio.to_thread(calls[name]) for name in names)),
                timeout=self.fetch_timeout,
            )
        except asyncio.TimeoutError:
            self.logger.error("Schedule fetch timed out after %ss", self.fetch_timeout)
            raise ScheduleFetchError(f"Timed out after {self.fetch_timeout}s fetching schedule data")
        except Exception as e:
            self.logger.error("Schedule fetch failed: %s", e)
            raise ScheduleFetchError(str(e)) from e
        return dict(zip(names, results))

    def _preference_clock(self, key: str, default: str) -> int:
        if self.config is None:
            return parse_clock(default)
        return self.config.get_clock(key, default)

    def _local_zone(self) -> tzinfo:
        if self.config is None:
            return timezone.utc
        return self.config.get_timezone()

    def _resolve_date(self, schedule_date: Optional[Any], now: datetime) -> date:
        if schedule_date is None or schedule_date == "":
            return now.astimezone(self._local_zone()).date()
        if isinstance(schedule_date, datetime):
            return schedule_date.date()
        if isinstance(schedule_date, date):
            return schedule_date
        try:
            return date_parser.isoparse(str(schedule_date)).date()
        except ValueError:
            raise InvalidArgumentError(f"Invalid date: {schedule_date!r} (expected YYYY-MM-DD)", field="date")

    async def generate_schedule(self, schedule_date: Optional[Any] = None) -> Schedule:
        """
        Build a clean-slate schedule from every agent's requirements.

        Args:
            schedule_date: Day to plan (date or YYYY-MM-DD), defaults to today
                in the configured timezone

        Returns:
            Schedule

        Raises:
            InvalidArgumentError: if schedule_date cannot be parsed
            ScheduleFetchError: if any read fails or times out
        """
        now = datetime.now(timezone.utc)
        day = self._resolve_date(schedule_date, now)
        self.logger.info("Generating schedule for %s", day.isoformat())

        task_agent: TaskAgent = self.agents[AgentKind.TASK]
        healthcare_agent: HealthcareAgent = self.agents[AgentKind.HEALTHCARE]

        calls = {f"req_{kind.value}": agent.get_requirements for kind, agent in self.agents.items()}
        calls["tasks"] = task_agent.pending_tasks
        calls["medications"] = healthcare_agent.medication_doses
        fetched = await self._fan_out(**calls)

        lunch_duration = 60
        if self.config is not None:
            lunch_duration = int(self.config.get("lunch_duration", section="preferences", default=60))

        return build_daily_schedule(
            tasks=fetched["tasks"],
            medications=fetched["medications"],
            fitness_requirement=fetched[f"req_{AgentKind.FITNESS.value}"],
            journal_requirement=fetched[f"req_{AgentKind.JOURNAL.value}"],
            schedule_date=day,
            now=now,
            workday_start=self._preference_clock("work_hours_start", "09:00"),
            workday_end=self._preference_clock("work_hours_end", "18:00"),
            lunch_start=self._preference_clock("lunch_time", "12:00"),
            lunch_duration=lunch_duration,
        )

    async def merge_user_schedule(self, user_items: List[ScheduleItem],
                                  schedule_date: Optional[Any] = None) -> MergedSchedule:
        """
        Merge a user schedule with medications, fitness and urgent tasks.

        Args:
            user_items: Parsed user schedule items
            schedule_date: Day the schedule is for, defaults to today in the
                configured timezone

        Returns:
            MergedSchedule

        Raises:
            ScheduleFetchError: if any read fails or times out
        """
        now = datetime.now(timezone.utc)
        day = self._resolve_date(schedule_date, now)
        self.logger.info("Merging user schedule with %d items", len(user_items))

        fitness_agent: FitnessAgent = self.agents[AgentKind.FITNESS]
        task_agent: TaskAgent = self.agents[AgentKind.TASK]
        healthcare_agent: HealthcareAgent = self.agents[AgentKind.HEALTHCARE]
        lifestyle_agent: LifestyleAgent = self.agents[AgentKind.LIFESTYLE]

        fetched = await self._fan_out(
            tasks=task_agent.pending_tasks,
            workouts=fitness_agent.recent_workouts,
            medications=healthcare_agent.medication_doses,
            habits=lifestyle_agent.recent_habits,
        )

        return merge_user_schedule(
            user_items,
            tasks=fetched["tasks"],
            workouts=fetched["workouts"],
            medications=fetched["medications"],
            habits=fetched["habits"],
            schedule_date=day,
            now=now,
        )

    # =========================================================================
    # Registry
    # =========================================================================

    def get_agent(self, kind: AgentKind) -> BaseAgent:
        return self.agents[kind]

    def get_agent_summaries(self) -> List[Dict[str, Any]]:
        """Name, priority and collection of every agent, highest priority first."""
        return [
            {"name": agent.name, "priority": agent.priority, "collection": agent.collection}
            for agent in sorted(self.agents.values(), key=lambda a: a.priority, reverse=True)
        ]

    def cleanup(self) -> None:
        """
        Clean up all agents before shutdown.
        """
        for agent in self.agents.values():
            agent.cleanup()
        self.logger.info("Coordinator cleaned up")
