"""
Base Agent for the Mitra coordinator
Defines the abstract agent interface and the normalized scheduling hint
every agent returns.

The Agent Layer follows a sub-agent architecture pattern where:
- Each agent owns one domain (fitness, tasks, finance, ...) and one collection
- Agents share a common interface: process() records an event and returns
  a scheduling hint, get_requirements() summarizes recent cadence
- All agents maintain consistent logging and argument validation
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional
import json
import logging

from ..core.errors import InvalidArgumentError
from ..core.models import AgentKind, ScheduleRequirement


class Flexibility(str, Enum):
    """How freely a scheduled item may be moved"""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class AgentResponse:
    """
    Standard scheduling hint returned by any agent.

    Created for each processed event and handed back to the caller;
    never persisted itself.

    Attributes:
        agent: Display name of the agent that handled the event
        action: What the agent did (e.g. "logged_workout")
        category: Life area of the event (fitness, productivity, ...)
        time_required: Estimated minutes the activity needs
        priority: Scheduling priority 1-10
        flexibility: How freely the activity may be moved
        preferred_time: Loose preference such as "morning"
        scheduled_time: Fixed "HH:MM" clock time, if the activity has one
        deadline: When the activity should be done by
        payload: The recorded fields, including the stored record id
    """
    agent: str
    action: str
    category: str = ""
    time_required: int = 0
    priority: int = 0
    flexibility: Optional[Flexibility] = None
    preferred_time: Optional[str] = None
    scheduled_time: Optional[str] = None
    deadline: Optional[datetime] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_noop(self) -> bool:
        return self.action == "none"

    def to_dict(self) -> Dict[str, Any]:
        """Convert response to dictionary for serialization."""
        if self.is_noop:
            return {"agent": self.agent, "action": self.action}

        result = {
            "agent": self.agent,
            "action": self.action,
            "category": self.category,
            "timeRequired": self.time_required,
            "priority": self.priority,
            "data": self.payload,
        }
        if self.flexibility is not None:
            result["flexibility"] = self.flexibility.value
        if self.preferred_time:
            result["preferredTime"] = self.preferred_time
        if self.scheduled_time:
            result["scheduledTime"] = self.scheduled_time
        if self.deadline:
            result["deadline"] = self.deadline.isoformat()
        return result

    @classmethod
    def unknown(cls) -> 'AgentResponse':
        """Neutral response for an intent no agent handles."""
        return cls(agent="unknown", action="none")


class BaseAgent(ABC):
    """
    Abstract base class for all domain agents.

    Provides common functionality for:
    - Document store access scoped to the agent's collection
    - Configuration management
    - Logging
    - Argument validation and numeric parsing

    Subclasses must set the class attributes kind, priority and collection,
    and implement:
    - process(): Record one event and return a scheduling hint
    - get_requirements(): Summarize recent history as a ScheduleRequirement

    Design Pattern: Template Method
    - Base class defines the skeleton of operations
    - Subclasses provide specific implementations
    """

    kind: ClassVar[AgentKind]
    priority: ClassVar[int]
    collection: ClassVar[str]

    def __init__(self, store, config=None):
        """
        Initialize the base agent.

        Args:
            store: Document store for persistence
            config: Config instance for settings/preferences
        """
        self.store = store
        self.config = config
        self.name = self.kind.display_name
        self.logger = logging.getLogger(f"agent.{self.kind.value}")
        self._initialized = False

    def initialize(self) -> bool:
        """
        Perform any required agent initialization.

        Override in subclasses if agent needs startup configuration.
        Returns True if initialization successful.
        """
        self._initialized = True
        self.logger.info(f"{self.name} initialized")
        return True

    def cleanup(self) -> None:
        """Clean up agent resources before shutdown."""
        self._initialized = False
        self.logger.info(f"{self.name} cleaned up")

    @abstractmethod
    def process(self, args: Dict[str, Any]) -> AgentResponse:
        """
        Record one event and return a scheduling hint.

        Args:
            args: Structured intent arguments from the classifier

        Returns:
            AgentResponse describing the recorded event

        Raises:
            InvalidArgumentError: if a required argument is missing or a
                numeric argument cannot be parsed
        """
        pass

    @abstractmethod
    def get_requirements(self) -> Optional[ScheduleRequirement]:
        """
        Summarize recent history as a scheduling requirement.

        Returns:
            ScheduleRequirement, or None if the agent has nothing to schedule
        """
        pass

    # =========================================================================
    # Store helpers
    # =========================================================================

    def record(self, data: Dict[str, Any]) -> int:
        """Stamp and write one record to this agent's collection."""
        document = dict(data)
        document.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
        return self.store.add(self.collection, document)

    def recent(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Most recent records of this agent's collection, newest first."""
        return self.store.query(
            self.collection, order_by="timestamp", descending=True, limit=limit
        )

    def remove(self, record_id: int) -> bool:
        """Delete one record; False if it did not exist."""
        removed = self.store.delete(self.collection, record_id)
        if removed:
            self.log_action("deleted_record", {"id": record_id})
        return removed

    # =========================================================================
    # Validation
    # =========================================================================

    def require(self, args: Dict[str, Any], required: List[str]) -> None:
        """
        Validate that required arguments are present and non-empty.

        Raises:
            InvalidArgumentError: naming every missing argument
        """
        missing = [
            name for name in required
            if args.get(name) is None or (isinstance(args.get(name), str) and not args[name].strip())
        ]
        if missing:
            raise InvalidArgumentError(
                f"Missing required arguments: {', '.join(missing)}",
                field=missing[0],
            )

    @staticmethod
    def parse_int(value: Any, field_name: str, default: Optional[int] = 0) -> Optional[int]:
        """Parse an integer argument; absent values fall back to default."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        if isinstance(value, bool):
            raise InvalidArgumentError(f"Invalid {field_name}: {value!r}", field=field_name)
        if isinstance(value, (int, float)):
            return int(value)
        try:
            return int(str(value).strip())
        except ValueError:
            raise InvalidArgumentError(f"Invalid {field_name}: {value!r}", field=field_name)

    @staticmethod
    def parse_float(value: Any, field_name: str, default: Optional[float] = None) -> Optional[float]:
        """Parse a decimal argument, tolerating currency symbols and separators."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        if isinstance(value, bool):
            raise InvalidArgumentError(f"Invalid {field_name}: {value!r}", field=field_name)
        if isinstance(value, (int, float)):
            return float(value)
        cleaned = str(value).strip().lstrip("$€£₹").replace(",", "")
        try:
            return float(cleaned)
        except ValueError:
            raise InvalidArgumentError(f"Invalid {field_name}: {value!r}", field=field_name)

    # =========================================================================
    # Logging / config
    # =========================================================================

    def log_action(self, action: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an action taken by this agent.

        Provides consistent action logging for debugging and audit trails.

        Args:
            action: Description of the action taken
            details: Optional additional details as key-value pairs
        """
        log_entry = {
            "agent": self.name,
            "action": action,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
        if details:
            log_entry["details"] = details

        self.logger.info(json.dumps(log_entry, default=str))

    def get_config_value(self, key: str, section: str = "preferences",
                         default: Any = None) -> Any:
        """Get a configuration value with fallback to default."""
        if self.config is None:
            return default
        return self.config.get(key, section=section, default=default)
