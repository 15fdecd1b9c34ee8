"""
Core module for the Mitra coordinator
Contains the document store, configuration, errors and schedule models
"""

from .config import Config
from .database import DocumentStore, SQLiteDocumentStore, PostgreSQLDocumentStore, get_store
from .errors import (
    MitraError,
    InvalidArgumentError,
    UnsupportedIntentError,
    StorageError,
    ScheduleFetchError,
)
from .models import (
    AgentKind,
    COORDINATOR_NAME,
    PendingTask,
    MedicationDose,
    ScheduleItem,
    ScheduleRequirement,
    Schedule,
    MergedSchedule,
    parse_clock,
    format_clock,
)

__all__ = [
    'Config', 'DocumentStore', 'SQLiteDocumentStore', 'PostgreSQLDocumentStore', 'get_store',
    'AgentKind', 'COORDINATOR_NAME', 'PendingTask', 'MedicationDose',
    'MitraError', 'InvalidArgumentError', 'UnsupportedIntentError', 'StorageError',
    'ScheduleFetchError', 'ScheduleItem', 'ScheduleRequirement', 'Schedule',
    'MergedSchedule', 'parse_clock', 'format_clock',
]
