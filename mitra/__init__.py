"""
Mitra - multi-agent life coordinator.

Routes classified life events (workouts, tasks, expenses, journal entries,
medications, habits) to domain agents and builds balanced daily schedules
from what they have recorded.
"""

__version__ = "1.0.0"
