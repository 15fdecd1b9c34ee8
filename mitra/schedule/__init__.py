"""
Schedule module for the Mitra coordinator
Pure placement, merge and scoring functions plus Rich output
"""

from .builder import build_daily_schedule, sort_items
from .merger import merge_user_schedule, find_open_slot, CANDIDATE_SLOTS
from .scoring import calculate_balance, generate_insights
from .formatter import ScheduleFormatter

__all__ = [
    'build_daily_schedule', 'sort_items',
    'merge_user_schedule', 'find_open_slot', 'CANDIDATE_SLOTS',
    'calculate_balance', 'generate_insights',
    'ScheduleFormatter',
]
