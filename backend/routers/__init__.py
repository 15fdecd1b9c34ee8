"""
API routers for the Mitra backend.

Each router handles a specific concern:
- chat: Intent routing and schedule requests from chat messages
- schedule: Schedule generation and user-schedule merge
- records: Stored records per agent collection
"""

from .chat import router as chat_router
from .schedule import router as schedule_router
from .records import router as records_router

__all__ = [
    'chat_router',
    'schedule_router',
    'records_router',
]
