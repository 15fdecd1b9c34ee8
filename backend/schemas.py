"""
Pydantic schemas for API request/response validation.

These schemas provide:
- Type safety for API inputs and outputs
- Automatic validation and error messages
- OpenAPI documentation generation

Design note: field names are camelCase to match the JSON the mobile
client already consumes.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


# =============================================================================
# Base Response Schemas
# =============================================================================

class AgentResponseSchema(BaseModel):
    """Scheduling hint returned by an agent for a routed event."""
    agent: str
    action: str
    category: Optional[str] = None
    timeRequired: Optional[int] = None
    priority: Optional[int] = None
    flexibility: Optional[str] = None
    preferredTime: Optional[str] = None
    scheduledTime: Optional[str] = None
    deadline: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class ErrorResponse(BaseModel):
    """Error response for API errors."""
    detail: str


# =============================================================================
# Schedule Schemas
# =============================================================================

class ScheduleItemSchema(BaseModel):
    """One time-slotted activity."""
    time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    duration: int = Field(..., ge=0)
    activity: str
    type: str
    priority: int
    flexible: bool
    agent: str
    addedByAI: bool = False
    alternativeTimes: Optional[List[str]] = None


class ScheduleResponse(BaseModel):
    """A generated daily schedule."""
    date: str
    generatedAt: datetime
    totalActivities: int
    schedule: List[ScheduleItemSchema]
    insights: Dict[str, Any]
    balanceScore: float = Field(..., ge=0, le=100)


class MergedScheduleResponse(ScheduleResponse):
    """A user schedule enriched with agent suggestions."""
    userActivities: int
    aiSuggestions: int
    suggestions: List[str]


class OptimizeScheduleRequest(BaseModel):
    """
    Request body for merging a user schedule.

    userSchedule is left untyped so a missing or malformed list gets the
    endpoint's own 400 message rather than a generic validation error.
    """
    userSchedule: Optional[Any] = None
    date: Optional[str] = None


# =============================================================================
# Chat Schemas
# =============================================================================

class ChatRequest(BaseModel):
    """
    Request body for the chat endpoint.

    Either free text in message, or a pre-classified intent with arguments.
    """
    message: str = Field(default="", max_length=2000)
    intent: Optional[str] = None
    arguments: Optional[Dict[str, Any]] = None


class ChatResponse(BaseModel):
    """Reply plus either the routed agent response or a schedule."""
    reply: str
    agentResponse: Optional[AgentResponseSchema] = None
    schedule: Optional[ScheduleResponse] = None


# =============================================================================
# Record Schemas
# =============================================================================

class TaskListResponse(BaseModel):
    tasks: List[Dict[str, Any]]


class WorkoutListResponse(BaseModel):
    workouts: List[Dict[str, Any]]


class EntryListResponse(BaseModel):
    entries: List[Dict[str, Any]]


class DeleteResponse(BaseModel):
    success: bool
    message: str
    id: int


# =============================================================================
# Activity Schemas
# =============================================================================

class ActivityItem(BaseModel):
    """One routed event from the coordinator's activity log."""
    timestamp: str
    agent: str
    response: Dict[str, Any]


class ActivityResponse(BaseModel):
    activity: List[ActivityItem]
    count: int
