"""
Stored record API endpoints.

Read-only listings of each agent's collection, newest first, plus
deletion of finance entries.
"""

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import get_coordinator
from backend.schemas import (
    DeleteResponse,
    EntryListResponse,
    TaskListResponse,
    WorkoutListResponse,
)
from mitra.agents import Coordinator
from mitra.core.errors import StorageError
from mitra.core.models import AgentKind

router = APIRouter(tags=["records"])

WORKOUT_LIMIT = 20
FINANCE_LIMIT = 50


def _recent(coordinator: Coordinator, kind: AgentKind, limit=None):
    try:
        return coordinator.get_agent(kind).recent(limit)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/tasks", response_model=TaskListResponse)
async def list_tasks(coordinator: Coordinator = Depends(get_coordinator)):
    """All to-dos, newest first."""
    return {"tasks": _recent(coordinator, AgentKind.TASK)}


@router.get("/workouts", response_model=WorkoutListResponse)
async def list_workouts(coordinator: Coordinator = Depends(get_coordinator)):
    """The 20 most recent workouts."""
    return {"workouts": _recent(coordinator, AgentKind.FITNESS, WORKOUT_LIMIT)}


@router.get("/finance", response_model=EntryListResponse)
async def list_finance(coordinator: Coordinator = Depends(get_coordinator)):
    """The 50 most recent finance entries."""
    return {"entries": _recent(coordinator, AgentKind.FINANCE, FINANCE_LIMIT)}


@router.delete("/finance/{entry_id}", response_model=DeleteResponse)
async def delete_finance(entry_id: int, coordinator: Coordinator = Depends(get_coordinator)):
    """Delete one finance entry."""
    try:
        removed = coordinator.get_agent(AgentKind.FINANCE).remove(entry_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not removed:
        raise HTTPException(status_code=404, detail=f"Finance entry {entry_id} not found")
    return DeleteResponse(success=True, message="Finance entry deleted", id=entry_id)


@router.get("/journal", response_model=EntryListResponse)
async def list_journal(coordinator: Coordinator = Depends(get_coordinator)):
    """All journal entries, newest first."""
    return {"entries": _recent(coordinator, AgentKind.JOURNAL)}
