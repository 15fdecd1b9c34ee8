"""
Schedule API endpoints.

Clean-slate generation from agent requirements, and merging of a
user-supplied schedule with agent suggestions.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.dependencies import get_coordinator
from backend.schemas import MergedScheduleResponse, OptimizeScheduleRequest, ScheduleResponse
from mitra.agents import Coordinator
from mitra.core.errors import InvalidArgumentError, ScheduleFetchError
from mitra.core.models import ScheduleItem

router = APIRouter(tags=["schedule"])
logger = logging.getLogger("backend")


@router.get("/schedule", response_model=ScheduleResponse, response_model_exclude_unset=True)
async def get_schedule(
    date: Optional[str] = Query(None, description="Day to plan (YYYY-MM-DD), defaults to today"),
    coordinator: Coordinator = Depends(get_coordinator),
):
    """
    Generate a schedule for the day from every agent's requirements.

    Medications are pinned to their fixed times, high-priority tasks fill the
    morning, and workout, reflection and lunch blocks are added around them.
    """
    try:
        schedule = await coordinator.generate_schedule(date)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ScheduleFetchError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return schedule.to_dict()


@router.post("/optimize-schedule", response_model=MergedScheduleResponse,
             response_model_exclude_unset=True)
async def optimize_schedule(
    request: OptimizeScheduleRequest,
    coordinator: Coordinator = Depends(get_coordinator),
):
    """
    Merge a user schedule with medications, a workout and urgent tasks.

    User items are never moved; conflicts are reported as suggestions.
    """
    if not isinstance(request.userSchedule, list):
        raise HTTPException(status_code=400, detail="Invalid user schedule provided")

    try:
        items = [ScheduleItem.from_dict(raw, default_type="user") for raw in request.userSchedule]
        merged = await coordinator.merge_user_schedule(items, request.date)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=f"Invalid user schedule provided: {e}")
    except ScheduleFetchError as e:
        raise HTTPException(status_code=500, detail=str(e))

    logger.info("Merged schedule: %d user items, %d added",
                merged.user_activities, merged.ai_suggestions)
    return merged.to_dict()
