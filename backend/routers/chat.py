"""
Chat API endpoint.

Accepts either free text, which the keyword classifier turns into an
intent, or a pre-classified intent with arguments from an external
classifier. Agent intents are routed through the Coordinator; the
generate_schedule intent returns a fresh schedule instead.
"""

import asyncio
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import get_classifier, get_coordinator
from backend.schemas import ChatRequest, ChatResponse
from mitra.agents import AgentResponse, Coordinator, Intent, KeywordIntentClassifier
from mitra.core.errors import InvalidArgumentError, MitraError, ScheduleFetchError

router = APIRouter(tags=["chat"])
logger = logging.getLogger("backend")

FALLBACK_REPLY = (
    "I'm not sure what you'd like me to do. I can log workouts, tasks, "
    "expenses, journal entries, medications and habits, or plan your day."
)


def _compose_reply(response: AgentResponse) -> str:
    """Short confirmation sentence for a routed event."""
    data: Dict[str, Any] = response.payload
    if response.action == "logged_workout":
        reply = f"Logged your {data.get('exercise')} workout."
        if data.get("is_pr"):
            reply += " New personal record!"
        return reply
    if response.action == "added_task":
        return f"Added \"{data.get('task')}\" to your to-dos ({data.get('priority')} priority)."
    if response.action == "logged_transaction":
        return f"Recorded {data.get('type')} of {data.get('amount'):.2f} for {data.get('item')}."
    if response.action == "wrote_journal":
        return "Saved your journal entry."
    if response.action == "scheduled_medication":
        return f"Scheduled {data.get('medicine')} at {response.scheduled_time} every day."
    if response.action == "added_habit":
        return f"Tracking your new habit: {data.get('habit')}."
    return FALLBACK_REPLY


@router.post("/chat", response_model=ChatResponse, response_model_exclude_unset=True)
async def chat(
    request: ChatRequest,
    coordinator: Coordinator = Depends(get_coordinator),
    classifier: KeywordIntentClassifier = Depends(get_classifier),
):
    """
    Route one message to the agents.

    Examples:
    - {"message": "Spent $12 on lunch"}
    - {"message": "Plan my day"}
    - {"intent": "log_workout", "arguments": {"exercise": "squat", "sets": "5"}}

    Returns {reply, agentResponse} for agent intents, {reply, schedule} for
    generate_schedule, and {reply} alone when no intent was recognized.
    """
    if request.intent:
        intent_name, arguments = request.intent, dict(request.arguments or {})
    else:
        classified = classifier.classify(request.message)
        if classified is None:
            return ChatResponse(reply=FALLBACK_REPLY)
        intent_name, arguments = classified.intent_name, classified.arguments

    try:
        if intent_name == Intent.GENERATE_SCHEDULE.value:
            schedule = await coordinator.generate_schedule(arguments.get("date"))
            return ChatResponse(
                reply=f"Here's your optimized schedule for {schedule.date} "
                      f"({schedule.total_activities} activities).",
                schedule=schedule.to_dict(),
            )

        response = await asyncio.to_thread(coordinator.route, intent_name, arguments)

    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ScheduleFetchError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except MitraError as e:
        logger.error("Chat request failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to process request: {e}")

    if response.is_noop:
        return ChatResponse(reply=FALLBACK_REPLY, agentResponse=response.to_dict())
    return ChatResponse(reply=_compose_reply(response), agentResponse=response.to_dict())
