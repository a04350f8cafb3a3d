"""
Cooking Path Controller

Builds multi-recipe cooking timelines and tracks live progress.

Session Lifecycle:
1. Client posts the selected recipes (with serving adjustments)
2. Recipes are adjusted and a schedule is generated: Claude first when
   configured, the built-in stagger planner otherwise or on failure
3. Client toggles the timer; the server-side clock ticks every second
4. Client marks steps complete and polls the session for live status
5. Client regenerates, resets, or deletes the session when done

Why In-Memory Sessions?
- Progress is session-only and never persisted
- Each session owns a running ticker task that must be cancelled
  when the session goes away, which ties it to this process anyway
"""

import logging
import uuid
from functools import partial

from fastapi import APIRouter, HTTPException
from starlette.concurrency import run_in_threadpool

from cooking_path.config import get_settings
from cooking_path.errors import EmptySelection, InfeasibleSchedule
from cooking_path.models.entities import CookingSchedule
from cooking_path.models.schemas import (
    AdjustRequest,
    AdjustResponse,
    ProgressResponse,
    RecipeResponse,
    ScheduleRequest,
    ScheduleResponse,
    SessionResponse,
    StepProgressResponse,
)
from cooking_path.services.claude import ClaudeSchedulePlanner
from cooking_path.services.scheduler import generate_schedule
from cooking_path.services.servings import adjust_recipe, adjust_recipes, describe_adjustment
from cooking_path.services.session import CookingPathSession
from cooking_path.services.timeline import format_minutes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cooking-path", tags=["cooking-path"])

# In-memory session storage
# Key: session_id, Value: CookingPathSession instance
active_sessions: dict[str, CookingPathSession] = {}


def _get_planner():
    """Claude planner when an API key is configured, else None (fallback only)."""
    settings = get_settings()
    if not settings.claude_available:
        return None
    return ClaudeSchedulePlanner()


async def _build_schedule(request: ScheduleRequest) -> CookingSchedule:
    """
    Adjust the recipes and generate a schedule.

    Generation runs in a worker thread because the Claude call blocks.
    Maps scheduling errors to HTTP errors.
    """
    recipes = adjust_recipes(request.to_entities(), request.serving_adjustments)
    try:
        return await run_in_threadpool(
            partial(generate_schedule, recipes, request.to_config(), planner=_get_planner())
        )
    except EmptySelection as e:
        logger.info(f"Schedule request rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except InfeasibleSchedule as e:
        logger.info(f"Schedule request rejected: {e}")
        raise HTTPException(
            status_code=422,
            detail={
                "message": str(e),
                "shortfall_minutes": e.shortfall_minutes,
                "available_minutes": e.available_minutes,
                "required_minutes": e.required_minutes,
            },
        )


def _get_session(session_id: str) -> CookingPathSession:
    if session_id not in active_sessions:
        raise HTTPException(status_code=404, detail="Session not found")
    return active_sessions[session_id]


def _progress_response(session: CookingPathSession) -> ProgressResponse:
    """Read model of the session's live progress."""
    tracker = session.tracker
    state = tracker.snapshot()
    steps = session.schedule.steps
    current = tracker.current_step

    return ProgressResponse(
        elapsed_seconds=state.elapsed_seconds,
        elapsed_display=tracker.elapsed_display,
        is_timer_active=state.is_timer_active,
        current_step_index=state.current_step_index,
        current_step_id=current.id if current else None,
        completed_step_ids=[s.id for s in steps if s.id in state.completed_step_ids],
        remaining_minutes=tracker.remaining_minutes,
        remaining_display=format_minutes(tracker.remaining_minutes),
        progress_percent=tracker.progress_percent,
        steps=[
            StepProgressResponse(
                id=step.id,
                status=tracker.step_status(step).value,
                time_until=tracker.time_until(step),
            )
            for step in steps
        ],
    )


def _session_response(session: CookingPathSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        schedule=ScheduleResponse.from_entity(session.schedule),
        progress=_progress_response(session),
    )


@router.post("/adjust", response_model=AdjustResponse)
def adjust_servings(request: AdjustRequest):
    """
    Preview a recipe scaled to a different serving size.

    Quantities are scaled, the serving count recomputed and prep time
    corrected for large or small batches. Cook time is unchanged.
    """
    adjusted = adjust_recipe(request.recipe.to_entity(), request.factor)
    return AdjustResponse(
        recipe=RecipeResponse.from_entity(adjusted),
        note=describe_adjustment(adjusted),
    )


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(request: ScheduleRequest):
    """
    Generate a cooking path and start a session for it.

    The timer starts paused. Returns the schedule and its (empty)
    progress along with the session_id for later requests.
    """
    schedule = await _build_schedule(request)

    session_id = str(uuid.uuid4())
    session = CookingPathSession(session_id, schedule, tick_interval=get_settings().tick_interval_seconds)
    active_sessions[session_id] = session
    logger.info(f"Session {session_id}: {len(schedule.recipes)} recipes, {schedule.source} schedule")

    return _session_response(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    """Current schedule with live step status. Poll this while cooking."""
    return _session_response(_get_session(session_id))


@router.post("/sessions/{session_id}/schedule", response_model=SessionResponse)
async def regenerate_schedule(session_id: str, request: ScheduleRequest):
    """
    Replace the session's schedule with a newly generated one.

    Progress starts over. If generation fails the old schedule and its
    progress are kept.
    """
    session = _get_session(session_id)
    await session.regenerate(partial(_build_schedule, request))
    return _session_response(session)


@router.post("/sessions/{session_id}/timer", response_model=ProgressResponse)
async def toggle_timer(session_id: str):
    """Start, pause or resume the cooking clock."""
    session = _get_session(session_id)
    session.toggle_timer()
    return _progress_response(session)


@router.post("/sessions/{session_id}/steps/{step_id}/complete", response_model=ProgressResponse)
async def complete_step(session_id: str, step_id: str):
    """Mark a step done; moves to the next step while the timer runs."""
    session = _get_session(session_id)
    if session.schedule.get_step(step_id) is None:
        raise HTTPException(status_code=404, detail="Step not found")

    session.mark_step_complete(step_id)
    return _progress_response(session)


@router.post("/sessions/{session_id}/reset", response_model=ProgressResponse)
async def reset_progress(session_id: str):
    """Stop the clock and clear completed steps."""
    session = _get_session(session_id)
    session.reset()
    return _progress_response(session)


@router.delete("/sessions/{session_id}", status_code=204)
async def end_session(session_id: str):
    """End a session and stop its clock."""
    session = active_sessions.pop(session_id, None)
    if session is not None:
        session.close()


def close_all_sessions():
    """Stop every session's clock. Called on application shutdown."""
    for session in active_sessions.values():
        session.close()
    active_sessions.clear()
