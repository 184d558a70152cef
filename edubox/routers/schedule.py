"""
Planner:
- POST /api/schedule-optimize: AI-optimized schedule from the student's planner data (Groq)
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from edubox.schemas.schedule import OptimizedScheduleResponse, ScheduleOptimizeRequest
from edubox.services.ai_service import generate_schedule_completion
from edubox.services.json_extract import parse_json_object
from edubox.services.prompts import build_schedule_prompt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/schedule-optimize", tags=["planner"])

DEFAULT_NOTES = "Schedule optimized using AI assistance"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.post("", response_model=OptimizedScheduleResponse)
async def optimize_schedule(body: ScheduleOptimizeRequest):
    if body.missing_fields():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required schedule data")

    prompt = build_schedule_prompt(
        body.schedule, body.assignments, body.events, body.tasks, body.study_sessions,
    )
    try:
        response = await run_in_threadpool(generate_schedule_completion, prompt)
        if not response:
            raise ValueError("No response from AI model")
        try:
            data = parse_json_object(response)
        except ValueError:
            logger.error("Raw AI response that failed to parse: %s", response)
            raise
        schedule_items = data.get("scheduleItems")
        if not isinstance(schedule_items, list):
            raise ValueError("AI response missing required scheduleItems array")
    except Exception as e:
        logger.exception("Error optimizing schedule")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "Failed to optimize schedule",
        ) from e

    return OptimizedScheduleResponse(
        schedule_items=schedule_items,
        optimized=True,
        optimization_date=_utc_now_iso(),
        notes=data.get("notes") or DEFAULT_NOTES,
    )
