"""
AI Study Assistant:
- POST /api/ai-study/generate: streamed study plan (or a short plan title); plans saved to generations
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from edubox.auth import resolve_identity
from edubox.config import get_settings
from edubox.models.generation import Generation
from edubox.routers.ai_content import get_generation_sink
from edubox.schemas.ai import AiStudyGenerateRequest
from edubox.schemas.identity import Identity
from edubox.services.ai_service import generate_text_stream
from edubox.services.ai_stream_service import StreamStartError, stream_text_response
from edubox.services.generation_service import GenerationSink, PendingGeneration
from edubox.services.prompts import (
    STUDY_PLAN_TITLE,
    build_study_prompt,
    raw_options_metadata,
    study_record_content_type,
    study_record_title,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-study", tags=["ai-study"])

STUDY_TEMPERATURE = 0.3


@router.post("/generate")
async def generate_study_plan(
    body: AiStudyGenerateRequest,
    identity: Identity = Depends(resolve_identity),
    sink: GenerationSink = Depends(get_generation_sink),
):
    """
    Stream a study plan as text/plain. options.contentType == "study_plan_title" asks for a 3-8 word
    title instead and is never saved. Plans are saved only for signed-in callers.
    """
    options = body.options or {}
    model_name = get_settings().gemini_model
    built = build_study_prompt(body.context, options)

    pending = None
    if identity.is_authenticated and options.get("contentType") != STUDY_PLAN_TITLE:
        pending = PendingGeneration(
            model_cls=Generation,
            user_id=identity.user_id,
            title=study_record_title(options),
            content_type=study_record_content_type(options),
            prompt=built.prompt,
            model=model_name,
            metadata=raw_options_metadata(body.options),
        )

    chunks = generate_text_stream(
        built.system_instruction,
        built.prompt,
        temperature=STUDY_TEMPERATURE,
        model=model_name,
    )
    try:
        return await stream_text_response(chunks, sink.on_stream_complete(pending))
    except StreamStartError as e:
        logger.error("AI study generation failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate study recommendations",
        ) from e
