"""
AI Content Generator:
- POST /api/ai-content/generate: streamed text; saved to ai_content when signed in
- GET /api/ai-content/history: caller's latest generations (signed in)
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, sessionmaker

from edubox.auth import require_identity, resolve_identity
from edubox.config import get_settings
from edubox.database import get_db, get_session_factory
from edubox.models.generation import AiContent
from edubox.repositories.generation_repository import GenerationRepository
from edubox.schemas.ai import AiContentGenerateRequest, GenerationHistoryResponse, GenerationOut
from edubox.schemas.identity import Identity
from edubox.services.ai_service import generate_text_stream
from edubox.services.ai_stream_service import StreamStartError, stream_text_response
from edubox.services.generation_service import GenerationSink, PendingGeneration
from edubox.services.prompts import build_content_prompt, content_record_title, raw_options_metadata

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-content", tags=["ai-content"])

CONTENT_TEMPERATURE = 0.7


def get_generation_sink(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> GenerationSink:
    return GenerationSink(session_factory, repository=GenerationRepository())


@router.post("/generate")
async def generate_content(
    body: AiContentGenerateRequest,
    identity: Identity = Depends(resolve_identity),
    sink: GenerationSink = Depends(get_generation_sink),
):
    """
    Stream generated content as text/plain. Anonymous callers get the stream but nothing is saved;
    signed-in callers get one ai_content record once the stream completes. body.userId is ignored.
    """
    if not body.prompt or not isinstance(body.prompt, str):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="prompt is required")

    model_name = get_settings().gemini_model
    built = build_content_prompt(body.prompt, body.content_type, body.options)

    pending = None
    if identity.is_authenticated:
        pending = PendingGeneration(
            model_cls=AiContent,
            user_id=identity.user_id,
            title=content_record_title(body.content_type, body.options),
            content_type=body.content_type or "ai_content",
            prompt=body.prompt,
            model=model_name,
            metadata=raw_options_metadata(body.options),
        )

    chunks = generate_text_stream(
        built.system_instruction,
        built.prompt,
        temperature=CONTENT_TEMPERATURE,
        model=model_name,
    )
    try:
        return await stream_text_response(chunks, sink.on_stream_complete(pending))
    except StreamStartError as e:
        logger.error("AI content generation failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate content",
        ) from e


@router.get("/history", response_model=GenerationHistoryResponse)
def content_history(
    limit: int = Query(10, ge=1, le=100),
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    """Latest ai_content records for the caller, newest first, plus today's count (plan limits)."""
    repo = GenerationRepository()
    rows = repo.list_for_user(db, AiContent, identity.user_id, limit)
    return GenerationHistoryResponse(
        items=[GenerationOut.model_validate(r, from_attributes=True) for r in rows],
        count_today=repo.count_today(db, AiContent, identity.user_id),
    )
