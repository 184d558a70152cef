"""
Chat helpers:
- POST /api/chat/suggestions: up to 5 starter questions, cached per (user, context) for 6 hours
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from edubox.auth import resolve_identity
from edubox.core.redis import get_redis_client
from edubox.schemas.ai import ChatSuggestionsRequest, ChatSuggestionsResponse
from edubox.schemas.identity import Identity
from edubox.services.ai_service import generate_text
from edubox.services.json_extract import extract_suggestions
from edubox.services.prompts import build_suggestions_prompt
from edubox.services.suggestion_cache import (
    InMemorySuggestionCache,
    RedisSuggestionCache,
    SuggestionCache,
    suggestion_cache_key,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])

SUGGESTIONS_TEMPERATURE = 0.4
SUGGESTIONS_MAX_RETRIES = 2

_process_cache = InMemorySuggestionCache()


async def get_suggestion_cache() -> SuggestionCache:
    """Redis-backed cache when Redis is configured and reachable, else the per-process cache."""
    client = await get_redis_client()
    return RedisSuggestionCache(client) if client is not None else _process_cache


async def _optional_suggestions_body(request: Request) -> ChatSuggestionsRequest | None:
    """Unparseable or non-object bodies mean "no context", not a 400."""
    try:
        return ChatSuggestionsRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        return None


@router.post("/suggestions", response_model=ChatSuggestionsResponse)
async def chat_suggestions(
    body: ChatSuggestionsRequest | None = Depends(_optional_suggestions_body),
    identity: Identity = Depends(resolve_identity),
    cache: SuggestionCache = Depends(get_suggestion_cache),
):
    context_summary = body.context_summary if body else None
    key = suggestion_cache_key(identity.user_id, context_summary)

    cached = await cache.get(key)
    if cached is not None:
        return ChatSuggestionsResponse(suggestions=cached)

    built = build_suggestions_prompt(str(context_summary) if context_summary else None)
    try:
        raw = await run_in_threadpool(
            generate_text,
            built.system_instruction,
            built.prompt,
            temperature=SUGGESTIONS_TEMPERATURE,
            max_retries=SUGGESTIONS_MAX_RETRIES,
        )
    except Exception:
        logger.exception("Chat suggestions generation failed")
        return JSONResponse(status_code=500, content={"suggestions": []})

    suggestions = extract_suggestions(raw or "")
    # Cache even an empty result so degenerate contexts do not hit the model every time
    await cache.set(key, suggestions)
    return ChatSuggestionsResponse(suggestions=suggestions)
