"""
Hosted model calls for EduBox.
- Gemini (google-genai; Developer API key or Vertex AI) for content, study, suggestions, PDF parsing.
- Groq for the schedule optimizer.
Thin wrappers only: no prompt logic here (see prompts.py).
"""
import logging
from pathlib import Path
from typing import Any, Iterator

from edubox.config import get_settings

logger = logging.getLogger(__name__)

# Lazy clients to avoid import/credentials errors at import time
_gemini_client = None
_groq_client = None


def _get_client():
    global _gemini_client
    if _gemini_client is not None:
        return _gemini_client
    try:
        from google import genai
        from google.oauth2 import service_account
    except ImportError as e:
        raise RuntimeError(
            "Google GenAI not installed. pip install google-genai google-auth"
        ) from e

    settings = get_settings()
    if settings.gemini_api_key:
        _gemini_client = genai.Client(api_key=settings.gemini_api_key)
        return _gemini_client
    if not settings.vertex_project_id:
        raise RuntimeError("Neither gemini_api_key nor vertex_project_id is configured")

    credentials = None
    if settings.vertex_credentials_path:
        path = Path(settings.vertex_credentials_path)
        if path.is_file():
            credentials = service_account.Credentials.from_service_account_file(
                str(path),
                scopes=["https://www.googleapis.com/auth/cloud-platform"],
            )

    _gemini_client = genai.Client(
        vertexai=True,
        project=settings.vertex_project_id,
        location=settings.vertex_location,
        credentials=credentials,
    )
    return _gemini_client


def _get_groq_client():
    global _groq_client
    if _groq_client is not None:
        return _groq_client
    from groq import Groq

    settings = get_settings()
    if not settings.groq_api_key:
        raise RuntimeError("groq_api_key is not configured")
    _groq_client = Groq(api_key=settings.groq_api_key)
    return _groq_client


def _config(system_instruction: str | None, temperature: float | None, max_output_tokens: int | None = None):
    from google.genai.types import GenerateContentConfig

    return GenerateContentConfig(
        system_instruction=system_instruction,
        temperature=temperature,
        max_output_tokens=max_output_tokens,
    )


def _chunk_text(chunk: Any) -> str | None:
    if not chunk:
        return None
    text = getattr(chunk, "text", None)
    if text:
        return text
    if chunk.candidates:
        c = chunk.candidates[0]
        if c.content and c.content.parts:
            return getattr(c.content.parts[0], "text", None)
    return None


def generate_text_stream(
    system_instruction: str | None,
    prompt: str,
    *,
    temperature: float,
    model: str | None = None,
) -> Iterator[str]:
    """
    Stream text from Gemini. Yields text deltas as they arrive; blocking, so run it off the event loop.
    Caller accumulates the full text (streaming does not reliably report usage).
    """
    client = _get_client()
    stream = client.models.generate_content_stream(
        model=model or get_settings().gemini_model,
        contents=prompt,
        config=_config(system_instruction, temperature),
    )
    for chunk in stream:
        text = _chunk_text(chunk)
        if text:
            yield text


def generate_text(
    system_instruction: str | None,
    prompt: str,
    *,
    temperature: float | None = None,
    model: str | None = None,
    max_retries: int = 0,
) -> str:
    """
    Single-shot Gemini call. Returns the full text ("" when the model returns no text).
    Retries up to max_retries times on any error, then re-raises the last one.
    """
    client = _get_client()
    attempts = max(0, max_retries) + 1
    for attempt in range(1, attempts + 1):
        try:
            response = client.models.generate_content(
                model=model or get_settings().gemini_model,
                contents=prompt,
                config=_config(system_instruction, temperature),
            )
            return (_chunk_text(response) or "").strip()
        except Exception as e:
            if attempt >= attempts:
                raise
            logger.warning("Gemini call failed (attempt %d/%d): %s", attempt, attempts, e)
    return ""


def generate_schedule_completion(prompt: str, *, temperature: float = 0.3, max_tokens: int = 2000) -> str | None:
    """Groq chat completion for the schedule optimizer. Returns the message content (None if empty)."""
    client = _get_groq_client()
    completion = client.chat.completions.create(
        messages=[{"role": "user", "content": prompt}],
        model=get_settings().groq_model,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    if not completion.choices:
        return None
    return completion.choices[0].message.content
