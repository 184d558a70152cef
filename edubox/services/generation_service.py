"""
Persistence sink for completed generations. Best-effort: a failed write is logged and dropped,
never turned into an error for a generation the client already received.
"""
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import sessionmaker

from edubox.repositories.generation_repository import GenerationModel, GenerationRepository
from edubox.services.ai_stream_service import StreamRelay

logger = logging.getLogger(__name__)


@dataclass
class PendingGeneration:
    """Everything known about a record before the stream ends; generated_text is filled in on completion."""
    model_cls: GenerationModel
    user_id: str
    title: str | None
    content_type: str | None
    prompt: str | None
    model: str | None
    metadata: dict[str, Any] | None = None
    visibility: str = "private"
    tokens: int | None = None


class GenerationSink:
    def __init__(self, session_factory: sessionmaker, repository: GenerationRepository | None = None):
        self._session_factory = session_factory
        self._repo = repository or GenerationRepository()

    def persist(self, pending: PendingGeneration, generated_text: str) -> str | None:
        """Write one record in a fresh session. Returns the id, or None if the write failed."""
        db = self._session_factory()
        try:
            return self._repo.create_record(
                db,
                pending.model_cls,
                user_id=pending.user_id,
                title=pending.title,
                content_type=pending.content_type,
                prompt=pending.prompt,
                generated_text=generated_text,
                model=pending.model,
                tokens=pending.tokens,
                metadata=pending.metadata,
                visibility=pending.visibility,
            )
        except Exception as e:
            logger.error(
                "Failed to persist %s record for user %s: %s",
                pending.model_cls.__tablename__, pending.user_id, e,
            )
            db.rollback()
            return None
        finally:
            db.close()

    def on_stream_complete(self, pending: PendingGeneration | None):
        """Completion callback for stream_text_response; None when nothing should be saved."""
        if pending is None:
            return None

        def _save(relay: StreamRelay) -> None:
            self.persist(pending, relay.text)

        return _save
