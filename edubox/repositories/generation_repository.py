"""
Generation records persistence (ai_content + generations). Insert-only from the API.
All operations are sync (called from background tasks or sync endpoints).
"""
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from edubox.models.generation import AiContent, Generation

GenerationModel = type[AiContent] | type[Generation]


def create_record(
    db: Session,
    model_cls: GenerationModel,
    *,
    user_id: str,
    title: str | None,
    content_type: str | None,
    prompt: str | None,
    generated_text: str,
    model: str | None,
    tokens: int | None = None,
    metadata: dict[str, Any] | None = None,
    visibility: str = "private",
) -> str:
    """Insert one record and commit. Returns the new id."""
    now = datetime.utcnow()
    row = model_cls(
        user_id=user_id,
        title=title,
        content_type=content_type,
        prompt=prompt,
        generated_text=generated_text,
        model=model,
        tokens=tokens,
        metadata_=metadata,
        visibility=visibility or "private",
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.commit()
    return row.id


def list_for_user(db: Session, model_cls: GenerationModel, user_id: str, limit: int | None = None) -> list:
    q = db.query(model_cls).filter(model_cls.user_id == user_id).order_by(desc(model_cls.created_at))
    if limit:
        q = q.limit(limit)
    return q.all()


def _start_of_today_utc() -> datetime:
    return datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)


def count_today(db: Session, model_cls: GenerationModel, user_id: str) -> int:
    return db.query(func.count(model_cls.id)).filter(
        model_cls.user_id == user_id,
        model_cls.created_at >= _start_of_today_utc(),
    ).scalar() or 0


class GenerationRepository:
    """Thin wrapper for dependency injection; delegates to module functions."""

    @staticmethod
    def create_record(db: Session, model_cls: GenerationModel, **fields: Any) -> str:
        return create_record(db, model_cls, **fields)

    @staticmethod
    def list_for_user(db: Session, model_cls: GenerationModel, user_id: str, limit: int | None = None) -> list:
        return list_for_user(db, model_cls, user_id, limit)

    @staticmethod
    def count_today(db: Session, model_cls: GenerationModel, user_id: str) -> int:
        return count_today(db, model_cls, user_id)
