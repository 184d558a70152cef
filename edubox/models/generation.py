"""
Generated text records. Written once when a stream completes; never updated or deleted here.
- ai_content: AI Content Generator history
- generations: study planner output (plans, recommendations)
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Text, JSON
from edubox.database import Base


class GenerationColumns:
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)  # auth provider user id
    title = Column(String(255), nullable=True)
    content_type = Column(String(64), nullable=True)
    prompt = Column(Text, nullable=True)
    generated_text = Column(Text, nullable=False)
    model = Column(String(64), nullable=True)
    tokens = Column(Integer, nullable=True)
    metadata_ = Column("metadata", JSON, nullable=True)  # {"rawOptions": "<json>"}
    visibility = Column(String(16), nullable=False, default="private")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class AiContent(GenerationColumns, Base):
    __tablename__ = "ai_content"


class Generation(GenerationColumns, Base):
    __tablename__ = "generations"
