from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from edubox.schemas.base import CamelModel


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _dict_or_none(value: Any) -> dict[str, Any] | None:
    # Malformed options are ignored, not rejected
    return value if isinstance(value, dict) else None


# ---- Content generator ----

class AiContentGenerateRequest(CamelModel):
    # Optional at the schema level so the handler can answer 400 "prompt is required"
    prompt: Any = None
    content_type: str | None = None
    options: dict[str, Any] | None = None
    user_id: Any = Field(None, description="Ignored; identity comes from the session token")

    @field_validator("content_type", mode="before")
    @classmethod
    def ignore_malformed_content_type(cls, value: Any) -> str | None:
        return _str_or_none(value)

    @field_validator("options", mode="before")
    @classmethod
    def ignore_malformed_options(cls, value: Any) -> dict[str, Any] | None:
        return _dict_or_none(value)


class GenerationOut(CamelModel):
    id: str
    title: str | None = None
    content_type: str | None = None
    prompt: str | None = None
    generated_text: str
    model: str | None = None
    visibility: str
    created_at: datetime


class GenerationHistoryResponse(CamelModel):
    items: list[GenerationOut]
    count_today: int = 0


# ---- Study planner ----

class AiStudyGenerateRequest(CamelModel):
    context: str | None = None
    options: dict[str, Any] | None = None
    user_id: Any = Field(None, description="Ignored; identity comes from the session token")

    @field_validator("context", mode="before")
    @classmethod
    def ignore_malformed_context(cls, value: Any) -> str | None:
        return _str_or_none(value)

    @field_validator("options", mode="before")
    @classmethod
    def ignore_malformed_options(cls, value: Any) -> dict[str, Any] | None:
        return _dict_or_none(value)


# ---- Chat suggestions ----

class ChatSuggestionsRequest(CamelModel):
    context_summary: Any = None


class ChatSuggestionsResponse(CamelModel):
    suggestions: list[str]


# ---- Entitlements ----

class FeatureAccessResponse(CamelModel):
    feature: str
    plan: str
    has_access: bool
    usage: int = 0
    limit: int = 0
    has_reached_limit: bool = False
