from typing import Any

from edubox.schemas.base import CamelModel


def _is_blank(value: Any) -> bool:
    # Empty lists and objects count as provided (a week with no events is valid input)
    if value is None:
        return True
    return isinstance(value, (bool, int, float, str)) and not value


class ScheduleOptimizeRequest(CamelModel):
    # All five are required; presence is checked in the handler so the answer is a 400, not a 422
    schedule: Any = None
    assignments: Any = None
    events: Any = None
    tasks: Any = None
    study_sessions: Any = None

    def missing_fields(self) -> list[str]:
        return [
            name for name in ("schedule", "assignments", "events", "tasks", "study_sessions")
            if _is_blank(getattr(self, name))
        ]


class OptimizedScheduleResponse(CamelModel):
    schedule_items: list[Any]
    optimized: bool = True
    optimization_date: str
    notes: Any


class MenuExtractionResponse(CamelModel):
    success: bool = True
    menu_items: list[dict[str, Any]]
    extracted_text: str


class ScheduleExtractionResponse(CamelModel):
    success: bool = True
    schedule_items: list[dict[str, Any]]
    extracted_text: str
    type: str | None = None
