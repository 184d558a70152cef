from edubox.models.user import User, UserPlan
from edubox.models.generation import AiContent, Generation
from edubox.models.file import StoredFile
from edubox.models.planner import Course, Assignment, Event

__all__ = [
    "User", "UserPlan", "AiContent", "Generation", "StoredFile",
    "Course", "Assignment", "Event",
]
