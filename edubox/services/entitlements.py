"""
Plan entitlements: a per-plan lookup table plus today's usage count.
- FREE: AI content generation 25/day; no analytics or unlimited storage
- STARTER: 100/day; course analytics
- PRO: unlimited (limit 0 = no cap); everything
"""
from dataclasses import dataclass

from sqlalchemy.orm import Session

from edubox.models.generation import AiContent, Generation
from edubox.models.user import UserPlan
from edubox.repositories.generation_repository import count_today
from edubox.repositories.user_context_repository import get_user_by_clerk_id

AI_CONTENT_GENERATION = "ai-content-generation"
AI_STUDY_ASSISTANT = "ai-study-assistant"
COURSE_ANALYTICS = "course-analytics"
UNLIMITED_STORAGE = "unlimited-storage"

# feature -> daily allocation (0 = unlimited); a feature absent from a plan is not granted
PLAN_FEATURES: dict[UserPlan, dict[str, int]] = {
    UserPlan.FREE: {
        AI_CONTENT_GENERATION: 25,
        AI_STUDY_ASSISTANT: 10,
    },
    UserPlan.STARTER: {
        AI_CONTENT_GENERATION: 100,
        AI_STUDY_ASSISTANT: 50,
        COURSE_ANALYTICS: 0,
    },
    UserPlan.PRO: {
        AI_CONTENT_GENERATION: 0,
        AI_STUDY_ASSISTANT: 0,
        COURSE_ANALYTICS: 0,
        UNLIMITED_STORAGE: 0,
    },
}

# Metered features and the table their usage is counted in
_USAGE_TABLES = {
    AI_CONTENT_GENERATION: AiContent,
    AI_STUDY_ASSISTANT: Generation,
}


@dataclass(frozen=True)
class FeatureAccess:
    feature: str
    plan: str
    has_access: bool
    usage: int
    limit: int
    has_reached_limit: bool


def resolve_plan(raw: str | None) -> UserPlan:
    try:
        return UserPlan(raw or UserPlan.FREE.value)
    except ValueError:
        return UserPlan.FREE


def evaluate_access(plan: UserPlan, feature: str, usage: int) -> FeatureAccess:
    allocation = PLAN_FEATURES[plan].get(feature)
    granted = allocation is not None
    limit = allocation or 0
    reached = granted and limit > 0 and usage >= limit
    return FeatureAccess(
        feature=feature,
        plan=plan.value,
        has_access=granted and not reached,
        usage=usage,
        limit=limit,
        has_reached_limit=reached,
    )


def check_feature_access(db: Session, user_id: str, feature: str) -> FeatureAccess:
    user = get_user_by_clerk_id(db, user_id)
    plan = resolve_plan(user.plan if user else None)
    table = _USAGE_TABLES.get(feature)
    usage = count_today(db, table, user_id) if table is not None else 0
    return evaluate_access(plan, feature, usage)
