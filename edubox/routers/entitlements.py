"""
Plan gating:
- GET /api/entitlements/{feature}: does the caller's plan grant the feature, and how much is left today
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from edubox.auth import require_identity
from edubox.database import get_db
from edubox.schemas.ai import FeatureAccessResponse
from edubox.schemas.identity import Identity
from edubox.services.entitlements import check_feature_access

router = APIRouter(prefix="/api/entitlements", tags=["billing"])


@router.get("/{feature}", response_model=FeatureAccessResponse)
def feature_access(
    feature: str,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    access = check_feature_access(db, identity.user_id, feature)
    return FeatureAccessResponse(
        feature=access.feature,
        plan=access.plan,
        has_access=access.has_access,
        usage=access.usage,
        limit=access.limit,
        has_reached_limit=access.has_reached_limit,
    )
