"""
Prefetch:
- POST /api/prefetch/user-context: the signed-in user's context (profile, planner, recent files)
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from edubox.auth import require_identity
from edubox.database import get_db
from edubox.repositories.user_context_repository import get_user_context
from edubox.schemas.identity import Identity
from edubox.schemas.sync import UserContextResponse

router = APIRouter(prefix="/api/prefetch", tags=["prefetch"])


@router.post("/user-context", response_model=UserContextResponse)
def prefetch_user_context(
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    """Any userId in the body is ignored; the context is always the caller's own."""
    return UserContextResponse(data=get_user_context(db, identity.user_id))


@router.get("/user-context")
def prefetch_user_context_usage():
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "use POST with an Authorization bearer token"},
    )
