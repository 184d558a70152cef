"""
Knowledge-base sync proxy:
- POST /api/nuclia/sync: server-built user context -> sync backend /sync (signed in)
- POST /api/nuclia/sync/manual: same, backend /sync/manual
- POST /api/nuclia/sync/get-mappings: file -> KB resource ids (signed in or shared secret)
- POST /api/nuclia/sync/persist-mapping: store KB resource ids (signed in or shared secret)
"""
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from edubox.auth import is_trusted_service, resolve_identity
from edubox.database import get_db
from edubox.repositories import user_context_repository as ctx_repo
from edubox.schemas.identity import Identity
from edubox.schemas.sync import (
    GetMappingsRequest,
    GetMappingsResponse,
    PersistMappingRequest,
    PersistMappingResponse,
    ResourceMapping,
    SyncRequest,
)
from edubox.services.nuclia_sync_service import (
    attach_remote_files,
    build_user_profile,
    describe_payload,
    forward_to_sync_backend,
    merge_file_blobs,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/nuclia/sync", tags=["nuclia-sync"])


def require_signed_in(identity: Identity = Depends(resolve_identity)) -> Identity:
    if not identity.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthenticated", "message": "User must be signed in"},
        )
    return identity


async def _optional_sync_body(request: Request) -> SyncRequest | None:
    """The body is optional extra data (fileBlobs); an unreadable body is ignored, not rejected."""
    try:
        return SyncRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        return None


async def _proxy(path: str, request: Request, identity: Identity, db: Session, *, manual: bool) -> Response:
    try:
        payload = await run_in_threadpool(ctx_repo.get_user_context, db, identity.user_id)
        body = await _optional_sync_body(request)
        blobs = body.file_blobs if body else None

        if manual:
            merged = merge_file_blobs(payload, blobs)
            logger.debug("[nuclia-sync-manual] user=%s mergedFileBlobs=%d", identity.user_id, merged)
            await attach_remote_files(payload, skip_existing=False)
        else:
            await attach_remote_files(payload, skip_existing=True)
            merge_file_blobs(payload, blobs)

        files, blobs_attached = describe_payload(payload)
        logger.debug("[nuclia-sync] user=%s recentFiles=%d attachedBlobs=%d", identity.user_id, files, blobs_attached)

        upstream = await forward_to_sync_backend(
            path,
            {"userId": identity.user_id, "userProfile": build_user_profile(identity), "payload": payload},
        )
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Sync proxy to %s failed: %s", path, e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "proxy_failed", "message": str(e)},
        )

    if upstream.is_json:
        return JSONResponse(status_code=upstream.status_code, content=upstream.json_body)
    return Response(content=upstream.text, status_code=upstream.status_code, media_type="text/plain")


@router.post("")
async def sync(
    request: Request,
    identity: Identity = Depends(require_signed_in),
    db: Session = Depends(get_db),
):
    return await _proxy("/sync", request, identity, db, manual=False)


@router.post("/manual")
async def sync_manual(
    request: Request,
    identity: Identity = Depends(require_signed_in),
    db: Session = Depends(get_db),
):
    return await _proxy("/sync/manual", request, identity, db, manual=True)


@router.post("/get-mappings", response_model=GetMappingsResponse)
def get_mappings(
    body: GetMappingsRequest,
    trusted: bool = Depends(is_trusted_service),
    identity: Identity = Depends(resolve_identity),
    db: Session = Depends(get_db),
):
    """Shared-secret callers name the user in the body; everyone else is the signed-in user."""
    if trusted:
        user_id = body.user_id
        if not user_id:
            return GetMappingsResponse(mappings=[])
    else:
        if not identity.is_authenticated:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthenticated")
        user_id = identity.user_id

    mappings = []
    for file_id in body.file_ids or []:
        f = ctx_repo.get_file_for_user(db, file_id, user_id)
        if f and f.nuclia_resource_id:
            mappings.append(ResourceMapping(file_id=file_id, nuclia_resource_id=f.nuclia_resource_id))
    return GetMappingsResponse(mappings=mappings)


@router.post("/persist-mapping", response_model=PersistMappingResponse)
def persist_mapping(
    body: PersistMappingRequest,
    trusted: bool = Depends(is_trusted_service),
    identity: Identity = Depends(resolve_identity),
    db: Session = Depends(get_db),
):
    """
    User-level mappings (clerkId) set the user's KB resource; file-level mappings (fileId) set the file's.
    Only shared-secret callers may target another user's files via mapping.userId.
    """
    caller_user_id = None
    if not trusted:
        if not identity.is_authenticated:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthenticated")
        caller_user_id = identity.user_id

    updated = 0
    for m in body.mappings or []:
        if not m.nuclia_resource_id:
            continue
        try:
            if m.clerk_id:
                if not trusted and m.clerk_id != caller_user_id:
                    logger.warning("persist-mapping: user %s tried to map user %s", caller_user_id, m.clerk_id)
                    continue
                if ctx_repo.set_user_resource_id(db, m.clerk_id, m.nuclia_resource_id):
                    updated += 1
                continue

            if not m.file_id:
                continue
            target_user_id = m.user_id if trusted else caller_user_id
            if not target_user_id:
                continue
            if ctx_repo.set_file_resource_id(db, m.file_id, target_user_id, m.nuclia_resource_id):
                updated += 1
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("persist-mapping: failed to persist mapping %s: %s", m.model_dump(), e)

    return PersistMappingResponse(ok=True, updated=updated)
