"""
File Hub upload:
- POST /api/upload: base64 (or data URL) body written to the public uploads folder
"""
import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from edubox.schemas.upload import UploadRequest, UploadResponse
from edubox.services.upload_service import InvalidUploadError, save_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["files"])


@router.post("", response_model=UploadResponse)
async def upload_file(body: UploadRequest):
    if not body.filename or not body.data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing file")
    try:
        url = await run_in_threadpool(save_upload, body.filename, body.data)
    except InvalidUploadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except OSError as e:
        logger.error("upload error: %s", e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e
    return UploadResponse(url=url)
