"""
Campus life PDF imports (signed in):
- POST /api/process-pdf-menu: dining menu PDF -> menu items
- POST /api/process-pdf-schedule: class ("college") or dining ("dining") schedule PDF -> schedule items
"""
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from edubox.auth import require_identity
from edubox.config import get_settings
from edubox.schemas.identity import Identity
from edubox.schemas.schedule import MenuExtractionResponse, ScheduleExtractionResponse
from edubox.services.ai_service import generate_text
from edubox.services.pdf_service import (
    EXTRACTED_TEXT_PREVIEW,
    PdfExtractionError,
    extract_pdf_text,
    parse_menu_items,
    parse_schedule_items,
)
from edubox.services.prompts import (
    build_college_schedule_prompt,
    build_dining_schedule_prompt,
    build_menu_prompt,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["campus"])

PDF_CONTENT_TYPE = "application/pdf"


async def _read_pdf_text(pdf: UploadFile | None) -> str:
    """Extracted text, or HTTP 400 before any model call when there is nothing usable."""
    ct = ((pdf.content_type if pdf else None) or "").split(";")[0].strip().lower()
    if pdf is None or ct != PDF_CONTENT_TYPE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid PDF file")

    data = await pdf.read()
    try:
        text = await run_in_threadpool(extract_pdf_text, data)
    except PdfExtractionError as e:
        logger.warning("PDF parsing error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to extract text from PDF. Please ensure the PDF is not encrypted or corrupted.",
        ) from e

    if not text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No text could be extracted from the PDF",
        )
    return text


async def _ask_model(prompt: str, failure: str) -> str:
    try:
        return await run_in_threadpool(generate_text, None, prompt, model=get_settings().pdf_gemini_model)
    except Exception as e:
        logger.exception("%s", failure)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": failure, "details": str(e) or "Unknown error"},
        ) from e


@router.post("/process-pdf-menu", response_model=MenuExtractionResponse)
async def process_pdf_menu(
    pdf: UploadFile | None = File(None),
    identity: Identity = Depends(require_identity),
):
    """Menu items (max 20) parsed by the model; first 500 characters of the PDF text echoed back."""
    text = await _read_pdf_text(pdf)
    model_text = await _ask_model(build_menu_prompt(text), "Failed to process PDF")
    return MenuExtractionResponse(
        success=True,
        menu_items=parse_menu_items(model_text),
        extracted_text=text[:EXTRACTED_TEXT_PREVIEW],
    )


@router.post("/process-pdf-schedule", response_model=ScheduleExtractionResponse)
async def process_pdf_schedule(
    pdf: UploadFile | None = File(None),
    schedule_type: str | None = Form(None, alias="type"),
    identity: Identity = Depends(require_identity),
):
    """Class ("college") or dining schedule items (max 20); any other type is treated as dining."""
    text = await _read_pdf_text(pdf)
    prompt = build_college_schedule_prompt(text) if schedule_type == "college" else build_dining_schedule_prompt(text)
    model_text = await _ask_model(prompt, "Failed to process PDF schedule")
    return ScheduleExtractionResponse(
        success=True,
        schedule_items=parse_schedule_items(model_text, schedule_type),
        extracted_text=text[:EXTRACTED_TEXT_PREVIEW],
        type=schedule_type,
    )
