"""
App-wide exception handlers. Every error body is {"error": ...} (plus "details" where useful);
routers keep raising HTTPException.
"""
import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Drop raw request input from validation errors and make ctx JSON-serializable."""
    sanitized = []
    for err in errors:
        item = {k: v for k, v in err.items() if k not in ("input", "url")}
        ctx = item.get("ctx")
        if isinstance(ctx, dict):
            item["ctx"] = {
                k: (f"{type(v).__name__}: {v}" if isinstance(v, Exception) else v)
                for k, v in ctx.items()
                if k != "input"
            }
        if "loc" in item:
            item["loc"] = list(item["loc"])
        sanitized.append(item)
    return sanitized


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    content: dict[str, Any]
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "details": _sanitize_validation_errors(exc.errors())},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
