import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from edubox.config import get_settings
from edubox.core.exceptions import register_exception_handlers
from edubox.core.redis import close_redis
from edubox.routers import ai_content, ai_study, campus, chat, entitlements, nuclia_sync, prefetch, schedule, upload
from edubox.services.upload_service import upload_dir

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Nuclia-Persist-Secret",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        await close_redis()


app = FastAPI(title="EduBox API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Nuclia-Persist-Secret"],
)

register_exception_handlers(app)

app.include_router(ai_content.router)
app.include_router(ai_study.router)
app.include_router(chat.router)
app.include_router(schedule.router)
app.include_router(campus.router)
app.include_router(upload.router)
app.include_router(nuclia_sync.router)
app.include_router(prefetch.router)
app.include_router(entitlements.router)

app.mount("/uploads", StaticFiles(directory=upload_dir(), check_dir=False), name="uploads")


@app.options("/api/{path:path}")
def cors_options(path: str):
    """Plain OPTIONS (no preflight headers) still gets permissive CORS headers on every API route."""
    return Response(status_code=200, headers=CORS_HEADERS)


@app.get("/")
def root():
    return {"message": "EduBox API", "docs": "/docs"}
