from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./edubox.db"

    # Auth provider session tokens (JWT). Public key wins over the shared secret when set.
    auth_jwt_secret: str = "your-secret-key-change-in-production"
    auth_jwt_public_key: str = ""
    auth_jwt_algorithm: str = "HS256"
    auth_jwt_issuer: str = ""  # empty = issuer not checked

    # Gemini: API key for the Developer API, or Vertex AI project (+ optional service account JSON)
    gemini_api_key: str = ""
    vertex_project_id: str = ""
    vertex_location: str = "us-central1"
    vertex_credentials_path: str = ""  # empty = use ADC
    gemini_model: str = "gemini-2.0-flash"
    pdf_gemini_model: str = "gemini-1.5-flash"

    # Groq (schedule optimizer)
    groq_api_key: str = ""
    groq_model: str = "llama-3.1-8b-instant"

    # Redis (optional shared suggestion cache; empty = in-process cache)
    redis_url: str = ""  # e.g. redis://localhost:6379/0

    # Suggestion cache TTL in milliseconds (6 hours)
    suggestion_cache_ttl_ms: int = 1000 * 60 * 60 * 6

    # Knowledge-base sync backend
    nuclia_sync_url: str = "http://localhost:4000"
    nuclia_persist_secret: str = ""

    # Public uploads folder (empty = <project>/public/uploads)
    upload_dir: str = ""

    # Attachment fetch for sync payloads
    attachment_fetch_timeout_seconds: float = 5.0
    attachment_max_bytes: int = 1024 * 1024  # 1 MB

    log_level: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
