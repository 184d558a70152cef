"""Base64 uploads into the public uploads folder (served at /uploads/<name>)."""
import base64
import binascii
import re
import time
from pathlib import Path

from edubox.config import get_settings

_DATA_URL = re.compile(r"^data:(.*);base64,(.*)$", re.DOTALL)
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.\-_]")


class InvalidUploadError(ValueError):
    pass


def upload_dir() -> Path:
    settings = get_settings()
    if settings.upload_dir:
        return Path(settings.upload_dir)
    return Path(__file__).resolve().parent.parent.parent / "public" / "uploads"


def decode_upload_data(data: str) -> bytes:
    """Accept a data URL or raw base64."""
    match = _DATA_URL.match(data)
    payload = match.group(2) if match else data
    try:
        return base64.b64decode(payload)
    except (binascii.Error, ValueError) as e:
        raise InvalidUploadError(f"invalid base64 data: {e}") from e


def safe_filename(filename: str, now_ms: int | None = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{stamp}-{_UNSAFE_CHARS.sub('_', filename)}"


def save_upload(filename: str, data: str) -> str:
    """Write the decoded bytes and return the root-relative URL."""
    content = decode_upload_data(data)
    target_dir = upload_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    name = safe_filename(filename)
    (target_dir / name).write_bytes(content)
    return f"/uploads/{name}"
