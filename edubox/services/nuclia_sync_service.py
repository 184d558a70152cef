"""
Knowledge-base sync proxy. Builds the payload server-side (user context + profile), attaches small
file contents as base64, and forwards it to the external sync backend.

Attachment fetches run concurrently; each has its own timeout and size cap, and a failure only
means that one file goes without base64.
"""
import asyncio
import base64
import logging
from typing import Any

import httpx

from edubox.config import get_settings
from edubox.schemas.identity import Identity
from edubox.schemas.sync import FileBlob

logger = logging.getLogger(__name__)


def build_user_profile(identity: Identity) -> dict[str, Any]:
    """Only public profile fields; nothing else from the session leaves the server."""
    return {
        "id": identity.user_id,
        "email": identity.email,
        "phone": identity.phone,
        "name": identity.name,
    }


def _file_key(f: dict[str, Any]) -> str | None:
    return f.get("id") or f.get("storageId") or f.get("name")


def merge_file_blobs(payload: dict[str, Any], blobs: list[FileBlob] | None) -> int:
    """Copy client-supplied base64 onto matching recentFiles (by id, storageId or name). Returns count merged."""
    files = payload.get("recentFiles")
    if not blobs or not isinstance(files, list):
        return 0
    by_key = {b.key: b.base64 for b in blobs if b.key}
    merged = 0
    for f in files:
        if not f:
            continue
        key = _file_key(f)
        if key and key in by_key:
            f["base64"] = by_key[key]
            merged += 1
    return merged


async def fetch_file_base64(
    client: httpx.AsyncClient,
    url: str,
    *,
    max_bytes: int,
) -> str | None:
    """Base64 of the body, or None when the fetch fails, is not 2xx, or exceeds max_bytes."""
    async with client.stream("GET", url) as resp:
        if not resp.is_success:
            return None
        content_length = resp.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > max_bytes:
            return None
        body = bytearray()
        async for part in resp.aiter_bytes():
            body.extend(part)
            if len(body) > max_bytes:
                return None
    return base64.b64encode(bytes(body)).decode("ascii")


async def attach_remote_files(
    payload: dict[str, Any],
    *,
    client: httpx.AsyncClient | None = None,
    skip_existing: bool = True,
) -> int:
    """Fetch every recentFiles[].url concurrently. Returns how many files got base64 attached."""
    files = payload.get("recentFiles")
    if not isinstance(files, list):
        return 0
    settings = get_settings()
    targets = [
        f for f in files
        if f and f.get("url") and not (skip_existing and f.get("base64"))
    ]
    if not targets:
        return 0

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.attachment_fetch_timeout_seconds, follow_redirects=True)
    try:
        async def _one(f: dict[str, Any]) -> bool:
            try:
                b64 = await asyncio.wait_for(
                    fetch_file_base64(client, f["url"], max_bytes=settings.attachment_max_bytes),
                    timeout=settings.attachment_fetch_timeout_seconds,
                )
            except (httpx.HTTPError, httpx.InvalidURL, asyncio.TimeoutError) as e:
                logger.debug("Attachment fetch failed for %s: %s", f.get("name") or f["url"], e)
                return False
            if b64 is None:
                return False
            f["base64"] = b64
            return True

        results = await asyncio.gather(*(_one(f) for f in targets))
    finally:
        if owns_client:
            await client.aclose()
    return sum(1 for r in results if r)


class SyncBackendResponse:
    def __init__(self, status_code: int, json_body: Any = None, text: str | None = None):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text

    @property
    def is_json(self) -> bool:
        return self.text is None


async def forward_to_sync_backend(
    path: str,
    body: dict[str, Any],
    *,
    client: httpx.AsyncClient | None = None,
) -> SyncBackendResponse:
    """POST body to {nuclia_sync_url}{path}; relay JSON when the backend says so, text otherwise."""
    url = f"{get_settings().nuclia_sync_url.rstrip('/')}{path}"
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=60.0)
    try:
        resp = await client.post(url, json=body)
    finally:
        if owns_client:
            await client.aclose()
    if "application/json" in resp.headers.get("content-type", ""):
        return SyncBackendResponse(resp.status_code, json_body=resp.json())
    return SyncBackendResponse(resp.status_code, text=resp.text)


def describe_payload(payload: dict[str, Any]) -> tuple[int, int]:
    """(recentFiles count, files with base64) for diagnostics; no content is logged."""
    files = payload.get("recentFiles") if isinstance(payload.get("recentFiles"), list) else []
    return len(files), sum(1 for f in files if f and f.get("base64"))
