"""
Process-wide async Redis connection (optional). Disabled when redis_url is empty.

A failed connect is remembered for RECONNECT_AFTER_SECONDS so an unreachable server is not
pinged on every request; callers treat None as "no shared store".
"""
import logging
import time
from typing import Any

from redis.asyncio import Redis

from edubox.config import get_settings

logger = logging.getLogger(__name__)

RECONNECT_AFTER_SECONDS = 30.0

_redis_client: Any = None
_last_failure: float | None = None
_clock = time.monotonic


def redacted_url(url: str) -> str:
    """host:port/db part only; credentials never reach the logs."""
    return url.split("@")[-1] if "@" in url else url


async def get_redis_client() -> Any:
    """Connected client, or None when disabled or (recently) unreachable."""
    global _redis_client, _last_failure
    if _redis_client is not None:
        return _redis_client
    url = (get_settings().redis_url or "").strip()
    if not url:
        return None
    if _last_failure is not None and _clock() - _last_failure < RECONNECT_AFTER_SECONDS:
        return None
    client = None
    try:
        client = Redis.from_url(url, decode_responses=True)
        await client.ping()
    except Exception as e:
        _last_failure = _clock()
        logger.warning("Redis unavailable at %s, retrying in %.0fs: %s", redacted_url(url), RECONNECT_AFTER_SECONDS, e)
        if client is not None:
            await client.aclose()
        return None
    _redis_client = client
    _last_failure = None
    logger.info("Redis connected: %s", redacted_url(url))
    return _redis_client


async def close_redis() -> None:
    global _redis_client
    if _redis_client is None:
        return
    try:
        await _redis_client.aclose()
    except Exception as e:
        logger.warning("Redis close error: %s", e)
    _redis_client = None
