"""
Cache for chat starter suggestions, keyed by "{user_id|anon}:{context_summary}".

Two interchangeable implementations behind one async interface:
- InMemorySuggestionCache: per-process dict, lazy TTL check on read, no sweeping.
- RedisSuggestionCache: shared across instances, TTL enforced by Redis EXPIRE.
Entries are never invalidated early; empty lists are cached too.
"""
import json
import logging
import time
from collections.abc import Callable
from typing import Any, Protocol

from edubox.config import get_settings

logger = logging.getLogger(__name__)

SUGGESTION_KEY_PREFIX = "suggestions:"


def suggestion_cache_key(user_id: str | None, context_summary: Any) -> str:
    # Raw context, no hashing: lookups are exact string matches
    context = str(context_summary) if context_summary else ""
    return f"{user_id or 'anon'}:{context}"


class SuggestionCache(Protocol):
    ttl_ms: int

    async def get(self, key: str) -> list[str] | None: ...

    async def set(self, key: str, suggestions: list[str]) -> None: ...


class InMemorySuggestionCache:
    """Process-local cache. Each worker/instance has its own copy."""

    def __init__(self, ttl_ms: int | None = None, clock: Callable[[], float] | None = None):
        self.ttl_ms = ttl_ms if ttl_ms is not None else get_settings().suggestion_cache_ttl_ms
        self._clock = clock or (lambda: time.time() * 1000)
        self._entries: dict[str, tuple[list[str], float]] = {}

    async def get(self, key: str) -> list[str] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        suggestions, ts = entry
        if self._clock() - ts >= self.ttl_ms:
            del self._entries[key]
            return None
        return suggestions

    async def set(self, key: str, suggestions: list[str]) -> None:
        self._entries[key] = (list(suggestions), self._clock())

    def __len__(self) -> int:
        return len(self._entries)


class RedisSuggestionCache:
    """
    Redis-backed cache (SET with PX). All Redis errors are swallowed and logged:
    a failed read is a miss, a failed write is a no-op.
    """

    def __init__(self, redis_client: Any, ttl_ms: int | None = None):
        self._redis = redis_client
        self.ttl_ms = ttl_ms if ttl_ms is not None else get_settings().suggestion_cache_ttl_ms

    @staticmethod
    def _key(key: str) -> str:
        return f"{SUGGESTION_KEY_PREFIX}{key}"

    async def get(self, key: str) -> list[str] | None:
        if not self._redis:
            return None
        try:
            raw = await self._redis.get(self._key(key))
            if raw is None:
                return None
            s = raw.decode() if isinstance(raw, bytes) else raw
            data = json.loads(s)
            if isinstance(data, list):
                return [str(x) for x in data]
        except Exception as e:
            logger.warning("Redis suggestion cache get failed: %s", e, exc_info=False)
        return None

    async def set(self, key: str, suggestions: list[str]) -> None:
        if not self._redis:
            return
        try:
            await self._redis.set(self._key(key), json.dumps(suggestions), px=self.ttl_ms)
        except Exception as e:
            logger.warning("Redis suggestion cache set failed: %s", e, exc_info=False)
