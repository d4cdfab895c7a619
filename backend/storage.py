"""Key-value persistence for the board — in-memory or Redis.

Every store exposes the same two calls:

    store.get(key)          -> str | None
    store.set(key, value)   -> None

Select the backend with STORE_BACKEND=memory|redis in .env.  When Redis
is unreachable at startup the board falls back to the in-memory store;
persistence is best-effort either way.

The text builders (``outline.py``, ``chunker.py``) never touch storage —
only the host layer (``tasks.py``, ``workspace.py``) does.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol

import redis

logger = logging.getLogger(__name__)

# Keys shared with the browser board's localStorage layout.
TASKS_KEY = "eisenhower.tasks"
RULESET_KEY = "ai.ir"
COMPENDIUM_KEY = "ai.kcs"
COMPENDIUM_FORMAT_KEY = "ai.kcs.format"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store.  Lost on restart."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class RedisStore:
    """Redis-backed store.  Keys are namespaced as ``<prefix>:<key>``."""

    def __init__(self, client: "redis.Redis", prefix: str = "focus-board"):
        self._redis = client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self._redis.get(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Redis read failed for {key}: {e}")
            return None

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(self._key(key), value)
        except redis.RedisError as e:
            logger.warning(f"Redis write failed for {key}: {e}")


def build_store(backend: str | None = None, url: str | None = None, prefix: str | None = None) -> KeyValueStore:
    """Create the configured store.  Missing arguments come from settings."""
    from settings import settings

    backend = (backend or settings.STORE_BACKEND).lower()
    if backend == "memory":
        return MemoryStore()
    if backend != "redis":
        raise ValueError(f"Unknown STORE_BACKEND: {backend!r} (expected memory or redis)")

    try:
        client = redis.from_url(url or settings.REDIS_URL, decode_responses=True)
        client.ping()
    except (redis.RedisError, ValueError) as e:
        # from_url raises ValueError for a malformed URL
        logger.warning(f"Redis not available (falling back to in-memory store): {e}")
        return MemoryStore()
    logger.info("Redis store connected")
    return RedisStore(client, prefix=prefix or settings.STORE_PREFIX)


# ── JSON helpers ──────────────────────────────────────────────────────────

def load_json(store: KeyValueStore, key: str, fallback: Any) -> Any:
    """Decode the JSON value under *key*; *fallback* on miss or bad data."""
    raw = store.get(key)
    if not raw:
        return fallback
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Ignoring unreadable value stored under {key}")
        return fallback


def persist_json(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value, ensure_ascii=False))
