"""Centralized configuration — every tunable in one place.

Environment variables override defaults. Import anywhere:

    from settings import settings

All values are frozen at startup. To change, update .env and restart.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (one level above backend/)
_project_root = Path(__file__).resolve().parent.parent
load_dotenv(_project_root / ".env")


# ── Helpers ───────────────────────────────────────────────────────────────

def _env(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def _env_int(key: str, default: int = 0) -> int:
    return int(os.getenv(key, str(default)))


def _env_bool(key: str, default: bool = False) -> bool:
    return os.getenv(key, str(default)).lower() in ("true", "1", "yes")


# ── Settings ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Settings:
    """Application settings.  Immutable after creation."""

    # ── Knowledge Compendium ──────────────────────────────────────
    # Character (not token) budget per chunk.  Single sentences longer
    # than this are kept whole.
    KCS_MAX_CHUNK_CHARS: int = _env_int("KCS_MAX_CHUNK_CHARS", 700)
    # Default chunk export format when none is stored: json | jsonl
    KCS_EXPORT_FORMAT: str = _env("KCS_EXPORT_FORMAT", "json")

    # ── Persistence ───────────────────────────────────────────────
    # Supported: memory, redis
    STORE_BACKEND: str = _env("STORE_BACKEND", "memory")
    REDIS_URL: str = _env("REDIS_URL", "redis://localhost:6379/0")
    # Namespace prepended to every stored key (``<prefix>:<key>``).
    STORE_PREFIX: str = _env("STORE_PREFIX", "focus-board")

    # ── Security ────────────────────────────────────────────────
    # Comma-separated origins allowed by CORS middleware.
    # Use "*" for local dev only — always restrict in production.
    ALLOWED_ORIGINS: str = _env("ALLOWED_ORIGINS", "*")

    # ── Server ────────────────────────────────────────────────────
    HOST: str = _env("HOST", "0.0.0.0")
    PORT: int = _env_int("PORT", 8000)
    DEBUG_MODE: bool = _env_bool("DEBUG_MODE", False)
    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO")


settings = Settings()
