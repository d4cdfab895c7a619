"""Ruleset + compendium workspace — stored raw text and derived views.

The raw texts are persisted as typed (JSON strings, as the browser board
stores them); the outline and chunks are recomputed from them on read.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from chunker import Chunk, segment, validate_chunk_size
from exporters import EXPORT_FORMATS, UnsupportedFormatError, export_chunks, export_outline
from outline import structure
from storage import (
    COMPENDIUM_FORMAT_KEY,
    COMPENDIUM_KEY,
    RULESET_KEY,
    KeyValueStore,
    load_json,
    persist_json,
)

logger = logging.getLogger(__name__)


# Both builders are pure, so results can be shared across workspaces.
@lru_cache(maxsize=32)
def _cached_outline(text: str) -> str:
    return structure(text)


@lru_cache(maxsize=32)
def _cached_chunks(text: str, max_chunk_chars: int) -> tuple[Chunk, ...]:
    return tuple(segment(text, max_chunk_chars))


class Workspace:
    def __init__(self, store: KeyValueStore, max_chunk_chars: int | None = None, default_format: str | None = None):
        from settings import settings

        self._store = store
        self.max_chunk_chars = validate_chunk_size(
            settings.KCS_MAX_CHUNK_CHARS if max_chunk_chars is None else max_chunk_chars
        )
        self._default_format = default_format or settings.KCS_EXPORT_FORMAT

    # ── Instructional ruleset ─────────────────────────────────────

    @property
    def ruleset_text(self) -> str:
        value = load_json(self._store, RULESET_KEY, "")
        return value if isinstance(value, str) else ""

    @ruleset_text.setter
    def ruleset_text(self, text: str) -> None:
        persist_json(self._store, RULESET_KEY, text)

    def outline(self) -> str:
        return _cached_outline(self.ruleset_text)

    def export_outline(self) -> tuple[str, str]:
        return export_outline(self.outline())

    # ── Knowledge compendium ──────────────────────────────────────

    @property
    def compendium_text(self) -> str:
        value = load_json(self._store, COMPENDIUM_KEY, "")
        return value if isinstance(value, str) else ""

    @compendium_text.setter
    def compendium_text(self, text: str) -> None:
        persist_json(self._store, COMPENDIUM_KEY, text)

    @property
    def export_format(self) -> str:
        value = load_json(self._store, COMPENDIUM_FORMAT_KEY, self._default_format)
        return value if value in EXPORT_FORMATS else "json"

    @export_format.setter
    def export_format(self, fmt: str) -> None:
        if fmt not in EXPORT_FORMATS:
            raise UnsupportedFormatError(f"Unknown export format: {fmt!r} (expected one of {EXPORT_FORMATS})")
        persist_json(self._store, COMPENDIUM_FORMAT_KEY, fmt)

    def chunks(self) -> list[Chunk]:
        return list(_cached_chunks(self.compendium_text, self.max_chunk_chars))

    def export_chunks(self, fmt: str | None = None) -> tuple[str, str]:
        """Serialize the current chunks; *fmt* defaults to the stored format."""
        fmt = fmt or self.export_format
        filename, body = export_chunks(self.chunks(), fmt)
        logger.info(f"Exported {filename}")
        return filename, body
