"""Export serializers for the outline and the chunk sequence.

Outline  → Markdown, written verbatim.
Chunks   → a pretty-printed JSON array, or JSON Lines (one chunk per line).
"""

from __future__ import annotations

import json
from typing import Iterable

from chunker import Chunk

OUTLINE_FILENAME = "instructional-ruleset.md"
CHUNK_FILENAMES = {
    "json": "knowledge-compendium.json",
    "jsonl": "knowledge-compendium.jsonl",
}
EXPORT_FORMATS = tuple(CHUNK_FILENAMES)


class NothingToExportError(ValueError):
    """Raised when there is no derived content to export."""


class UnsupportedFormatError(ValueError):
    """Raised for a chunk export format other than ``json`` / ``jsonl``."""


def export_outline(outline: str) -> tuple[str, str]:
    """Return ``(filename, content)`` for the Markdown outline."""
    if not outline:
        raise NothingToExportError("Outline is empty")
    return OUTLINE_FILENAME, outline


def chunks_to_json(chunks: Iterable[Chunk]) -> str:
    return json.dumps([c.to_dict() for c in chunks], indent=2, ensure_ascii=False)


def chunks_to_jsonl(chunks: Iterable[Chunk]) -> str:
    return "\n".join(json.dumps(c.to_dict(), ensure_ascii=False, separators=(",", ":")) for c in chunks)


def export_chunks(chunks: list[Chunk], fmt: str = "json") -> tuple[str, str]:
    """Return ``(filename, content)`` for *chunks* in the requested format."""
    if fmt not in CHUNK_FILENAMES:
        raise UnsupportedFormatError(f"Unknown export format: {fmt!r} (expected one of {EXPORT_FORMATS})")
    if not chunks:
        raise NothingToExportError("No chunks to export")
    body = chunks_to_json(chunks) if fmt == "json" else chunks_to_jsonl(chunks)
    return CHUNK_FILENAMES[fmt], body
