"""Knowledge compendium chunker — sentence splitting + greedy packing.

Single source of truth for chunking logic.  Used by:
  - ``workspace.py`` (stored compendium text)
  - ``main.py``      (``POST /chunks``)
  - ``cli.py``       (``python cli.py chunks``)

Strategy
--------
1. Normalize line endings and trim.
2. Split into sentence units on whitespace that follows ``.``, ``?`` or
   ``!`` and precedes an uppercase letter or digit.  Each unit is further
   split on line breaks; empty pieces are dropped.
3. Units are packed greedily into a space-joined buffer.  The buffer is
   flushed before a unit that would push it past ``max_chunk_chars``.
4. A unit that lands in an empty buffer is always accepted, so an
   oversized sentence becomes its own chunk instead of being cut.

Metadata is approximate on purpose: ``tokenEstimate`` is ``ceil(len / 4)``
and ``topicHint`` is a truncated leading fragment.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any

from text_utils import normalize, word_count

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNK_CHARS = 700

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.?!])\s+(?=[A-Z0-9])")
_TERMINATOR = re.compile(r"[.?!]")

_HINT_WINDOW = 90
_HINT_FALLBACK = 60


class InvalidChunkSizeError(ValueError):
    """Raised when ``max_chunk_chars`` is not a positive finite integer."""


# ── Data model ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ChunkMetadata:
    index: int
    token_estimate: int
    word_count: int
    topic_hint: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "tokenEstimate": self.token_estimate,
            "wordCount": self.word_count,
            "topicHint": self.topic_hint,
        }


@dataclass(frozen=True)
class Chunk:
    """One packed run of sentences plus its derived metadata."""

    id: str
    content: str
    metadata: ChunkMetadata

    def to_dict(self) -> dict[str, Any]:
        """Export shape: ``{id, content, metadata: {...}}``."""
        return {"id": self.id, "content": self.content, "metadata": self.metadata.to_dict()}


# ── Helpers ───────────────────────────────────────────────────────────────

def validate_chunk_size(max_chunk_chars: Any) -> int:
    """Return *max_chunk_chars* as an ``int``, or raise InvalidChunkSizeError."""
    if isinstance(max_chunk_chars, bool):
        raise InvalidChunkSizeError(f"max_chunk_chars must be a positive integer, got {max_chunk_chars!r}")
    if isinstance(max_chunk_chars, float):
        if not math.isfinite(max_chunk_chars) or not max_chunk_chars.is_integer():
            raise InvalidChunkSizeError(f"max_chunk_chars must be a positive integer, got {max_chunk_chars!r}")
        max_chunk_chars = int(max_chunk_chars)
    if not isinstance(max_chunk_chars, int) or max_chunk_chars <= 0:
        raise InvalidChunkSizeError(f"max_chunk_chars must be a positive integer, got {max_chunk_chars!r}")
    return max_chunk_chars


def split_sentences(text: str) -> list[str]:
    """Split *text* into the flat list of sentence units used for packing."""
    normalized = normalize(text)
    if not normalized:
        return []
    units: list[str] = []
    for sentence in _SENTENCE_BOUNDARY.split(normalized):
        units.extend(part.strip() for part in sentence.split("\n") if part.strip())
    return units


def estimate_tokens(content: str) -> int:
    """Rough LLM token count: one token per four characters, rounded up."""
    return math.ceil(len(content) / 4)


def topic_hint(content: str) -> str:
    """Leading fragment of *content*, cut at the first sentence terminator.

    Looks at the first 90 characters; without a terminator there the first
    60 characters are used instead.  Content that opens with a terminator
    yields an empty hint.
    """
    window = content[:_HINT_WINDOW]
    match = _TERMINATOR.search(window)
    if match:
        return window[: match.start()].strip()
    return content[:_HINT_FALLBACK]


# ── Public API ────────────────────────────────────────────────────────────

def segment(text: str, max_chunk_chars: int = DEFAULT_MAX_CHUNK_CHARS) -> list[Chunk]:
    """Split *text* into sentence-bounded chunks of at most *max_chunk_chars*.

    Args:
        text:            Source text to chunk.
        max_chunk_chars: Soft character budget per chunk.  A single sentence
                         longer than the budget is kept whole.

    Returns:
        Ordered list of chunks; empty when *text* is blank.

    Raises:
        InvalidChunkSizeError: *max_chunk_chars* is not a positive integer.
    """
    size = validate_chunk_size(max_chunk_chars)
    units = split_sentences(text)

    chunks: list[Chunk] = []
    buffer = ""

    def _flush():
        content = buffer.strip()
        if not content:
            return
        index = len(chunks)
        chunks.append(
            Chunk(
                id=f"kcs-{index + 1}",
                content=content,
                metadata=ChunkMetadata(
                    index=index,
                    token_estimate=estimate_tokens(content),
                    word_count=word_count(content),
                    topic_hint=topic_hint(content),
                ),
            )
        )

    for unit in units:
        prospective = f"{buffer} {unit}" if buffer else unit
        if buffer and len(prospective) > size:
            _flush()
            buffer = unit
        else:
            buffer = prospective

    _flush()
    logger.debug(f"Segmented {len(units)} sentence(s) into {len(chunks)} chunk(s) (max {size} chars)")
    return chunks
