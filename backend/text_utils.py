"""Shared text normalization for the outline and chunk builders."""

from __future__ import annotations

import re

_LINE_ENDINGS = re.compile(r"\r\n?")


def normalize(text: str) -> str:
    """Unify line endings to ``\\n`` and trim outer whitespace."""
    return _LINE_ENDINGS.sub("\n", text).strip()


def word_count(text: str) -> int:
    """Number of whitespace-delimited tokens in *text*."""
    return len(text.split())
