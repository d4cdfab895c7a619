"""Outline structurer — loose notes → Markdown ruleset.

Each non-blank line is classified on its trimmed form:

  - ``# Heading`` / ``- bullet`` / ``* bullet``  → kept as written
  - ``Section:``                                 → ``## Section``
  - anything else                                → ``- line`` when it opens a
    block, ``  - line`` while a block is open

Headings, bullets, section lines and blank lines all close the current
block.  Blank lines are dropped from the output.
"""

from __future__ import annotations

import re

from text_utils import normalize

_HEADING = re.compile(r"^#+\s")
_BULLET = re.compile(r"^[-*]\s")
_SECTION = re.compile(r":\s*$")
_SECTION_TAIL = re.compile(r"[:\s]+$")


def structure(text: str) -> str:
    """Convert freeform multi-line *text* into a nested bullet outline.

    Returns ``""`` when *text* is empty or whitespace-only.
    """
    normalized = normalize(text)
    if not normalized:
        return ""

    lines: list[str] = []
    in_block = False
    for raw in normalized.split("\n"):
        line = raw.strip()
        if not line:
            in_block = False
            continue
        if _HEADING.match(line) or _BULLET.match(line):
            in_block = False
            lines.append(line)
        elif _SECTION.search(line):
            in_block = False
            lines.append(f"## {_SECTION_TAIL.sub('', line)}")
        elif in_block:
            lines.append(f"  - {line}")
        else:
            in_block = True
            lines.append(f"- {line}")
    return "\n".join(lines)
