"""
PlantUML block detection for mixed Markdown content.

Two independent scanners run over the same text:

  1. Fenced blocks      — ```plantuml ... ``` code fences (tag configurable)
  2. Standalone blocks  — bare @start<subtype> ... @end<subtype> pairs

Their results are merged by resolve_overlaps(), which gives fenced blocks
priority so a diagram written inside its own fence is extracted once.
"""

import re
from typing import Iterable, List, Optional, Pattern

from assembly.blocks import DEFAULT_SUBTYPES, FENCED, STANDALONE, DiagramBlock


# ─── Pattern builders ─────────────────────────────────────────────

def _fenced_pattern(language: str) -> Pattern[str]:
    # Closing fence must start a line; an empty fence body is allowed.
    return re.compile(
        rf'```{re.escape(language)}[ \t]*\r?\n(?:(.*?)\r?\n)??```',
        re.DOTALL | re.IGNORECASE,
    )


def _standalone_pattern(subtypes: Iterable[str]) -> Optional[Pattern[str]]:
    names = sorted({s.strip().lower() for s in subtypes if s.strip()},
                   key=len, reverse=True)
    if not names:
        return None
    alternation = '|'.join(re.escape(n) for n in names)
    # \1 pins the end marker to the subtype that opened the block.
    return re.compile(
        rf'@start({alternation})\b.*?@end\1\b',
        re.DOTALL | re.IGNORECASE,
    )


# ─── Scanners ─────────────────────────────────────────────────────

def extract_fenced_blocks(text: str, language: str = "plantuml") -> List[DiagramBlock]:
    """Find every fenced block tagged with *language*.

    The span covers the whole fence including its delimiters; the body is
    the inner content, trimmed.
    """
    blocks: List[DiagramBlock] = []
    for m in _fenced_pattern(language).finditer(text):
        blocks.append(DiagramBlock(
            start=m.start(),
            end=m.end(),
            body=(m.group(1) or '').strip(),
            origin=FENCED,
        ))
    return blocks


def extract_standalone_blocks(
    text: str, subtypes: Iterable[str] = DEFAULT_SUBTYPES,
) -> List[DiagramBlock]:
    """Find @start<subtype> ... @end<subtype> pairs outside of any fencing.

    The markers stay in the body since the renderer needs them.  A start
    marker with no matching end marker is left alone as ordinary text.
    """
    pattern = _standalone_pattern(subtypes)
    if pattern is None:
        return []
    return [
        DiagramBlock(start=m.start(), end=m.end(),
                     body=m.group(0).strip(), origin=STANDALONE)
        for m in pattern.finditer(text)
    ]


# ─── Merge ────────────────────────────────────────────────────────

def resolve_overlaps(
    fenced: List[DiagramBlock], standalone: List[DiagramBlock],
) -> List[DiagramBlock]:
    """Merge both scanner outputs into one ordered, non-overlapping list.

    Fenced blocks are always kept.  A standalone block is dropped when it
    intersects anything already accepted, whether fully contained or only
    partially overlapping.
    """
    accepted: List[DiagramBlock] = list(fenced)
    for block in sorted(standalone, key=lambda b: b.start):
        if any(block.overlaps(existing) for existing in accepted):
            continue
        accepted.append(block)
    accepted.sort(key=lambda b: b.start)
    return accepted
