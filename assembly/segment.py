"""Split a document into ordered text and diagram segments."""

from typing import List

from assembly.blocks import DIAGRAM, TEXT, DiagramBlock, Segment


def segment_document(text: str, blocks: List[DiagramBlock]) -> List[Segment]:
    """Walk *text* along the resolved *blocks* and return its segments.

    With no blocks the whole document comes back untouched as a single text
    segment.  Otherwise the prose between blocks is trimmed, and gaps that
    trim to nothing are dropped rather than emitted empty.
    """
    if not blocks:
        return [Segment(kind=TEXT, content=text, start=0, end=len(text))]

    segments: List[Segment] = []
    last_end = 0

    def _add_text(start: int, end: int) -> None:
        chunk = text[start:end].strip()
        if chunk:
            segments.append(Segment(kind=TEXT, content=chunk, start=start, end=end))

    for block in blocks:
        if block.start > last_end:
            _add_text(last_end, block.start)
        segments.append(Segment(
            kind=DIAGRAM, content=block.body, start=block.start, end=block.end,
        ))
        last_end = block.end

    if last_end < len(text):
        _add_text(last_end, len(text))

    return segments
