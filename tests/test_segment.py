"""
tests/test_segment.py

Re-segmentation of a document around resolved diagram spans.
"""

from __future__ import annotations

from typing import List

from assembly.blocks import DIAGRAM, TEXT, Segment
from assembly.engine import split_segments
from assembly.segment import segment_document


def _kinds(segments: List[Segment]) -> List[tuple]:
    return [(s.kind, s.content) for s in segments]


def test_no_blocks_returns_whole_document_untrimmed():
    text = "  # Title\n\nSome *prose*.\n  "
    assert segment_document(text, []) == [Segment(TEXT, text, 0, len(text))]


def test_empty_document():
    assert segment_document("", []) == [Segment(TEXT, "", 0, 0)]


def test_text_diagram_text():
    text = "Intro\n```plantuml\n@startuml\nA->B\n@enduml\n```\nOutro"
    assert _kinds(split_segments(text)) == [
        (TEXT, "Intro"),
        (DIAGRAM, "@startuml\nA->B\n@enduml"),
        (TEXT, "Outro"),
    ]


def test_diagram_only_has_no_text_segments():
    segments = split_segments("@startuml\nA->B\n@enduml")
    assert _kinds(segments) == [(DIAGRAM, "@startuml\nA->B\n@enduml")]


def test_whitespace_gaps_are_dropped():
    text = "\n\n@startuml\nA\n@enduml\n \n\t\n```plantuml\nB\n```\n\n"
    assert _kinds(split_segments(text)) == [
        (DIAGRAM, "@startuml\nA\n@enduml"),
        (DIAGRAM, "B"),
    ]


def test_unterminated_marker_folds_into_text():
    text = "Intro\n@startuml\nA\n```plantuml\nB\n```\nOutro"
    assert _kinds(split_segments(text)) == [
        (TEXT, "Intro\n@startuml\nA"),
        (DIAGRAM, "B"),
        (TEXT, "Outro"),
    ]


def test_partially_overlapping_standalone_is_not_segmented():
    text = "@startuml\nA\n```plantuml\nB\n@enduml\n```"
    assert _kinds(split_segments(text)) == [
        (TEXT, "@startuml\nA"),
        (DIAGRAM, "B\n@enduml"),
    ]


def test_segments_cover_the_document():
    text = (
        "# Design\n\nThe flow:\n\n"
        "```plantuml\n@startuml\nA -> B\n@enduml\n```\n\n"
        "Then the states:\n"
        "@startstate\n[*] --> Idle\n@endstate\n"
        "\nDone.\n"
    )
    segments = split_segments(text)

    pos = 0
    for seg in segments:
        assert seg.start >= pos
        assert text[pos:seg.start].strip() == ""
        if seg.kind == TEXT:
            assert text[seg.start:seg.end].strip() == seg.content
        else:
            assert seg.content in text[seg.start:seg.end]
        pos = seg.end
    assert text[pos:].strip() == ""
    assert [s.kind for s in segments] == [TEXT, DIAGRAM, TEXT, DIAGRAM, TEXT]
