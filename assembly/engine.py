"""
Mixed-content assembler.

Turns Markdown with embedded PlantUML into one Confluence storage-format
body:

    extract (fenced + standalone) → resolve overlaps → segment → wrap → join

The transform is pure.  Configuration arrives as an EngineConfig value and
local ids come from a generator created per call, so concurrent callers
never share state.
"""

from typing import List, Optional

from assembly.blocks import AssemblyResult, EngineConfig, Segment
from assembly.extract import (
    extract_fenced_blocks,
    extract_standalone_blocks,
    resolve_overlaps,
)
from assembly.macros import IdFactory, LocalIdGenerator, wrap_diagram_macro, wrap_text_macro
from assembly.segment import segment_document

SEPARATOR = "\n\n"


def split_segments(text: str, config: Optional[EngineConfig] = None) -> List[Segment]:
    """Return the ordered text/diagram segments of *text* without wrapping."""
    config = config or EngineConfig()
    fenced = extract_fenced_blocks(text, config.fence_language)
    standalone = extract_standalone_blocks(text, config.subtypes)
    return segment_document(text, resolve_overlaps(fenced, standalone))


def assemble_document(
    text: str,
    config: Optional[EngineConfig] = None,
    id_factory: Optional[IdFactory] = None,
) -> AssemblyResult:
    """Assemble *text* into storage format and report what was emitted."""
    config = config or EngineConfig()
    next_id = id_factory or LocalIdGenerator(config.id_prefix)

    segments = split_segments(text, config)
    wrapped: List[str] = []
    for seg in segments:
        if seg.is_diagram:
            wrapped.append(wrap_diagram_macro(seg.content, next_id(), config.extension))
        else:
            wrapped.append(wrap_text_macro(seg.content, config.text_macro_name))

    return AssemblyResult(
        content=SEPARATOR.join(wrapped).strip(),
        segments=segments,
        diagram_count=sum(1 for s in segments if s.is_diagram),
    )


def assemble(
    text: str,
    config: Optional[EngineConfig] = None,
    id_factory: Optional[IdFactory] = None,
) -> str:
    return assemble_document(text, config, id_factory).content


def describe_result(result: AssemblyResult) -> str:
    """One-line-per-part summary of how the content was processed."""
    if not result.diagram_count:
        return "Markdown content processed with Confluence Markdown Macro"
    return (
        "Mixed content processed:\n"
        "- Markdown sections → Confluence Markdown Macro\n"
        f"- {result.diagram_count} PlantUML diagram(s) → ADF Extension format"
    )
