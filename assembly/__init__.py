"""Mixed Markdown + PlantUML → Confluence storage-format assembly.

Splits author content into prose and diagram segments and wraps each in
the macro Confluence renders it with.  No I/O, no environment access.
"""

from assembly.blocks import (
    DEFAULT_SUBTYPES,
    AssemblyResult,
    DiagramBlock,
    EngineConfig,
    ExtensionDescriptor,
    Segment,
)
from assembly.engine import assemble, assemble_document, describe_result, split_segments
from assembly.extract import extract_fenced_blocks, extract_standalone_blocks, resolve_overlaps
from assembly.macros import LocalIdGenerator, escape_for_adf, wrap_diagram_macro, wrap_text_macro
from assembly.segment import segment_document

__all__ = [
    "DEFAULT_SUBTYPES",
    "AssemblyResult",
    "DiagramBlock",
    "EngineConfig",
    "ExtensionDescriptor",
    "Segment",
    "assemble",
    "assemble_document",
    "describe_result",
    "split_segments",
    "extract_fenced_blocks",
    "extract_standalone_blocks",
    "resolve_overlaps",
    "LocalIdGenerator",
    "escape_for_adf",
    "wrap_diagram_macro",
    "wrap_text_macro",
    "segment_document",
]
