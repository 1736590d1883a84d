"""
Data model for mixed-content assembly.

Every value here lives for a single assembly call: the input text is scanned
into DiagramBlocks, re-segmented into Segments, and each Segment is wrapped
into a Confluence storage-format macro.  ExtensionDescriptor and EngineConfig
are the only inputs that come from outside the text itself.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

FENCED = "fenced"
STANDALONE = "standalone"

TEXT = "text"
DIAGRAM = "diagram"

# PlantUML @start<subtype> / @end<subtype> keyword family
DEFAULT_SUBTYPES: Tuple[str, ...] = (
    "uml", "wbs", "mindmap", "gantt", "activity", "component", "deployment",
    "state", "timing", "sequence", "class", "usecase", "object", "salt",
    "ditaa", "dot", "jcckit", "wire", "yaml", "json", "ebnf", "regex", "flow",
    "nwdiag", "rackdiag", "packetdiag", "actdiag", "blockdiag", "seqdiag",
)

# "PlantUML for Confluence" Forge app
DEFAULT_NAMESPACE_ID = "f46085f3-e7c3-4cb5-ba7a-99a19de6e28c"
DEFAULT_EXTENSION_ID = "31e52f94-5266-4b1d-a7c8-cef0486bc2e7"
DEFAULT_MODULE_KEY = "plantuml-for-confluence"
DEFAULT_LABEL = "PlantUML for Confluence"
DEFAULT_ENVIRONMENT = "PRODUCTION"


# ──────────────────────────────────────────────────────────────────
# Dataclasses
# ──────────────────────────────────────────────────────────────────

@dataclass
class DiagramBlock:
    start: int
    end: int
    body: str
    origin: str = FENCED

    def overlaps(self, other: "DiagramBlock") -> bool:
        """True when the half-open spans share at least one character."""
        return self.start < other.end and other.start < self.end


@dataclass
class Segment:
    kind: str
    content: str
    start: int = 0
    end: int = 0

    @property
    def is_diagram(self) -> bool:
        return self.kind == DIAGRAM


@dataclass(frozen=True)
class ExtensionDescriptor:
    """Static identity of the Forge extension that renders diagrams."""

    namespace_id: str = DEFAULT_NAMESPACE_ID
    extension_id: str = DEFAULT_EXTENSION_ID
    label: str = DEFAULT_LABEL
    environment: str = DEFAULT_ENVIRONMENT
    module_key: str = DEFAULT_MODULE_KEY
    extension_type: str = "com.atlassian.ecosystem"

    @property
    def extension_key(self) -> str:
        return f"{self.namespace_id}/{self.extension_id}/static/{self.module_key}"

    @property
    def extension_ari(self) -> str:
        return f"ari:cloud:ecosystem::extension/{self.extension_key}"


@dataclass(frozen=True)
class EngineConfig:
    fence_language: str = "plantuml"
    subtypes: Tuple[str, ...] = DEFAULT_SUBTYPES
    extension: ExtensionDescriptor = field(default_factory=ExtensionDescriptor)
    text_macro_name: str = "markdown"
    id_prefix: str = "plantuml"


@dataclass
class AssemblyResult:
    content: str
    segments: List[Segment] = field(default_factory=list)
    diagram_count: int = 0
