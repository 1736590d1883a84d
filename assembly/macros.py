"""
Confluence storage-format macro envelopes.

Text segments go into the Markdown macro as a raw CDATA payload.  Diagram
segments go into an ADF extension node for the PlantUML Forge app, with the
same node repeated under <ac:adf-fallback> for editors that cannot run the
extension.
"""

import itertools
from typing import Callable

from assembly.blocks import ExtensionDescriptor

IdFactory = Callable[[], str]


def escape_for_adf(content: str) -> str:
    """Escape the four characters ADF parameters cannot carry verbatim."""
    return (
        content
        .replace('&', '&amp;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
        .replace('"', '&quot;')
    )


def _cdata(content: str) -> str:
    # "]]>" would close the section early; split it across two sections.
    return '<![CDATA[' + content.replace(']]>', ']]]]><![CDATA[>') + ']]>'


def wrap_text_macro(content: str, macro_name: str = "markdown") -> str:
    """Wrap Markdown *content*, unescaped, in a Confluence Markdown macro.

    *macro_name* selects the macro for plugin variants that register the
    Markdown renderer under another name.
    """
    return (
        f'<ac:structured-macro ac:name="{macro_name}">\n'
        f'  <ac:plain-text-body>{_cdata(content)}</ac:plain-text-body>\n'
        f'</ac:structured-macro>'
    )


class LocalIdGenerator:
    """Counter-backed local-id source, one instance per assembly call."""

    def __init__(self, prefix: str = "plantuml", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


def _adf_node(escaped: str, local_id: str, ext: ExtensionDescriptor) -> str:
    key = escape_for_adf(ext.extension_key)
    ext_type = escape_for_adf(ext.extension_type)
    ari = escape_for_adf(ext.extension_ari)
    label = escape_for_adf(ext.label)
    environment = escape_for_adf(ext.environment)
    local_id = escape_for_adf(local_id)
    return (
        '<ac:adf-node type="extension">\n'
        f'<ac:adf-attribute key="extension-key">{key}</ac:adf-attribute>\n'
        f'<ac:adf-attribute key="extension-type">{ext_type}</ac:adf-attribute>\n'
        '<ac:adf-attribute key="parameters">\n'
        f'<ac:adf-parameter key="local-id">{local_id}</ac:adf-parameter>\n'
        f'<ac:adf-parameter key="extension-id">{ari}</ac:adf-parameter>\n'
        f'<ac:adf-parameter key="extension-title">{label}</ac:adf-parameter>\n'
        '<ac:adf-parameter key="layout">extension</ac:adf-parameter>\n'
        f'<ac:adf-parameter key="forge-environment">{environment}</ac:adf-parameter>\n'
        '<ac:adf-parameter key="render">native</ac:adf-parameter>\n'
        '<ac:adf-parameter key="guest-params">\n'
        f'<ac:adf-parameter key="text">{escaped}</ac:adf-parameter>\n'
        '</ac:adf-parameter>\n'
        '</ac:adf-attribute>\n'
        f'<ac:adf-attribute key="text">{label}</ac:adf-attribute>\n'
        '<ac:adf-attribute key="layout">default</ac:adf-attribute>\n'
        f'<ac:adf-attribute key="local-id">{local_id}</ac:adf-attribute>\n'
        '</ac:adf-node>'
    )


def wrap_diagram_macro(
    body: str, local_id: str, extension: ExtensionDescriptor = ExtensionDescriptor(),
) -> str:
    """Wrap a PlantUML *body* in an ADF extension envelope plus its fallback."""
    node = _adf_node(escape_for_adf(body), local_id, extension)
    return (
        '<ac:adf-extension>\n'
        f'{node}\n'
        '<ac:adf-fallback>\n'
        f'{node}\n'
        '</ac:adf-fallback>\n'
        '</ac:adf-extension>'
    )
