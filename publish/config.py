"""
Environment-backed configuration for publishing.

Reads .env (current dir, then parents) with python-dotenv,
and turns the PLANTUML_* / MARKDOWN_* variables into the EngineConfig the
assembler is called with.  The assembler itself never looks at os.environ.
"""

import os
from pathlib import Path
from typing import Optional

from assembly.blocks import DEFAULT_SUBTYPES, EngineConfig, ExtensionDescriptor


def load_env() -> Optional[Path]:
    """Load the nearest .env file if python-dotenv is available.

    Returns the path that was loaded, or None.
    """
    try:
        from dotenv import load_dotenv
    except ImportError:
        return None

    env_path = Path('.env')
    if not env_path.exists():
        for parent in Path.cwd().parents:
            candidate = parent / '.env'
            if candidate.exists():
                env_path = candidate
                break
    if env_path.exists():
        load_dotenv(env_path)
        return env_path
    return None


def engine_config_from_env() -> EngineConfig:
    """Build an EngineConfig from environment variables, defaults when unset."""
    default_ext = ExtensionDescriptor()
    extension = ExtensionDescriptor(
        namespace_id=os.environ.get("PLANTUML_NAMESPACE_ID", default_ext.namespace_id),
        extension_id=os.environ.get("PLANTUML_EXTENSION_ID", default_ext.extension_id),
        label=os.environ.get("PLANTUML_EXTENSION_LABEL", default_ext.label),
        environment=os.environ.get("PLANTUML_FORGE_ENVIRONMENT", default_ext.environment),
    )

    raw_subtypes = os.environ.get("PLANTUML_SUBTYPES", "")
    subtypes = tuple(s.strip() for s in raw_subtypes.split(',') if s.strip())

    return EngineConfig(
        subtypes=subtypes or DEFAULT_SUBTYPES,
        extension=extension,
        text_macro_name=os.environ.get("MARKDOWN_MACRO_NAME", "markdown"),
    )


def default_space_key() -> str:
    return os.environ.get("CONFLUENCE_SPACE_KEY", "")


def get_confluence_client():
    """Create a Confluence client from the environment, or None.

    Uses PAT auth by default; basic auth (API token as password) when
    CONFLUENCE_USERNAME is also set, which is what Atlassian Cloud expects.
    """
    try:
        from atlassian import Confluence
    except ImportError:
        return None

    url = os.environ.get("CONFLUENCE_URL")
    token = os.environ.get("CONFLUENCE_API_TOKEN") or os.environ.get("CONFLUENCE_TOKEN")
    if not url or not token:
        return None

    username = os.environ.get("CONFLUENCE_USERNAME")
    if username:
        return Confluence(url=url, username=username, password=token)
    return Confluence(url=url, token=token)
