"""Publishing assembled content to Confluence.

Wraps the atlassian-python-api client; all content goes through the
assembly engine before it is sent.
"""

from publish.config import default_space_key, engine_config_from_env, get_confluence_client, load_env
from publish.pages import (
    PageNotFoundError,
    PublishError,
    check_connection,
    create_page,
    page_url,
    search_pages,
    update_page,
    upload_attachment,
)

__all__ = [
    "default_space_key",
    "engine_config_from_env",
    "get_confluence_client",
    "load_env",
    "PageNotFoundError",
    "PublishError",
    "check_connection",
    "create_page",
    "page_url",
    "search_pages",
    "update_page",
    "upload_attachment",
]
