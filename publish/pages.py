"""
Confluence page operations for assembled content.

Thin wrappers over the atlassian-python-api Confluence client: content is
run through the assembler, sent in storage representation, and the useful
parts of the response are returned as plain dicts.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from assembly import EngineConfig, assemble_document, describe_result


class PublishError(RuntimeError):
    """Raised when a page cannot be published or looked up."""


class PageNotFoundError(PublishError):
    pass


def page_url(links: Dict[str, Any], fallback_base: str = "") -> str:
    """Absolute web URL from a content response's ``_links`` block."""
    webui = links.get('webui', '')
    base = links.get('base')
    if not base:
        base = fallback_base.rstrip('/')
        if base and not base.endswith('/wiki'):
            base += '/wiki'
    return f"{base}{webui}"


def _client_url(confluence) -> str:
    return getattr(confluence, 'url', '') or ''


def create_page(
    confluence,
    title: str,
    content: str,
    space_key: Optional[str] = None,
    parent_id: Optional[str] = None,
    attachment_path: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> Dict[str, Any]:
    """Assemble *content* and create a new page from it.

    An attachment that fails to upload does not undo the page; the failure
    is reported under ``attachment_error`` instead.
    """
    if not space_key:
        raise PublishError("space key is required (pass one or set CONFLUENCE_SPACE_KEY)")

    result = assemble_document(content, config)
    try:
        page = confluence.create_page(
            space=space_key,
            title=title,
            body=result.content,
            parent_id=parent_id,
            type='page',
            representation='storage',
        )
    except Exception as exc:
        raise PublishError(f"Error creating Confluence page: {exc}") from exc

    page_id = str(page.get('id', ''))
    print(f"[publish] Created page {page_id} '{title}' "
          f"({result.diagram_count} diagram(s))", file=sys.stderr)

    attachment = None
    attachment_error = None
    if attachment_path:
        try:
            attachment = upload_attachment(confluence, page_id, attachment_path)
        except Exception as exc:
            attachment_error = str(exc)
            print(f"[publish] Page created but file upload failed: {exc}", file=sys.stderr)

    return {
        'page_id': page_id,
        'title': page.get('title', title),
        'url': page_url(page.get('_links', {}), _client_url(confluence)),
        'diagram_count': result.diagram_count,
        'summary': describe_result(result),
        'attachment': attachment,
        'attachment_error': attachment_error,
    }


def update_page(
    confluence,
    page_id: str,
    title: Optional[str] = None,
    content: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> Dict[str, Any]:
    """Update title and/or body of an existing page.

    Whatever is not given is carried over from the current version.  The
    client bumps the version number.
    """
    try:
        current = confluence.get_page_by_id(page_id, expand='version,space,body.storage')
    except Exception as exc:
        raise PageNotFoundError(f"Page {page_id} not found or not accessible: {exc}") from exc
    if not current:
        raise PageNotFoundError(f"Page {page_id} not found or not accessible")

    diagram_count = 0
    if content:
        result = assemble_document(content, config)
        body = result.content
        diagram_count = result.diagram_count
    else:
        body = current.get('body', {}).get('storage', {}).get('value', '')

    try:
        page = confluence.update_page(
            page_id=page_id,
            title=title or current.get('title', ''),
            body=body,
            type='page',
            representation='storage',
        )
    except Exception as exc:
        raise PublishError(f"Error updating Confluence page: {exc}") from exc

    print(f"[publish] Updated page {page_id}", file=sys.stderr)
    return {
        'page_id': str(page.get('id', page_id)),
        'title': page.get('title', title),
        'url': page_url(page.get('_links', {}), _client_url(confluence)),
        'diagram_count': diagram_count,
        'version': page.get('version', {}).get('number'),
    }


def _cql_quote(value: str) -> str:
    return str(value).replace('\\', '\\\\').replace('"', '\\"')


def search_pages(
    confluence, query: str, space_key: Optional[str] = None, limit: int = 10,
) -> List[Dict[str, Any]]:
    """Full-text CQL search, optionally restricted to one space."""
    limit = max(1, min(int(limit), 50))
    cql = f'text ~ "{_cql_quote(query)}"'
    if space_key:
        cql += f' AND space = "{_cql_quote(space_key)}"'

    response = confluence.cql(
        cql, limit=limit, expand='content.space,content.version',
    )
    base = _client_url(confluence)
    pages = []
    for item in response.get('results', []):
        page = item.get('content', {})
        pages.append({
            'id': page.get('id'),
            'title': page.get('title'),
            'space': page.get('space', {}).get('name'),
            'url': page_url(page.get('_links', {}), base),
            'excerpt': item.get('excerpt', ''),
            'last_modified': page.get('version', {}).get('when'),
        })
    return pages


def upload_attachment(confluence, page_id: str, file_path: str) -> str:
    """Attach a local file to a page and return its filename."""
    path = Path(file_path)
    if not path.exists():
        raise PublishError(f"File not found: {file_path}")
    confluence.attach_file(str(path), name=path.name, page_id=page_id)
    print(f"[publish] Attached {path.name} to page {page_id}", file=sys.stderr)
    return path.name


def check_connection(confluence, space_key: Optional[str] = None) -> Dict[str, Any]:
    """Check space lookup, page listing and authentication independently.

    Each step that fails is recorded under its own ``*_error`` key so a
    partial connection still reports what does work.
    """
    base = _client_url(confluence)
    wiki_base = page_url({}, base)
    result: Dict[str, Any] = {'space_key': space_key, 'space': {}, 'pages': []}

    if space_key:
        try:
            space = confluence.get_space(space_key, expand='description.plain,homepage')
            result['space'] = {
                'key': space.get('key'),
                'name': space.get('name'),
                'type': space.get('type', 'unknown'),
                'status': space.get('status', 'unknown'),
                'id': space.get('id'),
                'url': f"{wiki_base}/spaces/{space.get('key')}",
            }
        except Exception as exc:
            result['space_error'] = f"Failed to get space info: {exc}"

        try:
            pages = confluence.get_all_pages_from_space(space_key, start=0, limit=3) or []
            result['pages'] = [
                {
                    'id': p.get('id'),
                    'title': p.get('title'),
                    'type': p.get('type'),
                    'url': page_url(p.get('_links', {}), base),
                }
                for p in pages
            ]
        except Exception as exc:
            result['pages_error'] = f"Failed to get pages: {exc}"
    else:
        result['space_error'] = "No space key given (pass one or set CONFLUENCE_SPACE_KEY)"

    try:
        spaces = confluence.get_all_spaces(start=0, limit=1)
        if isinstance(spaces, dict):
            total = spaces.get('size', len(spaces.get('results', [])))
        else:
            total = len(spaces or [])
        result['auth'] = {'authenticated': True, 'total_spaces': total}
    except Exception as exc:
        result['auth_error'] = f"Authentication failed: {exc}"

    result['capabilities'] = {
        'basic_api': bool(result['space'].get('key')),
        'page_access': bool(result['pages']),
        'authenticated': 'auth' in result,
    }
    result['ok'] = not any(k.endswith('_error') for k in result)
    print(f"[publish] Connection check for space '{space_key}': "
          f"{'full' if result['ok'] else 'partial'}", file=sys.stderr)
    return result
