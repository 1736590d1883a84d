from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

_ENV_VARS = (
    "PLANTUML_NAMESPACE_ID",
    "PLANTUML_EXTENSION_ID",
    "PLANTUML_EXTENSION_LABEL",
    "PLANTUML_FORGE_ENVIRONMENT",
    "PLANTUML_SUBTYPES",
    "MARKDOWN_MACRO_NAME",
    "CONFLUENCE_URL",
    "CONFLUENCE_API_TOKEN",
    "CONFLUENCE_TOKEN",
    "CONFLUENCE_USERNAME",
    "CONFLUENCE_SPACE_KEY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test without ambient Confluence / PlantUML settings."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class FakeConfluence:
    """Records calls made through the atlassian Confluence client API."""

    url = "https://example.atlassian.net"

    def __init__(self, pages: Optional[Dict[str, Dict[str, Any]]] = None):
        self.pages = pages or {}
        self.created: List[Dict[str, Any]] = []
        self.updated: List[Dict[str, Any]] = []
        self.attached: List[Dict[str, Any]] = []
        self.queries: List[Dict[str, Any]] = []
        self.fail_create = False
        self.fail_space = False
        self.fail_pages = False
        self.fail_auth = False

    def create_page(self, space, title, body, parent_id=None, type='page',
                    representation='storage'):
        if self.fail_create:
            raise ValueError("space does not exist")
        self.created.append(dict(space=space, title=title, body=body,
                                 parent_id=parent_id, type=type,
                                 representation=representation))
        return {
            'id': '4242',
            'title': title,
            '_links': {'base': 'https://example.atlassian.net/wiki',
                       'webui': '/spaces/ARCH/pages/4242'},
        }

    def get_page_by_id(self, page_id, expand=None):
        return self.pages.get(page_id)

    def update_page(self, page_id, title, body=None, type='page',
                    representation='storage'):
        self.updated.append(dict(page_id=page_id, title=title, body=body,
                                 type=type, representation=representation))
        version = self.pages[page_id]['version']['number'] + 1
        return {
            'id': page_id,
            'title': title,
            'version': {'number': version},
            '_links': {'webui': f'/spaces/ARCH/pages/{page_id}'},
        }

    def attach_file(self, filename, name=None, page_id=None):
        self.attached.append(dict(filename=filename, name=name, page_id=page_id))
        return {'results': [{'title': name}]}

    def cql(self, cql, limit=None, expand=None):
        self.queries.append(dict(cql=cql, limit=limit, expand=expand))
        return {
            'size': 1,
            'results': [{
                'excerpt': 'the <b>design</b> page',
                'content': {
                    'id': '77',
                    'title': 'Design',
                    'space': {'name': 'Architecture'},
                    'version': {'when': '2026-01-02T10:00:00.000Z'},
                    '_links': {'webui': '/spaces/ARCH/pages/77'},
                },
            }],
        }

    def get_space(self, space_key, expand=None):
        if self.fail_space:
            raise ValueError("No space with given key")
        return {'id': 98305, 'key': space_key, 'name': 'Architecture',
                'type': 'global', 'status': 'current'}

    def get_all_pages_from_space(self, space, start=0, limit=100):
        if self.fail_pages:
            raise ValueError("permission denied")
        return [
            {'id': page_id, 'title': page['title'], 'type': 'page',
             '_links': {'webui': f'/spaces/{space}/pages/{page_id}'}}
            for page_id, page in list(self.pages.items())[start:start + limit]
        ]

    def get_all_spaces(self, start=0, limit=50):
        if self.fail_auth:
            raise ValueError("401 Unauthorized")
        return {'results': [{'key': 'ARCH'}], 'size': 1}


@pytest.fixture
def fake_confluence():
    return FakeConfluence(pages={
        '100': {
            'id': '100',
            'title': 'Existing',
            'version': {'number': 3},
            'body': {'storage': {'value': '<p>old body</p>'}},
        },
    })
