"""
FastAPI application for publishing mixed Markdown + PlantUML pages.

Agents post author content; the server assembles it into Confluence storage
format and, for the page endpoints, creates or updates the page through the
Confluence REST API.  /api/render works without any Confluence credentials.
"""

from __future__ import annotations

import asyncio
import sys
import traceback
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from assembly import assemble_document, describe_result
from publish.config import (
    default_space_key,
    engine_config_from_env,
    get_confluence_client,
    load_env,
)
from publish.pages import (
    PageNotFoundError,
    PublishError,
    check_connection,
    create_page,
    search_pages,
    update_page,
)

load_env()

app = FastAPI(title="Confluence Mixed-Content Publisher")


def _require_client():
    confluence = get_confluence_client()
    if confluence is None:
        raise HTTPException(
            status_code=503,
            detail="Confluence client not configured (check CONFLUENCE_URL and token)",
        )
    return confluence


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="request body must be a JSON object")
    return body


def _string_field(body: dict, name: str) -> Optional[str]:
    """body[name] when absent or a string; 400 for any other JSON type."""
    value = body.get(name)
    if value is not None and not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} must be a string")
    return value


# ──────────────────────────────────────────────────────────────────
# REST API — Render
# ──────────────────────────────────────────────────────────────────

@app.post("/api/render")
async def render(request: Request):
    """Assemble content into storage format without publishing it."""
    body = await _json_body(request)
    content = _string_field(body, "content")
    if content is None:
        raise HTTPException(status_code=400, detail="content is required")

    result = assemble_document(content, engine_config_from_env())
    return JSONResponse(content={
        "content": result.content,
        "diagram_count": result.diagram_count,
        "summary": describe_result(result),
    })


# ──────────────────────────────────────────────────────────────────
# REST API — Pages
# ──────────────────────────────────────────────────────────────────

@app.post("/api/pages")
async def publish_page(request: Request):
    body = await _json_body(request)
    title = _string_field(body, "title")
    content = _string_field(body, "content")
    parent_id = _string_field(body, "parent_id")
    if not title:
        raise HTTPException(status_code=400, detail="title is required")
    if not content:
        raise HTTPException(status_code=400, detail="content is required")
    if len(title) > 255:
        raise HTTPException(status_code=400, detail="title must be at most 255 characters")

    space_key = _string_field(body, "space_key") or default_space_key()
    if not space_key:
        raise HTTPException(
            status_code=400,
            detail="space_key is required (or set CONFLUENCE_SPACE_KEY)",
        )

    confluence = _require_client()
    loop = asyncio.get_event_loop()
    try:
        result = await loop.run_in_executor(
            None,
            lambda: create_page(
                confluence, title, content,
                space_key=space_key,
                parent_id=parent_id,
                config=engine_config_from_env(),
            ),
        )
    except PublishError as exc:
        traceback.print_exc()
        raise HTTPException(status_code=502, detail=str(exc))
    return JSONResponse(content=result, status_code=201)


@app.put("/api/pages/{page_id}")
async def edit_page(page_id: str, request: Request):
    body = await _json_body(request)
    title = _string_field(body, "title")
    content = _string_field(body, "content")
    confluence = _require_client()
    loop = asyncio.get_event_loop()
    try:
        result = await loop.run_in_executor(
            None,
            lambda: update_page(
                confluence, page_id,
                title=title,
                content=content,
                config=engine_config_from_env(),
            ),
        )
    except PageNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except PublishError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return JSONResponse(content=result)


@app.get("/api/pages/search")
async def find_pages(query: str, space_key: Optional[str] = None, limit: int = 10):
    confluence = _require_client()
    loop = asyncio.get_event_loop()
    try:
        pages = await loop.run_in_executor(
            None, search_pages, confluence, query, space_key, limit,
        )
    except Exception as exc:
        print(f"[app] Search failed: {exc}", file=sys.stderr)
        raise HTTPException(status_code=502, detail=f"Error searching Confluence pages: {exc}")
    return JSONResponse(content={"count": len(pages), "pages": pages})


# ──────────────────────────────────────────────────────────────────
# REST API — Connection check
# ──────────────────────────────────────────────────────────────────

@app.get("/api/connection")
async def connection(space_key: Optional[str] = None):
    """Check space access, page listing and authentication in one call."""
    confluence = _require_client()
    loop = asyncio.get_event_loop()
    result = await loop.run_in_executor(
        None, check_connection, confluence, space_key or default_space_key(),
    )
    return JSONResponse(content=result)


# ──────────────────────────────────────────────────────────────────
# Entrypoint
# ──────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=True)
