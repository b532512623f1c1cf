#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render endpoints.

POST /api/v1/render                      full render request (JSON body)
GET  /api/v1/render?content=...&surface=  live preview for an editor
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from surfacemark.core.config import get_settings
from surfacemark.schemas import RenderRequestBody, RenderResponse
from surfacemark.services.profiles import resolve_surface
from surfacemark.services.renderer import RenderRequest, render_document


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/render", tags=["render"])


# -----------------------------------------------------------------------------

def _check_size(text: str) -> None:
    limit = get_settings().max_document_chars
    if len(text) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Document exceeds {limit} characters",
        )


# -----------------------------------------------------------------------------

@router.post("", response_model=RenderResponse)
async def render_markdown(body: RenderRequestBody):
    """Render a document on the requested surface."""
    _check_size(body.text)
    surface = resolve_surface(body.surface)
    result = render_document(RenderRequest(
        text=body.text,
        surface=surface,
        nofollow=body.nofollow,
        target=body.target,
        domain=body.domain,
        toc_id_prefix=body.toc_id_prefix,
        enable_toc=body.enable_toc,
    ))
    return RenderResponse(
        html=result.html,
        toc_html=result.toc_html,
        body_html=result.body_html,
        surface=surface.name.lower(),
    )


@router.get("", response_model=RenderResponse)
async def render_preview(
    content: str = Query(default=""),
    surface: str = Query(default="usertext"),
    toc:     bool = Query(default=False),
):
    """Return rendered HTML for a snippet — used by the live editor preview."""
    _check_size(content)
    resolved = resolve_surface(surface)
    result = render_document(RenderRequest(text=content, surface=resolved, enable_toc=toc))
    return RenderResponse(
        html=result.html,
        toc_html=result.toc_html,
        body_html=result.body_html,
        surface=resolved.name.lower(),
    )


# -----------------------------------------------------------------------------
