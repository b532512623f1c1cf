#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Markup renderer
===============
Renders usertext / wiki Markdown to sanitized HTML.

A render call runs one or two engine passes:

  1. TOC pass (only with ``enable_toc``): the surface's TOC profile with the
     caller's id prefix; produces ``<div class="toc">…</div>``.
  2. Main pass: the surface's main profile with the caller's link settings.
     When the TOC was requested, headings get the same ``<prefix>toc_<n>`` ids
     the TOC links point at.

Both passes run on profiles derived for this call only, so nothing a call
asks for can be seen by another call, concurrent or later.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from surfacemark.core.errors import DepthExceeded
from surfacemark.services.engine import new_engine, run_engine
from surfacemark.services.profiles import (
    OutputFlag,
    ProfileRegistry,
    Purpose,
    Surface,
    get_registry,
    resolve_surface,
)
from surfacemark.services.resolver import ResolverBridge

log = logging.getLogger(__name__)


RENDERER_USERTEXT = int(Surface.USERTEXT)
RENDERER_WIKI = int(Surface.WIKI)


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class RenderRequest:
    text: Union[str, bytes]
    surface: Union[Surface, int, str] = Surface.USERTEXT
    nofollow: bool = False
    target: Optional[str] = None
    domain: Optional[str] = None
    toc_id_prefix: Optional[str] = None
    enable_toc: bool = False


@dataclass(frozen=True)
class RenderResult:
    toc_html: str = ""
    body_html: str = ""

    @property
    def html(self) -> str:
        """TOC fragment followed by the document, as one string."""
        return self.toc_html + self.body_html


# -----------------------------------------------------------------------------

def _decode(text: Union[str, bytes, None]) -> str:
    if text is None:
        return ""
    if isinstance(text, (bytes, bytearray, memoryview)):
        return bytes(text).decode("utf-8", errors="replace")
    return text


def render_document(request: RenderRequest, registry: ProfileRegistry | None = None) -> RenderResult:
    """Run the TOC pass (if requested) and the main pass for *request*."""
    registry = registry or get_registry()
    surface = resolve_surface(request.surface)

    main_base = registry.get(surface, Purpose.MAIN)
    toc_base = registry.get(surface, Purpose.TOC) if request.enable_toc else None

    text = _decode(request.text)
    if not text:
        return RenderResult()

    toc_html = ""
    extra = OutputFlag(0)
    try:
        if toc_base is not None:
            toc_profile = toc_base.derive(toc_id_prefix=request.toc_id_prefix)
            toc_html = run_engine(new_engine(toc_profile), text)
            extra = OutputFlag.TOC

        main_profile = main_base.derive(
            nofollow=request.nofollow,
            target=request.target,
            domain=request.domain,
            toc_id_prefix=request.toc_id_prefix,
            extra_output=extra,
        )
        body_html = run_engine(new_engine(main_profile), text)
    except DepthExceeded:
        log.warning("Render aborted: %s document of %d chars nests too deeply",
                    surface.name.lower(), len(text))
        raise

    log.debug("Rendered %s document: %d chars in, %d out (toc=%s)",
              surface.name.lower(), len(text), len(toc_html) + len(body_html), request.enable_toc)
    return RenderResult(toc_html, body_html)


# -----------------------------------------------------------------------------
# Public render functions
# -----------------------------------------------------------------------------

def render(
    text: Union[str, bytes],
    nofollow: bool = False,
    target: Optional[str] = None,
    domain: Optional[str] = None,
    toc_id_prefix: Optional[str] = None,
    surface: Union[Surface, int, str] = Surface.USERTEXT,
    enable_toc: bool = False,
) -> str:
    """
    Render *text* to HTML.

    Parameters
    ----------
    text          : Markdown source (``bytes`` are decoded as UTF-8)
    nofollow      : add ``rel="nofollow"`` to every link
    target        : ``target`` attribute for every link
    domain        : links containing this domain skip a ``_blank`` target
    toc_id_prefix : prefix for heading ids and TOC anchors
    surface       : ``Surface.USERTEXT`` / ``Surface.WIKI`` (or 0 / 1)
    enable_toc    : prepend a table of contents and give headings ids

    Raises ``InvalidSurface`` for an unknown surface and ``DepthExceeded``
    when the document nests beyond what the engine can follow.
    """
    request = RenderRequest(
        text=text,
        surface=surface,
        nofollow=nofollow,
        target=target,
        domain=domain,
        toc_id_prefix=toc_id_prefix,
        enable_toc=enable_toc,
    )
    return render_document(request).html


def markdown(
    text: Union[str, bytes],
    nofollow: bool = False,
    target: Optional[str] = None,
    domain: Optional[str] = None,
    toc_id_prefix: Optional[str] = None,
    renderer: Union[Surface, int, str] = RENDERER_USERTEXT,
    enable_toc: bool = False,
) -> str:
    """Render a Markdown document (``renderer`` selects the surface)."""
    return render(text, nofollow, target, domain, toc_id_prefix, renderer, enable_toc)


# -----------------------------------------------------------------------------
# Username callbacks
# -----------------------------------------------------------------------------

def register_resolver(
    user_exists: Optional[Callable[[str], object]] = None,
    display_name_for: Optional[Callable[[str], object]] = None,
) -> bool:
    """Install the usertext mention callbacks, replacing any previous pair."""
    bridge = ResolverBridge.from_callbacks(user_exists, display_name_for)
    get_registry().set_resolver(bridge, Surface.USERTEXT)
    return True


def set_username_callbacks(
    username_exists: Optional[Callable[[str], object]],
    username_to_display_name: Optional[Callable[[str], object]],
) -> bool:
    """Set the callbacks for @mention username lookups."""
    return register_resolver(username_exists, username_to_display_name)


# -----------------------------------------------------------------------------
