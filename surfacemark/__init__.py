"""
SurfaceMark — Markdown to sanitized HTML for usertext and wiki content.

Usage::

    import surfacemark
    html = surfacemark.markdown("**hi** @bob", nofollow=True)
"""

from surfacemark._version import __version__
from surfacemark.core.errors import (
    DepthExceeded,
    InvalidArgument,
    InvalidSurface,
    RenderError,
)
from surfacemark.services.profiles import Purpose, Surface
from surfacemark.services.renderer import (
    RENDERER_USERTEXT,
    RENDERER_WIKI,
    RenderRequest,
    RenderResult,
    markdown,
    register_resolver,
    render,
    render_document,
    set_username_callbacks,
)


__all__ = [
    "__version__",
    "RENDERER_USERTEXT", "RENDERER_WIKI",
    "Surface", "Purpose",
    "RenderRequest", "RenderResult",
    "markdown", "render", "render_document",
    "register_resolver", "set_username_callbacks",
    "RenderError", "InvalidSurface", "InvalidArgument", "DepthExceeded",
]
