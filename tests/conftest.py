#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pytest fixtures for SurfaceMark tests.

Every test starts from a freshly built profile registry so resolver
registrations never leak from one test into the next.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from surfacemark.core.config import get_settings
from surfacemark.main import create_app
from surfacemark.services.profiles import get_registry


# -----------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def fresh_registry():
    get_settings.cache_clear()
    get_registry.cache_clear()
    yield
    get_registry.cache_clear()
    get_settings.cache_clear()


@pytest.fixture
def registry():
    return get_registry()


@pytest_asyncio.fixture(scope="function")
async def client():
    """HTTP test client bound to a fresh application instance."""
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# -----------------------------------------------------------------------------
# Helper functions for tests
# -----------------------------------------------------------------------------

_HREF_RE = re.compile(r'href="#([^"]+)"')
_ID_RE = re.compile(r'<h[1-6] id="([^"]+)"')


def toc_hrefs(html: str) -> list[str]:
    return _HREF_RE.findall(html)


def heading_ids(html: str) -> list[str]:
    return _ID_RE.findall(html)


# -----------------------------------------------------------------------------
