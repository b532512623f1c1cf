#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for surfaces, render profiles and the profile registry."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from surfacemark import RENDERER_USERTEXT, RENDERER_WIKI
from surfacemark.core.config import Settings
from surfacemark.core.errors import InvalidSurface
from surfacemark.services.profiles import (
    DEFAULT_OUTPUT_FLAGS,
    DEFAULT_PARSER_FLAGS,
    OutputFlag,
    ParserFlag,
    ProfileRegistry,
    Purpose,
    RenderProfile,
    Surface,
    resolve_surface,
)
from surfacemark.services.resolver import NULL_RESOLVER, ResolverBridge


# =============================================================================
# Surfaces
# =============================================================================

def test_surface_constants():
    assert RENDERER_USERTEXT == 0
    assert RENDERER_WIKI == 1
    assert Surface.USERTEXT == 0
    assert Surface.WIKI == 1


@pytest.mark.parametrize("value, expected", [
    (Surface.WIKI, Surface.WIKI),
    (0, Surface.USERTEXT),
    (1, Surface.WIKI),
    ("0", Surface.USERTEXT),
    ("wiki", Surface.WIKI),
    ("UserText", Surface.USERTEXT),
])
def test_resolve_surface(value, expected):
    assert resolve_surface(value) is expected


@pytest.mark.parametrize("value", [2, -1, "7", "-1", "markdown", None, True, 1.0])
def test_resolve_surface_rejects(value):
    with pytest.raises(InvalidSurface) as exc_info:
        resolve_surface(value)
    assert str(exc_info.value) == "Invalid renderer"
    assert isinstance(exc_info.value, ValueError)


# =============================================================================
# Flags
# =============================================================================

def test_default_parser_flags():
    assert DEFAULT_PARSER_FLAGS & ParserFlag.TABLES
    assert DEFAULT_PARSER_FLAGS & ParserFlag.AUTOLINK
    assert DEFAULT_PARSER_FLAGS & ParserFlag.STRIKETHROUGH
    assert DEFAULT_PARSER_FLAGS & ParserFlag.SUPERSCRIPT
    assert DEFAULT_PARSER_FLAGS & ParserFlag.NO_INTRA_EMPHASIS
    assert not DEFAULT_PARSER_FLAGS & ParserFlag.FENCED_CODE


def test_default_output_flags():
    for flag in (
        OutputFlag.SKIP_HTML,
        OutputFlag.SAFELINK,
        OutputFlag.ESCAPE,
        OutputFlag.USE_XHTML,
        OutputFlag.HARD_WRAP,
        OutputFlag.ALLOW_ELEMENT_WHITELIST,
    ):
        assert DEFAULT_OUTPUT_FLAGS & flag
    assert not DEFAULT_OUTPUT_FLAGS & OutputFlag.TOC
    assert not DEFAULT_OUTPUT_FLAGS & OutputFlag.SKIP_IMAGES


# =============================================================================
# Profiles
# =============================================================================

def test_derive_leaves_base_untouched():
    base = RenderProfile(surface=Surface.USERTEXT, purpose=Purpose.MAIN)
    derived = base.derive(
        nofollow=True, target="_blank", domain="mysite.example",
        toc_id_prefix="p_", extra_output=OutputFlag.TOC,
    )
    assert base.link_policy.nofollow is False
    assert base.toc_id_prefix is None
    assert not base.has_output(OutputFlag.TOC)

    assert derived.link_policy.nofollow is True
    assert derived.link_policy.target == "_blank"
    assert derived.link_policy.exempt_domain == "mysite.example"
    assert derived.toc_id_prefix == "p_"
    assert derived.has_output(OutputFlag.TOC)


def test_derive_carries_domain_match_mode():
    base = RenderProfile(
        surface=Surface.USERTEXT, purpose=Purpose.MAIN, link_domain_match="host",
    )
    assert base.derive(target="_blank").link_policy.match == "host"


def test_profiles_are_frozen():
    base = RenderProfile(surface=Surface.WIKI, purpose=Purpose.TOC)
    with pytest.raises(AttributeError):
        base.toc_id_prefix = "x"


# =============================================================================
# Registry
# =============================================================================

def test_registry_has_four_profiles(registry):
    assert len(registry) == 4
    pairs = {(p.surface, p.purpose) for p in registry}
    assert pairs == {(s, p) for s in Surface for p in Purpose}


def test_registry_get(registry):
    profile = registry.get("wiki", Purpose.TOC)
    assert profile.surface is Surface.WIKI
    assert profile.purpose is Purpose.TOC
    assert profile.resolver is NULL_RESOLVER


def test_registry_get_rejects_unknown_surface(registry):
    with pytest.raises(InvalidSurface):
        registry.get(5)


def test_registry_requires_every_pair():
    with pytest.raises(ValueError):
        ProfileRegistry({})


def test_registry_build_uses_settings():
    registry = ProfileRegistry.build(Settings(max_nesting=8, mention_url="/user/"))
    for profile in registry:
        assert profile.max_nesting == 8
        assert profile.mention_url == "/user/"


def test_set_resolver_only_touches_one_surface(registry):
    bridge = ResolverBridge.from_callbacks(lambda n: True)
    registry.set_resolver(bridge, Surface.USERTEXT)

    assert registry.get(Surface.USERTEXT, Purpose.MAIN).resolver is bridge
    assert registry.get(Surface.USERTEXT, Purpose.TOC).resolver is bridge
    assert registry.get(Surface.WIKI, Purpose.MAIN).resolver is NULL_RESOLVER
    assert registry.get(Surface.WIKI, Purpose.TOC).resolver is NULL_RESOLVER


# -----------------------------------------------------------------------------
