#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for nesting limits and the depth error path."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import mistune
import pytest

from surfacemark import DepthExceeded, render
from surfacemark.core.config import Settings
from surfacemark.core.errors import RenderError
from surfacemark.services.engine import new_engine, run_engine
from surfacemark.services.profiles import ProfileRegistry, Purpose, Surface, get_registry


# -----------------------------------------------------------------------------

def test_deep_block_quotes_are_capped():
    html = render(">" * 500 + " deep")
    assert "<blockquote>" in html
    assert html.count("<blockquote>") <= 16
    assert "deep" in html


def test_quotes_and_lists_interleaved():
    html = render("> - " * 200 + "x")
    assert "x" in html


def test_deep_list_nesting():
    src = "\n".join("  " * i + "- item" for i in range(200))
    html = render(src)
    assert "<ul>" in html
    assert html.count("<ul>") <= 16


def test_recursion_becomes_depth_exceeded(monkeypatch):
    def overflow(self, s, state=None):
        raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr(mistune.Markdown, "parse", overflow)
    with pytest.raises(DepthExceeded) as exc_info:
        render("> x")
    assert isinstance(exc_info.value, RenderError)
    assert isinstance(exc_info.value.__cause__, RecursionError)


def test_engine_caps_emphasis_and_block_depth():
    registry = ProfileRegistry.build(Settings(max_nesting=8))
    md = new_engine(registry.get(Surface.USERTEXT, Purpose.MAIN))
    assert md.inline.max_emphasis_depth == 8
    assert md.block.max_nested_level == 8


def test_run_engine_returns_text():
    md = new_engine(get_registry().get(Surface.USERTEXT, Purpose.MAIN))
    assert run_engine(md, "plain") == "<p>plain</p>\n"


# -----------------------------------------------------------------------------
