#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Parsing engine adapter
======================
Builds a configured ``mistune.Markdown`` for one ``RenderProfile``.

mistune owns the grammar and the escaping.  What this module adds on top:

  - parser flags mapped onto mistune plugins / block rules
  - output flags mapped onto an ``HTMLRenderer`` subclass
      * raw HTML escaped except for whitelisted table markup
      * link decoration (``rel`` / ``target``)
      * ``@name`` mentions resolved through the profile's resolver
  - heading ids ``<prefix>toc_<n>`` shared by the TOC and main passes
  - nesting ceilings for block containers and emphasis
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import mistune
from mistune import BlockParser, HTMLRenderer, InlineParser
from mistune.core import BlockState, InlineState
from mistune.plugins.formatting import strikethrough, superscript
from mistune.plugins.table import table, table_in_list, table_in_quote
from mistune.plugins.url import url
from mistune.toc import render_toc_ul
from mistune.util import escape as escape_text
from mistune.util import safe_entity, striptags

from surfacemark.core.errors import DepthExceeded
from surfacemark.services.profiles import OutputFlag, ParserFlag, Purpose, RenderProfile


# -----------------------------------------------------------------------------
# Mentions  @name
# -----------------------------------------------------------------------------

MENTION_PATTERN = r"@[A-Za-z0-9_-]+"


def parse_mention(inline: InlineParser, m: re.Match, state: InlineState) -> int:
    text = m.group(0)
    start = m.start()
    prev = state.src[start - 1] if start else ""
    # inside a link, or part of an e-mail address / word
    if state.in_link or (prev and (prev.isalnum() or prev in "_@")):
        inline.process_text(text, state)
        return m.end()
    state.append_token({"type": "mention", "raw": text[1:]})
    return m.end()


def render_mention(renderer: HTMLRenderer, name: str) -> str:
    return escape_text("@" + name)


def mention(md: mistune.Markdown) -> None:
    """mistune plugin recognising ``@name`` mentions."""
    md.inline.register("mention", MENTION_PATTERN, parse_mention, before="linebreak")
    if md.renderer is not None and not hasattr(md.renderer, "mention"):
        md.renderer.register("mention", render_mention)


# -----------------------------------------------------------------------------
# Renderers
# -----------------------------------------------------------------------------

class SurfaceHTMLRenderer(HTMLRenderer):
    """HTML renderer driven by a ``RenderProfile``."""

    def __init__(self, profile: RenderProfile) -> None:
        escape = profile.has_output(OutputFlag.SKIP_HTML) or profile.has_output(OutputFlag.ESCAPE)
        super().__init__(
            escape=escape,
            allow_harmful_protocols=None if profile.has_output(OutputFlag.SAFELINK) else True,
        )
        self.profile = profile
        self.whitelist = (
            profile.whitelist if profile.has_output(OutputFlag.ALLOW_ELEMENT_WHITELIST) else None
        )
        self.xhtml = profile.has_output(OutputFlag.USE_XHTML)

    # ── links ──────────────────────────────────────────────────────────────

    def link(self, text: str, url: str, title: Optional[str] = None) -> str:
        s = '<a href="' + self.safe_url(url) + '"'
        if title:
            s += ' title="' + safe_entity(title) + '"'
        s += self.profile.link_policy.attributes_for(url)
        return s + ">" + text + "</a>"

    def image(self, text: str, url: str, title: Optional[str] = None) -> str:
        if self.profile.has_output(OutputFlag.SKIP_IMAGES):
            return text
        html = super().image(text, url, title)
        return html if self.xhtml else html[:-3] + ">"

    def mention(self, name: str) -> str:
        resolver = self.profile.resolver
        if not resolver.user_exists(name):
            return escape_text("@" + name)
        display = resolver.display_name_for(name)
        href = escape_text(self.profile.mention_url + name)
        return '<a href="' + href + '" class="mention">@' + escape_text(display) + "</a>"

    # ── raw html ───────────────────────────────────────────────────────────

    def inline_html(self, html: str) -> str:
        if self._escape and self.whitelist is not None and self.whitelist.is_tag_allowed(html):
            return html
        return super().inline_html(html)

    def block_html(self, html: str) -> str:
        if not self._escape or self.whitelist is None:
            return super().block_html(html)
        filtered = self.whitelist.filter(html.strip())
        if filtered.startswith("<"):
            return filtered + "\n"
        return "<p>" + filtered + "</p>\n"

    # ── xhtml ──────────────────────────────────────────────────────────────

    def linebreak(self) -> str:
        return "<br />\n" if self.xhtml else "<br>\n"

    def thematic_break(self) -> str:
        return "<hr />\n" if self.xhtml else "<hr>\n"


class TocHTMLRenderer(SurfaceHTMLRenderer):
    """Renders only the table of contents of a document."""

    def __call__(self, tokens: Iterable[Dict[str, Any]], state: BlockState) -> str:
        items: List[Tuple[int, str, str]] = []
        for tok in iter_headings(tokens):
            if "id" not in tok["attrs"]:
                continue
            text = striptags(self.render_tokens(tok["children"], state)).strip()
            items.append((tok["attrs"]["level"], tok["attrs"]["id"], text))
        if not items:
            return ""
        return '<div class="toc">\n' + render_toc_ul(items) + "</div>\n"


# -----------------------------------------------------------------------------
# Heading ids
# -----------------------------------------------------------------------------

def heading_id(prefix: Optional[str], index: int) -> str:
    return (prefix or "") + "toc_" + str(index)


def iter_headings(tokens: Iterable[Dict[str, Any]]) -> Iterator[Dict[str, Any]]:
    """Yield heading tokens in document order, including those nested in
    quotes and list items."""
    for tok in tokens:
        if tok["type"] == "heading":
            yield tok
        elif "children" in tok:
            yield from iter_headings(tok["children"])


def add_heading_id_hook(md: mistune.Markdown, profile: RenderProfile) -> None:
    """Number every heading so the TOC and main passes agree on ids."""
    low, high = profile.toc_min_level, profile.toc_max_level
    prefix = profile.toc_id_prefix

    def heading_id_hook(md: mistune.Markdown, state: BlockState) -> None:
        index = 0
        for tok in iter_headings(state.tokens):
            if low <= tok["attrs"]["level"] <= high:
                tok["attrs"]["id"] = heading_id(prefix, index)
                index += 1

    md.before_render_hooks.append(heading_id_hook)


# -----------------------------------------------------------------------------
# Engine
# -----------------------------------------------------------------------------

def _block_parser(profile: RenderProfile) -> BlockParser:
    rules = list(BlockParser.DEFAULT_RULES)
    if not profile.has_parser(ParserFlag.FENCED_CODE):
        rules.remove("fenced_code")
    block = BlockParser(
        block_quote_rules=list(rules),
        list_rules=list(rules),
        max_nested_level=profile.max_nesting,
    )
    block.rules = list(rules)
    return block


def new_engine(profile: RenderProfile) -> mistune.Markdown:
    """Return a fresh ``Markdown`` instance configured for *profile*."""
    if profile.purpose is Purpose.TOC:
        renderer: HTMLRenderer = TocHTMLRenderer(profile)
    else:
        renderer = SurfaceHTMLRenderer(profile)

    inline = InlineParser(
        hard_wrap=profile.has_output(OutputFlag.HARD_WRAP),
        max_emphasis_depth=profile.max_nesting,
    )
    md = mistune.Markdown(renderer=renderer, block=_block_parser(profile), inline=inline)

    if profile.has_parser(ParserFlag.TABLES):
        md.use(table)
        md.use(table_in_quote)
        md.use(table_in_list)
    if profile.has_parser(ParserFlag.STRIKETHROUGH):
        md.use(strikethrough)
    if profile.has_parser(ParserFlag.SUPERSCRIPT):
        md.use(superscript)
    if profile.has_parser(ParserFlag.AUTOLINK):
        md.use(url)
    md.use(mention)

    if profile.purpose is Purpose.TOC or profile.has_output(OutputFlag.TOC):
        add_heading_id_hook(md, profile)
    return md


def run_engine(md: mistune.Markdown, text: str) -> str:
    try:
        html, _state = md.parse(text)
    except RecursionError as exc:
        raise DepthExceeded("document nests too deeply to render") from exc
    return str(html)


# -----------------------------------------------------------------------------
