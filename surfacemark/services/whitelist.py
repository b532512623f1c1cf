#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
HTML whitelist
==============
Closed sets of element and attribute names that may pass through the
renderer unescaped while raw HTML is otherwise suppressed.

Only table structure survives.  A tag is kept verbatim when its element
*and* every one of its attributes are on the list; anything else (other
tags, comments, stray ``<``) is escaped and shows up as plain text.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from mistune.util import escape, safe_entity


HTML_ELEMENT_WHITELIST: frozenset[str] = frozenset({
    "tr", "th", "td", "table", "tbody", "thead", "tfoot", "caption", "div",
})

HTML_ATTR_WHITELIST: frozenset[str] = frozenset({
    "colspan", "rowspan", "cellspacing", "cellpadding", "scope", "class", "style",
})


# -----------------------------------------------------------------------------
# Tag scanner
# -----------------------------------------------------------------------------

_ATTR_NAME = r"""[^\s"'<>/=]+"""
_ATTR_VALUE = r"""(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'=<>`]+))?"""

_TAG_RE = re.compile(
    r"<(/?)([A-Za-z][A-Za-z0-9-]*)((?:\s+" + _ATTR_NAME + _ATTR_VALUE + r")*)\s*(/?)>"
)
_ATTR_RE = re.compile(r"(" + _ATTR_NAME + r")" + _ATTR_VALUE)


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class WhitelistTable:
    elements: frozenset[str] = HTML_ELEMENT_WHITELIST
    attributes: frozenset[str] = HTML_ATTR_WHITELIST

    @classmethod
    def of(cls, elements: Iterable[str], attributes: Iterable[str]) -> "WhitelistTable":
        return cls(
            frozenset(e.lower() for e in elements),
            frozenset(a.lower() for a in attributes),
        )

    def is_element_allowed(self, name: str) -> bool:
        return name.lower() in self.elements

    def is_attribute_allowed(self, name: str) -> bool:
        return name.lower() in self.attributes

    def is_tag_allowed(self, tag: str) -> bool:
        """Return True if *tag* (a single ``<...>`` string) may be emitted as-is."""
        m = _TAG_RE.fullmatch(tag.strip())
        return bool(m) and self._allowed(m)

    def _allowed(self, m: re.Match) -> bool:
        closing, name, attrs = m.group(1), m.group(2), m.group(3)
        if not self.is_element_allowed(name):
            return False
        if closing:
            return not attrs.strip()
        return all(self.is_attribute_allowed(a.group(1)) for a in _ATTR_RE.finditer(attrs))

    def filter(self, html: str) -> str:
        """Escape everything in *html* except whitelisted tags."""
        out: list[str] = []
        pos = 0
        for m in _TAG_RE.finditer(html):
            out.append(safe_entity(html[pos:m.start()]))
            tag = m.group(0)
            out.append(tag if self._allowed(m) else escape(tag))
            pos = m.end()
        out.append(safe_entity(html[pos:]))
        return "".join(out)


# -----------------------------------------------------------------------------

DEFAULT_WHITELIST = WhitelistTable()


# -----------------------------------------------------------------------------
