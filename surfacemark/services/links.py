#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Link decoration
===============
Extra attributes emitted on every rendered hyperlink:

  - ``rel="nofollow"``      when *nofollow* is set
  - ``target="<target>"``   when a target is set, except that a ``_blank``
                            target is dropped for links into the exempt
                            domain so on-site links stay in the same tab

The exemption is a raw substring test on the URL unless *match* is
``"host"``, in which case the parsed host must equal the domain or end
with ``"." + domain``.

An empty domain exempts nothing.  A plain ``"" in url`` test would be true
for every URL and silently drop ``target="_blank"`` everywhere, which is
what the C renderer did; here ``domain=""`` behaves like no domain.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional
from urllib.parse import urlsplit

from mistune.util import escape


BLANK_TARGET = "_blank"


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LinkDecorationPolicy:
    nofollow: bool = False
    target: Optional[str] = None
    exempt_domain: Optional[str] = None
    match: Literal["substring", "host"] = "substring"

    def attributes_for(self, url: str) -> str:
        attrs = ""
        if self.nofollow:
            attrs += ' rel="nofollow"'
        if self.target is not None and not self._is_exempt(url):
            attrs += ' target="' + escape(self.target) + '"'
        return attrs

    def _is_exempt(self, url: str) -> bool:
        if self.target != BLANK_TARGET or not self.exempt_domain:
            return False
        if self.match == "host":
            return _host_matches(url, self.exempt_domain)
        return self.exempt_domain in url


# -----------------------------------------------------------------------------

def _host_matches(url: str, domain: str) -> bool:
    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return False
    domain = domain.lower().lstrip(".")
    return host == domain or host.endswith("." + domain)


# -----------------------------------------------------------------------------

NO_DECORATION = LinkDecorationPolicy()


# -----------------------------------------------------------------------------
