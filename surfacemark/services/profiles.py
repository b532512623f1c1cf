#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render profiles
===============
A ``RenderProfile`` is the frozen bundle of everything the engine needs for
one (surface, purpose) pair: parser flags, output flags, the HTML
whitelist, link decoration and the optional username resolver.

The ``ProfileRegistry`` holds exactly one base profile per pair and is
built once per process.  Per-call settings never touch it: the pipeline
derives a fresh profile with ``RenderProfile.derive()`` for every pass.
The only slot that can change after startup is the usertext resolver,
replaced whole under a lock.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Iterator, Literal, Mapping, Optional

from surfacemark.core.config import Settings, get_settings
from surfacemark.core.errors import InvalidSurface
from surfacemark.services.links import NO_DECORATION, LinkDecorationPolicy
from surfacemark.services.resolver import NULL_RESOLVER, ResolverBridge
from surfacemark.services.whitelist import DEFAULT_WHITELIST, WhitelistTable

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Surfaces, purposes, flags
# -----------------------------------------------------------------------------

class Surface(enum.IntEnum):
    """Content context.  The integer values are part of the public API."""
    USERTEXT = 0
    WIKI = 1


class Purpose(enum.Enum):
    MAIN = "main"
    TOC = "toc"


class ParserFlag(enum.IntFlag):
    NO_INTRA_EMPHASIS = 1 << 0
    TABLES = 1 << 1
    FENCED_CODE = 1 << 2
    AUTOLINK = 1 << 3
    STRIKETHROUGH = 1 << 4
    SUPERSCRIPT = 1 << 7


class OutputFlag(enum.IntFlag):
    SKIP_HTML = 1 << 0
    SKIP_IMAGES = 1 << 2
    SAFELINK = 1 << 5
    TOC = 1 << 6
    HARD_WRAP = 1 << 7
    USE_XHTML = 1 << 8
    ESCAPE = 1 << 9
    ALLOW_ELEMENT_WHITELIST = 1 << 10


DEFAULT_PARSER_FLAGS = (
    ParserFlag.NO_INTRA_EMPHASIS
    | ParserFlag.SUPERSCRIPT
    | ParserFlag.AUTOLINK
    | ParserFlag.STRIKETHROUGH
    | ParserFlag.TABLES
)

DEFAULT_OUTPUT_FLAGS = (
    OutputFlag.SKIP_HTML
    | OutputFlag.SAFELINK
    | OutputFlag.ESCAPE
    | OutputFlag.USE_XHTML
    | OutputFlag.HARD_WRAP
    | OutputFlag.ALLOW_ELEMENT_WHITELIST
)

# surface -> (parser flags, output flags, whitelist)
SURFACE_DEFAULTS: dict[Surface, tuple[ParserFlag, OutputFlag, WhitelistTable]] = {
    Surface.USERTEXT: (DEFAULT_PARSER_FLAGS, DEFAULT_OUTPUT_FLAGS, DEFAULT_WHITELIST),
    Surface.WIKI:     (DEFAULT_PARSER_FLAGS, DEFAULT_OUTPUT_FLAGS, DEFAULT_WHITELIST),
}


# -----------------------------------------------------------------------------

def resolve_surface(value: object) -> Surface:
    """Map a ``Surface``, its integer value or its name onto a ``Surface``."""
    if isinstance(value, Surface):
        return value
    if isinstance(value, bool):
        raise InvalidSurface(value)
    if isinstance(value, int):
        try:
            return Surface(value)
        except ValueError:
            raise InvalidSurface(value) from None
    if isinstance(value, str):
        key = value.strip()
        if key.lstrip("-").isdigit():
            return resolve_surface(int(key))
        try:
            return Surface[key.upper()]
        except KeyError:
            raise InvalidSurface(value) from None
    raise InvalidSurface(value)


# -----------------------------------------------------------------------------
# Profile
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class RenderProfile:
    surface: Surface
    purpose: Purpose
    parser_flags: ParserFlag = DEFAULT_PARSER_FLAGS
    output_flags: OutputFlag = DEFAULT_OUTPUT_FLAGS
    whitelist: WhitelistTable = DEFAULT_WHITELIST
    link_policy: LinkDecorationPolicy = NO_DECORATION
    resolver: ResolverBridge = NULL_RESOLVER
    toc_id_prefix: Optional[str] = None
    max_nesting: int = 16
    toc_min_level: int = 1
    toc_max_level: int = 6
    mention_url: str = "/u/"
    link_domain_match: Literal["substring", "host"] = "substring"

    def has_parser(self, flag: ParserFlag) -> bool:
        return bool(self.parser_flags & flag)

    def has_output(self, flag: OutputFlag) -> bool:
        return bool(self.output_flags & flag)

    def derive(
        self,
        *,
        nofollow: bool = False,
        target: Optional[str] = None,
        domain: Optional[str] = None,
        toc_id_prefix: Optional[str] = None,
        extra_output: OutputFlag = OutputFlag(0),
    ) -> "RenderProfile":
        """Return a copy carrying one call's settings; ``self`` is untouched."""
        policy = LinkDecorationPolicy(
            nofollow=bool(nofollow),
            target=target,
            exempt_domain=domain,
            match=self.link_domain_match,
        )
        return replace(
            self,
            link_policy=policy,
            toc_id_prefix=toc_id_prefix,
            output_flags=self.output_flags | extra_output,
        )


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------

class ProfileRegistry:

    def __init__(self, profiles: Mapping[tuple[Surface, Purpose], RenderProfile]) -> None:
        missing = [(s, p) for s in Surface for p in Purpose if (s, p) not in profiles]
        if missing:
            raise ValueError(f"Profile registry is missing {missing}")
        self._profiles = dict(profiles)
        self._lock = threading.Lock()

    @classmethod
    def build(cls, settings: Settings | None = None) -> "ProfileRegistry":
        settings = settings or get_settings()
        profiles = {}
        for surface, (parser_flags, output_flags, whitelist) in SURFACE_DEFAULTS.items():
            for purpose in Purpose:
                profiles[(surface, purpose)] = RenderProfile(
                    surface=surface,
                    purpose=purpose,
                    parser_flags=parser_flags,
                    output_flags=output_flags,
                    whitelist=whitelist,
                    max_nesting=settings.max_nesting,
                    toc_min_level=settings.toc_min_level,
                    toc_max_level=settings.toc_max_level,
                    mention_url=settings.mention_url,
                    link_domain_match=settings.link_domain_match,
                )
        log.info("Built %d render profiles", len(profiles))
        return cls(profiles)

    def get(self, surface: object, purpose: Purpose = Purpose.MAIN) -> RenderProfile:
        return self._profiles[(resolve_surface(surface), purpose)]

    def set_resolver(self, resolver: ResolverBridge, surface: Surface = Surface.USERTEXT) -> None:
        """Replace the resolver of both profiles of *surface*."""
        with self._lock:
            for purpose in Purpose:
                key = (surface, purpose)
                self._profiles[key] = replace(self._profiles[key], resolver=resolver)
        log.info("Username resolver %s for %s", "cleared" if resolver.is_empty else "registered",
                 surface.name.lower())

    def __iter__(self) -> Iterator[RenderProfile]:
        return iter(list(self._profiles.values()))

    def __len__(self) -> int:
        return len(self._profiles)


# -----------------------------------------------------------------------------

@lru_cache
def get_registry() -> ProfileRegistry:
    return ProfileRegistry.build()


# -----------------------------------------------------------------------------
