#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Username resolver bridge
========================
Adapts two optional external capabilities to the calls the engine makes
while rendering ``@name`` mentions:

  - ``user_exists(name) -> bool``        fails closed (``False``)
  - ``display_name_for(name) -> str``    fails open (the name itself)

Nothing is cached.  Each mention token rendered costs one call per
capability, in document order.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from surfacemark.core.errors import InvalidArgument, ResolverFailure

log = logging.getLogger(__name__)

UserExistsFn = Callable[[str], object]
DisplayNameFn = Callable[[str], object]


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ResolverBridge:
    exists_fn: Optional[UserExistsFn] = None
    display_name_fn: Optional[DisplayNameFn] = None

    @classmethod
    def from_callbacks(
        cls,
        user_exists: Optional[UserExistsFn] = None,
        display_name_for: Optional[DisplayNameFn] = None,
    ) -> "ResolverBridge":
        """Validate and wrap the two callbacks.  ``None`` leaves a slot empty."""
        if user_exists is not None and not callable(user_exists):
            raise InvalidArgument("username_exists")
        if display_name_for is not None and not callable(display_name_for):
            raise InvalidArgument("username_to_display_name")
        return cls(user_exists, display_name_for)

    @property
    def is_empty(self) -> bool:
        return self.exists_fn is None and self.display_name_fn is None

    def user_exists(self, name: str) -> bool:
        if self.exists_fn is None:
            return False
        try:
            return _call_exists(self.exists_fn, name)
        except ResolverFailure as exc:
            log.debug("%s; treating mention as unknown", exc, exc_info=exc.__cause__)
            return False

    def display_name_for(self, name: str) -> str:
        if self.display_name_fn is None:
            return name
        try:
            return _call_display_name(self.display_name_fn, name)
        except ResolverFailure as exc:
            log.debug("%s; keeping original name", exc, exc_info=exc.__cause__)
            return name


# -----------------------------------------------------------------------------
# Capability calls
# -----------------------------------------------------------------------------

def _call_exists(fn: UserExistsFn, name: str) -> bool:
    try:
        return bool(fn(name))
    except Exception as exc:
        raise ResolverFailure("user_exists", name) from exc


def _call_display_name(fn: DisplayNameFn, name: str) -> str:
    try:
        result = fn(name)
        if isinstance(result, bytes):
            result = result.decode("utf-8")
    except Exception as exc:
        raise ResolverFailure("display_name_for", name) from exc
    if not isinstance(result, str):
        raise ResolverFailure("display_name_for", name)
    return result


# -----------------------------------------------------------------------------

NULL_RESOLVER = ResolverBridge()


# -----------------------------------------------------------------------------
