#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render errors.

Configuration and validation errors stop a render call with no output.
Failures inside extension hooks (``ResolverFailure``) never leave the hook.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations


# -----------------------------------------------------------------------------

class RenderError(Exception):
    """Base class for everything the renderer raises."""


class InvalidSurface(RenderError, ValueError):
    """The requested surface is not one of the known surfaces."""

    def __init__(self, value: object = None) -> None:
        super().__init__("Invalid renderer")
        self.value = value


class InvalidArgument(RenderError, TypeError):
    """A callback slot was given something that cannot be called."""

    def __init__(self, parameter: str) -> None:
        super().__init__(f"parameter:<{parameter}> must be callable")
        self.parameter = parameter


class DepthExceeded(RenderError):
    """The document nests deeper than the engine can follow."""


class ResolverFailure(RenderError):
    """An external username capability raised or returned garbage."""

    def __init__(self, capability: str, name: str) -> None:
        super().__init__(f"{capability} failed for {name!r}")
        self.capability = capability
        self.name = name


# -----------------------------------------------------------------------------
