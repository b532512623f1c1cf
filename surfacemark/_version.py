#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Package version.

Taken from the installed distribution metadata; a source checkout that was
never installed reads the ``version = "..."`` line of pyproject.toml.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

_DIST_NAME = "surfacemark"
_PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"
_VERSION_RE = re.compile(r'^version\s*=\s*"([^"]+)"', re.MULTILINE)


# -----------------------------------------------------------------------------

def _source_version() -> str:
    try:
        match = _VERSION_RE.search(_PYPROJECT.read_text(encoding="utf-8"))
    except OSError:
        return "0.0.0"
    return match.group(1) if match else "0.0.0"


def _read_version() -> str:
    try:
        return version(_DIST_NAME)
    except PackageNotFoundError:
        return _source_version()


__version__: str = _read_version()


# -----------------------------------------------------------------------------
