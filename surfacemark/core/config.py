#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Application configuration.

All values can be overridden via environment variables (``SURFACEMARK_*``)
or a .env file.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from surfacemark._version import __version__ as _pkg_version


# -----------------------------------------------------------------------------

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="SURFACEMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────────────

    app_name: str = "SurfaceMark"
    app_version: str = _pkg_version
    debug: bool = False
    environment: Literal["development", "testing", "production"] = "development"
    log_level: str = "INFO"

    # ── Rendering ──────────────────────────────────────────────────────────

    max_nesting: int = Field(default=16, ge=2, le=64)
    toc_min_level: int = Field(default=1, ge=1, le=6)
    toc_max_level: int = Field(default=6, ge=1, le=6)
    mention_url: str = "/u/"
    link_domain_match: Literal["substring", "host"] = "substring"

    # ── HTTP service ───────────────────────────────────────────────────────

    max_document_chars: int = 1_000_000

    cors_origins: list[str] = [
        "http://localhost:8000",
        "http://localhost:3000",
    ]

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"


# -----------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    return Settings()


# -----------------------------------------------------------------------------
