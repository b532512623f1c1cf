#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 schemas for request validation and response serialisation.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Render
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RenderRequestBody(BaseModel):
    text: str = ""
    nofollow: bool = False
    target: Optional[str] = Field(None, max_length=64)
    domain: Optional[str] = Field(None, max_length=255)
    toc_id_prefix: Optional[str] = Field(None, max_length=64)
    surface: Union[int, str] = "usertext"
    enable_toc: bool = False

    @field_validator("target", "domain", "toc_id_prefix")
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v if v else None


# -----------------------------------------------------------------------------

class RenderResponse(BaseModel):
    html: str
    toc_html: str = ""
    body_html: str = ""
    surface: str


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# System
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    app: str
    surfaces: dict[str, int]


# -----------------------------------------------------------------------------
