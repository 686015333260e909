from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class MetaEnvelope(BaseModel):
    request_id: str | None = None


class RenderRequest(BaseModel):
    theme: str | None = Field(default=None, max_length=64)
    options: dict[str, Any] = Field(default_factory=dict)


class RenderData(BaseModel):
    html: str
    options: dict[str, Any]


class RenderEnvelope(BaseModel):
    data: RenderData
    meta: MetaEnvelope


class TranslationsData(BaseModel):
    language: str
    built_in: bool
    translations: dict[str, str] | None = None
    key: str | None = None
    value: str | None = None


class TranslationsEnvelope(BaseModel):
    data: TranslationsData
    meta: MetaEnvelope
