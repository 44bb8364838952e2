"""
Ragbot - API Schemas
=====================
Request / response bodies for the HTTP layer.

``ChatRequest.query`` is a ``StrictStr`` so a number or ``null`` is
rejected instead of being coerced; the app turns that rejection into a
``400 {"error": ...}``.  ``language`` is forgiving: anything that is not
a string is treated as absent and resolved like any unknown code.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictStr, field_validator


class ChatRequest(BaseModel):
    query: StrictStr = Field(..., description="The user's question.")
    language: str | None = Field(default=None, description="Two-letter language code; server default when omitted.")

    @field_validator("language", mode="before")
    @classmethod
    def _non_string_language_is_absent(cls, v: object) -> str | None:
        return v if isinstance(v, str) else None


class ChatResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str


class LanguageInfo(BaseModel):
    code: str
    name: str


class UITextResponse(BaseModel):
    language: str
    text: dict[str, str]


class HealthResponse(BaseModel):
    status: str = "ok"
    documents: int
    embedded: bool
