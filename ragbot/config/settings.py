"""
Ragbot - Centralized Configuration
===================================
Uses ``pydantic-settings`` (``BaseSettings``) to load *all* configuration
from environment variables and the project-level ``.env`` file.

Security
--------
- ``GOOGLE_API_KEY`` is typed as ``SecretStr`` and has **no default value**.
  If the key is missing at startup, Pydantic will raise a ``ValidationError``
  with a clear error message.  The raw value is never exposed in repr,
  logs, or tracebacks.

Retrieval
---------
``SEARCH_TOP_K`` and ``RELEVANCE_THRESHOLD`` drive the relevance gate.
The defaults (3 and 0.75) are the values the chatbot has always shipped
with; changing them changes which questions get refused.

Languages
---------
``DEFAULT_LANGUAGE`` is used when a request carries no language at all,
``FALLBACK_LANGUAGE`` when it carries one we do not know.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide settings.

    Every field is loaded from environment variables (or ``.env``).
    Fields *without* a default are **required** — the app will refuse
    to start until they are provided.

    Attributes
    ----------
    GOOGLE_API_KEY : SecretStr
        API key for Google AI Studio (Gemini).  **Required.**
        Access the raw value with ``settings.GOOGLE_API_KEY.get_secret_value()``.
    ENV : Literal["dev", "prod"]
        Environment mode controlling logging verbosity.
    LOG_LEVEL : str | None
        Explicit log level; overrides the ``ENV``-derived default.
    EMBEDDING_MODEL : str
        Model identifier passed to ``GoogleGenerativeAIEmbeddings``.
    LLM_MODEL : str
        Model identifier for the answer-generation LLM.
    LLM_TEMPERATURE : float
        Sampling temperature for answer generation.
    SEARCH_TOP_K : int
        How many ranked documents are handed to the LLM as context.
    RELEVANCE_THRESHOLD : float
        Minimum cosine similarity of the best match for a query to be
        considered answerable.
    DEFAULT_LANGUAGE / FALLBACK_LANGUAGE : str
        Language used when none is requested / when the requested one
        is unknown.
    PROVIDER_TIMEOUT_SECONDS : float | None
        Deadline for every Gemini call.  ``None`` or ``<= 0`` disables it.
    KNOWLEDGE_BASE_DIR : Path | None
        Optional directory of ``.txt`` / ``.md`` files replacing the
        built-in knowledge base.
    """

    # ── Environment Mode ───────────────────────────────────────────────
    ENV: Literal["dev", "prod"] = "dev"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None

    # ── API Keys (REQUIRED, no default) ────────────────────────────────
    GOOGLE_API_KEY: SecretStr

    # ── Model Configuration ────────────────────────────────────────────
    EMBEDDING_MODEL: str = "models/text-embedding-004"
    LLM_MODEL: str = "gemini-2.0-flash"
    LLM_TEMPERATURE: float = 0.2
    PROVIDER_TIMEOUT_SECONDS: float | None = 30.0

    # ── Retrieval ──────────────────────────────────────────────────────
    SEARCH_TOP_K: int = 3
    RELEVANCE_THRESHOLD: float = 0.75
    KNOWLEDGE_BASE_DIR: Path | None = None

    # ── Languages ──────────────────────────────────────────────────────
    DEFAULT_LANGUAGE: str = "es"
    FALLBACK_LANGUAGE: str = "en"

    # ── HTTP Server ────────────────────────────────────────────────────
    CORS_ORIGINS: list[str] = ["*"]
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # ── Validators ─────────────────────────────────────────────────────

    @field_validator("SEARCH_TOP_K")
    @classmethod
    def _top_k_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"SEARCH_TOP_K must be ≥ 1, got {v}")
        return v


    @field_validator("RELEVANCE_THRESHOLD")
    @classmethod
    def _threshold_range(cls, v: float) -> float:
        if not -1.0 <= v <= 1.0:
            raise ValueError(f"RELEVANCE_THRESHOLD must be within [-1, 1], got {v}")
        return v


    @field_validator("LLM_TEMPERATURE")
    @classmethod
    def _temperature_range(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"LLM_TEMPERATURE must be 0–2, got {v}")
        return v


    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _log_level_upper(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper() or None
        return v


    @field_validator("DEFAULT_LANGUAGE", "FALLBACK_LANGUAGE")
    @classmethod
    def _language_code(cls, v: str) -> str:
        return v.strip().lower()

    # ── Pydantic Settings Configuration ────────────────────────────────
    model_config = SettingsConfigDict(env_file=Path(__file__).resolve().parent.parent.parent / ".env", env_file_encoding="utf-8", extra="ignore")


# ── Singleton Instance ─────────────────────────────────────────────────
# Import this throughout the project:
#     from ragbot.config.settings import settings
settings = Settings()
