"""
DocChat - Centralized Configuration
====================================
Uses ``pydantic-settings`` (``BaseSettings``) to load *all* configuration
from environment variables and the project-level ``.env`` file.

Security
--------
- ``GOOGLE_API_KEY`` is typed as ``SecretStr`` and has **no default value**.
  If the key is missing at startup, Pydantic will raise a ``ValidationError``
  with a clear error message.  The raw value is never exposed in repr,
  logs, or tracebacks.

Explicit configuration
----------------------
There is no module-level settings instance.  Entry points call
``get_settings()`` once and hand the object (or the individual values)
to each client's constructor.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project-level .env, shared with the logging bootstrap
ENV_FILE = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    """
    Application-wide settings.

    Every field is loaded from environment variables (or ``.env``).
    Fields *without* a default are **required** — the app will refuse
    to start until they are provided.

    Attributes
    ----------
    QDRANT_URL : str
        Base URL of the Qdrant HTTP API (e.g. ``http://localhost:6333``).
        **Required.**
    QDRANT_COLLECTION_NAME : str
        Collection holding the document vectors.  **Required.**
    GOOGLE_API_KEY : SecretStr
        API key for Google AI Studio (Gemini).  **Required.**
    ENV : Literal["dev", "prod"]
        Environment mode controlling logging verbosity.
    EMBEDDING_MODEL : str
        Model identifier passed to ``GoogleGenerativeAIEmbeddings``.
    EMBEDDING_DIMENSIONS : int | None
        Output dimensionality requested from the embedding model.  Must
        match the collection's vector size.
    LLM_MODEL : str
        Model identifier for the chat model.
    QDRANT_CONNECT_TIMEOUT : float
        Connect timeout (seconds) for every Qdrant request.
    QDRANT_READ_TIMEOUT : float | None
        Read timeout (seconds); ``None`` waits indefinitely.
    SEARCH_RESULTS_LIMIT : int
        Number of neighbours fetched per query.
    """

    # ── Resolved Absolute Paths ────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    DATA_RAW_DIR: Path = BASE_DIR / "data" / "raw"

    # ── Environment Mode ───────────────────────────────────────────────
    ENV: Literal["dev", "prod"] = "dev"

    # ── Vector Store (REQUIRED — no default) ───────────────────────────
    QDRANT_URL: str
    QDRANT_COLLECTION_NAME: str
    QDRANT_CONNECT_TIMEOUT: float = 10.0
    QDRANT_READ_TIMEOUT: float | None = None

    # ── API Keys (REQUIRED — no default) ───────────────────────────────
    GOOGLE_API_KEY: SecretStr

    # ── Model Configuration ────────────────────────────────────────────
    EMBEDDING_MODEL: str = "gemini-embedding-001"
    EMBEDDING_DIMENSIONS: int | None = 384
    LLM_MODEL: str = "gemini-2.0-flash"
    LLM_TEMPERATURE: float = 0.2

    # ── Retrieval ──────────────────────────────────────────────────────
    SEARCH_RESULTS_LIMIT: int = 5

    # ── Validators ─────────────────────────────────────────────────────

    @field_validator("QDRANT_URL")
    @classmethod
    def _qdrant_url_http(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"QDRANT_URL must be an http(s) URL, got {v!r}")
        return v.rstrip("/")


    @field_validator("QDRANT_COLLECTION_NAME")
    @classmethod
    def _collection_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("QDRANT_COLLECTION_NAME must not be blank")
        return v.strip()


    @field_validator("QDRANT_CONNECT_TIMEOUT", "QDRANT_READ_TIMEOUT")
    @classmethod
    def _timeout_positive(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"Timeouts must be > 0, got {v}")
        return v


    @field_validator("SEARCH_RESULTS_LIMIT")
    @classmethod
    def _limit_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"SEARCH_RESULTS_LIMIT must be ≥ 1, got {v}")
        return v

    # ── Pydantic Settings Configuration ────────────────────────────────
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_file_encoding="utf-8", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process.  Entry points pass the result on explicitly."""
    return Settings()
