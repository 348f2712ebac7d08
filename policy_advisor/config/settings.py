"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from two sources (in priority order):
#
#   1. Environment variables, e.g. OPENAI_API_KEY=sk-or-abc123
#   2. A .env file in the working directory (local development)
#
# Field `openai_api_key` maps to env var `OPENAI_API_KEY`.  Defaults
# apply when neither source sets a field.
#
# Credentials live here and are passed into each provider client when
# main.py builds it.  Nothing mutates them at runtime.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Policy advisor settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Generation (OpenAI-compatible chat completions) ===
    # Empty key = "not configured": queries degrade to the apology message
    # and the connection test reports failure.
    openai_api_key: str = ""
    openai_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "openai/gpt-3.5-turbo"
    translation_model: str = "openai/gpt-3.5-turbo"
    llm_timeout_seconds: float = Field(default=60.0, gt=0)
    site_url: str = "http://localhost:8000"  # Sent as HTTP-Referer to OpenRouter
    app_title: str = "HR Policy Advisor"  # Sent as X-Title to OpenRouter

    # === Embeddings ===
    # "hash" is the deterministic offline provider; "openai" calls the
    # embeddings endpoint at openai_base_url.
    embedding_provider: str = "hash"
    openai_embedding_model: str = "text-embedding-3-small"
    embedding_dimension: int = Field(default=384, gt=0)

    # === Storage ===
    storage_backend: str = "memory"  # "memory" | "sqlite"
    sqlite_db_path: str = "data/policy_advisor.db"

    # === Ingestion / retrieval ===
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    retrieval_top_k: int = Field(default=5, gt=0)
    embedding_concurrency: int = Field(default=4, gt=0)
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, gt=0)

    # === Languages ===
    base_language: str = "en"
    translation_cache_ttl: int = Field(default=3600, gt=0)

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    def llm_configured(self) -> bool:
        """Return ``True`` if a generation API key is set."""
        return bool(self.openai_api_key)
