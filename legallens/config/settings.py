"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources, in priority order:
#
#   1. **Environment variables** -- e.g. OPENAI_API_KEY=sk-abc123
#   2. **.env file** -- key=value lines in the project root .env file
#
# Field ``summary_cache_ttl`` maps to env var ``SUMMARY_CACHE_TTL``.
# Defaults apply when neither source defines a value.
# ──────────────────────────────────────────────────────────────────────
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """LegalLens application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Generation / embedding providers ===
    # Empty string = "not configured" -> main.py skips that provider.
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoints (TogetherAI, Groq, ...)
    openai_text_model: str = ""
    openai_embedding_model: str = ""
    anthropic_api_key: str = ""
    anthropic_model: str = ""
    ollama_base_url: str = ""
    ollama_text_model: str = "llama3.1"

    # Every generation/embedding call is bounded by these (seconds).
    generation_timeout: float = 30.0
    embedding_timeout: float = 30.0

    # === Storage ===
    data_dir: str = "./uploads"

    # === Indexing / retrieval ===
    chunk_size: int = 1000
    chunk_overlap: int = 150
    min_chunk_length: int = 20
    retrieval_top_k: int = 4

    # === Summaries ===
    summary_cache_ttl: int = 3600
    summary_cache_max_size: int = 1000
    # "document": one canonical cached summary per document.
    # "caller": cache entries are additionally scoped per caller identity.
    summary_cache_scope: Literal["document", "caller"] = "document"
    summary_rate_limit: int = 10
    summary_rate_window: int = 3600
    summary_max_chars: int = 8000

    # === Question answering ===
    answer_max_context_chars: int = 12000
    fallback_context_chars: int = 8000

    # === Background processing ===
    processing_workers: int = 2

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_llm_providers(self) -> list[str]:
        """Return the generation providers that have credentials or a URL configured."""
        providers: list[str] = []
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openai_api_key:
            providers.append("openai")
        if self.ollama_base_url:
            providers.append("ollama")
        return providers
