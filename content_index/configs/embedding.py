"""
Embedding provider configuration settings.

Manages the Gemini embedding model selection and the provider limits the
batch scheduler must respect (token budget, payload size, concurrency).

Dependencies: pydantic, pydantic_settings
System role: Embedding generation configuration for ingestion and retrieval
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from content_index.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Embedding provider and rate-limit configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Google API key (falls back to GOOGLE_API_KEY when unset)",
    )
    model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    output_dimensionality: int = Field(
        default=1024,
        gt=0,
        description="Embedding vector dimension, constant for one store",
    )

    # Provider limits
    max_tokens_per_minute: int = Field(
        default=25000,
        gt=0,
        description="Estimated token ceiling per rolling window (API limit is 30k)",
    )
    max_batch_size: int = Field(
        default=500,
        gt=0,
        description="Maximum items per bulk embedding call (payload size guard)",
    )
    max_concurrent_requests: int = Field(
        default=3,
        gt=0,
        description="Concurrent individual calls in the fallback path",
    )
    rate_limit_seconds: float = Field(
        default=15.0,
        ge=0.0,
        description="Delay between groups of individual fallback calls",
    )
    window_seconds: float = Field(
        default=60.0,
        gt=0.0,
        description="Length of the rolling token window in seconds",
    )
