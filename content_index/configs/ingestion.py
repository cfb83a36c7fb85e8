"""
Chunking and retrieval configuration settings.

Chunk size bounds what reaches the store; retrieval settings shape how
many results are fetched, interleaved and windowed per query.

Dependencies: pydantic, pydantic_settings
System role: Ingestion and retrieval tuning
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from content_index.configs.base import BaseSettings


class ChunkingSettings(BaseSettings):
    """Settings for splitting oversized content."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHUNKING_",
        case_sensitive=False,
        extra="ignore",
    )

    max_chunk_length: int = Field(
        default=20000,
        gt=0,
        description="Maximum chunk size in characters",
    )


class RetrievalSettings(BaseSettings):
    """Settings for query-time retrieval."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    search_limit: int = Field(
        default=10,
        gt=0,
        description="Candidates fetched from the store before post-filtering",
    )
    history_limit: int = Field(
        default=2,
        ge=0,
        description="Maximum chat history passages per answer",
    )
    other_limit: int = Field(
        default=3,
        ge=0,
        description="Maximum non-history passages per answer",
    )
    relevance_window: int = Field(
        default=1500,
        gt=0,
        description="Passage size in characters extracted from long content",
    )
    window_stride: int = Field(
        default=100,
        gt=0,
        description="Step in characters between candidate windows",
    )
