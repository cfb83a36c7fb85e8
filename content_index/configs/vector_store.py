"""
Vector store configuration settings.

Selects the persistence backend (memory, key_value, device) and where the
durable backends keep their SQLite files.

Dependencies: pydantic, pydantic_settings
System role: Vector store configuration for ingestion and retrieval
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from content_index.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (memory for tests, key_value or device for durable use)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="memory",
        description="Vector store type: 'memory', 'key_value' or 'device'",
    )
    data_dir: str = Field(
        default="./data",
        description="Directory holding the durable store files",
    )
    database_name: str = Field(
        default="content_store.db",
        description="SQLite file name for the device store",
    )
    key_value_name: str = Field(
        default="content_kv.db",
        description="SQLite file name for the key-value store",
    )
    open_attempts: int = Field(
        default=3,
        gt=0,
        description="Attempts to open the durable store before giving up",
    )
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    @property
    def device_database_url(self) -> str:
        """
        Construct the async SQLite URL for the device store.

        Returns:
            str: SQLAlchemy async-compatible database URL
        """
        return f"sqlite+aiosqlite:///{Path(self.data_dir) / self.database_name}"

    @property
    def key_value_database_url(self) -> str:
        """Async SQLite URL for the key-value store."""
        return f"sqlite+aiosqlite:///{Path(self.data_dir) / self.key_value_name}"
