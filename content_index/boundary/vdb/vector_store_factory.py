"""
Vector store factory for selecting between memory, key-value and device stores.

Depends on VECTOR_STORE_STORE_TYPE environment variable.
Provides consistent interface regardless of underlying implementation.

Dependencies: content_index.boundary.vdb, content_index.configs
System role: Vector store instantiation and selection
"""

import logging
from pathlib import Path

from content_index.boundary.vdb.device_store import DeviceVectorStore
from content_index.boundary.vdb.in_memory_store import InMemoryVectorStore
from content_index.boundary.vdb.key_value_store import KeyValueVectorStore
from content_index.boundary.vdb.vector_store import VectorStore
from content_index.configs import VectorStoreSettings

logger = logging.getLogger(__name__)


def create_vector_store(settings: VectorStoreSettings | None = None) -> VectorStore:
    """
    Build the vector store selected by configuration.

    Durable stores get their data directory created here; the database
    itself opens on first use.

    Args:
        settings: Vector store settings (environment when omitted)

    Returns:
        VectorStore: Configured, not yet opened store

    Raises:
        ValueError: If store_type is invalid
    """
    settings = settings or VectorStoreSettings()
    store_type = settings.store_type.lower()

    if store_type == "memory":
        logger.info(f"{__name__}:create_vector_store - Creating in-memory vector store")
        return InMemoryVectorStore()

    if store_type == "key_value":
        Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
        logger.info(
            f"{__name__}:create_vector_store - Creating key-value store at "
            f"{settings.key_value_database_url}"
        )
        return KeyValueVectorStore(
            settings.key_value_database_url,
            open_attempts=settings.open_attempts,
            echo=settings.echo_sql,
        )

    if store_type == "device":
        Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
        logger.info(
            f"{__name__}:create_vector_store - Creating device store at "
            f"{settings.device_database_url}"
        )
        return DeviceVectorStore(
            settings.device_database_url,
            open_attempts=settings.open_attempts,
            echo=settings.echo_sql,
        )

    raise ValueError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
        f"Must be 'memory', 'key_value' or 'device'."
    )
