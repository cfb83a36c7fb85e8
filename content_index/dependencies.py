"""
Dependency container.

Builds the object graph (store, provider, scheduler, services) explicitly
from settings. Only settings are cached; every call to build_container
returns a fresh graph, so tests and callers never share a store by accident.

Dependencies: content_index.configs, content_index.application, content_index.boundary
System role: Composition root for the content index
"""

import logging
from dataclasses import dataclass

from content_index.application.services import IngestionService
from content_index.boundary.embeddings import EmbeddingProvider, GeminiEmbeddingProvider
from content_index.boundary.vdb import VectorStore, create_vector_store
from content_index.configs import Settings, get_settings
from content_index.core.embedding_scheduler import EmbeddingBatchScheduler
from content_index.core.retrieval_coordinator import RetrievalCoordinator
from content_index.observability.logger import configure_logging

logger = logging.getLogger(__name__)


@dataclass
class ContentIndexContainer:
    """Wired components sharing one store and one provider."""

    settings: Settings
    store: VectorStore
    provider: EmbeddingProvider
    scheduler: EmbeddingBatchScheduler
    ingestion: IngestionService
    retrieval: RetrievalCoordinator

    async def close(self) -> None:
        """Release store resources."""
        await self.store.close()


def build_container(
    settings: Settings | None = None,
    provider: EmbeddingProvider | None = None,
    store: VectorStore | None = None,
) -> ContentIndexContainer:
    """
    Configure logging and construct the content index components.

    Args:
        settings: Application settings (cached environment settings when omitted)
        provider: Embedding provider override (Gemini when omitted)
        store: Vector store override (factory selection when omitted)

    Returns:
        ContentIndexContainer: Ready-to-use components
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    store = store if store is not None else create_vector_store(settings.vector_store)
    provider = provider if provider is not None else GeminiEmbeddingProvider(settings.embedding)

    scheduler = EmbeddingBatchScheduler(provider, settings.embedding)
    ingestion = IngestionService(
        store,
        scheduler,
        max_chunk_length=settings.chunking.max_chunk_length,
    )
    retrieval = RetrievalCoordinator(store, provider, settings.retrieval)

    logger.info(
        f"{__name__}:build_container - Built container "
        f"(store={type(store).__name__}, provider={type(provider).__name__})"
    )
    return ContentIndexContainer(
        settings=settings,
        store=store,
        provider=provider,
        scheduler=scheduler,
        ingestion=ingestion,
        retrieval=retrieval,
    )
