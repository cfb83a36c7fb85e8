"""
Ingestion service orchestrator.

Coordinates chunking, best-effort embedding and storage of producer items,
plus the background pass that embeds whatever is still unembedded.

Dependencies: content_index.core, content_index.boundary.vdb
System role: Ingestion orchestration for mail, drive and chat producers
"""

import logging
from collections import Counter
from collections.abc import Sequence

from content_index.boundary.vdb.vector_store import VectorStore
from content_index.core.chunker import DEFAULT_MAX_CHUNK_LENGTH, create_chunked_entities
from content_index.core.embedding_scheduler import EmbeddingBatchScheduler
from content_index.models import ContentEntity, IngestionReport, StoreSummary
from content_index.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


class IngestionService:
    """
    Ingestion service orchestrator.

    Storage failures propagate; embedding failures only leave chunks
    unembedded for generate_missing_embeddings to pick up later.
    """

    def __init__(
        self,
        store: VectorStore,
        scheduler: EmbeddingBatchScheduler,
        max_chunk_length: int = DEFAULT_MAX_CHUNK_LENGTH,
    ) -> None:
        """
        Initialize ingestion service.

        Args:
            store: Destination store
            scheduler: Rate-aware embedding scheduler
            max_chunk_length: Maximum stored content length in characters
        """
        self._store = store
        self._scheduler = scheduler
        self._max_chunk_length = max_chunk_length

    async def ingest(self, items: Sequence[ContentEntity]) -> IngestionReport:
        """
        Chunk, embed and store producer items.

        Each item's title and body are chunked together. Chunks whose
        source_id is already stored (or repeated within the run) are dropped
        before embedding, so re-ingesting overlapping producer output spends
        no provider calls. New chunks are stored whether or not their
        embedding succeeded.

        Args:
            items: Producer entities (id and embedding unset)

        Returns:
            IngestionReport: Counters for the run

        Raises:
            StorageUnavailableError: Store could not be written
        """
        chunks: list[ContentEntity] = []
        for item in items:
            full_text = f"{item.title} {item.content}"
            chunks.extend(create_chunked_entities(item, full_text, self._max_chunk_length))

        if not chunks:
            return IngestionReport(items_received=len(items))

        new_chunks = await self._drop_known_chunks(chunks)
        logger.info(
            f"{__name__}:ingest - {len(items)} items produced {len(chunks)} chunks, "
            f"{len(new_chunks)} new"
        )
        if not new_chunks:
            return IngestionReport(items_received=len(items), chunks_produced=len(chunks))

        embedded_chunks, embed_report = await self._scheduler.embed_entities(new_chunks)
        stored = await self._store.add_contents(embedded_chunks)

        report = IngestionReport(
            items_received=len(items),
            chunks_produced=len(chunks),
            chunks_stored=stored,
            chunks_embedded=embed_report.succeeded,
            chunks_unembedded=len(new_chunks) - embed_report.succeeded,
            quota_exceeded=embed_report.quota_exceeded,
        )
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:ingest - Stored {stored} new chunks",
            items=report.items_received,
            chunks=report.chunks_produced,
            embedded=report.chunks_embedded,
        )
        if report.chunks_unembedded:
            logger.warning(
                f"{__name__}:ingest - {report.chunks_unembedded} chunks stored without embeddings"
                + (" (quota exceeded)" if report.quota_exceeded else "")
            )
        return report

    async def _drop_known_chunks(self, chunks: list[ContentEntity]) -> list[ContentEntity]:
        """Keep the first occurrence of each source_id not already stored."""
        seen = {e.source_id for e in await self._store.get_all_contents()}
        fresh: list[ContentEntity] = []
        for chunk in chunks:
            if chunk.source_id in seen:
                continue
            seen.add(chunk.source_id)
            fresh.append(chunk)
        return fresh

    async def generate_missing_embeddings(self) -> IngestionReport:
        """
        Embed stored entities that have no embedding yet.

        Successful vectors are written back with add_content (upsert);
        failures stay unembedded for the next pass.

        Returns:
            IngestionReport: chunks_produced counts the entities retried
        """
        pending = [e for e in await self._store.get_all_contents() if not e.has_embedding]
        if not pending:
            logger.info(f"{__name__}:generate_missing_embeddings - Nothing to embed")
            return IngestionReport()

        logger.info(
            f"{__name__}:generate_missing_embeddings - Embedding {len(pending)} stored entities"
        )
        embedded, embed_report = await self._scheduler.embed_entities(pending)

        updated = 0
        for entity in embedded:
            if entity.has_embedding:
                await self._store.add_content(entity)
                updated += 1

        return IngestionReport(
            chunks_produced=len(pending),
            chunks_stored=updated,
            chunks_embedded=embed_report.succeeded,
            chunks_unembedded=len(pending) - embed_report.succeeded,
            quota_exceeded=embed_report.quota_exceeded,
        )

    async def summarize_store(self) -> StoreSummary:
        """Count stored entities overall, by embedding state and by type."""
        entities = await self._store.get_all_contents()
        embedded = sum(1 for e in entities if e.has_embedding)
        return StoreSummary(
            total=len(entities),
            embedded=embedded,
            unembedded=len(entities) - embedded,
            by_type=dict(Counter(e.content_type for e in entities)),
        )
