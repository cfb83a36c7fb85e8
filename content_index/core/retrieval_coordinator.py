"""
Retrieval coordinator.

Turns a user query into a short, ranked list of supporting passages:
embed the query, search the store, balance chat history against other
content, and cut each hit down to its most query-relevant window.
Retrieval failures never reach the caller; they produce an empty list.

Dependencies: content_index.boundary, content_index.core.relevance, content_index.configs
System role: Query-time retrieval for answer grounding
"""

import logging
from collections.abc import Sequence

from content_index.boundary.embeddings.base import EmbeddingProvider
from content_index.boundary.vdb.vector_store import VectorStore
from content_index.configs import RetrievalSettings
from content_index.core.relevance import extract_relevant_window
from content_index.models import ContentEntity, RetrievedPassage
from content_index.observability.log_utils import log_with_context, preview_text

logger = logging.getLogger(__name__)


def interleave_results(
    results: Sequence[ContentEntity],
    history_limit: int = 2,
    other_limit: int = 3,
) -> list[ContentEntity]:
    """
    Alternate chat history and other results, history first.

    Each group keeps its ranked order and is capped at its limit; once one
    group runs out the other continues alone.

    Args:
        results: Ranked search results
        history_limit: Maximum chat history entities
        other_limit: Maximum non-history entities

    Returns:
        list[ContentEntity]: At most history_limit + other_limit entities
    """
    history = [e for e in results if e.is_chat_history][:history_limit]
    others = [e for e in results if not e.is_chat_history][:other_limit]

    merged: list[ContentEntity] = []
    for i in range(max(len(history), len(others))):
        if i < len(history):
            merged.append(history[i])
        if i < len(others):
            merged.append(others[i])
    return merged


def format_passages(passages: Sequence[RetrievedPassage]) -> str:
    """
    Render passages as a context block for prompt assembly.

    Args:
        passages: Ranked passages from RetrievalCoordinator.retrieve

    Returns:
        str: One section per passage; empty string for no passages
    """
    sections = []
    for passage in passages:
        entity = passage.entity
        header = f"[{passage.rank}] {entity.title or entity.source_id} ({entity.content_type.value})"
        if entity.author:
            header += f" - {entity.author}"
        sections.append(f"{header}\n{passage.passage}")
    return "\n\n".join(sections)


class RetrievalCoordinator:
    """Query embedding, similarity search and passage selection."""

    def __init__(
        self,
        store: VectorStore,
        provider: EmbeddingProvider,
        settings: RetrievalSettings | None = None,
    ) -> None:
        """
        Initialize coordinator.

        Args:
            store: Store holding embedded content
            provider: Same provider used at ingestion time
            settings: Limits and window sizes
        """
        self._store = store
        self._provider = provider
        self._settings = settings or RetrievalSettings()

    async def retrieve(self, query: str) -> list[RetrievedPassage]:
        """
        Retrieve ranked passages supporting query.

        Args:
            query: Free-text user question

        Returns:
            list[RetrievedPassage]: Ranked passages; empty on blank query or any failure
        """
        if not query or not query.strip():
            return []

        try:
            query_vector = await self._provider.embed(query)
            results = await self._store.search_similar(
                query_vector,
                limit=self._settings.search_limit,
            )
        except Exception as e:
            logger.error(
                f"{__name__}:retrieve - Retrieval failed for '{preview_text(query)}', "
                f"returning no context: {type(e).__name__}: {e}"
            )
            return []

        selected = interleave_results(
            results,
            history_limit=self._settings.history_limit,
            other_limit=self._settings.other_limit,
        )
        passages = [
            RetrievedPassage(
                rank=rank,
                entity=entity,
                passage=extract_relevant_window(
                    entity.content,
                    query,
                    window=self._settings.relevance_window,
                    stride=self._settings.window_stride,
                ),
            )
            for rank, entity in enumerate(selected, start=1)
        ]

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:retrieve - {len(results)} candidates, {len(passages)} passages selected",
            query=query,
            candidates=len(results),
            passages=len(passages),
        )
        return passages
