"""
In-memory vector store.

Process-lifetime store keyed by source_id. Used by tests and as the
default backend when nothing durable is configured.

Dependencies: content_index.core.similarity, content_index.models
System role: Ephemeral VectorStore implementation
"""

import logging
from collections.abc import Sequence

from content_index.core.similarity import rank_by_similarity
from content_index.models import ContentEntity, ContentType

logger = logging.getLogger(__name__)


class InMemoryVectorStore:
    """Dict-backed VectorStore; dict order is insertion order."""

    def __init__(self) -> None:
        self._entities: dict[str, ContentEntity] = {}
        self._next_id = 1

    def _assign_id(self, entity: ContentEntity, existing: ContentEntity | None) -> ContentEntity:
        if existing is not None:
            return entity.model_copy(update={"id": existing.id})
        stored = entity.model_copy(update={"id": self._next_id})
        self._next_id += 1
        return stored

    async def add_content(self, entity: ContentEntity) -> ContentEntity:
        stored = self._assign_id(entity, self._entities.get(entity.source_id))
        self._entities[entity.source_id] = stored
        return stored

    async def add_contents(self, entities: Sequence[ContentEntity]) -> int:
        inserted = 0
        for entity in entities:
            if entity.source_id in self._entities:
                continue
            self._entities[entity.source_id] = self._assign_id(entity, None)
            inserted += 1

        logger.info(
            f"{__name__}:add_contents - Inserted {inserted} of {len(entities)} entities"
        )
        return inserted

    async def get_all_contents(self) -> list[ContentEntity]:
        return list(self._entities.values())

    async def get_contents_by_type(self, content_type: ContentType) -> list[ContentEntity]:
        return [e for e in self._entities.values() if e.content_type == content_type]

    async def search_similar(
        self,
        query_vector: Sequence[float],
        limit: int = 5,
    ) -> list[ContentEntity]:
        return rank_by_similarity(self._entities.values(), query_vector, limit)

    async def clear(self) -> None:
        self._entities.clear()
        logger.info(f"{__name__}:clear - Store cleared")

    async def count(self) -> int:
        return len(self._entities)

    async def close(self) -> None:
        return None
