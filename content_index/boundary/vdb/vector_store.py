"""
Vector store interface.

Every backend exposes the same async capability set so ingestion and
retrieval never know which persistence they run on.

Duplicate policy (all backends):
    add_content  - upsert by source_id, keeping the stored id
    add_contents - skip source_ids already stored; first occurrence wins
                   inside one call; returns the number newly inserted

Dependencies: content_index.models
System role: Boundary contract for content persistence and similarity search
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from content_index.models import ContentEntity, ContentType


@runtime_checkable
class VectorStore(Protocol):
    """Structural interface implemented by memory, key-value and device stores."""

    async def add_content(self, entity: ContentEntity) -> ContentEntity:
        """Insert or replace one entity; returns it with its stored id."""
        ...

    async def add_contents(self, entities: Sequence[ContentEntity]) -> int:
        """Insert entities whose source_id is new; returns how many were inserted."""
        ...

    async def get_all_contents(self) -> list[ContentEntity]:
        """All stored entities in insertion order."""
        ...

    async def get_contents_by_type(self, content_type: ContentType) -> list[ContentEntity]:
        ...

    async def search_similar(
        self,
        query_vector: Sequence[float],
        limit: int = 5,
    ) -> list[ContentEntity]:
        """Top-limit entities by cosine similarity, best first."""
        ...

    async def clear(self) -> None:
        ...

    async def count(self) -> int:
        ...

    async def close(self) -> None:
        ...
