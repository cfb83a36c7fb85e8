"""
Device vector store.

Durable embedded-database store: one column per entity field, an index on
content_type for type queries, the embedding kept as a JSON array.
Similarity search loads embedded rows only and ranks them in process.

Dependencies: sqlalchemy, aiosqlite, content_index.boundary.vdb.sql_engine
System role: Durable VectorStore for on-device persistence
"""

import logging
from collections.abc import Sequence
from datetime import timezone
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from content_index.boundary.vdb.sql_engine import SqlStoreConnection
from content_index.boundary.vdb.sql_models import ContentRecord
from content_index.core.similarity import rank_by_similarity
from content_index.models import ContentEntity, ContentType

logger = logging.getLogger(__name__)

INSERT_BATCH_SIZE = 500

_UPDATABLE_COLUMNS = ("title", "author", "content", "created_date", "content_type", "embedding")


def _to_row(entity: ContentEntity) -> dict[str, Any]:
    return {
        "source_id": entity.source_id,
        "title": entity.title,
        "author": entity.author,
        "content": entity.content,
        # SQLite keeps no offset; store UTC
        "created_date": entity.created_date.astimezone(timezone.utc),
        "content_type": entity.content_type,
        "embedding": entity.embedding,
    }


def _to_entity(record: ContentRecord) -> ContentEntity:
    return ContentEntity(
        id=record.id,
        source_id=record.source_id,
        title=record.title,
        author=record.author,
        content=record.content,
        created_date=record.created_date,
        content_type=record.content_type,
        embedding=record.embedding,
    )


class DeviceVectorStore:
    """VectorStore over a column-per-field SQLite table."""

    def __init__(
        self,
        database_url: str,
        open_attempts: int = 3,
        echo: bool = False,
    ) -> None:
        """
        Initialize store; the database opens on first use.

        Args:
            database_url: sqlite+aiosqlite URL of the database file
            open_attempts: Attempts before StorageUnavailableError
            echo: Echo SQL statements
        """
        self._connection = SqlStoreConnection(
            database_url,
            tables=[ContentRecord.__table__],
            open_attempts=open_attempts,
            echo=echo,
        )

    async def open(self) -> None:
        await self._connection.open()

    async def add_content(self, entity: ContentEntity) -> ContentEntity:
        """
        Insert entity or replace the stored row with the same source_id.

        Returns:
            ContentEntity: Copy carrying the stored row id
        """
        stmt = sqlite_insert(ContentRecord).values(**_to_row(entity))
        stmt = stmt.on_conflict_do_update(
            index_elements=[ContentRecord.source_id],
            set_={column: stmt.excluded[column] for column in _UPDATABLE_COLUMNS},
        )

        async with self._connection.session("upsert") as session:
            await session.execute(stmt)
            stored_id = await session.scalar(
                select(ContentRecord.id).where(ContentRecord.source_id == entity.source_id)
            )
            await session.commit()

        return entity.model_copy(update={"id": stored_id})

    async def add_contents(self, entities: Sequence[ContentEntity]) -> int:
        """
        Insert entities whose source_id is not stored yet.

        Duplicates inside the call keep their first occurrence.

        Returns:
            int: Number of rows inserted
        """
        seen: set[str] = set()
        rows = []
        for entity in entities:
            if entity.source_id in seen:
                continue
            seen.add(entity.source_id)
            rows.append(_to_row(entity))
        if not rows:
            return 0

        async with self._connection.session("insert") as session:
            before = await session.scalar(select(func.count()).select_from(ContentRecord))
            for start in range(0, len(rows), INSERT_BATCH_SIZE):
                stmt = (
                    sqlite_insert(ContentRecord)
                    .values(rows[start:start + INSERT_BATCH_SIZE])
                    .on_conflict_do_nothing(index_elements=[ContentRecord.source_id])
                )
                await session.execute(stmt)
            after = await session.scalar(select(func.count()).select_from(ContentRecord))
            await session.commit()

        inserted = after - before
        logger.info(
            f"{__name__}:add_contents - Inserted {inserted} of {len(entities)} entities"
        )
        return inserted

    async def get_all_contents(self) -> list[ContentEntity]:
        return await self._select(select(ContentRecord).order_by(ContentRecord.id), "scan")

    async def get_contents_by_type(self, content_type: ContentType) -> list[ContentEntity]:
        stmt = (
            select(ContentRecord)
            .where(ContentRecord.content_type == content_type)
            .order_by(ContentRecord.id)
        )
        return await self._select(stmt, "scan_by_type")

    async def search_similar(
        self,
        query_vector: Sequence[float],
        limit: int = 5,
    ) -> list[ContentEntity]:
        if not query_vector or limit <= 0:
            return []
        stmt = (
            select(ContentRecord)
            .where(ContentRecord.embedding.is_not(None))
            .order_by(ContentRecord.id)
        )
        candidates = await self._select(stmt, "search")
        return rank_by_similarity(candidates, query_vector, limit)

    async def clear(self) -> None:
        async with self._connection.session("clear") as session:
            await session.execute(delete(ContentRecord))
            await session.commit()
        logger.info(f"{__name__}:clear - Store cleared")

    async def count(self) -> int:
        async with self._connection.session("count") as session:
            return await session.scalar(select(func.count()).select_from(ContentRecord))

    async def close(self) -> None:
        await self._connection.close()

    async def _select(self, stmt, operation: str) -> list[ContentEntity]:
        async with self._connection.session(operation) as session:
            result = await session.scalars(stmt)
            records = result.all()
        return [_to_entity(record) for record in records]
