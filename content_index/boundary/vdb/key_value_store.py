"""
Key-value vector store.

Durable store laid out as a key-value table: source_id maps to the entity's
JSON payload. Type filtering and similarity search scan the payloads.

Dependencies: sqlalchemy, aiosqlite, content_index.boundary.vdb.sql_engine
System role: Durable VectorStore for lightweight key-value persistence
"""

import logging
from collections.abc import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from content_index.boundary.vdb.sql_engine import SqlStoreConnection
from content_index.boundary.vdb.sql_models import KeyValueRecord
from content_index.core.similarity import rank_by_similarity
from content_index.models import ContentEntity, ContentType

logger = logging.getLogger(__name__)

# Rows per multi-values INSERT, keeps below SQLite's bound-parameter limit
INSERT_BATCH_SIZE = 500


def _payload(entity: ContentEntity) -> str:
    return entity.model_dump_json(exclude={"id"})


def _to_entity(record: KeyValueRecord) -> ContentEntity:
    return ContentEntity.model_validate_json(record.payload).model_copy(update={"id": record.id})


def _first_occurrences(entities: Sequence[ContentEntity]) -> list[ContentEntity]:
    seen: set[str] = set()
    unique = []
    for entity in entities:
        if entity.source_id not in seen:
            seen.add(entity.source_id)
            unique.append(entity)
    return unique


class KeyValueVectorStore:
    """VectorStore over a SQLite key-value table (source_id -> JSON)."""

    def __init__(
        self,
        database_url: str,
        open_attempts: int = 3,
        echo: bool = False,
    ) -> None:
        """
        Initialize store; the database opens on first use.

        Args:
            database_url: sqlite+aiosqlite URL of the key-value file
            open_attempts: Attempts before StorageUnavailableError
            echo: Echo SQL statements
        """
        self._connection = SqlStoreConnection(
            database_url,
            tables=[KeyValueRecord.__table__],
            open_attempts=open_attempts,
            echo=echo,
        )

    async def open(self) -> None:
        await self._connection.open()

    async def add_content(self, entity: ContentEntity) -> ContentEntity:
        stmt = sqlite_insert(KeyValueRecord).values(
            source_id=entity.source_id,
            payload=_payload(entity),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[KeyValueRecord.source_id],
            set_={"payload": stmt.excluded.payload},
        )

        async with self._connection.session("upsert") as session:
            await session.execute(stmt)
            stored_id = await session.scalar(
                select(KeyValueRecord.id).where(KeyValueRecord.source_id == entity.source_id)
            )
            await session.commit()

        return entity.model_copy(update={"id": stored_id})

    async def add_contents(self, entities: Sequence[ContentEntity]) -> int:
        unique = _first_occurrences(entities)
        if not unique:
            return 0

        rows = [{"source_id": e.source_id, "payload": _payload(e)} for e in unique]
        async with self._connection.session("insert") as session:
            before = await session.scalar(select(func.count()).select_from(KeyValueRecord))
            for start in range(0, len(rows), INSERT_BATCH_SIZE):
                stmt = (
                    sqlite_insert(KeyValueRecord)
                    .values(rows[start:start + INSERT_BATCH_SIZE])
                    .on_conflict_do_nothing(index_elements=[KeyValueRecord.source_id])
                )
                await session.execute(stmt)
            after = await session.scalar(select(func.count()).select_from(KeyValueRecord))
            await session.commit()

        inserted = after - before
        logger.info(
            f"{__name__}:add_contents - Inserted {inserted} of {len(entities)} entities"
        )
        return inserted

    async def get_all_contents(self) -> list[ContentEntity]:
        async with self._connection.session("scan") as session:
            result = await session.scalars(select(KeyValueRecord).order_by(KeyValueRecord.id))
            records = result.all()
        return [_to_entity(record) for record in records]

    async def get_contents_by_type(self, content_type: ContentType) -> list[ContentEntity]:
        # No secondary index in a key-value layout
        return [e for e in await self.get_all_contents() if e.content_type == content_type]

    async def search_similar(
        self,
        query_vector: Sequence[float],
        limit: int = 5,
    ) -> list[ContentEntity]:
        if not query_vector or limit <= 0:
            return []
        return rank_by_similarity(await self.get_all_contents(), query_vector, limit)

    async def clear(self) -> None:
        async with self._connection.session("clear") as session:
            await session.execute(delete(KeyValueRecord))
            await session.commit()
        logger.info(f"{__name__}:clear - Store cleared")

    async def count(self) -> int:
        async with self._connection.session("count") as session:
            return await session.scalar(select(func.count()).select_from(KeyValueRecord))

    async def close(self) -> None:
        await self._connection.close()
