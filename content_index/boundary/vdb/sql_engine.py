"""
Async SQLite connection management for the durable stores.

Opens the engine lazily, creates the store's table, and retries the open
with exponential backoff. Every database failure leaves this module as
StorageUnavailableError.

Dependencies: sqlalchemy, aiosqlite, tenacity, content_index.core.exceptions
System role: Connection lifecycle shared by KeyValueVectorStore and DeviceVectorStore
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from sqlalchemy import Table
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from content_index.boundary.vdb.sql_models import Base
from content_index.core.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)


class SqlStoreConnection:
    """
    Lazily opened async engine plus session factory for one SQLite file.

    Stores hold one of these and ask it for sessions; the first request
    opens the database and creates the tables.
    """

    def __init__(
        self,
        database_url: str,
        tables: Sequence[Table],
        open_attempts: int = 3,
        echo: bool = False,
        retry_wait_initial: float = 0.5,
        retry_wait_max: float = 5.0,
    ) -> None:
        """
        Initialize connection settings; nothing is opened yet.

        Args:
            database_url: sqlite+aiosqlite URL
            tables: Tables created on open
            open_attempts: Open attempts before StorageUnavailableError
            echo: Echo SQL statements
            retry_wait_initial: First backoff delay in seconds
            retry_wait_max: Backoff ceiling in seconds
        """
        self.database_url = database_url
        self._tables = list(tables)
        self._open_attempts = open_attempts
        self._echo = echo
        self._wait_initial = retry_wait_initial
        self._wait_max = retry_wait_max
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = asyncio.Lock()

    async def open(self) -> None:
        """
        Open the database and create tables, retrying with backoff.

        Raises:
            StorageUnavailableError: When every attempt fails
        """
        async with self._lock:
            if self._session_factory is not None:
                return

            engine = create_async_engine(self.database_url, echo=self._echo)
            try:
                async for attempt in AsyncRetrying(
                    retry=retry_if_exception_type((SQLAlchemyError, OSError)),
                    stop=stop_after_attempt(self._open_attempts),
                    wait=wait_exponential_jitter(
                        initial=self._wait_initial,
                        max=self._wait_max,
                    ),
                    before_sleep=lambda retry_state: logger.warning(
                        f"{__name__}:open - Retry {retry_state.attempt_number}/"
                        f"{self._open_attempts} opening {self.database_url}"
                    ),
                    reraise=True,
                ):
                    with attempt:
                        async with engine.begin() as conn:
                            await conn.run_sync(Base.metadata.create_all, tables=self._tables)
            except (SQLAlchemyError, OSError) as e:
                await engine.dispose()
                logger.error(f"{__name__}:open - Cannot open {self.database_url}: {e}")
                raise StorageUnavailableError(
                    "Vector store database could not be opened",
                    operation="open",
                    details={"url": self.database_url, "error": str(e)},
                ) from e

            self._engine = engine
            self._session_factory = async_sessionmaker(
                bind=engine,
                autoflush=False,
                expire_on_commit=False,
            )
            logger.info(f"{__name__}:open - Opened {self.database_url}")

    @asynccontextmanager
    async def session(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Yield a session, opening the database first if needed.

        Args:
            operation: Name reported in StorageUnavailableError

        Raises:
            StorageUnavailableError: On open failure or any SQLAlchemy error
        """
        await self.open()
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:session - {operation} failed: {type(e).__name__}: {e}")
            raise StorageUnavailableError(
                f"Vector store {operation} failed",
                operation=operation,
                details={"url": self.database_url, "error": str(e)},
            ) from e

    async def close(self) -> None:
        """Dispose the engine; a later session() reopens it."""
        async with self._lock:
            if self._engine is not None:
                await self._engine.dispose()
            self._engine = None
            self._session_factory = None
