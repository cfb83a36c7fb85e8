"""
Rate- and quota-aware batch embedding scheduler.

Turns a list of texts into embedding vectors while respecting the two limits
the provider enforces: an estimated token budget per rolling window and a
maximum payload per bulk call. Bulk calls that fail fall back to individual
calls in small concurrent groups. Quota exhaustion stops all further calls
for the invocation and is reported, never raised.

Dependencies: asyncio, content_index.boundary.embeddings, content_index.configs
System role: Second stage of the ingestion pipeline (embedding generation)
"""

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from content_index.boundary.embeddings.base import EmbeddingProvider, is_quota_error
from content_index.configs import EmbeddingSettings
from content_index.core.exceptions import ValidationError
from content_index.core.token_budget import Clock, Sleep, TokenBudget
from content_index.models import ContentEntity, EmbeddingBatchReport

logger = logging.getLogger(__name__)

TokenEstimator = Callable[[str], int]


def estimate_tokens(text: str) -> int:
    """Approximate token count as a quarter of the character count."""
    return round(len(text) / 4)


@dataclass
class _BatchState:
    """Mutable bookkeeping for one generate_embeddings_batch call."""

    embeddings: list[list[float] | None]
    attempted: list[bool]
    quota_exceeded: bool = False
    bulk_calls: int = 0
    individual_calls: int = 0

    @classmethod
    def for_size(cls, size: int) -> "_BatchState":
        return cls(embeddings=[None] * size, attempted=[False] * size)

    def to_report(self) -> EmbeddingBatchReport:
        return EmbeddingBatchReport(
            embeddings=self.embeddings,
            attempted=self.attempted,
            quota_exceeded=self.quota_exceeded,
            bulk_calls=self.bulk_calls,
            individual_calls=self.individual_calls,
        )


class EmbeddingBatchScheduler:
    """
    Embedding generation under a token budget and a concurrency cap.

    The token budget lives on the scheduler, so consecutive invocations
    share one rolling window. Results are returned as a list parallel to
    the input; entities are never mutated in place.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        settings: EmbeddingSettings | None = None,
        *,
        token_estimator: TokenEstimator = estimate_tokens,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            provider: Embedding backend
            settings: Limits (token ceiling, batch size, concurrency, delays)
            token_estimator: Cost function per text, swappable per provider
            clock: Monotonic time source (injectable for tests)
            sleep: Coroutine used for rate-limit waits (injectable for tests)
        """
        self._provider = provider
        self._settings = settings or EmbeddingSettings()
        self._estimate = token_estimator
        self._sleep = sleep
        self._budget = TokenBudget(
            max_tokens=self._settings.max_tokens_per_minute,
            window_seconds=self._settings.window_seconds,
            clock=clock,
            sleep=sleep,
        )

    async def generate_embeddings_batch(self, texts: Sequence[str]) -> EmbeddingBatchReport:
        """
        Embed texts in input order under the configured limits.

        Items accumulate into a batch until the window budget or the batch
        size limit would be exceeded, then the batch is sent as one bulk
        call. When even a single item does not fit the window, the
        scheduler sleeps until the window rolls over.

        Args:
            texts: Texts to embed

        Returns:
            EmbeddingBatchReport: Vectors parallel to texts plus counters
        """
        state = _BatchState.for_size(len(texts))
        if not texts:
            return state.to_report()

        max_batch_size = self._settings.max_batch_size
        batch: list[int] = []
        batch_tokens = 0

        for i, text in enumerate(texts):
            cost = self._estimate(text)

            if batch and (
                len(batch) >= max_batch_size
                or not self._budget.fits(batch_tokens + cost)
            ):
                await self._process_batch(texts, batch, batch_tokens, state)
                batch, batch_tokens = [], 0
                if state.quota_exceeded:
                    break

            if not batch and not self._budget.fits(cost):
                await self._budget.wait_for_capacity(cost)

            batch.append(i)
            batch_tokens += cost

        if batch and not state.quota_exceeded:
            logger.info(
                f"{__name__}:generate_embeddings_batch - Processing final batch: "
                f"{len(batch)} items, ~{batch_tokens} tokens"
            )
            await self._process_batch(texts, batch, batch_tokens, state)

        report = state.to_report()
        logger.info(
            f"{__name__}:generate_embeddings_batch - Done: {report.succeeded} embedded, "
            f"{report.failed} failed, {report.not_attempted} not attempted"
            + (" (quota exceeded)" if report.quota_exceeded else "")
        )
        return report

    async def embed_entities(
        self,
        entities: Sequence[ContentEntity],
        texts: Sequence[str] | None = None,
    ) -> tuple[list[ContentEntity], EmbeddingBatchReport]:
        """
        Embed entities and return copies carrying their new vectors.

        Args:
            entities: Entities to embed
            texts: Text per entity (defaults to each entity's content)

        Returns:
            tuple: (entity copies, report); copies keep embedding None on failure

        Raises:
            ValidationError: When texts and entities differ in length
        """
        if texts is None:
            texts = [entity.content for entity in entities]
        elif len(texts) != len(entities):
            raise ValidationError(
                f"texts and entities must have the same length "
                f"({len(texts)} != {len(entities)})",
                field="texts",
            )

        report = await self.generate_embeddings_batch(texts)
        embedded = [
            entity.model_copy(update={"embedding": vector}) if vector else entity.model_copy()
            for entity, vector in zip(entities, report.embeddings)
        ]
        return embedded, report

    async def _process_batch(
        self,
        texts: Sequence[str],
        indices: list[int],
        tokens: int,
        state: _BatchState,
    ) -> None:
        """Send one bulk call; fall back to individual calls if it fails."""
        batch_texts = [texts[i] for i in indices]
        logger.info(
            f"{__name__}:_process_batch - Processing batch: "
            f"{len(indices)} items, ~{tokens} tokens"
        )

        self._budget.record(tokens)
        state.bulk_calls += 1
        for i in indices:
            state.attempted[i] = True

        try:
            vectors = await self._provider.embed_batch(batch_texts)
        except Exception as e:
            if is_quota_error(e):
                state.quota_exceeded = True
                logger.warning(
                    f"{__name__}:_process_batch - Quota exceeded on bulk call, "
                    f"stopping embedding generation: {e}"
                )
                return
            logger.warning(
                f"{__name__}:_process_batch - Batch embedding failed "
                f"({type(e).__name__}: {e}), falling back to individual calls"
            )
            await self._embed_individually(texts, indices, state)
            return

        for i, vector in zip(indices, vectors):
            state.embeddings[i] = list(vector) if vector else None
        if len(vectors) != len(indices):
            logger.warning(
                f"{__name__}:_process_batch - Provider returned {len(vectors)} "
                f"vectors for {len(indices)} texts"
            )
        logger.info(
            f"{__name__}:_process_batch - Batch embedding completed: "
            f"{min(len(vectors), len(indices))} embeddings generated"
        )

    async def _embed_individually(
        self,
        texts: Sequence[str],
        indices: list[int],
        state: _BatchState,
    ) -> None:
        """
        Embed texts one call each, max_concurrent_requests at a time.

        Groups are separated by rate_limit_seconds. A quota error stops
        every following group; results already in flight are kept.
        """
        group_size = self._settings.max_concurrent_requests
        delay = self._settings.rate_limit_seconds
        success_count = 0
        fail_count = 0

        for start in range(0, len(indices), group_size):
            if state.quota_exceeded:
                break
            if start > 0 and delay > 0:
                await self._sleep(delay)

            group = indices[start:start + group_size]
            group_tokens = sum(self._estimate(texts[i]) for i in group)
            if not self._budget.fits(group_tokens):
                await self._budget.wait_for_capacity(group_tokens)
            self._budget.record(group_tokens)
            state.individual_calls += len(group)

            results = await asyncio.gather(
                *(self._provider.embed(texts[i]) for i in group),
                return_exceptions=True,
            )

            for i, result in zip(group, results):
                if isinstance(result, Exception):
                    fail_count += 1
                    logger.warning(
                        f"{__name__}:_embed_individually - Embedding error for item {i}: "
                        f"{type(result).__name__}: {result}"
                    )
                    if is_quota_error(result):
                        state.quota_exceeded = True
                elif isinstance(result, BaseException):
                    raise result
                else:
                    state.embeddings[i] = list(result) if result else None
                    if result:
                        success_count += 1
                    else:
                        fail_count += 1

        if state.quota_exceeded:
            logger.warning(
                f"{__name__}:_embed_individually - Quota exceeded, stopping embedding generation"
            )
        logger.info(
            f"{__name__}:_embed_individually - Individual embedding results: "
            f"{success_count} success, {fail_count} failed"
        )
