"""
Shared test fixtures and configuration for entire test suite.

Provides: fake clock, scripted fake embedding provider, entity factories
Dependencies: pytest, content_index
System role: Test infrastructure and fixture management
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timezone

import pytest

from content_index.configs import EmbeddingSettings
from content_index.core.exceptions import EmbeddingError
from content_index.models import ContentEntity, ContentType

ALPHABET = "abcdefghijklmnopqrstuvwxyz"


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


def letter_vector(text: str) -> list[float]:
    """Deterministic 27-dim embedding: letter counts plus a bias term."""
    lowered = text.lower()
    return [float(lowered.count(c)) for c in ALPHABET] + [1.0]


class FakeEmbeddingProvider:
    """
    Scripted embedding provider with a call log.

    batch_errors is consumed one entry per bulk call (None means succeed).
    text_errors maps a text to the exception its individual call raises.
    """

    def __init__(
        self,
        clock: FakeClock | None = None,
        batch_errors: Sequence[BaseException | None] = (),
        text_errors: dict[str, BaseException] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self._clock = clock
        self._batch_errors = list(batch_errors)
        self._text_errors = text_errors or {}
        self._delays = delays or {}
        self.batch_calls: list[list[str]] = []
        self.batch_call_times: list[float] = []
        self.single_calls: list[str] = []
        self.single_call_times: list[float] = []

    async def embed(self, text: str) -> list[float]:
        self.single_calls.append(text)
        self.single_call_times.append(self._clock() if self._clock else 0.0)
        if text in self._delays:
            await asyncio.sleep(self._delays[text])
        if text in self._text_errors:
            raise self._text_errors[text]
        return letter_vector(text)

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        self.batch_call_times.append(self._clock() if self._clock else 0.0)
        if self._batch_errors:
            error = self._batch_errors.pop(0)
            if error is not None:
                raise error
        return [letter_vector(t) for t in texts]


class FailingEmbeddingProvider:
    """Provider whose every call fails with EmbeddingError."""

    async def embed(self, text: str) -> list[float]:
        raise EmbeddingError("provider down", item_count=1)

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        raise EmbeddingError("provider down", item_count=len(texts))


def make_entity(
    source_id: str,
    content: str = "",
    title: str = "",
    content_type: ContentType = ContentType.DOCUMENT,
    embedding: list[float] | None = None,
    author: str | None = None,
) -> ContentEntity:
    """Build a ContentEntity with a fixed creation date."""
    return ContentEntity(
        source_id=source_id,
        title=title,
        author=author,
        content=content,
        created_date=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        content_type=content_type,
        embedding=embedding,
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a fake monotonic clock starting at zero."""
    return FakeClock()


@pytest.fixture
def fake_provider(fake_clock: FakeClock) -> FakeEmbeddingProvider:
    """Provide a fake provider that always succeeds."""
    return FakeEmbeddingProvider(clock=fake_clock)


@pytest.fixture
def embedding_settings() -> EmbeddingSettings:
    """Provide small limits so tests exercise batching and waiting."""
    return EmbeddingSettings(
        max_tokens_per_minute=100,
        max_batch_size=500,
        max_concurrent_requests=2,
        rate_limit_seconds=15.0,
        window_seconds=60.0,
    )


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Restore root handlers and level after configure_logging runs."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
