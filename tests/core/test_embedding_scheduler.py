"""
Test suite for EmbeddingBatchScheduler.

Tests batching under the token window, fallback to individual calls,
quota abort and index-stable write-back. Uses a fake clock and a scripted
fake provider.

System role: Verification of rate- and quota-aware embedding generation
"""

import pytest

from content_index.configs import EmbeddingSettings
from content_index.core.embedding_scheduler import EmbeddingBatchScheduler, estimate_tokens
from content_index.core.exceptions import EmbeddingError, QuotaExceededError, ValidationError
from tests.conftest import FakeClock, FakeEmbeddingProvider, letter_vector, make_entity


def make_scheduler(
    provider: FakeEmbeddingProvider,
    settings: EmbeddingSettings,
    clock: FakeClock,
) -> EmbeddingBatchScheduler:
    return EmbeddingBatchScheduler(provider, settings, clock=clock, sleep=clock.sleep)


def ten_token_texts(count: int) -> list[str]:
    """Distinct 40-character texts costing 10 estimated tokens each."""
    return [f"{i:04d}" + "word" * 9 for i in range(count)]


class TestEstimateTokens:
    """Test suite for the default cost estimator."""

    def test_should_be_a_quarter_of_characters(self) -> None:
        """Test round(len / 4)."""
        assert estimate_tokens("x" * 40) == 10
        assert estimate_tokens("") == 0
        assert estimate_tokens("abcdef") == 2


class TestBatching:
    """Test suite for bulk batching and the token window."""

    async def test_window_budget_should_never_be_exceeded(
        self,
        fake_clock: FakeClock,
        fake_provider: FakeEmbeddingProvider,
        embedding_settings: EmbeddingSettings,
    ) -> None:
        """Test 3T tokens of text are dispatched over at least two window rollovers."""
        # Arrange
        texts = ten_token_texts(30)
        scheduler = make_scheduler(fake_provider, embedding_settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(texts)

        # Assert
        assert report.succeeded == 30
        assert fake_clock.now >= 120.0
        costs = [sum(estimate_tokens(t) for t in call) for call in fake_provider.batch_calls]
        times = fake_provider.batch_call_times
        for t in times:
            in_window = sum(c for c, ts in zip(costs, times) if t - 60.0 < ts <= t)
            assert in_window <= embedding_settings.max_tokens_per_minute

    async def test_batch_size_limit_should_split_bulk_calls(
        self, fake_clock: FakeClock, fake_provider: FakeEmbeddingProvider
    ) -> None:
        """Test max_batch_size caps items per bulk call."""
        # Arrange
        settings = EmbeddingSettings(max_tokens_per_minute=10_000, max_batch_size=3)
        scheduler = make_scheduler(fake_provider, settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(ten_token_texts(7))

        # Assert
        assert [len(call) for call in fake_provider.batch_calls] == [3, 3, 1]
        assert report.bulk_calls == 3
        assert fake_clock.sleeps == []

    async def test_results_should_be_parallel_to_input(
        self,
        fake_clock: FakeClock,
        fake_provider: FakeEmbeddingProvider,
        embedding_settings: EmbeddingSettings,
    ) -> None:
        """Test every vector lands at its input index."""
        # Arrange
        texts = ["alpha", "beta", "gamma"]
        scheduler = make_scheduler(fake_provider, embedding_settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(texts)

        # Assert
        assert report.embeddings == [letter_vector(t) for t in texts]
        assert report.attempted == [True, True, True]
        assert not report.degraded

    async def test_oversized_item_should_be_sent_alone(
        self,
        fake_clock: FakeClock,
        fake_provider: FakeEmbeddingProvider,
        embedding_settings: EmbeddingSettings,
    ) -> None:
        """Test an item above the ceiling is dispatched in its own bulk call."""
        # Arrange
        texts = ["small text", "x" * 1000, "tail text"]
        scheduler = make_scheduler(fake_provider, embedding_settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(texts)

        # Assert
        assert fake_provider.batch_calls == [["small text"], ["x" * 1000], ["tail text"]]
        assert report.succeeded == 3

    async def test_empty_input_should_make_no_calls(
        self,
        fake_clock: FakeClock,
        fake_provider: FakeEmbeddingProvider,
        embedding_settings: EmbeddingSettings,
    ) -> None:
        """Test no texts means no provider calls."""
        # Arrange
        scheduler = make_scheduler(fake_provider, embedding_settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch([])

        # Assert
        assert report.embeddings == []
        assert fake_provider.batch_calls == []

    async def test_budget_should_be_shared_across_invocations(
        self,
        fake_clock: FakeClock,
        fake_provider: FakeEmbeddingProvider,
        embedding_settings: EmbeddingSettings,
    ) -> None:
        """Test a second call waits for tokens charged by the first."""
        # Arrange
        scheduler = make_scheduler(fake_provider, embedding_settings, fake_clock)
        await scheduler.generate_embeddings_batch(ten_token_texts(10))

        # Act
        await scheduler.generate_embeddings_batch(ten_token_texts(1))

        # Assert
        assert fake_provider.batch_call_times == [0.0, 60.0]


class TestQuotaHandling:
    """Test suite for quota exhaustion."""

    async def test_quota_on_bulk_call_should_stop_all_further_calls(
        self, fake_clock: FakeClock
    ) -> None:
        """Test quota abort leaves the rest unattempted and raises nothing."""
        # Arrange
        provider = FakeEmbeddingProvider(
            clock=fake_clock,
            batch_errors=[QuotaExceededError("429 RESOURCE_EXHAUSTED")],
        )
        settings = EmbeddingSettings(max_tokens_per_minute=10_000, max_batch_size=2)
        scheduler = make_scheduler(provider, settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(["a1", "a2", "a3", "a4"])

        # Assert
        assert report.quota_exceeded
        assert len(provider.batch_calls) == 1
        assert provider.single_calls == []
        assert report.embeddings == [None, None, None, None]
        assert report.attempted == [True, True, False, False]
        assert report.not_attempted == 2

    async def test_vendor_rate_limit_error_should_count_as_quota(
        self, fake_clock: FakeClock
    ) -> None:
        """Test a generic exception carrying 429 text is classified as quota."""
        # Arrange
        provider = FakeEmbeddingProvider(
            clock=fake_clock,
            batch_errors=[RuntimeError("429 You exceeded your current quota")],
        )
        scheduler = make_scheduler(provider, EmbeddingSettings(), fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(["one", "two"])

        # Assert
        assert report.quota_exceeded
        assert provider.single_calls == []

    async def test_quota_in_fallback_should_keep_results_of_same_group(
        self, fake_clock: FakeClock, embedding_settings: EmbeddingSettings
    ) -> None:
        """Test later groups are skipped but siblings already dispatched are kept."""
        # Arrange
        texts = ["first", "second", "third", "fourth"]
        provider = FakeEmbeddingProvider(
            clock=fake_clock,
            batch_errors=[EmbeddingError("bulk failed")],
            text_errors={"first": QuotaExceededError("quota")},
        )
        scheduler = make_scheduler(provider, embedding_settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(texts)

        # Assert
        assert report.quota_exceeded
        assert sorted(provider.single_calls) == ["first", "second"]
        assert report.embeddings[0] is None
        assert report.embeddings[1] == letter_vector("second")
        assert report.embeddings[2:] == [None, None]


class TestIndividualFallback:
    """Test suite for the individual-call fallback path."""

    async def test_failed_bulk_call_should_fall_back_in_rate_limited_groups(
        self, fake_clock: FakeClock, embedding_settings: EmbeddingSettings
    ) -> None:
        """Test groups of max_concurrent_requests separated by rate_limit_seconds."""
        # Arrange
        texts = ["t1", "t2", "t3", "t4", "t5"]
        provider = FakeEmbeddingProvider(
            clock=fake_clock,
            batch_errors=[EmbeddingError("payload too large")],
        )
        scheduler = make_scheduler(provider, embedding_settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(texts)

        # Assert
        assert sorted(provider.single_calls) == texts
        assert fake_clock.sleeps == [15.0, 15.0]
        assert report.individual_calls == 5
        assert report.embeddings == [letter_vector(t) for t in texts]

    async def test_fallback_groups_should_wait_for_window_filled_by_failed_bulk_call(
        self, fake_clock: FakeClock, embedding_settings: EmbeddingSettings
    ) -> None:
        """Test the failed bulk call's charge delays individual calls until the window rolls."""
        # Arrange
        texts = ten_token_texts(10)
        provider = FakeEmbeddingProvider(
            clock=fake_clock,
            batch_errors=[EmbeddingError("bulk failed")],
        )
        scheduler = make_scheduler(provider, embedding_settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(texts)

        # Assert
        assert report.succeeded == 10
        assert report.individual_calls == 10
        assert provider.batch_call_times == [0.0]
        assert fake_clock.sleeps[0] == 60.0
        assert min(provider.single_call_times) >= 60.0

        charges = [(0.0, sum(estimate_tokens(t) for t in texts))]
        charges += [
            (ts, estimate_tokens(text))
            for ts, text in zip(provider.single_call_times, provider.single_calls)
        ]
        for t, _ in charges:
            in_window = sum(c for ts, c in charges if t - 60.0 < ts <= t)
            assert in_window <= embedding_settings.max_tokens_per_minute

    async def test_individual_failure_should_only_affect_its_item(
        self, fake_clock: FakeClock, embedding_settings: EmbeddingSettings
    ) -> None:
        """Test a transient error leaves one item unembedded."""
        # Arrange
        provider = FakeEmbeddingProvider(
            clock=fake_clock,
            batch_errors=[EmbeddingError("bulk failed")],
            text_errors={"bad": EmbeddingError("transient")},
        )
        scheduler = make_scheduler(provider, embedding_settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(["good", "bad", "fine"])

        # Assert
        assert not report.quota_exceeded
        assert report.embeddings[1] is None
        assert report.embeddings[0] == letter_vector("good")
        assert report.embeddings[2] == letter_vector("fine")
        assert report.failed == 1

    async def test_out_of_order_completion_should_write_back_by_index(
        self, fake_clock: FakeClock
    ) -> None:
        """Test results land at input indices when calls finish in reverse order."""
        # Arrange
        texts = ["slow", "medium", "fast"]
        provider = FakeEmbeddingProvider(
            clock=fake_clock,
            batch_errors=[EmbeddingError("bulk failed")],
            delays={"slow": 0.03, "medium": 0.02, "fast": 0.0},
        )
        settings = EmbeddingSettings(max_concurrent_requests=3, rate_limit_seconds=0.0)
        scheduler = make_scheduler(provider, settings, fake_clock)

        # Act
        report = await scheduler.generate_embeddings_batch(texts)

        # Assert
        assert report.embeddings == [letter_vector(t) for t in texts]


class TestEmbedEntities:
    """Test suite for embed_entities."""

    async def test_should_return_copies_without_mutating_input(
        self,
        fake_clock: FakeClock,
        fake_provider: FakeEmbeddingProvider,
        embedding_settings: EmbeddingSettings,
    ) -> None:
        """Test originals keep embedding None while copies carry vectors."""
        # Arrange
        entities = [make_entity("a", content="apple"), make_entity("b", content="banana")]
        scheduler = make_scheduler(fake_provider, embedding_settings, fake_clock)

        # Act
        embedded, report = await scheduler.embed_entities(entities)

        # Assert
        assert [e.embedding for e in embedded] == [letter_vector("apple"), letter_vector("banana")]
        assert all(e.embedding is None for e in entities)
        assert report.succeeded == 2

    async def test_explicit_texts_should_be_embedded_instead_of_content(
        self,
        fake_clock: FakeClock,
        fake_provider: FakeEmbeddingProvider,
        embedding_settings: EmbeddingSettings,
    ) -> None:
        """Test the texts argument overrides entity content."""
        # Arrange
        entities = [make_entity("a", content="apple")]
        scheduler = make_scheduler(fake_provider, embedding_settings, fake_clock)

        # Act
        embedded, _ = await scheduler.embed_entities(entities, ["zebra"])

        # Assert
        assert embedded[0].embedding == letter_vector("zebra")

    async def test_length_mismatch_should_raise(
        self,
        fake_clock: FakeClock,
        fake_provider: FakeEmbeddingProvider,
        embedding_settings: EmbeddingSettings,
    ) -> None:
        """Test texts and entities must align."""
        # Arrange
        scheduler = make_scheduler(fake_provider, embedding_settings, fake_clock)

        # Act / Assert
        with pytest.raises(ValidationError):
            await scheduler.embed_entities([make_entity("a")], ["x", "y"])
        assert fake_provider.batch_calls == []
