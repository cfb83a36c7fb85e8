"""
Gemini embedding provider.

Adapts the blocking langchain Google client to the async EmbeddingProvider
interface. Client exceptions are translated to QuotaExceededError or
EmbeddingError so the scheduler never sees vendor exception types.

The client does not apply a constructor-level output dimensionality, so the
configured dimension is passed on every call; one store holds one size.

Dependencies: langchain_google_genai, python-dotenv, content_index.boundary.embeddings
System role: Production embedding backend for ingestion and retrieval
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from content_index.boundary.embeddings.base import is_quota_error
from content_index.configs import EmbeddingSettings
from content_index.core.exceptions import EmbeddingError, QuotaExceededError

logger = logging.getLogger(__name__)
load_dotenv()


class GeminiEmbeddingProvider:
    """
    Async embedding provider backed by Google Gemini.

    Stored content and queries share one embedding space: both go through
    embed_documents so cosine scores compare like with like.
    """

    def __init__(
        self,
        settings: EmbeddingSettings | None = None,
        embeddings: Any | None = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            settings: Model, dimension and API key configuration
            embeddings: Pre-built langchain embeddings object (injected in tests)
        """
        self._settings = settings or EmbeddingSettings()
        if embeddings is None:
            kwargs: dict[str, Any] = {}
            if self._settings.api_key:
                kwargs["google_api_key"] = self._settings.api_key
            embeddings = GoogleGenerativeAIEmbeddings(model=self._settings.model, **kwargs)
        self._embeddings = embeddings
        logger.info(
            f"{__name__}:__init__ - Gemini provider ready "
            f"(model={self._settings.model}, dimension={self._settings.output_dimensionality})"
        )

    async def embed(self, text: str) -> list[float]:
        """
        Embed a single text.

        Raises:
            QuotaExceededError: Provider quota or rate limit exhausted
            EmbeddingError: Any other provider failure or an empty response
        """
        vectors = await self._call([text])
        if not vectors or not vectors[0]:
            raise EmbeddingError("Provider returned no embedding", item_count=1)
        return list(vectors[0])

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed many texts in one request, order preserved.

        Raises:
            QuotaExceededError: Provider quota or rate limit exhausted
            EmbeddingError: Any other failure or a short response
        """
        if not texts:
            return []
        vectors = await self._call(list(texts))
        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Provider returned {len(vectors)} embeddings for {len(texts)} texts",
                item_count=len(texts),
            )
        return [list(v) for v in vectors]

    async def _call(self, texts: list[str]) -> list[list[float]]:
        try:
            return await asyncio.to_thread(
                self._embeddings.embed_documents,
                texts,
                output_dimensionality=self._settings.output_dimensionality,
            )
        except (QuotaExceededError, EmbeddingError):
            raise
        except Exception as e:
            if is_quota_error(e):
                logger.warning(f"{__name__}:_call - Quota exhausted: {e}")
                raise QuotaExceededError(
                    "Embedding quota exceeded",
                    item_count=len(texts),
                    details={"error": str(e)},
                ) from e
            logger.error(f"{__name__}:_call - Embedding failed: {type(e).__name__}: {e}")
            raise EmbeddingError(
                f"Embedding request failed: {type(e).__name__}",
                item_count=len(texts),
                details={"error": str(e)},
            ) from e
