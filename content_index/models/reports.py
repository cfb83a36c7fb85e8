"""
Result models for embedding, ingestion and retrieval operations.

Degradation (unembedded items, quota exhaustion) is reported through these
models instead of exceptions.

Dependencies: pydantic, content_index.models.content
System role: Typed return values for core and application operations
"""

from pydantic import BaseModel, Field

from content_index.models.content import ContentEntity, ContentType


class EmbeddingBatchReport(BaseModel):
    """Outcome of one scheduler invocation, parallel to its input texts."""

    embeddings: list[list[float] | None] = Field(
        default_factory=list,
        description="Vector per input index; None where embedding failed or was skipped",
    )
    attempted: list[bool] = Field(
        default_factory=list,
        description="Whether a provider call was issued for each input index",
    )
    quota_exceeded: bool = Field(
        default=False,
        description="Provider reported quota exhaustion; later items were not attempted",
    )
    bulk_calls: int = Field(default=0, description="Bulk embedding calls issued")
    individual_calls: int = Field(default=0, description="Individual fallback calls issued")

    @property
    def succeeded(self) -> int:
        return sum(1 for e in self.embeddings if e)

    @property
    def not_attempted(self) -> int:
        return sum(1 for a in self.attempted if not a)

    @property
    def failed(self) -> int:
        """Items that were attempted but still have no vector."""
        return sum(
            1 for e, a in zip(self.embeddings, self.attempted) if a and not e
        )

    @property
    def degraded(self) -> bool:
        return self.succeeded < len(self.embeddings)


class IngestionReport(BaseModel):
    """Summary of an ingestion or re-embedding run."""

    items_received: int = 0
    chunks_produced: int = 0
    chunks_stored: int = Field(default=0, description="Newly inserted or updated in the store")
    chunks_embedded: int = 0
    chunks_unembedded: int = 0
    quota_exceeded: bool = False


class StoreSummary(BaseModel):
    """Counters describing what a store currently holds."""

    total: int = 0
    embedded: int = 0
    unembedded: int = 0
    by_type: dict[ContentType, int] = Field(default_factory=dict)


class RetrievedPassage(BaseModel):
    """Ranked supporting passage for a user query."""

    rank: int = Field(ge=1, description="1-based position in the final ranking")
    entity: ContentEntity = Field(description="Stored entity the passage comes from")
    passage: str = Field(description="Most query-relevant window of the entity content")
