"""
Content entity domain model.

The unit of storage and retrieval: one email, document chunk, calendar
entry, contact, note or chat turn, optionally carrying its embedding.

Dependencies: pydantic
System role: Data structure shared by chunker, scheduler, stores and retrieval
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class ContentType(str, Enum):
    """Closed set of content kinds produced by the collaborators."""

    EMAIL = "email"
    DOCUMENT = "document"
    CALENDAR = "calendar"
    CONTACT = "contact"
    NOTE = "note"
    CHAT_HISTORY = "chatHistory"


class ContentEntity(BaseModel):
    """Stored content item with optional embedding vector."""

    id: int | None = Field(
        default=None,
        description="Process-local surrogate key assigned by the store on insert",
    )
    source_id: str = Field(min_length=1, description="Stable external identifier")
    title: str = Field(default="", description="Display title (subject, file name)")
    author: str | None = Field(default=None, description="Display author or sender")
    content: str = Field(default="", description="Text payload")
    created_date: datetime = Field(description="Producer timestamp used for sync watermarks")
    content_type: ContentType = Field(description="Kind of content")
    embedding: list[float] | None = Field(
        default=None,
        description="Embedding vector; None or empty means not yet embedded",
    )

    @field_validator("created_date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite drops tzinfo; naive values are UTC everywhere
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def has_embedding(self) -> bool:
        """True when an embedding has been assigned."""
        return bool(self.embedding)

    @property
    def is_chat_history(self) -> bool:
        return self.content_type is ContentType.CHAT_HISTORY
