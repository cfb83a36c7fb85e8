"""
SQLAlchemy ORM models for the durable stores.

KeyValueRecord keeps one JSON payload per source_id (key-value layout).
ContentRecord keeps one column per entity field with an index on
content_type (embedded database layout).

Dependencies: sqlalchemy
System role: Table definitions for KeyValueVectorStore and DeviceVectorStore
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from content_index.models import ContentType


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for the store tables.

    Each store creates only its own table from this metadata.
    """

    pass


class KeyValueRecord(Base):
    """
    One content entity serialised as JSON under its source_id.

    Attributes:
        id: Surrogate key, also the insertion order
        source_id: Unique key
        payload: ContentEntity JSON without id
    """

    __tablename__ = "content_kv"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_id: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)


class ContentRecord(Base):
    """Content entity row with a queryable content_type."""

    __tablename__ = "content_entities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_id: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    author: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    content_type: Mapped[ContentType] = mapped_column(
        Enum(
            ContentType,
            native_enum=False,
            length=32,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        index=True,
    )
    embedding: Mapped[list[float] | None] = mapped_column(JSON(none_as_null=True), nullable=True)
