"""
Fixed-length content chunking.

Guarantees no stored entity exceeds the configured maximum length while
keeping chunks reassemblable (lossless, ordered, non-overlapping) and
traceable to their source through the source_id suffix.

Dependencies: content_index.models
System role: First stage of the ingestion pipeline
"""

from content_index.core.exceptions import ValidationError
from content_index.models import ContentEntity

DEFAULT_MAX_CHUNK_LENGTH = 20000


def chunk_text(text: str, max_len: int = DEFAULT_MAX_CHUNK_LENGTH) -> list[str]:
    """
    Split text into contiguous pieces of at most max_len characters.

    Joining the result in order reproduces the input exactly.

    Args:
        text: Text to split
        max_len: Maximum piece length in characters

    Returns:
        list[str]: One element (the text itself) when it already fits

    Raises:
        ValidationError: When max_len is not positive
    """
    if max_len <= 0:
        raise ValidationError(f"max_len must be positive, got {max_len}", field="max_len")

    if len(text) <= max_len:
        return [text]

    return [text[i:i + max_len] for i in range(0, len(text), max_len)]


def create_chunked_entities(
    original: ContentEntity,
    full_text: str,
    max_len: int = DEFAULT_MAX_CHUNK_LENGTH,
) -> list[ContentEntity]:
    """
    Build one entity per chunk of full_text, inheriting original's metadata.

    Chunk source ids are "{source_id}_chunk_{i}" (zero-based). Titles get a
    "(Part i/N)" suffix only when the text was actually split.

    Args:
        original: Entity carrying source metadata
        full_text: Text to chunk (usually title and body)
        max_len: Maximum chunk length in characters

    Returns:
        list[ContentEntity]: Unembedded, unsaved chunk entities
    """
    chunks = chunk_text(full_text, max_len)
    total = len(chunks)

    entities = []
    for i, chunk in enumerate(chunks):
        title = f"{original.title} (Part {i + 1}/{total})" if total > 1 else original.title
        entities.append(
            original.model_copy(
                update={
                    "id": None,
                    "source_id": f"{original.source_id}_chunk_{i}",
                    "title": title,
                    "content": chunk,
                    "embedding": None,
                },
            )
        )
    return entities
