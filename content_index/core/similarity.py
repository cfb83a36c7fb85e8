"""
Cosine similarity ranking.

Exhaustive top-k search shared by every vector store backend. Corpus size
is one user's personal content, so a linear scan is enough.

Dependencies: math (stdlib), content_index.models
System role: Similarity search used by all VectorStore implementations
"""

import math
from collections.abc import Iterable, Sequence

from content_index.models import ContentEntity


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Compute dot(a, b) / (|a| * |b|).

    Returns 0.0 for a zero-norm vector or mismatched dimensions, never NaN.
    """
    if len(a) != len(b):
        return 0.0

    dot_product = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot_product += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    similarity = dot_product / (math.sqrt(norm_a) * math.sqrt(norm_b))
    # Float rounding can land a hair outside [-1, 1]
    return max(-1.0, min(1.0, similarity))


def rank_by_similarity(
    entities: Iterable[ContentEntity],
    query_vector: Sequence[float],
    limit: int = 5,
) -> list[ContentEntity]:
    """
    Return the limit entities most similar to query_vector, best first.

    Entities without embeddings are skipped. Ties keep iteration order.

    Args:
        entities: Candidates in store iteration order
        query_vector: Query embedding
        limit: Maximum number of entities returned

    Returns:
        list[ContentEntity]: Ranked entities, scores discarded
    """
    if not query_vector or limit <= 0:
        return []

    scored = [
        (cosine_similarity(query_vector, entity.embedding), entity)
        for entity in entities
        if entity.embedding
    ]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [entity for _, entity in scored[:limit]]
